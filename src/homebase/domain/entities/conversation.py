from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Conversation:
    id: str
    other_party_name: str
    subject: str
    unread_count: int
    last_message_at: datetime | None
    created_at: datetime | None

    @property
    def activity_at(self) -> datetime | None:
        """Timestamp used for recency ordering and staleness display."""
        return self.last_message_at or self.created_at
