from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Message:
    id: str
    conversation_id: str
    sender_id: str
    message: str | None
    created_at: datetime
    image_url: str | None = None
    attachments: tuple[str, ...] = ()
    is_read: bool = False
    read_at: datetime | None = None

    @property
    def has_content(self) -> bool:
        return bool(self.message or self.image_url or self.attachments)

    def mark_read(self, at: datetime) -> Message:
        """Return the read version of this message.

        Read state is monotonic: an already-read message is returned as is,
        keeping its original ``read_at``.
        """
        if self.is_read:
            return self
        return replace(self, is_read=True, read_at=at)
