"""Local keyed cache of conversation threads.

Every mutation goes through ``replace``, ``merge`` or ``mark_read``; callers
never get a mutable reference to a thread.
"""
from __future__ import annotations

import bisect
import logging
from collections.abc import Iterable
from datetime import datetime

from homebase.domain.entities.message import Message

logger = logging.getLogger(__name__)


class MessageCache:
    def __init__(self) -> None:
        self._threads: dict[str, list[Message]] = {}
        # Receipts for ids we have not seen yet, applied once the message arrives.
        self._pending_reads: dict[str, dict[str, datetime]] = {}

    def __contains__(self, conversation_id: str) -> bool:
        return conversation_id in self._threads

    def get(self, conversation_id: str) -> tuple[Message, ...]:
        return tuple(self._threads.get(conversation_id, ()))

    def replace(self, conversation_id: str, messages: Iterable[Message]) -> None:
        """Snapshot reset from the REST source of truth."""
        seen: set[str] = set()
        thread: list[Message] = []
        for msg in messages:
            if msg.id in seen:
                continue
            seen.add(msg.id)
            thread.append(self._apply_pending_read(conversation_id, msg))
        thread.sort(key=lambda m: m.created_at)
        self._threads[conversation_id] = thread
        logger.debug("Replaced thread %s (%d messages)", conversation_id, len(thread))

    def merge(self, conversation_id: str, message: Message) -> bool:
        """Insert ``message`` unless its id is already present.

        Returns True when the thread changed. Position is by ``created_at``;
        a message with the same timestamp as existing ones goes after them.
        """
        thread = self._threads.setdefault(conversation_id, [])
        if any(m.id == message.id for m in thread):
            return False
        message = self._apply_pending_read(conversation_id, message)
        idx = bisect.bisect_right(thread, message.created_at, key=lambda m: m.created_at)
        thread.insert(idx, message)
        return True

    def mark_read(
        self,
        conversation_id: str,
        message_ids: Iterable[str],
        at: datetime,
    ) -> list[str]:
        """Mark the given ids read, returning the ids whose state changed.

        Ids not present in the thread are remembered and applied on arrival.
        """
        wanted = set(message_ids)
        if not wanted:
            return []
        thread = self._threads.get(conversation_id, [])
        changed: list[str] = []
        for idx, msg in enumerate(thread):
            if msg.id not in wanted:
                continue
            wanted.discard(msg.id)
            if not msg.is_read:
                thread[idx] = msg.mark_read(at)
                changed.append(msg.id)
        if wanted:
            pending = self._pending_reads.setdefault(conversation_id, {})
            for message_id in wanted:
                pending.setdefault(message_id, at)
        return changed

    def unread_for(self, conversation_id: str, viewer_id: str) -> list[Message]:
        return [
            m
            for m in self._threads.get(conversation_id, ())
            if not m.is_read and m.sender_id != viewer_id
        ]

    def unread_count(self, conversation_id: str, viewer_id: str) -> int:
        return len(self.unread_for(conversation_id, viewer_id))

    def _apply_pending_read(self, conversation_id: str, message: Message) -> Message:
        pending = self._pending_reads.get(conversation_id)
        if not pending or message.id not in pending:
            return message
        at = pending.pop(message.id)
        if not pending:
            del self._pending_reads[conversation_id]
        return message.mark_read(at)
