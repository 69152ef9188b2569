"""Inbound push events, already decoded from wire frames."""
from __future__ import annotations

from dataclasses import dataclass

from homebase.domain.entities.message import Message


@dataclass(frozen=True, slots=True)
class NewMessageEvent:
    conversation_id: str
    message: Message


@dataclass(frozen=True, slots=True)
class TypingEvent:
    conversation_id: str
    user_id: str
    is_typing: bool


@dataclass(frozen=True, slots=True)
class ReadReceiptEvent:
    conversation_id: str
    message_ids: frozenset[str]
    read_by: str | None = None


PushEvent = NewMessageEvent | TypingEvent | ReadReceiptEvent
