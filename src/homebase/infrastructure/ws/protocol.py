"""Push channel frames.

Frames are flat JSON objects tagged by ``type``; field names are camelCase on
the wire.
"""
from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field, TypeAdapter

from homebase.application.dto.events import (
    NewMessageEvent,
    PushEvent,
    ReadReceiptEvent,
    TypingEvent,
)
from homebase.infrastructure.http.mappers import message_to_entity
from homebase.infrastructure.http.schemas import MessageSchema, WireModel


# Client -> Server

class JoinConversationFrame(WireModel):
    type: Literal["join_conversation"] = "join_conversation"
    conversation_id: str


class LeaveConversationFrame(WireModel):
    type: Literal["leave_conversation"] = "leave_conversation"
    conversation_id: str


class TypingFrame(WireModel):
    type: Literal["typing"] = "typing"
    conversation_id: str
    is_typing: bool


class MarkReadFrame(WireModel):
    type: Literal["mark_read"] = "mark_read"
    conversation_id: str
    message_ids: list[str]


class NewMessageFrame(WireModel):
    type: Literal["new_message"] = "new_message"
    conversation_id: str
    message_data: MessageSchema


OutboundFrame = (
    JoinConversationFrame
    | LeaveConversationFrame
    | TypingFrame
    | MarkReadFrame
    | NewMessageFrame
)


# Server -> Client

class AuthSuccessFrame(WireModel):
    type: Literal["auth_success"]
    client_id: str | None = None
    user_id: str | None = None


class JoinedConversationFrame(WireModel):
    type: Literal["joined_conversation"]
    conversation_id: str


class MessageReceivedFrame(WireModel):
    type: Literal["message_received"]
    conversation_id: str
    message: MessageSchema


class UserTypingFrame(WireModel):
    type: Literal["user_typing"]
    conversation_id: str
    user_id: str
    is_typing: bool


class MessagesReadFrame(WireModel):
    type: Literal["messages_read"]
    conversation_id: str
    message_ids: list[str]
    read_by: str | None = None


class ErrorFrame(WireModel):
    type: Literal["error"]
    message: str = ""


InboundFrame = Annotated[
    AuthSuccessFrame
    | JoinedConversationFrame
    | MessageReceivedFrame
    | UserTypingFrame
    | MessagesReadFrame
    | ErrorFrame,
    Field(discriminator="type"),
]

_inbound_adapter: TypeAdapter[InboundFrame] = TypeAdapter(InboundFrame)


def encode_frame(frame: OutboundFrame) -> str:
    return frame.model_dump_json(by_alias=True, exclude_none=True)


def parse_inbound(raw: str | bytes) -> InboundFrame:
    """Raises pydantic.ValidationError on malformed or unknown frames."""
    return _inbound_adapter.validate_json(raw)


def frame_to_event(frame: InboundFrame) -> PushEvent | None:
    """Map a data-bearing frame to a push event; control frames map to None."""
    if isinstance(frame, MessageReceivedFrame):
        return NewMessageEvent(
            conversation_id=frame.conversation_id,
            message=message_to_entity(frame.message, frame.conversation_id),
        )
    if isinstance(frame, UserTypingFrame):
        return TypingEvent(
            conversation_id=frame.conversation_id,
            user_id=frame.user_id,
            is_typing=frame.is_typing,
        )
    if isinstance(frame, MessagesReadFrame):
        return ReadReceiptEvent(
            conversation_id=frame.conversation_id,
            message_ids=frozenset(frame.message_ids),
            read_by=frame.read_by,
        )
    return None
