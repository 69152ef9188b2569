"""Shared test fixtures."""
from __future__ import annotations

import itertools
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from homebase.application.dto.message import FileUploadDTO, SendMessageDTO
from homebase.application.exceptions import ApiError, SendError, UploadError
from homebase.domain.entities.conversation import Conversation
from homebase.domain.entities.message import Message
from homebase.services.conversation_sync import ConversationSync

VIEWER_ID = "homeowner-1"
OTHER_ID = "contractor-7"

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
_seq = itertools.count()


def make_conversation(
    *,
    conversation_id: str | None = None,
    other_party_name: str = "Ace Roofing",
    subject: str = "Roof inspection",
    unread_count: int = 0,
    last_message_at: datetime | None = None,
) -> Conversation:
    return Conversation(
        id=conversation_id or str(uuid.uuid4()),
        other_party_name=other_party_name,
        subject=subject,
        unread_count=unread_count,
        last_message_at=last_message_at,
        created_at=BASE_TIME,
    )


def make_message(
    *,
    message_id: str | None = None,
    conversation_id: str = "c1",
    sender_id: str = OTHER_ID,
    text: str | None = "hello",
    is_read: bool = False,
    created_at: datetime | None = None,
    image_url: str | None = None,
    attachments: tuple[str, ...] = (),
) -> Message:
    return Message(
        id=message_id or str(uuid.uuid4()),
        conversation_id=conversation_id,
        sender_id=sender_id,
        message=text,
        image_url=image_url,
        attachments=attachments,
        is_read=is_read,
        read_at=BASE_TIME if is_read else None,
        created_at=created_at or BASE_TIME + timedelta(seconds=next(_seq)),
    )


class FixedClock:
    def __init__(self, now: datetime = BASE_TIME + timedelta(days=1)) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now


@dataclass
class FakePushChannel:
    connected: bool = True
    sent: list[tuple[Any, ...]] = field(default_factory=list)

    async def join(self, conversation_id: str) -> None:
        self.sent.append(("join", conversation_id))

    async def leave(self, conversation_id: str) -> None:
        self.sent.append(("leave", conversation_id))

    async def send_typing(self, conversation_id: str, is_typing: bool) -> None:
        self.sent.append(("typing", conversation_id, is_typing))

    async def mark_as_read(self, conversation_id: str, message_ids: list[str]) -> None:
        self.sent.append(("mark_read", conversation_id, sorted(message_ids)))

    async def broadcast_message(self, conversation_id: str, message: Message) -> None:
        self.sent.append(("new_message", conversation_id, message.id))

    def of_kind(self, kind: str) -> list[tuple[Any, ...]]:
        return [s for s in self.sent if s[0] == kind]


@dataclass
class FakeMessagingApi:
    conversations: list[Conversation] = field(default_factory=list)
    threads: dict[str, list[Message]] = field(default_factory=dict)
    calls: list[tuple[Any, ...]] = field(default_factory=list)
    fail: set[str] = field(default_factory=set)
    uploaded_files: list[FileUploadDTO] = field(default_factory=list)

    async def list_conversations(self) -> list[Conversation]:
        self.calls.append(("list_conversations",))
        if "list_conversations" in self.fail:
            raise ApiError("boom", status_code=500)
        return list(self.conversations)

    async def list_messages(self, conversation_id: str) -> list[Message]:
        self.calls.append(("list_messages", conversation_id))
        if "list_messages" in self.fail:
            raise ApiError("boom", status_code=500)
        return list(self.threads.get(conversation_id, []))

    async def send_message(self, conversation_id: str, data: SendMessageDTO) -> Message:
        self.calls.append(("send_message", conversation_id, data))
        if "send_message" in self.fail:
            raise SendError("Failed to send message", status_code=500)
        return make_message(
            conversation_id=conversation_id,
            sender_id=VIEWER_ID,
            text=data.message,
            image_url=data.image_url,
            attachments=tuple(data.attachments),
        )

    async def mark_read(self, conversation_id: str, message_ids: list[str]) -> None:
        self.calls.append(("mark_read", conversation_id, sorted(message_ids)))
        if "mark_read" in self.fail:
            raise ApiError("boom", status_code=500)

    async def upload_message_image(self, image_data: str) -> str:
        self.calls.append(("upload_message_image", image_data))
        if "upload_message_image" in self.fail:
            raise UploadError("upload failed", status_code=500)
        return "/public/message-images/x.png"

    async def upload_files(self, files: list[FileUploadDTO]) -> list[str]:
        self.calls.append(("upload_files", len(files)))
        if "upload_files" in self.fail:
            raise UploadError("upload failed", status_code=500)
        self.uploaded_files.extend(files)
        return [f"/public/attachments/{f.file_name}" for f in files]

    def called(self, name: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def api() -> FakeMessagingApi:
    return FakeMessagingApi()


@pytest.fixture
def push() -> FakePushChannel:
    return FakePushChannel()


@pytest.fixture
def sync(api: FakeMessagingApi, push: FakePushChannel) -> ConversationSync:
    return ConversationSync(
        api,
        push,
        viewer_id=VIEWER_ID,
        clock=FixedClock(),
        typing_idle_seconds=0.05,
        typing_clear_seconds=0.05,
    )
