"""Wire shapes of the messaging backend (camelCase JSON)."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


class ConversationSchema(WireModel):
    id: str
    other_party_name: str = ""
    subject: str = ""
    unread_count: int = 0
    last_message_at: datetime | None = None
    created_at: datetime | None = None


class MessageSchema(WireModel):
    id: str
    conversation_id: str | None = None
    sender_id: str
    message: str | None = None
    image_url: str | None = None
    attachments: list[str] | None = None
    is_read: bool = False
    read_at: datetime | None = None
    created_at: datetime


class SendMessageBody(WireModel):
    message: str
    image_url: str | None = None
    attachments: list[str] | None = None


class MarkReadBody(WireModel):
    message_ids: list[str]


class ImageUploadBody(WireModel):
    image_data: str


class FileUploadItem(WireModel):
    file_data: str
    file_name: str
    file_type: str


class FileUploadBody(WireModel):
    files: list[FileUploadItem]


class ImageUploadResponse(WireModel):
    url: str


class FileUploadResponse(WireModel):
    urls: list[str]
