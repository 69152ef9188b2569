from __future__ import annotations

from homebase.application.dto.message import FileUploadDTO, SendMessageDTO
from homebase.domain.entities.conversation import Conversation
from homebase.domain.entities.message import Message
from homebase.infrastructure.http.schemas import (
    ConversationSchema,
    FileUploadItem,
    MessageSchema,
    SendMessageBody,
)


def conversation_to_entity(schema: ConversationSchema) -> Conversation:
    return Conversation(
        id=schema.id,
        other_party_name=schema.other_party_name,
        subject=schema.subject,
        unread_count=schema.unread_count,
        last_message_at=schema.last_message_at,
        created_at=schema.created_at,
    )


def message_to_entity(schema: MessageSchema, conversation_id: str | None = None) -> Message:
    resolved = schema.conversation_id or conversation_id
    if resolved is None:
        raise ValueError(f"message {schema.id} has no conversation id")
    return Message(
        id=schema.id,
        conversation_id=resolved,
        sender_id=schema.sender_id,
        message=schema.message,
        image_url=schema.image_url,
        attachments=tuple(schema.attachments or ()),
        is_read=schema.is_read,
        read_at=schema.read_at,
        created_at=schema.created_at,
    )


def message_to_schema(message: Message) -> MessageSchema:
    return MessageSchema(
        id=message.id,
        conversation_id=message.conversation_id,
        sender_id=message.sender_id,
        message=message.message,
        image_url=message.image_url,
        attachments=list(message.attachments) or None,
        is_read=message.is_read,
        read_at=message.read_at,
        created_at=message.created_at,
    )


def send_body(data: SendMessageDTO) -> SendMessageBody:
    return SendMessageBody(
        message=data.message,
        image_url=data.image_url,
        attachments=data.attachments or None,
    )


def upload_item(dto: FileUploadDTO) -> FileUploadItem:
    return FileUploadItem(
        file_data=dto.file_data,
        file_name=dto.file_name,
        file_type=dto.file_type,
    )
