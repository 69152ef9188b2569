from __future__ import annotations

from typing import Protocol

from homebase.application.dto.message import FileUploadDTO, SendMessageDTO
from homebase.domain.entities.conversation import Conversation
from homebase.domain.entities.message import Message


class MessagingApi(Protocol):
    """REST side of messaging. Every method raises ApiError (or a subclass) on failure."""

    async def list_conversations(self) -> list[Conversation]: ...

    async def list_messages(self, conversation_id: str) -> list[Message]: ...

    async def send_message(self, conversation_id: str, data: SendMessageDTO) -> Message: ...

    async def mark_read(self, conversation_id: str, message_ids: list[str]) -> None: ...

    async def upload_message_image(self, image_data: str) -> str:
        """Upload a base64 data URL, return the stored image URL."""
        ...

    async def upload_files(self, files: list[FileUploadDTO]) -> list[str]: ...
