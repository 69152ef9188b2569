"""httpx implementation of the MessagingApi port."""
from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from homebase.application.dto.message import FileUploadDTO, SendMessageDTO
from homebase.application.exceptions import ApiError, SendError, UploadError
from homebase.config import settings
from homebase.domain.entities.conversation import Conversation
from homebase.domain.entities.message import Message
from homebase.infrastructure.http.mappers import (
    conversation_to_entity,
    message_to_entity,
    send_body,
    upload_item,
)
from homebase.infrastructure.http.schemas import (
    ConversationSchema,
    FileUploadBody,
    FileUploadResponse,
    ImageUploadBody,
    ImageUploadResponse,
    MarkReadBody,
    MessageSchema,
)

logger = logging.getLogger(__name__)

_conversations_adapter = TypeAdapter(list[ConversationSchema])
_messages_adapter = TypeAdapter(list[MessageSchema])


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body.get("detail") or body)
    return str(body)


class HttpMessagingApi:
    """Implements application.ports.api.MessagingApi."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_settings(cls) -> HttpMessagingApi:
        client = httpx.AsyncClient(
            base_url=settings.API_BASE_URL,
            headers=settings.auth_headers,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
        return cls(client)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_conversations(self) -> list[Conversation]:
        raw = await self._request("GET", "/api/conversations")
        schemas = self._parse(_conversations_adapter, raw)
        return [conversation_to_entity(s) for s in schemas]

    async def list_messages(self, conversation_id: str) -> list[Message]:
        raw = await self._request("GET", f"/api/conversations/{conversation_id}/messages")
        schemas = self._parse(_messages_adapter, raw)
        return [message_to_entity(s, conversation_id) for s in schemas]

    async def send_message(self, conversation_id: str, data: SendMessageDTO) -> Message:
        raw = await self._request(
            "POST",
            f"/api/conversations/{conversation_id}/messages",
            body=send_body(data),
            error_cls=SendError,
        )
        schema = self._parse(TypeAdapter(MessageSchema), raw, error_cls=SendError)
        return message_to_entity(schema, conversation_id)

    async def mark_read(self, conversation_id: str, message_ids: list[str]) -> None:
        await self._request(
            "POST",
            f"/api/conversations/{conversation_id}/messages/mark-read",
            body=MarkReadBody(message_ids=message_ids),
        )

    async def upload_message_image(self, image_data: str) -> str:
        raw = await self._request(
            "POST",
            "/api/upload/message-image",
            body=ImageUploadBody(image_data=image_data),
            error_cls=UploadError,
        )
        return self._parse(TypeAdapter(ImageUploadResponse), raw, error_cls=UploadError).url

    async def upload_files(self, files: list[FileUploadDTO]) -> list[str]:
        raw = await self._request(
            "POST",
            "/api/upload/files",
            body=FileUploadBody(files=[upload_item(f) for f in files]),
            error_cls=UploadError,
        )
        return self._parse(TypeAdapter(FileUploadResponse), raw, error_cls=UploadError).urls

    async def _request(
        self,
        method: str,
        path: str,
        *,
        body: BaseModel | None = None,
        error_cls: type[ApiError] = ApiError,
    ) -> Any:
        payload = body.model_dump(mode="json", by_alias=True, exclude_none=True) if body is not None else None
        try:
            response = await self._client.request(method, path, json=payload)
        except httpx.HTTPError as exc:
            raise error_cls(f"{method} {path}: {exc}") from exc

        if response.is_error:
            detail = _error_detail(response)
            logger.debug("%s %s -> %d %s", method, path, response.status_code, detail)
            raise error_cls(detail, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise error_cls(f"{method} {path}: invalid JSON response") from exc

    @staticmethod
    def _parse(adapter: TypeAdapter[Any], raw: Any, *, error_cls: type[ApiError] = ApiError) -> Any:
        try:
            return adapter.validate_python(raw)
        except PydanticValidationError as exc:
            raise error_cls(f"unexpected response shape: {exc.error_count()} errors") from exc
