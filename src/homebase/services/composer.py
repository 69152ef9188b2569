from __future__ import annotations

import asyncio
import base64
import logging
from pathlib import Path

from homebase.application.dto.message import FileUploadDTO
from homebase.domain.entities.attachment import PendingAttachment
from homebase.domain.value_objects.enums import AttachmentKind, ComposerStatus

logger = logging.getLogger(__name__)


def to_data_url(content: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


async def read_attachment(attachment: PendingAttachment) -> FileUploadDTO:
    content = await asyncio.to_thread(attachment.path.read_bytes)
    return FileUploadDTO(
        file_data=to_data_url(content, attachment.mime_type),
        file_name=attachment.name,
        file_type=attachment.mime_type,
    )


async def read_attachments(attachments: list[PendingAttachment]) -> list[FileUploadDTO]:
    """Read every staged file concurrently; order of the result matches the input."""
    return list(await asyncio.gather(*(read_attachment(a) for a in attachments)))


class Composer:
    """Outbound message draft: text, a legacy single image and staged files."""

    def __init__(self) -> None:
        self.text = ""
        self.image: PendingAttachment | None = None
        self.files: list[PendingAttachment] = []
        self.status = ComposerStatus.IDLE

    @property
    def has_content(self) -> bool:
        return bool(self.text.strip() or self.image or self.files)

    @property
    def sending(self) -> bool:
        return self.status == ComposerStatus.SENDING

    def stage_image(self, path: str | Path, mime_type: str | None = None) -> PendingAttachment:
        attachment = PendingAttachment.from_path(path, mime_type)
        if attachment.kind != AttachmentKind.IMAGE:
            raise ValueError(f"{attachment.name} is not an image ({attachment.mime_type})")
        self.image = attachment
        return attachment

    def stage_file(self, path: str | Path, mime_type: str | None = None) -> PendingAttachment:
        attachment = PendingAttachment.from_path(path, mime_type)
        self.files.append(attachment)
        return attachment

    def remove_image(self) -> None:
        self.image = None

    def remove_file(self, index: int) -> PendingAttachment:
        return self.files.pop(index)

    def clear(self) -> None:
        self.text = ""
        self.image = None
        self.files = []
