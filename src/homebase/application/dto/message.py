from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SendMessageDTO:
    message: str = ""
    image_url: str | None = None
    attachments: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class FileUploadDTO:
    """One entry of a batch upload: base64 data URL plus name and MIME type."""

    file_data: str
    file_name: str
    file_type: str
