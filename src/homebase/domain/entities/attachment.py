from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path

from homebase.domain.value_objects.enums import AttachmentKind


def classify_mime_type(mime_type: str) -> AttachmentKind:
    if mime_type.startswith("image/"):
        return AttachmentKind.IMAGE
    if mime_type == "application/pdf":
        return AttachmentKind.PDF
    return AttachmentKind.DOCUMENT


@dataclass(frozen=True, slots=True)
class PendingAttachment:
    """A file staged in the composer but not uploaded yet.

    ``path`` doubles as the local preview reference.
    """

    path: Path
    mime_type: str
    kind: AttachmentKind

    @property
    def name(self) -> str:
        return self.path.name

    @classmethod
    def from_path(cls, path: str | Path, mime_type: str | None = None) -> PendingAttachment:
        path = Path(path)
        if mime_type is None:
            guessed, _ = mimetypes.guess_type(path.name)
            mime_type = guessed or "application/octet-stream"
        return cls(path=path, mime_type=mime_type, kind=classify_mime_type(mime_type))
