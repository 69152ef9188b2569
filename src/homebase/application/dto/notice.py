from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Notice:
    """Transient, dismissable user-facing error."""

    title: str
    description: str = ""
