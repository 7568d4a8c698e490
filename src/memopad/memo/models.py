"""Data models for notes and their pin metadata."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """RFC 3339 text in UTC with fixed microsecond precision.

    Fixed precision keeps stored timestamps comparable as plain strings.
    """
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


@dataclass
class PinEntry:
    """One value of the pin document, keyed by filename."""

    pinned: bool = False
    pinned_at: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PinEntry:
        pinned = d.get("pinned")
        if not isinstance(pinned, bool):
            raise ValueError(f"pinned must be a boolean, got {pinned!r}")
        # Documents written by older builds used the snake_case key.
        pinned_at = d.get("pinnedAt", d.get("pinned_at"))
        if pinned_at is not None and not isinstance(pinned_at, str):
            raise ValueError(f"pinnedAt must be a string, got {pinned_at!r}")
        return cls(pinned=pinned, pinned_at=pinned_at)

    def to_dict(self) -> dict[str, Any]:
        return {"pinned": self.pinned, "pinnedAt": self.pinned_at}


@dataclass
class Note:
    """A note as seen by the UI: file content joined with its metadata."""

    filename: str
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    pinned: bool = False
    pinned_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "title": self.title,
            "content": self.content,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
            "pinned": self.pinned,
            "pinnedAt": self.pinned_at,
        }
