"""Build a Note from a file on disk and a pin snapshot."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path

from memopad.memo.errors import MemoIOError
from memopad.memo.models import Note, PinEntry
from memopad.memo.paths import title_from_filename


# On Windows st_ctime is the creation time; elsewhere it is the inode change time.
_CTIME_IS_CREATION = os.name == "nt"


def _to_utc(ts: float) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


def file_times(stat: os.stat_result) -> tuple[datetime, datetime]:
    """(created, modified). Creation time falls back to mtime where unsupported."""
    created = getattr(stat, "st_birthtime", None)
    if created is None:
        created = stat.st_ctime if _CTIME_IS_CREATION else stat.st_mtime
    return _to_utc(created), _to_utc(stat.st_mtime)


def build_note(path: Path, filename: str, pins: dict[str, PinEntry]) -> Note:
    """Read `path` and join it with its pin entry. Pure apart from the reads."""
    try:
        stat = path.stat()
    except OSError as exc:
        raise MemoIOError(f"Failed to read metadata of {filename}: {exc}") from exc
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MemoIOError(f"Failed to read {filename}: {exc}") from exc

    created_at, updated_at = file_times(stat)
    pin = pins.get(filename)
    return Note(
        filename=filename,
        title=title_from_filename(filename),
        content=content,
        created_at=created_at,
        updated_at=updated_at,
        pinned=pin.pinned if pin else False,
        pinned_at=pin.pinned_at if pin else None,
    )
