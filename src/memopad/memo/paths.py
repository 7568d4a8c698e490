"""Filename primitives shared by every memo operation."""

from __future__ import annotations

import re
import time
from pathlib import Path

from memopad.memo.errors import CapacityExceededError, MemoIOError, UnsupportedTypeError

MEMO_EXTENSIONS = ("md", "txt")
DEFAULT_EXTENSION = "md"
MAX_FILENAME_CHARS = 200
MAX_SUFFIX = 999
UNTITLED_PREFIX = "Untitled"

_ILLEGAL_CHARS = re.compile(r'[/\\:*?"<>|]')


def sanitize_filename(title: str) -> str:
    """Strip characters illegal on common filesystems, trim, cap the length.

    An empty result is replaced by a timestamped placeholder.
    """
    cleaned = _ILLEGAL_CHARS.sub("", title).strip()
    if not cleaned:
        return f"{UNTITLED_PREFIX}_{int(time.time())}"
    return cleaned[:MAX_FILENAME_CHARS]


def extension_of(filename: str) -> str:
    """Return the extension without the dot, or "" when there is none."""
    return Path(filename).suffix[1:]


def is_memo_filename(filename: str) -> bool:
    """Exact, case-sensitive match on .md / .txt."""
    return extension_of(filename) in MEMO_EXTENSIONS


def ensure_memo_extension(ext: str) -> str:
    if ext not in MEMO_EXTENSIONS:
        raise UnsupportedTypeError(f"Unsupported file type: .{ext}")
    return ext


def title_from_filename(filename: str) -> str:
    """Drop a single trailing .md or .txt; embedded dots are kept."""
    for ext in MEMO_EXTENSIONS:
        suffix = f".{ext}"
        if filename.endswith(suffix):
            return filename[: -len(suffix)]
    return filename


def resolve_unique_filename(memo_dir: Path, base_name: str, ext: str) -> str:
    """Pick `base.ext`, else `base_1.ext` … `base_999.ext`, whichever is free."""
    candidate = f"{base_name}.{ext}"
    if not (memo_dir / candidate).exists():
        return candidate
    for i in range(1, MAX_SUFFIX + 1):
        candidate = f"{base_name}_{i}.{ext}"
        if not (memo_dir / candidate).exists():
            return candidate
    raise CapacityExceededError(f"Too many files with name '{base_name}'")


def ensure_dir(path: Path) -> Path:
    """Create the directory (and parents) if it does not exist yet."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise MemoIOError(f"Failed to create directory {path}: {exc}") from exc
    return path
