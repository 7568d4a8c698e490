"""Memo store — listing, ordering and every mutation of the memo directory.

The directory is resolved on each call through an injected resolver, so a
config change takes effect on the next operation. Nothing is cached: every
call re-reads the directory and both sidecar documents.
"""

from __future__ import annotations

import functools
import logging
import os
from collections.abc import Callable, Iterable
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from memopad.memo.builder import build_note
from memopad.memo.errors import MemoError, MemoIOError, MemoNotFoundError
from memopad.memo.models import Note, PinEntry, utc_now
from memopad.memo.paths import (
    DEFAULT_EXTENSION,
    ensure_dir,
    ensure_memo_extension,
    extension_of,
    is_memo_filename,
    resolve_unique_filename,
    sanitize_filename,
)
from memopad.memo.sidecar import (
    ORDER_FILENAME,
    PINS_FILENAME,
    Document,
    JsonDocument,
    OrderStore,
    PinStore,
)

if TYPE_CHECKING:
    from memopad.picker import FilePicker

logger = logging.getLogger(__name__)

DEFAULT_TITLE_FORMAT = "Memo_%Y-%m-%d_%H%M"
IMPORTED_STEM = "imported_memo"

DirectoryResolver = Callable[[], Path]
DocumentFactory = Callable[[Path], Document]
WarningHandler = Callable[[str, Exception], None]


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_notes(a: Note, b: Note, order: dict[str, int]) -> int:
    """Total order used by the listing.

    Pinned first. Within each group a stored rank wins over no rank and ranks
    compare ascending. Without ranks, pinned notes go by pin time ascending
    and unpinned notes by modification time descending.
    """
    if a.pinned != b.pinned:
        return -1 if a.pinned else 1

    a_rank = order.get(a.filename)
    b_rank = order.get(b.filename)
    if a_rank is not None and b_rank is not None:
        return _cmp(a_rank, b_rank)
    if a_rank is not None:
        return -1
    if b_rank is not None:
        return 1

    if a.pinned:
        if a.pinned_at is not None and b.pinned_at is not None:
            return _cmp(a.pinned_at, b.pinned_at)
        return 0
    return _cmp(b.updated_at, a.updated_at)


def sort_notes(notes: Iterable[Note], order: dict[str, int]) -> list[Note]:
    return sorted(notes, key=functools.cmp_to_key(lambda a, b: compare_notes(a, b, order)))


class MemoStore:
    """Synchronous operations on one memo directory."""

    def __init__(
        self,
        memo_dir: str | os.PathLike[str] | DirectoryResolver,
        *,
        pins_document: DocumentFactory | None = None,
        order_document: DocumentFactory | None = None,
        on_warning: WarningHandler | None = None,
        title_format: str = DEFAULT_TITLE_FORMAT,
    ) -> None:
        if callable(memo_dir):
            self._resolve_dir: DirectoryResolver = memo_dir
        else:
            fixed = Path(memo_dir)
            self._resolve_dir = lambda: fixed
        self._pins_document = pins_document or (lambda d: JsonDocument(d / PINS_FILENAME))
        self._order_document = order_document or (lambda d: JsonDocument(d / ORDER_FILENAME))
        self._on_warning = on_warning
        self.title_format = title_format

    # ── Wiring ────────────────────────────────────────────────

    def memo_dir(self) -> Path:
        """Resolve the current memo directory, creating it if needed."""
        return ensure_dir(self._resolve_dir())

    def pin_store(self, memo_dir: Path | None = None) -> PinStore:
        return PinStore(self._pins_document(memo_dir or self.memo_dir()))

    def order_store(self, memo_dir: Path | None = None) -> OrderStore:
        return OrderStore(self._order_document(memo_dir or self.memo_dir()))

    def _warn(self, message: str, exc: Exception) -> None:
        logger.warning("%s: %s", message, exc)
        if self._on_warning is not None:
            self._on_warning(message, exc)

    def _pin_snapshot(self, memo_dir: Path) -> dict[str, PinEntry]:
        try:
            return self.pin_store(memo_dir).load()
        except MemoIOError as exc:
            self._warn("Pin document unreadable, treating all memos as unpinned", exc)
            return {}

    # ── Listing ───────────────────────────────────────────────

    def list_memos(self) -> list[Note]:
        """All memos in display order. Persists a fresh order when any is unranked."""
        memo_dir = self.memo_dir()
        try:
            entries = sorted(memo_dir.iterdir())
        except OSError as exc:
            raise MemoIOError(f"Failed to read memo directory {memo_dir}: {exc}") from exc

        pins = self._pin_snapshot(memo_dir)
        notes = [
            build_note(entry, entry.name, pins)
            for entry in entries
            if is_memo_filename(entry.name) and entry.is_file()
        ]

        order_store = self.order_store(memo_dir)
        try:
            order = order_store.load()
        except MemoIOError as exc:
            self._warn("Order document unreadable, falling back to default order", exc)
            order = {}

        notes = sort_notes(notes, order)

        if any(note.filename not in order for note in notes):
            try:
                order_store.replace([note.filename for note in notes])
                logger.debug("Persisted order for %d memos", len(notes))
            except MemoError as exc:
                self._warn("Failed to persist memo order", exc)

        return notes

    def read_memo(self, filename: str) -> Note:
        memo_dir = self.memo_dir()
        path = memo_dir / filename
        if not path.is_file():
            raise MemoNotFoundError(f"Memo '{filename}' not found")
        return build_note(path, filename, self._pin_snapshot(memo_dir))

    # ── Mutations ─────────────────────────────────────────────

    def save_memo(self, title: str, content: str, old_filename: str | None = None) -> str:
        """Write `content` under a filename derived from `title`; return that filename.

        When the derived filename differs from `old_filename`, the old file is
        removed and its rank moves to the new name.
        """
        memo_dir = self.memo_dir()
        ext = (extension_of(old_filename) if old_filename else "") or DEFAULT_EXTENSION
        new_filename = f"{sanitize_filename(title)}.{ext}"
        self._write(memo_dir / new_filename, content)

        if old_filename and old_filename != new_filename:
            old_path = memo_dir / old_filename
            if old_path.exists():
                try:
                    old_path.unlink()
                except OSError as exc:
                    raise MemoIOError(f"Failed to delete old file {old_filename}: {exc}") from exc
            try:
                self.order_store(memo_dir).rename(old_filename, new_filename)
            except MemoError as exc:
                self._warn(f"Failed to carry order from {old_filename} to {new_filename}", exc)
            logger.info("Renamed memo: %s -> %s", old_filename, new_filename)
        else:
            logger.info("Saved memo: %s (%d chars)", new_filename, len(content))
        return new_filename

    def delete_memo(self, filename: str) -> None:
        """Remove the file; absent files are not an error. Sidecars are left alone."""
        path = self.memo_dir() / filename
        if not path.exists():
            return
        try:
            path.unlink()
        except OSError as exc:
            raise MemoIOError(f"Failed to delete memo {filename}: {exc}") from exc
        logger.info("Deleted memo: %s", filename)

    def create_memo(self, extension: str | None = None) -> Note:
        """Create an empty memo titled after the current local time."""
        ext = ensure_memo_extension(extension or DEFAULT_EXTENSION)
        memo_dir = self.memo_dir()
        base_title = datetime.now().strftime(self.title_format)

        title = base_title
        filename = f"{sanitize_filename(title)}.{ext}"
        counter = 2
        while (memo_dir / filename).exists():
            title = f"{base_title}_{counter}"
            filename = f"{sanitize_filename(title)}.{ext}"
            counter += 1

        self._write(memo_dir / filename, "")
        logger.info("Created memo: %s", filename)
        now = utc_now()
        return Note(
            filename=filename,
            title=title,
            content="",
            created_at=now,
            updated_at=now,
        )

    def toggle_pin(self, filename: str) -> bool:
        pinned = self.pin_store().toggle(filename)
        logger.info("%s memo: %s", "Pinned" if pinned else "Unpinned", filename)
        return pinned

    def update_order(self, filenames: list[str]) -> None:
        """Replace the stored order with `filenames` in the given sequence."""
        self.order_store().replace(list(filenames))
        logger.info("Updated order of %d memos", len(filenames))

    # ── Import ────────────────────────────────────────────────

    def import_file(self, source: Path) -> Note:
        """Copy an external .md/.txt file into the memo directory under a free name."""
        ext = ensure_memo_extension(extension_of(source.name))
        try:
            content = source.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise MemoNotFoundError(f"Import source '{source}' not found") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise MemoIOError(f"Failed to read {source}: {exc}") from exc
        return self._import(source.stem or IMPORTED_STEM, ext, content, origin=str(source))

    def import_from_content(self, original_filename: str, content: str) -> Note:
        """Import text the caller already holds, e.g. a dropped file."""
        name = Path(original_filename)
        ext = ensure_memo_extension(extension_of(name.name) or DEFAULT_EXTENSION)
        return self._import(name.stem or IMPORTED_STEM, ext, content, origin=original_filename)

    def import_from_dialog(self, picker: FilePicker) -> list[Note]:
        """Import every file the picker returns; a cancelled pick imports nothing."""
        paths = picker.pick_files()
        if not paths:
            return []
        return [self.import_file(Path(p)) for p in paths]

    def _import(self, stem: str, ext: str, content: str, origin: str) -> Note:
        memo_dir = self.memo_dir()
        target = resolve_unique_filename(memo_dir, sanitize_filename(stem), ext)
        target_path = memo_dir / target
        self._write(target_path, content)
        logger.info("Imported %s as %s", origin, target)
        return build_note(target_path, target, self._pin_snapshot(memo_dir))

    def _write(self, path: Path, content: str) -> None:
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise MemoIOError(f"Failed to write {path.name}: {exc}") from exc
