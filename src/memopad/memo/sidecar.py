"""Sidecar documents — pin state and custom order kept next to the notes.

Each sidecar is a single JSON object stored in a dot-file inside the memo
directory. There are no partial updates: `load()` returns the whole map and
`save()` replaces the whole file. A document that exists but cannot be
parsed loads as an empty map.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from memopad.memo.errors import MemoIOError
from memopad.memo.models import PinEntry, format_timestamp, utc_now

logger = logging.getLogger(__name__)

PINS_FILENAME = ".pins.json"
ORDER_FILENAME = ".order.json"


@runtime_checkable
class Document(Protocol):
    """A whole-document key/value repository."""

    def load(self) -> dict[str, Any]:
        """Return the full map; a missing document is an empty map."""
        ...

    def save(self, data: dict[str, Any]) -> None:
        """Overwrite the full document with `data`."""
        ...


class JsonDocument:
    """`Document` backed by one pretty-printed JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise MemoIOError(f"Failed to read {self.path.name}: {exc}") from exc
        try:
            data = json.loads(text)
        except ValueError:
            logger.warning("Ignoring malformed sidecar %s", self.path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring sidecar %s: top level is not an object", self.path)
            return {}
        return data

    def save(self, data: dict[str, Any]) -> None:
        content = json.dumps(data, ensure_ascii=False, indent=2)
        try:
            self.path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise MemoIOError(f"Failed to write {self.path.name}: {exc}") from exc


class PinStore:
    """filename → PinEntry."""

    def __init__(self, document: Document) -> None:
        self.document = document

    def load(self) -> dict[str, PinEntry]:
        pins: dict[str, PinEntry] = {}
        for name, entry in self.document.load().items():
            try:
                if not isinstance(entry, dict):
                    raise ValueError(f"entry must be an object, got {entry!r}")
                pins[name] = PinEntry.from_dict(entry)
            except ValueError as exc:
                logger.warning("Ignoring malformed pin document (%s): %s", name, exc)
                return {}
        return pins

    def save(self, pins: dict[str, PinEntry]) -> None:
        self.document.save({name: entry.to_dict() for name, entry in pins.items()})

    def toggle(self, filename: str) -> bool:
        """Flip the pin flag for `filename` and persist; return the new state.

        An unknown filename becomes pinned. Unpinning keeps the entry with
        `pinned=False` and no timestamp.
        """
        pins = self.load()
        entry = pins.get(filename)
        if entry is None:
            entry = pins[filename] = PinEntry()
        entry.pinned = not entry.pinned
        entry.pinned_at = format_timestamp(utc_now()) if entry.pinned else None
        self.save(pins)
        return entry.pinned


class OrderStore:
    """filename → integer rank."""

    def __init__(self, document: Document) -> None:
        self.document = document

    def load(self) -> dict[str, int]:
        raw = self.document.load()
        for name, rank in raw.items():
            # bool is an int subclass; JSON true/false is not a rank.
            if isinstance(rank, bool) or not isinstance(rank, int) or rank < 0:
                logger.warning("Ignoring malformed order document: %r -> %r", name, rank)
                return {}
        return dict(raw)

    def save(self, order: dict[str, int]) -> None:
        self.document.save(dict(order))

    def replace(self, filenames: list[str]) -> dict[str, int]:
        """Rebuild the document as {filename: index} in list order."""
        order = {name: index for index, name in enumerate(filenames)}
        self.save(order)
        return order

    def rename(self, old: str, new: str) -> bool:
        """Move the rank of `old` to `new`. Returns False when `old` had none."""
        order = self.load()
        if old not in order:
            return False
        order[new] = order.pop(old)
        self.save(order)
        return True
