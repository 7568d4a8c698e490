"""Tests for the pin and order sidecar documents."""

from __future__ import annotations

import json
import pytest
from pathlib import Path
from typing import Any

from memopad.memo.errors import MemoIOError
from memopad.memo.models import PinEntry
from memopad.memo.sidecar import Document, JsonDocument, OrderStore, PinStore


class InMemoryDocument:
    def __init__(self, data: dict[str, Any] | None = None):
        self.data = dict(data or {})
        self.saves = 0

    def load(self) -> dict[str, Any]:
        return json.loads(json.dumps(self.data))

    def save(self, data: dict[str, Any]) -> None:
        self.data = json.loads(json.dumps(data))
        self.saves += 1


class TestJsonDocument:
    def test_missing_file_is_empty(self, tmp_path: Path):
        assert JsonDocument(tmp_path / ".pins.json").load() == {}

    def test_round_trip_overwrites_whole_file(self, tmp_path: Path):
        doc = JsonDocument(tmp_path / ".order.json")
        doc.save({"a.md": 0, "b.md": 1})
        doc.save({"c.md": 0})
        assert doc.load() == {"c.md": 0}

    def test_keeps_unicode_readable(self, tmp_path: Path):
        doc = JsonDocument(tmp_path / ".order.json")
        doc.save({"メモ.md": 0})
        assert "メモ.md" in doc.path.read_text(encoding="utf-8")

    def test_malformed_json_is_empty(self, tmp_path: Path):
        path = tmp_path / ".pins.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonDocument(path).load() == {}

    def test_non_object_is_empty(self, tmp_path: Path):
        path = tmp_path / ".pins.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert JsonDocument(path).load() == {}

    def test_write_failure_raises(self, tmp_path: Path):
        doc = JsonDocument(tmp_path / "missing-dir" / ".order.json")
        with pytest.raises(MemoIOError):
            doc.save({})

    def test_satisfies_protocol(self, tmp_path: Path):
        assert isinstance(JsonDocument(tmp_path / "x.json"), Document)
        assert isinstance(InMemoryDocument(), Document)


class TestPinStore:
    def test_load_entries(self):
        doc = InMemoryDocument({"a.md": {"pinned": True, "pinnedAt": "2026-01-01T00:00:00.000000+00:00"}})
        pins = PinStore(doc).load()
        assert pins == {"a.md": PinEntry(True, "2026-01-01T00:00:00.000000+00:00")}

    def test_load_legacy_key(self):
        doc = InMemoryDocument({"a.md": {"pinned": True, "pinned_at": "2026-01-01T00:00:00Z"}})
        assert PinStore(doc).load()["a.md"].pinned_at == "2026-01-01T00:00:00Z"

    def test_malformed_entry_discards_document(self):
        doc = InMemoryDocument({"a.md": {"pinned": True}, "b.md": "yes"})
        assert PinStore(doc).load() == {}

    def test_wrong_type_discards_document(self):
        doc = InMemoryDocument({"a.md": {"pinned": "true"}})
        assert PinStore(doc).load() == {}

    def test_toggle_new_entry_pins(self):
        doc = InMemoryDocument()
        assert PinStore(doc).toggle("a.md") is True
        assert doc.data["a.md"]["pinned"] is True
        assert doc.data["a.md"]["pinnedAt"]

    def test_toggle_twice_unpins_and_keeps_entry(self):
        doc = InMemoryDocument()
        store = PinStore(doc)
        store.toggle("a.md")
        assert store.toggle("a.md") is False
        assert doc.data["a.md"] == {"pinned": False, "pinnedAt": None}

    def test_toggle_leaves_other_entries(self):
        doc = InMemoryDocument({"b.md": {"pinned": True, "pinnedAt": "t"}})
        PinStore(doc).toggle("a.md")
        assert doc.data["b.md"] == {"pinned": True, "pinnedAt": "t"}


class TestOrderStore:
    def test_load(self):
        assert OrderStore(InMemoryDocument({"a.md": 0, "b.md": 1})).load() == {"a.md": 0, "b.md": 1}

    def test_malformed_rank_discards_document(self):
        assert OrderStore(InMemoryDocument({"a.md": 0, "b.md": "1"})).load() == {}
        assert OrderStore(InMemoryDocument({"a.md": True})).load() == {}
        assert OrderStore(InMemoryDocument({"a.md": -1})).load() == {}

    def test_replace_discards_previous(self):
        doc = InMemoryDocument({"old.md": 0})
        order = OrderStore(doc).replace(["b.md", "a.md"])
        assert order == {"b.md": 0, "a.md": 1}
        assert doc.data == {"b.md": 0, "a.md": 1}

    def test_rename_moves_rank(self):
        doc = InMemoryDocument({"a.md": 0, "b.md": 1})
        assert OrderStore(doc).rename("b.md", "c.md") is True
        assert doc.data == {"a.md": 0, "c.md": 1}

    def test_rename_unknown_is_noop(self):
        doc = InMemoryDocument({"a.md": 0})
        assert OrderStore(doc).rename("x.md", "y.md") is False
        assert doc.saves == 0
