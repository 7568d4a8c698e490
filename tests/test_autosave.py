"""Tests for debounced auto-save."""

from __future__ import annotations

import asyncio
import pytest
from unittest.mock import AsyncMock

from memopad.autosave import AutoSaver


def make_saver(result: str = "a.md", delay_ms: int = 20, **kwargs) -> tuple[AutoSaver, AsyncMock]:
    save = AsyncMock(return_value=result)
    return AutoSaver(save, delay_ms=delay_ms, **kwargs), save


class TestAutoSaver:
    @pytest.mark.asyncio
    async def test_debounces_to_last_content(self):
        saver, save = make_saver()
        saver.track("a", "a.md", "v0")
        saver.update("v1")
        saver.update("v2")
        saver.update("v3")
        await asyncio.sleep(0.1)
        save.assert_awaited_once_with("a", "v3", "a.md")

    @pytest.mark.asyncio
    async def test_nothing_tracked(self):
        saver, save = make_saver()
        saver.update("text")
        await asyncio.sleep(0.05)
        save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unchanged_and_blank_are_skipped(self):
        saver, save = make_saver()
        saver.track("a", "a.md", "same")
        saver.update("same")
        saver.update("   \n")
        await asyncio.sleep(0.05)
        save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reverting_cancels_pending(self):
        saver, save = make_saver()
        saver.track("a", "a.md", "orig")
        saver.update("changed")
        saver.update("orig")
        await asyncio.sleep(0.05)
        save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rename_notifies_and_follows(self):
        renamed: list[str] = []
        saver, save = make_saver(result="b.md", on_saved=renamed.append)
        saver.track("b", "a.md", "")
        saver.update("text")
        await asyncio.sleep(0.1)
        assert renamed == ["b.md"]
        assert saver.filename == "b.md"

        save.return_value = "b.md"
        saver.update("more")
        await asyncio.sleep(0.1)
        assert save.await_args.args == ("b", "more", "b.md")
        assert renamed == ["b.md"]

    @pytest.mark.asyncio
    async def test_flush(self):
        saver, save = make_saver(delay_ms=10_000)
        saver.track("a", "a.md", "")
        saver.update("now")
        assert await saver.flush() == "a.md"
        save.assert_awaited_once_with("a", "now", "a.md")
        assert await saver.flush() is None

    @pytest.mark.asyncio
    async def test_failure_is_logged_and_kept_pending(self, caplog):
        saver, save = make_saver()
        save.side_effect = OSError("disk full")
        saver.track("a", "a.md", "")
        saver.update("text")
        await asyncio.sleep(0.1)
        assert "Auto-save failed" in caplog.text

        save.side_effect = None
        assert await saver.flush() == "a.md"

    @pytest.mark.asyncio
    async def test_track_discards_pending(self):
        saver, save = make_saver(delay_ms=30)
        saver.track("a", "a.md", "")
        saver.update("draft")
        saver.track("b", "b.md", "other")
        await asyncio.sleep(0.1)
        save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_close_cancels_timer(self):
        saver, save = make_saver(delay_ms=30)
        saver.track("a", "a.md", "")
        saver.update("draft")
        await saver.close()
        await asyncio.sleep(0.06)
        save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_switching_memo_during_save_keeps_new_memo(self):
        gate = asyncio.Event()
        calls: list[tuple[str, str, str | None]] = []
        renamed: list[str] = []

        async def save(title: str, content: str, old_filename: str | None) -> str:
            calls.append((title, content, old_filename))
            if old_filename == "A.md":
                await gate.wait()
            return f"{title}.md"

        saver = AutoSaver(save, delay_ms=10_000, on_saved=renamed.append)
        saver.track("A-renamed", "A.md", "")
        saver.update("edited A")
        in_flight = asyncio.create_task(saver.flush())
        await asyncio.sleep(0)

        saver.track("B", "B.md", "")
        gate.set()
        assert await in_flight == "A-renamed.md"
        assert renamed == ["A-renamed.md"]
        assert saver.filename == "B.md"

        saver.update("edit to B")
        assert await saver.flush() == "B.md"
        assert calls == [("A-renamed", "edited A", "A.md"), ("B", "edit to B", "B.md")]
