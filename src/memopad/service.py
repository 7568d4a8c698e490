"""Memo service — the operations the UI layer calls.

Every operation is an ordinary blocking call on `MemoStore` / `ConfigStore`,
run to completion on a worker thread so the UI event loop never blocks.
Calls are not serialized against each other: two operations dispatched
close together may interleave their file reads and writes.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, TypeVar

from memopad.config import AppConfig, ConfigStore, Settings
from memopad.memo.store import MemoStore, WarningHandler

if TYPE_CHECKING:
    from memopad.memo.models import Note
    from memopad.picker import FilePicker

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MemoService:
    """Async facade over the memo store and the config document."""

    def __init__(
        self,
        config_store: ConfigStore,
        *,
        max_workers: int = 4,
        on_warning: WarningHandler | None = None,
    ) -> None:
        self.config_store = config_store
        self.store = MemoStore(config_store.memo_directory, on_warning=on_warning)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="memopad")

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> MemoService:
        return cls(ConfigStore(settings.config_file), max_workers=settings.max_workers, **kwargs)

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, functools.partial(func, *args))

    # ── Memo operations ──────────────────────────────────────

    async def list_memos(self) -> list[Note]:
        return await self._run(self.store.list_memos)

    async def read_memo(self, filename: str) -> Note:
        return await self._run(self.store.read_memo, filename)

    async def save_memo(self, title: str, content: str, old_filename: str | None = None) -> str:
        return await self._run(self.store.save_memo, title, content, old_filename)

    async def delete_memo(self, filename: str) -> None:
        await self._run(self.store.delete_memo, filename)

    async def create_memo(self, extension: str | None = None) -> Note:
        return await self._run(self.store.create_memo, extension)

    async def toggle_pin(self, filename: str) -> bool:
        return await self._run(self.store.toggle_pin, filename)

    async def update_order(self, filenames: list[str]) -> None:
        await self._run(self.store.update_order, filenames)

    async def import_from_dialog(self, picker: FilePicker) -> list[Note]:
        return await self._run(self.store.import_from_dialog, picker)

    async def import_from_content(self, original_filename: str, content: str) -> Note:
        return await self._run(self.store.import_from_content, original_filename, content)

    # ── Config operations ────────────────────────────────────

    async def get_config(self) -> AppConfig:
        return await self._run(self.config_store.load)

    async def save_config(self, config: AppConfig) -> AppConfig:
        await self._run(self.config_store.save, config)
        return config

    async def update_config(self, partial: dict[str, Any]) -> AppConfig:
        return await self._run(self.config_store.update, partial)

    # ── Lifecycle ────────────────────────────────────────────

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        logger.debug("Memo service worker pool shut down")
