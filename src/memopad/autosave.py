"""Debounced auto-save for the memo being edited.

Each content change restarts a timer; when it expires without further
changes the memo is saved under its title. Blank or unchanged content is
never written. Save failures are logged and the edit stays pending.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

SaveFunc = Callable[[str, str, "str | None"], Awaitable[str]]


class AutoSaver:
    """Debounces `save(title, content, old_filename)` calls."""

    def __init__(
        self,
        save: SaveFunc,
        delay_ms: int = 1000,
        on_saved: Callable[[str], None] | None = None,
    ) -> None:
        self._save = save
        self.delay_ms = delay_ms
        self._on_saved = on_saved
        self._title: str | None = None
        self._filename: str | None = None
        self._saved_content = ""
        self._pending: str | None = None
        self._timer: asyncio.Task | None = None
        self._generation = 0

    @property
    def filename(self) -> str | None:
        return self._filename

    def track(self, title: str, filename: str, content: str) -> None:
        """Switch to another memo; its current content is the new baseline."""
        self._cancel_timer()
        self._generation += 1
        self._title = title
        self._filename = filename
        self._saved_content = content
        self._pending = None

    def update(self, content: str) -> None:
        """Record an edit and (re)start the debounce timer."""
        if self._filename is None:
            return
        if content == self._saved_content or not content.strip():
            self._cancel_timer()
            self._pending = None
            return
        self._pending = content
        self._cancel_timer()
        self._timer = asyncio.create_task(self._fire_later())

    async def flush(self) -> str | None:
        """Save a pending edit right away. Returns the filename written, if any."""
        self._cancel_timer()
        return await self._save_pending()

    async def close(self) -> None:
        timer = self._cancel_timer()
        if timer is not None:
            try:
                await timer
            except asyncio.CancelledError:
                pass

    async def _fire_later(self) -> None:
        await asyncio.sleep(self.delay_ms / 1000)
        self._timer = None
        await self._save_pending()

    async def _save_pending(self) -> str | None:
        content = self._pending
        if content is None or self._filename is None:
            return None
        title = self._title or "Untitled"
        old_filename = self._filename
        generation = self._generation
        try:
            new_filename = await self._save(title, content, old_filename)
        except Exception:
            logger.exception("Auto-save failed for %s", old_filename)
            return None

        logger.debug("Auto-saved %s", new_filename)
        # A track() during the save switched memos; keep the new one.
        if generation == self._generation:
            if self._pending is content:
                self._pending = None
            self._saved_content = content
            self._filename = new_filename
        if new_filename != old_filename and self._on_saved is not None:
            self._on_saved(new_filename)
        return new_filename

    def _cancel_timer(self) -> asyncio.Task | None:
        timer, self._timer = self._timer, None
        if timer is not None and not timer.done():
            timer.cancel()
        return timer
