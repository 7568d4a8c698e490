"""File-selection collaborator used by dialog-driven import."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class FilePicker(Protocol):
    """Anything that can ask the user for files to import."""

    def pick_files(self) -> Sequence[Path] | None:
        """Return the chosen paths, or None when the user cancels."""
        ...


class PathListPicker:
    """Picker that "selects" a fixed list of paths, e.g. from the command line."""

    def __init__(self, paths: Sequence[str | Path]) -> None:
        self._paths = [Path(p) for p in paths]

    def pick_files(self) -> list[Path] | None:
        return list(self._paths) or None
