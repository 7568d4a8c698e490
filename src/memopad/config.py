"""Configuration: runtime settings (memopad.toml + env) and the user config document."""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from memopad.memo.errors import ConfigError
from memopad.memo.paths import ensure_dir

logger = logging.getLogger(__name__)

_CONFIG_DIR = Path.home() / ".memo-app"
_SETTINGS_FILENAME = "memopad.toml"
_DEFAULT_CONFIG_FILE = _CONFIG_DIR / "config.json"
_DEFAULT_MEMO_DIR = Path.home() / "Documents" / "Memos"
_DEFAULT_AUTO_SAVE_DELAY = 1000


@dataclass
class Settings:
    """Process-level settings; not editable from the UI."""

    config_file: Path = _DEFAULT_CONFIG_FILE
    log_level: str = "INFO"
    max_workers: int = 4


def load_settings(settings_path: Path | None = None) -> Settings:
    """Load settings from environment variables and optional memopad.toml.

    Priority: environment variables > memopad.toml > defaults.
    """
    file_data: dict = {}
    if settings_path and settings_path.exists():
        file_data = tomllib.loads(settings_path.read_text())
    else:
        for candidate in [Path.cwd() / _SETTINGS_FILENAME, _CONFIG_DIR / _SETTINGS_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    return Settings(
        config_file=Path(
            os.getenv("MEMOPAD_CONFIG_FILE", file_data.get("config_file", str(_DEFAULT_CONFIG_FILE)))
        ).expanduser(),
        log_level=os.getenv("MEMOPAD_LOG_LEVEL", file_data.get("log_level", "INFO")),
        max_workers=int(os.getenv("MEMOPAD_WORKERS", file_data.get("max_workers", 4))),
    )


@dataclass
class AppConfig:
    """The user-editable config document."""

    memo_directory: str = str(_DEFAULT_MEMO_DIR)
    auto_save_delay: int = _DEFAULT_AUTO_SAVE_DELAY

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> AppConfig:
        memo_directory = d.get("memoDirectory")
        auto_save_delay = d.get("autoSaveDelay")
        if not isinstance(memo_directory, str):
            raise ConfigError("memoDirectory must be a string")
        if not _is_delay(auto_save_delay):
            raise ConfigError("autoSaveDelay must be a non-negative integer")
        return cls(memo_directory=memo_directory, auto_save_delay=auto_save_delay)

    def to_dict(self) -> dict[str, Any]:
        return {"memoDirectory": self.memo_directory, "autoSaveDelay": self.auto_save_delay}

    @property
    def memo_path(self) -> Path:
        return Path(self.memo_directory).expanduser()


def _is_delay(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class ConfigStore:
    """Reads and writes the JSON config document at a fixed path."""

    def __init__(self, path: Path = _DEFAULT_CONFIG_FILE) -> None:
        self.path = path

    def load(self) -> AppConfig:
        """Return the stored config, or defaults when no document exists."""
        if not self.path.exists():
            return AppConfig()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigError(f"Failed to read config file: {exc}") from exc
        except ValueError as exc:
            raise ConfigError(f"Failed to parse config: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError("Failed to parse config: top level is not an object")
        return AppConfig.from_dict(data)

    def save(self, config: AppConfig) -> None:
        ensure_dir(self.path.parent)
        content = json.dumps(config.to_dict(), ensure_ascii=False, indent=2)
        try:
            self.path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Failed to write config file: {exc}") from exc
        logger.info("Saved config to %s", self.path)

    def update(self, partial: dict[str, Any]) -> AppConfig:
        """Merge recognised keys of `partial` into the stored config and persist it."""
        config = self.load()
        memo_directory = partial.get("memoDirectory")
        if isinstance(memo_directory, str):
            config.memo_directory = memo_directory
        auto_save_delay = partial.get("autoSaveDelay")
        if _is_delay(auto_save_delay):
            config.auto_save_delay = auto_save_delay
        self.save(config)
        return config

    def memo_directory(self) -> Path:
        """Directory resolver handed to the memo store."""
        return self.load().memo_path
