"""Exceptions raised by memo operations."""

from __future__ import annotations


class MemoError(Exception):
    """Base class for every failure surfaced to the caller."""


class MemoIOError(MemoError):
    """A file or directory could not be read, written or stat'ed."""


class MemoNotFoundError(MemoError):
    """The named memo does not exist in the memo directory."""


class UnsupportedTypeError(MemoError):
    """A file extension other than .md / .txt was offered."""


class CapacityExceededError(MemoError):
    """No free filename left after exhausting the numeric suffixes."""


class ConfigError(MemoError):
    """The config document is unreadable or malformed."""
