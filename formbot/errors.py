"""Error taxonomy for the answer engine.

Store-level problems (corrupt files, failed writes) are recovered inside the
store and only logged. Resolution problems travel back to the caller.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class FormbotError(Exception):
    """Base class for all formbot errors."""


class PersistenceCorruption(FormbotError):
    """A store file exists but does not hold a JSON object of strings."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Corrupt answer store {path}: {reason}")
        self.path = path
        self.reason = reason


class PersistenceWriteFailure(FormbotError):
    """Writing a store file failed; the in-memory store is still valid."""

    def __init__(self, path: Path, cause: Exception) -> None:
        super().__init__(f"Could not write answer store {path}: {cause}")
        self.path = path
        self.cause = cause


class FallbackUnavailable(FormbotError):
    """No rule, profile value or human could answer the question."""

    def __init__(self, question: str, reason: Optional[str] = None) -> None:
        msg = f"No answer available for {question!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
        self.question = question
        self.reason = reason


class InvalidProfileConfig(FormbotError, ValueError):
    """Profile data failed validation at load time."""
