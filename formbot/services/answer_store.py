"""Persistent question -> answer stores, one JSON file per category.

Each file is a pretty-printed JSON object mapping the raw question text to its
answer. Stores are loaded fully into memory and rewritten in full on every
change, so a store file is either the old version or the new one, never a
half-written mix.

Loading never fails: a missing file becomes an empty store (and the file is
created), a corrupt one is copied aside to ``<file>.backup.<millis>`` and
replaced by an empty store.
"""
from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
import threading
import time
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Protocol, Tuple

from formbot.errors import PersistenceCorruption, PersistenceWriteFailure
from formbot.models.answer import Category
from formbot.models.config import StoreConfig
from formbot.utils.logger import get_logger


class StoreBackend(Protocol):
    def read_store(self, category: Category) -> Dict[str, str]:
        ...

    def write_store(self, category: Category, data: Dict[str, str]) -> None:
        ...


def _parse(path: Path) -> Dict[str, str]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise PersistenceCorruption(path, str(e)) from e
    if not isinstance(data, dict):
        raise PersistenceCorruption(path, f"expected a JSON object, got {type(data).__name__}")
    answers: Dict[str, str] = {}
    for question, answer in data.items():
        # Profile-derived answers were sometimes written as bare numbers.
        if isinstance(answer, bool) or not isinstance(answer, (str, int, float)):
            raise PersistenceCorruption(path, f"answer for {question!r} is not a string")
        answers[question] = str(answer)
    return answers


def _atomic_write_json(path: Path, data: Dict[str, str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


class JsonFileBackend:
    """Reads and writes category stores as JSON files."""

    def __init__(self, paths: Dict[Category, Path], logger: Optional[logging.Logger] = None) -> None:
        self._paths = {Category(c): Path(p) for c, p in paths.items()}
        self.logger = logger or get_logger()

    @classmethod
    def from_config(cls, cfg: StoreConfig, logger: Optional[logging.Logger] = None) -> "JsonFileBackend":
        return cls({c: cfg.path_for(c) for c in Category}, logger=logger)

    def path_for(self, category: Category) -> Path:
        return self._paths[Category(category)]

    def read_store(self, category: Category) -> Dict[str, str]:
        path = self.path_for(category)
        if not path.exists():
            self.logger.info(f"{path.name} not found. Creating a new one.")
            try:
                _atomic_write_json(path, {})
            except OSError as e:
                self.logger.error(f"Could not create {path}: {e}")
            return {}

        try:
            answers = _parse(path)
        except PersistenceCorruption as e:
            self.logger.warning(str(e))
            self._backup(path)
            return {}
        self.logger.info(f"Loaded {len(answers)} {Category(category).value} answers from {path}")
        return answers

    def write_store(self, category: Category, data: Dict[str, str]) -> None:
        path = self.path_for(category)
        try:
            _atomic_write_json(path, data)
        except (OSError, ValueError) as e:
            # lone surrogates raise UnicodeEncodeError, a ValueError
            raise PersistenceWriteFailure(path, e) from e

    def _backup(self, path: Path) -> Optional[Path]:
        backup = path.with_name(f"{path.name}.backup.{int(time.time() * 1000)}")
        try:
            shutil.copy2(path, backup)
        except OSError as e:
            self.logger.error(f"Could not back up corrupt store {path}: {e}")
            return None
        self.logger.info(f"Created backup of corrupted file at {backup}")
        return backup


class AnswerStore:
    """In-memory answers for one category, written through to a backend."""

    def __init__(
        self,
        category: Category,
        backend: StoreBackend,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.category = Category(category)
        self.backend = backend
        self.logger = logger or get_logger()
        self._lock = threading.Lock()
        self._answers: Dict[str, str] = dict(backend.read_store(self.category))

    # ── lookup ──────────────────────────────────────────────────

    def get(self, question: str) -> Optional[str]:
        return self._answers.get(question)

    def __contains__(self, question: object) -> bool:
        return question in self._answers

    def __len__(self) -> int:
        return len(self._answers)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._answers))

    def questions(self) -> List[str]:
        return list(self._answers)

    def items(self) -> List[Tuple[str, str]]:
        return list(self._answers.items())

    def snapshot(self) -> Dict[str, str]:
        return dict(self._answers)

    # ── mutation ────────────────────────────────────────────────

    def put(self, question: str, answer: str) -> bool:
        """Set an answer and rewrite the backing file.

        Returns False when the write failed; the answer is kept in memory
        for the rest of the run either way.
        """
        with self._lock:
            self._answers[question] = answer
            return self._flush()

    def clear(self) -> bool:
        with self._lock:
            self._answers.clear()
            return self._flush()

    def _flush(self) -> bool:
        try:
            self.backend.write_store(self.category, dict(self._answers))
        except PersistenceWriteFailure as e:
            self.logger.error(f"{e}; keeping the answer in memory only")
            return False
        return True
