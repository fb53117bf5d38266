"""Persistent input history for the shell."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional

LOGGER = logging.getLogger("burrow.history")

DEFAULT_HISTORY_PATH = Path.home() / ".burrow_history"
DEFAULT_HISTORY_LIMIT = 1000


def default_history_path() -> Path:
    override = os.environ.get("BURROW_HISTORY")
    return Path(override).expanduser() if override else DEFAULT_HISTORY_PATH


class HistoryStore:
    """File-backed list of submitted lines, capped at ``limit`` entries."""

    def __init__(self, path: Optional[str] = None, *, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self.limit = max(1, int(limit or 1))
        self.path = Path(path).expanduser() if path else None
        self.entries: List[str] = []
        if self.path:
            self._load()

    def _load(self) -> None:
        try:
            data = self.path.read_text(encoding="utf-8")  # type: ignore[union-attr]
        except FileNotFoundError:
            return
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.debug("history load failed for %s: %s", self.path, exc)
            return
        lines = [line.rstrip() for line in data.splitlines() if line.strip()]
        self.entries = lines[-self.limit :]

    def append(self, line: str) -> None:
        text = line.strip()
        if not text:
            return
        if self.entries and self.entries[-1] == text:
            return
        self.entries.append(text)
        if len(self.entries) > self.limit:
            self.entries = self.entries[-self.limit :]
        self._persist()

    def _persist(self) -> None:
        if not self.path:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("\n".join(self.entries) + "\n", encoding="utf-8")
        except OSError as exc:
            # A history file we cannot write must not break the shell.
            LOGGER.debug("history persist failed for %s: %s", self.path, exc)

    def snapshot(self) -> List[str]:
        return list(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self.entries))


__all__ = ["HistoryStore", "default_history_path", "DEFAULT_HISTORY_LIMIT"]
