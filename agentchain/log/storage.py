"""
Decision log storage backends.

A backend stores the whole log as one JSON array per namespace:

    <directory>/<namespace>.json  ->  [{"id": 3, ...}, {"id": 2, ...}, ...]

The array is versionless. Loading skips entries that cannot be parsed
instead of discarding the whole log. With several writers on the same
namespace the last save wins; give each session its own namespace to
keep them apart.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from agentchain.errors import PersistenceError

from .entry import DecisionLogEntry

logger = logging.getLogger(__name__)

#: Storage namespace used by the activity feeds
DEFAULT_NAMESPACE = "defy_activity_logs"


@runtime_checkable
class LogStorage(Protocol):
    """Durable store for decision log entries (newest first)."""

    def load(self) -> list[DecisionLogEntry]:
        ...

    def save(self, entries: list[DecisionLogEntry]) -> None:
        """Persist the full list. Raises PersistenceError on failure."""
        ...


class InMemoryLogStorage:
    """
    Storage kept in process memory.

    Used in tests and when persistence is disabled. Entries survive
    across DecisionLog instances sharing the same storage object.
    """

    def __init__(self, entries: list[DecisionLogEntry] | None = None):
        self._entries: list[DecisionLogEntry] = list(entries or [])
        self.save_count = 0

    def load(self) -> list[DecisionLogEntry]:
        return list(self._entries)

    def save(self, entries: list[DecisionLogEntry]) -> None:
        self._entries = list(entries)
        self.save_count += 1


class JsonFileLogStorage:
    """
    Storage in a JSON file, written atomically (temp file + rename).

    Example:
        storage = JsonFileLogStorage(Path("~/.agentchain").expanduser())
        log = DecisionLog(storage)
    """

    def __init__(self, directory: str | Path, namespace: str = DEFAULT_NAMESPACE):
        self.directory = Path(directory)
        self.namespace = namespace

    @property
    def path(self) -> Path:
        return self.directory / f"{self.namespace}.json"

    def load(self) -> list[DecisionLogEntry]:
        if not self.path.exists():
            return []

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"[decision_log] Failed to load {self.path}: {e}")
            return []

        if not isinstance(raw, list):
            logger.error(f"[decision_log] Ignoring {self.path}: expected a JSON array")
            return []

        entries: list[DecisionLogEntry] = []
        for item in raw:
            try:
                entries.append(DecisionLogEntry.from_dict(item))
            except (ValueError, TypeError, KeyError, AttributeError) as e:
                logger.warning(f"[decision_log] Skipping malformed stored entry: {e}")
        return entries

    def save(self, entries: list[DecisionLogEntry]) -> None:
        temp_path: str | None = None
        try:
            content = json.dumps([entry.to_dict() for entry in entries], indent=2, ensure_ascii=False)
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                dir=self.directory,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(content)
                fh.flush()
                os.fsync(fh.fileno())
            Path(temp_path).replace(self.path)
        except (OSError, TypeError, ValueError) as e:
            if temp_path:
                Path(temp_path).unlink(missing_ok=True)
            raise PersistenceError(f"Failed to save decision log to {self.path}: {e}") from e


__all__ = [
    "DEFAULT_NAMESPACE",
    "InMemoryLogStorage",
    "JsonFileLogStorage",
    "LogStorage",
]
