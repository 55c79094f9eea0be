"""
Decision Log.

Append-only, subscribable record of every routing and execution attempt.

Contract:
- append() assigns a fresh id and status=Processing when unset
- every mutation persists, then notifies all subscribers with the full
  list (newest first)
- subscribe() delivers the current list immediately
- status is monotonic: Processing -> Success | Reverted, then frozen
- nothing here raises: persistence and subscriber failures are logged

All operations are synchronous. The log is an ordinary object with a
lifecycle (construct at startup, close() at teardown); there is no
module-level state.

Usage:
    log = DecisionLog(JsonFileLogStorage(data_dir))

    unsubscribe = log.subscribe(lambda entries: render(entries))
    entry_id = log.append(DecisionLogEntry(agent="System", action="THINKING"))
    log.append_console(entry_id, "Requesting LLM inference...")
    log.update(entry_id, status=EntryStatus.SUCCESS)
    unsubscribe()
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Mapping
from dataclasses import fields, replace
from typing import Any

from agentchain.errors import PersistenceError

from .entry import DecisionLogEntry, EntryStatus, EntryType, Phase
from .storage import InMemoryLogStorage, LogStorage

logger = logging.getLogger(__name__)

Subscriber = Callable[[list[DecisionLogEntry]], None]
Unsubscribe = Callable[[], None]

_ENTRY_FIELDS = frozenset(f.name for f in fields(DecisionLogEntry))
_IMMUTABLE_FIELDS = frozenset({"id"})


class DecisionLog:
    """
    In-memory decision log backed by a LogStorage.

    Example:
        log = DecisionLog()
        entry_id = log.append(DecisionLogEntry(action="SEND TRANSACTION", amount="5"))
        log.update(entry_id, status=EntryStatus.REVERTED)
        assert log.get(entry_id).status is EntryStatus.REVERTED
    """

    def __init__(
        self,
        storage: LogStorage | None = None,
        *,
        max_entries: int | None = None,
    ):
        """
        Args:
            storage: Durable backend (in-memory when None)
            max_entries: Keep at most this many entries (oldest dropped)
        """
        self._storage = storage or InMemoryLogStorage()
        self._max_entries = max_entries
        self._subscribers: dict[int, Subscriber] = {}
        self._tokens = itertools.count(1)
        self._closed = False

        try:
            self._entries = self._storage.load()
        except Exception as e:
            logger.error(f"[decision_log] Failed to load stored entries: {e}", exc_info=True)
            self._entries = []

        self._entries.sort(key=lambda entry: entry.id or 0, reverse=True)
        last_id = max((entry.id or 0 for entry in self._entries), default=0)
        self._ids = itertools.count(last_id + 1)

        logger.debug(f"[decision_log] Loaded {len(self._entries)} entries")

    # =========================================================================
    # Queries
    # =========================================================================

    def list(self) -> list[DecisionLogEntry]:
        """All entries, newest first."""
        return list(self._entries)

    def get(self, entry_id: int) -> DecisionLogEntry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    # =========================================================================
    # Mutations
    # =========================================================================

    def append(self, entry: DecisionLogEntry) -> int:
        """
        Add an entry at the head of the log.

        Returns:
            The freshly assigned id
        """
        entry_id = next(self._ids)
        stored = replace(
            entry,
            id=entry_id,
            status=entry.status or EntryStatus.PROCESSING,
        )

        self._entries.insert(0, stored)
        if self._max_entries is not None and len(self._entries) > self._max_entries:
            del self._entries[self._max_entries :]

        self._commit()
        return entry_id

    def update(
        self,
        entry_id: int,
        changes: Mapping[str, Any] | None = None,
        **fields_: Any,
    ) -> DecisionLogEntry | None:
        """
        Merge fields into an entry.

        No-op when the id is absent. A status change on a terminal entry
        is ignored (the other fields still merge).

        Returns:
            The updated entry, or None if the id is unknown
        """
        merged = {**(changes or {}), **fields_}
        index = self._index_of(entry_id)
        if index is None:
            logger.debug(f"[decision_log] Update for unknown entry {entry_id} ignored")
            return None

        current = self._entries[index]
        updates = self._coerce_changes(current, merged)
        if not updates:
            return current

        updated = replace(current, **updates)
        self._entries[index] = updated
        self._commit()
        return updated

    def append_console(self, entry_id: int, *lines: str) -> DecisionLogEntry | None:
        """Append console lines to an entry."""
        current = self.get(entry_id)
        if current is None or not lines:
            return current
        return self.update(entry_id, console_logs=current.console_logs + tuple(lines))

    def add_phase(self, entry_id: int, phase: Phase) -> DecisionLogEntry | None:
        current = self.get(entry_id)
        if current is None:
            return None
        return self.update(entry_id, phases=current.phases + (phase,))

    def clear(self) -> None:
        """Remove every entry (ids keep increasing)."""
        self._entries = []
        self._commit()

    # =========================================================================
    # Subscriptions
    # =========================================================================

    def subscribe(self, callback: Subscriber) -> Unsubscribe:
        """
        Register a callback for log changes.

        The callback receives the current list right away. Subscribing the
        same callback twice creates two independent subscriptions.

        Returns:
            Function that removes this subscription (idempotent)
        """
        token = next(self._tokens)
        self._subscribers[token] = callback
        self._deliver(callback, self.list())

        def unsubscribe() -> None:
            self._subscribers.pop(token, None)

        return unsubscribe

    def close(self) -> None:
        """Drop all subscribers. The stored entries are kept."""
        self._subscribers.clear()
        self._closed = True
        logger.debug("[decision_log] Closed")

    # =========================================================================
    # Internals
    # =========================================================================

    def _index_of(self, entry_id: int) -> int | None:
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return index
        return None

    def _coerce_changes(self, current: DecisionLogEntry, changes: dict[str, Any]) -> dict[str, Any]:
        updates: dict[str, Any] = {}

        for name, value in changes.items():
            if name not in _ENTRY_FIELDS or name in _IMMUTABLE_FIELDS:
                logger.warning(f"[decision_log] Ignoring change to field '{name}'")
                continue

            try:
                value = self._coerce_value(name, value)
            except (ValueError, TypeError):
                logger.warning(f"[decision_log] Ignoring invalid {name}: {value!r}")
                continue

            if name == "status" and current.is_terminal and value != current.status:
                logger.warning(
                    f"[decision_log] Entry {current.id} is {current.status.value}; "
                    f"ignoring transition to {value.value}"
                )
                continue

            updates[name] = value

        return updates

    @staticmethod
    def _coerce_value(name: str, value: Any) -> Any:
        if name == "status":
            return EntryStatus(value)
        if name == "type":
            return EntryType(value)
        if name in ("console_logs", "phases"):
            return tuple(value)
        return value

    def _commit(self) -> None:
        snapshot = self.list()

        try:
            self._storage.save(snapshot)
        except PersistenceError as e:
            logger.error(f"[decision_log] {e}")
        except Exception as e:
            logger.error(f"[decision_log] Persistence failed: {e}", exc_info=True)

        for callback in list(self._subscribers.values()):
            self._deliver(callback, snapshot)

    def _deliver(self, callback: Subscriber, snapshot: list[DecisionLogEntry]) -> None:
        try:
            callback(list(snapshot))
        except Exception as e:
            logger.error(f"[decision_log] Subscriber failed: {e}", exc_info=True)


__all__ = [
    "DecisionLog",
    "Subscriber",
    "Unsubscribe",
]
