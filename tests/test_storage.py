"""
Tests for decision log storage backends and entry serialization.
"""

import json
import os

import pytest

from agentchain.errors import PersistenceError
from agentchain.log import (
    DEFAULT_NAMESPACE,
    DecisionLog,
    DecisionLogEntry,
    EntryStatus,
    EntryType,
    JsonFileLogStorage,
    Phase,
    PhaseStatus,
)


class TestDecisionLogEntry:
    """Tests for entry serialization."""

    def test_to_dict_uses_stored_keys(self):
        entry = DecisionLogEntry(
            id=3,
            agent="System",
            action="SEND TRANSACTION",
            amount="5",
            type=EntryType.CONFIDENTIAL,
            status=EntryStatus.SUCCESS,
            console_logs=("Executing tool: send_transaction",),
            phases=(Phase("Execute", 40),),
        )

        data = entry.to_dict()

        assert data["type"] == "CONFIDENTIAL"
        assert data["status"] == "Success"
        assert data["consoleLogs"] == ["Executing tool: send_transaction"]
        assert "console_logs" not in data
        assert data["phases"] == [
            {"title": "Execute", "offsetMs": 40, "status": "done", "detail": ""}
        ]

    def test_from_dict_restores_entry(self):
        entry = DecisionLogEntry(
            id=1,
            action="THINKING",
            status=EntryStatus.REVERTED,
            console_logs=("a", "b"),
            phases=(Phase("Inference", 5, PhaseStatus.FAILED, "error"),),
        )
        assert DecisionLogEntry.from_dict(entry.to_dict()) == entry

    def test_from_dict_defaults_missing_status(self):
        entry = DecisionLogEntry.from_dict({"id": 1})
        assert entry.status is EntryStatus.PROCESSING
        assert entry.amount == "N/A"

    def test_from_dict_requires_id(self):
        with pytest.raises(KeyError):
            DecisionLogEntry.from_dict({"action": "THINKING"})


class TestJsonFileLogStorage:
    """Tests for JsonFileLogStorage."""

    def test_default_namespace(self, tmp_path):
        storage = JsonFileLogStorage(tmp_path)
        assert storage.path == tmp_path / f"{DEFAULT_NAMESPACE}.json"

    def test_missing_file_loads_empty(self, tmp_path):
        assert JsonFileLogStorage(tmp_path / "nowhere").load() == []

    def test_save_writes_json_array(self, tmp_path):
        storage = JsonFileLogStorage(tmp_path, "session-a")
        storage.save([DecisionLogEntry(id=1, action="THINKING", status=EntryStatus.SUCCESS)])

        data = json.loads(storage.path.read_text(encoding="utf-8"))
        assert isinstance(data, list)
        assert data[0]["action"] == "THINKING"

    def test_save_leaves_no_temp_files(self, tmp_path):
        storage = JsonFileLogStorage(tmp_path)
        storage.save([DecisionLogEntry(id=1)])
        storage.save([DecisionLogEntry(id=2), DecisionLogEntry(id=1)])

        assert [path.name for path in tmp_path.iterdir()] == [storage.path.name]

    def test_save_syncs_before_replace(self, tmp_path, monkeypatch):
        storage = JsonFileLogStorage(tmp_path)
        synced: list[bool] = []
        real_fsync = os.fsync

        def record_fsync(fd):
            # The target file must not exist yet when the temp file is synced
            synced.append(storage.path.exists())
            real_fsync(fd)

        monkeypatch.setattr(os, "fsync", record_fsync)
        storage.save([DecisionLogEntry(id=1)])

        assert synced == [False]
        assert storage.path.exists()

    def test_round_trip_through_decision_log(self, tmp_path):
        log = DecisionLog(JsonFileLogStorage(tmp_path))
        entry_id = log.append(DecisionLogEntry(action="SEND TRANSACTION", amount="5"))
        log.update(entry_id, status=EntryStatus.REVERTED)

        reloaded = DecisionLog(JsonFileLogStorage(tmp_path))

        assert reloaded.list() == log.list()
        assert reloaded.append(DecisionLogEntry()) == entry_id + 1

    def test_skips_malformed_entries(self, tmp_path):
        storage = JsonFileLogStorage(tmp_path)
        storage.path.write_text(
            json.dumps([{"id": 1, "action": "OK"}, {"action": "no id"}, {"id": 2, "type": "WEIRD"}]),
            encoding="utf-8",
        )

        entries = storage.load()

        assert [entry.id for entry in entries] == [1]

    def test_corrupt_file_loads_empty(self, tmp_path):
        storage = JsonFileLogStorage(tmp_path)
        storage.path.write_text("{not json", encoding="utf-8")
        assert storage.load() == []

    def test_non_array_file_loads_empty(self, tmp_path):
        storage = JsonFileLogStorage(tmp_path)
        storage.path.write_text('{"id": 1}', encoding="utf-8")
        assert storage.load() == []

    def test_save_failure_raises_persistence_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        storage = JsonFileLogStorage(blocker / "logs")

        with pytest.raises(PersistenceError):
            storage.save([DecisionLogEntry(id=1)])

    def test_namespaces_are_isolated(self, tmp_path):
        JsonFileLogStorage(tmp_path, "a").save([DecisionLogEntry(id=1, action="A")])
        JsonFileLogStorage(tmp_path, "b").save([DecisionLogEntry(id=1, action="B")])

        assert JsonFileLogStorage(tmp_path, "a").load()[0].action == "A"
        assert JsonFileLogStorage(tmp_path, "b").load()[0].action == "B"
