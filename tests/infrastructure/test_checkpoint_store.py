"""Tests for nippo.infrastructure.checkpoint.filesystem."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from nippo.domain.exceptions import PersistenceError
from nippo.domain.ports import CheckpointStore
from nippo.infrastructure.checkpoint.filesystem import FileCheckpointStore

JST = timezone(timedelta(hours=9))


class TestFileCheckpointStore:
    def test_implements_port(self, tmp_path):
        assert isinstance(FileCheckpointStore(tmp_path / "cp.json"), CheckpointStore)

    def test_missing_file_is_unset(self, tmp_path):
        store = FileCheckpointStore(tmp_path / "cp.json")
        assert store.get_last_sync_time() is None

    def test_set_does_not_write(self, tmp_path):
        path = tmp_path / "cp.json"
        store = FileCheckpointStore(path)
        store.set_last_sync_time(datetime(2024, 1, 16, 10, tzinfo=JST))
        assert not path.exists()

    def test_persist_and_reload(self, tmp_path):
        path = tmp_path / "nested" / "cp.json"
        moment = datetime(2024, 1, 16, 10, tzinfo=JST)

        store = FileCheckpointStore(path)
        store.set_last_sync_time(moment)
        store.persist()

        assert path.exists()
        assert json.loads(path.read_text())["last_sync_time"].startswith("2024-01-16T10:00:00")

        reloaded = FileCheckpointStore(path).get_last_sync_time()
        assert reloaded == moment
        assert reloaded.utcoffset() == timedelta(hours=9)

    def test_persist_leaves_no_temp_files(self, tmp_path):
        store = FileCheckpointStore(tmp_path / "cp.json")
        store.set_last_sync_time(datetime(2024, 1, 1, tzinfo=timezone.utc))
        store.persist()
        assert [p.name for p in tmp_path.iterdir()] == ["cp.json"]

    def test_overwrite(self, tmp_path):
        path = tmp_path / "cp.json"
        store = FileCheckpointStore(path)
        store.set_last_sync_time(datetime(2024, 1, 1, tzinfo=timezone.utc))
        store.persist()
        store.set_last_sync_time(datetime(2024, 2, 1, tzinfo=timezone.utc))
        store.persist()
        assert FileCheckpointStore(path).get_last_sync_time() == datetime(
            2024, 2, 1, tzinfo=timezone.utc,
        )

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "cp.json"
        path.write_text("{not json")
        with pytest.raises(PersistenceError):
            FileCheckpointStore(path).get_last_sync_time()

    def test_unwritable_location(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = FileCheckpointStore(blocker / "cp.json")
        store.set_last_sync_time(datetime(2024, 1, 1, tzinfo=timezone.utc))
        with pytest.raises(PersistenceError):
            store.persist()

    def test_timestamp_without_offset(self, tmp_path):
        path = tmp_path / "cp.json"
        path.write_text('{"last_sync_time": "2024-01-16T10:00:00"}')
        with pytest.raises(PersistenceError):
            FileCheckpointStore(path).get_last_sync_time()
