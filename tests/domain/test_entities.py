"""Tests for nippo.domain entities and enums."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from nippo.domain.entities import FrontMatter, RemoteDocument, SyncCheckpoint
from nippo.domain.enums import OutcomeStatus, SyncState


class TestOutcomeStatus:
    def test_closed_set(self):
        assert {s.value for s in OutcomeStatus} == {"updated", "no-change", "failed"}


class TestSyncState:
    def test_states(self):
        assert [s.value for s in SyncState] == [
            "idle", "fetching", "processing", "finalizing", "done",
        ]


class TestFrontMatter:
    def test_defaults(self):
        fm = FrontMatter()
        assert fm.created is None
        assert fm.fields == {}
        assert not fm.has_updated_placeholder

    def test_field_order_preserved(self):
        fm = FrontMatter(fields={"z": 1, "a": 2, "created": "x"})
        assert list(fm.fields) == ["z", "a", "created"]


class TestRemoteDocument:
    def test_defaults(self):
        doc = RemoteDocument(id="abc", name="2024-01-15.md")
        assert doc.content == b""
        assert doc.remote_created_at is None
        assert doc.remote_modified_at is None


class TestSyncCheckpoint:
    def test_json_round_trip(self):
        checkpoint = SyncCheckpoint(last_sync_time=datetime(2024, 1, 16, tzinfo=timezone.utc))
        restored = SyncCheckpoint.model_validate_json(checkpoint.model_dump_json())
        assert restored == checkpoint

    def test_unset(self):
        assert SyncCheckpoint().last_sync_time is None

    def test_offset_required(self):
        with pytest.raises(ValidationError):
            SyncCheckpoint.model_validate_json('{"last_sync_time": "2024-01-16T10:00:00"}')
