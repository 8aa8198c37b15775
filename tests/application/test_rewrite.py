"""Tests for nippo.application.rewrite."""

from datetime import datetime, timedelta, timezone

import pytest

from nippo.application.decision import decide
from nippo.application.rewrite import rewrite_document
from nippo.domain.entities import RemoteDocument
from nippo.domain.exceptions import FrontMatterError

JST = timezone(timedelta(hours=9))
REMOTE_CREATED = datetime(2024, 1, 15, 0, 30, tzinfo=timezone.utc)
REMOTE_MODIFIED = datetime(2024, 1, 16, 1, 0, tzinfo=timezone.utc)
CLOCK = datetime(2030, 1, 1, tzinfo=timezone.utc)


def _document(content: str, **overrides) -> RemoteDocument:
    fields = dict(
        id="file-1",
        name="2024-01-15.md",
        remote_created_at=REMOTE_CREATED,
        remote_modified_at=REMOTE_MODIFIED,
        content=content.encode("utf-8"),
    )
    fields.update(overrides)
    return RemoteDocument(**fields)


def _rewrite(document: RemoteDocument) -> str:
    text = document.content.decode("utf-8")
    result = rewrite_document(document, decide(text), tz=JST, clock=lambda: CLOCK)
    return result.decode("utf-8")


class TestRewriteDocument:
    def test_adds_front_matter_from_remote_created(self):
        result = _rewrite(_document("# Content"))
        assert result == "---\ncreated: 2024-01-15T09:30:00+09:00\n---\n\n# Content"

    def test_replaces_placeholder_with_remote_modified(self):
        result = _rewrite(_document(
            "---\ncreated: 2024-01-15T09:30:00+09:00\nupdated: now\n---\n# C"
        ))
        assert "updated: 2024-01-16T10:00:00+09:00\n" in result
        assert "created: 2024-01-15T09:30:00+09:00\n" in result

    def test_adds_created_to_existing_block(self):
        result = _rewrite(_document("---\ntitle: Monday\n---\n# C"))
        assert result.startswith("---\ncreated: 2024-01-15T09:30:00+09:00\ntitle: Monday\n")

    def test_missing_remote_timestamps_fall_back_to_clock(self):
        document = _document("# Content", remote_created_at=None, remote_modified_at=None)
        assert "created: 2030-01-01T09:00:00+09:00" in _rewrite(document)

    def test_compliant_document_is_returned_as_is(self):
        document = _document("---\ncreated: 2024-01-15T09:30:00+09:00\n---\n# C")
        assert rewrite_document(document, decide("---\ncreated: 2024-01-15\n---\n")) is document.content

    def test_already_target_form_is_byte_identical(self):
        document = _document("---\ncreated: 2024-01-15T09:30:00+09:00\n---\n\n# C")
        text = document.content.decode("utf-8")
        assert rewrite_document(document, decide(text), tz=JST) == document.content

    def test_parse_error_propagates(self):
        document = _document("---\nupdated: now\ncreated: [\n---\n# C")
        with pytest.raises(FrontMatterError):
            _rewrite(document)
