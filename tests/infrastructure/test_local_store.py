"""Tests for nippo.infrastructure.documents.local."""

from __future__ import annotations

import os
from datetime import datetime, timezone

import pytest

from nippo.domain.ports import DocumentStore
from nippo.infrastructure.documents.local import LocalDocumentStore

JAN_10 = datetime(2024, 1, 10, tzinfo=timezone.utc)
JAN_20 = datetime(2024, 1, 20, tzinfo=timezone.utc)


def _write(path, content: str, modified: datetime):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    stamp = modified.timestamp()
    os.utime(path, (stamp, stamp))
    return path


@pytest.fixture
def journal(tmp_path):
    _write(tmp_path / "b.md", "# B\n", JAN_20)
    _write(tmp_path / "a.md", "# A\n", JAN_10)
    _write(tmp_path / "sub" / "c.MD", "# C\n", JAN_20)
    _write(tmp_path / "notes.txt", "not markdown", JAN_20)
    return tmp_path


class TestList:
    def test_implements_port(self):
        assert isinstance(LocalDocumentStore(), DocumentStore)

    def test_lists_markdown_recursively_by_name(self, journal):
        docs = LocalDocumentStore().list(str(journal), extensions=[".md"])
        assert [d.name for d in docs] == ["a.md", "b.md", "c.MD"]
        assert docs[0].content == b"# A\n"
        assert docs[0].id == str((journal / "a.md").resolve())
        assert docs[0].remote_modified_at == JAN_10

    def test_non_recursive(self, journal):
        docs = LocalDocumentStore().list(str(journal), extensions=["md"], recursive=False)
        assert [d.name for d in docs] == ["a.md", "b.md"]

    def test_modified_since_is_inclusive(self, journal):
        docs = LocalDocumentStore().list(str(journal), extensions=[".md"], modified_since=JAN_20)
        assert [d.name for d in docs] == ["b.md", "c.MD"]

    def test_order_by_modified(self, journal):
        docs = LocalDocumentStore().list(
            str(journal), extensions=[".md"], order_by="modified", recursive=False,
        )
        assert [d.name for d in docs] == ["a.md", "b.md"]

    def test_without_content(self, journal):
        docs = LocalDocumentStore().list(str(journal), extensions=[".md"], with_content=False)
        assert all(d.content == b"" for d in docs)

    def test_relative_to_root(self, journal):
        docs = LocalDocumentStore(root=journal).list("sub", extensions=[".md"])
        assert [d.name for d in docs] == ["c.MD"]

    def test_unknown_order(self, journal):
        with pytest.raises(ValueError):
            LocalDocumentStore().list(str(journal), extensions=[".md"], order_by="size")

    def test_missing_folder(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LocalDocumentStore().list(str(tmp_path / "nope"), extensions=[".md"])


class TestUpdate:
    def test_overwrites_content(self, journal):
        store = LocalDocumentStore()
        doc = store.list(str(journal), extensions=[".md"])[0]
        store.update(doc.id, b"---\ncreated: 2024-01-10T00:00:00Z\n---\n\n# A\n")
        assert (journal / "a.md").read_bytes().startswith(b"---\ncreated:")

    def test_missing_document(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LocalDocumentStore().update(str(tmp_path / "gone.md"), b"x")
