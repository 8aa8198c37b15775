"""Tests for nippo.infrastructure.presenter.console."""

from __future__ import annotations

import signal

import pytest

from nippo.domain.entities import FileInfo
from nippo.domain.enums import OutcomeStatus
from nippo.domain.ports import SyncPresenter
from nippo.infrastructure.presenter.console import ConsolePresenter


class TestProgress:
    def test_implements_port(self):
        assert isinstance(ConsolePresenter(), SyncPresenter)

    def test_start_and_items(self, capsys):
        presenter = ConsolePresenter()
        presenter.on_start(2)
        presenter.on_item_result("a.md", "id-a", OutcomeStatus.UPDATED, "added front-matter")
        presenter.on_item_result("b.md", "id-b", OutcomeStatus.FAILED, "malformed front-matter")

        out = capsys.readouterr().out
        assert "Formatting 2 file(s)" in out
        assert "✓ [1/2] a.md" in out
        assert "added front-matter" in out
        assert "✗ [2/2] b.md" in out

    def test_quiet_hides_unchanged(self, capsys):
        presenter = ConsolePresenter(quiet=True)
        presenter.on_start(2)
        presenter.on_item_result("a.md", "id-a", OutcomeStatus.NO_CHANGE, "no changes needed")
        presenter.on_item_result("b.md", "id-b", OutcomeStatus.UPDATED, "added created field")

        out = capsys.readouterr().out
        assert "a.md" not in out
        assert "[2/2] b.md" in out

    def test_summary(self, capsys):
        ConsolePresenter().on_summary(
            1, 3, 1,
            [FileInfo(name="a.md", id="id-a")],
            [FileInfo(name="b.md", id="id-b")],
        )
        out = capsys.readouterr().out
        assert "Updated files:" in out
        assert "Failed files:" in out
        assert "b.md (id-b)" in out
        assert "Format complete: 1 updated, 3 unchanged, 1 failed" in out

    def test_summary_without_lists(self, capsys):
        ConsolePresenter().on_summary(0, 2, 0, [], [])
        out = capsys.readouterr().out
        assert "Updated files:" not in out
        assert "Failed files:" not in out

    def test_complete(self, capsys):
        ConsolePresenter().on_complete("No files to process.")
        assert capsys.readouterr().out == "No files to process.\n"


class TestCancellation:
    def test_cancel_flag(self):
        presenter = ConsolePresenter()
        assert not presenter.is_cancelled()
        presenter.cancel()
        assert presenter.is_cancelled()

    def test_sigint_sets_flag_and_restores_handler(self):
        presenter = ConsolePresenter()
        before = signal.getsignal(signal.SIGINT)

        with presenter.interruptible():
            handler = signal.getsignal(signal.SIGINT)
            handler(signal.SIGINT, None)

        assert presenter.is_cancelled()
        assert signal.getsignal(signal.SIGINT) is before

    def test_unknown_status(self):
        presenter = ConsolePresenter()
        presenter.on_start(1)
        with pytest.raises(ValueError):
            presenter.on_item_result("a.md", "id-a", "skipped", "")
