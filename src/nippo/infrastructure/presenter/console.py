"""Console presenter for the ``nippo format`` command.

Prints one line per visited document and a closing summary with click.
Cancellation is cooperative: SIGINT (Ctrl+C) inside ``interruptible()``
only raises a flag that the run polls before each document, so an upload
already in flight always finishes.
"""

from __future__ import annotations

import signal
from contextlib import contextmanager
from typing import Any, Iterator

import click

from nippo.domain.entities import FileInfo
from nippo.domain.enums import OutcomeStatus

ICON_SUCCESS = "✓"
ICON_FAILED = "✗"
ICON_NO_CHANGE = "○"


def _status_icon(status: OutcomeStatus) -> str:
    if status is OutcomeStatus.UPDATED:
        return click.style(ICON_SUCCESS, fg="green")
    if status is OutcomeStatus.NO_CHANGE:
        return click.style(ICON_NO_CHANGE, dim=True)
    if status is OutcomeStatus.FAILED:
        return click.style(ICON_FAILED, fg="red")
    raise ValueError(f"unhandled outcome status: {status!r}")


class ConsolePresenter:
    """Implements the ``SyncPresenter`` port on top of ``click.echo``."""

    def __init__(self, *, quiet: bool = False) -> None:
        self._quiet = quiet
        self._cancelled = False
        self._total = 0
        self._seen = 0

    # ------------------------------------------------------------------
    # Cancellation
    # ------------------------------------------------------------------

    def cancel(self) -> None:
        self._cancelled = True

    def is_cancelled(self) -> bool:
        return self._cancelled

    @contextmanager
    def interruptible(self) -> Iterator[None]:
        """Turn SIGINT into a cancellation request for the duration of the block."""

        def _on_sigint(signum: int, frame: Any) -> None:
            if not self._cancelled:
                click.echo("\nStopping after the current file...", err=True)
            self.cancel()

        previous = signal.signal(signal.SIGINT, _on_sigint)
        try:
            yield
        finally:
            signal.signal(signal.SIGINT, previous)

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def on_start(self, total: int) -> None:
        self._total = total
        self._seen = 0
        click.echo(f"Formatting {total} file(s)... (Ctrl+C to stop)")

    def on_item_result(
        self,
        name: str,
        document_id: str,
        status: OutcomeStatus,
        message: str,
    ) -> None:
        self._seen += 1
        if self._quiet and status is OutcomeStatus.NO_CHANGE:
            return
        line = f"  {_status_icon(status)} [{self._seen}/{self._total}] {name}"
        if message:
            line += click.style(f"  {message}", dim=True)
        click.echo(line)

    def on_complete(self, message: str) -> None:
        click.echo(message)

    def on_summary(
        self,
        success_count: int,
        no_change_count: int,
        failed_count: int,
        updated_files: list[FileInfo],
        failed_files: list[FileInfo],
    ) -> None:
        if updated_files:
            click.echo("")
            click.echo(click.style("Updated files:", fg="green"))
            for f in updated_files:
                click.echo(f"  {ICON_SUCCESS} {f.name} ({click.style(f.id, dim=True)})")

        if failed_files:
            click.echo("")
            click.echo(click.style("Failed files:", fg="red"))
            for f in failed_files:
                click.echo(f"  {ICON_FAILED} {f.name} ({click.style(f.id, dim=True)})")

        click.echo("")
        click.echo(
            f"Format complete: {success_count} updated, "
            f"{no_change_count} unchanged, {failed_count} failed"
        )
