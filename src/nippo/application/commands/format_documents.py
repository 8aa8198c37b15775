"""FormatDocuments command.

Reconciles the front-matter of every journal document modified since the
last sync checkpoint:

1. Validate configuration (a folder id is required)
2. Fetch ``.md`` documents modified at or after the checkpoint
3. For each document: decide → rewrite → compare bytes → upload
4. Summarize, then advance the checkpoint only if nothing failed

Fetch and persistence failures abort the run.  Front-matter and update
failures are recorded on the document's outcome and the run continues.
Cancellation is polled once before each document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Callable

from nippo.application.decision import decide
from nippo.application.rewrite import rewrite_document, utc_now
from nippo.domain.entities import FileInfo, RemoteDocument
from nippo.domain.enums import OutcomeStatus, SyncState
from nippo.domain.events import DocumentReconciled, SyncFinished, SyncStarted
from nippo.domain.exceptions import (
    ConfigurationError,
    FetchError,
    FrontMatterError,
    NippoError,
    PersistenceError,
    UpdateError,
)
from nippo.domain.ports import CheckpointStore, DocumentStore, EventBus, SyncPresenter

logger = logging.getLogger(__name__)

DOCUMENT_EXTENSIONS = (".md",)
NO_CHANGES_MESSAGE = "no changes needed"
NO_FILES_MESSAGE = "No files to process."
MISSING_FOLDER_HINT = (
    "Run `nippo init` to configure, or set NIPPO_DRIVE_FOLDER_ID."
)


@dataclass
class ReconciliationOutcome:
    """Result of reconciling a single document."""

    document_id: str
    name: str
    status: OutcomeStatus
    reason: str = ""
    error: NippoError | None = None

    @property
    def message(self) -> str:
        if self.error is not None:
            return str(self.error)
        return self.reason


@dataclass
class FormatResult:
    """Result of a format run."""

    state: SyncState = SyncState.IDLE
    outcomes: list[ReconciliationOutcome] = field(default_factory=list)
    updated_files: list[FileInfo] = field(default_factory=list)
    failed_files: list[FileInfo] = field(default_factory=list)
    unchanged: int = 0
    total: int = 0
    cancelled: bool = False
    checkpoint_before: datetime | None = None
    checkpoint_after: datetime | None = None
    checkpoint_advanced: bool = False

    @property
    def updated(self) -> int:
        return len(self.updated_files)

    @property
    def failed(self) -> int:
        return len(self.failed_files)

    @property
    def processed(self) -> int:
        return len(self.outcomes)

    def record(self, outcome: ReconciliationOutcome) -> None:
        self.outcomes.append(outcome)
        info = FileInfo(name=outcome.name, id=outcome.document_id)
        if outcome.status is OutcomeStatus.UPDATED:
            self.updated_files.append(info)
        elif outcome.status is OutcomeStatus.NO_CHANGE:
            self.unchanged += 1
        elif outcome.status is OutcomeStatus.FAILED:
            self.failed_files.append(info)
        else:
            raise ValueError(f"unhandled outcome status: {outcome.status!r}")


# ---------------------------------------------------------------------------
# Per-document processing
# ---------------------------------------------------------------------------


def _failed(document: RemoteDocument, error: NippoError) -> ReconciliationOutcome:
    logger.warning("Failed to format %s (%s): %s", document.name, document.id, error)
    return ReconciliationOutcome(
        document_id=document.id,
        name=document.name,
        status=OutcomeStatus.FAILED,
        error=error,
    )


def _unchanged(document: RemoteDocument) -> ReconciliationOutcome:
    return ReconciliationOutcome(
        document_id=document.id,
        name=document.name,
        status=OutcomeStatus.NO_CHANGE,
        reason=NO_CHANGES_MESSAGE,
    )


def reconcile_document(
    document: RemoteDocument,
    *,
    document_store: DocumentStore,
    tz: tzinfo | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> ReconciliationOutcome:
    """Bring one document's front-matter into compliance and upload it."""
    try:
        text = document.content.decode("utf-8")
    except UnicodeDecodeError as e:
        return _failed(document, FrontMatterError(f"document is not valid UTF-8: {e}"))

    try:
        decision = decide(text)
    except FrontMatterError as e:
        return _failed(document, FrontMatterError(f"malformed front-matter: {e}", e.details))

    if not decision.needs_update:
        return _unchanged(document)

    try:
        new_content = rewrite_document(document, decision, text=text, tz=tz, clock=clock)
    except FrontMatterError as e:
        return _failed(document, e)

    if new_content == document.content:
        return _unchanged(document)

    try:
        document_store.update(document.id, new_content)
    except Exception as e:
        error = UpdateError(
            f"failed to update {document.name}: {e}",
            details={"document_id": document.id},
        )
        error.__cause__ = e
        return _failed(document, error)

    logger.info("Updated %s (%s): %s", document.name, document.id, decision.reason)
    return ReconciliationOutcome(
        document_id=document.id,
        name=document.name,
        status=OutcomeStatus.UPDATED,
        reason=decision.reason,
    )


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------


def _transition(result: FormatResult, state: SyncState) -> None:
    logger.debug("Format run: %s -> %s", result.state.value, state.value)
    result.state = state


def _fetch(
    document_store: DocumentStore,
    folder_id: str,
    since: datetime | None,
) -> list[RemoteDocument]:
    try:
        return document_store.list(
            folder_id,
            extensions=list(DOCUMENT_EXTENSIONS),
            modified_since=since,
            order_by="name",
            recursive=True,
            with_content=True,
        )
    except Exception as e:
        raise FetchError(
            f"failed to list documents in {folder_id}: {e}",
            details={"folder_id": folder_id},
        ) from e


def _advance_checkpoint(
    result: FormatResult,
    checkpoint_store: CheckpointStore,
    completed_at: datetime,
) -> None:
    since = result.checkpoint_before
    if since is not None and completed_at <= since:
        logger.warning(
            "Clock is behind the stored checkpoint (%s <= %s); leaving it unchanged",
            completed_at.isoformat(), since.isoformat(),
        )
        return

    checkpoint_store.set_last_sync_time(completed_at)
    try:
        checkpoint_store.persist()
    except Exception as e:
        checkpoint_store.set_last_sync_time(since)
        if isinstance(e, PersistenceError):
            raise
        raise PersistenceError(
            f"failed to save sync checkpoint; it was not advanced: {e}",
        ) from e

    result.checkpoint_after = completed_at
    result.checkpoint_advanced = True
    logger.info("Sync checkpoint advanced to %s", completed_at.isoformat())


def format_documents(
    folder_id: str,
    *,
    document_store: DocumentStore,
    checkpoint_store: CheckpointStore,
    presenter: SyncPresenter,
    event_bus: EventBus | None = None,
    tz: tzinfo | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> FormatResult:
    """Reconcile every document modified since the stored checkpoint.

    Args:
        folder_id: Remote folder to scan. Empty is a configuration error.
        document_store: Lists and updates remote documents.
        checkpoint_store: Holds the last sync time.
        presenter: Receives progress and answers the cancellation poll.
        event_bus: Optional event bus for domain events.
        tz: Zone for written timestamps (``None`` = local zone).
        clock: Time source for the checkpoint and timestamp fallbacks.

    Returns:
        FormatResult with per-document outcomes and the checkpoint decision.

    Raises:
        ConfigurationError: *folder_id* is empty (before any I/O).
        FetchError: The document listing failed.
        PersistenceError: The checkpoint could not be read or saved.
    """
    result = FormatResult()

    if not folder_id:
        raise ConfigurationError(
            f"drive folder ID is not configured. {MISSING_FOLDER_HINT}",
            details={"hint": MISSING_FOLDER_HINT},
        )

    # Fetching
    _transition(result, SyncState.FETCHING)
    since = checkpoint_store.get_last_sync_time()
    result.checkpoint_before = since
    result.checkpoint_after = since
    if event_bus:
        event_bus.publish(SyncStarted(folder_id=folder_id, since=since, started_at=clock()))

    documents = _fetch(document_store, folder_id, since)
    result.total = len(documents)
    logger.info(
        "Fetched %d document(s) from %s modified since %s",
        len(documents), folder_id, since.isoformat() if since else "the beginning",
    )

    if documents:
        # Processing
        _transition(result, SyncState.PROCESSING)
        presenter.on_start(len(documents))
        for document in documents:
            if presenter.is_cancelled():
                result.cancelled = True
                logger.info(
                    "Format cancelled after %d of %d document(s)",
                    result.processed, len(documents),
                )
                break

            outcome = reconcile_document(
                document, document_store=document_store, tz=tz, clock=clock,
            )
            result.record(outcome)
            presenter.on_item_result(
                outcome.name, outcome.document_id, outcome.status, outcome.message,
            )
            if event_bus:
                event_bus.publish(DocumentReconciled(
                    document_id=outcome.document_id,
                    name=outcome.name,
                    status=outcome.status,
                    reason=outcome.reason,
                    error=str(outcome.error) if outcome.error else None,
                ))

        # Finalizing
        _transition(result, SyncState.FINALIZING)
        presenter.on_summary(
            result.updated,
            result.unchanged,
            result.failed,
            list(result.updated_files),
            list(result.failed_files),
        )
        if result.failed == 0 and not result.cancelled:
            _advance_checkpoint(result, checkpoint_store, clock())
        else:
            logger.info(
                "Sync checkpoint left at %s (failed=%d, cancelled=%s)",
                since.isoformat() if since else None, result.failed, result.cancelled,
            )
    else:
        presenter.on_complete(NO_FILES_MESSAGE)

    _transition(result, SyncState.DONE)
    if event_bus:
        event_bus.publish(SyncFinished(
            state=result.state,
            updated=result.updated,
            unchanged=result.unchanged,
            failed=result.failed,
            cancelled=result.cancelled,
            checkpoint_advanced=result.checkpoint_advanced,
            finished_at=clock(),
        ))
    return result
