"""Domain events for nippo.

All events are frozen dataclasses published on the optional ``EventBus``
while a format run progresses.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from nippo.domain.enums import OutcomeStatus, SyncState


@dataclass(frozen=True)
class SyncStarted:
    """Candidate documents are about to be fetched."""

    folder_id: str
    since: datetime | None
    started_at: datetime


@dataclass(frozen=True)
class DocumentReconciled:
    """One document was visited and received its outcome."""

    document_id: str
    name: str
    status: OutcomeStatus
    reason: str
    error: str | None = None


@dataclass(frozen=True)
class SyncFinished:
    """A run reached ``DONE`` (normally, with no files, or by cancellation)."""

    state: SyncState
    updated: int
    unchanged: int
    failed: int
    cancelled: bool
    checkpoint_advanced: bool
    finished_at: datetime
