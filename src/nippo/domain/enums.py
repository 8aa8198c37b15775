"""Domain enumerations for nippo."""

from __future__ import annotations

from enum import Enum


class OutcomeStatus(str, Enum):
    """Closed set of per-document reconciliation results.

    Every consumer handles all three members; there is no fallback branch
    that silently maps an unknown status to one of them.
    """

    UPDATED = "updated"
    NO_CHANGE = "no-change"
    FAILED = "failed"


class SyncState(str, Enum):
    """Lifecycle states of a single format run.

    ``IDLE → FETCHING → PROCESSING → FINALIZING → DONE``.  A run that finds
    nothing to do goes straight from ``FETCHING`` to ``DONE``.
    """

    IDLE = "idle"
    FETCHING = "fetching"
    PROCESSING = "processing"
    FINALIZING = "finalizing"
    DONE = "done"
