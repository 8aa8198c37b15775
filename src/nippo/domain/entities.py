"""Domain entities for nippo.

Entities are Pydantic BaseModels.  Per-run results (outcomes, summaries)
are plain dataclasses living next to the command that produces them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AwareDatetime, BaseModel, Field


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


class FileInfo(BaseModel):
    """Name + id pair used when listing updated or failed documents."""

    name: str
    id: str


class FrontMatter(BaseModel):
    """Parsed YAML metadata block of a journal document.

    ``fields`` holds every key of the block in source order, including
    ``created`` and ``updated``.  An empty-but-present block (``---\\n---``)
    yields an empty ``fields`` dict; a missing block yields no FrontMatter.
    """

    created: datetime | None = None
    updated: datetime | None = None
    has_updated_placeholder: bool = False
    fields: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Core entities
# ---------------------------------------------------------------------------


class RemoteDocument(BaseModel):
    """One journal entry as listed by the document store.

    ``remote_created_at`` / ``remote_modified_at`` are owned by the store and
    are the only timestamps used when rewriting front-matter.
    """

    id: str
    name: str
    remote_created_at: datetime | None = None
    remote_modified_at: datetime | None = None
    content: bytes = b""


class SyncCheckpoint(BaseModel):
    """Persisted boundary between reconciled and not-yet-reconciled documents.

    Documents modified at or after ``last_sync_time`` are candidates for the
    next run.  ``None`` means no run has ever completed cleanly.  The time
    must carry a UTC offset so it compares against the run clock.
    """

    last_sync_time: AwareDatetime | None = None
