"""Port definitions (hexagonal architecture).

Each Protocol defines a boundary that infrastructure adapters must satisfy.
The domain and application layers depend only on these Protocols, never on
concrete implementations.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, Sequence, runtime_checkable

from nippo.domain.entities import FileInfo, RemoteDocument
from nippo.domain.enums import OutcomeStatus


# ---------------------------------------------------------------------------
# Storage ports
# ---------------------------------------------------------------------------


@runtime_checkable
class DocumentStore(Protocol):
    """Remote folder of journal documents.

    Errors raised by either method are opaque to the core; status codes and
    timeouts are the adapter's business.
    """

    def list(
        self,
        folder_id: str,
        *,
        extensions: Sequence[str],
        modified_since: datetime | None = None,
        order_by: str = "name",
        recursive: bool = True,
        with_content: bool = True,
    ) -> list[RemoteDocument]: ...

    def update(self, document_id: str, content: bytes) -> None: ...


@runtime_checkable
class CheckpointStore(Protocol):
    """Holds the single sync checkpoint timestamp."""

    def get_last_sync_time(self) -> datetime | None: ...
    def set_last_sync_time(self, moment: datetime | None) -> None: ...
    def persist(self) -> None: ...


# ---------------------------------------------------------------------------
# Presentation port
# ---------------------------------------------------------------------------


@runtime_checkable
class SyncPresenter(Protocol):
    """Receives progress for a run and answers the cancellation poll."""

    def on_start(self, total: int) -> None: ...
    def on_item_result(
        self,
        name: str,
        document_id: str,
        status: OutcomeStatus,
        message: str,
    ) -> None: ...
    def is_cancelled(self) -> bool: ...
    def on_summary(
        self,
        success_count: int,
        no_change_count: int,
        failed_count: int,
        updated_files: list[FileInfo],
        failed_files: list[FileInfo],
    ) -> None: ...
    def on_complete(self, message: str) -> None: ...


# ---------------------------------------------------------------------------
# Event bus port
# ---------------------------------------------------------------------------


@runtime_checkable
class EventBus(Protocol):
    """Publish/subscribe in-memory event bus."""

    def publish(self, event: Any) -> None: ...
    def subscribe(self, event_type: type, handler: Any) -> None: ...
