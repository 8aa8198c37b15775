"""Dependency wiring for the command line.

Builds every adapter a format run needs from :class:`Settings`, so the CLI
only deals with options and output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path

from nippo.config.settings import Settings, get_settings
from nippo.domain.ports import CheckpointStore, DocumentStore, EventBus
from nippo.infrastructure.checkpoint.filesystem import FileCheckpointStore
from nippo.infrastructure.documents.local import LocalDocumentStore
from nippo.infrastructure.events.bus import InMemoryEventBus, log_event
from nippo.infrastructure.presenter.console import ConsolePresenter

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Resolved adapters for one CLI invocation."""

    settings: Settings
    folder_id: str
    document_store: DocumentStore
    checkpoint_store: CheckpointStore
    presenter: ConsolePresenter
    event_bus: EventBus
    tz: tzinfo | None


def create_container(
    settings: Settings | None = None,
    *,
    folder_id: str | None = None,
    checkpoint_path: Path | None = None,
    quiet: bool = False,
) -> Container:
    """Build a :class:`Container`; explicit arguments override *settings*."""
    if settings is None:
        settings = get_settings()

    folder = folder_id if folder_id is not None else settings.drive_folder_id
    checkpoint = checkpoint_path or settings.checkpoint_path

    event_bus = InMemoryEventBus()
    event_bus.subscribe_all(log_event)

    logger.debug("Container: folder=%r checkpoint=%s", folder, checkpoint)
    return Container(
        settings=settings,
        folder_id=folder,
        document_store=LocalDocumentStore(),
        checkpoint_store=FileCheckpointStore(checkpoint),
        presenter=ConsolePresenter(quiet=quiet),
        event_bus=event_bus,
        tz=settings.tzinfo,
    )
