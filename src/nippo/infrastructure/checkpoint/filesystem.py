"""Filesystem-based CheckpointStore implementation.

The checkpoint lives in a single JSON file::

    {"last_sync_time": "2024-01-16T10:00:00+09:00"}

Implements the ``CheckpointStore`` port from ``nippo.domain.ports``.
Reads happen lazily on first access; writes only happen in ``persist``.
"""

from __future__ import annotations

import os
import tempfile
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from nippo.domain.entities import SyncCheckpoint
from nippo.domain.exceptions import PersistenceError


class FileCheckpointStore:
    """Read/write the sync checkpoint on the local filesystem."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._checkpoint: SyncCheckpoint | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> SyncCheckpoint:
        if self._checkpoint is not None:
            return self._checkpoint
        if not self._path.exists():
            self._checkpoint = SyncCheckpoint()
            return self._checkpoint
        try:
            raw = self._path.read_text(encoding="utf-8")
            self._checkpoint = SyncCheckpoint.model_validate_json(raw)
        except (OSError, ValidationError) as e:
            raise PersistenceError(
                f"cannot read sync checkpoint {self._path}: {e}",
                details={"path": str(self._path)},
            ) from e
        return self._checkpoint

    def get_last_sync_time(self) -> datetime | None:
        return self._load().last_sync_time

    def set_last_sync_time(self, moment: datetime | None) -> None:
        self._checkpoint = self._load().model_copy(update={"last_sync_time": moment})

    def persist(self) -> None:
        """Write the checkpoint atomically (temp file + rename)."""
        checkpoint = self._load()
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", dir=self._path.parent,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(checkpoint.model_dump_json(indent=2))
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(
                f"cannot save sync checkpoint {self._path}: {e}",
                details={"path": str(self._path)},
            ) from e
