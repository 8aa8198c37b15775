"""Local-directory DocumentStore implementation.

Treats a directory tree (for example a synced Drive folder) as the remote
folder: ``folder_id`` is the directory path, document ids are absolute file
paths.  Implements the ``DocumentStore`` port from ``nippo.domain.ports``.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from nippo.domain.entities import RemoteDocument


def _normalize_extension(extension: str) -> str:
    extension = extension.lower()
    return extension if extension.startswith(".") else f".{extension}"


def _created_at(stat: os.stat_result) -> datetime:
    # st_birthtime is missing on most Linux filesystems
    seconds = getattr(stat, "st_birthtime", None) or stat.st_ctime
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


class LocalDocumentStore:
    """List and update Markdown documents below a local directory."""

    def __init__(self, root: str | Path | None = None) -> None:
        self._root = Path(root) if root is not None else None

    def _folder(self, folder_id: str) -> Path:
        folder = Path(folder_id).expanduser()
        if self._root is not None and not folder.is_absolute():
            folder = self._root / folder
        return folder

    def list(
        self,
        folder_id: str,
        *,
        extensions: Sequence[str],
        modified_since: datetime | None = None,
        order_by: str = "name",
        recursive: bool = True,
        with_content: bool = True,
    ) -> list[RemoteDocument]:
        folder = self._folder(folder_id)
        if not folder.is_dir():
            raise FileNotFoundError(f"document folder not found: {folder}")

        wanted = {_normalize_extension(e) for e in extensions}
        candidates = folder.rglob("*") if recursive else folder.glob("*")

        documents: list[RemoteDocument] = []
        for path in candidates:
            if not path.is_file() or path.suffix.lower() not in wanted:
                continue
            stat = path.stat()
            modified_at = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
            if modified_since is not None and modified_at < modified_since:
                continue
            documents.append(RemoteDocument(
                id=str(path.resolve()),
                name=path.name,
                remote_created_at=_created_at(stat),
                remote_modified_at=modified_at,
                content=path.read_bytes() if with_content else b"",
            ))

        if order_by == "name":
            documents.sort(key=lambda d: (d.name, d.id))
        elif order_by == "modified":
            documents.sort(key=lambda d: (d.remote_modified_at, d.id))
        else:
            raise ValueError(f"unsupported order: {order_by!r}")
        return documents

    def update(self, document_id: str, content: bytes) -> None:
        path = Path(document_id)
        if not path.is_file():
            raise FileNotFoundError(f"document not found: {document_id}")
        path.write_bytes(content)
