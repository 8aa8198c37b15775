"""Content rewriter: apply a :class:`Decision` to a remote document.

Target timestamps come from the document store's own ``created``/``modified``
times, localized to the configured zone.  The clock is only consulted when
the store did not report a timestamp.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Callable

from nippo.application.decision import Decision
from nippo.domain.entities import RemoteDocument
from nippo.infrastructure.parsing.front_matter import update_front_matter
from nippo.infrastructure.parsing.timestamps import localize


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def rewrite_document(
    document: RemoteDocument,
    decision: Decision,
    *,
    text: str | None = None,
    tz: tzinfo | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> bytes:
    """Return the corrected bytes for *document*.

    The result may equal ``document.content``; callers compare bytes and
    treat equality as "no change" instead of uploading.

    Args:
        document: Document as listed by the store.
        decision: Output of :func:`~nippo.application.decision.decide`.
        text: Already-decoded content, to skip decoding twice.
        tz: Zone for written timestamps (``None`` = local zone).
        clock: Fallback time source for missing remote timestamps.
    """
    if not decision.needs_update:
        return document.content
    if text is None:
        text = document.content.decode("utf-8")

    created = None
    if decision.missing_created:
        created = localize(document.remote_created_at or clock(), tz)

    updated = None
    if decision.replace_now:
        updated = localize(document.remote_modified_at or clock(), tz)

    if created is None and updated is None:
        return document.content

    new_text = update_front_matter(
        text,
        created=created,
        updated=updated,
        replace_now=decision.replace_now,
    )
    return new_text.encode("utf-8")
