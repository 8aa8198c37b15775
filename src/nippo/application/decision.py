"""Reconciliation decision: does a document's front-matter need rewriting?

Pure function over the document text, no I/O.  When several conditions
apply, every one of them is flagged for the rewriter but only the first
detected reason is reported.
"""

from __future__ import annotations

from dataclasses import dataclass

from nippo.infrastructure.parsing.front_matter import (
    CREATED_KEY,
    has_front_matter,
    parse_front_matter,
)

REASON_ADDED_FRONT_MATTER = "added front-matter"
REASON_ADDED_CREATED = "added created field"
REASON_REPLACED_PLACEHOLDER = "replaced updated placeholder"


@dataclass(frozen=True)
class Decision:
    """Result of :func:`decide`."""

    needs_update: bool
    reason: str = ""
    missing_created: bool = False
    replace_now: bool = False


NO_UPDATE = Decision(needs_update=False)


def decide(content: str) -> Decision:
    """Decide whether *content* is out of compliance, and why.

    1. No block → add front-matter.
    2. Block present but unparsable → ``FrontMatterError`` propagates; the
       caller records a failure, never "no change".
    3. ``created`` key absent → add it.
    4. ``updated: now`` placeholder → replace it.
    5. Otherwise compliant.
    """
    if not has_front_matter(content):
        return Decision(
            needs_update=True,
            reason=REASON_ADDED_FRONT_MATTER,
            missing_created=True,
        )

    front_matter, _ = parse_front_matter(content)

    missing_created = CREATED_KEY not in front_matter.fields
    replace_now = front_matter.has_updated_placeholder

    reasons = []
    if missing_created:
        reasons.append(REASON_ADDED_CREATED)
    if replace_now:
        reasons.append(REASON_REPLACED_PLACEHOLDER)
    if not reasons:
        return NO_UPDATE

    return Decision(
        needs_update=True,
        reason=reasons[0],
        missing_created=missing_created,
        replace_now=replace_now,
    )
