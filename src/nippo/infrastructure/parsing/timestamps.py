"""RFC 3339 timestamp helpers for front-matter values.

Front-matter timestamps are written as ``2024-01-15T09:30:00+09:00`` (UTC is
rendered with a ``Z`` suffix), without fractional seconds and never quoted.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timezone, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_RFC3339 = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2})[Tt](?P<clock>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


def parse_rfc3339(text: str) -> datetime:
    """Parse an RFC 3339 timestamp that carries a UTC offset.

    Raises ``ValueError`` for anything else, including timestamps without
    an offset (``2024-01-15T09:30:00``) and out-of-range components.
    """
    match = _RFC3339.match(text.strip())
    if match is None:
        raise ValueError(f"not an RFC 3339 timestamp: {text!r}")

    offset = match["offset"]
    if offset in ("Z", "z"):
        offset = "+00:00"
    # fromisoformat only guarantees 3 or 6 fractional digits
    fraction = ""
    if match["fraction"]:
        fraction = "." + (match["fraction"] + "000000")[:6]

    return datetime.fromisoformat(f"{match['base']}T{match['clock']}{fraction}{offset}")


def format_rfc3339(moment: datetime) -> str:
    """Render *moment* as RFC 3339 with second precision.

    Naive datetimes are interpreted in the machine's local zone.
    """
    if moment.tzinfo is None:
        moment = moment.astimezone()
    text = moment.isoformat(timespec="seconds")
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def coerce_timestamp(value: Any) -> datetime:
    """Turn a decoded YAML value into an offset-aware datetime.

    - ``datetime`` with offset: returned unchanged.
    - ``date``: midnight UTC of that day.
    - ``str``: validated with :func:`parse_rfc3339`.

    Naive datetimes and every other type raise ``ValueError``.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None or value.utcoffset() is None:
            raise ValueError(f"timestamp has no UTC offset: {value.isoformat()}")
        return value
    if isinstance(value, date):
        return datetime.combine(value, time(0, 0), tzinfo=timezone.utc)
    if isinstance(value, str):
        return parse_rfc3339(value)
    raise ValueError(f"unsupported timestamp type: {type(value).__name__}")


def localize(moment: datetime, tz: tzinfo | None = None) -> datetime:
    """Convert *moment* to *tz*, or to the machine's local zone if ``None``."""
    return moment.astimezone(tz)


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Look up an IANA zone name; ``None``/empty means the local zone."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"unknown timezone: {name!r}") from e
