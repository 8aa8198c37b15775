"""Front-matter codec for journal documents.

The block format is::

    ---
    <YAML mapping>
    ---
    <body>

Decoding goes through python-frontmatter's ``YAMLHandler`` (PyYAML
``SafeLoader``).  Rewriting is line-based: every top-level entry that is
not touched keeps its original text, so unknown keys, comments, quoting and
flow style survive a rewrite unchanged.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

import frontmatter
import yaml

from nippo.domain.entities import FrontMatter
from nippo.domain.exceptions import InvalidDateFormatError, MalformedYAMLError
from nippo.infrastructure.parsing.timestamps import coerce_timestamp, format_rfc3339

DELIMITER = "---"
NOW_PLACEHOLDER = "now"
BOM = "\ufeff"

CREATED_KEY = "created"
UPDATED_KEY = "updated"

_yaml_handler = frontmatter.YAMLHandler()

# YAML 1.1 resolves keys such as ``on``, ``no`` or ``2024`` to non-strings
_TEXT_KEY_TAGS = frozenset({
    "tag:yaml.org,2002:bool",
    "tag:yaml.org,2002:int",
    "tag:yaml.org,2002:float",
    "tag:yaml.org,2002:timestamp",
})


class _FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps implicitly typed scalar keys as written."""

    def construct_mapping(self, node, deep=False):
        if isinstance(node, yaml.MappingNode):
            for key_node, _ in node.value:
                if isinstance(key_node, yaml.ScalarNode) and key_node.tag in _TEXT_KEY_TAGS:
                    key_node.tag = "tag:yaml.org,2002:str"
        return super().construct_mapping(node, deep=deep)


# Matches the updated entry line; only used to carry its trailing comment over
_NOW_LINE = re.compile(
    r"""^(?:updated|'updated'|"updated")[ \t]*:[ \t]*(?:now|'now'|"now")"""
    r"""(?P<comment>[ \t]+#.*)?[ \t]*\r?$""",
    re.MULTILINE,
)

# Start of a top-level mapping entry: a key at column 0 followed by ":".
_ENTRY_KEY = re.compile(
    r"""^(?P<key>"[^"]*"|'[^']*'|[^\s#:'"\-?\[\]{}][^:]*?)[ \t]*:(?=[ \t]|\r?$)"""
)


# ---------------------------------------------------------------------------
# Block detection
# ---------------------------------------------------------------------------


def _is_delimiter(line: str) -> bool:
    return line.rstrip("\r") == DELIMITER


def _split_block(content: str) -> tuple[str, str] | None:
    """Return ``(yaml_text, body)`` or ``None`` when there is no closed block.

    A leading byte-order mark is ignored.  Leading blank lines of the body
    are dropped; the rewriter always puts exactly one blank line after the
    closing delimiter.
    """
    lines = content.removeprefix(BOM).split("\n")
    if not _is_delimiter(lines[0]):
        return None
    for index in range(1, len(lines)):
        if _is_delimiter(lines[index]):
            yaml_text = "\n".join(lines[1:index])
            body = "\n".join(lines[index + 1:])
            return yaml_text, body.lstrip("\r\n")
    return None


def _newline(content: str) -> str:
    first, separator, _ = content.partition("\n")
    return "\r\n" if separator and first.endswith("\r") else "\n"


def has_front_matter(content: str) -> bool:
    """True iff *content* opens with ``---`` and a later line closes the block.

    An unclosed opening delimiter counts as no block at all.
    """
    return _split_block(content) is not None


def has_now_placeholder(content: str) -> bool:
    """True iff the block (never the body) has ``updated: now``.

    The value may be bare, single-quoted or double-quoted, in block or flow
    style; it must decode to exactly ``now``.  Raises
    :class:`~nippo.domain.exceptions.MalformedYAMLError` when the block is
    not a YAML mapping.
    """
    split = _split_block(content)
    if split is None:
        return False
    return _is_now(_load_fields(split[0]).get(UPDATED_KEY))


def _is_now(value: Any) -> bool:
    return value == NOW_PLACEHOLDER


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _load_fields(yaml_text: str) -> dict[str, Any]:
    if not yaml_text.strip():
        return {}
    try:
        loaded = _yaml_handler.load(yaml_text, Loader=_FrontMatterLoader)
    except (yaml.YAMLError, ValueError) as e:
        # PyYAML raises ValueError for out-of-range implicit timestamps
        raise MalformedYAMLError(
            "malformed YAML in front-matter",
            details={"cause": str(e)},
        ) from e

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise MalformedYAMLError(
            "malformed YAML in front-matter: expected a mapping",
            details={"type": type(loaded).__name__},
        )
    bad_keys = [key for key in loaded if not isinstance(key, str)]
    if bad_keys:
        raise MalformedYAMLError(
            "malformed YAML in front-matter: empty key",
            details={"keys": [repr(key) for key in bad_keys]},
        )
    return dict(loaded)


def _timestamp_field(fields: dict[str, Any], key: str) -> datetime | None:
    if key not in fields:
        return None
    try:
        return coerce_timestamp(fields[key])
    except ValueError as e:
        raise InvalidDateFormatError(
            f"{key}: invalid date format: expected RFC 3339",
            details={"key": key, "value": repr(fields[key])},
        ) from e


def parse_front_matter(content: str) -> tuple[FrontMatter | None, str]:
    """Split *content* into parsed front-matter and body.

    Returns ``(None, content)`` when there is no block.  Raises
    :class:`~nippo.domain.exceptions.FrontMatterError` when the block is not
    a YAML mapping or ``created``/``updated`` is not a valid timestamp;
    nothing partial is returned in that case.
    """
    split = _split_block(content)
    if split is None:
        return None, content

    yaml_text, body = split
    fields = _load_fields(yaml_text)

    created = _timestamp_field(fields, CREATED_KEY)
    updated = None
    placeholder = False
    if UPDATED_KEY in fields:
        if _is_now(fields[UPDATED_KEY]):
            placeholder = True
        else:
            updated = _timestamp_field(fields, UPDATED_KEY)

    return FrontMatter(
        created=created,
        updated=updated,
        has_updated_placeholder=placeholder,
        fields=fields,
    ), body


# ---------------------------------------------------------------------------
# Generation / rewriting
# ---------------------------------------------------------------------------


def generate_front_matter(created: datetime) -> str:
    """Return a block holding only ``created``, plus the blank separator line."""
    return f"{DELIMITER}\n{CREATED_KEY}: {format_rfc3339(created)}\n{DELIMITER}\n\n"


@dataclass
class _Entry:
    """Raw source lines of one top-level entry (``key`` is None for preamble)."""

    key: str | None
    lines: list[str] = field(default_factory=list)


def _entry_key(line: str) -> str | None:
    match = _ENTRY_KEY.match(line)
    if match is None:
        return None
    key = match["key"]
    if len(key) >= 2 and key[0] == key[-1] and key[0] in "'\"":
        key = key[1:-1]
    return key


def _split_entries(yaml_text: str) -> list[_Entry]:
    entries: list[_Entry] = []
    if not yaml_text:
        return entries
    for line in yaml_text.split("\n"):
        key = _entry_key(line)
        if key is not None:
            entries.append(_Entry(key=key, lines=[line]))
        elif entries:
            entries[-1].lines.append(line)
        else:
            entries.append(_Entry(key=None, lines=[line]))
    return entries


def _replace_value(entry: _Entry, value: str) -> None:
    """Point *entry* at a new scalar, keeping trailing comments and blanks."""
    comment = ""
    now_line = _NOW_LINE.match(entry.lines[0])
    if now_line is not None and now_line["comment"]:
        comment = now_line["comment"]
    kept = [
        line for line in entry.lines[1:]
        if not line.strip() or line.lstrip().startswith("#")
    ]
    entry.lines = [f"{entry.key}: {value}{comment}", *kept]


def _format_value(value: Any) -> str:
    if isinstance(value, datetime):
        return format_rfc3339(value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _dump_fields(fields: dict[str, Any]) -> list[str]:
    """Re-serialize *fields* from scratch: created, updated, then the rest."""
    lines: list[str] = []
    for key in (CREATED_KEY, UPDATED_KEY):
        if key in fields:
            lines.append(f"{key}: {_format_value(fields[key])}")
    for key, value in fields.items():
        if key in (CREATED_KEY, UPDATED_KEY):
            continue
        dumped = yaml.safe_dump(
            {key: value},
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
        lines.extend(dumped.rstrip("\n").split("\n"))
    return lines


def update_front_matter(
    content: str,
    created: datetime | None = None,
    updated: datetime | None = None,
    replace_now: bool = False,
) -> str:
    """Rewrite the block of *content*, preserving every untouched key.

    - No block and no *created*: *content* is returned unchanged.
    - No block: :func:`generate_front_matter` is prepended.
    - *created* is inserted as the first entry when the key is absent.
    - With *replace_now*, an ``updated: now`` value becomes *updated*
      (unquoted); without it, *updated* overwrites whatever is there.

    A leading byte-order mark stays in front, and inserted lines follow the
    document's line ending (``\\r\\n`` when its first line ends that way).

    Parse errors propagate unchanged.
    """
    bom = BOM if content.startswith(BOM) else ""
    newline = _newline(content)

    front_matter, body = parse_front_matter(content)
    if front_matter is None:
        if created is None:
            return content
        block = generate_front_matter(created).replace("\n", newline)
        return bom + block + content[len(bom):]

    fields = dict(front_matter.fields)
    yaml_text, _ = _split_block(content)
    yaml_text = "\n".join(line.rstrip("\r") for line in yaml_text.split("\n"))
    entries = _split_entries(yaml_text)

    set_created = created is not None and CREATED_KEY not in fields
    set_updated = updated is not None and (
        not replace_now or front_matter.has_updated_placeholder
    )

    keyed = {entry.key for entry in entries if entry.key is not None}
    if keyed != set(fields):
        # Layout we cannot edit line by line (flow mapping, complex keys)
        if set_created:
            fields = {CREATED_KEY: created, **fields}
        if set_updated:
            fields[UPDATED_KEY] = updated
        block_lines = _dump_fields(fields)
    else:
        if set_updated:
            stamp = format_rfc3339(updated)
            targets = [entry for entry in entries if entry.key == UPDATED_KEY]
            for entry in targets:
                _replace_value(entry, stamp)
            if not targets:
                position = 1 if entries and entries[0].key == CREATED_KEY else 0
                entries.insert(position, _Entry(UPDATED_KEY, [f"{UPDATED_KEY}: {stamp}"]))
        if set_created:
            entries.insert(0, _Entry(CREATED_KEY, [f"{CREATED_KEY}: {format_rfc3339(created)}"]))
        block_lines = [line for entry in entries for line in entry.lines]

    return bom + newline.join([DELIMITER, *block_lines, DELIMITER, "", body])
