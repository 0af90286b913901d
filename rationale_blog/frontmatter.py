r"""Split posts into front-matter and body, and parse the metadata.

Posts open with a YAML block fenced by ``---`` lines. The block must provide
``title`` and ``date``; ``tags`` is optional and may be a list or a
comma-separated string.

Example
-------
>>> from rationale_blog.frontmatter import parse_post
>>> meta, body = parse_post("---\ntitle: Hello\ndate: 2020-01-01\n---\nHi\n")
>>> meta.title, meta.date.isoformat(), body
('Hello', '2020-01-01', 'Hi\n')
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import re
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

OPENING_DELIMITER = re.compile(r"\A\ufeff?---[ \t]*\r?\n")
CLOSING_DELIMITER = re.compile(r"^(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)", re.MULTILINE)


class FrontmatterError(ValueError):
    """Raised when a post's front-matter cannot be used."""


@dc.dataclass(frozen=True, slots=True)
class Frontmatter:
    """Metadata parsed from the top of a post.

    Attributes
    ----------
    title : str
        Post title shown in headings and listings.
    date : datetime.date
        Publication day used for display and ordering.
    tags : tuple[str, ...]
        Tags in authored order with duplicates removed.
    """

    title: str
    date: dt.date
    tags: tuple[str, ...] = ()


def split_frontmatter(text: str) -> tuple[str, str]:
    """Return the raw front-matter block and the body that follows it.

    Raises
    ------
    FrontmatterError
        If the text does not open with ``---`` or the block is never closed.
    """
    opening = OPENING_DELIMITER.match(text)
    if not opening:
        msg = "missing front-matter block (expected a leading '---' line)"
        raise FrontmatterError(msg)
    closing = CLOSING_DELIMITER.search(text, opening.end())
    if not closing:
        msg = "unterminated front-matter block (no closing '---' line)"
        raise FrontmatterError(msg)
    return text[opening.end() : closing.start()], text[closing.end() :]


def parse_frontmatter(block: str) -> Frontmatter:
    """Parse a YAML front-matter block into :class:`Frontmatter`.

    Raises
    ------
    FrontmatterError
        If the block is not a YAML mapping, ``title`` or ``date`` is absent,
        ``date`` cannot be parsed, or ``tags`` has an unsupported shape.
    """
    loader = YAML(typ="safe")
    try:
        loaded = loader.load(block)
    except (YAMLError, ValueError) as exc:
        msg = f"invalid YAML: {exc}"
        raise FrontmatterError(msg) from exc
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        msg = "front-matter must be a mapping of keys to values"
        raise FrontmatterError(msg)

    title = _clean_title(loaded.get("title"))
    date = _parse_date(loaded.get("date"))
    tags = _parse_tags(loaded.get("tags"))
    return Frontmatter(title=title, date=date, tags=tags)


def parse_post(text: str) -> tuple[Frontmatter, str]:
    """Split ``text`` and parse its front-matter, returning metadata and body."""
    block, body = split_frontmatter(text)
    return parse_frontmatter(block), body


def _clean_title(value: object) -> str:
    if value is None or isinstance(value, (dict, list)):
        msg = "missing required field 'title'"
        raise FrontmatterError(msg)
    title = str(value).strip()
    if not title:
        msg = "missing required field 'title'"
        raise FrontmatterError(msg)
    return title


def _parse_date(value: object) -> dt.date:
    """Coerce YAML dates, datetimes, and ISO-8601 strings into a date."""
    match value:
        case None:
            msg = "missing required field 'date'"
            raise FrontmatterError(msg)
        case dt.datetime():
            return value.date()
        case dt.date():
            return value
        case str() as text if text.strip():
            sanitized = text.strip()
            if sanitized.endswith("Z"):
                sanitized = sanitized[:-1] + "+00:00"
            try:
                return dt.datetime.fromisoformat(sanitized).date()
            except ValueError:
                pass
    msg = f"unparseable 'date' value {value!r}"
    raise FrontmatterError(msg)


def _parse_tags(value: object) -> tuple[str, ...]:
    """Return tags in authored order, stripped and de-duplicated."""
    match value:
        case None:
            entries: list[typ.Any] = []
        case str():
            entries = value.split(",")
        case list():
            entries = value
        case _:
            msg = f"'tags' must be a list or comma-separated string, got {value!r}"
            raise FrontmatterError(msg)
    tags: list[str] = []
    for entry in entries:
        if isinstance(entry, (dict, list)):
            msg = f"unsupported tag entry {entry!r}"
            raise FrontmatterError(msg)
        tag = str(entry).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tuple(tags)


__all__ = [
    "Frontmatter",
    "FrontmatterError",
    "parse_frontmatter",
    "parse_post",
    "split_frontmatter",
]
