"""Discover Markdown posts beneath a content root.

:class:`ContentSource` validates its root eagerly, so a missing content
directory surfaces as soon as a build starts, and then yields one immutable
:class:`ContentRecord` per content file in a stable, path-sorted order.

Example
-------
>>> from pathlib import Path
>>> from rationale_blog.source import ContentSource
>>> source = ContentSource(Path("content"))  # doctest: +SKIP
>>> [record.path.name for record in source]  # doctest: +SKIP
['2020-01-01-hello.md']
"""

from __future__ import annotations

import dataclasses as dc
import time
import typing as typ
from pathlib import Path

from ._constants import DEFAULT_EXTENSIONS, READ_RETRY_BACKOFF
from .errors import ConfigurationError, ContentReadError

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@dc.dataclass(frozen=True, slots=True)
class ContentRecord:
    """Raw contents of one content file.

    Attributes
    ----------
    path : Path
        Absolute location of the source file.
    raw_body : str
        Unparsed file contents, front-matter included.
    """

    path: Path
    raw_body: str


class ContentSource:
    """Walk a content root and yield content records lazily."""

    def __init__(
        self,
        root: Path,
        *,
        extensions: cabc.Iterable[str] = DEFAULT_EXTENSIONS,
        retry_backoff: float = READ_RETRY_BACKOFF,
    ) -> None:
        """Validate ``root`` and remember which suffixes count as content.

        Raises
        ------
        ConfigurationError
            If ``root`` does not exist or is not a directory.
        """
        resolved = root.expanduser().resolve()
        if not resolved.exists():
            msg = f"Content root '{root}' does not exist."
            raise ConfigurationError(msg)
        if not resolved.is_dir():
            msg = f"Content root '{root}' is not a directory."
            raise ConfigurationError(msg)
        self.root = resolved
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.retry_backoff = retry_backoff

    def __iter__(self) -> cabc.Iterator[ContentRecord]:
        """Yield records for every content file, sorted by relative path."""
        for path in self.discover():
            yield ContentRecord(path=path, raw_body=self._read(path))

    def discover(self) -> list[Path]:
        """Return content file paths ordered by their root-relative POSIX path."""
        candidates = [
            path
            for path in self.root.rglob("*")
            if path.is_file() and path.suffix.lower() in self.extensions
        ]
        return sorted(candidates, key=lambda path: path.relative_to(self.root).as_posix())

    def _read(self, path: Path) -> str:
        """Read ``path`` as UTF-8, retrying once after a fixed backoff."""
        try:
            return self._read_text(path)
        except OSError:
            time.sleep(self.retry_backoff)
        try:
            return self._read_text(path)
        except OSError as exc:
            raise ContentReadError(path, str(exc)) from exc

    @staticmethod
    def _read_text(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ContentReadError(path, f"not valid UTF-8 ({exc.reason})") from exc


__all__ = ["ContentRecord", "ContentSource"]
