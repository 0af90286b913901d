"""Exceptions raised while building the blog.

Fatal errors (:class:`ConfigurationError`, :class:`ContentReadError`,
:class:`SlugCollision`) abort a build before any output is written;
:class:`OutputWriteError` aborts it while writing.
Per-record errors (:class:`MalformedFrontmatter`, :class:`RenderError`) are
collected by the builder so the remaining posts still render. Per-record
errors keep their constructor arguments in ``args`` so they survive the trip
back from a worker process.
"""

from __future__ import annotations

from pathlib import Path


class BlogBuildError(Exception):
    """Base class for every error raised by the build pipeline."""


class ConfigurationError(BlogBuildError, ValueError):
    """Raised when the content root or site configuration is unusable."""


class ContentReadError(BlogBuildError):
    """Raised when a content file cannot be read, even after a retry."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(path, reason)
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


class OutputWriteError(BlogBuildError):
    """Raised when a generated file cannot be written below the output root."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(path, reason)
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        return f"cannot write {self.path}: {self.reason}"


class RecordError(BlogBuildError):
    """A failure scoped to a single content record."""

    kind = "RecordError"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(path, reason)
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.kind} in {self.path}: {self.reason}"


class MalformedFrontmatter(RecordError):
    """Raised when a record's front-matter is missing, invalid, or incomplete."""

    kind = "MalformedFrontmatter"


class RenderError(RecordError):
    """Raised when converting a record's Markdown body to HTML fails."""

    kind = "RenderError"


class SlugCollision(BlogBuildError):
    """Raised when two outputs resolve to the same route."""

    def __init__(self, route: str, first: str, second: str) -> None:
        super().__init__(route, first, second)
        self.route = route
        self.first = first
        self.second = second

    def __str__(self) -> str:
        return (
            f"Route '{self.route}' is produced by both '{self.first}' "
            f"and '{self.second}'."
        )


__all__ = [
    "BlogBuildError",
    "ConfigurationError",
    "ContentReadError",
    "MalformedFrontmatter",
    "OutputWriteError",
    "RecordError",
    "RenderError",
    "SlugCollision",
]
