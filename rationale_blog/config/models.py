"""Typed dataclasses describing the blog's site configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from rationale_blog._constants import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_ELLIPSIS,
    DEFAULT_EXCERPT_LENGTH,
    DEFAULT_EXTENSIONS,
    DEFAULT_PYGMENTS_STYLE,
)

from .helpers import _positive_int


@dc.dataclass(frozen=True, slots=True)
class SiteMetadata:
    """Site-wide values handed to every template."""

    title: str = "Rationale Emotions"
    author: str = "Krishnan Mahadevan"
    description: str = ""
    issues_url: str | None = None


@dc.dataclass(frozen=True, slots=True)
class BuildSettings:
    """Filesystem locations and rendering knobs for a build.

    Attributes
    ----------
    content_root : Path
        Directory walked for Markdown posts.
    output_root : Path
        Directory receiving the generated HTML tree.
    extensions : tuple[str, ...]
        File suffixes treated as content (lower-case, dot-prefixed).
    excerpt_length : int
        Character budget for listing excerpts, excluding the ellipsis.
    ellipsis : str
        Marker appended to truncated excerpts.
    page_size : int or None
        Posts per listing page; ``None`` renders a single listing.
    date_format : str
        ``strftime`` pattern used when displaying post dates.
    pygments_style : str
        Pygments style used for the generated stylesheet.
    workers : int or None
        Process pool size for transformation; ``None`` uses the CPU count
        and ``1`` transforms in-process.
    """

    content_root: Path = Path("content")
    output_root: Path = Path("public")
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    excerpt_length: int = DEFAULT_EXCERPT_LENGTH
    ellipsis: str = DEFAULT_ELLIPSIS
    page_size: int | None = None
    date_format: str = DEFAULT_DATE_FORMAT
    pygments_style: str = DEFAULT_PYGMENTS_STYLE
    workers: int | None = None


@dc.dataclass(frozen=True, slots=True)
class SiteConfig:
    """Fully resolved configuration for one build."""

    site: SiteMetadata = dc.field(default_factory=SiteMetadata)
    build: BuildSettings = dc.field(default_factory=BuildSettings)

    def with_overrides(
        self,
        *,
        content_root: Path | None = None,
        output_root: Path | None = None,
        workers: int | None = None,
    ) -> SiteConfig:
        """Return a copy with command-line overrides applied.

        Raises
        ------
        ConfigurationError
            If ``workers`` is not a positive integer.
        """
        changes: dict[str, object] = {}
        if content_root is not None:
            changes["content_root"] = content_root
        if output_root is not None:
            changes["output_root"] = output_root
        if workers is not None:
            changes["workers"] = _positive_int(workers, field="workers")
        if not changes:
            return self
        return dc.replace(self, build=dc.replace(self.build, **changes))


__all__ = ["BuildSettings", "SiteConfig", "SiteMetadata"]
