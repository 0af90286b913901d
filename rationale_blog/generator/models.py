"""Shared dataclasses used by the page generation pipeline."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path  # noqa: TC003 - used for runtime type metadata

from rationale_blog._constants import (
    DEFAULT_ELLIPSIS,
    DEFAULT_EXCERPT_LENGTH,
    DEFAULT_EXTENSIONS,
    DEFAULT_PYGMENTS_STYLE,
)
from rationale_blog.config import BuildSettings  # noqa: TC001
from rationale_blog.frontmatter import Frontmatter  # noqa: TC001


@dc.dataclass(frozen=True, slots=True)
class TransformSettings:
    """Everything a worker needs to turn a record into a page.

    Attributes
    ----------
    content_root : Path
        Absolute content root; stripped from record paths to form slugs.
    extensions : tuple[str, ...]
        Content suffixes, used to recognise links between posts.
    excerpt_length : int
        Character budget for excerpts, excluding the ellipsis.
    ellipsis : str
        Marker appended to truncated excerpts.
    pygments_style : str
        Pygments style name passed to the highlighter.
    """

    content_root: Path
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    excerpt_length: int = DEFAULT_EXCERPT_LENGTH
    ellipsis: str = DEFAULT_ELLIPSIS
    pygments_style: str = DEFAULT_PYGMENTS_STYLE

    @classmethod
    def from_build_settings(
        cls, settings: BuildSettings, *, content_root: Path
    ) -> TransformSettings:
        """Derive transform settings from the build section of the site config."""
        return cls(
            content_root=content_root,
            extensions=settings.extensions,
            excerpt_length=settings.excerpt_length,
            ellipsis=settings.ellipsis,
            pygments_style=settings.pygments_style,
        )


@dc.dataclass(frozen=True, slots=True)
class RenderedPage:
    """A post after front-matter parsing and Markdown rendering.

    Attributes
    ----------
    source_path : Path
        File the page was rendered from.
    slug : str
        Route of the post, always starting with ``/``.
    frontmatter : Frontmatter
        Parsed title, date, and tags.
    html : str
        Rendered HTML body with highlighted code blocks.
    excerpt : str
        Plain-text preview used by listing pages.
    """

    source_path: Path
    slug: str
    frontmatter: Frontmatter
    html: str
    excerpt: str


@dc.dataclass(frozen=True, slots=True)
class OutputDocument:
    """A rendered HTML document waiting to be written at ``route``."""

    route: str
    source: str
    html: str


__all__ = ["OutputDocument", "RenderedPage", "TransformSettings"]
