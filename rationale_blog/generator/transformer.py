"""Turn content records into rendered pages.

:func:`transform` is a pure, module-level function so the builder can ship it
to worker processes. It parses front-matter, renders the Markdown body with
highlighted code blocks, derives the post's slug from its path, and builds a
plain-text excerpt for listings.

Example
-------
>>> from pathlib import Path
>>> from rationale_blog.generator.transformer import derive_slug
>>> derive_slug(Path("/site/content/2020-01-01-hello.md"), Path("/site/content"))
'/2020-01-01-hello'
"""

from __future__ import annotations

import typing as typ
from pathlib import PurePath

from bs4 import BeautifulSoup

from rationale_blog.errors import MalformedFrontmatter, RenderError
from rationale_blog.frontmatter import FrontmatterError, parse_post

from .link_rewriter import build_link_extension
from .models import RenderedPage, TransformSettings
from .renderer import HtmlContentRenderer

if typ.TYPE_CHECKING:
    from rationale_blog.source import ContentRecord

BLOCK_TAGS = (
    "blockquote",
    "dd",
    "div",
    "dt",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "li",
    "p",
    "pre",
    "td",
    "th",
    "tr",
)


def transform(record: ContentRecord, settings: TransformSettings) -> RenderedPage:
    """Render ``record`` into a :class:`RenderedPage`.

    Parameters
    ----------
    record : ContentRecord
        Raw post discovered by the content source.
    settings : TransformSettings
        Content root, excerpt budget, and highlighting style.

    Returns
    -------
    RenderedPage
        Immutable page carrying the slug, front-matter, HTML, and excerpt.

    Raises
    ------
    MalformedFrontmatter
        If the front-matter block is missing or lacks a usable title or date.
    RenderError
        If converting the Markdown body to HTML fails.
    """
    try:
        frontmatter, body = parse_post(record.raw_body)
    except FrontmatterError as exc:
        raise MalformedFrontmatter(record.path, str(exc)) from exc

    relative = _relative_posix(record.path, settings.content_root)
    renderer = HtmlContentRenderer(
        settings.pygments_style,
        link_extension=build_link_extension(relative, settings.extensions),
    )
    try:
        html = renderer.markdown(body)
    except Exception as exc:  # noqa: BLE001 - converter failures stay scoped to this post
        raise RenderError(record.path, f"{type(exc).__name__}: {exc}") from exc

    return RenderedPage(
        source_path=record.path,
        slug=derive_slug(record.path, settings.content_root),
        frontmatter=frontmatter,
        html=html,
        excerpt=make_excerpt(html, settings.excerpt_length, settings.ellipsis),
    )


def derive_slug(path: PurePath, content_root: PurePath) -> str:
    """Return the route for ``path``: root-relative, extension-free, ``/``-led."""
    relative = _relative_posix(path, content_root)
    stem = PurePath(relative).with_suffix("").as_posix()
    return f"/{stem}"


def make_excerpt(html: str, budget: int, ellipsis: str = "…") -> str:
    """Return the text of ``html`` truncated to ``budget`` characters.

    Tags are stripped and entities decoded before truncating, so the cut can
    only land between characters. Truncated text is trimmed back to the last
    word boundary when one exists and ``ellipsis`` is appended.
    """
    text = _plain_text(html)
    if len(text) <= budget:
        return text
    cut = text[:budget]
    if text[budget] != " ":
        boundary = cut.rfind(" ")
        if boundary > 0:
            cut = cut[:boundary]
    return cut.rstrip() + ellipsis


def _plain_text(html: str) -> str:
    """Return whitespace-collapsed text content with block boundaries kept."""
    soup = BeautifulSoup(html, "html.parser")
    for block in soup.find_all(list(BLOCK_TAGS)):
        block.insert_after(" ")
    return " ".join(soup.get_text().split())


def _relative_posix(path: PurePath, content_root: PurePath) -> str:
    """Return ``path`` relative to ``content_root`` using ``/`` separators."""
    try:
        relative = path.relative_to(content_root)
    except ValueError as exc:
        msg = f"'{path}' is not inside the content root '{content_root}'."
        raise ValueError(msg) from exc
    return relative.as_posix()


__all__ = ["derive_slug", "make_excerpt", "transform"]
