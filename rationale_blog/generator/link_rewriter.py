"""Helpers for rewriting relative links between posts to their slugs."""

from __future__ import annotations

import posixpath
import typing as typ
from urllib.parse import urlsplit

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any


class ContentLinkExtension(Extension):
    """Rewrite relative links to other content files into site routes.

    Authors link between posts with file paths (``./other.md``,
    ``../2019/intro.md#setup``) so the links work when browsing the content
    tree directly. This extension converts such links into the routes the
    build writes (``/other``, ``/2019/intro#setup``). Links to anything that
    is not a content file are left untouched.
    """

    def __init__(self, base_dir: str, extensions: typ.Iterable[str]) -> None:
        self.base_dir = base_dir
        self.extensions = tuple(ext.lower() for ext in extensions)

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the content-link treeprocessor on the Markdown instance."""
        processor = ContentLinkTreeprocessor(md, self.base_dir, self.extensions)
        md.treeprocessors.register(processor, "blog_content_links", 15)


class ContentLinkTreeprocessor(Treeprocessor):
    """Point relative content-file links at their slugs."""

    def __init__(
        self, md: Markdown, base_dir: str, extensions: tuple[str, ...]
    ) -> None:
        super().__init__(md)
        self.base_dir = base_dir
        self.extensions = extensions

    def run(self, root: Element) -> Element:
        """Rewrite relative anchors in the parsed markdown tree to slugs."""
        for element in root.iter():
            if element.tag == "a":
                rewritten = self.rewrite(element.get("href"))
                if rewritten:
                    element.set("href", rewritten)
        return root

    def rewrite(self, target: str | None) -> str | None:
        """Return the route for a relative content link, or None to keep it."""
        if not target or target.startswith(("#", "//", "/")) or "://" in target:
            return None

        parsed = urlsplit(target)
        if parsed.scheme or parsed.netloc or not parsed.path:
            return None
        stem, suffix = posixpath.splitext(parsed.path)
        if suffix.lower() not in self.extensions:
            return None

        joined = posixpath.normpath(posixpath.join(self.base_dir, stem))
        if joined in (".", "") or joined == ".." or joined.startswith("../"):
            return None

        url = f"/{joined}"
        if parsed.query:
            url = f"{url}?{parsed.query}"
        if parsed.fragment:
            url = f"{url}#{parsed.fragment}"
        return url


def build_link_extension(
    relative_path: str, extensions: typ.Iterable[str]
) -> ContentLinkExtension:
    """Return a ContentLinkExtension for a post at ``relative_path``."""
    return ContentLinkExtension(posixpath.dirname(relative_path), extensions)


__all__ = [
    "ContentLinkExtension",
    "ContentLinkTreeprocessor",
    "build_link_extension",
]
