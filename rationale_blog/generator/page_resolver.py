"""Bind rendered pages to templates and routes.

:class:`PageResolver` takes every :class:`RenderedPage` from a build and
produces the in-memory :class:`OutputDocument` list the builder writes: one
detail document per post, the date-sorted listing (optionally paginated), and
one listing per tag. Every route is registered in a single table, so two
outputs that claim the same route raise :class:`SlugCollision` before anything
touches the disk.

Example
-------
>>> from rationale_blog.config import SiteConfig
>>> from rationale_blog.generator import PageResolver
>>> resolver = PageResolver(SiteConfig())
>>> [doc.route for doc in resolver.resolve([])]
['/']
"""

from __future__ import annotations

import re
import typing as typ
from pathlib import Path
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader

from rationale_blog._constants import INDEX_FILENAME
from rationale_blog.errors import SlugCollision

from .models import OutputDocument, RenderedPage

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from rationale_blog.config import SiteConfig


def sort_index(pages: cabc.Iterable[RenderedPage]) -> list[RenderedPage]:
    """Return pages ordered by date descending, ties broken by slug ascending."""
    by_slug = sorted(pages, key=lambda page: page.slug)
    return sorted(by_slug, key=lambda page: page.frontmatter.date, reverse=True)


def route_to_path(output_root: Path, route: str) -> Path:
    """Return the file that serves ``route`` beneath ``output_root``."""
    relative = route.strip("/")
    if not relative:
        return output_root / INDEX_FILENAME
    return output_root.joinpath(*relative.split("/"), INDEX_FILENAME)


def listing_route(number: int) -> str:
    """Return the route of listing page ``number`` (1-based)."""
    return "/" if number == 1 else f"/page/{number}"


def tag_route(tag: str) -> str:
    """Return the route of the listing for ``tag``."""
    return f"/tags/{_slugify(tag)}"


class PageResolver:
    """Render detail, listing, and tag documents for a set of pages."""

    def __init__(
        self, site_config: SiteConfig, *, templates_dir: Path | None = None
    ) -> None:
        """Initialize the resolver and its Jinja environment.

        Parameters
        ----------
        site_config : SiteConfig
            Site metadata passed to every template plus the pagination and
            date-format settings.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.
        """
        self.site_config = site_config
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.post_template = self.env.get_template("post.jinja")
        self.index_template = self.env.get_template("index.jinja")
        self.tag_template = self.env.get_template("tag.jinja")

    def resolve(self, pages: cabc.Iterable[RenderedPage]) -> list[OutputDocument]:
        """Return every output document for ``pages``.

        Raises
        ------
        SlugCollision
            If two posts share a slug, or a post's slug clashes with a listing
            or tag route.
        """
        routes: dict[str, str] = {}
        index = sort_index(pages)
        documents: list[OutputDocument] = []
        for page in index:
            source = str(page.source_path)
            self._register(routes, page.slug, source)
            documents.append(
                OutputDocument(page.slug, source, self._render_post(page))
            )
        documents.extend(self._listing_documents(routes, index))
        documents.extend(self._tag_documents(routes, index))
        return documents

    @staticmethod
    def _register(routes: dict[str, str], route: str, source: str) -> None:
        """Claim ``route`` for ``source``, mutating ``routes``."""
        existing = routes.get(route)
        if existing is not None:
            raise SlugCollision(route, existing, source)
        routes[route] = source

    def _render_post(self, page: RenderedPage) -> str:
        meta = page.frontmatter
        context = {
            "site": self.site_config.site,
            "title": meta.title,
            "date": self._format_date(page),
            "html": page.html,
            "tags": [{"label": tag, "href": tag_route(tag)} for tag in meta.tags],
            "slug": page.slug,
        }
        return self._finish(self.post_template.render(**context))

    def _listing_documents(
        self, routes: dict[str, str], index: list[RenderedPage]
    ) -> list[OutputDocument]:
        """Split the index into listing pages, each at its own route."""
        page_size = self.site_config.build.page_size
        chunks = _paginate(index, page_size)
        total = len(chunks)
        documents: list[OutputDocument] = []
        for number, chunk in enumerate(chunks, start=1):
            route = listing_route(number)
            source = f"<listing page {number}>"
            self._register(routes, route, source)
            pagination = {
                "number": number,
                "total": total,
                "previous_url": listing_route(number - 1) if number > 1 else None,
                "next_url": listing_route(number + 1) if number < total else None,
            }
            html = self.index_template.render(
                site=self.site_config.site,
                posts=self._entries(chunk),
                pagination=pagination,
            )
            documents.append(OutputDocument(route, source, self._finish(html)))
        return documents

    def _tag_documents(
        self, routes: dict[str, str], index: list[RenderedPage]
    ) -> list[OutputDocument]:
        """Render one listing per tag slug, in order of first appearance."""
        labels: dict[str, str] = {}
        members: dict[str, list[RenderedPage]] = {}
        for page in index:
            for tag in page.frontmatter.tags:
                route = tag_route(tag)
                labels.setdefault(route, tag)
                bucket = members.setdefault(route, [])
                if page not in bucket:
                    bucket.append(page)

        documents: list[OutputDocument] = []
        for route, tagged in members.items():
            label = labels[route]
            source = f"<tag {label}>"
            self._register(routes, route, source)
            html = self.tag_template.render(
                site=self.site_config.site, tag=label, posts=self._entries(tagged)
            )
            documents.append(OutputDocument(route, source, self._finish(html)))
        return documents

    def _entries(self, pages: cabc.Iterable[RenderedPage]) -> list[dict[str, str]]:
        """Return the listing fields for each page."""
        return [
            {
                "date": self._format_date(page),
                "title": page.frontmatter.title,
                "slug": page.slug,
                "excerpt": page.excerpt,
            }
            for page in pages
        ]

    def _format_date(self, page: RenderedPage) -> str:
        return page.frontmatter.date.strftime(self.site_config.build.date_format)

    @staticmethod
    def _finish(html: str) -> str:
        """Ensure rendered documents end with a newline."""
        return html if html.endswith("\n") else f"{html}\n"


def _paginate(
    index: list[RenderedPage], page_size: int | None
) -> list[list[RenderedPage]]:
    """Split ``index`` into chunks of ``page_size``; always at least one chunk."""
    if not page_size or len(index) <= page_size:
        return [index]
    return [index[start : start + page_size] for start in range(0, len(index), page_size)]


def _slugify(value: str) -> str:
    """Convert a tag into a lowercase hyphen-separated slug.

    Unicode letters and digits are kept. A tag with none of them is
    percent-encoded whole, so distinct tags never share a slug by accident.
    """
    slug = re.sub(r"[\W_]+", "-", value.lower()).strip("-")
    return slug or quote(value.strip(), safe="") or "tag"


__all__ = [
    "PageResolver",
    "listing_route",
    "route_to_path",
    "sort_index",
    "tag_route",
]
