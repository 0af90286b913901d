"""Unit tests for resolving rendered pages into site documents.

These tests cover :class:`rationale_blog.generator.PageResolver`: index
ordering, detail and listing templates, pagination, tag listings, and the
route table that turns duplicate routes into :class:`SlugCollision`.
"""

from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from rationale_blog.config import BuildSettings, SiteConfig, SiteMetadata
from rationale_blog.errors import SlugCollision
from rationale_blog.frontmatter import Frontmatter
from rationale_blog.generator import (
    PageResolver,
    RenderedPage,
    route_to_path,
    sort_index,
    tag_route,
)


def _page(
    slug: str,
    date: dt.date,
    *,
    title: str | None = None,
    tags: tuple[str, ...] = (),
    source: str | None = None,
) -> RenderedPage:
    return RenderedPage(
        source_path=Path(source or f"/content{slug}.md"),
        slug=slug,
        frontmatter=Frontmatter(title=title or slug.strip("/"), date=date, tags=tags),
        html=f"<p>Body of {slug}</p>",
        excerpt=f"Body of {slug}",
    )


def _soup(documents: list, route: str) -> BeautifulSoup:
    html = next(doc.html for doc in documents if doc.route == route)
    return BeautifulSoup(html, "html.parser")


def test_index_sorted_by_date_descending() -> None:
    pages = [
        _page("/b", dt.date(2020, 1, 2)),
        _page("/a", dt.date(2021, 5, 1)),
        _page("/c", dt.date(2019, 12, 31)),
    ]
    dates = [page.frontmatter.date for page in sort_index(pages)]
    assert dates == sorted(dates, reverse=True)
    assert len(set(dates)) == len(dates)


def test_index_ties_broken_by_slug() -> None:
    day = dt.date(2020, 1, 1)
    pages = [_page("/zeta", day), _page("/alpha", day), _page("/mid", dt.date(2021, 1, 1))]
    assert [page.slug for page in sort_index(pages)] == ["/mid", "/alpha", "/zeta"]


def test_detail_document_contains_post_fields() -> None:
    site = SiteConfig(
        site=SiteMetadata(title="Blog", issues_url="https://example.invalid/issues")
    )
    page = _page("/2020-01-01-hello", dt.date(2020, 1, 1), title="Hello", tags=("java", "testng"))

    documents = PageResolver(site).resolve([page])

    detail = next(doc for doc in documents if doc.route == "/2020-01-01-hello")
    assert "<h1>Hello</h1>" in detail.html
    assert detail.source == str(page.source_path)
    soup = BeautifulSoup(detail.html, "html.parser")
    assert soup.select_one(".post-date").get_text(strip=True) == "01 January, 2020"
    assert soup.select_one(".post-body p").get_text() == "Body of /2020-01-01-hello"
    assert [a["href"] for a in soup.select("a.post-tag")] == ["/tags/java", "/tags/testng"]
    assert soup.select_one(".post-issues a")["href"] == "https://example.invalid/issues"


def test_titles_are_escaped_but_body_html_is_not() -> None:
    page = _page("/x", dt.date(2020, 1, 1), title="<script>alert(1)</script>")
    detail = PageResolver(SiteConfig()).resolve([page])[0]
    assert "<script>alert(1)</script>" not in detail.html
    assert "<p>Body of /x</p>" in detail.html


def test_listing_contains_every_post_in_order() -> None:
    pages = [_page("/old", dt.date(2019, 1, 1)), _page("/new", dt.date(2021, 1, 1))]
    documents = PageResolver(SiteConfig()).resolve(pages)

    routes = [doc.route for doc in documents]
    assert routes.count("/") == 1
    soup = _soup(documents, "/")
    assert [a["href"] for a in soup.select("a.post-link")] == ["/new", "/old"]
    assert [p.get_text() for p in soup.select(".post-excerpt")] == ["Body of /new", "Body of /old"]
    assert not soup.select(".pagination")


def test_empty_site_still_has_a_listing() -> None:
    documents = PageResolver(SiteConfig()).resolve([])
    assert [doc.route for doc in documents] == ["/"]
    assert "No posts yet." in documents[0].html


def test_listing_paginates_with_page_size() -> None:
    pages = [_page(f"/p{n}", dt.date(2020, 1, n)) for n in range(1, 6)]
    site = SiteConfig(build=BuildSettings(page_size=2))

    documents = PageResolver(site).resolve(pages)

    listing_routes = [doc.route for doc in documents if doc.source.startswith("<listing")]
    assert listing_routes == ["/", "/page/2", "/page/3"]
    first = _soup(documents, "/")
    assert [a["href"] for a in first.select("a.post-link")] == ["/p5", "/p4"]
    assert first.select_one(".pagination__next")["href"] == "/page/2"
    assert first.select_one(".pagination__previous") is None
    middle = _soup(documents, "/page/2")
    assert middle.select_one(".pagination__previous")["href"] == "/"
    assert middle.select_one(".pagination__next")["href"] == "/page/3"
    last = _soup(documents, "/page/3")
    assert [a["href"] for a in last.select("a.post-link")] == ["/p1"]
    assert last.select_one(".pagination__next") is None


def test_tag_pages_group_posts() -> None:
    pages = [
        _page("/a", dt.date(2020, 1, 1), tags=("Java",)),
        _page("/b", dt.date(2021, 1, 1), tags=("java", "misc")),
    ]
    documents = PageResolver(SiteConfig()).resolve(pages)

    tag_routes = [doc.route for doc in documents if doc.source.startswith("<tag")]
    assert tag_routes == ["/tags/java", "/tags/misc"]
    java = _soup(documents, "/tags/java")
    assert [a["href"] for a in java.select("a.post-link")] == ["/b", "/a"]


def test_non_ascii_tags_get_their_own_pages() -> None:
    pages = [
        _page("/a", dt.date(2021, 1, 1), tags=("日本語",)),
        _page("/b", dt.date(2020, 1, 1), tags=("Ελληνικά",)),
    ]
    documents = PageResolver(SiteConfig()).resolve(pages)

    tag_docs = {doc.route: doc.source for doc in documents if doc.source.startswith("<tag")}
    assert tag_docs == {"/tags/日本語": "<tag 日本語>", "/tags/ελληνικά": "<tag Ελληνικά>"}
    greek = _soup(documents, "/tags/ελληνικά")
    assert [a["href"] for a in greek.select("a.post-link")] == ["/b"]


@pytest.mark.parametrize(
    ("tag", "route"),
    [
        ("TestNG Listeners", "/tags/testng-listeners"),
        ("Ünïcode", "/tags/ünïcode"),
        ("snake_case", "/tags/snake-case"),
        ("!!", "/tags/%21%21"),
    ],
)
def test_tag_route(tag: str, route: str) -> None:
    assert tag_route(tag) == route


def test_duplicate_slugs_name_both_paths() -> None:
    first = _page("/hello", dt.date(2020, 1, 1), source="/content/hello.md")
    second = _page("/hello", dt.date(2020, 1, 2), source="/content/hello.markdown")

    with pytest.raises(SlugCollision) as excinfo:
        PageResolver(SiteConfig()).resolve([first, second])

    error = excinfo.value
    assert error.route == "/hello"
    assert {error.first, error.second} == {"/content/hello.md", "/content/hello.markdown"}
    assert "/content/hello.md" in str(error)
    assert "/content/hello.markdown" in str(error)


def test_post_clashing_with_listing_route_collides() -> None:
    pages = [_page(f"/p{n}", dt.date(2020, 1, n)) for n in range(1, 4)]
    pages.append(_page("/page/2", dt.date(2019, 1, 1)))
    site = SiteConfig(build=BuildSettings(page_size=2))

    with pytest.raises(SlugCollision, match="/page/2"):
        PageResolver(site).resolve(pages)


@pytest.mark.parametrize(
    ("route", "expected"),
    [
        ("/", Path("out/index.html")),
        ("/2020-01-01-hello", Path("out/2020-01-01-hello/index.html")),
        ("/tags/java", Path("out/tags/java/index.html")),
    ],
)
def test_route_to_path(route: str, expected: Path) -> None:
    assert route_to_path(Path("out"), route) == expected
