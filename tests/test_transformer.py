"""Unit tests for turning content records into rendered pages.

These tests cover :func:`rationale_blog.generator.transform` together with
slug derivation and excerpt truncation, including the per-record errors
raised for malformed posts.
"""

from __future__ import annotations

import datetime as dt
import typing as typ
from pathlib import Path, PurePosixPath, PureWindowsPath

import pytest

from rationale_blog.errors import MalformedFrontmatter, RenderError
from rationale_blog.generator import (
    TransformSettings,
    derive_slug,
    make_excerpt,
    transform,
)
from rationale_blog.source import ContentRecord

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@pytest.fixture
def settings(content_root: Path) -> TransformSettings:
    return TransformSettings(content_root=content_root)


def _record(root: Path, relative: str, text: str) -> ContentRecord:
    return ContentRecord(path=root / relative, raw_body=text)


def test_transform_hello_post(
    content_root: Path,
    settings: TransformSettings,
    post_text: cabc.Callable[..., str],
) -> None:
    """The canonical hello post gets its slug, metadata, and HTML."""
    record = _record(
        content_root,
        "2020-01-01-hello.md",
        post_text(title="Hello", date="2020-01-01", tags="[greeting]", body="Hi *there*.\n"),
    )

    page = transform(record, settings)

    assert page.slug == "/2020-01-01-hello"
    assert page.source_path == record.path
    assert page.frontmatter.title == "Hello"
    assert page.frontmatter.date == dt.date(2020, 1, 1)
    assert page.frontmatter.tags == ("greeting",)
    assert page.html == "<p>Hi <em>there</em>.</p>"
    assert page.excerpt == "Hi there."


def test_transform_is_deterministic(
    content_root: Path,
    settings: TransformSettings,
    post_text: cabc.Callable[..., str],
) -> None:
    """Identical input yields identical pages."""
    body = "Some text.\n\n```python\nprint('x')\n```\n"
    record = _record(content_root, "a.md", post_text(body=body))
    assert transform(record, settings) == transform(record, settings)


def test_missing_date_raises_malformed_frontmatter(
    content_root: Path,
    settings: TransformSettings,
    post_text: cabc.Callable[..., str],
) -> None:
    record = _record(content_root, "no-date.md", post_text(date=None))
    with pytest.raises(MalformedFrontmatter) as excinfo:
        transform(record, settings)
    assert excinfo.value.path == record.path
    assert str(record.path) in str(excinfo.value)
    assert "date" in excinfo.value.reason


def test_converter_failure_raises_render_error(
    content_root: Path,
    settings: TransformSettings,
    post_text: cabc.Callable[..., str],
    mocker: typ.Any,
) -> None:
    """Any failure inside the Markdown converter is scoped to the record."""
    mocker.patch(
        "rationale_blog.generator.transformer.HtmlContentRenderer.markdown",
        side_effect=RuntimeError("boom"),
    )
    record = _record(content_root, "a.md", post_text())
    with pytest.raises(RenderError, match="boom") as excinfo:
        transform(record, settings)
    assert excinfo.value.path == record.path


def test_links_between_posts_use_slugs(
    content_root: Path,
    settings: TransformSettings,
    post_text: cabc.Callable[..., str],
) -> None:
    record = _record(
        content_root, "2020/post.md", post_text(body="See [intro](../intro.md).\n")
    )
    page = transform(record, settings)
    assert 'href="/intro"' in page.html
    assert page.slug == "/2020/post"


@pytest.mark.parametrize(
    ("path", "root", "expected"),
    [
        (PurePosixPath("/site/content/2020-01-01-hello.md"), PurePosixPath("/site/content"), "/2020-01-01-hello"),
        (PurePosixPath("/site/content/2020/deep/post.markdown"), PurePosixPath("/site/content"), "/2020/deep/post"),
        (PurePosixPath("/site/content/v1.2-notes.md"), PurePosixPath("/site/content"), "/v1.2-notes"),
        (PureWindowsPath("C:/site/content/2020/post.md"), PureWindowsPath("C:/site/content"), "/2020/post"),
    ],
)
def test_derive_slug(path: Path, root: Path, expected: str) -> None:
    """Slugs strip the root and extension and use forward slashes."""
    assert derive_slug(path, root) == expected


def test_slugs_are_distinct_for_fixture_paths() -> None:
    root = PurePosixPath("/c")
    paths = [root / name for name in ("a.md", "b.md", "x/a.md", "x/b.md", "A.md")]
    slugs = {derive_slug(path, root) for path in paths}
    assert len(slugs) == len(paths)


def test_excerpt_short_text_is_untouched() -> None:
    assert make_excerpt("<p>Short <strong>text</strong>.</p>", 140) == "Short text."


def test_excerpt_exact_budget_is_untouched() -> None:
    text = "x" * 140
    assert make_excerpt(f"<p>{text}</p>", 140) == text


def test_excerpt_truncates_at_word_boundary() -> None:
    html = "<p>" + "word " * 60 + "</p>"
    excerpt = make_excerpt(html, 140)
    assert excerpt.endswith("…")
    assert len(excerpt) <= 141
    assert excerpt[:-1].split() == ["word"] * 28


def test_excerpt_keeps_block_boundaries() -> None:
    assert make_excerpt("<h2>Title</h2><p>Body</p>", 140) == "Title Body"


@pytest.mark.parametrize(
    "html",
    [
        "<p>" + "&amp;" * 300 + "</p>",
        "<p>" + "é" * 300 + "</p>",
        "<p>" + "😀" * 300 + "</p>",
        "<p>" + "a" * 139 + " " + "b" * 50 + "</p>",
    ],
)
def test_excerpt_length_bound(html: str) -> None:
    """Excerpts never exceed the budget plus the ellipsis marker."""
    excerpt = make_excerpt(html, 140, "…")
    assert len(excerpt) <= 140 + len("…")
    assert "&amp" not in excerpt


def test_excerpt_never_splits_entities() -> None:
    """Entities are decoded before cutting, so no partial entity survives."""
    excerpt = make_excerpt("<p>" + "a" * 138 + "&amp;&amp;&amp;</p>", 140, "...")
    assert excerpt == "a" * 138 + "&&..."
