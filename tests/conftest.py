"""Shared fixtures for rationale_blog tests.

The fixtures build throwaway content trees beneath ``tmp_path`` so every test
works on its own posts and output directory.
"""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from rationale_blog.config import BuildSettings, SiteConfig

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


def _post_text(
    *,
    title: str | None = "Hello",
    date: str | None = "2020-01-01",
    tags: str | None = None,
    body: str = "Hello world.\n",
) -> str:
    """Return post text with a front-matter block built from the arguments."""
    lines = ["---"]
    if title is not None:
        lines.append(f"title: {title}")
    if date is not None:
        lines.append(f"date: {date}")
    if tags is not None:
        lines.append(f"tags: {tags}")
    lines.append("---")
    return "\n".join(lines) + "\n" + dedent(body)


@pytest.fixture(name="post_text")
def post_text_fixture() -> cabc.Callable[..., str]:
    """Return the helper that renders front-matter plus body into post text."""
    return _post_text


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """Return an empty content directory."""
    root = tmp_path / "content"
    root.mkdir()
    return root


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    """Return the (not yet created) output directory."""
    return tmp_path / "public"


@pytest.fixture
def write_post(content_root: Path) -> cabc.Callable[..., Path]:
    """Return a helper that writes a post relative to the content root."""

    def _write(relative: str, text: str | None = None, **fields: typ.Any) -> Path:
        path = content_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text if text is not None else _post_text(**fields), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def site_config(content_root: Path, output_root: Path) -> SiteConfig:
    """Return an in-process build configuration rooted in ``tmp_path``."""
    return SiteConfig(
        build=BuildSettings(
            content_root=content_root, output_root=output_root, workers=1
        )
    )
