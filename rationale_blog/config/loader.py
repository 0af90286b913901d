"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from rationale_blog.errors import ConfigurationError

from .helpers import _normalize_extensions, _optional_str, _positive_int, _section
from .models import BuildSettings, SiteConfig, SiteMetadata


def load_site_config(path: Path | None) -> SiteConfig:
    """Load the YAML configuration describing the site and build settings.

    Parameters
    ----------
    path : Path or None
        Filesystem path to the YAML configuration file (for example,
        ``config/site.yaml``). ``None`` returns the built-in defaults.

    Returns
    -------
    SiteConfig
        Parsed configuration with defaults applied for every missing key.

    Raises
    ------
    ConfigurationError
        If the file does not exist, cannot be parsed, or contains invalid
        values (for example, a non-positive ``page_size``).

    Examples
    --------
    >>> from rationale_blog.config import load_site_config
    >>> load_site_config(None).build.excerpt_length
    140
    """
    if path is None:
        return SiteConfig()
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise ConfigurationError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except YAMLError as exc:
        msg = f"Configuration file '{path}' is not valid YAML: {exc}"
        raise ConfigurationError(msg) from exc
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise ConfigurationError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    return SiteConfig(
        site=_build_site_metadata(_section(raw, "site")),
        build=_build_settings(_section(raw, "build")),
    )


def _build_site_metadata(payload: typ.Mapping[str, typ.Any]) -> SiteMetadata:
    """Build SiteMetadata from the ``site`` mapping."""
    base = SiteMetadata()
    return SiteMetadata(
        title=_optional_str(payload.get("title")) or base.title,
        author=_optional_str(payload.get("author")) or base.author,
        description=_optional_str(payload.get("description")) or base.description,
        issues_url=_optional_str(payload.get("issues_url")),
    )


def _build_settings(payload: typ.Mapping[str, typ.Any]) -> BuildSettings:
    """Build BuildSettings from the ``build`` mapping, applying defaults."""
    base = BuildSettings()
    excerpt_length = _positive_int(
        payload.get("excerpt_length"), field="excerpt_length"
    )
    ellipsis = payload.get("ellipsis")
    return BuildSettings(
        content_root=_as_path(payload.get("content_root"), base.content_root),
        output_root=_as_path(payload.get("output_root"), base.output_root),
        extensions=_normalize_extensions(payload.get("extensions")) or base.extensions,
        excerpt_length=excerpt_length or base.excerpt_length,
        ellipsis=base.ellipsis if ellipsis is None else str(ellipsis),
        page_size=_positive_int(payload.get("page_size"), field="page_size"),
        date_format=_optional_str(payload.get("date_format")) or base.date_format,
        pygments_style=_optional_str(payload.get("pygments_style"))
        or base.pygments_style,
        workers=_positive_int(payload.get("workers"), field="workers"),
    )


def _as_path(value: object | None, default: Path) -> Path:
    """Return ``value`` as a Path or ``default`` when unset."""
    text = _optional_str(value)
    if text is None:
        return default
    return Path(text).expanduser()


__all__ = ["load_site_config"]
