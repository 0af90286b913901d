"""Utility helpers shared by the site configuration loader."""

from __future__ import annotations

import typing as typ

from rationale_blog.errors import ConfigurationError


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _positive_int(value: object | None, *, field: str) -> int | None:
    """Return ``value`` as a positive integer, ``None`` when unset."""
    match value:
        case None:
            return None
        case bool():
            pass
        case int() if value > 0:
            return value
        case str() if value.strip().isdigit() and int(value) > 0:
            return int(value)
    msg = f"'{field}' must be a positive integer, got {value!r}."
    raise ConfigurationError(msg)


def _normalize_extensions(value: object | None) -> tuple[str, ...] | None:
    """Normalize extension entries into lower-case, dot-prefixed suffixes."""
    if value is None:
        return None
    if isinstance(value, str):
        value = [segment for segment in value.split(",") if segment.strip()]
    if not isinstance(value, list) or not value:
        msg = "'extensions' must be a non-empty list of file suffixes."
        raise ConfigurationError(msg)
    normalized: list[str] = []
    for entry in value:
        text = str(entry).strip().lower()
        if not text:
            continue
        suffix = text if text.startswith(".") else f".{text}"
        if suffix not in normalized:
            normalized.append(suffix)
    return tuple(normalized)


def _section(raw: typ.Mapping[str, typ.Any], key: str) -> typ.Mapping[str, typ.Any]:
    """Return the mapping stored under ``key`` or an empty mapping."""
    payload = raw.get(key) or {}
    if not isinstance(payload, dict):
        msg = f"'{key}' must be a mapping."
        raise ConfigurationError(msg)
    return payload


__all__ = [
    "_normalize_extensions",
    "_optional_str",
    "_positive_int",
    "_section",
]
