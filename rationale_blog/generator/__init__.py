"""Utilities for rendering posts and resolving them into site documents."""

from .link_rewriter import ContentLinkExtension
from .models import OutputDocument, RenderedPage, TransformSettings
from .page_resolver import PageResolver, route_to_path, sort_index, tag_route
from .renderer import HtmlContentRenderer
from .transformer import derive_slug, make_excerpt, transform

__all__ = [
    "ContentLinkExtension",
    "HtmlContentRenderer",
    "OutputDocument",
    "PageResolver",
    "RenderedPage",
    "TransformSettings",
    "derive_slug",
    "make_excerpt",
    "route_to_path",
    "sort_index",
    "tag_route",
    "transform",
]
