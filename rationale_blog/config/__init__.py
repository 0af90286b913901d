"""Load and validate the blog's site configuration YAML.

This subpackage parses ``config/site.yaml``, applies defaults for every
missing key, and produces frozen dataclasses (:class:`SiteConfig`,
:class:`SiteMetadata`, :class:`BuildSettings`) that the builder and templates
consume. The primary entry point is :func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from rationale_blog.config import load_site_config
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> site.site.title  # doctest: +SKIP
'Rationale Emotions'
"""

from rationale_blog.errors import ConfigurationError

from .loader import load_site_config
from .models import BuildSettings, SiteConfig, SiteMetadata

__all__ = [
    "BuildSettings",
    "ConfigurationError",
    "SiteConfig",
    "SiteMetadata",
    "load_site_config",
]
