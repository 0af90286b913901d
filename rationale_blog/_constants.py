"""Common literal values used across rationale_blog.

These constants keep defaults for content discovery, excerpts, and output
layout centralized so the config loader, generators, and tests can import the
same values without drifting.

Examples
--------
>>> from rationale_blog import _constants
>>> _constants.DEFAULT_EXCERPT_LENGTH
140
>>> ".md" in _constants.DEFAULT_EXTENSIONS
True
"""

DEFAULT_EXTENSIONS = (".md", ".markdown")
DEFAULT_EXCERPT_LENGTH = 140
DEFAULT_ELLIPSIS = "…"
DEFAULT_DATE_FORMAT = "%d %B, %Y"
DEFAULT_PYGMENTS_STYLE = "monokai"
INDEX_FILENAME = "index.html"
STYLESHEET_FILENAME = "pygments.css"
READ_RETRY_BACKOFF = 0.2
