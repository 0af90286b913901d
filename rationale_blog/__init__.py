"""Static site generator for the Rationale Emotions blog.

This package exposes the CLI entry points used by ``blog build`` to render
Markdown posts into a static HTML tree.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from rationale_blog import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
