"""Cyclopts CLI entrypoint for building the blog.

The ``blog`` console script defined here turns the Markdown posts under the
content root into a static HTML tree under the output root. Typical usage
involves running ``blog build`` locally or in CI; paths default to
``content`` and ``public`` and can also be supplied through ``BLOG_*``
environment variables.

Examples
--------
Build the site with the default configuration:

>>> from rationale_blog.cli import main
>>> main()  # doctest: +SKIP

Build into a custom directory:

>>> from rationale_blog.cli import app
>>> app.run(["build", "--output-root", "dist"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .builder import SiteBuilder
from .config import load_site_config
from .errors import BlogBuildError

DEFAULT_CONFIG = Path("config/site.yaml")
LOG_FORMAT = "%(levelname)s: %(message)s"

logger = logging.getLogger(__name__)

app = App(name="blog", config=cyclopts.config.Env("BLOG_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _resolve_config_path(config: Path | None) -> Path | None:
    """Return the explicit config path, the default if present, else None."""
    if config is not None:
        return config
    return DEFAULT_CONFIG if DEFAULT_CONFIG.exists() else None


@app.command(help="Build static HTML pages from Markdown posts.")
def build(
    *,
    content_root: typ.Annotated[
        Path | None,
        Parameter(help="Directory of Markdown posts", env_var="BLOG_CONTENT_ROOT"),
    ] = None,
    output_root: typ.Annotated[
        Path | None,
        Parameter(help="Directory to write the site into", env_var="BLOG_OUTPUT_ROOT"),
    ] = None,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to site config", env_var="BLOG_CONFIG")
    ] = None,
    workers: typ.Annotated[
        int | None, Parameter(help="Worker processes used to render posts")
    ] = None,
) -> None:
    """Build the blog for the requested configuration.

    Parameters
    ----------
    content_root : Path or None, optional
        Overrides ``build.content_root`` from the config (default ``content``).
    output_root : Path or None, optional
        Overrides ``build.output_root`` from the config (default ``public``).
    config : Path or None, optional
        Path to the ``site.yaml`` configuration; ``config/site.yaml`` is used
        when present, otherwise built-in defaults apply.
    workers : int or None, optional
        Process pool size; ``1`` renders posts in-process.

    Returns
    -------
    None
        Writes the site and prints every generated path.

    Raises
    ------
    SystemExit
        With status 1 when a fatal error occurs or any post failed to build.
    """
    try:
        site_config = load_site_config(_resolve_config_path(config)).with_overrides(
            content_root=content_root, output_root=output_root, workers=workers
        )
        report = SiteBuilder(site_config).run()
    except BlogBuildError as exc:
        logger.error("build failed: %s", exc)  # noqa: TRY400
        raise SystemExit(1) from exc

    for path in report.written:
        print(f"wrote {_format_path(path)}")
    if not report.succeeded:
        raise SystemExit(1)


def main() -> None:
    """Invoke the Cyclopts application that powers the ``blog`` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
