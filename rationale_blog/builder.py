"""High-level orchestration for a blog build.

This module runs the whole pipeline for one build: it discovers posts with
:class:`~rationale_blog.source.ContentSource`, transforms them (on a process
pool when more than one worker is configured), resolves the resulting pages
into documents with :class:`~rationale_blog.generator.PageResolver`, and only
then writes the HTML tree and the Pygments stylesheet.

Per-post failures are logged, collected on the :class:`BuildReport`, and do
not stop the remaining posts from rendering. Fatal errors propagate before
any output is written, except write failures, which surface as
:class:`~rationale_blog.errors.OutputWriteError`.

Example
-------
>>> from rationale_blog.builder import SiteBuilder
>>> from rationale_blog.config import SiteConfig
>>> report = SiteBuilder(SiteConfig()).run()  # doctest: +SKIP
>>> report.succeeded  # doctest: +SKIP
True
"""

from __future__ import annotations

import dataclasses as dc
import functools
import logging
import os
import typing as typ
from concurrent.futures import ProcessPoolExecutor, as_completed

from ._constants import STYLESHEET_FILENAME
from .errors import OutputWriteError, RecordError
from .generator import (
    HtmlContentRenderer,
    OutputDocument,
    PageResolver,
    RenderedPage,
    TransformSettings,
    route_to_path,
    transform,
)
from .source import ContentSource

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .config import SiteConfig
    from .source import ContentRecord

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class BuildReport:
    """Outcome of a build.

    Attributes
    ----------
    pages : list[RenderedPage]
        Pages that rendered, ordered by source path.
    failures : list[RecordError]
        Per-post errors, ordered by source path.
    written : list[Path]
        Files written beneath the output root.
    """

    pages: list[RenderedPage] = dc.field(default_factory=list)
    failures: list[RecordError] = dc.field(default_factory=list)
    written: list[Path] = dc.field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """Return True when every post rendered."""
        return not self.failures


class SiteBuilder:
    """Build the static blog described by a :class:`SiteConfig`."""

    def __init__(
        self, site_config: SiteConfig, *, templates_dir: Path | None = None
    ) -> None:
        """Initialize the builder and eagerly load templates.

        Parameters
        ----------
        site_config : SiteConfig
            Resolved configuration with content/output roots and site metadata.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.
        """
        self.site_config = site_config
        self.resolver = PageResolver(site_config, templates_dir=templates_dir)
        self.renderer = HtmlContentRenderer(site_config.build.pygments_style)

    def run(self) -> BuildReport:
        """Run the pipeline and write the site.

        Returns
        -------
        BuildReport
            Rendered pages, per-post failures, and written paths.

        Raises
        ------
        ConfigurationError
            If the content root is missing or not a directory.
        ContentReadError
            If a content file stays unreadable after one retry.
        SlugCollision
            If two documents resolve to the same route; nothing is written.
        OutputWriteError
            If a file or directory under the output root cannot be written.
        """
        settings = self.site_config.build
        source = ContentSource(settings.content_root, extensions=settings.extensions)
        transform_settings = TransformSettings.from_build_settings(
            settings, content_root=source.root
        )
        report = self.transform_all(source, transform_settings)
        documents = self.resolver.resolve(report.pages)
        report.written = self._write(documents)
        if report.failures:
            logger.error(
                "%d of %d posts failed to build",
                len(report.failures),
                len(report.failures) + len(report.pages),
            )
        else:
            logger.info("built %d posts", len(report.pages))
        return report

    def transform_all(
        self, records: cabc.Iterable[ContentRecord], settings: TransformSettings
    ) -> BuildReport:
        """Transform ``records``, collecting pages and per-post failures."""
        report = BuildReport()
        workers = self._worker_count()
        if workers == 1:
            for record in records:
                produce = functools.partial(transform, record, settings)
                self._collect(report, record, produce)
        else:
            with ProcessPoolExecutor(max_workers=workers) as executor:
                futures = {
                    executor.submit(transform, record, settings): record
                    for record in records
                }
                for future in as_completed(futures):
                    self._collect(report, futures[future], future.result)
        report.pages.sort(key=lambda page: page.source_path)
        report.failures.sort(key=lambda failure: failure.path)
        return report

    @staticmethod
    def _collect(
        report: BuildReport,
        record: ContentRecord,
        produce: cabc.Callable[[], RenderedPage],
    ) -> None:
        """Append the page from ``produce`` or the record error it raises."""
        try:
            page = produce()
        except RecordError as exc:
            logger.error("%s", exc)
            report.failures.append(exc)
            return
        logger.debug("rendered %s -> %s", record.path, page.slug)
        report.pages.append(page)

    def _worker_count(self) -> int:
        configured = self.site_config.build.workers
        if configured:
            return configured
        return os.cpu_count() or 1

    def _write(self, documents: list[OutputDocument]) -> list[Path]:
        """Write every document and the stylesheet, returning written paths."""
        output_root = self.site_config.build.output_root
        files = [
            (route_to_path(output_root, document.route), document.html)
            for document in documents
        ]
        files.append(
            (output_root / STYLESHEET_FILENAME, self.renderer.stylesheet + "\n")
        )
        written: list[Path] = []
        for path, text in files:
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(text, encoding="utf-8")
            except OSError as exc:
                raise OutputWriteError(path, exc.strerror or str(exc)) from exc
            written.append(path)
        return written


__all__ = ["BuildReport", "SiteBuilder"]
