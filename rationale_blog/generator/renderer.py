"""Markdown-to-HTML rendering for post bodies.

Post bodies go through Python-Markdown and then through a highlighting pass
that swaps each plain ``<pre><code>`` block for Pygments markup tagged with
its language. The highlighting pass can be applied to its own output without
changing it, so pages that are re-processed stay byte-identical.
"""

from __future__ import annotations

import re
import typing as typ
from html import escape, unescape

from markdown import Markdown
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from rationale_blog._constants import DEFAULT_PYGMENTS_STYLE

if typ.TYPE_CHECKING:
    from markdown.extensions import Extension
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

MARKDOWN_EXTENSIONS = ("fenced_code", "tables", "sane_lists")
HIGHLIGHT_CSS_CLASS = "codehilite"
FALLBACK_LANGUAGE = "text"
LANGUAGE_CLASS_PREFIX = "language-"

PLAIN_CODE_BLOCK_PATTERN = re.compile(
    r'<pre><code(?: class="([^"]*)")?>(.*?)</code></pre>', re.DOTALL
)
# Fences indented by up to three spaces, or labelled ``rust,no_run``.
INDENTED_FENCE_PATTERN = re.compile(r"^ {1,3}([`~]{3,})", re.MULTILINE)
LABEL_EXTRAS_PATTERN = re.compile(
    r"^([`~]{3,})([\w+#.-]*),[^\r\n]+$", re.MULTILINE
)
HIGHLIGHT_WRAPPER_PATTERN = re.compile(rf'<div class="{HIGHLIGHT_CSS_CLASS}">')


def normalize_fences(text: str) -> str:
    """Return ``text`` with fence openers flush-left and label extras dropped.

    >>> normalize_fences("  ```rust,no_run\\nfn main() {}\\n  ```")
    '```rust\\nfn main() {}\\n```'
    """
    flush = INDENTED_FENCE_PATTERN.sub(r"\1", text)
    return LABEL_EXTRAS_PATTERN.sub(r"\1\2", flush)


class HtmlContentRenderer:
    """Render post bodies to HTML with highlighted code blocks."""

    def __init__(
        self,
        pygments_style: str = DEFAULT_PYGMENTS_STYLE,
        link_extension: Extension | None = None,
    ) -> None:
        """Create a renderer for one post.

        Parameters
        ----------
        pygments_style : str, optional
            Pygments style whose CSS is exposed through :attr:`stylesheet`.
        link_extension : Extension, optional
            Extra Markdown extension, normally the content-link rewriter bound
            to the post's directory. ``None`` leaves links as authored.
        """
        self.pygments_style = pygments_style
        self.formatter = HtmlFormatter(
            style=pygments_style, cssclass=HIGHLIGHT_CSS_CLASS
        )
        self.link_extension = link_extension

    @property
    def stylesheet(self) -> str:
        """CSS rules for the configured Pygments style."""
        return self.formatter.get_style_defs(f".{HIGHLIGHT_CSS_CLASS}")

    def markdown(self, text: str) -> str:
        """Convert a Markdown body to HTML and highlight its code blocks."""
        source = normalize_fences(text)
        if not source.strip():
            return ""
        extensions: list[Extension | str] = list(MARKDOWN_EXTENSIONS)
        if self.link_extension is not None:
            extensions.append(self.link_extension)
        converter = Markdown(extensions=extensions, output_format="html")
        return self.highlight(converter.convert(source))

    def highlight(self, html: str) -> str:
        """Replace plain ``<pre><code>`` blocks with Pygments markup.

        Pygments output carries no ``<code>`` element, so blocks that are
        already highlighted no longer match and a second pass is a no-op.

        Parameters
        ----------
        html : str
            HTML produced by the Markdown converter.

        Returns
        -------
        str
            HTML where each code block is wrapped in
            ``<div class="codehilite language-<lang>" data-language="<lang>">``.
        """

        def _swap(match: re.Match[str]) -> str:
            language = _language_from_classes(match.group(1))
            return self.code_block(unescape(match.group(2)), language)

        return PLAIN_CODE_BLOCK_PATTERN.sub(_swap, html)

    def code_block(self, code: str, language: str | None = None) -> str:
        """Highlight ``code`` and tag the wrapper with its language.

        Unknown languages keep their label but use the plain-text lexer; a
        missing language is labelled ``text``. The code passes through
        unchanged.
        """
        lang = language or FALLBACK_LANGUAGE
        try:
            lexer = get_lexer_by_name(lang, stripnl=False)
        except ClassNotFound:
            lexer = get_lexer_by_name(FALLBACK_LANGUAGE, stripnl=False)
        rendered = highlight(code, lexer, self.formatter).rstrip("\n")
        label = escape(lang, quote=True)
        wrapper = (
            f'<div class="{HIGHLIGHT_CSS_CLASS} {LANGUAGE_CLASS_PREFIX}{label}" '
            f'data-language="{label}">'
        )
        return HIGHLIGHT_WRAPPER_PATTERN.sub(lambda _: wrapper, rendered, count=1)


def _language_from_classes(classes: str | None) -> str:
    """Return the language named by a ``language-*`` class, else ``text``."""
    for name in (classes or "").split():
        language = name.removeprefix(LANGUAGE_CLASS_PREFIX)
        if language and language != name:
            return unescape(language)
    return FALLBACK_LANGUAGE


__all__ = ["PLAIN_CODE_BLOCK_PATTERN", "HtmlContentRenderer", "normalize_fences"]
