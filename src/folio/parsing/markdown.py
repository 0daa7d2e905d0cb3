"""Markdown to HTML conversion for post bodies.

Uses Python-Markdown with the ``pymdownx`` extensions MkDocs sites rely on, so
posts render the same way here as they would in a MkDocs theme.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import markdown
from pygments.formatters import HtmlFormatter
from pygments.util import ClassNotFound

from folio.core.exceptions import TransformError

if TYPE_CHECKING:
    from folio.core.config import MarkdownSettings

HIGHLIGHT_CSS_CLASS = "highlight"


@dataclass(frozen=True, slots=True)
class MarkdownOptions:
    code_highlighting: bool = False
    highlight_style: str = "monokai"
    footnotes: bool = False

    @classmethod
    def from_settings(cls, settings: MarkdownSettings) -> MarkdownOptions:
        return cls(
            code_highlighting=settings.code_highlighting,
            highlight_style=settings.highlight_style,
            footnotes=settings.footnotes,
        )


def _extensions(options: MarkdownOptions) -> tuple[list[str], dict[str, dict[str, Any]]]:
    extensions = [
        "toc",
        "nl2br",
        "tables",
        "pymdownx.highlight",
        "pymdownx.superfences",
    ]
    configs: dict[str, dict[str, Any]] = {
        "pymdownx.highlight": {
            "use_pygments": options.code_highlighting,
            "pygments_style": options.highlight_style,
            "noclasses": False,
            "css_class": HIGHLIGHT_CSS_CLASS,
            "guess_lang": False,
        },
    }
    if options.footnotes:
        extensions.append("footnotes")
    return extensions, configs


def render_markdown(raw_body: str, options: MarkdownOptions | None = None) -> str:
    """Render a markdown body to an HTML fragment.

    A fresh ``Markdown`` instance is built per call; instances keep state
    between conversions and are not safe to share across threads.

    Raises:
        TransformError: If the markdown library fails on the input.

    """
    options = options or MarkdownOptions()
    extensions, configs = _extensions(options)
    try:
        md = markdown.Markdown(extensions=extensions, extension_configs=configs, output_format="xhtml")
        return md.convert(raw_body)
    except Exception as exc:
        msg = f"failed to render markdown: {exc}"
        raise TransformError(msg) from exc


def highlight_css(options: MarkdownOptions) -> str | None:
    """Return the Pygments stylesheet for highlighted code, or None when highlighting is off.

    Raises:
        TransformError: If the style name is unknown to Pygments.

    """
    if not options.code_highlighting:
        return None
    try:
        formatter = HtmlFormatter(style=options.highlight_style)
    except ClassNotFound as exc:
        msg = f"unknown code highlighting style: {options.highlight_style}"
        raise TransformError(msg) from exc
    return formatter.get_style_defs(f".{HIGHLIGHT_CSS_CLASS}")
