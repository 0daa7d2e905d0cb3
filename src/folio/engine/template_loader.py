"""Jinja2 page renderer.

Loads the bundled HTML templates (or a custom template directory) and renders
page data into bytes for the assembler.
"""

from __future__ import annotations

from importlib.resources import files
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from folio.engine import filters

if TYPE_CHECKING:
    from folio.core.pages import SiteContext

POST_TEMPLATE = "pages/post.html.jinja"
INDEX_TEMPLATE = "pages/index.html.jinja"
TOPIC_TEMPLATE = "pages/tag.html.jinja"
TOPICS_INDEX_TEMPLATE = "pages/tags_index.html.jinja"


def default_template_dir() -> Path:
    """Return the directory holding the templates shipped with the package."""
    return Path(str(files("folio.engine").joinpath("templates")))


class JinjaPageRenderer:
    """Renders site pages from Jinja2 templates.

    Supports:
    - Template inheritance (``layouts/base.html.jinja``)
    - Custom filters (date formatting)
    - A custom template directory replacing the bundled one
    """

    def __init__(self, template_dir: Path | None = None, *, highlight_css: str | None = None) -> None:
        """Initialize JinjaPageRenderer.

        Args:
            template_dir: Directory with ``layouts/``, ``partials/`` and ``pages/``.
                Defaults to the templates bundled with folio.
            highlight_css: Stylesheet for highlighted code, embedded by the base layout.

        """
        self.template_dir = template_dir if template_dir is not None else default_template_dir()

        self.env = Environment(
            loader=FileSystemLoader(self.template_dir),
            autoescape=True,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.globals["highlight_css"] = highlight_css

        self._register_filters()

    def _register_filters(self) -> None:
        self.env.filters["format_date"] = filters.format_date
        self.env.filters["short_date"] = filters.short_date
        self.env.filters["isoformat"] = filters.isoformat

    def load_template(self, template_name: str) -> Template:
        """Load a template by name.

        Raises:
            TemplateNotFound: If template does not exist

        """
        return self.env.get_template(template_name)

    def render(self, template_name: str, page: SiteContext, **context: Any) -> bytes:
        """Render ``template_name`` with ``page`` exposed as ``page``.

        Raises:
            TemplateError: If the template is missing or fails while rendering.

        """
        template = self.load_template(template_name)
        return template.render(page=page, **context).encode("utf-8")
