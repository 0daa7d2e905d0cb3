"""Decode markdown files with YAML frontmatter into Documents."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Any

import frontmatter
import yaml
from pydantic import ValidationError

from folio.core.exceptions import DecodeError, ValidationFailedError
from folio.core.types import Document
from folio.core.utils import slugify
from folio.parsing.markdown import MarkdownOptions, render_markdown

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "date", "description")


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def resolve_slug(metadata: dict[str, Any], source_path: str) -> str:
    """Pick the slug from explicit metadata, then the title, then the file name."""
    candidates = (
        metadata.get("slug"),
        metadata.get("title"),
        PurePosixPath(source_path).stem,
    )
    for candidate in candidates:
        if candidate is None:
            continue
        slug = slugify(str(candidate))
        if slug:
            return slug
    return ""


class MarkdownDecoder:
    """Decodes one markdown file: frontmatter metadata, validation, body HTML."""

    def __init__(self, options: MarkdownOptions | None = None, *, logger: logging.Logger | None = None) -> None:
        self.options = options or MarkdownOptions()
        self.logger = logger or logging.getLogger(__name__)

    def decode(self, content: bytes, source_path: str) -> Document:
        """Build a Document from raw file bytes.

        Raises:
            DecodeError: The file is not UTF-8, has no frontmatter, or the
                frontmatter cannot be parsed.
            ValidationFailedError: A required field is missing.
            TransformError: The body cannot be rendered.

        """
        metadata, body = self._split(content, source_path)

        for field in REQUIRED_FIELDS:
            if _is_missing(metadata.get(field)):
                raise ValidationFailedError(field, source_path)

        slug = resolve_slug(metadata, source_path)
        if not slug:
            msg = f"cannot derive a slug from title or file name (source: {source_path})"
            raise DecodeError(msg)

        body_html = render_markdown(body, self.options)

        try:
            document = Document(
                title=str(metadata["title"]).strip(),
                date=metadata["date"],
                description=str(metadata["description"]).strip(),
                tags=metadata.get("tags"),
                slug=slug,
                body_html=body_html,
                raw_body=body,
                source_path=source_path,
            )
        except ValidationError as exc:
            msg = f"failed to parse frontmatter: {exc.errors()[0]['msg']} (source: {source_path})"
            raise DecodeError(msg) from exc

        self.logger.debug("Decoded %s as '%s'", source_path, document.slug)
        return document

    def _split(self, content: bytes, source_path: str) -> tuple[dict[str, Any], str]:
        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError as exc:
            msg = f"file is not valid UTF-8 (source: {source_path})"
            raise DecodeError(msg) from exc

        if not frontmatter.checks(text):
            msg = f"no frontmatter found in file (source: {source_path})"
            raise DecodeError(msg)

        try:
            parsed = frontmatter.loads(text)
        except (yaml.YAMLError, ValueError, TypeError) as exc:
            msg = f"failed to parse frontmatter: {exc} (source: {source_path})"
            raise DecodeError(msg) from exc

        metadata = dict(parsed.metadata or {})
        body = parsed.content if isinstance(parsed.content, str) else str(parsed.content)
        return metadata, body
