from __future__ import annotations

import textwrap
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import pytest

from folio.core.pages import SiteContext
from folio.core.types import Document

PostWriter = Callable[..., Path]


def make_document(
    title: str = "Hello World",
    date: datetime = datetime(2024, 3, 15, tzinfo=UTC),
    *,
    description: str = "A post",
    tags: list[str] | None = None,
    slug: str | None = None,
    body_html: str = "<p>Hello</p>",
) -> Document:
    return Document(
        title=title,
        date=date,
        description=description,
        tags=tags or [],
        slug=slug or title.lower().replace(" ", "-"),
        body_html=body_html,
        raw_body="Hello",
        source_path=f"{slug or title}.md",
    )


@pytest.fixture
def document_factory() -> Callable[..., Document]:
    return make_document


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "posts"
    directory.mkdir()
    return directory


@pytest.fixture
def write_post(content_dir: Path) -> PostWriter:
    """Write a markdown file with frontmatter into ``content_dir``."""

    def _write(
        name: str,
        *,
        title: str | None = "Hello World",
        date: str | None = "2024-03-15",
        description: str | None = "A post",
        tags: list[str] | None = None,
        body: str = "Hello **world**.",
        extra: str = "",
    ) -> Path:
        lines = ["---"]
        if title is not None:
            lines.append(f'title: "{title}"')
        if date is not None:
            lines.append(f"date: {date}")
        if description is not None:
            lines.append(f'description: "{description}"')
        if tags:
            lines.append("tags:")
            lines.extend(f"  - {tag}" for tag in tags)
        if extra:
            lines.append(textwrap.dedent(extra).strip())
        lines.append("---")
        lines.append(body)

        path = content_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


class RecordingRenderer:
    """Renderer double that records calls and can fail on a chosen template."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.calls: list[tuple[str, SiteContext]] = []

    def render(self, template_name: str, page: SiteContext) -> bytes:
        self.calls.append((template_name, page))
        if self.fail_on is not None and template_name == self.fail_on:
            raise ValueError(f"boom in {template_name}")
        return f"{template_name}|{page.page_title}".encode()


@pytest.fixture
def recording_renderer() -> RecordingRenderer:
    return RecordingRenderer()
