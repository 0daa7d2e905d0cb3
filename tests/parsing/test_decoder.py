import pytest

from folio.core.exceptions import DecodeError, TransformError, ValidationFailedError
from folio.parsing.decoder import MarkdownDecoder, resolve_slug

VALID = b"""---
title: Hello World
date: 2024-03-15
description: First post
tags: [Go, web]
---
Hello **there**.
"""


def test_decodes_valid_document():
    doc = MarkdownDecoder().decode(VALID, "hello.md")

    assert doc.title == "Hello World"
    assert doc.slug == "hello-world"
    assert doc.description == "First post"
    assert doc.topics == ("Go", "web")
    assert doc.short_date == "2024-03-15"
    assert doc.source_path == "hello.md"
    assert "<strong>there</strong>" in doc.body_html
    assert doc.raw_body.strip() == "Hello **there**."


@pytest.mark.parametrize("missing", ["title", "date", "description"])
def test_missing_required_field_is_reported(missing):
    lines = [line for line in VALID.decode().splitlines() if not line.startswith(f"{missing}:")]
    content = "\n".join(lines).encode()

    with pytest.raises(ValidationFailedError) as exc_info:
        MarkdownDecoder().decode(content, "posts/bad.md")

    assert exc_info.value.field == missing
    assert str(exc_info.value) == f"post missing required field: {missing} (source: posts/bad.md)"


def test_blank_title_counts_as_missing():
    content = VALID.replace(b"title: Hello World", b'title: "   "')

    with pytest.raises(ValidationFailedError, match="title"):
        MarkdownDecoder().decode(content, "blank.md")


def test_file_without_frontmatter_fails():
    with pytest.raises(DecodeError, match="no frontmatter"):
        MarkdownDecoder().decode(b"# Just markdown\n", "plain.md")


def test_invalid_yaml_fails():
    content = b"---\ntitle: [unclosed\n---\nbody\n"

    with pytest.raises(DecodeError, match="failed to parse frontmatter"):
        MarkdownDecoder().decode(content, "broken.md")


def test_unparseable_date_fails():
    content = VALID.replace(b"date: 2024-03-15", b"date: not-a-date")

    with pytest.raises(DecodeError, match="failed to parse frontmatter"):
        MarkdownDecoder().decode(content, "date.md")


def test_non_utf8_content_fails():
    with pytest.raises(DecodeError, match="UTF-8"):
        MarkdownDecoder().decode(b"\xff\xfe---\n", "binary.md")


def test_transform_errors_propagate(monkeypatch):
    def explode(body, options):
        raise TransformError("failed to render markdown: nope")

    monkeypatch.setattr("folio.parsing.decoder.render_markdown", explode)

    with pytest.raises(TransformError):
        MarkdownDecoder().decode(VALID, "hello.md")


def test_explicit_slug_wins_over_title():
    content = VALID.replace(b"description: First post", b"description: First post\nslug: Custom_Slug")

    doc = MarkdownDecoder().decode(content, "hello.md")

    assert doc.slug == "custom-slug"


def test_resolve_slug_falls_back_to_file_name():
    assert resolve_slug({"title": "!!!"}, "drafts/My_First Post.md") == "my-first-post"
    assert resolve_slug({"title": "Hello World"}, "x.md") == "hello-world"
