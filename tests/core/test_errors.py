from folio.core.exceptions import (
    DuplicateSlugError,
    MissingRendererError,
    RenderError,
    ScanAggregateError,
    ValidationFailedError,
)
from folio.core.types import ScanFailure


def test_validation_error_names_field_and_source():
    error = ValidationFailedError("title", "drafts/bad.md")

    assert str(error) == "post missing required field: title (source: drafts/bad.md)"
    assert error.field == "title"


def test_scan_aggregate_error_lists_every_failure():
    failures = [
        ScanFailure("a.md", ValidationFailedError("date", "a.md")),
        ScanFailure("b.md", DuplicateSlugError("hello", "c.md")),
    ]

    error = ScanAggregateError(failures)

    message = str(error)
    assert message.startswith("failed to parse 2 file(s):")
    assert "  - a.md: post missing required field: date" in message
    assert "  - b.md: slug 'hello' is already used by c.md" in message
    assert error.failures == failures


def test_render_error_identifies_page():
    cause = ValueError("bad template")

    error = RenderError("post", "hello-world", cause)

    assert error.name == "hello-world"
    assert error.cause is cause
    assert str(error) == "failed to render post hello-world: bad template"


def test_missing_renderer_message():
    assert "renderer" in str(MissingRendererError())
