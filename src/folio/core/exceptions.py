"""Centralized exceptions for the Folio application."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from folio.core.types import ScanFailure


class FolioError(Exception):
    """Base exception for all Folio errors."""


class ConfigError(FolioError):
    """Raised when configuration cannot be loaded or is invalid."""


# --- Scanning ---
class SourceTreeError(FolioError):
    """Raised when the content tree itself cannot be walked."""

    def __init__(self, root: str, reason: str) -> None:
        self.root = root
        self.reason = reason
        super().__init__(f"failed to walk directory '{root}': {reason}")


class ScanCanceledError(FolioError):
    """Raised when a scan is stopped by its cancellation signal."""

    def __init__(self, processed: int) -> None:
        self.processed = processed
        super().__init__(f"scan canceled after {processed} file(s)")


class DocumentError(FolioError):
    """Base exception for a single content file that could not be turned into a Document."""


class DecodeError(DocumentError):
    """Raised when a file cannot be read or its frontmatter cannot be parsed."""


class ValidationFailedError(DocumentError):
    """Raised when a decoded document is missing required metadata."""

    def __init__(self, field: str, source: str) -> None:
        self.field = field
        self.source = source
        super().__init__(f"post missing required field: {field} (source: {source})")


class TransformError(DocumentError):
    """Raised when the markdown body cannot be converted to HTML."""


class DuplicateSlugError(DocumentError):
    """Raised when two documents resolve to the same slug."""

    def __init__(self, slug: str, existing: str) -> None:
        self.slug = slug
        self.existing = existing
        super().__init__(f"slug '{slug}' is already used by {existing}")


class ScanAggregateError(FolioError):
    """Aggregates every per-file failure of one scan pass."""

    def __init__(self, failures: Sequence[ScanFailure]) -> None:
        self.failures = list(failures)
        super().__init__(self._format())

    def _format(self) -> str:
        if not self.failures:
            return "no parsing errors"
        lines = [f"failed to parse {len(self.failures)} file(s):"]
        lines.extend(f"  - {failure}" for failure in self.failures)
        return "\n".join(lines)


# --- Assembly ---
class AssemblyError(FolioError):
    """Base exception for errors while assembling site artifacts."""


class MissingRendererError(AssemblyError):
    """Raised when templated assembly is requested without a renderer."""

    def __init__(self) -> None:
        super().__init__("template renderer is not configured: cannot render templates without a renderer")


class RenderError(AssemblyError):
    """Raised when a single page fails to render; aborts the whole assembly."""

    def __init__(self, kind: str, name: str, cause: BaseException) -> None:
        self.kind = kind
        self.name = name
        self.cause = cause
        label = f"{kind} {name}" if name else kind
        super().__init__(f"failed to render {label}: {cause}")


# --- Serving / output ---
class RefreshError(FolioError):
    """Raised when a live refresh fails; the previous bundle stays active."""


class SinkError(FolioError):
    """Raised when an artifact bundle cannot be written to its destination."""
