from typing import Protocol, runtime_checkable

from folio.core.pages import SiteContext
from folio.core.types import ArtifactBundle, Document


@runtime_checkable
class DocumentDecoder(Protocol):
    """Turns the raw bytes of one content file into a validated Document.

    Implementations raise a ``DocumentError`` subclass on failure.
    """

    def decode(self, content: bytes, source_path: str) -> Document: ...


@runtime_checkable
class PageRenderer(Protocol):
    """Renders one page of the site from its page data."""

    def render(self, template_name: str, page: SiteContext) -> bytes: ...


@runtime_checkable
class BundleSink(Protocol):
    """Consumes an assembled ArtifactBundle (e.g. writes it to disk)."""

    def write(self, bundle: ArtifactBundle) -> None: ...
