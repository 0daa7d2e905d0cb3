"""Directory scanning: walk a content tree and decode every markdown file."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

from folio.core.exceptions import DecodeError, DocumentError, DuplicateSlugError, ScanCanceledError, SourceTreeError
from folio.core.types import Document, DocumentCollection, ScanFailure, ScanResult

if TYPE_CHECKING:
    import threading

    from folio.core.ports import DocumentDecoder

CONTENT_EXTENSIONS = frozenset({".md", ".markdown"})


class DirectoryScanner:
    """Turns a directory of content files into a DocumentCollection.

    Failures of individual files are collected as ScanFailures and never stop
    the walk. Only a root that cannot be walked at all is fatal.
    """

    def __init__(
        self,
        decoder: DocumentDecoder,
        *,
        extensions: frozenset[str] = CONTENT_EXTENSIONS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.decoder = decoder
        self.extensions = frozenset(ext.lower() for ext in extensions)
        self.logger = logger or logging.getLogger(__name__)

    def scan(self, root: Path, cancel_event: threading.Event | None = None) -> ScanResult:
        """Scan ``root`` recursively.

        Args:
            root: Directory holding the content files.
            cancel_event: Checked before each file; when set the scan stops.

        Returns:
            The valid documents sorted newest first, plus every per-file failure.

        Raises:
            SourceTreeError: ``root`` is missing, not a directory or unreadable.
            ScanCanceledError: ``cancel_event`` was set during the walk.

        """
        root = Path(root)
        self._check_root(root)

        documents: list[Document] = []
        failures: list[ScanFailure] = []
        slugs: dict[str, str] = {}

        processed = 0
        for path in self._walk(root, failures):
            if cancel_event is not None and cancel_event.is_set():
                self.logger.info("Scan of %s canceled after %d file(s)", root, processed)
                raise ScanCanceledError(processed)
            processed += 1

            source_path = path.relative_to(root).as_posix()
            try:
                document = self._load(path, source_path)
            except DocumentError as exc:
                self.logger.debug("Failed to decode %s: %s", source_path, exc)
                failures.append(ScanFailure(path=source_path, error=exc))
                continue

            existing = slugs.get(document.slug)
            if existing is not None:
                failures.append(ScanFailure(path=source_path, error=DuplicateSlugError(document.slug, existing)))
                continue

            slugs[document.slug] = source_path
            documents.append(document)

        self.logger.debug(
            "Scanned %s: %d document(s), %d failure(s)", root, len(documents), len(failures)
        )
        return ScanResult(
            documents=DocumentCollection(documents).sorted_by_date(),
            failures=tuple(failures),
        )

    def is_content_file(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions

    def iter_content_files(self, root: Path) -> Iterator[Path]:
        """Yield every content file under ``root`` in deterministic order."""
        yield from self._walk(Path(root), [])

    def _check_root(self, root: Path) -> None:
        if not root.exists():
            raise SourceTreeError(str(root), "no such directory")
        if not root.is_dir():
            raise SourceTreeError(str(root), "not a directory")
        try:
            with os.scandir(root):
                pass
        except OSError as exc:
            raise SourceTreeError(str(root), exc.strerror or str(exc)) from exc

    def _walk(self, root: Path, failures: list[ScanFailure]) -> Iterator[Path]:
        def on_error(exc: OSError) -> None:
            location = Path(exc.filename) if exc.filename else root
            try:
                source_path = location.relative_to(root).as_posix()
            except ValueError:
                source_path = str(location)
            failures.append(ScanFailure(path=source_path, error=exc))

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            dirnames.sort()
            for filename in sorted(filenames):
                path = Path(dirpath) / filename
                if self.is_content_file(path):
                    yield path

    def _load(self, path: Path, source_path: str) -> Document:
        try:
            content = path.read_bytes()
        except OSError as exc:
            msg = f"failed to read file: {exc.strerror or exc}"
            raise DecodeError(msg) from exc
        return self.decoder.decode(content, source_path)
