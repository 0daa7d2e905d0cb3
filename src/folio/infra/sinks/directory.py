"""Directory output sink for writing an ArtifactBundle as static HTML files."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from folio.core.exceptions import SinkError
from folio.core.types import ArtifactBundle, AssemblyMode


class DirectoryWriter:
    """Writes an ArtifactBundle as a static site.

    Layout::

        index.html
        posts/<slug>.html
        tags/<name>.html      (templated bundles only)
        tags/index.html       (templated bundles with a tags index)

    Existing files are overwritten, so writing the same bundle twice yields
    the same tree.
    """

    def __init__(self, output_dir: Path, *, logger: logging.Logger | None = None) -> None:
        """Initialize the directory writer.

        Args:
            output_dir: Directory where the HTML files will be written
            logger: Logger for progress messages

        """
        self.output_dir = Path(output_dir)
        self.logger = logger or logging.getLogger(__name__)
        self.logger.debug("Directory writer created for %s", self.output_dir)

    def write(self, bundle: ArtifactBundle) -> None:
        """Write the bundle below ``output_dir``.

        Raises:
            SinkError: If a file cannot be written or a name is not a safe file name.

        """
        self.logger.info("Writing site to %s", self.output_dir)
        try:
            self._write_map(bundle.posts, self.output_dir / "posts")
            self._write_file(self.output_dir / "index.html", bundle.landing)

            if bundle.mode is AssemblyMode.TEMPLATED:
                tags_dir = self.output_dir / "tags"
                self._write_map(bundle.topics, tags_dir)
                if bundle.topics_index:
                    self._write_file(tags_dir / "index.html", bundle.topics_index)
        except OSError as exc:
            msg = f"failed to write site to {self.output_dir}: {exc}"
            raise SinkError(msg) from exc

        self.logger.info("Finished writing to output directory")

    def _write_map(self, pages: Mapping[str, bytes], directory: Path) -> None:
        directory.mkdir(parents=True, exist_ok=True)
        for name, content in pages.items():
            self._write_file(directory / f"{self._safe_name(name)}.html", content)

    def _write_file(self, path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    @staticmethod
    def _safe_name(name: str) -> str:
        if not name or name in {".", ".."} or "/" in name or "\\" in name:
            msg = f"refusing to write page with unsafe name: {name!r}"
            raise SinkError(msg)
        return name
