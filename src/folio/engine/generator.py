"""One generation pass: scan a content directory, then assemble the site."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from folio.core.config import FolioConfig, ScanFailurePolicy
from folio.core.exceptions import ScanAggregateError
from folio.engine.assembler import AssemblerConfig, SiteAssembler
from folio.engine.template_loader import JinjaPageRenderer
from folio.parsing.decoder import MarkdownDecoder
from folio.parsing.markdown import MarkdownOptions, highlight_css
from folio.parsing.scanner import DirectoryScanner

if TYPE_CHECKING:
    import threading

    from folio.core.types import ArtifactBundle, ScanResult


class SiteGenerator:
    """Runs the Scanner and the Assembler as a single sequential pass."""

    def __init__(
        self,
        scanner: DirectoryScanner,
        assembler: SiteAssembler,
        *,
        on_scan_failure: ScanFailurePolicy = ScanFailurePolicy.FAIL,
        logger: logging.Logger | None = None,
    ) -> None:
        self.scanner = scanner
        self.assembler = assembler
        self.on_scan_failure = on_scan_failure
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: FolioConfig, *, logger: logging.Logger | None = None) -> SiteGenerator:
        """Wire the default decoder, renderer and assembler from configuration."""
        options = MarkdownOptions.from_settings(config.markdown)
        scanner = DirectoryScanner(MarkdownDecoder(options, logger=logger), logger=logger)

        renderer = None
        if not config.generation.raw_output:
            renderer = JinjaPageRenderer(config.generation.templates_dir, highlight_css=highlight_css(options))
        assembler = SiteAssembler(
            AssemblerConfig.from_settings(config.site, raw_output=config.generation.raw_output),
            renderer,
            logger=logger,
        )
        return cls(scanner, assembler, on_scan_failure=config.generation.on_scan_failure, logger=logger)

    def generate(self, source_dir: Path, cancel_event: threading.Event | None = None) -> ArtifactBundle:
        """Scan ``source_dir`` and assemble its documents into an ArtifactBundle.

        Raises:
            SourceTreeError: The directory cannot be walked.
            ScanCanceledError: ``cancel_event`` was set while scanning.
            ScanAggregateError: Some files failed and the policy is ``FAIL``.
            AssemblyError: Templated rendering could not complete.

        """
        self.logger.debug("Generating site from %s", source_dir)
        result = self.scanner.scan(Path(source_dir), cancel_event)
        self._apply_failure_policy(result)
        bundle = self.assembler.assemble(result.documents)
        self.logger.info("Generated %d post(s) from %s", len(bundle.posts), source_dir)
        return bundle

    def _apply_failure_policy(self, result: ScanResult) -> None:
        if not result.has_failures:
            return
        if self.on_scan_failure is ScanFailurePolicy.FAIL:
            raise ScanAggregateError(result.failures)
        for failure in result.failures:
            self.logger.warning("Skipping %s", failure)
