"""Poll the content directory and refresh the live server when it changes."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from folio.core.exceptions import RefreshError

if TYPE_CHECKING:
    from folio.server.live import LiveServer

Fingerprint = frozenset[tuple[str, int, int]]


class ContentWatcher:
    """Background thread that triggers ``LiveServer.refresh`` on content changes.

    Changes are detected by comparing (path, mtime, size) of every content
    file between polls.
    """

    def __init__(self, server: LiveServer, interval: float, *, logger: logging.Logger | None = None) -> None:
        self.server = server
        self.interval = interval
        self.logger = logger or logging.getLogger(__name__)
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._last: Fingerprint | None = None

    def start(self) -> None:
        self._last = self.fingerprint()
        self._thread = threading.Thread(target=self._loop, name="folio-watcher", daemon=True)
        self._thread.start()
        self.logger.info("Watching %s for changes every %.1fs", self.server.source_dir, self.interval)

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def fingerprint(self) -> Fingerprint:
        source_dir = self.server.source_dir
        entries = set()
        try:
            for path in self.server.generator.scanner.iter_content_files(source_dir):
                stat = path.stat()
                entries.add((path.relative_to(source_dir).as_posix(), stat.st_mtime_ns, stat.st_size))
        except OSError as exc:
            self.logger.warning("Could not inspect %s: %s", source_dir, exc)
        return frozenset(entries)

    def check_once(self) -> bool:
        """Refresh if the content changed since the last poll. Returns True if a refresh succeeded."""
        current = self.fingerprint()
        if current == self._last:
            return False
        self._last = current
        self.logger.info("Content changed in %s, refreshing", self.server.source_dir)
        try:
            self.server.refresh()
        except RefreshError:
            # already logged by the server; the previous bundle keeps serving
            return False
        return True

    def _loop(self) -> None:
        while not self._stop.wait(self.interval):
            self.check_once()
