"""Live HTTP server with atomic, zero-downtime content refresh."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import uvicorn

from folio.core.config import ServerSettings
from folio.core.exceptions import FolioError, RefreshError
from folio.engine.generator import SiteGenerator
from folio.server.app import create_app
from folio.server.watcher import ContentWatcher

if TYPE_CHECKING:
    from fastapi import FastAPI

    from folio.core.config import FolioConfig
    from folio.core.types import ArtifactBundle

_CANCEL_POLL_SECONDS = 0.2


class ServerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class BundleCell:
    """Single slot holding the latest ArtifactBundle.

    Readers take one reference with :meth:`load` and use it for the whole
    request. The slot is replaced by rebinding a single attribute, so a reader
    sees either the old bundle or the new one, never a mix.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._bundle: ArtifactBundle | None = None
        self._version = 0

    def load(self) -> ArtifactBundle | None:
        return self._bundle

    def store(self, bundle: ArtifactBundle) -> int:
        """Install ``bundle`` and return its version number."""
        with self._lock:
            self._version += 1
            self._bundle = bundle
            return self._version

    @property
    def version(self) -> int:
        return self._version


class LiveServer:
    """Serves a generated site over HTTP and swaps in new content on refresh.

    A failed refresh leaves the previously installed bundle serving; the
    error goes to the caller of :meth:`refresh` / :meth:`update_posts` only.
    """

    def __init__(
        self,
        generator: SiteGenerator,
        source_dir: Path,
        settings: ServerSettings | None = None,
        *,
        root: str = "/",
        logger: logging.Logger | None = None,
    ) -> None:
        self.generator = generator
        self.settings = settings or ServerSettings()
        self.root = root
        self.logger = logger or logging.getLogger(__name__)

        self._source_dir = Path(source_dir)
        self._cell = BundleCell()
        self._refresh_lock = threading.Lock()
        self._app: FastAPI | None = None

    @classmethod
    def create(
        cls,
        generator: SiteGenerator,
        source_dir: Path,
        settings: ServerSettings | None = None,
        *,
        root: str = "/",
        logger: logging.Logger | None = None,
    ) -> LiveServer:
        """Build a server and generate its first bundle.

        Raises:
            RefreshError: If the initial generation fails.

        """
        server = cls(generator, source_dir, settings, root=root, logger=logger)
        server.refresh()
        server.logger.debug("Server created successfully")
        return server

    @classmethod
    def from_config(
        cls, config: FolioConfig, source_dir: Path, *, logger: logging.Logger | None = None
    ) -> LiveServer:
        generator = SiteGenerator.from_config(config, logger=logger)
        return cls.create(generator, source_dir, config.server, root=config.site.root, logger=logger)

    @property
    def state(self) -> ServerState:
        if self._cell.load() is None:
            return ServerState.UNINITIALIZED
        return ServerState.READY

    @property
    def source_dir(self) -> Path:
        return self._source_dir

    @property
    def app(self) -> FastAPI:
        if self._app is None:
            self._app = create_app(self._cell.load, root=self.root, logger=self.logger)
        return self._app

    def current_bundle(self) -> ArtifactBundle | None:
        return self._cell.load()

    def refresh(self, cancel_event: threading.Event | None = None) -> ArtifactBundle:
        """Regenerate from the current source directory and install the result."""
        return self.update_posts(self._source_dir, cancel_event)

    def update_posts(self, source_dir: Path, cancel_event: threading.Event | None = None) -> ArtifactBundle:
        """Regenerate from ``source_dir`` and atomically replace the served bundle.

        Raises:
            RefreshError: Generation failed; the previous bundle is still served.

        """
        source_dir = Path(source_dir)
        with self._refresh_lock:
            self.logger.debug("Refreshing site from %s", source_dir)
            try:
                bundle = self.generator.generate(source_dir, cancel_event)
            except FolioError as exc:
                self.logger.error("Refresh from %s failed, keeping previous content: %s", source_dir, exc)
                msg = f"failed to refresh site: {exc}"
                raise RefreshError(msg) from exc

            version = self._cell.store(bundle)
            self._source_dir = source_dir

        self.logger.info("Serving content version %d (%d post(s))", version, len(bundle.posts))
        return bundle

    def run(self, cancel_event: threading.Event | None = None) -> None:
        """Serve until interrupted or until ``cancel_event`` is set.

        SIGINT/SIGTERM are handled by uvicorn when running on the main thread.
        On shutdown, in-flight requests get ``settings.shutdown_timeout``
        seconds to finish before connections are closed.
        A listener that cannot be bound is logged and ``run`` returns.
        """
        config = uvicorn.Config(
            self.app,
            host=self.settings.host,
            port=self.settings.port,
            log_config=None,
            timeout_graceful_shutdown=self.settings.shutdown_timeout,
        )
        server = uvicorn.Server(config)

        finished = threading.Event()
        cancel_thread = None
        if cancel_event is not None:
            cancel_thread = threading.Thread(
                target=self._exit_on_cancel,
                args=(server, cancel_event, finished),
                name="folio-cancel",
                daemon=True,
            )
            cancel_thread.start()

        watcher = None
        if self.settings.watch_interval:
            watcher = ContentWatcher(self, self.settings.watch_interval, logger=self.logger)
            watcher.start()

        self.logger.info("Server listening on http://%s:%d", self.settings.host, self.settings.port)
        try:
            server.run()
        except OSError as exc:
            self.logger.error("Error listening and serving: %s", exc)
        except SystemExit as exc:
            # uvicorn exits the process when it cannot bind; report it and return instead
            self.logger.error("Error listening and serving: uvicorn exited with status %s", exc.code)
        finally:
            finished.set()
            if watcher is not None:
                watcher.stop()
            if cancel_thread is not None:
                cancel_thread.join()
        self.logger.info("Server stopped")

    @staticmethod
    def _exit_on_cancel(server: uvicorn.Server, cancel_event: threading.Event, finished: threading.Event) -> None:
        while not finished.is_set():
            if cancel_event.wait(_CANCEL_POLL_SECONDS):
                server.should_exit = True
                return
