"""Logging setup for the folio command line.

Library code only ever calls ``logging.getLogger``; handlers are installed
here, once, by the CLI.
"""

from __future__ import annotations

import logging
import os
from typing import Final

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["console", "configure_logging"]

LOG_LEVEL_ENV: Final[str] = "FOLIO_LOG_LEVEL"

# uvicorn brings its own handlers; markdown logs every extension load at DEBUG
_ROUTED_LOGGERS: Final[tuple[str, ...]] = ("uvicorn", "uvicorn.error", "uvicorn.access")
_NOISY_LOGGERS: Final[tuple[str, ...]] = ("MARKDOWN",)

console = Console(stderr=True)


def _level_from_env(default: int = logging.INFO) -> int:
    name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def _folio_handler(logger: logging.Logger) -> RichHandler | None:
    for handler in logger.handlers:
        if isinstance(handler, RichHandler) and getattr(handler, "folio_managed", False):
            return handler
    return None


def configure_logging(*, verbose: bool = False) -> None:
    """Route all log records through a single Rich handler.

    Safe to call more than once; the handler is only installed the first time.
    ``verbose`` forces DEBUG, otherwise ``FOLIO_LOG_LEVEL`` (default INFO) applies.
    """
    root = logging.getLogger()

    if _folio_handler(root) is None:
        handler = RichHandler(console=console, rich_tracebacks=True, show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        handler.folio_managed = True  # type: ignore[attr-defined]
        root.handlers = [handler]

    root.setLevel(logging.DEBUG if verbose else _level_from_env())

    for name in _ROUTED_LOGGERS:
        routed = logging.getLogger(name)
        routed.handlers.clear()
        routed.propagate = True
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
