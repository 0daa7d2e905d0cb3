"""A get/set/clear store for the last generated ArtifactBundle."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from folio.core.types import ArtifactBundle


class ReadWriteLock:
    """Allows many concurrent readers or a single writer.

    Waiting writers block new readers so a steady stream of reads cannot
    starve a writer.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class SnapshotCache:
    """Holds one ArtifactBundle behind a reader/writer lock.

    ``set`` and ``clear`` exclude each other and every ``get``; concurrent
    ``get`` calls proceed together.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._bundle: ArtifactBundle | None = None

    def get(self) -> ArtifactBundle | None:
        """Return the stored bundle, or None if nothing was stored."""
        with self._lock.read():
            return self._bundle

    def set(self, bundle: ArtifactBundle) -> None:
        with self._lock.write():
            self._bundle = bundle

    def clear(self) -> None:
        with self._lock.write():
            self._bundle = None
