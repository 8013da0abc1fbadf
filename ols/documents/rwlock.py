"""Readers-writer lock guarding the document store."""

from contextlib import contextmanager
from threading import Condition
from threading import Lock
from typing import Iterator


class ReadWriteLock:
    """
    Many concurrent readers or a single writer.

    Writers are preferred: once a writer waits, new readers queue behind it, so a stream of queries cannot starve
    document updates. The lock is not reentrant; a thread holding it must not acquire it again.
    """

    def __init__(self) -> None:
        self._cond = Condition(Lock())
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        """Block until no writer holds or awaits the lock, then register as a reader."""
        with self._cond:
            while self._writer_active or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        """Unregister a reader, waking writers when the last one leaves."""
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        """Block until there are neither readers nor a writer, then take the lock exclusively."""
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer_active or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer_active = True

    def release_write(self) -> None:
        """Give up exclusive ownership."""
        with self._cond:
            self._writer_active = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        """Hold the lock shared for the duration of the block."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        """Hold the lock exclusively for the duration of the block."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
