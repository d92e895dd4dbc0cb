from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class ReadWriteLock:
    """
    Shared/exclusive lock: many readers or a single writer.

    Writers are preferred once waiting, so a steady stream of readers cannot
    starve an endpoint update.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition(
            threading.Lock()
        )
        self._active_readers: int = 0
        self._waiting_writers: int = 0
        self._writer_active: bool = False

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._condition:
            while (
                self._writer_active
                or self._waiting_writers
            ):
                self._condition.wait()
            self._active_readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._active_readers -= 1
                if self._active_readers == 0:
                    self._condition.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._condition:
            self._waiting_writers += 1
            try:
                while (
                    self._writer_active
                    or self._active_readers
                ):
                    self._condition.wait()
            finally:
                self._waiting_writers -= 1
            self._writer_active = True
        try:
            yield
        finally:
            with self._condition:
                self._writer_active = False
                self._condition.notify_all()
