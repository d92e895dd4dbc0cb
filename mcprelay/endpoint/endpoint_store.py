from __future__ import annotations

from mcprelay.logging import RelayLogger, get_logger

from .read_write_lock import ReadWriteLock


class EndpointStore:
    """
    Where the relay sends things: server origin, push stream URL and
    submission URL.

    The stream reader rewrites the submission URL while the forwarding loop
    reads it, so every access goes through the lock. Fields are private;
    callers only get the accessors and mutators below.
    """

    def __init__(
        self, logger: RelayLogger | None = None
    ) -> None:
        self._logger: RelayLogger = (
            logger or get_logger("endpoint")
        )
        self._lock: ReadWriteLock = ReadWriteLock()
        self._origin: str = ""
        self._push_url: str = ""
        self._submit_url: str = ""

    def set_origin(self, origin: str) -> None:
        with self._lock.write_locked():
            self._origin = origin
        self._logger.endpoint_changed("Server", origin)

    def set_push_url(self, url: str) -> None:
        with self._lock.write_locked():
            self._push_url = url
        self._logger.endpoint_changed("SSE URL", url)

    def set_push_path(self, path: str) -> None:
        with self._lock.write_locked():
            self._push_url = f"{self._origin}{path}"
            url = self._push_url
        self._logger.endpoint_changed("SSE URL", url)

    def set_submit_url(self, url: str) -> None:
        with self._lock.write_locked():
            self._submit_url = url
        self._logger.endpoint_changed("Post URL", url)

    def set_submit_path(self, path: str) -> None:
        with self._lock.write_locked():
            self._submit_url = f"{self._origin}{path}"
            url = self._submit_url
        self._logger.endpoint_changed("Post URL", url)

    def get_origin(self) -> str:
        with self._lock.read_locked():
            return self._origin

    def get_push_url(self) -> str:
        with self._lock.read_locked():
            return self._push_url

    def get_submit_url(self) -> str:
        with self._lock.read_locked():
            return self._submit_url
