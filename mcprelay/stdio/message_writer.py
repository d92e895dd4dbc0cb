from __future__ import annotations

import sys
import threading
from typing import BinaryIO, Optional, Union

from mcprelay.logging import RelayLogger, get_logger

_TRAILING_WHITESPACE = b"\r\n\t "


class MessageWriter:
    """
    The only way out to the client.

    stdout is a framed message channel: each emit() writes exactly one
    message and one newline, whole, and flushes it before the next caller
    gets the lock.
    """

    def __init__(
        self,
        stream: Optional[BinaryIO] = None,
        logger: Optional[RelayLogger] = None,
    ) -> None:
        self._stream: BinaryIO = (
            stream
            if stream is not None
            else sys.stdout.buffer
        )
        self._logger: RelayLogger = (
            logger or get_logger("writer")
        )
        self._lock = threading.Lock()

    def emit(self, message: Union[bytes, str]) -> None:
        if isinstance(message, str):
            message = message.encode("utf-8")
        message = message.rstrip(_TRAILING_WHITESPACE)

        with self._lock:
            if self._logger.debug_enabled:
                self._logger.server_to_client(
                    message.decode("utf-8", errors="replace")
                )
            try:
                self._stream.write(message + b"\n")
                self._stream.flush()
            except (OSError, ValueError) as e:
                self._logger.error(
                    f"Failed to write message to stdout: {e}"
                )
