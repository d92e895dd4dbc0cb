from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from mcprelay.types import EndpointPhase

ENDPOINT_EVENT = "event: endpoint"
DATA_PREFIX = "data:"


class DataDisposition(str, Enum):
    MESSAGE = "message"  # forward to the client
    ENDPOINT_PATH = "endpoint_path"  # new submission path, not forwarded
    MALFORMED_ENDPOINT = "malformed_endpoint"  # not a path, forwarded anyway


@dataclass(frozen=True)
class StreamLine:
    """One trimmed, non-empty line of the push stream."""

    is_endpoint_event: bool = False
    data: Optional[str] = None

    @classmethod
    def parse(cls, line: str) -> "StreamLine":
        if line.startswith(ENDPOINT_EVENT):
            return cls(is_endpoint_event=True)
        if line.startswith(DATA_PREFIX):
            return cls(
                data=line[len(DATA_PREFIX) :].strip()
            )
        return cls()


class EndpointDiscovery:
    """
    Tracks the dynamic endpoint handshake for a single stream connection.

    ``event: endpoint`` arms it; the next non-empty data line settles it,
    either as a path starting with ``/`` or as a malformed announcement. Once
    settled it stays RESOLVED until reset() for a new connection; further
    endpoint events on the same connection are ignored.
    """

    def __init__(self) -> None:
        self.phase: EndpointPhase = EndpointPhase.IDLE

    def reset(self) -> None:
        self.phase = EndpointPhase.IDLE

    def endpoint_announced(self) -> bool:
        if self.phase is EndpointPhase.RESOLVED:
            return False
        self.phase = EndpointPhase.AWAITING_PATH
        return True

    def classify(self, payload: str) -> DataDisposition:
        if self.phase is not EndpointPhase.AWAITING_PATH:
            return DataDisposition.MESSAGE

        self.phase = EndpointPhase.RESOLVED
        if payload.startswith("/"):
            return DataDisposition.ENDPOINT_PATH
        return DataDisposition.MALFORMED_ENDPOINT
