"""
JSON-RPC message helpers.

The relay never interprets the protocol's methods. It only needs to know
whether a line is a JSON object, whether that object carries an ``id``, and
how to build the error response it sends when the upstream cannot answer.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from .types import INPUT_ERRORS, INTERNAL_ERROR_CODE, JSONRPC_VERSION

_COMPACT = (",", ":")


class NotAMessage(ValueError):
    """The input line is not a JSON object."""


@dataclass(frozen=True)
class ClientMessage:
    """One JSON object read from the client, with its raw text."""

    raw: str
    body: dict[str, Any]

    @property
    def has_id(self) -> bool:
        return "id" in self.body

    @property
    def is_notification(self) -> bool:
        return not self.has_id

    @property
    def id(self) -> Any:
        return self.body.get("id")

    def encode(self) -> bytes:
        """The raw line as read, including any bytes that were not UTF-8."""
        return self.raw.encode("utf-8", errors=INPUT_ERRORS)


def parse_client_message(line: str) -> ClientMessage:
    """
    Parse one trimmed input line.

    Raises:
        NotAMessage: The line does not start with ``{``, is not valid JSON,
            or does not decode to an object.
    """
    if not line.startswith("{"):
        raise NotAMessage(f"Unexpected input: {line}")

    try:
        body = json.loads(line)
    except json.JSONDecodeError as e:
        raise NotAMessage(f"Invalid JSON: {e}") from e

    if not isinstance(body, dict):
        raise NotAMessage(f"Unexpected input: {line}")

    return ClientMessage(raw=line, body=body)


def build_error_response(
    request_id: Any = None,
    message: str = "",
    code: int = INTERNAL_ERROR_CODE,
) -> bytes:
    error_response = {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {
            "code": code,
            "message": message,
        },
    }
    return json.dumps(
        error_response, separators=_COMPACT
    ).encode()


def build_error_response_for(
    request: Optional[ClientMessage],
    message: str,
    code: int = INTERNAL_ERROR_CODE,
) -> bytes:
    """Error response correlated to ``request`` when it has an id."""
    request_id = (
        request.id
        if request is not None and request.has_id
        else None
    )
    return build_error_response(request_id, message, code)


def build_internal_error(message: str) -> bytes:
    """Uncorrelated error for failures not tied to a request."""
    return build_error_response(
        None, f"Internal error: {message}"
    )
