"""
MCPRelay - Core Types

Transport modes, the endpoint discovery phase of a push stream, and the
protocol constants shared by both bridges.
"""

from __future__ import annotations

from enum import Enum

# =============================================================================
# PROTOCOL CONSTANTS
# =============================================================================

JSONRPC_VERSION = "2.0"

# Every locally synthesized failure uses the JSON-RPC "internal error" code
INTERNAL_ERROR_CODE = -32603

SESSION_HEADER = "Mcp-Session-Id"

JSON_CONTENT_TYPE = "application/json"
EVENT_STREAM_CONTENT_TYPE = "text/event-stream"
HTTP_ACCEPT = f"{JSON_CONTENT_TYPE}, {EVENT_STREAM_CONTENT_TYPE}"

# Input bytes that are not valid UTF-8 survive decode/encode unchanged
INPUT_ERRORS = "surrogateescape"

DEFAULT_URL = "http://127.0.0.1:8888/sse"
DEFAULT_SUBMIT_PATH = "/messages"
DEFAULT_RECONNECT_DELAY = 5.0


# =============================================================================
# TRANSPORT MODES
# =============================================================================


class TransportMode(str, Enum):
    """
    How the relay talks to the upstream server.

    Chosen once at startup and fixed for the life of the process.
    """

    HTTP = "http"  # POST per request, response in the body
    SSE = "sse"  # long-lived event stream plus out-of-band POSTs


# =============================================================================
# ENDPOINT DISCOVERY
# =============================================================================


class EndpointPhase(str, Enum):
    """
    Where a push stream connection is in the dynamic endpoint handshake.

    A fresh connection starts IDLE. An ``event: endpoint`` line moves it to
    AWAITING_PATH, and the next data line moves it to RESOLVED, which holds
    until the connection is replaced.
    """

    IDLE = "idle"
    AWAITING_PATH = "awaiting_path"
    RESOLVED = "resolved"
