"""
MCPRelay - stdio to HTTP/SSE bridge for MCP clients

Lets a client that only speaks JSON-RPC over stdin/stdout reach a server
that speaks it over the network, either:

    http   one POST per request, the response body is the answer
    sse    a long-lived event stream carries answers, POSTs carry requests

Quick Start:

    from mcprelay import Relay, RelayConfig, TransportMode

    config = RelayConfig(
        url="http://127.0.0.1:8888/sse",
        transport=TransportMode.SSE,
        headers={"Authorization": "Bearer abc123"},
    )
    Relay(config).run()   # returns when the client closes stdin

CLI:

    mcprelay run --url https://mcp.example.com/mcp
    mcprelay run --transport sse --url http://127.0.0.1:8888/sse --log /tmp/relay.log
    mcprelay info
"""

__version__ = "0.4.0"

from .logging import (
    RelayLogger,
    get_logger,
    setup_logging,
)
from .exceptions import (
    InputClosed,
    RelayConfigError,
    RelayError,
)
from .types import EndpointPhase, TransportMode
from .config import (
    RelayConfig,
    load_config_file,
    parse_headers_json,
)
from .endpoint import EndpointStore
from .stdio import MessageWriter
from .bridges import HttpBridge, StreamBridge
from .relay import PRODUCT, Relay

__all__ = [
    # Version
    "__version__",
    "PRODUCT",
    # Core
    "Relay",
    "RelayConfig",
    "TransportMode",
    "EndpointPhase",
    # Components
    "EndpointStore",
    "MessageWriter",
    "HttpBridge",
    "StreamBridge",
    # Configuration
    "load_config_file",
    "parse_headers_json",
    # Exceptions
    "RelayError",
    "RelayConfigError",
    "InputClosed",
    # Logging
    "setup_logging",
    "get_logger",
    "RelayLogger",
]
