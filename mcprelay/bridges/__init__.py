from __future__ import annotations

from mcprelay.types import TransportMode

from .base_bridge import BaseBridge
from .endpoint_discovery import (
    DataDisposition,
    EndpointDiscovery,
    StreamLine,
)
from .http_bridge import HttpBridge
from .stream_bridge import StreamBridge

BRIDGE_REGISTRY: dict[
    TransportMode, type[BaseBridge]
] = {
    TransportMode.HTTP: HttpBridge,
    TransportMode.SSE: StreamBridge,
}


def resolve_bridge_for_mode(
    mode: TransportMode,
) -> type[BaseBridge]:
    bridge_class: type[BaseBridge] | None = (
        BRIDGE_REGISTRY.get(mode)
    )

    if bridge_class is None:
        supported_modes: str = ", ".join(
            m.value for m in BRIDGE_REGISTRY
        )
        raise ValueError(
            f"Unsupported transport mode '{mode}'. "
            f"Supported modes: {supported_modes}"
        )

    return bridge_class


__all__: list[str] = [
    "BaseBridge",
    "HttpBridge",
    "StreamBridge",
    "EndpointDiscovery",
    "DataDisposition",
    "StreamLine",
    "BRIDGE_REGISTRY",
    "resolve_bridge_for_mode",
]
