from __future__ import annotations

import asyncio
from typing import Optional
from urllib.parse import SplitResult, urlsplit

from . import __version__
from .bridges import BaseBridge, StreamBridge, resolve_bridge_for_mode
from .config import RelayConfig
from .endpoint import EndpointStore
from .exceptions import RelayConfigError
from .logging import RelayLogger, get_logger
from .messages import build_internal_error
from .stdio import MessageWriter, create_stdin_reader
from .types import DEFAULT_SUBMIT_PATH, TransportMode

PRODUCT = f"MCPRelay v{__version__}"


def parse_server_url(url: str) -> SplitResult:
    """
    Split and sanity-check an upstream URL.

    Raises:
        ValueError: Not an absolute http(s) URL with a host, or the port
            is not a number.
    """
    parts = urlsplit(url)
    # Accessing .port validates it
    _ = parts.port
    if parts.scheme not in ("http", "https"):
        raise ValueError(
            f"unsupported scheme '{parts.scheme}'"
        )
    if not parts.hostname:
        raise ValueError("missing host")
    return parts


def origin_of(parts: SplitResult) -> str:
    """``scheme://host[:port]``, without credentials or path."""
    host = parts.netloc.rpartition("@")[2]
    return f"{parts.scheme}://{host}"


class Relay:
    """
    Connects the local stdio client to one upstream server.

    The transport is fixed at construction. run() blocks until the client
    closes stdin.
    """

    def __init__(
        self,
        config: RelayConfig,
        writer: Optional[MessageWriter] = None,
        logger: Optional[RelayLogger] = None,
    ):
        self._config = config
        self._logger = logger or get_logger("relay")
        self._writer = writer or MessageWriter()
        self._endpoints = EndpointStore()

        self._derive_endpoints()
        self._bridge = self._create_bridge()

    @property
    def config(self) -> RelayConfig:
        return self._config

    @property
    def endpoints(self) -> EndpointStore:
        return self._endpoints

    @property
    def bridge(self) -> BaseBridge:
        return self._bridge

    def _derive_endpoints(self) -> None:
        url = self._config.url

        try:
            parts = parse_server_url(url)
        except ValueError as e:
            message = f"Error parsing URL '{url}': {e}"
            # The client may already be waiting for protocol messages
            self._writer.emit(build_internal_error(message))
            raise RelayConfigError(message) from e

        if self._config.transport is TransportMode.SSE:
            self._endpoints.set_origin(origin_of(parts))
            self._endpoints.set_push_url(url)
            self._endpoints.set_submit_path(
                DEFAULT_SUBMIT_PATH
            )
        else:
            self._endpoints.set_submit_url(url)
            self._logger.info(
                f"HTTP mode: POST endpoint set to {url}"
            )

    def _create_bridge(self) -> BaseBridge:
        bridge_class = resolve_bridge_for_mode(
            self._config.transport
        )
        kwargs = {}
        if bridge_class is StreamBridge:
            kwargs["reconnect_delay"] = (
                self._config.reconnect_delay
            )
        return bridge_class(
            self._endpoints,
            self._writer,
            headers=self._config.headers,
            **kwargs,
        )

    def run(
        self, reader: Optional[asyncio.StreamReader] = None
    ) -> None:
        asyncio.run(self.run_async(reader))

    async def run_async(
        self, reader: Optional[asyncio.StreamReader] = None
    ) -> None:
        if reader is None:
            reader = await create_stdin_reader()

        self._logger.relay_started(PRODUCT)
        try:
            await self._bridge.run(reader)
        finally:
            self._logger.relay_stopped(PRODUCT)
