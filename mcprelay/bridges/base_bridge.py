from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import ClassVar, Mapping, Optional

import aiohttp
from multidict import CIMultiDict

from mcprelay.endpoint import EndpointStore
from mcprelay.logging import RelayLogger, get_logger
from mcprelay.stdio import MessageWriter
from mcprelay.types import TransportMode

from .client_session import create_client_session


class BaseBridge(ABC):
    mode: ClassVar[TransportMode]

    def __init__(
        self,
        endpoints: EndpointStore,
        writer: MessageWriter,
        headers: Optional[Mapping[str, str]] = None,
        logger: Optional[RelayLogger] = None,
    ):
        self._endpoints = endpoints
        self._writer = writer
        self._headers: dict[str, str] = dict(headers or {})
        self._logger = logger or get_logger(
            f"bridge.{self.mode.value}"
        )
        self._session: aiohttp.ClientSession | None = None

    @property
    def endpoints(self) -> EndpointStore:
        return self._endpoints

    async def run(self, reader: asyncio.StreamReader) -> None:
        """Relay until the client closes its input."""
        await self.start()
        try:
            await self._relay(reader)
        finally:
            await self.stop()

    async def start(self) -> None:
        if self._session is None:
            self._session = create_client_session()

    async def stop(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    @abstractmethod
    async def _relay(
        self, reader: asyncio.StreamReader
    ) -> None: ...

    @abstractmethod
    async def process_line(self, line: str): ...

    def _build_headers(
        self, defaults: Mapping[str, str]
    ) -> CIMultiDict:
        # Configured headers win over the relay's own, case-insensitively
        headers: CIMultiDict = CIMultiDict(defaults)
        for key, value in self._headers.items():
            headers[key] = value
        return headers
