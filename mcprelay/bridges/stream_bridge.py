from __future__ import annotations

import asyncio
from typing import Optional, Union

import aiohttp

from mcprelay.exceptions import InputClosed
from mcprelay.messages import (
    NotAMessage,
    build_internal_error,
    parse_client_message,
)
from mcprelay.stdio import read_line
from mcprelay.types import (
    DEFAULT_RECONNECT_DELAY,
    EVENT_STREAM_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    EndpointPhase,
    TransportMode,
)

from .base_bridge import BaseBridge
from .client_session import is_success
from .endpoint_discovery import (
    DataDisposition,
    EndpointDiscovery,
    StreamLine,
)

InboxItem = Union[str, InputClosed]

_STREAM_ERRORS = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
    ValueError,
)


class StreamBridge(BaseBridge):
    """
    Asynchronous mode: server messages arrive on a long-lived SSE stream,
    client messages go out as independent POSTs.

    Three coroutines cooperate:
    - the stream reader task keeps the push stream connected, emits its
      data lines and applies endpoint announcements;
    - the input reader task turns stdin into inbox items;
    - the forwarding loop (the caller of run()) POSTs inbox lines once
      the stream is connected.

    Closing stdin is the only way to stop: it sets the shutdown event, which
    the stream reader checks on every pass and while backing off.
    """

    mode = TransportMode.SSE

    def __init__(
        self,
        *args,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self._reconnect_delay = reconnect_delay
        self._discovery = EndpointDiscovery()
        self._connected: Optional[asyncio.Event] = None
        self._shutdown: Optional[asyncio.Event] = None
        self._inbox: Optional[asyncio.Queue] = None
        self.connect_attempts: int = 0

    @property
    def endpoint_phase(self) -> EndpointPhase:
        return self._discovery.phase

    async def _relay(
        self, reader: asyncio.StreamReader
    ) -> None:
        self._connected = asyncio.Event()
        self._shutdown = asyncio.Event()
        # One slot, so the input reader waits for the forwarding loop
        self._inbox = asyncio.Queue(maxsize=1)

        stream_task = asyncio.create_task(
            self._read_stream(), name="mcprelay-sse-stream"
        )
        input_task = asyncio.create_task(
            self._read_input(reader), name="mcprelay-stdin"
        )

        try:
            await self._forward()
        finally:
            self._shutdown.set()
            # Also aborts a connect or stream read already in flight
            stream_task.cancel()
            input_task.cancel()
            await asyncio.gather(
                stream_task,
                input_task,
                return_exceptions=True,
            )

    # =========================================================================
    # INPUT READER
    # =========================================================================

    async def _read_input(
        self, reader: asyncio.StreamReader
    ) -> None:
        while True:
            try:
                line = await read_line(reader)
            except InputClosed as closed:
                await self._inbox.put(closed)
                return
            await self._inbox.put(line)

    # =========================================================================
    # FORWARDING LOOP
    # =========================================================================

    async def _forward(self) -> None:
        ready, pending_line = await self._wait_for_stream()
        if not ready:
            return

        self._logger.info("Starting receive loop on stdin")

        if pending_line is not None:
            await self.process_line(pending_line)

        while True:
            item: InboxItem = await self._inbox.get()
            if isinstance(item, InputClosed):
                self._logger.input_closed(str(item))
                return
            await self.process_line(item)

    async def _wait_for_stream(
        self,
    ) -> tuple[bool, Optional[str]]:
        """
        Hold input back until the push stream is up.

        Until then the submission path may still be rewritten by the
        server, so only the first line is kept. Returns ``(False, None)``
        if input closed first.
        """
        pending_line: Optional[str] = None
        connected = asyncio.ensure_future(
            self._connected.wait()
        )

        try:
            while not connected.done():
                next_item = asyncio.ensure_future(
                    self._inbox.get()
                )
                done, _ = await asyncio.wait(
                    {connected, next_item},
                    return_when=asyncio.FIRST_COMPLETED,
                )

                if next_item not in done:
                    next_item.cancel()
                    continue

                item: InboxItem = next_item.result()
                if isinstance(item, InputClosed):
                    self._logger.input_closed(
                        str(item), before_connect=True
                    )
                    return False, None

                if pending_line is None:
                    pending_line = item
                    self._logger.info(
                        "Received stdin input before SSE connected, waiting for SSE..."
                    )
                else:
                    self._logger.warning(
                        f"Dropping stdin input received before SSE connected: {item.strip()}"
                    )
        finally:
            connected.cancel()

        return True, pending_line

    async def process_line(self, line: str) -> None:
        """POST one input line upstream. The answer comes back on the stream."""
        line = line.strip()

        try:
            message = parse_client_message(line)
        except NotAMessage as e:
            self._logger.warning(str(e))
            return

        self._logger.client_to_server(
            line, notification=message.is_notification
        )

        post_url = self._endpoints.get_submit_url()
        headers = self._build_headers(
            {"Content-Type": JSON_CONTENT_TYPE}
        )

        try:
            async with self._session.post(
                post_url,
                data=message.encode(),
                headers=headers,
            ) as response:
                self._logger.post_completed(
                    post_url, response.status
                )
                # The body is dropped: the reply arrives on the stream
                if not is_success(response.status):
                    self._logger.warning(
                        f"Server returned HTTP {response.status} for POST request"
                    )
        except (
            aiohttp.ClientError,
            asyncio.TimeoutError,
            ValueError,
        ) as e:
            reason = f"Failed to forward JSON-RPC message: {e}"
            self._logger.error(reason)
            self._writer.emit(build_internal_error(reason))

    # =========================================================================
    # STREAM READER
    # =========================================================================

    async def _read_stream(self) -> None:
        try:
            while not self._shutdown.is_set():
                await self._connect_once()
                if not await self._wait_before_reconnect():
                    break
        except asyncio.CancelledError:
            self._logger.stream_shutdown()
            raise

        self._logger.stream_shutdown()

    async def _connect_once(self) -> None:
        push_url = self._endpoints.get_push_url()
        self._logger.stream_connecting(push_url)
        self._discovery.reset()
        self.connect_attempts += 1

        headers = self._build_headers(
            {"Accept": EVENT_STREAM_CONTENT_TYPE}
        )

        try:
            async with self._session.get(
                push_url, headers=headers
            ) as response:
                self._logger.stream_connected(
                    push_url, response.status
                )
                if not is_success(response.status):
                    self._logger.warning(
                        f"SSE server returned HTTP {response.status}"
                    )
                    return

                self._connected.set()
                await self._consume_stream(response)
        except _STREAM_ERRORS as e:
            self._logger.error(f"SSE stream error: {e}")

    async def _consume_stream(
        self, response: aiohttp.ClientResponse
    ) -> None:
        async for raw_line in response.content:
            line = raw_line.decode(
                "utf-8", errors="replace"
            ).strip()
            if line:
                self.handle_stream_line(line)
        self._logger.info("SSE stream ended by server")

    def handle_stream_line(self, line: str) -> None:
        """Apply one trimmed, non-empty line of the push stream."""
        stream_line = StreamLine.parse(line)

        if stream_line.is_endpoint_event:
            if self._discovery.endpoint_announced():
                self._logger.debug("SSE endpoint event received")
            return

        payload = stream_line.data
        if not payload:
            return

        disposition = self._discovery.classify(payload)
        if disposition is DataDisposition.ENDPOINT_PATH:
            self._endpoints.set_submit_path(payload)
            return
        if disposition is DataDisposition.MALFORMED_ENDPOINT:
            # Still forwarded: it may be a real message
            self._logger.warning(
                f"Expected dynamic endpoint, but received: {payload}"
            )

        self._writer.emit(payload)

    async def _wait_before_reconnect(self) -> bool:
        """Back off; returns False if shutdown arrives first."""
        self._logger.stream_closed(self._reconnect_delay)
        try:
            await asyncio.wait_for(
                self._shutdown.wait(),
                timeout=self._reconnect_delay,
            )
        except asyncio.TimeoutError:
            return True
        return False
