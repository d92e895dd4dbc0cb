from __future__ import annotations

import asyncio
from typing import Optional

import aiohttp

from mcprelay.exceptions import InputClosed
from mcprelay.messages import (
    ClientMessage,
    NotAMessage,
    build_error_response_for,
    parse_client_message,
)
from mcprelay.stdio import read_line
from mcprelay.types import (
    HTTP_ACCEPT,
    JSON_CONTENT_TYPE,
    SESSION_HEADER,
    TransportMode,
)

from .base_bridge import BaseBridge
from .client_session import is_success


class HttpBridge(BaseBridge):
    """
    Synchronous mode: one input line in, one POST out, one line back.

    Requests are strictly sequential. Every request with an ``id`` gets
    exactly one line back: the upstream body, or a synthesized error
    carrying the same ``id``.
    """

    mode = TransportMode.HTTP

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._session_id: Optional[str] = None

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    async def _relay(
        self, reader: asyncio.StreamReader
    ) -> None:
        self._logger.info("Starting HTTP mode")

        while True:
            try:
                line = await read_line(reader)
            except InputClosed as closed:
                self._logger.input_closed(str(closed))
                return

            response = await self.process_line(line)
            if response is not None:
                self._writer.emit(response)

    async def process_line(self, line: str) -> Optional[bytes]:
        """Forward one input line; returns the bytes for the client, if any."""
        line = line.strip()

        try:
            message = parse_client_message(line)
        except NotAMessage as e:
            self._logger.warning(str(e))
            return None

        self._logger.client_to_server(
            line, notification=message.is_notification
        )

        # The HTTP transport has no fire-and-forget delivery
        if message.is_notification:
            self._logger.debug(
                "Skipping notification in HTTP mode (not supported by HTTP transport)"
            )
            return None

        return await self._post(message)

    async def _post(self, message: ClientMessage) -> bytes:
        post_url = self._endpoints.get_submit_url()
        headers = self._request_headers()

        try:
            async with self._session.post(
                post_url,
                data=message.encode(),
                headers=headers,
            ) as response:
                self._capture_session_id(response)
                self._logger.post_completed(
                    post_url, response.status
                )

                try:
                    body = await response.read()
                except (
                    aiohttp.ClientError,
                    asyncio.TimeoutError,
                ) as e:
                    return self._failure(
                        message,
                        f"Failed to read response: {e}",
                    )

                if not is_success(response.status):
                    if body:
                        self._logger.debug(
                            f"Server error response: {body.decode('utf-8', errors='replace')}"
                        )
                    return self._failure(
                        message,
                        f"Server returned HTTP {response.status}",
                    )

                if not body.strip():
                    # Nothing to relay, but the client still waits on this id
                    return self._failure(
                        message,
                        f"Server returned an empty response (HTTP {response.status})",
                    )

                return body
        except (
            aiohttp.ClientError,
            asyncio.TimeoutError,
            # aiohttp rejects unsendable header values this way
            ValueError,
        ) as e:
            return self._failure(
                message, f"Failed to POST: {e}"
            )

    def _request_headers(self):
        defaults = {
            "Content-Type": JSON_CONTENT_TYPE,
            "Accept": HTTP_ACCEPT,
        }
        if self._session_id:
            defaults[SESSION_HEADER] = self._session_id
            self._logger.debug(
                f"Sending request with session ID header: {SESSION_HEADER}: {self._session_id}"
            )
        return self._build_headers(defaults)

    def _capture_session_id(
        self, response: aiohttp.ClientResponse
    ) -> None:
        # The first session id the server hands out is kept for good
        session_id = response.headers.get(SESSION_HEADER)
        if session_id and not self._session_id:
            self._session_id = session_id
            self._logger.info(
                f"Extracted MCP session ID: {session_id}"
            )

    def _failure(
        self, message: ClientMessage, reason: str
    ) -> bytes:
        self._logger.error(reason)
        return build_error_response_for(message, reason)
