"""
MCPRelay Test Suite - Shared Fixtures

The upstream side of every bridge test is a real in-process aiohttp server
(``aiohttp.test_utils.TestServer``); the client side is an
``asyncio.StreamReader`` standing in for stdin and a ``BytesIO`` standing in
for stdout.  Nothing touches the real stdio streams or the network beyond
localhost.
"""

from __future__ import annotations

import asyncio
import contextlib
import io
import logging
import os
import sys
import time
from typing import AsyncIterator, Callable

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

# ---------------------------------------------------------------------------
# Ensure the project root is importable
# ---------------------------------------------------------------------------
sys.path.insert(
    0,
    os.path.dirname(
        os.path.dirname(os.path.abspath(__file__))
    ),
)

from mcprelay.endpoint import EndpointStore  # noqa: E402
from mcprelay.stdio import MessageWriter  # noqa: E402

PING_REQUEST = '{"jsonrpc":"2.0","id":1,"method":"ping"}'
PING_RESULT = '{"jsonrpc":"2.0","id":1,"result":{}}'
NOTIFICATION = '{"jsonrpc":"2.0","method":"notify"}'


# ============================================================================
# Client side
# ============================================================================


def make_stdin(
    *lines: str, close: bool = True
) -> asyncio.StreamReader:
    """A stdin stand-in holding ``lines``; must be built inside the loop."""
    reader = asyncio.StreamReader()
    for line in lines:
        reader.feed_data(line.encode() + b"\n")
    if close:
        reader.feed_eof()
    return reader


def make_writer() -> tuple[MessageWriter, io.BytesIO]:
    output = io.BytesIO()
    return MessageWriter(stream=output), output


def output_lines(output: io.BytesIO) -> list[str]:
    return output.getvalue().decode().splitlines()


def make_endpoints(
    submit_url: str = "", origin: str = "", push_url: str = ""
) -> EndpointStore:
    endpoints = EndpointStore()
    if origin:
        endpoints.set_origin(origin)
    if push_url:
        endpoints.set_push_url(push_url)
    if submit_url:
        endpoints.set_submit_url(submit_url)
    return endpoints


# ============================================================================
# Upstream side
# ============================================================================


@contextlib.asynccontextmanager
async def serve(
    app: web.Application,
) -> AsyncIterator[TestServer]:
    """
    Run ``app`` on a localhost port for the duration of the block.

    Handlers that hold a stream open should wait on ``app["stop"]``, which is
    set before the server shuts down so cleanup never waits on them.
    """
    stop = asyncio.Event()
    app["stop"] = stop
    server = TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        stop.set()
        await server.close()


async def wait_until(
    predicate: Callable[[], bool], timeout: float = 5.0
) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError(
                "condition not met within timeout"
            )
        await asyncio.sleep(0.01)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_relay_logging():
    """Undo setup_logging() so caplog sees relay records in every test."""
    yield
    root_logger = logging.getLogger("mcprelay")
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.propagate = True
    root_logger.setLevel(logging.NOTSET)


@pytest.fixture
def relay_caplog(caplog):
    caplog.set_level(logging.DEBUG, logger="mcprelay")
    return caplog
