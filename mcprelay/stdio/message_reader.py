import asyncio
import sys
from typing import BinaryIO, Optional

from mcprelay.exceptions import InputClosed
from mcprelay.logging import get_logger
from mcprelay.types import INPUT_ERRORS

# MCP messages (tool results, resources) can be far larger than the default
# StreamReader limit of 64 KiB
LINE_LIMIT = 16 * 1024 * 1024

_logger = get_logger("stdin")


async def create_stdin_reader(
    stream: Optional[BinaryIO] = None,
) -> asyncio.StreamReader:
    reader = asyncio.StreamReader(limit=LINE_LIMIT)
    protocol = asyncio.StreamReaderProtocol(reader)
    await asyncio.get_running_loop().connect_read_pipe(
        lambda: protocol, stream or sys.stdin
    )
    return reader


async def read_line(reader: asyncio.StreamReader) -> str:
    """
    Read one line, newline included.

    A line longer than the reader's limit is logged and skipped; reading
    carries on with the next line.

    Raises:
        InputClosed: End of input, or the read failed. A final line with
            no terminating newline is still returned before EOF is reported.
    """
    while True:
        try:
            data = await reader.readuntil(b"\n")
        except asyncio.IncompleteReadError as e:
            data = e.partial
        except asyncio.LimitOverrunError:
            _logger.warning(
                "Discarding input line longer than the line limit"
            )
            try:
                await _skip_line(reader)
            except OSError as e:
                raise InputClosed(e) from e
            continue
        except OSError as e:
            raise InputClosed(e) from e

        if not data:
            raise InputClosed()
        return data.decode("utf-8", errors=INPUT_ERRORS)


async def _skip_line(reader: asyncio.StreamReader) -> None:
    while True:
        try:
            await reader.readuntil(b"\n")
            return
        except asyncio.LimitOverrunError as e:
            # Everything up to e.consumed is still buffered
            await reader.readexactly(e.consumed)
        except asyncio.IncompleteReadError:
            return
