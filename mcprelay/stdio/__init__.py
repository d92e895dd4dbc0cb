from .message_reader import (
    LINE_LIMIT,
    create_stdin_reader,
    read_line,
)
from .message_writer import MessageWriter

__all__ = [
    "LINE_LIMIT",
    "MessageWriter",
    "create_stdin_reader",
    "read_line",
]
