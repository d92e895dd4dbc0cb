"""
MCPRelay Logging Module

The relay owns stdout as a framed message channel, so logs can only go to
a file or to stderr:
- Plain file output for production (the usual setup under an MCP client)
- Rich, colored stderr output for interactive debugging
- Nothing at all when neither is configured

Usage:
    from mcprelay.logging import setup_logging, RelayLogger

    logger = setup_logging(level="DEBUG", log_file="/tmp/relay.log")
    logger.stream_connected("http://127.0.0.1:8888/sse", 200)
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text
from rich.theme import Theme

ROOT_LOGGER_NAME = "mcprelay"

FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEBUG_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s %(filename)s:%(lineno)d: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# =============================================================================
# CUSTOM THEME
# =============================================================================

RELAY_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "debug": "dim",
        "relay.client": "bold green",
        "relay.server": "bold blue",
        "relay.endpoint": "bold magenta",
    }
)


# =============================================================================
# CUSTOM LOG HANDLER
# =============================================================================


class RelayRichHandler(RichHandler):
    """
    Rich handler with per-level icons.

    Markup is off: log messages routinely carry raw JSON, and its square
    brackets must not be read as style tags.
    """

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("show_time", True)
        kwargs.setdefault("show_path", False)
        kwargs.setdefault("markup", False)
        kwargs.setdefault("rich_tracebacks", True)
        super().__init__(*args, **kwargs)

    def get_level_text(
        self, record: logging.LogRecord
    ) -> Text:
        """Custom level text with icons."""
        level_name = record.levelname

        icons = {
            "DEBUG": "🔍",
            "INFO": "ℹ️ ",
            "WARNING": "⚠️ ",
            "ERROR": "❌",
            "CRITICAL": "🚨",
        }

        icon = icons.get(level_name, "•")

        style = {
            "DEBUG": "dim",
            "INFO": "cyan",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold red",
        }.get(level_name, "white")

        return Text(f"{icon} {level_name:<8}", style=style)


# =============================================================================
# RELAY LOGGER
# =============================================================================


class RelayLogger:
    """
    High-level logging interface for the relay.

    Provides semantic logging methods for the traffic that crosses the
    bridge, so both transports describe the same moments the same way:
    - client_to_server() / server_to_client()
    - post_completed()
    - stream_connecting() / stream_connected() / stream_closed()
    - etc.

    The level is inherited from the ``mcprelay`` root logger configured by
    setup_logging().
    """

    def __init__(self, name: str):
        """
        Initialize a relay logger.

        Args:
            name: Component name, nested under ``mcprelay.``
        """
        self.name = name
        self._logger = logging.getLogger(
            f"{ROOT_LOGGER_NAME}.{name}"
        )

    def _log(self, level: int, message: str):
        self._logger.log(level, message, stacklevel=3)

    @property
    def debug_enabled(self) -> bool:
        return self._logger.isEnabledFor(logging.DEBUG)

    # =========================================================================
    # SEMANTIC LOGGING METHODS
    # =========================================================================

    def relay_started(self, product: str):
        """Log relay startup."""
        self._log(logging.INFO, f"{product} started")

    def relay_stopped(self, product: str):
        """Log relay shutdown."""
        self._log(logging.INFO, f"{product} exiting")

    def client_to_server(
        self, line: str, notification: bool = False
    ):
        """Log a client message on its way upstream (debug only)."""
        if notification:
            self._log(
                logging.DEBUG,
                f"C->S (notification): {line}",
            )
        else:
            self._log(logging.DEBUG, f"C->S: {line}")

    def server_to_client(self, message: str):
        """Log a message on its way to the client (debug only)."""
        self._log(logging.DEBUG, f"S->C: {message}")

    def post_completed(self, url: str, status: int):
        """Log the status of an upstream POST (debug only)."""
        self._log(
            logging.DEBUG, f"POST {url} -> HTTP {status}"
        )

    def input_closed(
        self, reason: str, before_connect: bool = False
    ):
        """Log the client going away."""
        when = (
            " before stream connected"
            if before_connect
            else ""
        )
        self._log(
            logging.INFO,
            f"Client input closed{when}: {reason}",
        )

    def stream_connecting(self, url: str):
        """Log a push stream connection attempt."""
        self._log(
            logging.INFO,
            f"Connecting to SSE stream at {url}",
        )

    def stream_connected(self, url: str, status: int):
        """Log a push stream response."""
        self._log(
            logging.INFO,
            f"Connected to SSE stream at {url} (HTTP {status})",
        )

    def stream_closed(self, delay: float):
        """Log a lost push stream and the pending retry."""
        self._log(
            logging.INFO,
            f"SSE stream closed, waiting {delay:g} seconds before reconnection attempt",
        )

    def stream_shutdown(self):
        """Log the push stream reader stopping."""
        self._log(
            logging.INFO,
            "SSE client shutting down: stdin connection closed",
        )

    def endpoint_changed(self, label: str, url: str):
        """Log an Endpoint Store mutation."""
        self._log(logging.INFO, f"{label} set to {url}")

    def error(self, message: str, exc_info: bool = False):
        """Log error."""
        self._logger.error(
            message, exc_info=exc_info, stacklevel=2
        )

    def warning(self, message: str):
        """Log warning."""
        self._log(logging.WARNING, message)

    def info(self, message: str):
        """Log info."""
        self._log(logging.INFO, message)

    def debug(self, message: str):
        """Log debug."""
        self._log(logging.DEBUG, message)


# =============================================================================
# SETUP FUNCTION
# =============================================================================


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    stderr_output: bool = False,
) -> RelayLogger:
    """
    Configure relay logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path for log output, opened for append
        stderr_output: Also log to stderr through a Rich console

    Returns:
        RelayLogger instance for the entry point

    Example:
        logger = setup_logging(level="DEBUG", stderr_output=True)
        logger.info("Relay starting...")
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    # Never reach a root handler that might write to stdout
    root_logger.propagate = False

    if log_file:
        file_handler = logging.FileHandler(
            log_file,
            mode="a",
            encoding="utf-8",
            errors="backslashreplace",
        )
        file_handler.setFormatter(
            logging.Formatter(
                DEBUG_FILE_FORMAT
                if level.upper() == "DEBUG"
                else FILE_FORMAT,
                datefmt=DATE_FORMAT,
            )
        )
        root_logger.addHandler(file_handler)

    if stderr_output:
        console = Console(theme=RELAY_THEME, stderr=True)
        handler = RelayRichHandler(console=console)
        handler.setFormatter(
            logging.Formatter("%(message)s")
        )
        root_logger.addHandler(handler)

    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())

    return RelayLogger("main")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def get_logger(name: str) -> RelayLogger:
    """
    Get a relay logger instance.

    Args:
        name: Logger name

    Returns:
        RelayLogger instance
    """
    return RelayLogger(name)
