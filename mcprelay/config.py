"""
Relay configuration.

Values come from command-line options, optionally layered over a YAML file:

    url: https://mcp.example.com/mcp
    transport: http
    headers:
      Authorization: Bearer abc123
    debug: false
    log_file: /tmp/mcprelay.log
    reconnect_delay: 5
"""

from __future__ import annotations

import dataclasses
import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .exceptions import RelayConfigError
from .types import (
    DEFAULT_RECONNECT_DELAY,
    DEFAULT_URL,
    TransportMode,
)

CONFIG_KEYS = frozenset(
    {
        "url",
        "transport",
        "headers",
        "debug",
        "log_file",
        "reconnect_delay",
    }
)

# RFC 9110 token characters
_HEADER_NAME = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
# Anything but horizontal tab below 0x20, and DEL
_FORBIDDEN_IN_VALUE = re.compile(r"[\x00-\x08\x0a-\x1f\x7f]")


@dataclass
class RelayConfig:
    url: str = DEFAULT_URL
    transport: TransportMode = TransportMode.HTTP
    headers: dict[str, str] = field(default_factory=dict)
    debug: bool = False
    log_file: Optional[str] = None
    reconnect_delay: float = DEFAULT_RECONNECT_DELAY

    def __post_init__(self) -> None:
        if not isinstance(self.url, str) or not self.url:
            raise RelayConfigError(
                "url must be a non-empty string"
            )
        self.transport = parse_transport(self.transport)
        self.headers = validate_headers(self.headers)
        if not isinstance(self.debug, bool):
            raise RelayConfigError("debug must be a boolean")
        if (
            isinstance(self.reconnect_delay, bool)
            or not isinstance(
                self.reconnect_delay, (int, float)
            )
            or self.reconnect_delay < 0
        ):
            raise RelayConfigError(
                "reconnect_delay must be a non-negative number"
            )

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.debug else "INFO"

    def merged_with(self, **overrides: Any) -> RelayConfig:
        """Copy with every override that is not None applied."""
        unknown = set(overrides) - CONFIG_KEYS
        if unknown:
            raise RelayConfigError(
                f"Unknown configuration keys: {', '.join(sorted(unknown))}"
            )
        changes = {
            key: value
            for key, value in overrides.items()
            if value is not None
        }
        return dataclasses.replace(self, **changes)


def parse_transport(
    value: Union[str, TransportMode],
) -> TransportMode:
    try:
        return TransportMode(value)
    except ValueError:
        raise RelayConfigError(
            f"Invalid transport mode: {value} (must be 'http' or 'sse')"
        ) from None


def validate_headers(headers: Any) -> dict[str, str]:
    if headers is None:
        return {}
    if not isinstance(headers, dict):
        raise RelayConfigError(
            "headers must be a mapping of header names to values"
        )
    for key, value in headers.items():
        if not isinstance(key, str) or not isinstance(
            value, str
        ):
            raise RelayConfigError(
                f"Header {key!r} must map a string to a string"
            )
        if not _HEADER_NAME.fullmatch(key):
            raise RelayConfigError(
                f"Invalid header name {key!r}"
            )
        if _FORBIDDEN_IN_VALUE.search(value):
            raise RelayConfigError(
                f"Header {key!r} contains a control character"
            )
    return dict(headers)


def parse_headers_json(text: Optional[str]) -> dict[str, str]:
    """
    Parse the ``--headers`` option, e.g. ``{"Authorization": "Bearer x"}``.

    An empty or missing value means no custom headers.
    """
    if not text:
        return {}
    try:
        headers = json.loads(text)
    except json.JSONDecodeError as e:
        raise RelayConfigError(
            f"Failed to parse headers JSON: {e}"
        ) from e
    return validate_headers(headers)


def load_config_file(path: Union[Path, str]) -> RelayConfig:
    resolved_path = Path(path)
    try:
        with open(resolved_path) as file_handle:
            raw_data = yaml.safe_load(file_handle)
    except OSError as e:
        raise RelayConfigError(
            f"Cannot read config file {resolved_path}: {e}"
        ) from e
    except yaml.YAMLError as e:
        raise RelayConfigError(
            f"Invalid YAML in {resolved_path}: {e}"
        ) from e

    if raw_data is None:
        return RelayConfig()
    if not isinstance(raw_data, dict):
        raise RelayConfigError(
            f"{resolved_path} must contain a mapping"
        )

    unknown = set(raw_data) - CONFIG_KEYS
    if unknown:
        raise RelayConfigError(
            f"Unknown configuration keys in {resolved_path}: "
            f"{', '.join(sorted(map(str, unknown)))}"
        )

    return RelayConfig(**raw_data)
