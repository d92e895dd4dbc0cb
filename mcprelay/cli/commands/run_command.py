from __future__ import annotations

import sys
from typing import Optional

import click

from ...config import (
    RelayConfig,
    load_config_file,
    parse_headers_json,
)
from ...exceptions import RelayConfigError
from ...logging import setup_logging
from ...relay import Relay
from ...types import DEFAULT_URL, TransportMode
from .. import cli, console
from ..help import RelayCommand
from ..output import print_status


@cli.command(cls=RelayCommand)
@click.option(
    "--url",
    default=None,
    help=f"Server URL: the POST endpoint (http) or the SSE stream (sse). Default {DEFAULT_URL}",
)
@click.option(
    "--transport",
    type=click.Choice([mode.value for mode in TransportMode]),
    default=None,
    help="Transport mode (default http)",
)
@click.option(
    "--headers",
    "headers_json",
    default=None,
    help='Custom HTTP headers as a JSON object, e.g. {"Authorization": "Bearer token"}',
)
@click.option(
    "--log",
    "log_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Append logs to this file (leave empty to disable logging)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file with defaults for any of these options",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug logging, including relayed messages",
)
@click.option(
    "--log-stderr",
    is_flag=True,
    default=False,
    help="Also log to stderr",
)
def run(
    url: Optional[str],
    transport: Optional[str],
    headers_json: Optional[str],
    log_file: Optional[str],
    config_path: Optional[str],
    debug: bool,
    log_stderr: bool,
):
    """
    Relay stdin/stdout to an MCP server until the client disconnects.

    Examples:
      mcprelay run --url https://mcp.example.com/mcp
      mcprelay run --transport sse --url http://127.0.0.1:8888/sse
      mcprelay run --headers '{"Authorization":"Bearer abc"}' --log /tmp/relay.log
      mcprelay run --config ./relay.yaml --debug
    """
    try:
        config = build_config(
            config_path=config_path,
            url=url,
            transport=transport,
            headers_json=headers_json,
            log_file=log_file,
            debug=debug,
        )
    except RelayConfigError as e:
        print_status(console, str(e), "error")
        sys.exit(1)

    try:
        logger = setup_logging(
            level=config.log_level,
            log_file=config.log_file,
            stderr_output=log_stderr,
        )
    except OSError as e:
        print_status(
            console,
            f"Failed to open log file {config.log_file}: {e}",
            "error",
        )
        sys.exit(1)

    try:
        relay = Relay(config)
    except RelayConfigError as e:
        logger.error(f"Failed to create relay: {e}")
        print_status(console, str(e), "error")
        sys.exit(1)

    relay.run()


def build_config(
    config_path: Optional[str] = None,
    url: Optional[str] = None,
    transport: Optional[str] = None,
    headers_json: Optional[str] = None,
    log_file: Optional[str] = None,
    debug: bool = False,
) -> RelayConfig:
    """Layer command-line values over the config file, if any."""
    base = (
        load_config_file(config_path)
        if config_path
        else RelayConfig()
    )
    return base.merged_with(
        url=url,
        transport=transport,
        headers=(
            parse_headers_json(headers_json)
            if headers_json
            else None
        ),
        log_file=log_file,
        debug=True if debug else None,
    )
