from __future__ import annotations

import sys
from typing import Optional

import click
from rich import box
from rich.table import Table

from ... import __version__
from ...config import RelayConfig, load_config_file
from ...exceptions import RelayConfigError
from ...types import DEFAULT_SUBMIT_PATH, SESSION_HEADER
from .. import cli, console
from ..help import RelayCommand
from ..output import print_banner, print_status

TRANSPORT_NOTES = {
    "http": f"one POST per request, session kept via {SESSION_HEADER}",
    "sse": f"event stream for replies, POSTs to {DEFAULT_SUBMIT_PATH} until the server names another path",
}


def _settings_table(config: RelayConfig) -> Table:
    table = Table(
        box=box.SIMPLE,
        show_header=False,
        padding=(0, 2),
    )
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Version", __version__)
    table.add_row("Python", sys.version.split()[0])
    table.add_row("Platform", sys.platform)
    table.add_row("URL", config.url)
    table.add_row("Transport", config.transport.value)
    # Values are often credentials
    table.add_row(
        "Headers", ", ".join(sorted(config.headers)) or "-"
    )
    table.add_row("Reconnect delay", f"{config.reconnect_delay:g}s")
    table.add_row("Log file", config.log_file or "-")
    table.add_row("Log level", config.log_level)
    return table


def _transports_table(selected: str) -> Table:
    table = Table(
        box=box.SIMPLE,
        show_header=False,
        padding=(0, 1),
        show_edge=False,
    )
    table.add_column("Selected", width=3)
    table.add_column("Transport", style="green")
    table.add_column("Behavior", style="dim")

    for name, note in TRANSPORT_NOTES.items():
        marker = "[green]●[/green]" if name == selected else ""
        table.add_row(marker, name, note)
    return table


@cli.command(cls=RelayCommand)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Show the settings this YAML file resolves to",
)
def info(config_path: Optional[str]):
    """
    Show MCPRelay version, effective settings and supported transports.

    Examples:
      mcprelay info
      mcprelay info --config ./relay.yaml
    """
    try:
        config = (
            load_config_file(config_path)
            if config_path
            else RelayConfig()
        )
    except RelayConfigError as e:
        print_status(console, str(e), "error")
        sys.exit(1)

    print_banner(console)
    console.print(_settings_table(config))
    console.print("  [bold]Transports[/bold]")
    console.print(_transports_table(config.transport.value))
    console.print()
