from __future__ import annotations

import sys

import click
from rich.console import Console

from .. import __version__
from .help import RelayGroup

# stdout belongs to the relayed protocol, so all CLI output goes to stderr
console = Console(stderr=True)


@click.group(cls=RelayGroup)
@click.version_option(
    version=__version__, prog_name="MCPRelay"
)
def cli():
    """Bridge stdio MCP clients to HTTP and SSE servers."""
    pass


from . import commands  # noqa: E402, F401


def main():
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)
