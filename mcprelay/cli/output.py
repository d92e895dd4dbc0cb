"""
stderr output for the command line.

stdout is the relayed message channel, so the banner and every status line
printed here go through the stderr console from ``mcprelay.cli``.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from .. import __version__

BANNER = (
    "[bold cyan]⇄ MCPRelay[/bold cyan] [dim]v{version}[/dim]"
    "  [dim]stdio ⇄ http | sse[/dim]"
)

STATUS_ICONS = {
    "info": "[blue]ℹ[/blue]",
    "success": "[green]✓[/green]",
    "warning": "[yellow]⚠[/yellow]",
    "error": "[red]✗[/red]",
}


def print_banner(console: Console) -> None:
    console.print(BANNER.format(version=__version__))
    console.print()


def print_status(
    console: Console, message: str, status: str = "info"
) -> None:
    """One icon-prefixed line; ``message`` is printed literally."""
    icon = STATUS_ICONS.get(status, STATUS_ICONS["info"])
    console.print(f"  {icon} {escape(message)}")
