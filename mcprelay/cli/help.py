"""
Rich help pages for the ``mcprelay`` group and its commands.

Each option row also names the config file key it overrides, so a YAML
config can be written straight from ``mcprelay run --help``.
"""

from __future__ import annotations

import click
from rich import box
from rich.markup import escape
from rich.table import Table

from ..config import CONFIG_KEYS
from .output import print_banner

# Parameter names that differ from the config key they set
_PARAM_CONFIG_KEYS = {
    "headers_json": "headers",
}


def _console():
    from . import console

    return console


def config_key_for(param: click.Parameter) -> str:
    key = _PARAM_CONFIG_KEYS.get(param.name, param.name)
    return key if key in CONFIG_KEYS else ""


class RelayGroup(click.Group):
    def format_help(self, ctx, formatter):
        console = _console()
        print_banner(console)

        if self.help:
            console.print(f"  {self.help}")
            console.print()

        table = Table(
            box=box.SIMPLE,
            show_header=False,
            padding=(0, 2),
            show_edge=False,
        )
        table.add_column("Command", style="green")
        table.add_column("Description")
        for name in self.list_commands(ctx):
            command = self.get_command(ctx, name)
            if command is None or command.hidden:
                continue
            table.add_row(
                name, command.get_short_help_str(limit=60)
            )

        console.print("  [bold]Commands[/bold]")
        console.print(table)
        console.print()
        console.print(
            "  [dim]stdout carries protocol messages only; use"
            " --log or --log-stderr for diagnostics.[/dim]"
        )
        console.print()


class RelayCommand(click.Command):
    def format_help(self, ctx, formatter):
        console = _console()
        print_banner(console)

        summary = (
            self.help.strip().split("\n")[0] if self.help else ""
        )
        console.print(
            f"  [bold cyan]{ctx.info_name}[/bold cyan]"
            + (f" - {escape(summary)}" if summary else "")
        )
        console.print()
        console.print(
            f"  [bold]Usage:[/bold] [green]{escape(ctx.command_path)}[/green]"
            f" {escape(' '.join(self.collect_usage_pieces(ctx)))}",
            highlight=False,
        )
        console.print()

        self._render_options(console, ctx)
        self._render_examples(console)

    def _render_options(self, console, ctx):
        options = [
            p for p in self.get_params(ctx)
            if isinstance(p, click.Option)
        ]
        with_keys = any(config_key_for(o) for o in options)

        table = Table(
            box=box.SIMPLE,
            header_style="bold",
            padding=(0, 2),
            show_edge=False,
        )
        table.add_column("Option", style="cyan", no_wrap=True)
        if with_keys:
            table.add_column("Config key", style="magenta")
        table.add_column("Description")

        for option in options:
            row = [", ".join(option.opts + option.secondary_opts)]
            if with_keys:
                row.append(config_key_for(option))
            row.append(escape(option.help or ""))
            table.add_row(*row)

        console.print(table)
        console.print()

    def _render_examples(self, console):
        if not self.help or "Examples:" not in self.help:
            return

        console.print("  [bold]Examples[/bold]")
        examples = self.help.split("Examples:", 1)[1]
        for line in examples.splitlines():
            if line.strip():
                console.print(
                    f"    {line.strip()}",
                    markup=False,
                    highlight=False,
                    style="dim",
                )
        console.print()
