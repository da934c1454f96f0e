"""CLI commands for inspecting the tool registry."""

from __future__ import annotations

import json

import click

from accessaudit.cli_commands._output import console, print_tools_table


@click.group()
def tools() -> None:
    """Inspect the tools exposed over MCP."""


@tools.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print raw tool descriptors.")
def list_tools(as_json: bool) -> None:
    """List every registered tool."""
    from accessaudit.tools.registry import ToolRegistry

    registry = ToolRegistry()
    if as_json:
        console.print_json(json.dumps([t.to_json() for t in registry.list()]))
        return

    if not len(registry):
        console.print("[dim]No tools registered.[/dim]")
        return
    print_tools_table(registry.list())
