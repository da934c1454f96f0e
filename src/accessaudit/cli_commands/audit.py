"""CLI command for auditing a local HTML file."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click

from accessaudit.cli_commands._output import console, err_console, print_audit_result
from accessaudit.errors import AuditError


@click.command()
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--url", default=None, help="URL to associate with the page.")
@click.option("--json", "as_json", is_flag=True, help="Print the raw audit result.")
@click.option(
    "--fail-on-violation",
    is_flag=True,
    help="Exit with status 2 when any outcome failed.",
)
def audit(html_file: Path, url: str | None, as_json: bool, fail_on_violation: bool) -> None:
    """Audit an HTML file against the built-in rule catalog."""
    from accessaudit.tools.executors import AuditTools

    try:
        html = html_file.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        err_console.print(f"[red]Error:[/red] {html_file} is not valid UTF-8: {exc}")
        raise SystemExit(1) from exc

    arguments: dict[str, object] = {"html": html}
    if url is not None:
        arguments["url"] = url

    try:
        result = asyncio.run(AuditTools().audit_html(arguments))
    except AuditError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    if as_json:
        console.print_json(json.dumps(result))
    else:
        print_audit_result(result)

    if fail_on_violation and result["summary"]["counts"]["failed"]:
        raise SystemExit(2)
