"""Shared CLI output formatters."""

from __future__ import annotations

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from accessaudit.engine.models import Rule  # noqa: TC001
from accessaudit.tools.registry import ToolDescriptor  # noqa: TC001

console = Console()
err_console = Console(stderr=True)

_OUTCOME_STYLES = {
    "passed": "green",
    "failed": "red",
    "cantTell": "yellow",
    "inapplicable": "dim",
}


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr through rich; stdout stays free for protocol traffic."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def print_tools_table(tools: tuple[ToolDescriptor, ...]) -> None:
    """Pretty-print the tool registry as a table."""
    table = Table(title="Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Required")

    for tool in tools:
        required = tool.input_schema.get("required", [])
        table.add_row(tool.name, _truncate(tool.description), ", ".join(required) or "-")

    console.print(table)


def print_rules_table(rules: tuple[Rule, ...]) -> None:
    """Pretty-print the rule catalog as a table."""
    table = Table(title="Rules")
    table.add_column("Code", style="cyan")
    table.add_column("Title")
    table.add_column("Criteria")

    for rule in rules:
        criteria = ", ".join(f"{r.criterion} ({r.level})" for r in rule.requirements)
        table.add_row(rule.code, rule.title, criteria or "-")

    console.print(table)


def print_audit_result(result: dict[str, Any]) -> None:
    """Print the summary counts followed by every non-passing applicable outcome."""
    summary = result["summary"]
    counts = summary["counts"]

    table = Table(title=f"Audit summary ({summary['total']} outcomes)")
    for name in ("passed", "failed", "cantTell", "inapplicable"):
        table.add_column(name, style=_OUTCOME_STYLES[name], justify="right")
    table.add_row(*(str(counts[name]) for name in ("passed", "failed", "cantTell", "inapplicable")))
    console.print(table)

    findings = [o for o in result["outcomes"] if o["outcome"] in ("failed", "cantTell")]
    if not findings:
        console.print("[green]No failed or undecided outcomes.[/green]")
        return

    detail = Table(title="Findings")
    detail.add_column("Outcome")
    detail.add_column("Rule", style="cyan")
    detail.add_column("Target")
    detail.add_column("Message")
    for outcome in findings:
        style = _OUTCOME_STYLES[outcome["outcome"]]
        target = outcome.get("target") or {}
        detail.add_row(
            f"[{style}]{outcome['outcome']}[/{style}]",
            outcome["rule"]["uri"].rsplit("/", 1)[-1],
            target.get("path", "-"),
            _truncate(outcome.get("message", "")),
        )
    console.print(detail)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
