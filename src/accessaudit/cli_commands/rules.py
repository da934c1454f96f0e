"""CLI commands for browsing the rule catalog."""

from __future__ import annotations

import json

import click

from accessaudit.cli_commands._output import console, err_console, print_rules_table


@click.group()
def rules() -> None:
    """Browse the accessibility rule catalog."""


@rules.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print raw rule metadata.")
def list_rules(as_json: bool) -> None:
    """List every rule the engine evaluates."""
    from accessaudit.engine.rules import RULES

    if as_json:
        console.print_json(json.dumps([rule.to_json() for rule in RULES]))
        return
    print_rules_table(RULES)


@rules.command("show")
@click.argument("rule_id")
def show_rule(rule_id: str) -> None:
    """Show metadata for one rule (e.g. R2 or its full URI)."""
    from accessaudit.engine.rules import RULES, find_rule

    rule = find_rule(RULES, rule_id)
    if rule is None:
        err_console.print(f"[red]Error:[/red] Rule {rule_id} not found")
        raise SystemExit(1)
    console.print_json(json.dumps(rule.to_json()))
