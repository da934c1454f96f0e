"""accessaudit CLI entrypoint."""

from __future__ import annotations

import click

from accessaudit import __version__


@click.group()
@click.version_option(version=__version__, prog_name="accessaudit")
def main() -> None:
    """accessaudit — accessibility audit tools over MCP."""


# Register subcommands
from accessaudit.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
