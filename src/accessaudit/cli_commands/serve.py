"""CLI commands for running the MCP server over a transport."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from accessaudit.cli_commands._output import configure_logging, err_console
from accessaudit.config import ServerSettings, SettingsError, load_settings

_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML settings file.",
)


def _bootstrap(config_path: Path | None) -> ServerSettings:
    try:
        settings = load_settings(config_path)
    except SettingsError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    configure_logging(settings.log_level)
    if settings.telemetry.enabled:
        from accessaudit.utils.telemetry import configure_telemetry

        configure_telemetry(settings.telemetry, service_name=settings.name)
    return settings


@click.group()
def serve() -> None:
    """Run the accessibility MCP server."""


@serve.command("stdio")
@_config_option
def serve_stdio(config_path: Path | None) -> None:
    """Serve newline-delimited JSON-RPC on stdin/stdout."""
    from accessaudit.protocol.router import build_router
    from accessaudit.transports.stdio import StdioServer

    settings = _bootstrap(config_path)
    router = build_router(settings)
    asyncio.run(StdioServer(router).run())


@serve.command("http")
@_config_option
@click.option("--host", default=None, help="Bind address (overrides settings).")
@click.option("--port", type=int, default=None, help="Bind port (overrides settings).")
def serve_http_cmd(config_path: Path | None, host: str | None, port: int | None) -> None:
    """Serve the JSON-RPC endpoint and REST tool routes over HTTP."""
    from accessaudit.protocol.router import build_router
    from accessaudit.transports.http import serve_http

    settings = _bootstrap(config_path)
    overrides = {k: v for k, v in {"host": host, "port": port}.items() if v is not None}
    if overrides:
        settings = settings.model_copy(update=overrides)
    serve_http(build_router(settings), settings)
