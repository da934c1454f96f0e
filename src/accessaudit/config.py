"""Server settings and their loader (YAML file plus environment overrides)."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from accessaudit import __version__
from accessaudit.errors import SettingsError

API_KEY_VARIABLES = ("ACCESSAUDIT_API_KEY", "API_KEY", "MCP_API_KEY")


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    console: bool = True
    otlp_endpoint: str | None = None


class ServerSettings(BaseModel):
    """Process-wide settings shared by every transport."""

    name: str = "accessaudit-server"
    version: str = __version__
    protocol_version: str = "2024-11-05"
    api_key: str | None = None
    host: str = "127.0.0.1"
    port: int = 3000
    default_url: str = "about:blank"
    log_level: str = "INFO"
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)


def load_settings(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ServerSettings:
    """Build :class:`ServerSettings` from an optional YAML file and the environment.

    Environment variables in the form ``${VAR}`` or ``$VAR`` inside the file
    are expanded with :func:`os.path.expandvars` before YAML parsing.  The
    ``ACCESSAUDIT_API_KEY``/``API_KEY``/``MCP_API_KEY``, ``PORT`` and
    ``ACCESSAUDIT_LOG_LEVEL`` variables override values from the file.

    Raises:
        SettingsError: On unreadable files, YAML errors or validation failures.
    """
    env = os.environ if environ is None else environ
    data: dict[str, Any] = _read_file(path) if path is not None else {}

    for variable in API_KEY_VARIABLES:
        if env.get(variable):
            data["api_key"] = env[variable]
            break
    if env.get("PORT"):
        data["port"] = env["PORT"]
    if env.get("ACCESSAUDIT_LOG_LEVEL"):
        data["log_level"] = env["ACCESSAUDIT_LOG_LEVEL"]

    try:
        return ServerSettings.model_validate(data)
    except ValidationError as exc:
        raise SettingsError(str(exc)) from exc


def _read_file(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SettingsError(f"Cannot read {path}: {exc}") from exc

    expanded = os.path.expandvars(raw)

    try:
        data: Any = yaml.safe_load(expanded)
    except yaml.YAMLError as exc:
        raise SettingsError(f"YAML parse error: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError("Settings YAML must be a mapping")
    return data
