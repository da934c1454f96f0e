"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from accessaudit.config import ServerSettings, load_settings
from accessaudit.errors import SettingsError


class TestDefaults:
    def test_defaults(self) -> None:
        settings = load_settings(environ={})
        assert settings == ServerSettings()
        assert settings.name == "accessaudit-server"
        assert settings.protocol_version == "2024-11-05"
        assert settings.api_key is None
        assert settings.port == 3000
        assert settings.default_url == "about:blank"
        assert settings.telemetry.enabled is False
        assert settings.telemetry.console is True


class TestFile:
    def test_yaml_values(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text(
            "name: audit\n"
            "port: 8080\n"
            "telemetry:\n"
            "  enabled: true\n"
            "  otlp_endpoint: http://collector:4317\n"
        )
        settings = load_settings(path, environ={})
        assert settings.name == "audit"
        assert settings.port == 8080
        assert settings.telemetry.enabled is True
        assert settings.telemetry.otlp_endpoint == "http://collector:4317"

    def test_env_vars_expanded(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUDIT_TEST_KEY", "from-file-env")
        path = tmp_path / "settings.yaml"
        path.write_text("api_key: ${AUDIT_TEST_KEY}\n")
        assert load_settings(path, environ={}).api_key == "from-file-env"

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("")
        assert load_settings(path, environ={}) == ServerSettings()

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(SettingsError, match="mapping"):
            load_settings(path, environ={})

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("name: [unclosed\n")
        with pytest.raises(SettingsError, match="YAML parse error"):
            load_settings(path, environ={})

    def test_invalid_value(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("port: not-a-port\n")
        with pytest.raises(SettingsError, match="port"):
            load_settings(path, environ={})

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SettingsError, match="Cannot read"):
            load_settings(tmp_path / "missing.yaml", environ={})


class TestEnvironment:
    def test_api_key_precedence(self) -> None:
        env = {"API_KEY": "generic", "MCP_API_KEY": "mcp", "ACCESSAUDIT_API_KEY": "own"}
        assert load_settings(environ=env).api_key == "own"
        env = {"API_KEY": "generic", "MCP_API_KEY": "mcp"}
        assert load_settings(environ=env).api_key == "generic"
        assert load_settings(environ={"MCP_API_KEY": "mcp"}).api_key == "mcp"

    def test_environment_overrides_file(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("api_key: file\nport: 8080\nlog_level: DEBUG\n")
        env = {"API_KEY": "env", "PORT": "9090", "ACCESSAUDIT_LOG_LEVEL": "WARNING"}
        settings = load_settings(path, environ=env)
        assert settings.api_key == "env"
        assert settings.port == 9090
        assert settings.log_level == "WARNING"

    def test_empty_variables_are_ignored(self) -> None:
        assert load_settings(environ={"ACCESSAUDIT_API_KEY": "", "PORT": ""}).port == 3000
