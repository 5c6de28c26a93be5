"""Tests for the ``config`` sub-commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from schemacache.app import app
from schemacache.config import load_global_config, save_global_config
from schemacache.models import GlobalConfig, RegistryConfig


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


class TestConfigSet:
    def test_set_string(self, runner: CliRunner, xdg_dirs: dict[str, Path]) -> None:
        result = runner.invoke(app, ["--quiet", "config", "set", "registry.url", "http://localhost:8081"])
        assert result.exit_code == 0, result.output
        assert load_global_config().registry.url == "http://localhost:8081"

    def test_set_int(self, runner: CliRunner, xdg_dirs: dict[str, Path]) -> None:
        result = runner.invoke(app, ["--quiet", "config", "set", "registry.max_retries", "5"])
        assert result.exit_code == 0, result.output
        assert load_global_config().registry.max_retries == 5

    def test_set_bool(self, runner: CliRunner, xdg_dirs: dict[str, Path]) -> None:
        result = runner.invoke(app, ["--quiet", "config", "set", "cache.enabled", "false"])
        assert result.exit_code == 0, result.output
        assert load_global_config().cache.enabled is False

    def test_bad_int(self, runner: CliRunner, xdg_dirs: dict[str, Path]) -> None:
        result = runner.invoke(app, ["config", "set", "registry.timeout", "soon"])
        assert result.exit_code == 2

    @pytest.mark.parametrize("key", ["nope.url", "registry.nope", "registry"])
    def test_unknown_key(self, runner: CliRunner, xdg_dirs: dict[str, Path], key: str) -> None:
        result = runner.invoke(app, ["config", "set", key, "x"])
        assert result.exit_code == 2

    @pytest.mark.parametrize("url", ["localhost:8081", "ftp://r.example.com", "http://"])
    def test_registry_url_must_be_http(
        self, runner: CliRunner, xdg_dirs: dict[str, Path], url: str
    ) -> None:
        result = runner.invoke(app, ["config", "set", "registry.url", url])
        assert result.exit_code == 2
        assert load_global_config().registry.url is None

    def test_registry_url_trailing_slash_dropped(
        self, runner: CliRunner, xdg_dirs: dict[str, Path]
    ) -> None:
        runner.invoke(app, ["--quiet", "config", "set", "registry.url", "https://r.example.com/"])
        assert load_global_config().registry.url == "https://r.example.com"

    def test_output_format_restricted(self, runner: CliRunner, xdg_dirs: dict[str, Path]) -> None:
        result = runner.invoke(app, ["config", "set", "output.format", "yaml"])
        assert result.exit_code == 2

    def test_cache_directory_expands_home(
        self, runner: CliRunner, xdg_dirs: dict[str, Path], monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        runner.invoke(app, ["--quiet", "config", "set", "cache.directory", "~/snapshots"])
        assert load_global_config().cache.directory == str(tmp_path / "snapshots")

    def test_password_not_echoed(self, runner: CliRunner, xdg_dirs: dict[str, Path]) -> None:
        result = runner.invoke(app, ["--no-color", "config", "set", "registry.password", "hunter2"])
        assert result.exit_code == 0, result.output
        assert "hunter2" not in result.output
        assert "unencrypted" in result.output
        assert load_global_config().registry.password == "hunter2"


class TestConfigUnset:
    def test_unset_restores_default(self, runner: CliRunner, xdg_dirs: dict[str, Path]) -> None:
        save_global_config(
            GlobalConfig(registry=RegistryConfig(url="http://r:8081", password="pw", max_retries=9))
        )
        runner.invoke(app, ["--quiet", "config", "unset", "registry.password"])
        runner.invoke(app, ["--quiet", "config", "unset", "registry.max_retries"])

        config = load_global_config()
        assert config.registry.password is None
        assert config.registry.max_retries == 3
        assert config.registry.url == "http://r:8081"

    def test_unset_unknown_key(self, runner: CliRunner, xdg_dirs: dict[str, Path]) -> None:
        assert runner.invoke(app, ["config", "unset", "registry.nope"]).exit_code == 2


class TestStoredOutputFormat:
    def test_stored_format_used_without_flags(
        self, runner: CliRunner, xdg_dirs: dict[str, Path]
    ) -> None:
        runner.invoke(app, ["--quiet", "config", "set", "output.format", "json"])
        result = runner.invoke(app, ["--quiet", "config", "show"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["output"]["format"] == "json"

    def test_flag_overrides_stored_format(
        self, runner: CliRunner, xdg_dirs: dict[str, Path]
    ) -> None:
        runner.invoke(app, ["--quiet", "config", "set", "output.format", "json"])
        result = runner.invoke(app, ["--plain", "--quiet", "config", "show"])
        assert result.stdout.startswith("registry\t")

    def test_broken_config_still_resettable(
        self, runner: CliRunner, xdg_dirs: dict[str, Path]
    ) -> None:
        path = xdg_dirs["config"] / "schemacache" / "config.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("{broken", encoding="utf-8")

        result = runner.invoke(app, ["--force", "--quiet", "config", "reset"])
        assert result.exit_code == 0, result.output
        assert load_global_config() == GlobalConfig()


class TestConfigShow:
    def test_show_masks_password(self, runner: CliRunner, xdg_dirs: dict[str, Path]) -> None:
        save_global_config(
            GlobalConfig(registry=RegistryConfig(url="http://r:8081", username="svc", password="pw"))
        )
        result = runner.invoke(app, ["--json", "--quiet", "config", "show"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["registry"]["url"] == "http://r:8081"
        assert data["registry"]["password"] == "********"


class TestConfigReset:
    def test_reset_with_force(self, runner: CliRunner, xdg_dirs: dict[str, Path]) -> None:
        save_global_config(GlobalConfig(registry=RegistryConfig(url="http://r:8081")))
        result = runner.invoke(app, ["--force", "--quiet", "config", "reset"])
        assert result.exit_code == 0, result.output
        assert load_global_config() == GlobalConfig()

    def test_reset_declined(self, runner: CliRunner, xdg_dirs: dict[str, Path]) -> None:
        save_global_config(GlobalConfig(registry=RegistryConfig(url="http://r:8081")))
        result = runner.invoke(app, ["--quiet", "config", "reset"], input="n\n")
        assert result.exit_code == 0
        assert load_global_config().registry.url == "http://r:8081"
