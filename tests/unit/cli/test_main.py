"""Tests for the aar-transform CLI entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
import pytest
from click.testing import CliRunner
from pydantic import ValidationError

from aar_transform import __version__
from aar_transform.cli.errors import EXIT_USER_ERROR
from aar_transform.cli.main import LAZY_COMMANDS, LazyGroup, cli


class TestCliGroup:
    """Tests for the main group."""

    def test_help_lists_commands(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for name in ["app", "module", "cache"]:
            assert name in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_unknown_command(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["explode"])
        assert result.exit_code != 0

    def test_global_options_configure_logging(
        self, tmp_path: Path, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[dict[str, Any]] = []
        monkeypatch.setattr(
            "aar_transform.cli.main.configure_logging", lambda **kwargs: calls.append(kwargs)
        )

        result = cli_runner.invoke(
            cli,
            ["--log-level", "debug", "--json-logs", "module", "--lib-dir", str(tmp_path / "lib")],
        )

        assert result.exit_code == 0, result.output
        assert "No .aar files to transform" in result.output
        assert calls == [{"log_level": "DEBUG", "json_format": True}]

    def test_logging_defaults_from_settings(
        self, tmp_path: Path, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[dict[str, Any]] = []
        monkeypatch.setattr(
            "aar_transform.cli.main.configure_logging", lambda **kwargs: calls.append(kwargs)
        )
        monkeypatch.setenv("AAR_TRANSFORM_LOG_LEVEL", "WARNING")

        result = cli_runner.invoke(cli, ["module", "--lib-dir", str(tmp_path / "lib")])

        assert result.exit_code == 0, result.output
        assert calls == [{"log_level": "WARNING", "json_format": False}]

    def test_invalid_settings_exit_with_user_error(
        self, tmp_path: Path, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("AAR_TRANSFORM_HASH_ALGORITHM", "md5")

        result = cli_runner.invoke(cli, ["module", "--lib-dir", str(tmp_path / "lib")])

        assert result.exit_code == EXIT_USER_ERROR
        assert "Invalid configuration" in result.output
        assert "hash_algorithm" in result.output
        assert not isinstance(result.exception, ValidationError)


class TestLazyGroup:
    """Tests for lazy command loading."""

    def test_lists_lazy_commands_sorted(self) -> None:
        ctx = click.Context(cli)
        assert cli.list_commands(ctx) == sorted(LAZY_COMMANDS)

    def test_loads_command_on_demand(self) -> None:
        ctx = click.Context(cli)
        command = cli.get_command(ctx, "module")

        assert isinstance(command, click.Command)
        assert command.name == "module"

    def test_unknown_command_is_none(self) -> None:
        group = LazyGroup(name="test", lazy_subcommands={})
        assert group.get_command(click.Context(group), "missing") is None
