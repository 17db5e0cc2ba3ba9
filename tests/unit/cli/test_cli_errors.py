"""Tests for CLI error mapping."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from aar_transform.cli.errors import (
    EXIT_SYSTEM_ERROR,
    EXIT_USER_ERROR,
    CLIError,
    exit_code_for,
    format_pydantic_error,
    handle_transform_error,
    load_settings,
)
from aar_transform.errors import (
    AarTransformError,
    CacheIOError,
    ConfigurationError,
    InputReadError,
    TransformFailedError,
)
from aar_transform.settings import AarTransformSettings


class TestExitCodes:
    """Tests for exit code mapping."""

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (CacheIOError("/build/state.json"), EXIT_SYSTEM_ERROR),
            (InputReadError("/project/a.aar"), EXIT_SYSTEM_ERROR),
            (TransformFailedError("/project/a.aar", "boom"), EXIT_USER_ERROR),
            (ConfigurationError("bad manifest"), EXIT_USER_ERROR),
        ],
    )
    def test_exit_code_for(self, error: AarTransformError, expected: int) -> None:
        assert exit_code_for(error) == expected

    def test_handle_transform_error_wraps(self) -> None:
        original = InputReadError("/project/a.aar")

        with pytest.raises(CLIError) as exc_info:
            handle_transform_error(original)

        assert exc_info.value.exit_code == EXIT_SYSTEM_ERROR
        assert exc_info.value.message == original.user_message
        assert exc_info.value.__cause__ is original

    def test_show_prints_message(self, capsys: pytest.CaptureFixture[str]) -> None:
        CLIError("Something failed").show()
        assert "Something failed" in capsys.readouterr().out


class TestSettingsErrors:
    """Tests for reporting invalid settings."""

    def test_format_pydantic_error_lists_fields(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AarTransformSettings(
                _env_file=None,  # type: ignore[call-arg]
                hash_algorithm="md5",  # type: ignore[arg-type]
                chunk_size=10,
            )

        formatted = format_pydantic_error(exc_info.value)

        lines = formatted.splitlines()
        assert lines[0] == "Validation failed:"
        assert any(line.startswith("  - hash_algorithm: ") for line in lines)
        assert any(line.startswith("  - chunk_size: ") for line in lines)

    def test_load_settings_raises_cli_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AAR_TRANSFORM_HASH_ALGORITHM", "md5")

        with pytest.raises(CLIError) as exc_info:
            load_settings()

        assert exc_info.value.exit_code == EXIT_USER_ERROR
        assert "AAR_TRANSFORM_* settings" in exc_info.value.message
        assert "hash_algorithm" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_load_settings_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AAR_TRANSFORM_HASH_ALGORITHM", "sha512")

        assert load_settings().hash_algorithm == "sha512"
