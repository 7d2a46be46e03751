"""Unit tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from sfn_context_injector.injector.config import InjectorSettings


def test_settings_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    settings = InjectorSettings()

    assert settings.log_level == "INFO"
    assert settings.enabled is True
    assert settings.output_indent == 2


def test_settings_loads_from_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text(
        "\n".join(
            [
                "LOG_LEVEL=DEBUG",
                "INJECTOR_ENABLED=false",
                "INJECTOR_OUTPUT_INDENT=0",
                "",
            ]
        ),
        encoding="utf-8",
    )

    settings = InjectorSettings()

    assert settings.log_level == "DEBUG"
    assert settings.enabled is False
    assert settings.output_indent == 0


def test_environment_overrides_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("LOG_LEVEL=DEBUG\n", encoding="utf-8")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    assert InjectorSettings().log_level == "WARNING"


def test_negative_indent_is_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("INJECTOR_OUTPUT_INDENT", "-1")

    with pytest.raises(ValidationError):
        InjectorSettings()
