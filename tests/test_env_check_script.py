"""Tests for the configuration check script."""

from __future__ import annotations

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from pathlib import Path

import pytest

from scripts import check_env

REQUIRED_ENV_KEYS = [
    "GEMINI_API_KEY",
    "GOOGLE_CLIENT_ID",
    "GEMINI_DEFAULT_MODEL",
]


def _write_env(env_path: Path, **values: str) -> None:
    contents = "\n".join(f"{key}={value}" for key, value in values.items())
    env_path.write_text(contents + "\n", encoding="utf-8")


def _clear_required_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Values loaded from the .env file land in os.environ; registering each key
    # first makes monkeypatch restore the original state on teardown.
    for key in REQUIRED_ENV_KEYS:
        monkeypatch.setenv(key, "placeholder")
        monkeypatch.delenv(key)


def test_main_requires_existing_env_file(tmp_path: Path) -> None:
    exit_code = check_env.main(["--env-file", str(tmp_path / ".missing-env")])
    assert exit_code == check_env.EXIT_RUNTIME_ERROR


def test_validation_failure_for_missing_api_key(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"

    _clear_required_env(monkeypatch)
    _write_env(env_file, GOOGLE_CLIENT_ID="abc")

    exit_code = check_env.main(["--env-file", str(env_file)])
    assert exit_code == check_env.EXIT_VALIDATION_ERROR


def test_validation_failure_for_unknown_default_tier(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"

    _clear_required_env(monkeypatch)
    _write_env(
        env_file,
        GEMINI_API_KEY="gemini-key",
        GOOGLE_CLIENT_ID="abc",
        GEMINI_DEFAULT_MODEL="turbo",
    )

    exit_code = check_env.main(["--env-file", str(env_file)])
    assert exit_code == check_env.EXIT_VALIDATION_ERROR


def test_check_reports_missing_templates(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = tmp_path / ".env"

    _clear_required_env(monkeypatch)
    _write_env(env_file, GEMINI_API_KEY="gemini-key", GOOGLE_CLIENT_ID="abc")

    exit_code = check_env.main(
        ["--env-file", str(env_file), "--templates-dir", str(tmp_path)]
    )
    assert exit_code == check_env.EXIT_RUNTIME_ERROR
    assert "analysis_brief.txt" in capsys.readouterr().err


def test_check_prints_summary(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = tmp_path / ".env"

    _clear_required_env(monkeypatch)
    _write_env(env_file, GEMINI_API_KEY="gemini-key", GOOGLE_CLIENT_ID="abc")

    assert check_env.main(["--env-file", str(env_file)]) == check_env.EXIT_OK
    output = capsys.readouterr().out
    assert "Quality model: gemini-2.5-pro-preview-03-25" in output
    assert "Default tier: quality" in output
    assert "History fetch timeout: 15s" in output
