"""Validate the campaign analyst configuration before starting the API.

Loads the given ``.env`` file, builds ``AppSettings`` and the prompt
templates, and prints the resolved model and storage summary. Missing
``GEMINI_API_KEY`` or ``GOOGLE_CLIENT_ID`` values, an unknown default model
tier, or a missing template are reported with a non-zero exit code::

    python -m scripts.check_env --env-file /opt/campaign-analyst/.env
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from campaign_analyst.core.config import AppSettings, _load_env_file
from campaign_analyst.services.prompt_builder import DEFAULT_TEMPLATE_DIR, PromptTemplates

MODEL_TIERS = ("fast", "quality")

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_RUNTIME_ERROR = 5


def _validate_settings(env_file: Path, templates_dir: Path) -> AppSettings:
    """Ensure required settings and prompt templates load from the supplied paths."""
    _load_env_file(str(env_file))
    settings = AppSettings()  # type: ignore[call-arg]
    if settings.gemini.default_model not in MODEL_TIERS:
        raise ValueError(
            f"GEMINI_DEFAULT_MODEL must be one of {', '.join(MODEL_TIERS)}; "
            f"got {settings.gemini.default_model!r}."
        )
    PromptTemplates.load(templates_dir)
    return settings


def _print_summary(settings: AppSettings) -> None:
    print(f"Environment: {settings.environment}")
    print(f"Fast model: {settings.gemini.fast_model_name}")
    print(f"Quality model: {settings.gemini.quality_model_name}")
    print(f"Default tier: {settings.gemini.default_model}")
    print(f"Upload limit: {settings.max_upload_bytes} bytes")
    print(f"History store: {settings.storage.history_db_path}")
    print(f"History fetch timeout: {settings.history_fetch_timeout:g}s")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate required settings and prompt templates."
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        type=Path,
        help="Path to the environment file (default: .env in the repo root).",
    )
    parser.add_argument(
        "--templates-dir",
        default=DEFAULT_TEMPLATE_DIR,
        type=Path,
        help="Directory holding the prompt templates to validate.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    env_file: Path = args.env_file

    if not env_file.exists():
        print(f"Environment file {env_file} does not exist.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        settings = _validate_settings(env_file, args.templates_dir)
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR
    except ValueError as exc:
        print(f"Settings validation failed: {exc}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Unexpected error during validation: {exc}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    _print_summary(settings)
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
