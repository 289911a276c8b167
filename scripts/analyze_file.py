#!/usr/bin/env python
"""Run the campaign analysis pipeline on a local report file."""

from __future__ import annotations

import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from campaign_analyst.clients import GeminiClient  # noqa: E402
from campaign_analyst.core.config import get_settings  # noqa: E402
from campaign_analyst.core.logging import configure_logging  # noqa: E402
from campaign_analyst.schemas import AnalysisInputs  # noqa: E402
from campaign_analyst.services import (  # noqa: E402
    AnalysisService,
    FileUpload,
    PromptTemplates,
)
from campaign_analyst.utils.errors import describe_error  # noqa: E402


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Analyze a CSV, XLSX or PDF campaign report with Gemini."
    )
    parser.add_argument("path", type=Path, help="Report file to analyze.")
    parser.add_argument("--tactic", required=True, help="Marketing tactic, e.g. SEM.")
    parser.add_argument("--kpi", default=None, help="Primary KPI, e.g. CTR.")
    parser.add_argument(
        "--situation", default=None, help="Free-text description of the campaign."
    )
    parser.add_argument("--client", default=None, help="Client name.")
    parser.add_argument("--outcome", default=None, help="Desired outcome.")
    parser.add_argument(
        "--model",
        default=None,
        help="Model tier ('fast' or 'quality') or an allowed model name.",
    )
    parser.add_argument(
        "--detail",
        choices=("brief", "detailed"),
        default="detailed",
        help="Length of the generated report.",
    )
    parser.add_argument(
        "--html",
        action="store_true",
        help="Print the HTML fragment instead of plain text.",
    )
    return parser


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    service = AnalysisService(
        GeminiClient(settings.gemini, settings.retry),
        PromptTemplates.load(),
        max_upload_bytes=settings.max_upload_bytes,
    )
    inputs = AnalysisInputs(
        tactic_name=args.tactic,
        kpi_name=args.kpi,
        situation_text=args.situation,
        client_name=args.client,
        desired_outcome=args.outcome,
        model_id=args.model,
        output_detail=args.detail,
    )
    upload = FileUpload(
        file_name=args.path.name,
        data=args.path.read_bytes(),
        content_type=mimetypes.guess_type(args.path.name)[0],
    )
    result = await service.analyze(inputs, upload)
    print(f"Model: {result.model_name}")
    print(f"Industry: {result.industry or 'general'}\n")
    print(result.html if args.html else result.raw)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(get_settings().log_level)
    if not args.path.exists():
        print(f"File {args.path} does not exist.", file=sys.stderr)
        return 1
    try:
        return asyncio.run(run(args))
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Analysis failed: {describe_error(exc)}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
