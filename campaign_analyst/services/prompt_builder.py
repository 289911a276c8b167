"""Render model prompts from the packaged plain-text templates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Mapping, Optional

from campaign_analyst.services.industry import IndustryContext
from campaign_analyst.services.response_parser import END_MARKER, START_MARKER

logger = logging.getLogger(__name__)

OutputDetail = Literal["brief", "detailed"]

NOT_AVAILABLE = "N/A"
GENERIC_CONTEXT = (
    "General digital marketing campaign with no specific industry detected."
)
GENERIC_TIPS = (
    "Apply general digital marketing best practices and focus on the selected KPI."
)

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "prompts"

_OPEN = "{{"
_CLOSE = "}}"


@dataclass(frozen=True, slots=True)
class PromptTemplates:
    """The prompt templates loaded once at startup."""

    brief: str
    detailed: str
    help_chat: str

    @classmethod
    def load(cls, directory: Path | str = DEFAULT_TEMPLATE_DIR) -> "PromptTemplates":
        base = Path(directory)
        templates = cls(
            brief=(base / "analysis_brief.txt").read_text(encoding="utf-8"),
            detailed=(base / "analysis_detailed.txt").read_text(encoding="utf-8"),
            help_chat=(base / "help_chat.txt").read_text(encoding="utf-8"),
        )
        logger.info("Loaded prompt templates from %s", base)
        return templates


def select_template(templates: PromptTemplates, output_detail: str) -> str:
    """Pick the brief or detailed analysis template."""
    if output_detail == "brief":
        return templates.brief
    return templates.detailed


def fill_template(template: str, values: Mapping[str, Optional[str]]) -> str:
    """Substitute ``{{name}}`` placeholders literally.

    Only placeholders that occur in ``template`` itself are considered, so a
    value containing ``{{...}}`` text is never substituted again. Each name is
    replaced at its first occurrence; repeats and unknown names stay as they
    are. ``None`` or blank values render as ``N/A``.
    """
    pieces: list[str] = []
    used: set[str] = set()
    cursor = 0
    while True:
        start = template.find(_OPEN, cursor)
        if start == -1:
            break
        end = template.find(_CLOSE, start + len(_OPEN))
        if end == -1:
            break
        name = template[start + len(_OPEN) : end]
        pieces.append(template[cursor:start])
        if name in values and name not in used:
            used.add(name)
            pieces.append(_or_not_available(values[name]))
        else:
            pieces.append(template[start : end + len(_CLOSE)])
        cursor = end + len(_CLOSE)
    pieces.append(template[cursor:])
    return "".join(pieces)


def render_industry_tips(context: Optional[IndustryContext]) -> str:
    if context is None or not context.specific_tips:
        return GENERIC_TIPS
    return "\n".join(f"- {tip}" for tip in context.specific_tips)


def build_analysis_prompt(
    *,
    template: str,
    file_name: Optional[str],
    tactic: Optional[str],
    kpi: Optional[str],
    current_situation: Optional[str],
    data_string: Optional[str],
    industry: Optional[IndustryContext],
    desired_outcome: Optional[str] = None,
    client_name: Optional[str] = None,
    target_cpa: Optional[float] = None,
    target_roas: Optional[float] = None,
) -> str:
    """Fill an analysis template with the request fields."""
    values = {
        "fileName": file_name,
        "tacticsString": tactic,
        "kpisString": kpi,
        "currentSituation": current_situation,
        "desiredOutcome": desired_outcome,
        "clientName": client_name,
        "targetCpa": _format_number(target_cpa),
        "targetRoas": _format_number(target_roas),
        "dataString": data_string,
        "industryContext": (
            industry.context_details if industry is not None else GENERIC_CONTEXT
        ),
        "industryTips": render_industry_tips(industry),
        "startMarker": START_MARKER,
        "endMarker": END_MARKER,
    }
    return fill_template(template, values)


def build_help_prompt(
    *,
    template: str,
    question: str,
    conversation_history: str,
    tactic: Optional[str] = None,
    kpi: Optional[str] = None,
    file_name: Optional[str] = None,
    current_situation: Optional[str] = None,
    desired_outcome: Optional[str] = None,
    original_prompt: Optional[str] = None,
    original_analysis: Optional[str] = None,
    context_file_name: Optional[str] = None,
    context_file_content: Optional[str] = None,
) -> str:
    """Fill the follow-up chat template."""
    values = {
        "tactic": tactic,
        "kpi": kpi,
        "fileName": file_name,
        "currentSituation": current_situation,
        "desiredOutcome": desired_outcome,
        "originalPrompt": original_prompt,
        "originalAnalysis": original_analysis,
        "contextFileName": context_file_name,
        "contextFileContent": context_file_content,
        "conversationHistory": conversation_history,
        "question": question,
    }
    return fill_template(template, values)


def _or_not_available(value: Optional[str]) -> str:
    if value is None:
        return NOT_AVAILABLE
    text = str(value)
    return text if text.strip() else NOT_AVAILABLE


def _format_number(value: Optional[float]) -> Optional[str]:
    if value is None:
        return None
    return f"{value:g}"


__all__ = [
    "GENERIC_CONTEXT",
    "GENERIC_TIPS",
    "NOT_AVAILABLE",
    "OutputDetail",
    "PromptTemplates",
    "build_analysis_prompt",
    "build_help_prompt",
    "fill_template",
    "render_industry_tips",
    "select_template",
]
