"""Extract the structured answer from a free-form model response."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

START_MARKER = "---HTML_ANALYSIS_START---"
END_MARKER = "---HTML_ANALYSIS_END---"

_LEADING_FENCE = re.compile(r"^```[A-Za-z0-9_+-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```$")
_TAG = re.compile(r"<[^>]+>")
_BLANK_RUNS = re.compile(r"\n\s*\n+")
_H2_BLOCK = re.compile(r"<h2[^>]*>(.*?)</h2>", re.IGNORECASE | re.DOTALL)

_SECTION_KEYS = {
    "executive summary": "executiveSummary",
    "key findings": "keyFindings",
    "story angles": "storyAngles",
    "supporting data": "supportingData",
    "recommendations": "recommendations",
}


@dataclass(slots=True)
class ParsedAnalysis:
    """HTML and plain-text renditions of the model's answer."""

    html: str
    plain_text: str
    used_fallback: bool = False


def strip_code_fences(content: str) -> str:
    """Remove a wrapping ```lang ... ``` fence when present at the boundaries."""
    cleaned = content.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def strip_tags(html: str) -> str:
    """Lossy markup removal; malformed or nested markup is not handled."""
    text = _TAG.sub("", html)
    text = _BLANK_RUNS.sub("\n\n", text)
    return text.strip()


def extract_between_markers(
    raw_text: str,
    start_marker: str = START_MARKER,
    end_marker: str = END_MARKER,
) -> str | None:
    """Return the text strictly between the markers, or None when malformed."""
    start = raw_text.find(start_marker)
    if start == -1:
        return None
    content_start = start + len(start_marker)
    end = raw_text.find(end_marker, content_start)
    if end == -1:
        return None
    return raw_text[content_start:end]


def parse_analysis_response(
    raw_text: str,
    start_marker: str = START_MARKER,
    end_marker: str = END_MARKER,
) -> ParsedAnalysis:
    """Split a raw model response into HTML and plain-text fragments.

    Falls back to the whole response when the markers are missing or out of
    order.
    """
    extracted = extract_between_markers(raw_text, start_marker, end_marker)
    used_fallback = extracted is None
    if used_fallback:
        logger.warning(
            "Analysis markers not found in model response; using full text."
        )
        html = raw_text.strip()
    else:
        html = strip_code_fences(extracted)
    return ParsedAnalysis(
        html=html,
        plain_text=strip_tags(html),
        used_fallback=used_fallback,
    )


def extract_sections(html: str) -> dict[str, str]:
    """Split an HTML fragment into the known report sections by ``<h2>`` heading."""
    matches = list(_H2_BLOCK.finditer(html))
    sections: dict[str, str] = {}
    for index, match in enumerate(matches):
        heading = strip_tags(match.group(1)).strip().lower()
        key = _SECTION_KEYS.get(heading)
        if key is None:
            continue
        body_end = matches[index + 1].start() if index + 1 < len(matches) else len(html)
        body = html[match.end() : body_end].strip()
        if body:
            sections[key] = body
    return sections


__all__ = [
    "END_MARKER",
    "START_MARKER",
    "ParsedAnalysis",
    "extract_between_markers",
    "extract_sections",
    "parse_analysis_response",
    "strip_code_fences",
    "strip_tags",
]
