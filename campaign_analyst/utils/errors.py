"""Translate raw technical error strings into messages suitable for end users."""

from __future__ import annotations

import re

_SERVER_STATUS = re.compile(r"\b5\d\d\b")
_CLIENT_STATUS = re.compile(r"\b4\d\d\b")
_RATE_LIMIT_STATUS = re.compile(r"\b429\b")

_TIMEOUT_HINTS = ("timeout", "timed out", "deadline exceeded")
_TOO_LARGE_HINTS = ("413", "payload too large", "too large", "entity too large")
_UNSUPPORTED_HINTS = ("unsupported file type", "unsupported media type", "415")
_NETWORK_HINTS = (
    "network",
    "failed to fetch",
    "connection refused",
    "connecterror",
    "connection reset",
    "name or service not known",
)
_SERVER_HINTS = ("server error", "service unavailable", "bad gateway")
_RATE_LIMIT_HINTS = ("rate limit", "too many requests", "resource has been exhausted")


def describe_error(raw: str | BaseException | None) -> str:
    """Return a human-readable explanation for ``raw``.

    Matching is substring based and ordered from the most to the least
    specific category. Unmatched messages keep the raw text so the original
    failure can still be diagnosed.
    """
    text = str(raw or "").strip()
    lowered = text.lower()

    if not text:
        return "An unexpected error occurred. Please try again."
    if any(hint in lowered for hint in _TIMEOUT_HINTS):
        return (
            "The request took too long to complete. Please try again, or use a "
            "smaller file."
        )
    if any(hint in lowered for hint in _TOO_LARGE_HINTS):
        return "The uploaded file is too large. Please upload a smaller file."
    if any(hint in lowered for hint in _UNSUPPORTED_HINTS):
        return "Unsupported file type. Please upload a CSV, XLSX, or PDF file."
    if _RATE_LIMIT_STATUS.search(lowered) or any(
        hint in lowered for hint in _RATE_LIMIT_HINTS
    ):
        return (
            "The analysis service is receiving too many requests right now. "
            "Please wait a minute and try again."
        )
    if _SERVER_STATUS.search(lowered) or any(
        hint in lowered for hint in _SERVER_HINTS
    ):
        return (
            "The analysis service is having trouble right now. Please try again "
            "in a few minutes."
        )
    if _CLIENT_STATUS.search(lowered):
        return (
            "The request could not be processed. Please check your inputs and "
            "try again."
        )
    if any(hint in lowered for hint in _NETWORK_HINTS):
        return (
            "Unable to reach the server. Please check your internet connection "
            "and try again."
        )
    return f"An unexpected error occurred: {text}"


__all__ = ["describe_error"]
