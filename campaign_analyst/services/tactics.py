"""Recommended KPIs for each supported marketing tactic."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

KPI_RECOMMENDATIONS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "SEM": ("ROAS", "CPA", "CTR", "CPC"),
        "SEO": ("Conversion Rate", "Impressions", "Clicks"),
        "Display Ads": ("CTR", "Impressions", "Clicks", "Conversions"),
        "Video Display Ads": ("Impressions", "Clicks", "Conversions"),
        "YouTube": ("Impressions", "Clicks", "Conversions"),
        "OTT": ("Impressions", "Conversions"),
        "Social Ads": ("CTR", "Impressions", "Clicks", "Conversions"),
        "Email eDirect": ("CTR", "Conversion Rate", "Conversions"),
        "Amazon DSP": ("ROAS", "Conversions", "CPA"),
    }
)


def recommended_kpis(tactic: str | None) -> dict[str, list[str]]:
    """Return recommendations for one tactic, or for every tactic when omitted.

    Unknown tactics yield an empty list rather than an error.
    """
    if not tactic:
        return {name: list(kpis) for name, kpis in KPI_RECOMMENDATIONS.items()}
    return {tactic: list(KPI_RECOMMENDATIONS.get(tactic, ()))}


__all__ = ["KPI_RECOMMENDATIONS", "recommended_kpis"]
