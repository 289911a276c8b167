"""Keyword-frequency heuristic that picks an industry framing for the prompt."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IndustryContext:
    """Canned domain framing injected into the analysis prompt."""

    name: str
    context_details: str
    specific_tips: tuple[str, ...]


# Registration order doubles as the tie-break order.
INDUSTRY_KEYWORDS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "automotive": (
            "dealership",
            "dealer",
            "automotive",
            "auto",
            "car",
            "cars",
            "vehicle",
            "vehicles",
            "test drive",
            "suv",
            "truck",
            "trucks",
        ),
        "retail": (
            "retail",
            "store",
            "stores",
            "shop",
            "shopping",
            "shoppers",
            "visits",
            "foot traffic",
            "merchandise",
            "boutique",
            "mall",
            "ecommerce",
            "e-commerce",
        ),
        "healthcare": (
            "healthcare",
            "hospital",
            "clinic",
            "patient",
            "patients",
            "medical",
            "doctor",
            "dental",
            "dentist",
            "physician",
        ),
        "real_estate": (
            "real estate",
            "realtor",
            "property",
            "properties",
            "listing",
            "listings",
            "homebuyers",
            "mortgage",
            "open house",
        ),
        "restaurant": (
            "restaurant",
            "restaurants",
            "dining",
            "menu",
            "reservations",
            "takeout",
            "delivery",
            "catering",
            "cafe",
        ),
        "home_services": (
            "hvac",
            "plumbing",
            "plumber",
            "roofing",
            "landscaping",
            "contractor",
            "remodeling",
            "pest control",
            "service call",
        ),
        "education": (
            "education",
            "school",
            "university",
            "college",
            "enrollment",
            "students",
            "tuition",
            "admissions",
        ),
        "finance": (
            "bank",
            "banking",
            "credit union",
            "loan",
            "loans",
            "insurance",
            "investment",
            "financial",
        ),
        "legal": (
            "attorney",
            "lawyer",
            "law firm",
            "legal",
            "injury",
            "consultation",
        ),
        "travel": (
            "travel",
            "hotel",
            "resort",
            "tourism",
            "bookings",
            "vacation",
            "airline",
        ),
    }
)

INDUSTRY_CONTEXTS: Mapping[str, IndustryContext] = MappingProxyType(
    {
        "automotive": IndustryContext(
            name="automotive",
            context_details=(
                "Automotive dealership marketing: long consideration cycles where "
                "digital touchpoints drive VDP views, lead forms, phone calls and "
                "showroom visits rather than immediate online purchases."
            ),
            specific_tips=(
                "Tie performance back to VDP views, lead submissions and test drive bookings.",
                "Separate new and used inventory campaigns when the data allows.",
                "Call out model-year and incentive timing when explaining swings.",
            ),
        ),
        "retail": IndustryContext(
            name="retail",
            context_details=(
                "Retail marketing: success is measured by store visits, basket size "
                "and online-to-offline conversion, with strong seasonality around "
                "promotions and holidays."
            ),
            specific_tips=(
                "Connect online engagement to in-store visits and foot traffic where possible.",
                "Highlight promotional and seasonal effects on performance.",
                "Compare weekday and weekend behaviour for shoppers.",
            ),
        ),
        "healthcare": IndustryContext(
            name="healthcare",
            context_details=(
                "Healthcare marketing: patient acquisition is trust driven and "
                "regulated, so appointment requests and calls matter more than raw "
                "traffic."
            ),
            specific_tips=(
                "Focus on appointment requests, calls and new patient volume.",
                "Keep language compliant and avoid promising outcomes.",
                "Note service-line differences (e.g. urgent care versus elective).",
            ),
        ),
        "real_estate": IndustryContext(
            name="real_estate",
            context_details=(
                "Real estate marketing: high-value, low-frequency transactions "
                "where listing engagement and qualified buyer or seller leads are "
                "the leading indicators."
            ),
            specific_tips=(
                "Emphasise lead quality and listing engagement over volume.",
                "Account for local market inventory and interest-rate conditions.",
                "Relate results to open house attendance and showing requests.",
            ),
        ),
        "restaurant": IndustryContext(
            name="restaurant",
            context_details=(
                "Restaurant marketing: short decision windows, strong local intent "
                "and conversions expressed as reservations, orders and directions "
                "requests."
            ),
            specific_tips=(
                "Highlight dayparts and days of week that drive orders or reservations.",
                "Connect menu or offer changes to performance shifts.",
                "Treat directions and call clicks as meaningful conversions.",
            ),
        ),
        "home_services": IndustryContext(
            name="home_services",
            context_details=(
                "Home services marketing: urgent, locally targeted demand where "
                "phone calls and booked service appointments are the primary "
                "outcomes."
            ),
            specific_tips=(
                "Prioritise call volume and booked jobs as the key outcomes.",
                "Discuss seasonality (e.g. HVAC in summer and winter).",
                "Review geographic targeting against the service area.",
            ),
        ),
        "education": IndustryContext(
            name="education",
            context_details=(
                "Education marketing: enrollment funnels with long lead times, "
                "where inquiries, applications and campus visits mark progress."
            ),
            specific_tips=(
                "Map results onto the inquiry, application and enrollment funnel.",
                "Account for academic calendar deadlines.",
                "Differentiate prospective students from parents where possible.",
            ),
        ),
        "finance": IndustryContext(
            name="finance",
            context_details=(
                "Financial services marketing: trust and compliance sensitive, "
                "with conversions such as applications, account openings and "
                "consultations."
            ),
            specific_tips=(
                "Focus on application starts, completions and account openings.",
                "Keep recommendations compliant and avoid guaranteeing returns.",
                "Compare cost per qualified application across channels.",
            ),
        ),
        "legal": IndustryContext(
            name="legal",
            context_details=(
                "Legal services marketing: expensive clicks and high case values, "
                "where qualified consultations and signed cases are what matter."
            ),
            specific_tips=(
                "Judge performance on qualified consultations rather than clicks.",
                "Note the high cost per click typical of legal keywords.",
                "Recommend call tracking to attribute signed cases.",
            ),
        ),
        "travel": IndustryContext(
            name="travel",
            context_details=(
                "Travel and hospitality marketing: seasonal, comparison-heavy "
                "demand where bookings and booking value are the key outcomes."
            ),
            specific_tips=(
                "Relate results to booking windows and seasonality.",
                "Highlight booking value alongside booking count.",
                "Compare direct bookings with third-party channels where visible.",
            ),
        ),
    }
)


def _compile_patterns(
    table: Mapping[str, tuple[str, ...]]
) -> Mapping[str, tuple[re.Pattern[str], ...]]:
    return MappingProxyType(
        {
            industry: tuple(
                re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)
                for keyword in keywords
            )
            for industry, keywords in table.items()
        }
    )


_KEYWORD_PATTERNS = _compile_patterns(INDUSTRY_KEYWORDS)


def score_industries(content: str, situation: str) -> dict[str, int]:
    """Count whole-word keyword hits per industry, in registration order."""
    combined = f"{content or ''} {situation or ''}"
    return {
        industry: sum(len(pattern.findall(combined)) for pattern in patterns)
        for industry, patterns in _KEYWORD_PATTERNS.items()
    }


def classify_industry(content: str, situation: str) -> Optional[IndustryContext]:
    """Return the best matching industry context, or ``None`` when nothing matches."""
    scores = score_industries(content, situation)
    best_name: Optional[str] = None
    best_score = 0
    for industry, score in scores.items():
        if score > best_score:
            best_name, best_score = industry, score

    if best_name is None:
        logger.debug("No industry keywords found; using generic context.")
        return None

    logger.info("Detected industry '%s' (score %d)", best_name, best_score)
    return INDUSTRY_CONTEXTS[best_name]


__all__ = [
    "INDUSTRY_CONTEXTS",
    "INDUSTRY_KEYWORDS",
    "IndustryContext",
    "classify_industry",
    "score_industries",
]
