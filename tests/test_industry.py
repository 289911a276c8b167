try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from campaign_analyst.services.industry import (
    INDUSTRY_CONTEXTS,
    INDUSTRY_KEYWORDS,
    classify_industry,
    score_industries,
)


def test_dealership_mention_selects_automotive():
    context = classify_industry("", "dealership")

    assert context is not None
    assert context.name == "automotive"


def test_no_keywords_returns_none():
    assert classify_industry('[{"Clicks": "10", "CTR": "2%"}]', "") is None


def test_keywords_match_whole_words_case_insensitively():
    scores = score_industries("CARPET sale", "Visit our STORE")

    assert scores["automotive"] == 0
    assert scores["retail"] == 1


def test_highest_score_wins():
    context = classify_industry(
        "hotel bookings and vacation packages", "near the car rental"
    )
    assert context is not None
    assert context.name == "travel"


def test_ties_resolve_to_first_registered_industry():
    scores = score_industries("car", "store")
    assert scores["automotive"] == scores["retail"] == 1

    context = classify_industry("car", "store")
    assert context is not None
    assert context.name == "automotive"


def test_tables_are_read_only_and_aligned():
    assert set(INDUSTRY_KEYWORDS) == set(INDUSTRY_CONTEXTS)
    with pytest.raises(TypeError):
        INDUSTRY_KEYWORDS["new"] = ("x",)  # type: ignore[index]
