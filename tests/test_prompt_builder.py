try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from campaign_analyst.services.industry import INDUSTRY_CONTEXTS
from campaign_analyst.services.prompt_builder import (
    GENERIC_CONTEXT,
    GENERIC_TIPS,
    PromptTemplates,
    build_analysis_prompt,
    build_help_prompt,
    fill_template,
    select_template,
)
from campaign_analyst.services.response_parser import END_MARKER, START_MARKER


def _analysis_prompt(**overrides) -> str:
    fields = {
        "template": PromptTemplates.load().detailed,
        "file_name": "report.csv",
        "tactic": "SEM",
        "kpi": "CTR",
        "current_situation": "Spring promotion",
        "data_string": '[{"Clicks": "10"}]',
        "industry": None,
    }
    fields.update(overrides)
    return build_analysis_prompt(**fields)


def test_fill_template_replaces_known_placeholders():
    rendered = fill_template(
        "File {{fileName}} for {{tacticsString}}", {"fileName": "a.csv", "tacticsString": "SEM"}
    )
    assert rendered == "File a.csv for SEM"


def test_fill_template_renders_missing_values_as_not_available():
    rendered = fill_template(
        "Outcome: {{desiredOutcome}} / Client: {{clientName}}",
        {"desiredOutcome": None, "clientName": "   "},
    )
    assert rendered == "Outcome: N/A / Client: N/A"


def test_fill_template_leaves_unknown_and_repeated_placeholders():
    rendered = fill_template(
        "{{kpisString}} {{kpisString}} {{unknown}}", {"kpisString": "CTR"}
    )
    assert rendered == "CTR {{kpisString}} {{unknown}}"


def test_fill_template_does_not_expand_placeholders_inside_values():
    rendered = fill_template(
        "{{currentSituation}} | {{dataString}}",
        {"currentSituation": "{{dataString}}", "dataString": "rows"},
    )
    assert rendered == "{{dataString}} | rows"


def test_build_analysis_prompt_is_deterministic():
    assert _analysis_prompt() == _analysis_prompt()


def test_build_analysis_prompt_includes_inputs_and_markers():
    prompt = _analysis_prompt(target_cpa=25.0, target_roas=3.5, client_name="Acme")

    assert "report.csv" in prompt
    assert "**Tactic:** SEM" in prompt
    assert "**KPI:** CTR" in prompt
    assert "**Target CPA:** 25" in prompt
    assert "**Target ROAS:** 3.5" in prompt
    assert "**Client:** Acme" in prompt
    assert '```json\n[{"Clicks": "10"}]\n```' in prompt
    assert START_MARKER in prompt
    assert END_MARKER in prompt
    assert "{{" not in prompt


def test_build_analysis_prompt_uses_generic_context_without_industry():
    prompt = _analysis_prompt()
    assert GENERIC_CONTEXT in prompt
    assert GENERIC_TIPS in prompt


def test_build_analysis_prompt_injects_industry_context_and_tips():
    retail = INDUSTRY_CONTEXTS["retail"]
    prompt = _analysis_prompt(industry=retail)

    assert retail.context_details in prompt
    for tip in retail.specific_tips:
        assert f"- {tip}" in prompt


def test_select_template_picks_brief_or_detailed():
    templates = PromptTemplates(brief="short", detailed="long", help_chat="chat")
    assert select_template(templates, "brief") == "short"
    assert select_template(templates, "detailed") == "long"


def test_build_help_prompt_includes_history_and_question():
    prompt = build_help_prompt(
        template=PromptTemplates.load().help_chat,
        question="Why did CTR drop?",
        conversation_history="User: hi\nAssistant: hello",
        tactic="SEM",
        original_analysis="<p>CTR fell 10%</p>",
    )

    assert "Why did CTR drop?" in prompt
    assert "User: hi\nAssistant: hello" in prompt
    assert "<p>CTR fell 10%</p>" in prompt
    assert "**KPI:** N/A" in prompt
