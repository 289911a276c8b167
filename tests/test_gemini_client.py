try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest
from google.api_core.exceptions import NotFound

from campaign_analyst.clients.gemini import (
    GeminiClient,
    GeminiModelError,
    UnknownModelError,
)
from campaign_analyst.core.config import GeminiSettings, RetrySettings
from campaign_analyst.utils.retry import RetryExhaustedError


class ScriptedModel:
    def __init__(self, outcomes: list) -> None:
        self.outcomes = outcomes
        self.calls = 0

    def generate_content(self, prompt: str):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome

        class _Response:
            text = outcome

        return _Response()


def _client(model: ScriptedModel, attempts: int = 3) -> GeminiClient:
    return GeminiClient(
        GeminiSettings(),
        RetrySettings(max_attempts=attempts, base_delay_seconds=0, max_delay_seconds=0),
        model_factory=lambda name: model,
    )


def test_resolve_model_by_tier_name_and_default():
    client = _client(ScriptedModel([]))

    assert client.resolve_model("fast").display_name == "Gemini 2.0 Flash"
    assert client.resolve_model("gemini-2.0-flash").tier == "fast"
    assert client.resolve_model(None).model_name == "gemini-2.5-pro-preview-03-25"
    assert client.resolve_model("  ").tier == "quality"
    with pytest.raises(UnknownModelError):
        client.resolve_model("gpt-4o")


def test_model_table_is_read_only():
    client = _client(ScriptedModel([]))
    with pytest.raises(TypeError):
        client.models["turbo"] = client.models["fast"]  # type: ignore[index]


@pytest.mark.asyncio
async def test_generate_text_retries_transient_errors():
    model = ScriptedModel([RuntimeError("503 overloaded"), "<p>done</p>"])
    client = _client(model)

    result = await client.generate_text("prompt", model=client.resolve_model("fast"))

    assert result.raw_text == "<p>done</p>"
    assert result.model.tier == "fast"
    assert model.calls == 2


@pytest.mark.asyncio
async def test_generate_text_exhaustion_is_not_wrapped():
    model = ScriptedModel([RuntimeError("429 quota")] * 2)
    client = _client(model, attempts=2)

    with pytest.raises(RetryExhaustedError):
        await client.generate_text("prompt", model=client.resolve_model("quality"))


@pytest.mark.asyncio
async def test_generate_text_wraps_fatal_errors():
    model = ScriptedModel([PermissionError("403 permission denied")])
    client = _client(model)

    with pytest.raises(GeminiModelError, match="permission denied"):
        await client.generate_text("prompt", model=client.resolve_model("quality"))
    assert model.calls == 1


@pytest.mark.asyncio
async def test_generate_text_reports_missing_models():
    model = ScriptedModel([NotFound("models/gemini-2.0-flash is not found")])
    client = _client(model)

    with pytest.raises(GeminiModelError, match="'gemini-2.0-flash' is not available"):
        await client.generate_text("prompt", model=client.resolve_model("fast"))
    assert model.calls == 1
