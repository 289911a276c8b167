"""Client wrapper for interacting with Google Gemini models."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping

import google.generativeai as genai
from google.api_core.exceptions import NotFound

from campaign_analyst.core.config import GeminiSettings, RetrySettings
from campaign_analyst.utils.retry import (
    RetryConfig,
    RetryExhaustedError,
    call_with_backoff,
    is_transient_error,
)

logger = logging.getLogger(__name__)


class GeminiModelError(RuntimeError):
    """Raised when Gemini cannot fulfill a request for a non-transient reason."""


class UnknownModelError(ValueError):
    """Raised when a request names a model outside the allowed list."""


@dataclass(frozen=True, slots=True)
class ModelChoice:
    """An allowed model tier and the concrete Gemini model behind it."""

    tier: str
    model_name: str
    display_name: str


@dataclass(slots=True)
class ModelInvocationResult:
    """Unparsed text returned by a model call."""

    raw_text: str
    model: ModelChoice


def build_model_table(settings: GeminiSettings) -> Mapping[str, ModelChoice]:
    """Return the read-only table of allowed models keyed by tier."""
    return MappingProxyType(
        {
            "fast": ModelChoice(
                tier="fast",
                model_name=settings.fast_model_name,
                display_name=settings.fast_display_name,
            ),
            "quality": ModelChoice(
                tier="quality",
                model_name=settings.quality_model_name,
                display_name=settings.quality_display_name,
            ),
        }
    )


class GeminiClient:
    """Invoke Gemini text models with retry/backoff on transient failures."""

    def __init__(
        self,
        settings: GeminiSettings,
        retry_settings: RetrySettings | None = None,
        *,
        model_factory: Callable[[str], Any] | None = None,
    ) -> None:
        self._settings = settings
        retry = retry_settings or RetrySettings()
        self._retry_config = RetryConfig(
            attempts=retry.max_attempts,
            base_delay=retry.base_delay_seconds,
            max_delay=retry.max_delay_seconds,
        )
        self._models = build_model_table(settings)
        if model_factory is None:
            # Configure the global client once per process.
            genai.configure(api_key=settings.api_key)
            model_factory = genai.GenerativeModel
        self._model_factory = model_factory

    @property
    def models(self) -> Mapping[str, ModelChoice]:
        return self._models

    def resolve_model(self, model_id: str | None) -> ModelChoice:
        """Map a tier name or a concrete model name onto an allowed model."""
        requested = (model_id or "").strip() or self._settings.default_model
        choice = self._models.get(requested)
        if choice is not None:
            return choice
        for candidate in self._models.values():
            if candidate.model_name == requested:
                return candidate
        raise UnknownModelError(f"Unsupported model: {requested}")

    async def generate_text(
        self, prompt: str, *, model: ModelChoice
    ) -> ModelInvocationResult:
        """Produce a free-form text response from ``model``."""
        logger.info(
            "Invoking Gemini model %s (%d prompt characters)",
            model.model_name,
            len(prompt),
        )
        try:
            raw = await call_with_backoff(
                self._invoke,
                prompt,
                model.model_name,
                retry_config=self._retry_config,
            )
        except RetryExhaustedError:
            raise
        except NotFound as exc:
            raise GeminiModelError(
                f"Gemini model '{model.model_name}' is not available: {exc.message}"
            ) from exc
        except Exception as exc:
            raise GeminiModelError(
                f"Gemini generate_content failed: {exc}"
            ) from exc
        return ModelInvocationResult(raw_text=raw, model=model)

    async def _invoke(self, prompt: str, model_name: str) -> str:
        def _call() -> str:
            generative_model = self._model_factory(model_name)
            response = generative_model.generate_content(prompt)
            return response.text or ""

        try:
            return await asyncio.to_thread(_call)
        except Exception as exc:
            if not is_transient_error(exc):
                logger.error("Gemini model %s failed: %s", model_name, exc)
            raise


__all__ = [
    "GeminiClient",
    "GeminiModelError",
    "ModelChoice",
    "ModelInvocationResult",
    "UnknownModelError",
    "build_model_table",
]
