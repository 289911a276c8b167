"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from campaign_analyst.clients import GeminiClient, GoogleIdTokenVerifier, HistoryStore
from campaign_analyst.core.config import get_settings
from campaign_analyst.services import (
    AnalysisService,
    HelpChatService,
    HistoryService,
    PromptTemplates,
)

from .config import AppSettingsDependency


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_gemini_client() -> GeminiClient:
    """Provide Gemini client instance."""
    settings = _settings()
    return GeminiClient(settings.gemini, settings.retry)


@lru_cache()
def get_prompt_templates() -> PromptTemplates:
    """Load the prompt templates shipped with the package."""
    return PromptTemplates.load()


@lru_cache()
def get_history_store() -> HistoryStore:
    """Provide shared SQLite history store."""
    settings = _settings()
    return HistoryStore(settings.storage.history_db_path)


@lru_cache()
def get_id_token_verifier() -> GoogleIdTokenVerifier:
    """Provide the Google ID token verifier."""
    return GoogleIdTokenVerifier(_settings().google)


def get_history_service() -> HistoryService:
    """Build a history service over the shared store."""
    return HistoryService(get_history_store())


GeminiClientDependency = Annotated[GeminiClient, Depends(get_gemini_client)]
TemplatesDependency = Annotated[PromptTemplates, Depends(get_prompt_templates)]


def get_analysis_service(
    settings: AppSettingsDependency,
    gemini_client: GeminiClientDependency,
    templates: TemplatesDependency,
    history_service: Annotated[HistoryService, Depends(get_history_service)],
) -> AnalysisService:
    """Build an analysis service using configured clients."""
    return AnalysisService(
        gemini_client=gemini_client,
        templates=templates,
        history_service=history_service,
        max_upload_bytes=settings.max_upload_bytes,
    )


def get_help_chat_service(
    settings: AppSettingsDependency,
    gemini_client: GeminiClientDependency,
    templates: TemplatesDependency,
) -> HelpChatService:
    """Build the follow-up help service."""
    return HelpChatService(
        gemini_client,
        templates,
        history_limit=settings.help_history_limit,
        max_upload_bytes=settings.max_upload_bytes,
    )


__all__ = [
    "get_analysis_service",
    "get_gemini_client",
    "get_help_chat_service",
    "get_history_service",
    "get_history_store",
    "get_id_token_verifier",
    "get_prompt_templates",
]
