"""Expose dependency helpers for FastAPI routers."""

from .auth import CurrentUser, OptionalUser, authenticate_user, optional_user
from .clients import (
    get_analysis_service,
    get_gemini_client,
    get_help_chat_service,
    get_history_service,
    get_history_store,
    get_id_token_verifier,
    get_prompt_templates,
)
from .config import AppSettingsDependency, get_app_settings

__all__ = [
    "AppSettingsDependency",
    "CurrentUser",
    "OptionalUser",
    "authenticate_user",
    "get_analysis_service",
    "get_app_settings",
    "get_gemini_client",
    "get_help_chat_service",
    "get_history_service",
    "get_history_store",
    "get_id_token_verifier",
    "get_prompt_templates",
    "optional_user",
]
