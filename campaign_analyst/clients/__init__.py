"""Expose constructed client wrappers."""

from .gemini import GeminiClient, GeminiModelError, ModelChoice, UnknownModelError
from .google_auth import AuthenticatedUser, AuthenticationError, GoogleIdTokenVerifier
from .history_api import (
    HistoryApiClient,
    HistoryApiError,
    SessionCredentials,
    SessionExpiredError,
)
from .history_store import HistoryStore

__all__ = [
    "AuthenticatedUser",
    "AuthenticationError",
    "GeminiClient",
    "GeminiModelError",
    "GoogleIdTokenVerifier",
    "HistoryApiClient",
    "HistoryApiError",
    "HistoryStore",
    "ModelChoice",
    "SessionCredentials",
    "SessionExpiredError",
    "UnknownModelError",
]
