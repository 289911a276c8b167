"""
Async HTTP client for the history API.

Used by front-end code and scripts that talk to a running server on behalf of
a signed-in user.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Dict, List, Optional, Sequence

import httpx

from campaign_analyst.clients.google_auth import AuthenticatedUser
from campaign_analyst.core.config import AppSettings, get_settings
from campaign_analyst.schemas import (
    ChatMessage,
    HistoryEntry,
    HistoryEntryCreate,
    dump_document,
)
from campaign_analyst.utils.errors import describe_error

logger = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "Your session has expired. Please sign in again."


class SessionExpiredError(Exception):
    """Raised when the server rejects the stored credentials."""

    def __init__(self, message: str = SESSION_EXPIRED_MESSAGE) -> None:
        super().__init__(message)
        self.user_message = message


class HistoryApiError(Exception):
    """Raised for any other failed history request."""

    def __init__(self, user_message: str, status_code: int | None = None) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.status_code = status_code


@dataclass
class SessionCredentials:
    """ID token and profile held for the signed-in user."""

    token: Optional[str] = None
    user: Optional[AuthenticatedUser] = None

    @property
    def signed_in(self) -> bool:
        return bool(self.token)

    def clear(self) -> None:
        self.token = None
        self.user = None


class HistoryApiClient:
    """Wrap the ``/api/history`` endpoints with session-aware error handling."""

    def __init__(
        self,
        base_url: str,
        credentials: SessionCredentials,
        *,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._credentials = credentials
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        base_url: str,
        credentials: SessionCredentials,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "HistoryApiClient":
        """Build a client whose history fetch honours ``HISTORY_FETCH_TIMEOUT``."""
        settings = settings or get_settings()
        return cls(
            base_url,
            credentials,
            timeout=settings.history_fetch_timeout,
            transport=transport,
        )

    async def fetch_history(self) -> List[HistoryEntry]:
        payload = await self._request("GET", "/api/history", timeout=self._timeout)
        return [HistoryEntry.model_validate(item) for item in payload.get("data", [])]

    async def save_entry(self, entry: HistoryEntryCreate) -> str:
        payload = await self._request("POST", "/api/history", json=dump_document(entry))
        return str(payload["entryId"])

    async def get_entry(self, entry_id: str) -> HistoryEntry:
        payload = await self._request("GET", f"/api/history/{entry_id}")
        return HistoryEntry.model_validate(payload.get("data", payload))

    async def delete_entry(self, entry_id: str) -> None:
        await self._request("DELETE", f"/api/history/{entry_id}")

    async def clear_history(self) -> int:
        payload = await self._request("DELETE", "/api/history")
        return int(payload.get("deleted", 0))

    async def append_chat_message(
        self,
        entry_id: str,
        observed: Sequence[ChatMessage],
        message: ChatMessage,
    ) -> List[ChatMessage]:
        """Store ``observed`` plus ``message`` as the entry's conversation.

        The server replaces the whole list, so messages written by another
        session since ``observed`` was read are lost.
        """
        messages = [*observed, message]
        body = {"chatMessages": [dump_document(item) for item in messages]}
        await self._request("PUT", f"/api/history/{entry_id}/chat", json=body)
        return messages

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Dict[str, Any]:
        if not self._credentials.signed_in:
            raise SessionExpiredError("Please sign in to view your history.")

        headers = {"Authorization": f"Bearer {self._credentials.token}"}
        client_options: Dict[str, Any] = {"base_url": self._base_url}
        if timeout is not None:
            client_options["timeout"] = timeout
        if self._transport is not None:
            client_options["transport"] = self._transport
        async with httpx.AsyncClient(**client_options) as client:
            try:
                response = await client.request(method, path, json=json, headers=headers)
            except httpx.TimeoutException as exc:
                logger.warning("History request %s %s timed out", method, path)
                raise HistoryApiError(describe_error(f"Request timed out: {exc}")) from exc
            except httpx.HTTPError as exc:
                logger.warning("History request %s %s failed: %s", method, path, exc)
                raise HistoryApiError(describe_error(f"Network error: {exc}")) from exc

        if response.status_code in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
            self._credentials.clear()
            raise SessionExpiredError()
        if response.is_error:
            raise HistoryApiError(
                _error_message(response), status_code=response.status_code
            )
        if not response.content:
            return {}
        return response.json()


def _error_message(response: httpx.Response) -> str:
    detail = ""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        for key in ("details", "message", "error", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                detail = value
                break
    return describe_error(f"{response.status_code} {detail}".strip())


__all__ = [
    "HistoryApiClient",
    "HistoryApiError",
    "SessionCredentials",
    "SessionExpiredError",
]
