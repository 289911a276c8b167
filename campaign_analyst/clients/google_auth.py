"""
Google Sign-In utilities.

Verifies Google-issued ID tokens presented as bearer credentials.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import asdict, dataclass
from http import HTTPStatus
from typing import Any, Callable, Dict, Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from campaign_analyst.core.config import GoogleSettings

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when a request cannot be authenticated."""

    def __init__(self, message: str, status_code: int = HTTPStatus.UNAUTHORIZED) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)


class TokenExpiredError(AuthenticationError):
    """Raised when a presented ID token has expired."""

    def __init__(self) -> None:
        super().__init__("Authentication failed: Token expired", HTTPStatus.UNAUTHORIZED)


class TokenVerificationError(AuthenticationError):
    """Raised when a presented ID token fails verification."""

    def __init__(self, message: str = "Authentication failed: Token verification error") -> None:
        super().__init__(message, HTTPStatus.FORBIDDEN)


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    """Identity extracted from a verified Google ID token."""

    sub: str
    email: str = ""
    name: Optional[str] = None
    picture: Optional[str] = None

    def to_session(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_session(cls, payload: Dict[str, Any]) -> Optional["AuthenticatedUser"]:
        sub = payload.get("sub") if isinstance(payload, dict) else None
        if not sub:
            return None
        return cls(
            sub=sub,
            email=payload.get("email") or "",
            name=payload.get("name"),
            picture=payload.get("picture"),
        )


class GoogleIdTokenVerifier:
    """Verify Google ID tokens against the configured OAuth client id."""

    def __init__(
        self,
        google_settings: GoogleSettings,
        *,
        verify: Callable[..., Dict[str, Any]] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._google = google_settings
        self._verify = verify or id_token.verify_oauth2_token
        self._clock = clock
        self._request = google_requests.Request()

    async def verify(self, token: str) -> AuthenticatedUser:
        """Return the user behind ``token`` or raise :class:`AuthenticationError`."""
        try:
            payload = await asyncio.to_thread(
                self._verify, token, self._request, self._google.client_id
            )
        except (ValueError, GoogleAuthError) as exc:
            if "expired" in str(exc).lower():
                logger.info("Rejected expired ID token")
                raise TokenExpiredError() from exc
            logger.warning("ID token verification failed: %s", exc)
            raise TokenVerificationError() from exc

        if not payload:
            raise TokenVerificationError("Authentication failed: Invalid token")

        expires_at = payload.get("exp")
        if expires_at and float(expires_at) < self._clock():
            raise TokenExpiredError()

        subject = payload.get("sub")
        if not subject:
            raise TokenVerificationError("Authentication failed: Invalid token")

        logger.info("Token verified for user %s", payload.get("email"))
        return AuthenticatedUser(
            sub=subject,
            email=payload.get("email") or "",
            name=payload.get("name"),
            picture=payload.get("picture"),
        )


__all__ = [
    "AuthenticatedUser",
    "AuthenticationError",
    "GoogleIdTokenVerifier",
    "TokenExpiredError",
    "TokenVerificationError",
]
