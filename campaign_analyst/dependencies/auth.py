"""
Request authentication dependencies.

A user signed in through ``POST /api/auth/session`` is read from the signed
session cookie. Otherwise the request must carry ``Authorization: Bearer
<Google ID token>``; a verified token is cached in the session so later
requests skip verification.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Optional

from fastapi import Depends, Request

from campaign_analyst.clients import (
    AuthenticatedUser,
    AuthenticationError,
    GoogleIdTokenVerifier,
)
from campaign_analyst.dependencies.clients import get_id_token_verifier

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user"
NO_TOKEN_MESSAGE = "Authentication required: No token provided"


def bearer_token(request: Request) -> Optional[str]:
    """Return the bearer token from the Authorization header, if any."""
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def session_user(request: Request) -> Optional[AuthenticatedUser]:
    payload = request.session.get(SESSION_USER_KEY)
    if not payload:
        return None
    return AuthenticatedUser.from_session(payload)


async def sign_in(
    request: Request, token: str, verifier: GoogleIdTokenVerifier
) -> AuthenticatedUser:
    """Verify ``token`` and remember the user in the session."""
    user = await verifier.verify(token)
    request.session[SESSION_USER_KEY] = user.to_session()
    return user


async def authenticate_user(
    request: Request,
    verifier: Annotated[GoogleIdTokenVerifier, Depends(get_id_token_verifier)],
) -> AuthenticatedUser:
    """Require an authenticated user, raising :class:`AuthenticationError`."""
    user = session_user(request)
    if user is not None:
        return user
    token = bearer_token(request)
    if token is None:
        raise AuthenticationError(NO_TOKEN_MESSAGE, HTTPStatus.UNAUTHORIZED)
    return await sign_in(request, token, verifier)


async def optional_user(
    request: Request,
    verifier: Annotated[GoogleIdTokenVerifier, Depends(get_id_token_verifier)],
) -> Optional[AuthenticatedUser]:
    """Resolve the user when credentials are present, otherwise ``None``.

    Invalid credentials are logged and treated as anonymous.
    """
    user = session_user(request)
    if user is not None:
        return user
    token = bearer_token(request)
    if token is None:
        return None
    try:
        return await sign_in(request, token, verifier)
    except AuthenticationError as exc:
        logger.info("Continuing without a user: %s", exc.message)
        return None


CurrentUser = Annotated[AuthenticatedUser, Depends(authenticate_user)]
OptionalUser = Annotated[Optional[AuthenticatedUser], Depends(optional_user)]

__all__ = [
    "CurrentUser",
    "OptionalUser",
    "SESSION_USER_KEY",
    "authenticate_user",
    "bearer_token",
    "optional_user",
    "session_user",
    "sign_in",
]
