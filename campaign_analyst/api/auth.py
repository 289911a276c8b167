"""
Session sign-in routes backed by Google ID tokens.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from campaign_analyst.clients import AuthenticationError, GoogleIdTokenVerifier
from campaign_analyst.dependencies import CurrentUser, get_id_token_verifier
from campaign_analyst.dependencies.auth import (
    NO_TOKEN_MESSAGE,
    SESSION_USER_KEY,
    bearer_token,
    sign_in,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/session", status_code=HTTPStatus.OK)
async def create_session(
    request: Request,
    verifier: Annotated[GoogleIdTokenVerifier, Depends(get_id_token_verifier)],
) -> dict:
    """Exchange a bearer ID token for a signed session cookie."""
    token = bearer_token(request)
    if token is None:
        raise AuthenticationError(NO_TOKEN_MESSAGE, HTTPStatus.UNAUTHORIZED)
    user = await sign_in(request, token, verifier)
    return {"message": "Signed in.", "user": user.to_session()}


@router.get("/session", status_code=HTTPStatus.OK)
async def read_session(user: CurrentUser) -> dict:
    return {"message": "Authenticated.", "user": user.to_session()}


@router.delete("/session", status_code=HTTPStatus.OK)
async def end_session(request: Request) -> dict:
    request.session.pop(SESSION_USER_KEY, None)
    return {"message": "Signed out."}


__all__ = ["router"]
