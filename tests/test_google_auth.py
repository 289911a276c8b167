try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest
from google.auth.exceptions import GoogleAuthError

from campaign_analyst.clients.google_auth import (
    AuthenticatedUser,
    GoogleIdTokenVerifier,
    TokenExpiredError,
    TokenVerificationError,
)
from campaign_analyst.core.config import GoogleSettings

NOW = 1_700_000_000.0


def _verifier(verify) -> GoogleIdTokenVerifier:
    return GoogleIdTokenVerifier(
        GoogleSettings(client_id="client-123"), verify=verify, clock=lambda: NOW
    )


@pytest.mark.asyncio
async def test_verify_returns_user_profile():
    received = {}

    def verify(token, request, client_id):
        received.update(token=token, client_id=client_id)
        return {
            "sub": "1234",
            "email": "ana@example.com",
            "name": "Ana",
            "picture": "https://example.com/ana.png",
            "exp": NOW + 60,
        }

    user = await _verifier(verify).verify("id-token")

    assert user == AuthenticatedUser(
        sub="1234",
        email="ana@example.com",
        name="Ana",
        picture="https://example.com/ana.png",
    )
    assert received == {"token": "id-token", "client_id": "client-123"}


@pytest.mark.asyncio
async def test_expired_token_maps_to_401():
    def verify(token, request, client_id):
        raise ValueError("Token expired, 1 < 2")

    with pytest.raises(TokenExpiredError) as excinfo:
        await _verifier(verify).verify("id-token")
    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "Authentication failed: Token expired"


@pytest.mark.asyncio
async def test_stale_exp_claim_is_rejected():
    def verify(token, request, client_id):
        return {"sub": "1234", "exp": NOW - 1}

    with pytest.raises(TokenExpiredError):
        await _verifier(verify).verify("id-token")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error", [ValueError("Wrong recipient"), GoogleAuthError("Could not fetch certs")]
)
async def test_other_failures_map_to_403(error):
    def verify(token, request, client_id):
        raise error

    with pytest.raises(TokenVerificationError) as excinfo:
        await _verifier(verify).verify("id-token")
    assert excinfo.value.status_code == 403


@pytest.mark.asyncio
async def test_missing_subject_is_rejected():
    def verify(token, request, client_id):
        return {"email": "ana@example.com", "exp": NOW + 60}

    with pytest.raises(TokenVerificationError):
        await _verifier(verify).verify("id-token")


def test_session_round_trip():
    user = AuthenticatedUser(sub="1234", email="ana@example.com")
    assert AuthenticatedUser.from_session(user.to_session()) == user
    assert AuthenticatedUser.from_session({}) is None
