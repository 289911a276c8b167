"""
FastAPI application entrypoint for the campaign analyst service.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from campaign_analyst.api.auth import router as auth_router
from campaign_analyst.api.history import (
    HistoryRequestError,
    history_error_handler,
)
from campaign_analyst.api.history import router as history_router
from campaign_analyst.api.routes import router as api_router
from campaign_analyst.clients import AuthenticationError
from campaign_analyst.core.config import get_settings
from campaign_analyst.core.logging import configure_logging


async def _authentication_error_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Campaign Performance Analyst",
        version="0.1.0",
        description="Gemini-backed analysis of marketing campaign reports.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session.secret,
        max_age=settings.session.max_age_seconds,
        https_only=settings.session.https_only,
    )
    app.add_exception_handler(AuthenticationError, _authentication_error_handler)
    app.add_exception_handler(HistoryRequestError, history_error_handler)

    app.include_router(api_router)
    app.include_router(history_router, prefix="/api")
    app.include_router(auth_router, prefix="/api")
    return app


app = create_app()

__all__ = ["app", "create_app"]
