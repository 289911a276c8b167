"""
FastAPI dependency for the request-scoped view of application settings.
"""

from typing import Annotated

from fastapi import Depends

from campaign_analyst.core.config import AppSettings, get_settings


def get_app_settings() -> AppSettings:
    """Return the process settings; tests override this to tighten limits."""
    return get_settings()


AppSettingsDependency = Annotated[AppSettings, Depends(get_app_settings)]

__all__ = ["AppSettingsDependency", "get_app_settings"]
