"""Pytest configuration shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from campaign_analyst.core.config import get_settings


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so environment changes in one test do not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
