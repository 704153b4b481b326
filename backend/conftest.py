"""Pytest setup shared by the API and client test suites.

Environment defaults are set before any dynaform module is imported so the
settings objects pick them up.
"""
import os

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SEED_ON_STARTUP", "false")

from dynaform.core.config import settings  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def force_testing_mode():
    """Force TESTING=True early in the test session so imports can read it."""
    settings.TESTING = True


def pytest_collection_modifyitems(items):
    """Treat legacy pytest.mark.asyncio as anyio-compatible so tests run under the anyio plugin."""
    for item in items:
        if 'asyncio' in getattr(item, 'keywords', {}):
            item.add_marker(pytest.mark.anyio)


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"
