"""
Core pytest configuration for the entire test suite.

This module provides only what ALL tests need: logging setup, the fixed clock used
for deterministic error codes, and an in-memory async database for the commit tests.

Domain-specific fixtures live in:
- tests/test_fixtures/model_fixtures.py     (mapped entities used by the tests)
- tests/test_fixtures/snapshot_fixtures.py  (hand-built snapshots / failure records)
"""

from __future__ import annotations

# -------------------------------
# Standard library imports
# -------------------------------
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import AsyncGenerator

# -------------------------------
# Early logging tuning (IMPORTANT)
# -------------------------------
# Keep this block above the third-party / project imports so noisy loggers are
# quiet during collection.
NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
    "httpx",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

# ------------------------------------------------------------------------------------------------
# PATH PATCHING
# ------------------------------------------------------------------------------------------------

# Ensure 'src' on sys.path so `import clarifier...` works without an editable install
SRC = Path(__file__).resolve().parents[2]
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# -------------------------------
# Third-party / project imports
# -------------------------------
import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from clarifier.config.settings import Settings
from clarifier.core.logging.builder import setup_logging
from .test_fixtures.model_fixtures import Base


# -------------------------------
# Logging: install application logging once per session
# -------------------------------
@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """
    Install the application's dictConfig logging for the whole test session.

    Console-only (LOG_TO_STDOUT=True) so tests never write log files. pytest's caplog
    handler is attached per test after this runs, so caplog.records keep working.
    """
    setup_logging(Settings(ENV="testing", LOG_LEVEL="INFO", LOG_FORMAT="json", LOG_TO_STDOUT=True))
    yield


# ------------------------------------------------------------------------------------------------
# Deterministic error codes
# ------------------------------------------------------------------------------------------------

FIXED_NOW = datetime(2025, 11, 2, 22, 9, 44, 47_000)
FIXED_ERROR_CODE = "2025-11-02T22:09:44.047"


@pytest.fixture
def fixed_clock():
    """Clock returning FIXED_NOW, so messages carry the error code FIXED_ERROR_CODE."""
    return lambda: FIXED_NOW


@pytest.fixture
def error_code() -> str:
    return FIXED_ERROR_CODE


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture()
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    In-memory SQLite engine with the test tables created.

    StaticPool keeps a single connection so every session sees the same in-memory database.
    """
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture()
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    AsyncSession bound to the test engine.

    expire_on_commit=False keeps attributes loaded after commit, so tests can modify
    persisted entities without triggering a (sync) refresh.
    """
    maker = async_sessionmaker(bind=async_engine, class_=AsyncSession, expire_on_commit=False)
    async with maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


# Shared fixtures
from .test_fixtures.model_fixtures import (  # noqa: E402
    sync_session,
    persisted_shipment,
    unchanged_shipment,
)
from .test_fixtures.snapshot_fixtures import (  # noqa: E402
    make_snapshot,
    shipped_reference_group,
)
