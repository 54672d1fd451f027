"""Integration test fixtures: file-backed SQLite, real settings, mocked LLM."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from cvmatch_core.config.settings import Settings
from cvmatch_infra.db.engine import create_engine
from cvmatch_infra.db.session import create_session_factory, init_db
from tests.mocks.mock_settings import make_real_settings


@pytest.fixture
def real_settings(tmp_path: Path) -> Settings:
    """Real Settings with the database and cache under tmp_path."""
    return make_real_settings(tmp_path)


@pytest_asyncio.fixture
async def db_engine(real_settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite engine with all tables created."""
    engine = create_engine(real_settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return create_session_factory(db_engine)


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Save and restore root logger handlers around each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.level = original_level
