"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterator
from unittest.mock import MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from cvmatch_core.models.cv import CVData
from cvmatch_core.models.job import JobData
from cvmatch_core.state import MatchingState
from cvmatch_infra.db.models import Base
from cvmatch_infra.db.session import create_session_factory
from tests.mocks.mock_factories import make_cv, make_job, make_matching_state
from tests.mocks.mock_settings import make_settings
from tests.mocks.mock_tools import FakeEmbedder


@pytest.fixture
def mock_settings() -> MagicMock:
    """Return a MagicMock Settings with sensible defaults."""
    return make_settings()


@pytest.fixture
def matching_state() -> MatchingState:
    """Return a fresh MatchingState with default MatchConfig."""
    return make_matching_state()


@pytest.fixture
def sample_cv() -> CVData:
    """Return a parsed French developer CV."""
    return make_cv()


@pytest.fixture
def sample_job() -> JobData:
    """Return a parsed French full stack job."""
    return make_job()


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    """Return a deterministic in-process embedder."""
    return FakeEmbedder()


@pytest.fixture
async def session() -> AsyncIterator[AsyncSession]:
    """Create an in-memory SQLite session with all tables."""
    engine = create_async_engine("sqlite+aiosqlite://", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = create_session_factory(engine)
    async with factory() as sess:
        yield sess
    await engine.dispose()


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Save and restore root logger handlers around each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.level = original_level
