"""Tests for context extractor agent."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from cvmatch_agents.agents.context_extractor import ContextExtractorAgent
from cvmatch_core.exceptions import CostLimitExceededError
from cvmatch_core.models.extraction import FrenchExtractedData
from tests.mocks.mock_factories import (
    make_cv,
    make_cv_context,
    make_job,
    make_job_context,
    make_matching_state,
)
from tests.mocks.mock_settings import make_settings


def _make_agent() -> ContextExtractorAgent:
    with (
        patch("cvmatch_agents.agents.base.AsyncAnthropic"),
        patch("cvmatch_agents.agents.base.instructor"),
    ):
        return ContextExtractorAgent(make_settings())


@pytest.mark.unit
class TestContextExtractorAgent:
    """Test ContextExtractorAgent."""

    @pytest.mark.asyncio
    async def test_run_extracts_both_sides(self) -> None:
        """CV and job contexts are extracted in order."""
        agent = _make_agent()
        state = make_matching_state(cv=make_cv(), job=make_job())

        with patch.object(
            ContextExtractorAgent,
            "_call_llm",
            new_callable=AsyncMock,
            side_effect=[make_cv_context(), make_job_context()],
        ) as mock_llm:
            result = await agent.run(state)

        assert result.cv_context is not None
        assert result.cv_context.hard_skills[0].name == "Python"
        assert result.job_context is not None
        assert result.job_context.soft_skills[1].name == "Autonomie"
        assert "extract_context" in result.completed_steps

        cv_call, job_call = mock_llm.call_args_list
        assert "de CV" in cv_call.kwargs["system"]
        assert "d'offres d'emploi" in job_call.kwargs["system"]
        assert "cette offre d'emploi" in job_call.kwargs["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_short_text_skips_llm(self) -> None:
        """Texts too short to analyze return an empty record."""
        agent = _make_agent()
        with patch.object(ContextExtractorAgent, "_call_llm", new_callable=AsyncMock) as mock_llm:
            result = await agent.extract("Python", "cv")
        assert result == FrenchExtractedData()
        mock_llm.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_returns_empty(self) -> None:
        """LLM errors degrade to an empty record."""
        agent = _make_agent()
        with patch.object(
            ContextExtractorAgent,
            "_call_llm",
            new_callable=AsyncMock,
            side_effect=RuntimeError("invalid json"),
        ):
            result = await agent.extract("Développeur Python avec cinq ans d'expérience", "job")
        assert result.hard_skills == []

    @pytest.mark.asyncio
    async def test_cost_limit_propagates(self) -> None:
        """Cost overruns are not swallowed."""
        agent = _make_agent()
        with (
            patch.object(
                ContextExtractorAgent,
                "_call_llm",
                new_callable=AsyncMock,
                side_effect=CostLimitExceededError("over budget"),
            ),
            pytest.raises(CostLimitExceededError),
        ):
            await agent.extract("Développeur Python avec cinq ans d'expérience", "cv")

    @pytest.mark.asyncio
    async def test_run_without_cv_uses_job_text(self) -> None:
        """Missing parsed inputs fall back to the raw job text."""
        agent = _make_agent()
        state = make_matching_state()

        with patch.object(
            ContextExtractorAgent,
            "_call_llm",
            new_callable=AsyncMock,
            return_value=make_job_context(),
        ) as mock_llm:
            result = await agent.run(state)

        assert result.cv_context == FrenchExtractedData()
        mock_llm.assert_called_once()
        assert "Fintech parisienne" in mock_llm.call_args.kwargs["messages"][0]["content"]
