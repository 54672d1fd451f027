"""Live E2E tests: real Claude calls and the local embedding model.

Requires CVM_ANTHROPIC_API_KEY in the environment or .env.
Run with: pytest -m live
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from cvmatch_agents.orchestrator.pipeline import MatchingPipeline
from cvmatch_core.config.settings import Settings
from cvmatch_core.models.run import MatchConfig
from tests.mocks.mock_factories import CV_TEXT, JOB_TEXT

pytestmark = pytest.mark.live

skip_no_api_key = pytest.mark.skipif(
    not os.environ.get("CVM_ANTHROPIC_API_KEY"),
    reason="Live tests require CVM_ANTHROPIC_API_KEY",
)


@skip_no_api_key
class TestMatchLive:
    """Full matching run against the real APIs."""

    async def test_live_match_completes(self, tmp_path: Path) -> None:
        """A match run succeeds within the cost guardrail."""
        settings = Settings()  # type: ignore[call-arg]
        settings.cache_dir = tmp_path / "cache"

        result = await MatchingPipeline(settings).run(
            MatchConfig(cv_text=CV_TEXT, cv_source="text", job_text=JOB_TEXT)
        )

        assert result.status == "success", result.errors
        assert result.scoring is not None
        assert result.scoring.overall > 0.3
        assert result.estimated_cost_usd < 0.5, (
            f"Safety guardrail: cost ${result.estimated_cost_usd:.2f} exceeds $0.50"
        )

    async def test_live_optimization_keeps_best(self, tmp_path: Path) -> None:
        """Two rewrites never lower the score."""
        settings = Settings()  # type: ignore[call-arg]
        settings.cache_dir = tmp_path / "cache"
        settings.max_optimization_attempts = 2

        result = await MatchingPipeline(settings).run(
            MatchConfig(cv_text=CV_TEXT, cv_source="text", job_text=JOB_TEXT, optimize=True)
        )

        assert result.optimization is not None
        assert result.optimization.best_score >= result.optimization.original_score
