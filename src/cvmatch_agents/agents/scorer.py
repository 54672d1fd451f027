"""Scoring agents: weighted CV/job score and multi-dimensional match."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from cvmatch_agents.agents.base import BaseAgent
from cvmatch_agents.scoring.multi_dimensional import MultiDimensionalMatcher
from cvmatch_core.exceptions import FatalAgentError
from cvmatch_core.models.extraction import FrenchExtractedData
from cvmatch_core.state import MatchingState

if TYPE_CHECKING:
    from cvmatch_agents.observability.cost_tracker import CostTracker
    from cvmatch_agents.scoring.advanced import AdvancedScorer
    from cvmatch_core.config.settings import Settings


class CVScorerAgent(BaseAgent):
    """Compute the five-factor AdvancedScoring of the CV against the job."""

    agent_name = "cv_scorer"

    def __init__(
        self,
        settings: Settings,
        cost_tracker: CostTracker | None = None,
        scorer: AdvancedScorer | None = None,
    ) -> None:
        """Initialize with the shared AdvancedScorer."""
        super().__init__(settings, cost_tracker)
        if scorer is None:
            from cvmatch_agents.scoring.factory import create_advanced_scorer

            scorer = create_advanced_scorer(settings)
        self.scorer = scorer

    async def run(self, state: MatchingState) -> MatchingState:
        """Score state.cv against state.job."""
        if state.cv is None or state.job is None:
            raise FatalAgentError("Scoring requires a parsed CV and job")
        self._log_start({"cv_id": state.cv.id, "job_id": state.job.id})
        start = time.monotonic()

        state.scoring = await self.scorer.score(state.cv, state.job)

        self._log_end(
            time.monotonic() - start,
            {
                "overall": round(state.scoring.overall, 3),
                "missing_keywords": len(state.scoring.missing_keywords),
            },
        )
        return state


class MatcherAgent(BaseAgent):
    """Run the multi-dimensional match on the extracted contexts."""

    agent_name = "matcher"

    def __init__(
        self,
        settings: Settings,
        cost_tracker: CostTracker | None = None,
        matcher: MultiDimensionalMatcher | None = None,
    ) -> None:
        """Initialize with a MultiDimensionalMatcher."""
        super().__init__(settings, cost_tracker)
        self.matcher = matcher or MultiDimensionalMatcher()

    async def run(self, state: MatchingState) -> MatchingState:
        """Match cv_context against job_context weighted by authenticity."""
        self._log_start()
        start = time.monotonic()

        authenticity = state.authenticity.global_score if state.authenticity else 0.5
        state.match = self.matcher.match(
            state.cv_context or FrenchExtractedData(),
            state.job_context or FrenchExtractedData(),
            authenticity=authenticity,
            sector=state.config.sector,
        )

        self._log_end(
            time.monotonic() - start,
            {
                "overall": round(state.match.overall, 3),
                "sector": state.match.sector,
                "recommendations": len(state.match.recommendations),
            },
        )
        return state
