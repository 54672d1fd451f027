"""CV optimizer agent: iterative rewrite loop that keeps the best score."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from cvmatch_agents.agents.base import BaseAgent
from cvmatch_agents.prompts.cv_optimizer import (
    CV_OPTIMIZER_SYSTEM,
    CV_OPTIMIZER_USER,
    sector_prompt,
)
from cvmatch_agents.scoring.sector import SectorKeywordScorer
from cvmatch_core.exceptions import CostLimitExceededError, FatalAgentError
from cvmatch_core.models.cv import CVData
from cvmatch_core.models.job import JobData
from cvmatch_core.models.scoring import OptimizationAttempt, OptimizationResult, OptimizedCV
from cvmatch_core.state import MatchingState

if TYPE_CHECKING:
    from cvmatch_agents.observability.cost_tracker import CostTracker
    from cvmatch_agents.scoring.advanced import AdvancedScorer
    from cvmatch_core.config.settings import Settings

logger = structlog.get_logger()

MAX_PROMPT_KEYWORDS = 15


class CVOptimizerAgent(BaseAgent):
    """Rewrite a CV for a job, keeping only rewrites that score strictly higher."""

    agent_name = "cv_optimizer"

    def __init__(
        self,
        settings: Settings,
        cost_tracker: CostTracker | None = None,
        scorer: AdvancedScorer | None = None,
    ) -> None:
        """Initialize with the AdvancedScorer used to rate each rewrite."""
        super().__init__(settings, cost_tracker)
        if scorer is None:
            from cvmatch_agents.scoring.factory import create_advanced_scorer

            scorer = create_advanced_scorer(settings)
        self.scorer = scorer

    async def run(self, state: MatchingState) -> MatchingState:
        """Optimize state.cv for state.job."""
        if state.cv is None or state.job is None:
            raise FatalAgentError("Optimization requires a parsed CV and job")
        self._log_start({"max_attempts": self.settings.max_optimization_attempts})
        start = time.monotonic()

        result = await self.optimize(state.cv, state.job, state=state, sector=state.config.sector)
        state.optimization = result

        self._log_end(
            time.monotonic() - start,
            {
                "original_score": round(result.original_score, 3),
                "best_score": round(result.best_score, 3),
                "attempts": len(result.attempts),
            },
        )
        return state

    async def optimize(
        self,
        cv: CVData,
        job: JobData,
        state: MatchingState | None = None,
        sector: str | None = None,
    ) -> OptimizationResult:
        """Run up to max_optimization_attempts rewrites and return the best text.

        A failed attempt is logged and the loop moves on; the loop stops
        early once the best score reaches optimization_target_score.
        """
        sector = sector or self.detect_sector(job)
        prompt = sector_prompt(sector)
        system = CV_OPTIMIZER_SYSTEM.format(
            system_prompt=prompt["system_prompt"],
            cultural_guidance=prompt["cultural_guidance"],
            terminology=", ".join(prompt["terminology"]),
        )

        if state is not None and state.scoring is not None:
            initial = state.scoring
        else:
            initial = await self.scorer.score(cv, job)

        best_text = cv.full_text()
        best_score = initial.overall
        missing = initial.missing_keywords
        original_score = best_score
        target = self.settings.optimization_target_score
        max_attempts = self.settings.max_optimization_attempts
        attempts: list[OptimizationAttempt] = []

        for attempt in range(1, max_attempts + 1):
            if best_score >= target:
                logger.info("optimization_target_reached", score=round(best_score, 3))
                break
            try:
                rewrite = await self._rewrite(
                    job, best_text, best_score, missing, attempt, max_attempts, system, state
                )
                scoring = await self.scorer.score_text(rewrite.content, job, base_cv=cv)
            except CostLimitExceededError:
                raise
            except Exception as e:
                logger.warning(
                    "optimization_attempt_failed",
                    attempt=attempt,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                attempts.append(OptimizationAttempt(attempt=attempt, error=str(e)))
                continue

            accepted = scoring.overall > best_score
            attempts.append(
                OptimizationAttempt(attempt=attempt, score=scoring.overall, accepted=accepted)
            )
            logger.info(
                "optimization_attempt",
                attempt=attempt,
                score=round(scoring.overall, 3),
                best=round(best_score, 3),
                accepted=accepted,
            )
            if accepted:
                best_text = rewrite.content
                best_score = scoring.overall
                missing = scoring.missing_keywords

        return OptimizationResult(
            original_score=original_score,
            best_score=best_score,
            best_text=best_text,
            sector=sector,
            attempts=attempts,
        )

    def detect_sector(self, job: JobData) -> str:
        """Pick the rewriting prompt: finance for finance-profile jobs, else tech."""
        profile = SectorKeywordScorer().weight_profile(job.full_text())
        return "finance" if profile == "finance" else "tech"

    async def _rewrite(
        self,
        job: JobData,
        cv_text: str,
        score: float,
        missing: list[str],
        attempt: int,
        max_attempts: int,
        system: str,
        state: MatchingState | None,
    ) -> OptimizedCV:
        user = CV_OPTIMIZER_USER.format(
            job_text=job.full_text(),
            cv_text=cv_text,
            score_percent=round(score * 100),
            missing_keywords=", ".join(missing[:MAX_PROMPT_KEYWORDS]) or "aucun",
            attempt=attempt,
            max_attempts=max_attempts,
        )
        rewrite = await self._call_llm(
            messages=[{"role": "user", "content": user}],
            model=self.settings.sonnet_model,
            response_model=OptimizedCV,
            system=system,
            state=state,
            max_retries=2,
        )
        if not rewrite.content.strip():
            raise ValueError("Empty rewrite returned")
        return rewrite
