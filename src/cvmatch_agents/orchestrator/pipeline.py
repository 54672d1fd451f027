"""Sequential async matching pipeline."""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

import structlog

from cvmatch_agents.agents.authenticity import AuthenticityAgent
from cvmatch_agents.agents.context_extractor import ContextExtractorAgent
from cvmatch_agents.agents.cv_optimizer import CVOptimizerAgent
from cvmatch_agents.agents.job_parser import JobParserAgent
from cvmatch_agents.agents.resume_parser import ResumeParserAgent
from cvmatch_agents.agents.scorer import CVScorerAgent, MatcherAgent
from cvmatch_agents.observability import CostTracker, bind_run_context, clear_run_context
from cvmatch_core.exceptions import CostLimitExceededError, FatalAgentError
from cvmatch_core.models.run import MatchConfig, MatchResult
from cvmatch_core.state import MatchingState

if TYPE_CHECKING:
    from cvmatch_agents.agents.base import BaseAgent
    from cvmatch_agents.scoring.advanced import AdvancedScorer
    from cvmatch_core.config.settings import Settings

logger = structlog.get_logger()

PIPELINE_STEPS: list[tuple[str, type[BaseAgent]]] = [
    ("parse_cv", ResumeParserAgent),
    ("parse_job", JobParserAgent),
    ("extract_context", ContextExtractorAgent),
    ("check_authenticity", AuthenticityAgent),
    ("score", CVScorerAgent),
    ("match", MatcherAgent),
    ("optimize", CVOptimizerAgent),
]

_SCORER_AGENTS: tuple[type[BaseAgent], ...] = (CVScorerAgent, CVOptimizerAgent)


class MatchingPipeline:
    """Run the matching agents in order and collect a MatchResult."""

    def __init__(self, settings: Settings, scorer: AdvancedScorer | None = None) -> None:
        """Initialize with application settings and an optional shared scorer."""
        self.settings = settings
        self._scorer = scorer

    @property
    def scorer(self) -> AdvancedScorer:
        """Shared AdvancedScorer, built from settings on first use."""
        if self._scorer is None:
            from cvmatch_agents.scoring.factory import create_advanced_scorer

            self._scorer = create_advanced_scorer(self.settings)
        return self._scorer

    def steps_for(self, config: MatchConfig) -> list[tuple[str, type[BaseAgent]]]:
        """Steps to run for a config; optimize only when requested."""
        return [
            (name, agent_cls)
            for name, agent_cls in PIPELINE_STEPS
            if name != "optimize" or config.optimize
        ]

    async def run(self, config: MatchConfig) -> MatchResult:
        """Execute every step and return the result."""
        start = time.monotonic()
        state = MatchingState(config=config)
        tracker = CostTracker(
            max_cost=self.settings.max_cost_per_run_usd,
            warn_threshold=self.settings.warn_cost_threshold_usd,
        )
        bind_run_context(config.run_id)

        try:
            logger.info("pipeline_start", run_id=config.run_id, optimize=config.optimize)
            for step_name, agent_cls in self.steps_for(config):
                result = await self._run_agent_step(step_name, agent_cls, state, tracker, start)
                if isinstance(result, MatchResult):
                    return result
                state = result

            duration = time.monotonic() - start
            self._log_cost_summary(state, tracker, duration)
            return state.build_result(status="success", duration_seconds=duration)
        finally:
            clear_run_context()

    def _make_agent(self, agent_cls: type[BaseAgent], tracker: CostTracker) -> BaseAgent:
        """Instantiate an agent, handing the shared scorer to those that need it."""
        if agent_cls in _SCORER_AGENTS:
            return agent_cls(self.settings, tracker, scorer=self.scorer)  # type: ignore[call-arg]
        return agent_cls(self.settings, tracker)

    async def _run_agent_step(
        self,
        step_name: str,
        agent_cls: type[BaseAgent],
        state: MatchingState,
        tracker: CostTracker,
        pipeline_start: float,
    ) -> MatchingState | MatchResult:
        """Execute a single agent step under the configured timeout."""
        try:
            agent = self._make_agent(agent_cls, tracker)
            return await asyncio.wait_for(
                agent.run(state),
                timeout=self.settings.agent_timeout_seconds,
            )

        except CostLimitExceededError as e:
            logger.error("cost_limit_exceeded", step=step_name, error=str(e))
            duration = time.monotonic() - pipeline_start
            self._log_cost_summary(state, tracker, duration)
            return state.build_result(status="partial", duration_seconds=duration)

        except FatalAgentError as e:
            logger.error("fatal_agent_error", step=step_name, error=str(e))
            duration = time.monotonic() - pipeline_start
            self._log_cost_summary(state, tracker, duration)
            return state.build_result(status="failed", duration_seconds=duration)

        except TimeoutError:
            logger.error(
                "agent_timeout",
                step=step_name,
                timeout=self.settings.agent_timeout_seconds,
            )
            duration = time.monotonic() - pipeline_start
            self._log_cost_summary(state, tracker, duration)
            return state.build_result(status="failed", duration_seconds=duration)

    @staticmethod
    def _log_cost_summary(state: MatchingState, tracker: CostTracker, duration: float) -> None:
        """Log a structured cost and performance summary."""
        logger.info(
            "pipeline_summary",
            completed_steps=state.completed_steps,
            total_tokens=state.total_tokens,
            total_cost_usd=round(state.total_cost_usd, 4),
            duration_seconds=round(duration, 2),
            overall_score=round(state.scoring.overall, 3) if state.scoring else None,
            errors=len(state.errors),
            llm_calls=tracker.summary()["total_calls"],
        )
