"""Base agent with LLM calling, cost tracking, and error recording."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, TypeVar

import instructor
import structlog
from anthropic import AsyncAnthropic
from pydantic import BaseModel
from tenacity import retry, stop_after_attempt, wait_exponential

from cvmatch_agents.observability.cost_tracker import (
    CostTracker,
    LLMCallMetrics,
    extract_token_usage,
)
from cvmatch_core.models.run import AgentError
from cvmatch_core.state import MatchingState

if TYPE_CHECKING:
    from cvmatch_core.config.settings import Settings

T = TypeVar("T", bound=BaseModel)

logger = structlog.get_logger()


class BaseAgent(ABC):
    """Abstract base class for all matching agents."""

    agent_name: str = "base"

    def __init__(self, settings: Settings, cost_tracker: CostTracker | None = None) -> None:
        """Initialize with settings and an optional shared cost tracker."""
        self.settings = settings
        self.cost_tracker = cost_tracker or CostTracker(
            max_cost=settings.max_cost_per_run_usd,
            warn_threshold=settings.warn_cost_threshold_usd,
        )
        self._client = AsyncAnthropic(api_key=settings.anthropic_api_key.get_secret_value())
        self._instructor = instructor.from_anthropic(self._client)

    @abstractmethod
    async def run(self, state: MatchingState) -> MatchingState:
        """Execute the agent's task. Must be implemented by subclasses."""
        ...

    def _log_start(self, context: dict[str, object] | None = None) -> None:
        """Log agent execution start."""
        logger.info("agent_start", agent=self.agent_name, **(context or {}))

    def _log_end(self, duration: float, context: dict[str, object] | None = None) -> None:
        """Log agent execution end with duration."""
        logger.info(
            "agent_end",
            agent=self.agent_name,
            duration_seconds=round(duration, 2),
            **(context or {}),
        )

    async def _call_llm(
        self,
        messages: list[dict[str, str]],
        model: str,
        response_model: type[T],
        max_retries: int = 3,
        state: MatchingState | None = None,
        system: str | None = None,
        max_tokens: int = 4096,
    ) -> T:
        """Call LLM with structured output via instructor.

        Tracks token usage and cost if state is provided.
        """
        extra: dict[str, object] = {"system": system} if system else {}

        @retry(
            stop=stop_after_attempt(max_retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        )
        async def _do_call() -> T:
            response: T = await self._instructor.messages.create(
                model=model,
                max_tokens=max_tokens,
                messages=messages,
                response_model=response_model,
                **extra,
            )
            return response

        start = time.monotonic()
        result = await _do_call()
        elapsed = time.monotonic() - start

        input_tokens, output_tokens = extract_token_usage(result)
        if state is not None:
            self.cost_tracker.record_call(
                LLMCallMetrics(
                    model=model,
                    input_tokens=input_tokens,
                    output_tokens=output_tokens,
                    duration_seconds=elapsed,
                    agent_name=self.agent_name,
                ),
                state,
            )

        logger.debug(
            "llm_call_complete",
            agent=self.agent_name,
            model=model,
            duration=round(elapsed, 2),
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
        return result

    def _record_error(
        self,
        state: MatchingState,
        error: Exception,
        is_fatal: bool = False,
    ) -> None:
        """Record an error in the matching state."""
        state.errors.append(
            AgentError(
                agent_name=self.agent_name,
                error_type=type(error).__name__,
                error_message=str(error),
                is_fatal=is_fatal,
            )
        )
        logger.error(
            "agent_error",
            agent=self.agent_name,
            error_type=type(error).__name__,
            error=str(error),
            is_fatal=is_fatal,
        )
