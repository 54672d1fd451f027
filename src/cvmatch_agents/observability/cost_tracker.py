"""LLM cost tracking and token usage extraction."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from cvmatch_core.constants import TOKEN_PRICES
from cvmatch_core.exceptions import CostLimitExceededError
from cvmatch_core.state import MatchingState

logger = structlog.get_logger()


def estimate_cost(model: str, input_tokens: int, output_tokens: int) -> float:
    """Estimate USD cost of one call; unknown models cost 0."""
    prices = TOKEN_PRICES.get(model)
    if not prices:
        return 0.0
    return (
        input_tokens * prices["input"] / 1_000_000
        + output_tokens * prices["output"] / 1_000_000
    )


@dataclass
class LLMCallMetrics:
    """Metrics for a single LLM call."""

    model: str
    input_tokens: int
    output_tokens: int
    duration_seconds: float
    agent_name: str

    @property
    def cost_usd(self) -> float:
        """Estimated cost of this call."""
        return estimate_cost(self.model, self.input_tokens, self.output_tokens)


@dataclass
class CostTracker:
    """Accumulates LLM call metrics and enforces cost guardrails."""

    max_cost: float
    warn_threshold: float
    calls: list[LLMCallMetrics] = field(default_factory=list)

    def record_call(self, metrics: LLMCallMetrics, state: MatchingState) -> None:
        """Record a call, update state totals and enforce the cost limit.

        Raises CostLimitExceededError once accumulated cost exceeds max_cost.
        """
        self.calls.append(metrics)
        state.total_tokens += metrics.input_tokens + metrics.output_tokens
        state.total_cost_usd += metrics.cost_usd

        if state.total_cost_usd > self.max_cost:
            raise CostLimitExceededError(
                f"Run cost ${state.total_cost_usd:.4f} exceeds limit ${self.max_cost:.2f}"
            )

        if state.total_cost_usd > self.warn_threshold:
            logger.warning(
                "cost_warning",
                current_cost=round(state.total_cost_usd, 4),
                threshold=self.warn_threshold,
                limit=self.max_cost,
            )

    def summary(self) -> dict[str, object]:
        """Return aggregated cost per agent and model for structured logging."""
        cost_by_model: dict[str, float] = {}
        calls_by_agent: dict[str, int] = {}
        total_tokens = 0
        for call in self.calls:
            total_tokens += call.input_tokens + call.output_tokens
            cost_by_model[call.model] = cost_by_model.get(call.model, 0.0) + call.cost_usd
            calls_by_agent[call.agent_name] = calls_by_agent.get(call.agent_name, 0) + 1

        return {
            "total_calls": len(self.calls),
            "total_tokens": total_tokens,
            "calls_by_agent": calls_by_agent,
            "cost_by_model": cost_by_model,
            "total_cost_usd": round(sum(cost_by_model.values()), 6),
        }


def extract_token_usage(response: object) -> tuple[int, int]:
    """Extract input/output token counts from an instructor response.

    Instructor keeps the raw Anthropic response in ``_raw_response``;
    returns (0, 0) if the attribute chain is missing.
    """
    raw = getattr(response, "_raw_response", None)
    usage = getattr(raw, "usage", None)
    if usage is None:
        return (0, 0)
    return (
        int(getattr(usage, "input_tokens", 0) or 0),
        int(getattr(usage, "output_tokens", 0) or 0),
    )
