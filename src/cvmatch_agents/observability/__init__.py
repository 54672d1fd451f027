"""Observability: structured logging and cost tracking."""

from cvmatch_agents.observability.cost_tracker import (
    CostTracker,
    LLMCallMetrics,
    extract_token_usage,
)
from cvmatch_agents.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
)

__all__ = [
    "CostTracker",
    "LLMCallMetrics",
    "bind_run_context",
    "clear_run_context",
    "configure_logging",
    "extract_token_usage",
]
