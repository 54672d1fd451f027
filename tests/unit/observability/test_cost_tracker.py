"""Tests for LLM cost tracking."""

from __future__ import annotations

import types

import pytest

from cvmatch_agents.observability.cost_tracker import (
    CostTracker,
    LLMCallMetrics,
    estimate_cost,
    extract_token_usage,
)
from cvmatch_core.exceptions import CostLimitExceededError
from tests.mocks.mock_factories import make_matching_state

HAIKU = "claude-haiku-4-5-20251001"
SONNET = "claude-sonnet-4-5-20250514"


def _metrics(
    model: str = HAIKU,
    input_tokens: int = 1000,
    output_tokens: int = 500,
    agent_name: str = "resume_parser",
) -> LLMCallMetrics:
    return LLMCallMetrics(
        model=model,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        duration_seconds=0.4,
        agent_name=agent_name,
    )


@pytest.mark.unit
class TestEstimateCost:
    """Tests for estimate_cost."""

    def test_known_models(self) -> None:
        """Prices are per million tokens."""
        assert estimate_cost(HAIKU, 1_000_000, 1_000_000) == pytest.approx(4.80)
        assert estimate_cost(SONNET, 1_000_000, 0) == pytest.approx(3.00)

    def test_unknown_model_is_free(self) -> None:
        """Models without a price entry cost nothing."""
        assert estimate_cost("modele-inconnu", 5000, 5000) == 0.0


@pytest.mark.unit
class TestCostTracker:
    """Tests for CostTracker."""

    def test_record_updates_state(self) -> None:
        """Tokens and cost accumulate on the state."""
        tracker = CostTracker(max_cost=2.0, warn_threshold=1.0)
        state = make_matching_state()

        tracker.record_call(_metrics(), state)
        tracker.record_call(_metrics(), state)

        assert state.total_tokens == 3000
        assert state.total_cost_usd == pytest.approx(0.0056)
        assert len(tracker.calls) == 2

    def test_limit_exceeded_raises(self) -> None:
        """Going past max_cost raises CostLimitExceededError."""
        tracker = CostTracker(max_cost=0.01, warn_threshold=0.005)
        state = make_matching_state()

        with pytest.raises(CostLimitExceededError, match="exceeds limit"):
            tracker.record_call(_metrics(model=SONNET, input_tokens=10_000), state)

        assert len(tracker.calls) == 1

    def test_warning_threshold_does_not_raise(self) -> None:
        """Crossing the warning threshold only logs."""
        tracker = CostTracker(max_cost=1.0, warn_threshold=0.001)
        state = make_matching_state()
        tracker.record_call(_metrics(), state)
        assert state.total_cost_usd > 0.001

    def test_summary(self) -> None:
        """Summary aggregates per agent and per model."""
        tracker = CostTracker(max_cost=10.0, warn_threshold=5.0)
        state = make_matching_state()
        tracker.record_call(_metrics(agent_name="resume_parser"), state)
        tracker.record_call(_metrics(agent_name="job_parser"), state)
        tracker.record_call(
            _metrics(model=SONNET, input_tokens=0, output_tokens=1000, agent_name="cv_optimizer"),
            state,
        )

        summary = tracker.summary()

        assert summary["total_calls"] == 3
        assert summary["total_tokens"] == 4000
        assert summary["calls_by_agent"] == {
            "resume_parser": 1,
            "job_parser": 1,
            "cv_optimizer": 1,
        }
        assert summary["total_cost_usd"] == pytest.approx(0.0206)


@pytest.mark.unit
class TestExtractTokenUsage:
    """Tests for extract_token_usage."""

    def test_reads_raw_response(self) -> None:
        """Usage is read from _raw_response.usage."""
        usage = types.SimpleNamespace(input_tokens=120, output_tokens=80)
        response = types.SimpleNamespace(_raw_response=types.SimpleNamespace(usage=usage))
        assert extract_token_usage(response) == (120, 80)

    def test_missing_usage(self) -> None:
        """Responses without usage count as zero."""
        assert extract_token_usage(object()) == (0, 0)
