"""Tests for MatchingState."""

from __future__ import annotations

import pytest

from cvmatch_core.models.scoring import AuthenticityReport
from tests.mocks.mock_factories import (
    make_cv,
    make_cv_context,
    make_job,
    make_job_context,
    make_matching_state,
    make_scoring,
)


@pytest.mark.unit
class TestMatchingState:
    """Test completed-step inference and result building."""

    def test_fresh_state_has_no_steps(self) -> None:
        """Nothing is completed before any agent runs."""
        assert make_matching_state().completed_steps == []

    def test_context_needs_both_sides(self) -> None:
        """Context extraction counts only once both records exist."""
        state = make_matching_state(cv_context=make_cv_context())
        assert "extract_context" not in state.completed_steps

        state.job_context = make_job_context()
        assert "extract_context" in state.completed_steps

    def test_steps_in_pipeline_order(self) -> None:
        """Completed steps follow pipeline order."""
        state = make_matching_state(
            cv=make_cv(),
            job=make_job(),
            authenticity=AuthenticityReport(),
            scoring=make_scoring(),
        )
        assert state.completed_steps == ["parse_cv", "parse_job", "check_authenticity", "score"]

    def test_build_result(self) -> None:
        """The result carries outputs, status and usage."""
        state = make_matching_state(cv=make_cv(), job=make_job(), scoring=make_scoring(0.7))
        state.total_tokens = 1500
        state.total_cost_usd = 0.012

        result = state.build_result(status="partial", duration_seconds=2.5)

        assert result.run_id == "test-run-001"
        assert result.status == "partial"
        assert result.scoring is not None
        assert result.scoring.overall == 0.7
        assert result.total_tokens_used == 1500
        assert result.estimated_cost_usd == 0.012
        assert result.duration_seconds == 2.5
