"""Matching state: mutable state passed through the matching pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from cvmatch_core.models.cv import CVData
from cvmatch_core.models.extraction import FrenchExtractedData
from cvmatch_core.models.job import JobData
from cvmatch_core.models.run import AgentError, MatchConfig, MatchResult
from cvmatch_core.models.scoring import (
    AdvancedScoring,
    AuthenticityReport,
    MultiDimensionalScore,
    OptimizationResult,
)


@dataclass
class MatchingState:
    """Mutable state passed through the matching pipeline."""

    config: MatchConfig

    # Step outputs
    cv: CVData | None = None
    job: JobData | None = None
    cv_context: FrenchExtractedData | None = None
    job_context: FrenchExtractedData | None = None
    authenticity: AuthenticityReport | None = None
    scoring: AdvancedScoring | None = None
    match: MultiDimensionalScore | None = None
    optimization: OptimizationResult | None = None

    # Cross-cutting
    errors: list[AgentError] = field(default_factory=list)
    total_tokens: int = 0
    total_cost_usd: float = 0.0

    @property
    def completed_steps(self) -> list[str]:
        """Infer which steps have been completed based on state contents."""
        steps: list[str] = []
        if self.cv is not None:
            steps.append("parse_cv")
        if self.job is not None:
            steps.append("parse_job")
        if self.cv_context is not None and self.job_context is not None:
            steps.append("extract_context")
        if self.authenticity is not None:
            steps.append("check_authenticity")
        if self.scoring is not None:
            steps.append("score")
        if self.match is not None:
            steps.append("match")
        if self.optimization is not None:
            steps.append("optimize")
        return steps

    def build_result(self, status: str, duration_seconds: float) -> MatchResult:
        """Build a MatchResult from current state."""
        return MatchResult(
            run_id=self.config.run_id,
            status=status,  # type: ignore[arg-type]
            cv=self.cv,
            job=self.job,
            scoring=self.scoring,
            match=self.match,
            authenticity=self.authenticity,
            optimization=self.optimization,
            errors=self.errors,
            total_tokens_used=self.total_tokens,
            estimated_cost_usd=self.total_cost_usd,
            duration_seconds=duration_seconds,
            completed_at=datetime.now(UTC),
        )
