"""Matching run configuration and result models."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from cvmatch_core.models.cv import CVData
from cvmatch_core.models.job import JobData
from cvmatch_core.models.scoring import (
    AdvancedScoring,
    AuthenticityReport,
    MultiDimensionalScore,
    OptimizationResult,
)


class MatchConfig(BaseModel):
    """Inputs of a single matching run."""

    run_id: str = Field(
        default_factory=lambda: f"match_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S')}",
        description="Unique run identifier",
    )
    cv_path: Path | None = Field(default=None, description="CV file (.pdf or text)")
    cv_text: str | None = Field(default=None, description="CV raw text")
    cv_source: Literal["upload", "linkedin", "text"] = Field(
        default="upload", description="How the CV text should be interpreted"
    )
    job_text: str = Field(description="Job posting text")
    optimize: bool = Field(default=False, description="Run the iterative CV rewrite")
    sector: str | None = Field(
        default=None, description="Sector prompt for rewriting (tech, finance); auto if None"
    )

    @model_validator(mode="after")
    def validate_cv_input(self) -> MatchConfig:
        """Exactly one of cv_path / cv_text must be provided."""
        if (self.cv_path is None) == (self.cv_text is None):
            msg = "provide exactly one of cv_path or cv_text"
            raise ValueError(msg)
        if not self.job_text.strip():
            msg = "job_text cannot be empty"
            raise ValueError(msg)
        return self


class AgentError(BaseModel):
    """Record of an error that occurred during agent execution."""

    agent_name: str = Field(description="Name of the agent that errored")
    error_type: str = Field(description="Exception class name")
    error_message: str = Field(description="Error description")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="When the error occurred"
    )
    is_fatal: bool = Field(default=False, description="Whether this error stopped the run")


class MatchResult(BaseModel):
    """Summary of a completed matching run."""

    run_id: str
    status: Literal["success", "partial", "failed"]
    cv: CVData | None = None
    job: JobData | None = None
    scoring: AdvancedScoring | None = None
    match: MultiDimensionalScore | None = None
    authenticity: AuthenticityReport | None = None
    optimization: OptimizationResult | None = None
    errors: list[AgentError] = Field(default_factory=list)
    total_tokens_used: int = 0
    estimated_cost_usd: float = 0.0
    duration_seconds: float = 0.0
    completed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
