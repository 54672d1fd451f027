"""Job posting models."""

from __future__ import annotations

from uuid import uuid4

from pydantic import BaseModel, Field, model_validator


class JobQualifications(BaseModel):
    """Required and preferred qualifications of a job posting."""

    required: list[str] = Field(default_factory=list)
    preferred: list[str] = Field(default_factory=list)


class ParsedJob(BaseModel):
    """Structured view of a job posting extracted by the LLM."""

    responsibilities: list[str] = Field(default_factory=list)
    qualifications: JobQualifications = Field(default_factory=JobQualifications)
    skills: list[str] = Field(default_factory=list, description="Skills asked for")
    experience_required: float | None = Field(
        default=None, ge=0, description="Minimum years of experience"
    )
    sector: str | None = Field(default=None, description="Industry sector if stated")
    seniority_level: str | None = Field(default=None, description="Junior/Confirmé/Senior/Expert")


class JobData(BaseModel):
    """A job posting with its raw and parsed content."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="Job identifier")
    title: str = Field(description="Job title")
    company: str = Field(default="", description="Hiring company")
    location: str | None = Field(default=None, description="Job location")
    description: str = Field(default="", description="Full job description text")
    requirements: list[str] = Field(default_factory=list, description="Requirement bullets")
    extracted_keywords: list[str] = Field(
        default_factory=list, description="Salient keywords found in the posting"
    )
    parsed: ParsedJob = Field(default_factory=ParsedJob)

    @model_validator(mode="after")
    def validate_title(self) -> JobData:
        """Ensure the job title is not blank."""
        if not self.title.strip():
            msg = "job title cannot be empty"
            raise ValueError(msg)
        return self

    def full_text(self) -> str:
        """Concatenate title, description and requirements."""
        parts = [self.title, self.description, *self.requirements]
        return "\n".join(p for p in parts if p)

    def required_skills(self) -> list[str]:
        """Return parsed skills, falling back to required qualifications."""
        return self.parsed.skills or self.parsed.qualifications.required
