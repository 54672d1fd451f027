"""CV/resume and LinkedIn profile models."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field


class PersonalInfo(BaseModel):
    """Contact block at the top of a CV."""

    name: str = Field(default="", description="Full name")
    email: str | None = Field(default=None, description="Contact email address")
    phone: str | None = Field(default=None, description="Phone number")
    location: str | None = Field(default=None, description="City / region")
    title: str | None = Field(default=None, description="Headline or current job title")
    linkedin_url: str | None = Field(default=None, description="LinkedIn profile URL")
    website: str | None = Field(default=None, description="Personal website or portfolio")


class Experience(BaseModel):
    """A single work experience entry."""

    title: str = Field(description="Job title held")
    company: str = Field(default="", description="Employer name")
    location: str | None = Field(default=None, description="Work location")
    start_date: str | None = Field(default=None, description="Start date as written (e.g. 03/2019)")
    end_date: str | None = Field(default=None, description="End date, or None when current")
    current: bool = Field(default=False, description="Whether this is the current position")
    description: str = Field(default="", description="Responsibilities and achievements")
    achievements: list[str] = Field(default_factory=list, description="Bullet-point achievements")
    years: float | None = Field(default=None, ge=0, description="Duration in years if known")


class EducationEntry(BaseModel):
    """Educational background entry."""

    degree: str = Field(default="", description="Diploma (Master, Licence, BTS, ...)")
    field: str | None = Field(default=None, description="Field of study / specialization")
    institution: str | None = Field(default=None, description="School or university")
    graduation_year: int | None = Field(default=None, description="Year of graduation")


class Skill(BaseModel):
    """A single skill with optional type and proficiency level."""

    name: str = Field(description="Skill name")
    type: Literal["hard", "soft", "technical", "language"] = Field(
        default="technical", description="Skill category"
    )
    level: Literal["beginner", "intermediate", "advanced", "expert"] | None = Field(
        default=None, description="Proficiency level"
    )


class CVContent(BaseModel):
    """Structured sections of a CV."""

    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    experiences: list[Experience] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)
    summary: str = Field(default="", description="Professional summary")
    extracted_keywords: list[str] = Field(
        default_factory=list, description="Salient keywords found in the CV"
    )

    def total_years(self) -> float:
        """Sum the known durations of all experiences."""
        return sum(exp.years or 0.0 for exp in self.experiences)


class CVData(BaseModel):
    """A parsed CV with its raw text."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="CV identifier")
    name: str = Field(default="", description="Display name for the CV")
    source: Literal["upload", "linkedin", "text"] = Field(
        default="text", description="Where the CV came from"
    )
    content: CVContent = Field(default_factory=CVContent)
    raw_text: str = Field(default="", description="Raw text of the CV")
    processed_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="When the CV was parsed"
    )

    def full_text(self) -> str:
        """Return the raw text, or a reconstruction from structured content."""
        if self.raw_text.strip():
            return self.raw_text
        parts: list[str] = []
        info = self.content.personal_info
        parts.extend(p for p in (info.name, info.title) if p)
        if self.content.summary:
            parts.append(self.content.summary)
        for exp in self.content.experiences:
            parts.append(f"{exp.title} {exp.company}".strip())
            if exp.description:
                parts.append(exp.description)
            parts.extend(exp.achievements)
        for edu in self.content.education:
            parts.append(" ".join(p for p in (edu.degree, edu.field, edu.institution) if p))
        if self.content.skills:
            parts.append(", ".join(s.name for s in self.content.skills))
        return "\n".join(parts)


class LinkedInProfile(BaseModel):
    """LinkedIn profile as returned by the LinkedIn parser."""

    headline: str = Field(default="", description="Profile headline")
    about: str = Field(default="", description="About section")
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    experiences: list[Experience] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)

    def to_cv(self, raw_text: str) -> CVData:
        """Convert the profile into a CVData with source 'linkedin'."""
        info = self.personal_info.model_copy()
        if not info.title and self.headline:
            info.title = self.headline
        return CVData(
            name=info.name or "Profil LinkedIn",
            source="linkedin",
            content=CVContent(
                personal_info=info,
                experiences=self.experiences,
                education=self.education,
                skills=self.skills,
                summary=self.about,
            ),
            raw_text=raw_text,
        )
