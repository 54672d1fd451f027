"""French contextual extraction models.

Every field is defaulted so that an empty ``FrenchExtractedData()`` is a
valid record; it is what extraction returns for unusable input.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class HardSkill(BaseModel):
    """A technical or domain skill."""

    name: str
    level: str = Field(default="", description="Level as stated or inferred")
    years: float | None = Field(default=None, ge=0)
    context: str | None = None
    priority: Literal["high", "medium", "low"] | None = Field(
        default=None, description="Importance in a job posting"
    )


class SoftSkill(BaseModel):
    """A behavioural skill, ideally backed by examples."""

    name: str
    examples: list[str] = Field(default_factory=list)


class Tool(BaseModel):
    """A software tool or platform."""

    name: str
    version: str | None = None
    proficiency: str | None = None


class EducationInfo(BaseModel):
    """Highest education, expressed in the French system."""

    level: str = Field(default="", description="Bac+N level, e.g. 'Bac+5'")
    diploma: str = Field(default="", description="Diploma name")
    school: str | None = None
    specialization: str | None = None
    preferred_specializations: list[str] = Field(default_factory=list)
    year: int | None = None


class CompanyInfo(BaseModel):
    """A past employer and its type (startup, grand groupe, ESN, ...)."""

    name: str
    type: str | None = None
    duration: float | None = None


class ExperienceInfo(BaseModel):
    """Aggregate experience figures."""

    total_years: float = Field(default=0.0, ge=0)
    relevant_years: float = Field(default=0.0, ge=0)
    companies: list[CompanyInfo] = Field(default_factory=list)
    preferred_company_types: list[str] = Field(default_factory=list)
    seniority_level: str = Field(default="", description="Junior/Confirmé/Senior/Expert")


class LanguageSkill(BaseModel):
    """A spoken language with its CECRL level."""

    language: str
    level: str = Field(default="", description="CECRL level (A1..C2) or native")
    certification: str | None = None


class Mobility(BaseModel):
    """Location and mobility preferences."""

    current_location: str = ""
    target_locations: list[str] = Field(default_factory=list)
    remote: bool = False
    relocation: bool = False


class Culture(BaseModel):
    """Work culture signals."""

    work_environment: list[str] = Field(default_factory=list)
    values: list[str] = Field(default_factory=list)
    aspirations: list[str] = Field(default_factory=list)


class FrenchExtractedData(BaseModel):
    """Contextual data extracted from a CV or a job posting."""

    hard_skills: list[HardSkill] = Field(default_factory=list)
    soft_skills: list[SoftSkill] = Field(default_factory=list)
    tools: list[Tool] = Field(default_factory=list)
    education: EducationInfo = Field(default_factory=EducationInfo)
    experience: ExperienceInfo = Field(default_factory=ExperienceInfo)
    languages: list[LanguageSkill] = Field(default_factory=list)
    mobility: Mobility = Field(default_factory=Mobility)
    culture: Culture = Field(default_factory=Culture)

    def is_empty(self) -> bool:
        """True when nothing was extracted."""
        return self == FrenchExtractedData()
