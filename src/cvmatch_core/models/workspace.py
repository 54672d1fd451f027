"""Workspace models: clients, candidates, dossiers, invitations, dashboard."""

from __future__ import annotations

import math
from datetime import UTC, date, datetime
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ClientContact(BaseModel):
    """A person to talk to at a client."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    name: str
    email: str | None = None
    phone: str | None = None
    role: str | None = None
    is_primary: bool = False


class Client(BaseModel):
    """A company the firm places candidates with."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    sector: str | None = None
    status: Literal["prospect", "active", "inactive"] = "prospect"
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    address: str | None = None
    notes: str | None = None
    contacts: list[ClientContact] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class Candidate(BaseModel):
    """A person who may be placed on a dossier."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    title: str
    location: str | None = None
    skills: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    years_experience: float = 0.0
    seniority_level: str | None = None
    daily_rate: float | None = Field(default=None, description="TJM (taux journalier moyen)")
    availability: str = "immediate"
    status: str = "new"
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)
    source: str | None = None
    created_at: datetime
    updated_at: datetime

    @property
    def full_name(self) -> str:
        """First and last name joined."""
        return f"{self.first_name} {self.last_name}".strip()


class DossierCandidate(BaseModel):
    """Link between a dossier and a candidate, with the match score."""

    model_config = ConfigDict(from_attributes=True)

    candidate_id: str
    score: float | None = None
    status: str = "proposed"
    added_at: datetime


class Dossier(BaseModel):
    """A case file for a client need."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    reference: str
    title: str
    client_id: str
    description: str | None = None
    required_skills: list[str] = Field(default_factory=list)
    preferred_skills: list[str] = Field(default_factory=list)
    budget: float | None = None
    deadline: date | None = None
    status: Literal["draft", "inProgress", "submitted", "won", "lost"] = "draft"
    score: float | None = None
    required_profiles: int = 0
    matched_profiles: int = 0
    candidates: list[DossierCandidate] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class Invitation(BaseModel):
    """An invitation sent to a candidate to complete their profile."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str | None = None
    token: str
    status: Literal["pending", "accepted", "expired", "cancelled"] = "pending"
    candidate_id: str | None = None
    dossier_id: str | None = None
    message: str | None = None
    sent_at: datetime
    expires_at: datetime
    accepted_at: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Whether the invitation is past its expiry date."""
        current = now or datetime.now(UTC)
        expires = self.expires_at
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=UTC)
        return current >= expires


class Notification(BaseModel):
    """An in-app notification."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    type: str
    title: str
    message: str
    link: str | None = None
    read: bool = False
    created_at: datetime


class Pagination(BaseModel):
    """Pagination metadata for list operations."""

    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)
    total_pages: int = Field(ge=0)

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> Pagination:
        """Compute total_pages from the other fields."""
        return cls(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit))


class Page(BaseModel, Generic[T]):
    """A page of results."""

    items: list[T]
    pagination: Pagination


class DossierSummary(BaseModel):
    """Dashboard row for a dossier."""

    id: str
    title: str
    client: str | None
    candidate_count: int
    status: Literal["draft", "pending_candidate", "in_progress", "completed", "sent"]
    completion_rate: int = Field(ge=0, le=100)
    last_modified: date
    created_at: date


class InvitationSummary(BaseModel):
    """Dashboard row for an invitation."""

    id: str
    candidate_name: str
    candidate_email: str
    status: str
    sent_at: datetime
    expires_at: datetime


class DashboardAlert(BaseModel):
    """Something on the dashboard that needs attention."""

    id: str
    type: Literal[
        "expiring_invitation", "draft_dossier", "submitted_dossier",
        "low_score", "stale_dossier",
    ]
    title: str
    description: str


class DashboardStats(BaseModel):
    """Aggregated workspace statistics."""

    total_dossiers: int = 0
    dossiers_this_month: int = 0
    completed_dossiers: int = 0
    in_progress_dossiers: int = 0
    total_candidates: int = 0
    new_candidates_this_month: int = 0
    total_clients: int = 0
    active_clients: int = 0
    pending_invitations: int = 0
    unread_notifications: int = 0
    avg_completion_rate: int = 0
    avg_creation_time_minutes: int = 0
    recent_dossiers: list[DossierSummary] = Field(default_factory=list)
    recent_candidates: list[Candidate] = Field(default_factory=list)
    recent_invitations: list[InvitationSummary] = Field(default_factory=list)
    alerts: list[DashboardAlert] = Field(default_factory=list)
