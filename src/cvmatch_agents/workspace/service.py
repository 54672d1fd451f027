"""Workspace service: validated CRUD, candidate invitations and dashboard stats."""

from __future__ import annotations

import time
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

from cvmatch_agents.tools.text import split_full_name
from cvmatch_core.constants import (
    CLIENT_STATUSES,
    DEFAULT_CANDIDATE_NAME,
    DEFAULT_CANDIDATE_TITLE,
    DOSSIER_STATUS_DISPLAY,
    DOSSIER_STATUSES,
)
from cvmatch_core.exceptions import (
    EmailDeliveryError,
    InvitationExpiredError,
    NotFoundError,
    ValidationFailedError,
)
from cvmatch_core.models.workspace import (
    Candidate,
    Client,
    DashboardAlert,
    DashboardStats,
    Dossier,
    DossierSummary,
    Invitation,
    InvitationSummary,
    Page,
    Pagination,
)
from cvmatch_infra.db.models import (
    CandidateModel,
    ClientContactModel,
    ClientModel,
    DossierModel,
    InvitationModel,
    NotificationModel,
)
from cvmatch_infra.db.repositories import (
    CandidateRepository,
    ClientRepository,
    DossierRepository,
    InvitationRepository,
    NotificationRepository,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from cvmatch_agents.tools.email_sender import EmailSender
    from cvmatch_core.config.settings import Settings

logger = structlog.get_logger()

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

RECENT_DOSSIERS_LIMIT = 10
RECENT_ITEMS_LIMIT = 5
PIPELINE_ALERT_LIMIT = 3
INVITATIONS_LINK = "/mes-candidats"


def map_dossier_status(status: str) -> str:
    """Map a stored dossier status to its dashboard display value."""
    return DOSSIER_STATUS_DISPLAY.get(status, "draft")


def profile_coverage(matched: int, required: int) -> int:
    """Percentage of required profiles matched; 50 when none are required."""
    if required <= 0:
        return 50
    return min(100, round(matched / required * 100))


def calculate_completion_rate(status: str, matched: int, required: int) -> int:
    """Completion percentage shown for a dossier.

    Submitted and won dossiers are complete, drafts have not started, and
    anything else is measured by profile coverage.
    """
    if status in ("won", "submitted"):
        return 100
    if status == "draft":
        return 0
    return profile_coverage(matched, required)


def generate_reference(now_ms: int | None = None) -> str:
    """Build a dossier reference like ``DOS-M1ABC2DE`` from a millisecond clock."""
    value = int(time.time() * 1000) if now_ms is None else now_ms
    digits = ""
    while True:
        value, remainder = divmod(value, 36)
        digits = _BASE36_DIGITS[remainder] + digits
        if value == 0:
            break
    return f"DOS-{digits.upper()}"


def _as_utc(value: datetime) -> datetime:
    """SQLite returns naive datetimes; treat them as UTC."""
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _require(**fields: Any) -> None:
    """Raise ValidationFailedError naming every blank required field."""
    missing = [name for name, value in fields.items() if not value or not str(value).strip()]
    if missing:
        msg = f"{', '.join(missing)} {'is' if len(missing) == 1 else 'are'} required"
        raise ValidationFailedError(msg)


def _page_args(page: int, limit: int) -> tuple[int, int]:
    if page < 1 or limit < 1:
        msg = "page and limit must be positive"
        raise ValidationFailedError(msg)
    return limit, (page - 1) * limit


class WorkspaceService:
    """Business operations over the workspace repositories.

    The caller owns the session and its transaction; every method only
    flushes.
    """

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings,
        email_sender: EmailSender | None = None,
    ) -> None:
        """Initialize repositories over one session."""
        self._settings = settings
        self._email_sender = email_sender
        self.clients = ClientRepository(session)
        self.candidates = CandidateRepository(session)
        self.dossiers = DossierRepository(session)
        self.invitations = InvitationRepository(session)
        self.notifications = NotificationRepository(session)

    @property
    def email_sender(self) -> EmailSender:
        """Email sender, built from settings on first use."""
        if self._email_sender is None:
            from cvmatch_agents.tools.factories import create_email_sender

            self._email_sender = create_email_sender(self._settings)
        return self._email_sender

    # --- Clients ---

    async def create_client(
        self,
        name: str,
        sector: str | None = None,
        status: str | None = None,
        contacts: list[dict[str, Any]] | None = None,
        **details: Any,
    ) -> Client:
        """Create a client with optional contacts.

        Raises:
            ValidationFailedError: If the name is blank or the status unknown.
        """
        _require(name=name)
        status = status or "prospect"
        if status not in CLIENT_STATUSES:
            msg = f"Unknown client status: {status}"
            raise ValidationFailedError(msg)

        model = ClientModel(
            name=name.strip(),
            sector=sector,
            status=status,
            contacts=[ClientContactModel(**contact) for contact in contacts or []],
            **details,
        )
        model = await self.clients.create(model)
        logger.info("client_created", client_id=model.id, contacts=len(model.contacts))
        return Client.model_validate(model)

    async def get_client(self, client_id: str) -> Client:
        """Return a client or raise NotFoundError."""
        model = await self.clients.get_by_id(client_id)
        if model is None:
            msg = f"Client not found: {client_id}"
            raise NotFoundError(msg)
        return Client.model_validate(model)

    async def list_clients(
        self,
        search: str | None = None,
        status: str | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> Page[Client]:
        """Paginated client list."""
        limit = limit or self._settings.default_page_size
        take, skip = _page_args(page, limit)
        items, total = await self.clients.list_page(search, status, take, skip)
        return Page[Client](
            items=[Client.model_validate(m) for m in items],
            pagination=Pagination.build(page, limit, total),
        )

    # --- Candidates ---

    async def create_candidate(
        self,
        first_name: str,
        last_name: str,
        email: str,
        title: str | None = None,
        **details: Any,
    ) -> Candidate:
        """Create a candidate.

        Raises:
            ValidationFailedError: If first name, last name or email is blank.
            DuplicateError: If a candidate already uses this email.
        """
        _require(first_name=first_name, last_name=last_name, email=email)
        model = CandidateModel(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email.strip(),
            title=title or DEFAULT_CANDIDATE_TITLE,
            **details,
        )
        model = await self.candidates.create(model)
        logger.info("candidate_created", candidate_id=model.id)
        return Candidate.model_validate(model)

    async def get_candidate(self, candidate_id: str) -> Candidate:
        """Return a candidate or raise NotFoundError."""
        model = await self.candidates.get_by_id(candidate_id)
        if model is None:
            msg = f"Candidate not found: {candidate_id}"
            raise NotFoundError(msg)
        return Candidate.model_validate(model)

    async def list_candidates(
        self,
        search: str | None = None,
        status: str | None = None,
        availability: str | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> Page[Candidate]:
        """Paginated candidate list."""
        limit = limit or self._settings.default_page_size
        take, skip = _page_args(page, limit)
        items, total = await self.candidates.list_page(search, status, availability, take, skip)
        return Page[Candidate](
            items=[Candidate.model_validate(m) for m in items],
            pagination=Pagination.build(page, limit, total),
        )

    # --- Dossiers ---

    async def create_dossier(
        self,
        title: str,
        client_id: str,
        reference: str | None = None,
        status: str | None = None,
        required_skills: list[str] | None = None,
        **details: Any,
    ) -> Dossier:
        """Create a dossier for an existing client.

        Raises:
            ValidationFailedError: If title or client is missing, or the status unknown.
            NotFoundError: If the client does not exist.
        """
        _require(title=title, client_id=client_id)
        status = status or "draft"
        if status not in DOSSIER_STATUSES:
            msg = f"Unknown dossier status: {status}"
            raise ValidationFailedError(msg)
        if await self.clients.get_by_id(client_id) is None:
            msg = f"Client not found: {client_id}"
            raise NotFoundError(msg)

        model = DossierModel(
            title=title.strip(),
            client_id=client_id,
            reference=reference or generate_reference(),
            status=status,
            required_skills=required_skills or [],
            **details,
        )
        model = await self.dossiers.create(model)
        logger.info("dossier_created", dossier_id=model.id, reference=model.reference)
        return Dossier.model_validate(model)

    async def get_dossier(self, dossier_id: str) -> Dossier:
        """Return a dossier with its candidate links or raise NotFoundError."""
        return Dossier.model_validate(await self._dossier_model(dossier_id))

    async def list_dossiers(
        self,
        search: str | None = None,
        status: str | None = None,
        client_id: str | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> Page[Dossier]:
        """Paginated dossier list, most recently updated first."""
        limit = limit or self._settings.default_page_size
        take, skip = _page_args(page, limit)
        items, total = await self.dossiers.list_page(search, status, client_id, take, skip)
        return Page[Dossier](
            items=[Dossier.model_validate(m) for m in items],
            pagination=Pagination.build(page, limit, total),
        )

    async def update_dossier_status(self, dossier_id: str, status: str) -> Dossier:
        """Move a dossier to another status."""
        if status not in DOSSIER_STATUSES:
            msg = f"Unknown dossier status: {status}"
            raise ValidationFailedError(msg)
        model = await self.dossiers.update(await self._dossier_model(dossier_id), status=status)
        logger.info("dossier_status_changed", dossier_id=dossier_id, status=status)
        return Dossier.model_validate(model)

    async def attach_candidate(
        self,
        dossier_id: str,
        candidate_id: str,
        score: float | None = None,
    ) -> Dossier:
        """Link a candidate to a dossier with an optional match score (0-100)."""
        dossier = await self._dossier_model(dossier_id)
        if await self.candidates.get_by_id(candidate_id) is None:
            msg = f"Candidate not found: {candidate_id}"
            raise NotFoundError(msg)
        await self.dossiers.attach_candidate(dossier, candidate_id, score)
        return Dossier.model_validate(dossier)

    async def delete_dossier(self, dossier_id: str) -> None:
        """Delete a dossier and its candidate links."""
        await self.dossiers.delete(await self._dossier_model(dossier_id))
        logger.info("dossier_deleted", dossier_id=dossier_id)

    async def _dossier_model(self, dossier_id: str) -> DossierModel:
        model = await self.dossiers.get_by_id(dossier_id)
        if model is None:
            msg = f"Dossier not found: {dossier_id}"
            raise NotFoundError(msg)
        return model

    # --- Invitations ---

    async def invite_candidate(
        self,
        email: str,
        name: str | None = None,
        dossier_id: str | None = None,
        message: str | None = None,
    ) -> Invitation:
        """Invite a candidate by email.

        The candidate is created (or renamed) by email, an invitation token
        is issued and a notification recorded. Email delivery failures are
        logged and do not fail the invitation.

        Raises:
            ValidationFailedError: If the email is blank.
            NotFoundError: If dossier_id does not exist.
        """
        _require(email=email)
        email = email.strip()
        dossier = await self._dossier_model(dossier_id) if dossier_id else None

        first_name, last_name = split_full_name(name, DEFAULT_CANDIDATE_NAME)
        candidate, created = await self.candidates.upsert_by_email(
            CandidateModel(
                first_name=first_name,
                last_name=last_name,
                email=email,
                title=DEFAULT_CANDIDATE_TITLE,
                source="invitation",
            )
        )

        now = datetime.now(UTC)
        invitation = await self.invitations.create(
            InvitationModel(
                email=email,
                name=name,
                token=str(uuid4()),
                status="pending",
                candidate_id=candidate.id,
                dossier_id=dossier_id,
                message=message,
                sent_at=now,
                expires_at=now + timedelta(days=self._settings.invitation_ttl_days),
            )
        )
        await self.notifications.create(
            NotificationModel(
                type="info",
                title="Invitation envoyée",
                message=f"Invitation envoyée à {email}",
                link=INVITATIONS_LINK,
            )
        )
        logger.info(
            "invitation_created",
            invitation_id=invitation.id,
            candidate_id=candidate.id,
            candidate_created=created,
        )

        await self._send_invitation_email(
            email=email,
            name=name or DEFAULT_CANDIDATE_NAME,
            token=invitation.token,
            dossier_title=dossier.title if dossier else None,
        )
        return Invitation.model_validate(invitation)

    async def _send_invitation_email(
        self,
        email: str,
        name: str,
        token: str,
        dossier_title: str | None,
    ) -> None:
        url = f"{self._settings.app_base_url.rstrip('/')}/invitation?token={token}"
        try:
            sent = await self.email_sender.send_invitation(
                email,
                name,
                url,
                dossier_title=dossier_title,
                expires_in_days=self._settings.invitation_ttl_days,
            )
        except EmailDeliveryError as e:
            logger.warning("invitation_email_failed", email=email, error=str(e))
            return
        if not sent:
            logger.warning("invitation_email_failed", email=email, error="rejected by provider")

    async def accept_invitation(self, token: str, now: datetime | None = None) -> Invitation:
        """Accept a pending invitation.

        Raises:
            NotFoundError: If no invitation has this token.
            InvitationExpiredError: If the invitation expired or is no longer pending.
        """
        current = now or datetime.now(UTC)
        model = await self.invitations.get_by_token(token)
        if model is None:
            msg = "Invitation not found"
            raise NotFoundError(msg)

        invitation = Invitation.model_validate(model)
        if invitation.status == "accepted":
            return invitation
        if invitation.status == "pending" and invitation.is_expired(current):
            await self.invitations.set_status(model, "expired")
            logger.info("invitation_expired", invitation_id=model.id)
        if model.status != "pending":
            msg = f"Invitation is {model.status}"
            raise InvitationExpiredError(msg)

        await self.invitations.set_status(model, "accepted", accepted_at=current)
        logger.info("invitation_accepted", invitation_id=model.id)
        return Invitation.model_validate(model)

    # --- Dashboard ---

    async def dashboard_stats(self, now: datetime | None = None) -> DashboardStats:
        """Aggregate counts, recent activity and alerts for the dashboard."""
        now = now or datetime.now(UTC)
        start_of_month = _naive(datetime(now.year, now.month, 1, tzinfo=UTC))

        recent = await self.dossiers.list_recent(limit=RECENT_DOSSIERS_LIMIT)
        recent_invitations = await self.invitations.list_recent(limit=RECENT_ITEMS_LIMIT)

        stats = DashboardStats(
            total_dossiers=await self.dossiers.count(),
            dossiers_this_month=await self.dossiers.count(created_since=start_of_month),
            completed_dossiers=await self.dossiers.count(status="won"),
            in_progress_dossiers=await self.dossiers.count(status="inProgress"),
            total_candidates=await self.candidates.count(),
            new_candidates_this_month=await self.candidates.count(created_since=start_of_month),
            total_clients=await self.clients.count(),
            active_clients=await self.clients.count(status="active"),
            pending_invitations=await self.invitations.count_pending(),
            unread_notifications=await self.notifications.count_unread(),
            avg_completion_rate=_average_coverage(recent),
            avg_creation_time_minutes=_average_creation_minutes(recent),
            recent_dossiers=[_dossier_summary(d) for d in recent],
            recent_candidates=[
                Candidate.model_validate(c)
                for c in await self.candidates.list_recent(limit=RECENT_ITEMS_LIMIT)
            ],
            recent_invitations=[_invitation_summary(i) for i in recent_invitations],
            alerts=await self._alerts(now),
        )
        logger.info(
            "dashboard_stats",
            total_dossiers=stats.total_dossiers,
            alerts=len(stats.alerts),
        )
        return stats

    async def _alerts(self, now: datetime) -> list[DashboardAlert]:
        settings = self._settings
        alerts: list[DashboardAlert] = []

        expiring_before = now + timedelta(days=settings.invitation_expiry_warning_days)
        for invitation in await self.invitations.list_expiring(
            _naive(expiring_before), limit=RECENT_ITEMS_LIMIT
        ):
            alerts.append(
                DashboardAlert(
                    id=f"invite-{invitation.id}",
                    type="expiring_invitation",
                    title="Invitation expire bientôt",
                    description=_invitee_name(invitation, fallback=invitation.email),
                )
            )

        for dossier in await self.dossiers.list_recent(limit=PIPELINE_ALERT_LIMIT, status="draft"):
            alerts.append(
                DashboardAlert(
                    id=f"draft-{dossier.id}",
                    type="draft_dossier",
                    title=f"Brouillon à finaliser: {dossier.title}",
                    description=_client_name(dossier) or "Client non renseigné",
                )
            )

        for dossier in await self.dossiers.list_recent(
            limit=PIPELINE_ALERT_LIMIT, status="submitted"
        ):
            alerts.append(
                DashboardAlert(
                    id=f"sent-{dossier.id}",
                    type="submitted_dossier",
                    title=f"Dossier envoyé: {dossier.title}",
                    description="En attente du retour client",
                )
            )

        for dossier in await self.dossiers.list_low_score(
            settings.low_score_threshold, limit=RECENT_ITEMS_LIMIT
        ):
            alerts.append(
                DashboardAlert(
                    id=f"score-{dossier.id}",
                    type="low_score",
                    title=f"Score faible: {dossier.title}",
                    description=f"Score {round(dossier.score or 0)}/100",
                )
            )

        stale_before = now - timedelta(days=settings.stale_dossier_days)
        for dossier in await self.dossiers.list_stale(
            _naive(stale_before), limit=RECENT_ITEMS_LIMIT
        ):
            alerts.append(
                DashboardAlert(
                    id=f"stale-{dossier.id}",
                    type="stale_dossier",
                    title=f"Dossier en attente: {dossier.title}",
                    description=f"Aucune mise à jour depuis {settings.stale_dossier_days} jours",
                )
            )
        return alerts


def _naive(value: datetime) -> datetime:
    """Drop tzinfo after converting to UTC, matching how rows are compared in SQLite."""
    return value.astimezone(UTC).replace(tzinfo=None)


def _client_name(dossier: DossierModel) -> str | None:
    return dossier.client.name if dossier.client else None


def _invitee_name(invitation: InvitationModel, fallback: str) -> str:
    if invitation.candidate:
        return f"{invitation.candidate.first_name} {invitation.candidate.last_name}"
    return invitation.name or fallback


def _dossier_summary(dossier: DossierModel) -> DossierSummary:
    return DossierSummary(
        id=dossier.id,
        title=dossier.title,
        client=_client_name(dossier),
        candidate_count=len(dossier.candidates),
        status=map_dossier_status(dossier.status),
        completion_rate=calculate_completion_rate(
            dossier.status, dossier.matched_profiles, dossier.required_profiles
        ),
        last_modified=_as_date(dossier.updated_at),
        created_at=_as_date(dossier.created_at),
    )


def _invitation_summary(invitation: InvitationModel) -> InvitationSummary:
    return InvitationSummary(
        id=invitation.id,
        candidate_name=_invitee_name(invitation, fallback=DEFAULT_CANDIDATE_NAME),
        candidate_email=invitation.email,
        status=invitation.status,
        sent_at=_as_utc(invitation.sent_at),
        expires_at=_as_utc(invitation.expires_at),
    )


def _as_date(value: datetime) -> date:
    return _as_utc(value).date()


def _average_coverage(dossiers: list[DossierModel]) -> int:
    """Mean profile coverage over the given dossiers, regardless of status."""
    if not dossiers:
        return 0
    total = sum(profile_coverage(d.matched_profiles, d.required_profiles) for d in dossiers)
    return round(total / len(dossiers))


def _average_creation_minutes(dossiers: list[DossierModel]) -> int:
    """Mean minutes from creation to last update for won or submitted dossiers."""
    durations = [
        (_as_utc(d.updated_at) - _as_utc(d.created_at)).total_seconds()
        for d in dossiers
        if d.status in ("won", "submitted")
    ]
    if not durations:
        return 0
    return round(sum(durations) / len(durations) / 60)
