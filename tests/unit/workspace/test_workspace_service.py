"""Tests for the workspace service over in-memory SQLite."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from cvmatch_agents.workspace import (
    WorkspaceService,
    calculate_completion_rate,
    map_dossier_status,
)
from cvmatch_agents.workspace.service import generate_reference, profile_coverage
from cvmatch_core.exceptions import (
    DuplicateError,
    InvitationExpiredError,
    NotFoundError,
    ValidationFailedError,
)
from tests.mocks.mock_settings import make_settings
from tests.mocks.mock_tools import FakeEmailSender


@pytest.fixture
def email_sender() -> FakeEmailSender:
    """Recording email sender."""
    return FakeEmailSender()


@pytest.fixture
def service(session: AsyncSession, email_sender: FakeEmailSender) -> WorkspaceService:
    """WorkspaceService over the in-memory session."""
    return WorkspaceService(session, make_settings(), email_sender=email_sender)


@pytest.mark.unit
class TestHelpers:
    """Test status mapping, completion rate and references."""

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            ("draft", "draft"),
            ("inProgress", "in_progress"),
            ("submitted", "sent"),
            ("won", "completed"),
            ("lost", "completed"),
            ("archived", "draft"),
        ],
    )
    def test_map_dossier_status(self, status: str, expected: str) -> None:
        """Stored statuses map to dashboard display values."""
        assert map_dossier_status(status) == expected

    def test_completion_rate(self) -> None:
        """Submitted and won are complete, drafts empty, others by coverage."""
        assert calculate_completion_rate("won", 0, 5) == 100
        assert calculate_completion_rate("submitted", 0, 5) == 100
        assert calculate_completion_rate("draft", 5, 5) == 0
        assert calculate_completion_rate("inProgress", 1, 3) == 33
        assert calculate_completion_rate("lost", 0, 0) == 50

    def test_profile_coverage_is_capped(self) -> None:
        """Coverage never exceeds 100."""
        assert profile_coverage(5, 2) == 100

    def test_generate_reference(self) -> None:
        """References are DOS- plus the upper-case base36 clock."""
        assert generate_reference(0) == "DOS-0"
        assert generate_reference(35) == "DOS-Z"
        assert generate_reference(36 * 36) == "DOS-100"
        assert generate_reference().startswith("DOS-")


@pytest.mark.unit
class TestClientsAndCandidates:
    """Test client and candidate operations."""

    @pytest.mark.asyncio
    async def test_create_client_defaults(self, service: WorkspaceService) -> None:
        """New clients are prospects and keep their contacts."""
        client = await service.create_client(
            "  BNP Paribas ", sector="Banque", contacts=[{"name": "Paul", "role": "DRH"}]
        )

        assert client.name == "BNP Paribas"
        assert client.status == "prospect"
        assert [c.name for c in client.contacts] == ["Paul"]

    @pytest.mark.asyncio
    async def test_create_client_validation(self, service: WorkspaceService) -> None:
        """Blank names and unknown statuses are rejected."""
        with pytest.raises(ValidationFailedError, match="name is required"):
            await service.create_client("  ")
        with pytest.raises(ValidationFailedError, match="Unknown client status"):
            await service.create_client("AXA", status="vip")

    @pytest.mark.asyncio
    async def test_get_missing_client(self, service: WorkspaceService) -> None:
        """Unknown IDs raise NotFoundError."""
        with pytest.raises(NotFoundError):
            await service.get_client("nope")

    @pytest.mark.asyncio
    async def test_list_clients_paginates(self, service: WorkspaceService) -> None:
        """Pagination reports totals and page count."""
        for name in ("A", "B", "C"):
            await service.create_client(name)

        page = await service.list_clients(page=2, limit=2)

        assert len(page.items) == 1
        assert page.pagination.total == 3
        assert page.pagination.total_pages == 2

    @pytest.mark.asyncio
    async def test_list_rejects_bad_page(self, service: WorkspaceService) -> None:
        """Page numbers start at 1."""
        with pytest.raises(ValidationFailedError):
            await service.list_candidates(page=0)

    @pytest.mark.asyncio
    async def test_create_candidate(self, service: WorkspaceService) -> None:
        """Title defaults when missing; emails stay unique."""
        candidate = await service.create_candidate("Léa", "Martin", "lea@example.fr")

        assert candidate.title == "Non spécifié"
        assert (await service.get_candidate(candidate.id)).email == "lea@example.fr"
        with pytest.raises(DuplicateError):
            await service.create_candidate("Léa", "Martin", "lea@example.fr")

    @pytest.mark.asyncio
    async def test_create_candidate_requires_fields(self, service: WorkspaceService) -> None:
        """All blank required fields are named."""
        with pytest.raises(ValidationFailedError, match="first_name, email are required"):
            await service.create_candidate("", "Martin", " ")


@pytest.mark.unit
class TestDossiers:
    """Test dossier operations."""

    @pytest.mark.asyncio
    async def test_create_dossier(self, service: WorkspaceService) -> None:
        """Dossiers start as drafts with a generated reference."""
        client = await service.create_client("AXA")

        dossier = await service.create_dossier(
            "Data Engineer", client.id, required_skills=["Python", "Spark"]
        )

        assert dossier.status == "draft"
        assert dossier.reference.startswith("DOS-")
        assert dossier.required_skills == ["Python", "Spark"]

    @pytest.mark.asyncio
    async def test_create_dossier_unknown_client(self, service: WorkspaceService) -> None:
        """The client must exist."""
        with pytest.raises(NotFoundError, match="Client not found"):
            await service.create_dossier("Data Engineer", "missing")

    @pytest.mark.asyncio
    async def test_create_dossier_validation(self, service: WorkspaceService) -> None:
        """Title and client are required; statuses are checked."""
        client = await service.create_client("AXA")
        with pytest.raises(ValidationFailedError, match="title is required"):
            await service.create_dossier("", client.id)
        with pytest.raises(ValidationFailedError, match="Unknown dossier status"):
            await service.create_dossier("Dev", client.id, status="closed")

    @pytest.mark.asyncio
    async def test_attach_candidate_and_status(self, service: WorkspaceService) -> None:
        """Attaching updates matched profiles and score; status moves on."""
        client = await service.create_client("AXA")
        dossier = await service.create_dossier("Dev", client.id, required_profiles=2)
        candidate = await service.create_candidate("Léa", "Martin", "lea@example.fr")

        updated = await service.attach_candidate(dossier.id, candidate.id, score=78.0)
        moved = await service.update_dossier_status(dossier.id, "inProgress")

        assert updated.matched_profiles == 1
        assert updated.score == 78.0
        assert [c.candidate_id for c in updated.candidates] == [candidate.id]
        assert moved.status == "inProgress"

    @pytest.mark.asyncio
    async def test_attach_unknown_candidate(self, service: WorkspaceService) -> None:
        """Unknown candidates raise NotFoundError."""
        client = await service.create_client("AXA")
        dossier = await service.create_dossier("Dev", client.id)

        with pytest.raises(NotFoundError, match="Candidate not found"):
            await service.attach_candidate(dossier.id, "missing")

    @pytest.mark.asyncio
    async def test_delete_dossier(self, service: WorkspaceService) -> None:
        """Deleted dossiers are gone."""
        client = await service.create_client("AXA")
        dossier = await service.create_dossier("Dev", client.id)

        await service.delete_dossier(dossier.id)

        with pytest.raises(NotFoundError):
            await service.get_dossier(dossier.id)


@pytest.mark.unit
class TestInvitations:
    """Test invitations and their acceptance."""

    @pytest.mark.asyncio
    async def test_invite_creates_candidate_and_sends_email(
        self, service: WorkspaceService, email_sender: FakeEmailSender
    ) -> None:
        """A new candidate, a pending token, a notification and an email."""
        invitation = await service.invite_candidate("lea@example.fr", name="Léa Martin")

        assert invitation.status == "pending"
        assert invitation.expires_at - invitation.sent_at == timedelta(days=7)
        candidate = await service.candidates.get_by_email("lea@example.fr")
        assert candidate is not None
        assert (candidate.first_name, candidate.last_name) == ("Léa", "Martin")
        assert candidate.source == "invitation"
        assert await service.notifications.count_unread() == 1

        sent = email_sender.sent[0]
        assert sent.url == f"https://app.cvmatch.test/invitation?token={invitation.token}"
        assert sent.name == "Léa Martin"
        assert sent.expires_in_days == 7

    @pytest.mark.asyncio
    async def test_invite_existing_candidate_renames(self, service: WorkspaceService) -> None:
        """Inviting a known email updates the candidate's name."""
        await service.create_candidate("L", "M", "lea@example.fr")

        await service.invite_candidate("lea@example.fr", name="Léa Martin")

        assert await service.candidates.count() == 1
        candidate = await service.candidates.get_by_email("lea@example.fr")
        assert candidate is not None
        assert candidate.last_name == "Martin"

    @pytest.mark.asyncio
    async def test_invite_with_dossier(
        self, service: WorkspaceService, email_sender: FakeEmailSender
    ) -> None:
        """The dossier title is mentioned in the email."""
        client = await service.create_client("AXA")
        dossier = await service.create_dossier("Data Engineer", client.id)

        invitation = await service.invite_candidate("lea@example.fr", dossier_id=dossier.id)

        assert invitation.dossier_id == dossier.id
        assert email_sender.sent[0].dossier_title == "Data Engineer"
        assert email_sender.sent[0].name == "Candidat"

    @pytest.mark.asyncio
    async def test_invite_unknown_dossier(self, service: WorkspaceService) -> None:
        """A dossier_id must exist."""
        with pytest.raises(NotFoundError):
            await service.invite_candidate("lea@example.fr", dossier_id="missing")

    @pytest.mark.asyncio
    async def test_invite_requires_email(self, service: WorkspaceService) -> None:
        """Email is mandatory."""
        with pytest.raises(ValidationFailedError, match="email is required"):
            await service.invite_candidate("")

    @pytest.mark.asyncio
    async def test_email_failure_keeps_invitation(self, session: AsyncSession) -> None:
        """Delivery errors are logged, the invitation still exists."""
        service = WorkspaceService(session, make_settings(), email_sender=FakeEmailSender(fail=True))

        invitation = await service.invite_candidate("lea@example.fr")

        assert await service.invitations.get_by_token(invitation.token) is not None

    @pytest.mark.asyncio
    async def test_rejected_email_is_logged(self, session: AsyncSession) -> None:
        """A provider rejection (send returns False) is logged as a failed delivery."""
        sender = FakeEmailSender(rejected=True)
        service = WorkspaceService(session, make_settings(), email_sender=sender)

        with patch("cvmatch_agents.workspace.service.logger") as mock_logger:
            invitation = await service.invite_candidate("lea@example.fr")

        assert await service.invitations.get_by_token(invitation.token) is not None
        assert sender.sent == []
        events = [c.args[0] for c in mock_logger.warning.call_args_list]
        assert events == ["invitation_email_failed"]

    @pytest.mark.asyncio
    async def test_delivered_email_not_logged_as_failure(self, session: AsyncSession) -> None:
        """A successful send logs no delivery warning."""
        service = WorkspaceService(session, make_settings(), email_sender=FakeEmailSender())

        with patch("cvmatch_agents.workspace.service.logger") as mock_logger:
            await service.invite_candidate("lea@example.fr")

        mock_logger.warning.assert_not_called()

    @pytest.mark.asyncio
    async def test_accept_invitation(self, service: WorkspaceService) -> None:
        """Accepting a valid token marks it accepted; accepting again is a no-op."""
        invitation = await service.invite_candidate("lea@example.fr")
        later = datetime.now(UTC) + timedelta(days=1)

        accepted = await service.accept_invitation(invitation.token, now=later)
        again = await service.accept_invitation(invitation.token)

        assert accepted.status == "accepted"
        assert accepted.accepted_at == later
        assert again.status == "accepted"

    @pytest.mark.asyncio
    async def test_accept_expired_invitation(self, service: WorkspaceService) -> None:
        """Past the expiry date the invitation is marked expired."""
        invitation = await service.invite_candidate("lea@example.fr")
        too_late = datetime.now(UTC) + timedelta(days=8)

        with pytest.raises(InvitationExpiredError, match="expired"):
            await service.accept_invitation(invitation.token, now=too_late)

        stored = await service.invitations.get_by_token(invitation.token)
        assert stored is not None
        assert stored.status == "expired"
        with pytest.raises(InvitationExpiredError):
            await service.accept_invitation(invitation.token)

    @pytest.mark.asyncio
    async def test_accept_unknown_token(self, service: WorkspaceService) -> None:
        """Unknown tokens raise NotFoundError."""
        with pytest.raises(NotFoundError, match="Invitation not found"):
            await service.accept_invitation("nope")


@pytest.mark.unit
class TestDashboardStats:
    """Test dashboard aggregation and alerts."""

    @pytest.mark.asyncio
    async def test_counts_and_alerts(self, service: WorkspaceService) -> None:
        """Counts, average coverage and pipeline alerts over a small workspace."""
        active = await service.create_client("BNP Paribas", status="active")
        await service.create_client("AXA")
        draft = await service.create_dossier("Brouillon", active.id, required_profiles=2)
        running = await service.create_dossier(
            "En cours", active.id, status="inProgress", required_profiles=4
        )
        await service.create_dossier("Gagné", active.id, status="won")
        await service.create_dossier("Envoyé", active.id, status="submitted")
        candidate = await service.create_candidate("Léa", "Martin", "lea@example.fr")
        await service.attach_candidate(running.id, candidate.id, score=40.0)
        await service.invite_candidate("paul@example.fr", name="Paul Durand")

        model = await service.dossiers.get_by_id(running.id)
        assert model is not None
        await service.dossiers.update(model, updated_at=datetime.now(UTC) - timedelta(days=10))

        stats = await service.dashboard_stats(now=datetime.now(UTC))

        assert stats.total_dossiers == 4
        assert stats.dossiers_this_month == 4
        assert stats.completed_dossiers == 1
        assert stats.in_progress_dossiers == 1
        assert stats.total_candidates == 2
        assert stats.total_clients == 2
        assert stats.active_clients == 1
        assert stats.pending_invitations == 1
        assert stats.unread_notifications == 1
        assert stats.avg_completion_rate == 31
        assert stats.avg_creation_time_minutes == 0
        assert len(stats.recent_dossiers) == 4
        assert stats.recent_invitations[0].candidate_name == "Paul Durand"

        alerts = {a.id: a for a in stats.alerts}
        assert alerts[f"draft-{draft.id}"].description == "BNP Paribas"
        assert alerts[f"score-{running.id}"].description == "Score 40/100"
        assert alerts[f"stale-{running.id}"].title == "Dossier en attente: En cours"
        assert any(a.type == "submitted_dossier" for a in stats.alerts)
        assert not any(a.type == "expiring_invitation" for a in stats.alerts)

    @pytest.mark.asyncio
    async def test_expiring_invitation_alert(self, session: AsyncSession) -> None:
        """Invitations expiring within the warning window raise an alert."""
        service = WorkspaceService(
            session, make_settings(invitation_ttl_days=1), email_sender=FakeEmailSender()
        )
        invitation = await service.invite_candidate("paul@example.fr", name="Paul Durand")

        stats = await service.dashboard_stats()

        alert = next(a for a in stats.alerts if a.type == "expiring_invitation")
        assert alert.id == f"invite-{invitation.id}"
        assert alert.description == "Paul Durand"

    @pytest.mark.asyncio
    async def test_empty_workspace(self, service: WorkspaceService) -> None:
        """An empty workspace yields zeros and no alerts."""
        stats = await service.dashboard_stats()

        assert stats.total_dossiers == 0
        assert stats.avg_completion_rate == 0
        assert stats.alerts == []
