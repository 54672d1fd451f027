"""Integration tests for workspace operations against a file-backed database."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cvmatch_agents.workspace import WorkspaceService
from cvmatch_core.config.settings import Settings
from tests.mocks.mock_tools import FakeEmailSender

pytestmark = pytest.mark.integration


class TestWorkspacePersistence:
    """Workspace flows that span several committed sessions."""

    async def test_dossier_flow_survives_sessions(
        self,
        real_settings: Settings,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        """Client, candidate, dossier and invitation are readable after commit."""
        sender = FakeEmailSender()

        async with session_factory() as session:
            service = WorkspaceService(session, real_settings, email_sender=sender)
            client = await service.create_client("Banque du Nord", sector="finance", status="active")
            candidate = await service.create_candidate("Léa", "Martin", "lea.martin@example.fr")
            dossier = await service.create_dossier(
                "Consultant conformité", client.id, required_skills=["KYC", "AML"]
            )
            await service.attach_candidate(dossier.id, candidate.id, score=82)
            invitation = await service.invite_candidate(
                "paul.durand@example.fr", name="Paul Durand", dossier_id=dossier.id
            )
            await session.commit()

        assert sender.sent[0].dossier_title == "Consultant conformité"
        assert invitation.token in sender.sent[0].url

        async with session_factory() as session:
            service = WorkspaceService(session, real_settings, email_sender=sender)
            reloaded = await service.get_dossier(dossier.id)
            assert reloaded.score == 82
            assert [c.candidate_id for c in reloaded.candidates] == [candidate.id]

            page = await service.list_candidates(search="durand")
            assert page.pagination.total == 1
            assert page.items[0].first_name == "Paul"

            stats = await service.dashboard_stats()
            assert stats.total_dossiers == 1
            assert stats.total_candidates == 2
            assert stats.active_clients == 1
            assert stats.pending_invitations == 1
            assert stats.recent_dossiers[0].client == "Banque du Nord"

    async def test_accepted_invitation_is_persisted(
        self,
        real_settings: Settings,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        """Accepting an invitation is committed and reflected in stats."""
        async with session_factory() as session:
            service = WorkspaceService(session, real_settings, email_sender=FakeEmailSender())
            invitation = await service.invite_candidate("nina@example.fr")
            await session.commit()

        async with session_factory() as session:
            service = WorkspaceService(session, real_settings, email_sender=FakeEmailSender())
            accepted = await service.accept_invitation(invitation.token)
            await session.commit()
        assert accepted.status == "accepted"

        async with session_factory() as session:
            service = WorkspaceService(session, real_settings, email_sender=FakeEmailSender())
            stats = await service.dashboard_stats()
        assert stats.pending_invitations == 0
        assert stats.recent_invitations[0].status == "accepted"
