"""Invitation repository for database operations."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cvmatch_core.constants import INVITATION_STATUSES
from cvmatch_core.exceptions import ValidationFailedError
from cvmatch_infra.db.models import InvitationModel


class InvitationRepository:
    """CRUD operations for candidate invitations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize with an async session."""
        self._session = session

    async def create(self, model: InvitationModel) -> InvitationModel:
        """Create a new invitation."""
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model, attribute_names=["candidate"])
        return model

    async def get_by_token(self, token: str) -> InvitationModel | None:
        """Retrieve an invitation by its token."""
        stmt = select(InvitationModel).where(InvitationModel.token == token)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_recent(self, limit: int = 5) -> list[InvitationModel]:
        """List most recently sent invitations."""
        stmt = select(InvitationModel).order_by(InvitationModel.sent_at.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count_pending(self) -> int:
        """Count invitations still awaiting an answer."""
        stmt = (
            select(func.count())
            .select_from(InvitationModel)
            .where(InvitationModel.status == "pending")
        )
        return int(await self._session.scalar(stmt) or 0)

    async def list_expiring(self, before: datetime, limit: int = 5) -> list[InvitationModel]:
        """List pending invitations expiring before the given date."""
        stmt = (
            select(InvitationModel)
            .where(
                InvitationModel.status == "pending",
                InvitationModel.expires_at <= before,
            )
            .order_by(InvitationModel.expires_at.asc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def set_status(
        self,
        model: InvitationModel,
        status: str,
        accepted_at: datetime | None = None,
    ) -> InvitationModel:
        """Move an invitation to a new status."""
        if status not in INVITATION_STATUSES:
            msg = f"Unknown invitation status: {status}"
            raise ValidationFailedError(msg)
        model.status = status
        if accepted_at is not None:
            model.accepted_at = accepted_at
        await self._session.flush()
        return model
