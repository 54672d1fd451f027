"""Notification repository for database operations."""

from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cvmatch_infra.db.models import NotificationModel


class NotificationRepository:
    """Create and read in-app notifications."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize with an async session."""
        self._session = session

    async def create(self, model: NotificationModel) -> NotificationModel:
        """Create a notification."""
        self._session.add(model)
        await self._session.flush()
        return model

    async def count_unread(self) -> int:
        """Count unread notifications."""
        stmt = (
            select(func.count())
            .select_from(NotificationModel)
            .where(NotificationModel.read.is_(False))
        )
        return int(await self._session.scalar(stmt) or 0)

    async def list_unread(self, limit: int = 20) -> list[NotificationModel]:
        """List unread notifications, newest first."""
        stmt = (
            select(NotificationModel)
            .where(NotificationModel.read.is_(False))
            .order_by(NotificationModel.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def mark_all_read(self) -> int:
        """Mark every unread notification as read; return how many changed."""
        stmt = (
            update(NotificationModel)
            .where(NotificationModel.read.is_(False))
            .values(read=True)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return int(result.rowcount or 0)
