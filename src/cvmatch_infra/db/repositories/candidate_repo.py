"""Candidate repository for database operations."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from cvmatch_core.exceptions import DuplicateError
from cvmatch_infra.db.models import CandidateModel


class CandidateRepository:
    """CRUD operations for candidates."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize with an async session."""
        self._session = session

    async def get_by_id(self, candidate_id: str) -> CandidateModel | None:
        """Retrieve a candidate by ID."""
        return await self._session.get(CandidateModel, candidate_id)

    async def get_by_email(self, email: str) -> CandidateModel | None:
        """Retrieve a candidate by email (case-insensitive)."""
        stmt = select(CandidateModel).where(func.lower(CandidateModel.email) == email.lower())
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, model: CandidateModel) -> CandidateModel:
        """Create a new candidate.

        Raises:
            DuplicateError: If a candidate with the same email exists.
        """
        if await self.get_by_email(model.email):
            msg = f"Candidate already exists: {model.email}"
            raise DuplicateError(msg)
        self._session.add(model)
        await self._session.flush()
        return model

    async def upsert_by_email(self, model: CandidateModel) -> tuple[CandidateModel, bool]:
        """Create a candidate, or update names of the one with the same email.

        Returns the stored model and whether it was created.
        """
        existing = await self.get_by_email(model.email)
        if existing:
            existing.first_name = model.first_name
            existing.last_name = model.last_name
            await self._session.flush()
            return existing, False
        return await self.create(model), True

    async def list_page(
        self,
        search: str | None = None,
        status: str | None = None,
        availability: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[CandidateModel], int]:
        """List candidates matching filters, newest update first, with total count."""
        conditions = []
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(
                    CandidateModel.first_name.ilike(pattern),
                    CandidateModel.last_name.ilike(pattern),
                    CandidateModel.title.ilike(pattern),
                    CandidateModel.email.ilike(pattern),
                )
            )
        if status:
            conditions.append(CandidateModel.status == status)
        if availability:
            conditions.append(CandidateModel.availability == availability)

        stmt = (
            select(CandidateModel)
            .where(*conditions)
            .order_by(CandidateModel.updated_at.desc())
            .limit(limit)
            .offset(offset)
        )
        count_stmt = select(func.count()).select_from(CandidateModel).where(*conditions)
        result = await self._session.execute(stmt)
        total = await self._session.scalar(count_stmt)
        return list(result.scalars().all()), int(total or 0)

    async def list_recent(self, limit: int = 5) -> list[CandidateModel]:
        """List most recently created candidates."""
        stmt = select(CandidateModel).order_by(CandidateModel.created_at.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, model: CandidateModel, **fields: object) -> CandidateModel:
        """Apply field updates to a candidate."""
        for key, value in fields.items():
            setattr(model, key, value)
        await self._session.flush()
        return model

    async def delete(self, model: CandidateModel) -> None:
        """Delete a candidate."""
        await self._session.delete(model)
        await self._session.flush()

    async def count(self, created_since: datetime | None = None) -> int:
        """Count candidates, optionally only those created since a date."""
        stmt = select(func.count()).select_from(CandidateModel)
        if created_since is not None:
            stmt = stmt.where(CandidateModel.created_at >= created_since)
        return int(await self._session.scalar(stmt) or 0)
