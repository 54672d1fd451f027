"""Dossier repository for database operations."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from cvmatch_infra.db.models import DossierCandidateModel, DossierModel


class DossierRepository:
    """CRUD operations for dossiers and their candidate links."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize with an async session."""
        self._session = session

    async def get_by_id(self, dossier_id: str) -> DossierModel | None:
        """Retrieve a dossier with its client and candidate links."""
        return await self._session.get(DossierModel, dossier_id)

    async def get_by_reference(self, reference: str) -> DossierModel | None:
        """Retrieve a dossier by its human-readable reference."""
        stmt = select(DossierModel).where(DossierModel.reference == reference)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, model: DossierModel) -> DossierModel:
        """Create a new dossier."""
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model, attribute_names=["client", "candidates"])
        return model

    async def list_page(
        self,
        search: str | None = None,
        status: str | None = None,
        client_id: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[DossierModel], int]:
        """List dossiers matching filters, newest update first, with total count."""
        conditions = []
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(DossierModel.title.ilike(pattern), DossierModel.reference.ilike(pattern))
            )
        if status:
            conditions.append(DossierModel.status == status)
        if client_id:
            conditions.append(DossierModel.client_id == client_id)

        stmt = (
            select(DossierModel)
            .where(*conditions)
            .order_by(DossierModel.updated_at.desc())
            .limit(limit)
            .offset(offset)
        )
        count_stmt = select(func.count()).select_from(DossierModel).where(*conditions)
        result = await self._session.execute(stmt)
        total = await self._session.scalar(count_stmt)
        return list(result.scalars().all()), int(total or 0)

    async def update(self, model: DossierModel, **fields: object) -> DossierModel:
        """Apply field updates to a dossier."""
        for key, value in fields.items():
            setattr(model, key, value)
        await self._session.flush()
        return model

    async def delete(self, model: DossierModel) -> None:
        """Delete a dossier and its candidate links."""
        await self._session.delete(model)
        await self._session.flush()

    async def attach_candidate(
        self,
        dossier: DossierModel,
        candidate_id: str,
        score: float | None = None,
    ) -> DossierCandidateModel:
        """Link a candidate to a dossier, updating the score if already linked.

        The dossier score tracks the best candidate score.
        """
        link = next((c for c in dossier.candidates if c.candidate_id == candidate_id), None)
        if link is None:
            link = DossierCandidateModel(
                dossier_id=dossier.id, candidate_id=candidate_id, score=score
            )
            dossier.candidates.append(link)
        else:
            link.score = score

        dossier.matched_profiles = len(dossier.candidates)
        scores = [c.score for c in dossier.candidates if c.score is not None]
        dossier.score = max(scores) if scores else None
        await self._session.flush()
        return link

    async def count(
        self,
        status: str | None = None,
        created_since: datetime | None = None,
    ) -> int:
        """Count dossiers, optionally by status and creation date."""
        stmt = select(func.count()).select_from(DossierModel)
        if status:
            stmt = stmt.where(DossierModel.status == status)
        if created_since is not None:
            stmt = stmt.where(DossierModel.created_at >= created_since)
        return int(await self._session.scalar(stmt) or 0)

    async def list_recent(
        self,
        limit: int = 10,
        status: str | None = None,
    ) -> list[DossierModel]:
        """List most recently updated dossiers, optionally by status."""
        stmt = select(DossierModel)
        if status:
            stmt = stmt.where(DossierModel.status == status)
        stmt = stmt.order_by(DossierModel.updated_at.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_low_score(self, threshold: float, limit: int = 5) -> list[DossierModel]:
        """List dossiers whose score is below threshold."""
        stmt = (
            select(DossierModel)
            .where(DossierModel.score.isnot(None), DossierModel.score < threshold)
            .order_by(DossierModel.score.asc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_stale(self, updated_before: datetime, limit: int = 5) -> list[DossierModel]:
        """List in-progress dossiers not updated since updated_before."""
        stmt = (
            select(DossierModel)
            .where(
                DossierModel.status == "inProgress",
                DossierModel.updated_at < updated_before,
            )
            .order_by(DossierModel.updated_at.asc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
