"""Client repository for database operations."""

from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from cvmatch_infra.db.models import ClientModel


class ClientRepository:
    """CRUD operations for clients and their contacts."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize with an async session."""
        self._session = session

    async def get_by_id(self, client_id: str) -> ClientModel | None:
        """Retrieve a client (with contacts) by ID."""
        return await self._session.get(ClientModel, client_id)

    async def create(self, model: ClientModel) -> ClientModel:
        """Create a client; contacts attached to the model are saved with it."""
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model, attribute_names=["contacts"])
        return model

    async def list_page(
        self,
        search: str | None = None,
        status: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[ClientModel], int]:
        """List clients matching filters, newest update first, with total count."""
        conditions = []
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(ClientModel.name.ilike(pattern), ClientModel.sector.ilike(pattern))
            )
        if status:
            conditions.append(ClientModel.status == status)

        stmt = (
            select(ClientModel)
            .where(*conditions)
            .order_by(ClientModel.updated_at.desc())
            .limit(limit)
            .offset(offset)
        )
        count_stmt = select(func.count()).select_from(ClientModel).where(*conditions)
        result = await self._session.execute(stmt)
        total = await self._session.scalar(count_stmt)
        return list(result.scalars().all()), int(total or 0)

    async def update(self, model: ClientModel, **fields: object) -> ClientModel:
        """Apply field updates to a client."""
        for key, value in fields.items():
            setattr(model, key, value)
        await self._session.flush()
        return model

    async def delete(self, model: ClientModel) -> None:
        """Delete a client and its contacts."""
        await self._session.delete(model)
        await self._session.flush()

    async def count(self, status: str | None = None) -> int:
        """Count clients, optionally by status."""
        stmt = select(func.count()).select_from(ClientModel)
        if status:
            stmt = stmt.where(ClientModel.status == status)
        return int(await self._session.scalar(stmt) or 0)
