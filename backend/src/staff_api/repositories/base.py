"""Base repository with common database operations."""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staff_api.models.orm.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository with common CRUD operations."""

    model: type[T]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def get(self, id: UUID) -> T | None:
        """Get a record by ID.

        Args:
            id: Record UUID

        Returns:
            Record or None if not found
        """
        result = await self.session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_by_id(self, id: UUID) -> T | None:
        """Get a record by ID (alias for get)."""
        return await self.get(id)

    async def get_by_ids(self, ids: list[UUID]) -> dict[UUID, T]:
        """Get multiple records by their IDs in a single query.

        Args:
            ids: List of record UUIDs

        Returns:
            Dict mapping record ID to record
        """
        if not ids:
            return {}
        result = await self.session.execute(select(self.model).where(self.model.id.in_(set(ids))))
        return {row.id: row for row in result.scalars().all()}

    async def create(self, **kwargs: Any) -> T:
        """Create a new record.

        Args:
            **kwargs: Field values

        Returns:
            Created record
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance
