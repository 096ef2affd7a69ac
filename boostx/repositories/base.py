"""
Base repository.

Generic async data access shared by all repositories.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from boostx.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with generic operations.

    Example:
        class WalletRepository(BaseRepository[Wallet]):
            def __init__(self, session: AsyncSession):
                super().__init__(Wallet, session)
    """

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        self.model = model
        self.session = session

    async def get_by_id(self, id: int) -> ModelType | None:
        """Get entity by primary key."""
        return await self.session.get(self.model, id)

    async def get_by(self, **filters: Any) -> ModelType | None:
        """
        Get single entity by column filters.

        Returns:
            Matching entity or None
        """
        stmt = select(self.model).filter_by(**filters)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_all(self, limit: int | None = None, **filters: Any) -> list[ModelType]:
        """
        Find all entities matching filters, ordered by primary key.

        Args:
            limit: Max number of results
            **filters: Column filters

        Returns:
            List of matching entities
        """
        stmt = select(self.model).filter_by(**filters).order_by(self.model.id)
        if limit:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, **data: Any) -> ModelType:
        """
        Create new entity and flush it so database defaults are populated.

        Args:
            **data: Column values

        Returns:
            Created entity
        """
        entity = self.model(**data)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def count(self, **filters: Any) -> int:
        """Count entities matching filters."""
        stmt = select(func.count()).select_from(self.model)
        if filters:
            stmt = stmt.filter_by(**filters)

        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def exists(self, **filters: Any) -> bool:
        """Check whether any entity matches filters."""
        return await self.count(**filters) > 0
