"""Base classes and common patterns for the application repositories."""
from abc import ABC
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.shared.entities.base import BaseEntity

T = TypeVar("T", bound=BaseEntity)


class BaseRepository(ABC, Generic[T]):
    """Base repository with the append/read operations shared by all stores."""

    model: Type[T]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entity: T) -> T:
        """Create new entity."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: int) -> Optional[T]:
        """Get entity by ID."""
        stmt = select(self.model).where(self.model.id == entity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_field(
        self, field_name: str, value: Any, limit: Optional[int] = None
    ) -> List[T]:
        """Get entities by field value."""
        field = getattr(self.model, field_name)
        stmt = select(self.model).where(field == value).order_by(self.model.id)

        if limit:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def exists(self, entity_id: int) -> bool:
        """Check if entity exists."""
        stmt = select(self.model.id).where(self.model.id == entity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def count(self, **filters: Any) -> int:
        """Count entities with filters."""
        stmt = select(func.count(self.model.id))

        for field_name, value in filters.items():
            if hasattr(self.model, field_name) and value is not None:
                field = getattr(self.model, field_name)
                if isinstance(value, (list, tuple)):
                    stmt = stmt.where(field.in_(value))
                else:
                    stmt = stmt.where(field == value)

        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)
