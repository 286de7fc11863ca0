"""
Repository base classes.

Every table repository extends ``SQLModelRepository`` and adds its own
queries. Repositories only ``flush``: the service that owns the unit of work
decides when to ``commit``, so multi-table flows such as checkout stay atomic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

EntityType = TypeVar("EntityType", bound=SQLModel)


def apply_filters(stmt, model: Type[SQLModel], filters: Optional[Dict[str, Any]]):
    """Add ``column == value`` conditions; unknown columns and ``None`` values are ignored."""
    for column, value in (filters or {}).items():
        if value is None or not hasattr(model, column):
            continue
        stmt = stmt.where(getattr(model, column) == value)
    return stmt


class AsyncBaseRepository(ABC, Generic[EntityType]):
    """CRUD contract shared by the table repositories.

    Args:
        session: Session of the calling service's unit of work
        model: Table class handled by the repository
    """

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        self.session = session
        self.model = model

    @abstractmethod
    async def create(self, entity: EntityType) -> EntityType:
        """Insert ``entity`` and return it with database defaults loaded."""

    @abstractmethod
    async def get_by_id(self, entity_id: str) -> Optional[EntityType]: ...

    @abstractmethod
    async def update(self, entity: EntityType) -> EntityType: ...

    @abstractmethod
    async def delete(self, entity_id: str) -> bool:
        """Delete by primary key; False when no row matched."""

    @abstractmethod
    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]: ...


class SQLModelRepository(AsyncBaseRepository[EntityType]):
    async def _save(self, entity: EntityType) -> EntityType:
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def create(self, entity: EntityType) -> EntityType:
        return await self._save(entity)

    async def get_by_id(self, entity_id: str) -> Optional[EntityType]:
        return await self.session.get(self.model, entity_id)

    async def update(self, entity: EntityType) -> EntityType:
        return await self._save(entity)

    async def delete(self, entity_id: str) -> bool:
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        await self.session.flush()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """Rows matching ``filters``, newest first when the table has ``created_at``."""
        stmt = apply_filters(select(self.model), self.model, filters)
        if hasattr(self.model, "created_at"):
            stmt = stmt.order_by(self.model.created_at.desc())  # type: ignore[attr-defined]
        if offset is not None:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        stmt = apply_filters(select(func.count()).select_from(self.model), self.model, filters)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
