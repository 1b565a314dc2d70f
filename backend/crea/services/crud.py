"""
Generic CRUD service shared by the simple portal resources.

Every resource behaves the same way:
- create persists and returns the record with its generated id
- update applies only the provided fields (unchanged fields stay as they are)
- delete removes the record; later reads raise ResourceNotFoundError
"""
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import Base
from crea.core.exceptions import ResourceNotFoundError

ModelType = TypeVar("ModelType", bound=Base)


class CRUDService(Generic[ModelType]):
    """Async CRUD operations for one model"""

    def __init__(self, model: Type[ModelType], resource_name: str, default_order=None):
        self.model = model
        self.resource_name = resource_name
        self.default_order = default_order if default_order is not None else model.created_at.desc()

    async def list(self, db: AsyncSession, *criteria, order_by=None) -> List[ModelType]:
        query = select(self.model)
        if criteria:
            query = query.where(*criteria)
        order = order_by if order_by is not None else self.default_order
        if isinstance(order, (list, tuple)):
            query = query.order_by(*order)
        else:
            query = query.order_by(order)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_or_none(self, db: AsyncSession, record_id: str) -> Optional[ModelType]:
        return await db.get(self.model, str(record_id))

    async def get(self, db: AsyncSession, record_id: str) -> ModelType:
        obj = await self.get_or_none(db, record_id)
        if obj is None:
            raise ResourceNotFoundError(self.resource_name, str(record_id))
        return obj

    async def create(self, db: AsyncSession, data: Dict[str, Any]) -> ModelType:
        obj = self.model(**data)
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
        return obj

    async def update(self, db: AsyncSession, record_id: str, data: Dict[str, Any]) -> ModelType:
        obj = await self.get(db, record_id)
        return await self.apply(db, obj, data)

    async def apply(self, db: AsyncSession, obj: ModelType, data: Dict[str, Any]) -> ModelType:
        """Set changed attributes on an already loaded record and commit"""
        changed = False
        for field, value in data.items():
            if getattr(obj, field) != value:
                setattr(obj, field, value)
                changed = True
        if changed:
            await db.commit()
            await db.refresh(obj)
        return obj

    async def delete(self, db: AsyncSession, record_id: str) -> ModelType:
        obj = await self.get(db, record_id)
        await db.delete(obj)
        await db.commit()
        return obj
