# src/cache_admin/infrastructure/database/repositories/base.py
from typing import TypeVar, Generic, Sequence, Any

from sqlalchemy import select, Select
from sqlalchemy.ext.asyncio import AsyncSession

from cache_admin.infrastructure.database.base_model import Document, utcnow
from cache_admin.interfaces import IRepository

T = TypeVar("T", bound=Document)


class SqlDocumentRepository(IRepository[T], Generic[T]):
    """
    Document repository over one SQL table.

    Every document of the model lives under ``model.__partition_key__``; the
    value is written on create and used to scope reads, mirroring how the
    same documents are laid out in Cosmos.

    Example:
        agents = SqlDocumentRepository(Agent, session)
        agent = await agents.first(api_key=key, is_api_key_active=True)
    """

    def __init__(self, model: type[T], session: AsyncSession):
        self.model = model
        self.session = session

    @property
    def partition_key(self) -> str:
        return self.model.__partition_key__

    async def get_all(self) -> Sequence[T]:
        query = select(self.model).order_by(self.model.created_at)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def get_by_id(self, id: str) -> T | None:
        return await self.session.get(self.model, id)

    async def create(self, entity: T) -> T:
        """
        Create new document.

        Assigns the partition key and both timestamps; an explicit ``id`` on
        the entity is kept.
        """
        now = utcnow()
        entity.partition_key = self.partition_key
        entity.created_at = now
        entity.updated_at = now
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def update(self, entity: T) -> T:
        """Write every field of ``entity`` back and refresh ``updated_at``."""
        entity.updated_at = utcnow()
        entity = await self.session.merge(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def delete(self, id: str) -> bool:
        entity = await self.get_by_id(id)
        if not entity:
            return False

        await self.session.delete(entity)
        await self.session.flush()
        return True

    async def query(self, **filters: Any) -> Sequence[T]:
        query = select(self.model).where(self.model.partition_key == self.partition_key)
        query = self.apply_filters(query, filters)
        query = query.order_by(self.model.created_at)

        result = await self.session.execute(query)
        return result.scalars().all()

    def apply_filters(self, query: Select, filters: dict) -> Select:
        """
        Apply filters to a query with operator support.

        Supported operators:
        - eq: Equal (field=value or field__eq=value)
        - ne: Not equal (field__ne=value)
        - in: IN clause (field__in=[value1, value2])

        Raises:
            ValueError: On an unknown field or operator
        """
        for key, value in filters.items():
            if "__" in key:
                field_name, operator = key.rsplit("__", 1)
            else:
                field_name, operator = key, "eq"

            if field_name not in self.model.model_fields:
                raise ValueError(f"{self.model.__name__} has no field '{field_name}'")

            field = getattr(self.model, field_name)

            if operator == "eq":
                query = query.where(field == value)
            elif operator == "ne":
                query = query.where(field != value)
            elif operator == "in":
                query = query.where(field.in_(value))
            else:
                raise ValueError(f"Unsupported filter operator '{operator}'")

        return query
