from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Sequence, Any

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """
    Generic document repository.

    One repository serves one entity type stored under a fixed partition key.
    ``get_by_id`` returns None for a missing document; callers check existence
    before ``update`` and ``delete``.

    Filters passed to ``query`` are ``field=value`` (equality),
    ``field__ne=value`` (inequality) or ``field__in=[...]`` (membership) and
    are always bound as parameters.
    """

    @abstractmethod
    async def get_all(self) -> Sequence[T]:
        """Get every document of this type."""
        pass

    @abstractmethod
    async def get_by_id(self, id: str) -> T | None:
        """Get document by ID."""
        pass

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Create new document."""
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Replace an existing document (last write wins)."""
        pass

    @abstractmethod
    async def delete(self, id: str) -> bool:
        """Delete document by ID. Returns False if nothing was deleted."""
        pass

    @abstractmethod
    async def query(self, **filters: Any) -> Sequence[T]:
        """Get documents matching all filters."""
        pass

    async def first(self, **filters: Any) -> T | None:
        """Get the first document matching all filters, if any."""
        results = await self.query(**filters)
        return results[0] if results else None
