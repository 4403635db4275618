from typing import Any, Generic, Sequence, TypeVar
import logging

from azure.cosmos.aio import ContainerProxy
from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceNotFoundError
from pydantic.alias_generators import to_camel, to_snake

from cache_admin.domain.exceptions import DatabaseError
from cache_admin.infrastructure.database.base_model import Document, utcnow
from cache_admin.interfaces import IRepository

T = TypeVar("T", bound=Document)

logger = logging.getLogger(__name__)


def to_document(entity: Document) -> dict[str, Any]:
    """Serialize an entity to a camelCase JSON document."""
    return {to_camel(key): value for key, value in entity.model_dump(mode="json").items()}


def from_document(model: type[T], document: dict[str, Any]) -> T:
    """Build an entity from a stored document, dropping Cosmos system fields."""
    data = {
        to_snake(key): value
        for key, value in document.items()
        if not key.startswith("_")
    }
    return model.model_validate(data)


class CosmosDocumentRepository(IRepository[T], Generic[T]):
    """
    Document repository over one Cosmos container.

    All documents of the model share ``model.__partition_key__``, so every
    point read and query is a single-partition operation.
    """

    def __init__(self, model: type[T], container: ContainerProxy):
        self.model = model
        self.container = container

    @property
    def partition_key(self) -> str:
        return self.model.__partition_key__

    async def get_all(self) -> Sequence[T]:
        return await self.query()

    async def get_by_id(self, id: str) -> T | None:
        try:
            document = await self.container.read_item(item=id, partition_key=self.partition_key)
        except CosmosResourceNotFoundError:
            return None
        except CosmosHttpResponseError as e:
            raise DatabaseError(details={"status_code": e.status_code}) from e
        return from_document(self.model, document)

    async def create(self, entity: T) -> T:
        now = utcnow()
        entity.partition_key = self.partition_key
        entity.created_at = now
        entity.updated_at = now
        try:
            document = await self.container.create_item(body=to_document(entity))
        except CosmosHttpResponseError as e:
            raise DatabaseError(details={"status_code": e.status_code}) from e
        return from_document(self.model, document)

    async def update(self, entity: T) -> T:
        entity.updated_at = utcnow()
        try:
            document = await self.container.replace_item(item=entity.id, body=to_document(entity))
        except CosmosHttpResponseError as e:
            raise DatabaseError(details={"status_code": e.status_code}) from e
        return from_document(self.model, document)

    async def delete(self, id: str) -> bool:
        try:
            await self.container.delete_item(item=id, partition_key=self.partition_key)
        except CosmosResourceNotFoundError:
            return False
        except CosmosHttpResponseError as e:
            raise DatabaseError(details={"status_code": e.status_code}) from e
        return True

    def build_query(self, filters: dict[str, Any]) -> tuple[str, list[dict[str, Any]]]:
        """
        Translate ``field=value``, ``field__ne=value`` and ``field__in=[...]``
        filters to Cosmos SQL.

        Raises:
            ValueError: On an unknown field or operator
        """
        clauses = ["c.partitionKey = @partitionKey"]
        parameters: list[dict[str, Any]] = [{"name": "@partitionKey", "value": self.partition_key}]

        for index, (key, value) in enumerate(filters.items()):
            if "__" in key:
                field_name, operator = key.rsplit("__", 1)
            else:
                field_name, operator = key, "eq"

            if field_name not in self.model.model_fields:
                raise ValueError(f"{self.model.__name__} has no field '{field_name}'")
            if operator not in ("eq", "ne", "in"):
                raise ValueError(f"Unsupported filter operator '{operator}'")

            param = f"@p{index}"
            column = f"c.{to_camel(field_name)}"
            if operator == "in":
                clauses.append(f"ARRAY_CONTAINS({param}, {column})")
                value = list(value)
            else:
                comparison = "=" if operator == "eq" else "!="
                clauses.append(f"{column} {comparison} {param}")
            parameters.append({"name": param, "value": value})

        query = "SELECT * FROM c WHERE " + " AND ".join(clauses) + " ORDER BY c.createdAt"
        return query, parameters

    async def query(self, **filters: Any) -> Sequence[T]:
        query, parameters = self.build_query(filters)
        logger.debug(f"Cosmos query on {self.container.id}: {query}")
        try:
            items = self.container.query_items(
                query=query,
                parameters=parameters,
                partition_key=self.partition_key,
            )
            return [from_document(self.model, document) async for document in items]
        except CosmosHttpResponseError as e:
            raise DatabaseError(details={"status_code": e.status_code}) from e
