"""
Unit tests for the Cosmos document repository.

Runs against an in-memory container that understands the queries the
repository builds (equality, inequality and ARRAY_CONTAINS on bound
parameters).
"""

import re
from typing import Any, Optional

import pytest
from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceNotFoundError

from cache_admin.domain.exceptions import DatabaseError
from cache_admin.infrastructure.cosmos import CosmosDocumentRepository
from cache_admin.infrastructure.cosmos.repository import from_document, to_document
from cache_admin.infrastructure.database.models import Agent, Service, User
from tests.factories import AgentFactory, ServiceFactory, UserFactory

pytestmark = pytest.mark.unit

CLAUSE = re.compile(r"^(?:c\.(\w+) (=|!=) (@\w+)|ARRAY_CONTAINS\((@\w+), c\.(\w+)\))$")


class InMemoryContainer:
    """Mock Cosmos container keyed by (partition key, id)."""

    def __init__(self, container_id: str = "test"):
        self.id = container_id
        self.items: dict[tuple[str, str], dict[str, Any]] = {}
        self.queries: list[tuple[str, list, Optional[str]]] = []
        self.fail_with: Optional[Exception] = None

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    async def read_item(self, item: str, partition_key: str) -> dict:
        self._check()
        try:
            return dict(self.items[(partition_key, item)], _rid="rid", _etag="etag", _ts=1)
        except KeyError:
            raise CosmosResourceNotFoundError(status_code=404, message="Entity with the specified id does not exist")

    async def create_item(self, body: dict) -> dict:
        self._check()
        self.items[(body["partitionKey"], body["id"])] = dict(body)
        return dict(body, _rid="rid", _etag="etag", _ts=1)

    async def replace_item(self, item: str, body: dict) -> dict:
        self._check()
        key = (body["partitionKey"], item)
        if key not in self.items:
            raise CosmosResourceNotFoundError(status_code=404, message="Not found")
        self.items[key] = dict(body)
        return dict(body, _etag="etag2")

    async def delete_item(self, item: str, partition_key: str) -> None:
        self._check()
        if self.items.pop((partition_key, item), None) is None:
            raise CosmosResourceNotFoundError(status_code=404, message="Not found")

    def query_items(self, query: str, parameters: list, partition_key: Optional[str] = None):
        self._check()
        self.queries.append((query, parameters, partition_key))
        values = {p["name"]: p["value"] for p in parameters}
        where = query.split(" WHERE ", 1)[1].split(" ORDER BY ")[0]

        def matches(doc: dict) -> bool:
            for clause in where.split(" AND "):
                field, op, param, in_param, in_field = CLAUSE.match(clause).groups()
                if in_param:
                    if doc.get(in_field) not in values[in_param]:
                        return False
                elif op == "=" and doc.get(field) != values[param]:
                    return False
                elif op == "!=" and doc.get(field) == values[param]:
                    return False
            return True

        async def results():
            for doc in sorted(self.items.values(), key=lambda d: d["createdAt"]):
                if matches(doc):
                    yield dict(doc, _rid="rid")

        return results()


@pytest.fixture
def container() -> InMemoryContainer:
    return InMemoryContainer("agents")


@pytest.fixture
def agents(container) -> CosmosDocumentRepository[Agent]:
    return CosmosDocumentRepository(Agent, container)


class TestDocumentMapping:

    def test_to_document_uses_camel_case(self):
        service = ServiceFactory.build(agent_id="a1")

        document = to_document(service)

        assert document["agentId"] == "a1"
        assert "partitionKey" in document
        assert "createdAt" in document
        assert "agent_id" not in document

    def test_from_document_drops_system_fields(self):
        user = UserFactory.build(linked_service_names=["orders"])
        document = dict(to_document(user), _rid="x", _self="y", _etag="z", _attachments="a", _ts=1)

        restored = from_document(User, document)

        assert restored.id == user.id
        assert restored.linked_service_names == ["orders"]
        assert restored.email == user.email


class TestCosmosDocumentRepository:

    async def test_create_sets_partition_key_and_timestamps(self, agents, container):
        agent = await agents.create(AgentFactory.build())

        assert agent.partition_key == "agents"
        assert agent.created_at == agent.updated_at
        assert ("agents", agent.id) in container.items

    async def test_get_by_id(self, agents):
        created = await agents.create(AgentFactory.build(name="edge"))

        found = await agents.get_by_id(created.id)

        assert found is not None
        assert found.name == "edge"

    async def test_get_by_id_missing_returns_none(self, agents):
        assert await agents.get_by_id("missing") is None

    async def test_update_replaces_document(self, agents, container):
        agent = await agents.create(AgentFactory.build(name="before"))
        agent.name = "after"

        updated = await agents.update(agent)

        assert updated.name == "after"
        assert updated.updated_at >= updated.created_at
        assert container.items[("agents", agent.id)]["name"] == "after"

    async def test_delete(self, agents):
        agent = await agents.create(AgentFactory.build())

        assert await agents.delete(agent.id) is True
        assert await agents.delete(agent.id) is False
        assert await agents.get_by_id(agent.id) is None

    async def test_query_binds_parameters(self, agents, container):
        key = "key-with-'quote"
        await agents.create(AgentFactory.build(api_key=key))

        found = await agents.first(api_key=key, is_api_key_active=True)

        query, parameters, partition_key = container.queries[-1]
        assert found is not None
        assert key not in query
        assert query == (
            "SELECT * FROM c WHERE c.partitionKey = @partitionKey "
            "AND c.apiKey = @p0 AND c.isApiKeyActive = @p1 ORDER BY c.createdAt"
        )
        assert {"name": "@p0", "value": key} in parameters
        assert partition_key == "agents"

    async def test_query_inactive_key_not_found(self, agents):
        agent = await agents.create(AgentFactory.build(is_api_key_active=False))

        assert await agents.first(api_key=agent.api_key, is_api_key_active=True) is None

    async def test_query_not_equal_and_in(self):
        users = CosmosDocumentRepository(User, InMemoryContainer("users"))
        first = await users.create(UserFactory.build(email="a@example.com"))
        await users.create(UserFactory.build(email="b@example.com"))

        others = await users.query(email="a@example.com", id__ne=first.id)
        picked = await users.query(email__in=["a@example.com", "b@example.com"])

        assert others == []
        assert {user.email for user in picked} == {"a@example.com", "b@example.com"}

    async def test_unknown_field_is_rejected(self, agents):
        with pytest.raises(ValueError):
            await agents.query(colour="blue")

    async def test_store_failure_becomes_database_error(self, agents, container):
        container.fail_with = CosmosHttpResponseError(status_code=503, message="Service unavailable")

        with pytest.raises(DatabaseError):
            await agents.get_by_id("any")
