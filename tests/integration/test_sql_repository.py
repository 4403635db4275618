"""
Integration tests for the SQL document repository on SQLite.
"""

import pytest

from cache_admin.domain.exceptions import DatabaseError
from cache_admin.infrastructure.database import db
from cache_admin.infrastructure.storage import open_repositories
from tests.factories import AgentFactory, ServiceFactory, UserFactory

pytestmark = pytest.mark.integration


async def test_create_assigns_partition_key_and_timestamps(database):
    async with open_repositories() as repos:
        agent = await repos.agents.create(AgentFactory.build())

    assert agent.partition_key == "agents"
    assert agent.created_at is not None
    assert agent.created_at == agent.updated_at


async def test_documents_persist_across_units_of_work(database):
    async with open_repositories() as repos:
        created = await repos.services.create(ServiceFactory.build(name="orders"))

    async with open_repositories() as repos:
        found = await repos.services.get_by_id(created.id)

    assert found is not None
    assert found.name == "orders"
    assert found.partition_key == "services"


async def test_get_by_id_missing_returns_none(database):
    async with open_repositories() as repos:
        assert await repos.users.get_by_id("does-not-exist") is None


async def test_update_refreshes_updated_at(database):
    async with open_repositories() as repos:
        agent = await repos.agents.create(AgentFactory.build(name="before"))
        created_at = agent.created_at

    async with open_repositories() as repos:
        agent = await repos.agents.get_by_id(agent.id)
        agent.name = "after"
        updated = await repos.agents.update(agent)

    assert updated.name == "after"
    assert updated.updated_at >= created_at


async def test_linked_service_names_round_trip(database):
    async with open_repositories() as repos:
        user = await repos.users.create(UserFactory.build(linked_service_names=["a", "b"]))

    async with open_repositories() as repos:
        user = await repos.users.get_by_id(user.id)
        user.linked_service_names = [*user.linked_service_names, "c"]
        await repos.users.update(user)

    async with open_repositories() as repos:
        assert (await repos.users.get_by_id(user.id)).linked_service_names == ["a", "b", "c"]


async def test_delete_reports_whether_anything_was_removed(database):
    async with open_repositories() as repos:
        agent = await repos.agents.create(AgentFactory.build())

    async with open_repositories() as repos:
        assert await repos.agents.delete(agent.id) is True

    async with open_repositories() as repos:
        assert await repos.agents.delete(agent.id) is False


async def test_query_filters(database):
    async with open_repositories() as repos:
        active = await repos.agents.create(AgentFactory.build(is_api_key_active=True))
        inactive = await repos.agents.create(AgentFactory.build(is_api_key_active=False))

        assert await repos.agents.first(api_key=active.api_key, is_api_key_active=True) == active
        assert await repos.agents.first(api_key=inactive.api_key, is_api_key_active=True) is None
        assert [a.id for a in await repos.agents.query(id__ne=active.id)] == [inactive.id]
        assert len(await repos.agents.query(id__in=[active.id, inactive.id])) == 2


async def test_query_value_is_bound_not_interpolated(database):
    async with open_repositories() as repos:
        await repos.users.create(UserFactory.build(email="a@example.com"))

        assert await repos.users.query(email="' OR '1'='1") == []


async def test_get_all_ordered_by_creation(database):
    async with open_repositories() as repos:
        names = ["first", "second", "third"]
        for name in names:
            await repos.services.create(ServiceFactory.build(name=name))

    async with open_repositories() as repos:
        assert [s.name for s in await repos.services.get_all()] == names


async def test_unknown_filter_field_raises(database):
    async with open_repositories() as repos:
        with pytest.raises(ValueError):
            await repos.services.query(colour="blue")


async def test_failed_unit_of_work_is_rolled_back(database):
    with pytest.raises(RuntimeError):
        async with open_repositories() as repos:
            await repos.agents.create(AgentFactory.build(name="ghost"))
            raise RuntimeError("handler failed")

    async with open_repositories() as repos:
        assert await repos.agents.get_all() == []


async def test_health_check(database):
    assert await db.health_check() is True


async def test_operational_error_becomes_database_error(database):
    await db.drop_tables()

    with pytest.raises(DatabaseError):
        async with open_repositories() as repos:
            await repos.agents.get_all()
