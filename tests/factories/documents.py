# tests/factories/documents.py
"""Factories for users, agents and services."""

import factory

from cache_admin.auth.api_key import generate_api_key
from cache_admin.auth.passwords import hash_password
from cache_admin.domain.roles import Role
from cache_admin.infrastructure.database.models import Agent, Service, User
from tests.factories.base import DocumentFactory

DEFAULT_PASSWORD = "password123"

# Hashing once keeps factories fast; tests that need a specific password pass their own hash
_DEFAULT_PASSWORD_HASH = hash_password(DEFAULT_PASSWORD, rounds=4)


class UserFactory(DocumentFactory):
    class Meta:
        model = User

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    password_hash = _DEFAULT_PASSWORD_HASH
    role = Role.USER.value
    linked_service_names = factory.LazyFunction(list)

    class Params:
        admin = factory.Trait(role=Role.ADMIN.value)
        manager = factory.Trait(role=Role.MANAGER.value)


class AgentFactory(DocumentFactory):
    class Meta:
        model = Agent

    name = factory.Faker("company")
    url = factory.Sequence(lambda n: f"http://agent-{n}.test")
    api_key = factory.LazyFunction(generate_api_key)
    is_api_key_active = True


class ServiceFactory(DocumentFactory):
    class Meta:
        model = Service

    name = factory.Sequence(lambda n: f"service-{n}")
    status = "Running"
    version = "1.0.0"
    description = factory.Faker("sentence")
    port = factory.Faker("random_int", min=1024, max=65535)
    agent_id = None
