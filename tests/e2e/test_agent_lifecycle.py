"""End-to-end flows across agents, callbacks, services, users and caches."""

import pytest

pytestmark = pytest.mark.e2e


async def login(client, email: str, password: str) -> dict:
    response = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


class TestAgentLifecycle:

    async def test_onboard_agent_register_service_and_relay(self, client, admin_headers, fake_agent):
        # Admin creates the agent and hands its key over
        agent = (
            await client.post(
                "/api/agents",
                json={"name": "edge", "url": "http://edge.test"},
                headers=admin_headers,
            )
        ).json()
        key = {"X-Api-Key": agent["apiKey"]}

        # The agent registers its service, claiming a foreign owner
        registered = await client.post(
            "/api/callback/register-service",
            json={"name": "orders", "status": "Running", "agentId": "someone-else"},
            headers=key,
        )
        assert registered.status_code == 201
        service = registered.json()
        assert service["agentId"] == agent["id"]

        # Admin creates an operator linked to the service
        created = await client.post(
            "/api/users",
            json={"email": "ops@example.com", "password": "secret1", "linkedServiceNames": ["orders"]},
            headers=admin_headers,
        )
        assert created.status_code == 201

        # The operator lists and reads caches through the agent
        ops = await login(client, "ops@example.com", "secret1")
        services = (await client.get("/api/services", headers=ops)).json()
        assert [s["id"] for s in services] == [service["id"]]

        fake_agent.reply(200, json=[{"id": "node-1", "cacheKeys": ["order:1"]}])
        caches = await client.get(f"/api/caches/{service['id']}", headers=ops)
        assert caches.status_code == 200
        assert caches.json()[0]["cacheKeys"] == ["order:1"]
        assert fake_agent.requests[-1].headers["X-Api-Key"] == agent["apiKey"]

        # Another agent registering the same name gets its own service
        intruder = (
            await client.post(
                "/api/agents",
                json={"name": "intruder", "url": "http://intruder.test"},
                headers=admin_headers,
            )
        ).json()
        again = await client.post(
            "/api/callback/register-service",
            json={"name": "orders", "version": "2.0.0"},
            headers={"X-Api-Key": intruder["apiKey"]},
        )
        assert again.status_code == 201
        assert again.json()["id"] != service["id"]

        original = (await client.get(f"/api/services/{service['id']}", headers=admin_headers)).json()
        assert original["agentId"] == agent["id"]

    async def test_key_rotation_revokes_old_key(self, client, admin_headers):
        agent = (
            await client.post(
                "/api/agents",
                json={"name": "edge", "url": "http://edge.test"},
                headers=admin_headers,
            )
        ).json()
        old_key = agent["apiKey"]

        rotated = await client.post(f"/api/agents/{agent['id']}/regenerate-api-key", headers=admin_headers)
        new_key = rotated.json()["apiKey"]
        assert new_key != old_key

        old = await client.post(
            "/api/callback/register-service",
            json={"name": "orders"},
            headers={"X-Api-Key": old_key},
        )
        new = await client.post(
            "/api/callback/register-service",
            json={"name": "orders"},
            headers={"X-Api-Key": new_key},
        )

        assert old.status_code == 401
        assert new.status_code == 201

    async def test_relay_to_rotated_agent_uses_new_key(self, client, admin_headers, fake_agent):
        agent = (
            await client.post(
                "/api/agents",
                json={"name": "edge", "url": "http://edge.test"},
                headers=admin_headers,
            )
        ).json()
        service = (
            await client.post(
                "/api/services",
                json={"name": "orders", "agentId": agent["id"]},
                headers=admin_headers,
            )
        ).json()
        new_key = (
            await client.post(f"/api/agents/{agent['id']}/regenerate-api-key", headers=admin_headers)
        ).json()["apiKey"]

        await client.post(f"/api/caches/flushall/{service['id']}", headers=admin_headers)

        assert fake_agent.requests[-1].headers["X-Api-Key"] == new_key


class TestGuardRails:

    async def test_service_without_agent_never_reaches_an_agent(self, client, admin_headers, fake_agent):
        service = (
            await client.post("/api/services", json={"name": "orphan"}, headers=admin_headers)
        ).json()

        flush = await client.post(f"/api/caches/flushall/{service['id']}", headers=admin_headers)
        clear = await client.delete(f"/api/caches/clear/{service['id']}/k", headers=admin_headers)

        assert flush.status_code == 400
        assert clear.status_code == 400
        assert fake_agent.requests == []

    async def test_deleting_agent_orphans_its_services(self, client, admin_headers, fake_agent):
        agent = (
            await client.post(
                "/api/agents",
                json={"name": "edge", "url": "http://edge.test"},
                headers=admin_headers,
            )
        ).json()
        service = (
            await client.post(
                "/api/services",
                json={"name": "orders", "agentId": agent["id"]},
                headers=admin_headers,
            )
        ).json()

        await client.delete(f"/api/agents/{agent['id']}", headers=admin_headers)
        response = await client.get(f"/api/caches/{service['id']}", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "AGENT_NOT_FOUND"
        assert fake_agent.requests == []

    @pytest.mark.parametrize(
        "path",
        ["/api/agents/nope", "/api/services/nope", "/api/users/nope", "/api/caches/nope"],
    )
    async def test_unknown_ids_are_404(self, client, admin_headers, path):
        response = await client.get(path, headers=admin_headers)

        assert response.status_code == 404

    @pytest.mark.parametrize("path", ["/api/users", "/api/agents"])
    async def test_admin_areas_reject_other_roles(self, client, manager_headers, user_headers, path):
        for headers in (manager_headers, user_headers):
            response = await client.get(path, headers=headers)
            assert response.status_code == 403

    async def test_wrong_password_gets_no_token(self, client, regular_user):
        response = await client.post(
            "/api/auth/login",
            json={"email": regular_user.email, "password": "not-the-password"},
        )

        assert response.status_code == 401
        assert "token" not in response.json()
