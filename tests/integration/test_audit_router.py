"""Integration tests for the audit history endpoints."""


class TestAuditRouter:
    async def _customer(self, client, headers):
        resp = await client.post("/customers", json={"name": "Acme"}, headers=headers)
        return resp.json()

    async def test_create_recorded(self, client, alice_headers):
        customer = await self._customer(client, alice_headers)
        resp = await client.get(f"/customers/{customer['id']}/audit", headers=alice_headers)
        assert resp.status_code == 200
        rows = resp.json()
        assert len(rows) == 1
        assert rows[0]["action"] == "create"
        assert rows[0]["entity_id"] == customer["id"]
        assert rows[0]["user_id"] == "user_alice"

    async def test_archive_rows(self, client, alice_headers):
        customer = await self._customer(client, alice_headers)
        await client.post(f"/customers/{customer['id']}/archive", headers=alice_headers)
        resp = await client.get(
            f"/customers/{customer['id']}/audit?action=archive", headers=alice_headers,
        )
        rows = resp.json()
        assert [(r["field_name"], r["old_value"], r["new_value"]) for r in rows] == [
            ("archived", "false", "true"),
        ]

    async def test_requires_identity(self, client, alice_headers):
        customer = await self._customer(client, alice_headers)
        resp = await client.get(f"/customers/{customer['id']}/audit")
        assert resp.status_code == 401

    async def test_foreign_history_hidden(self, client, alice_headers, bob_headers):
        customer = await self._customer(client, alice_headers)
        resp = await client.get(f"/customers/{customer['id']}/audit", headers=bob_headers)
        assert resp.status_code == 404

    async def test_limit_validated(self, client, alice_headers):
        customer = await self._customer(client, alice_headers)
        resp = await client.get(
            f"/customers/{customer['id']}/audit?limit=0", headers=alice_headers,
        )
        assert resp.status_code == 422

    async def test_limit_follows_settings(self, client, alice_headers, monkeypatch):
        from cse_whiteboard.deps import get_audit_service
        settings = get_audit_service().settings
        monkeypatch.setattr(settings, "default_audit_limit", 2)
        monkeypatch.setattr(settings, "max_audit_limit", 3)

        customer = await self._customer(client, alice_headers)
        for _ in range(4):
            await client.post(f"/customers/{customer['id']}/archive", headers=alice_headers)

        resp = await client.get(f"/customers/{customer['id']}/audit", headers=alice_headers)
        assert len(resp.json()) == 2

        resp = await client.get(
            f"/customers/{customer['id']}/audit?limit=500", headers=alice_headers,
        )
        assert resp.status_code == 200
        assert len(resp.json()) == 3
