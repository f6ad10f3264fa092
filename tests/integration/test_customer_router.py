"""Integration tests for customer and note API endpoints."""


class TestCustomerRouter:
    async def _create(self, client, headers, **fields):
        body = {"name": "Acme", "topology": "prod", "dumbledore_stage": 5}
        body.update(fields)
        resp = await client.post("/customers", json=body, headers=headers)
        assert resp.status_code == 201
        return resp.json()

    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["service"] == "cse-whiteboard"

    async def test_create_and_get(self, client, alice_headers):
        created = await self._create(client, alice_headers)
        assert created["name"] == "Acme"
        assert created["dumbledore_stage"] == 5
        assert created["archived"] is False

        resp = await client.get(f"/customers/{created['id']}", headers=alice_headers)
        assert resp.status_code == 200
        assert resp.json()["topology"] == "prod"

    async def test_anonymous_rejected(self, client):
        resp = await client.post("/customers", json={"name": ""})
        assert resp.status_code == 401
        assert resp.json()["code"] == "UNAUTHORIZED"

    async def test_cookie_identity(self, client, alice_headers):
        token = alice_headers["Authorization"].removeprefix("Bearer ")
        resp = await client.post(
            "/customers", json={"name": "Cookie Co"},
            headers={"Cookie": f"whiteboard_session={token}"},
        )
        assert resp.status_code == 201

    async def test_validation_error_names_field(self, client, alice_headers):
        resp = await client.post(
            "/customers", json={"name": "Acme", "dumbledore_stage": 10}, headers=alice_headers,
        )
        assert resp.status_code == 422
        data = resp.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert data["field"] == "dumbledore_stage"

    async def test_update_and_audit(self, client, alice_headers):
        created = await self._create(client, alice_headers)
        resp = await client.put(f"/customers/{created['id']}", json={
            "name": "Acme", "temperament": "neutral", "topology": "prod", "dumbledore_stage": 6,
        }, headers=alice_headers)
        assert resp.status_code == 200
        assert resp.json()["dumbledore_stage"] == 6

        audit = await client.get(
            f"/customers/{created['id']}/audit?action=update", headers=alice_headers,
        )
        rows = audit.json()
        assert len(rows) == 1
        assert rows[0]["field_name"] == "dumbledore_stage"
        assert (rows[0]["old_value"], rows[0]["new_value"]) == ("5", "6")

    async def test_update_requires_full_form(self, client, alice_headers):
        created = await self._create(client, alice_headers)
        resp = await client.put(
            f"/customers/{created['id']}", json={"dumbledore_stage": 6}, headers=alice_headers,
        )
        assert resp.status_code == 422
        assert resp.json()["field"] == "name"

        resp = await client.patch(
            f"/customers/{created['id']}", json={"dumbledore_stage": 6}, headers=alice_headers,
        )
        assert resp.status_code == 405

    async def test_other_user_sees_not_found(self, client, alice_headers, bob_headers):
        created = await self._create(client, alice_headers)
        foreign = await client.get(f"/customers/{created['id']}", headers=bob_headers)
        missing = await client.get("/customers/9999", headers=bob_headers)
        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json()

    async def test_list_and_active(self, client, alice_headers, bob_headers):
        a = await self._create(client, alice_headers, name="Beta")
        await self._create(client, alice_headers, name="Alpha")
        await self._create(client, bob_headers, name="Bob Co")
        await client.post(f"/customers/{a['id']}/archive", headers=alice_headers)

        listed = await client.get("/customers", headers=alice_headers)
        assert [c["name"] for c in listed.json()] == ["Alpha", "Beta"]
        assert listed.headers["etag"].startswith('W/"dashboard-')

        active = await client.get("/customers/active", headers=alice_headers)
        assert active.json() == [{"id": active.json()[0]["id"], "name": "Alpha"}]

        unarchived_only = await client.get("/customers?include_archived=false", headers=alice_headers)
        assert [c["name"] for c in unarchived_only.json()] == ["Alpha"]

    async def test_etag_changes_after_mutation(self, client, alice_headers):
        first = await client.get("/customers", headers=alice_headers)
        await self._create(client, alice_headers)
        second = await client.get("/customers", headers=alice_headers)
        assert first.headers["etag"] != second.headers["etag"]


class TestNoteEndpoints:
    async def test_add_list_update_note(self, client, alice_headers):
        customer = (await client.post(
            "/customers", json={"name": "Acme"}, headers=alice_headers,
        )).json()

        resp = await client.post(
            f"/customers/{customer['id']}/notes", json={"note": "<p>Kickoff</p>"}, headers=alice_headers,
        )
        assert resp.status_code == 201
        note = resp.json()

        resp = await client.patch(f"/notes/{note['id']}", json={"note": "<p>Kickoff done</p>"}, headers=alice_headers)
        assert resp.status_code == 200

        notes = await client.get(f"/customers/{customer['id']}/notes", headers=alice_headers)
        assert [n["note"] for n in notes.json()] == ["<p>Kickoff done</p>"]

        listed = await client.get("/customers", headers=alice_headers)
        assert listed.json()[0]["latest_note"] == "<p>Kickoff done</p>"

        audit = await client.get(f"/notes/{note['id']}/audit", headers=alice_headers)
        assert [r["action"] for r in audit.json()] == ["update", "create"]

    async def test_note_on_foreign_customer(self, client, alice_headers, bob_headers):
        customer = (await client.post(
            "/customers", json={"name": "Acme"}, headers=alice_headers,
        )).json()
        resp = await client.post(
            f"/customers/{customer['id']}/notes", json={"note": "hi"}, headers=bob_headers,
        )
        assert resp.status_code == 404
        assert resp.json()["code"] == "NOT_FOUND"

    async def test_empty_note(self, client, alice_headers):
        customer = (await client.post(
            "/customers", json={"name": "Acme"}, headers=alice_headers,
        )).json()
        resp = await client.post(
            f"/customers/{customer['id']}/notes", json={"note": ""}, headers=alice_headers,
        )
        assert resp.status_code == 422
        assert resp.json()["field"] == "note"
