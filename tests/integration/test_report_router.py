"""Integration tests for the weekly report endpoints."""

from datetime import date, datetime, timedelta, timezone


def _this_sunday() -> date:
    today = datetime.now(timezone.utc).date()
    return today + timedelta(days=6 - today.weekday())


class TestReportRouter:
    async def _seed(self, client, headers):
        customer = (await client.post("/customers", json={
            "name": "Acme", "topology": "prod", "dumbledore_stage": 6, "temperament": "happy",
        }, headers=headers)).json()
        await client.post(
            f"/customers/{customer['id']}/notes",
            json={"note": "<p>Stage <strong>6</strong> reached</p>"},
            headers=headers,
        )
        return customer

    async def test_weekly_json(self, client, alice_headers):
        await self._seed(client, alice_headers)
        sunday = _this_sunday()
        resp = await client.get(
            f"/reports/weekly?week_ending_date={sunday.isoformat()}", headers=alice_headers,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["week_end"] == sunday.isoformat()
        assert data["week_start"] == (sunday - timedelta(days=6)).isoformat()
        assert len(data["entries"]) == 1
        entry = data["entries"][0]
        assert entry["customer"]["name"] == "Acme"
        assert len(entry["notes"]) == 1
        # No API key configured in tests
        assert entry["executive_summary"] is None
        assert "WEEKLY CUSTOMER REPORT" in data["text"]
        assert "Stage 6 reached" in data["text"]

    async def test_weekly_text(self, client, alice_headers):
        await self._seed(client, alice_headers)
        resp = await client.get(
            f"/reports/weekly.txt?week_ending_date={_this_sunday().isoformat()}",
            headers=alice_headers,
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert "CUSTOMER: Acme" in resp.text
        assert "LTS Progress: [PROD] Stage 6" in resp.text
        assert resp.text.rstrip().endswith("=" * 42)

    async def test_other_week_has_no_notes(self, client, alice_headers):
        await self._seed(client, alice_headers)
        resp = await client.get(
            "/reports/weekly.txt?week_ending_date=2020-01-05", headers=alice_headers,
        )
        assert "No notes recorded for this week" in resp.text

    async def test_bad_date(self, client, alice_headers):
        resp = await client.get("/reports/weekly?week_ending_date=01-05-2020", headers=alice_headers)
        assert resp.status_code == 422
        assert resp.json()["field"] == "week_ending_date"

    async def test_anonymous(self, client):
        resp = await client.get("/reports/weekly?week_ending_date=2020-01-05")
        assert resp.status_code == 401
