"""HTTP tests for /api/transactions, /api/contacts and the health checks."""
from decimal import Decimal

import pytest


# ── transactions ─────────────────────────────────────────────────────────────

class TestTransactions:
    @pytest.mark.asyncio
    async def test_create_accepts_form_aliases(self, client, property_id):
        resp = await client.post("/api/transactions", json={
            "property_id": property_id, "amount": "1,200.50", "date": "2024-02-01", "type": "Income", "notes": "Feb rent",
        })
        assert resp.status_code == 201
        body = resp.json()
        assert Decimal(body["transaction_amount"]) == Decimal("1200.50")
        assert body["transaction_date"] == "2024-02-01"
        assert body["transaction_type"] == "Income"

    @pytest.mark.asyncio
    async def test_missing_amount_is_400(self, client, property_id):
        resp = await client.post("/api/transactions", json={"property_id": property_id, "date": "2024-02-01"})
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_list_newest_first_and_filtered(self, client, property_id):
        other = (await client.post("/api/properties", json={"property_name": "Elm", "address": "2 Elm St", "owner": "Jane"})).json()
        for day in ("2024-01-05", "2024-03-05", "2024-02-05"):
            await client.post("/api/transactions", json={"property_id": property_id, "amount": 10, "date": day})
        await client.post("/api/transactions", json={"property_id": other["property_id"], "amount": 10, "date": "2024-04-01"})

        rows = (await client.get("/api/transactions", params={"property_id": property_id})).json()
        assert [r["transaction_date"] for r in rows] == ["2024-03-05", "2024-02-05", "2024-01-05"]
        assert len((await client.get("/api/transactions")).json()) == 4

    @pytest.mark.asyncio
    async def test_patch(self, client, property_id):
        txn = (await client.post("/api/transactions", json={"property_id": property_id, "amount": 10, "date": "2024-01-05"})).json()
        resp = await client.patch(f"/api/transactions/{txn['transaction_id']}", json={"transaction_type": "Repair"})
        assert resp.json()["transaction_type"] == "Repair"
        assert Decimal(resp.json()["transaction_amount"]) == Decimal("10")

    @pytest.mark.asyncio
    async def test_delete_then_get_is_404(self, client, property_id):
        keep = (await client.post("/api/transactions", json={"property_id": property_id, "amount": 1, "date": "2024-01-01"})).json()
        gone = (await client.post("/api/transactions", json={"property_id": property_id, "amount": 2, "date": "2024-01-02"})).json()

        resp = await client.delete(f"/api/transactions/{gone['transaction_id']}")
        assert resp.status_code == 204

        assert (await client.get(f"/api/transactions/{gone['transaction_id']}")).status_code == 404
        assert (await client.get(f"/api/transactions/{keep['transaction_id']}")).status_code == 200


# ── contacts ─────────────────────────────────────────────────────────────────

class TestContacts:
    @pytest.mark.asyncio
    async def test_create_normalises_phone_and_type(self, client):
        resp = await client.post("/api/contacts", json={
            "name": " Ana Ruiz ", "phone": "(555) 010-2000", "contact_type": "contractor", "email": "",
        })
        assert resp.status_code == 201
        body = resp.json()
        assert body["name"] == "Ana Ruiz"
        assert body["phone"] == "5550102000"
        assert body["contact_type"] == "Contractor"
        assert body["email"] is None

    @pytest.mark.asyncio
    async def test_short_phone_is_400(self, client):
        resp = await client.post("/api/contacts", json={"name": "Ana", "phone": "555-0100"})
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_type_is_400(self, client):
        resp = await client.post("/api/contacts", json={"name": "Ana", "phone": "5550102000", "contact_type": "Landlord"})
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_search(self, client):
        await client.post("/api/contacts", json={"name": "Ana Ruiz", "phone": "5550102000", "contact_type": "Contractor"})
        await client.post("/api/contacts", json={"name": "Bo Chen", "phone": "5559998888", "notes": "plumber, weekends"})

        def names(resp):
            return [c["name"] for c in resp.json()]

        assert names(await client.get("/api/contacts")) == ["Ana Ruiz", "Bo Chen"]
        assert names(await client.get("/api/contacts", params={"q": "ruiz"})) == ["Ana Ruiz"]
        assert names(await client.get("/api/contacts", params={"q": "plumber"})) == ["Bo Chen"]
        assert names(await client.get("/api/contacts", params={"q": "contractor"})) == ["Ana Ruiz"]
        assert names(await client.get("/api/contacts", params={"q": "(555) 999"})) == ["Bo Chen"]

    @pytest.mark.asyncio
    async def test_patch_and_delete(self, client):
        contact = (await client.post("/api/contacts", json={"name": "Ana", "phone": "5550102000"})).json()
        cid = contact["contact_id"]

        resp = await client.patch(f"/api/contacts/{cid}", json={"email": "ana@example.com"})
        assert resp.json()["email"] == "ana@example.com"
        assert resp.json()["phone"] == "5550102000"

        assert (await client.patch(f"/api/contacts/{cid}", json={"name": None})).status_code == 400
        assert (await client.get(f"/api/contacts/{cid}")).json()["name"] == "Ana"

        assert (await client.delete(f"/api/contacts/{cid}")).status_code == 204
        assert (await client.get(f"/api/contacts/{cid}")).status_code == 404


# ── health ───────────────────────────────────────────────────────────────────

class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}
        assert resp.headers["x-content-type-options"] == "nosniff"

    @pytest.mark.asyncio
    async def test_health_db(self, client):
        resp = await client.get("/health/db")
        assert resp.json() == {"status": "ok", "database": "connected"}
