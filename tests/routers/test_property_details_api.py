"""HTTP tests for /api/purchase_details and /api/loan_details."""
from decimal import Decimal

import pytest


async def _purchase(client, property_id: int) -> dict:
    resp = await client.post("/api/purchase_details", json={"property_id": property_id})
    return resp.json()


# ── purchase details ─────────────────────────────────────────────────────────

class TestPurchaseDetails:
    @pytest.mark.asyncio
    async def test_absent_is_not_found(self, client, property_id):
        resp = await client.get("/api/purchase_details", params={"property_id": property_id})
        assert resp.status_code == 404
        assert resp.json() == {"error": "not_found"}

    @pytest.mark.asyncio
    async def test_create_twice_yields_one_row(self, client, property_id):
        first = await client.post("/api/purchase_details", json={"property_id": property_id, "closing_date": "2023-04-01"})
        second = await client.post("/api/purchase_details", json={"property_id": property_id, "closing_date": "2024-09-09"})

        assert first.status_code == 201
        assert second.status_code == 200
        assert second.json()["purchase_id"] == first.json()["purchase_id"]
        # The existing row is returned untouched
        assert second.json()["closing_date"] == "2023-04-01"

        fetched = await client.get("/api/purchase_details", params={"property_id": property_id})
        assert fetched.json()["purchase_id"] == first.json()["purchase_id"]

    @pytest.mark.asyncio
    async def test_closing_date_accepts_timestamp(self, client, property_id):
        resp = await client.post(
            "/api/purchase_details",
            json={"property_id": property_id, "closing_date": "2025-07-22T03:00:25.000Z"},
        )
        assert resp.json()["closing_date"] == "2025-07-22"

    @pytest.mark.asyncio
    async def test_unknown_property_is_404(self, client):
        resp = await client.post("/api/purchase_details", json={"property_id": 999})
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_patch_merges_fields(self, client, property_id):
        purchase = await _purchase(client, property_id)
        resp = await client.patch(
            f"/api/purchase_details/{purchase['purchase_id']}",
            json={"purchase_price": "$185,000", "financing_type": "Loan", "down_payment": "37000"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert Decimal(body["purchase_price"]) == Decimal("185000")
        assert Decimal(body["down_payment"]) == Decimal("37000")
        assert body["financing_type"] == "Loan"
        assert body["closing_date"] == purchase["closing_date"]

    @pytest.mark.asyncio
    async def test_bad_number_is_400(self, client, property_id):
        purchase = await _purchase(client, property_id)
        resp = await client.patch(f"/api/purchase_details/{purchase['purchase_id']}", json={"purchase_price": "lots"})
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_get_by_id(self, client, property_id):
        purchase = await _purchase(client, property_id)
        resp = await client.get(f"/api/purchase_details/{purchase['purchase_id']}")
        assert resp.json()["property_id"] == property_id
        assert (await client.get("/api/purchase_details/999")).status_code == 404


# ── loan details ─────────────────────────────────────────────────────────────

class TestLoanDetails:
    @pytest.mark.asyncio
    async def test_create_fills_defaults(self, client, property_id):
        purchase = await _purchase(client, property_id)
        resp = await client.post("/api/loan_details", json={
            "loan_id": "LN-100",
            "property_id": property_id,
            "purchase_id": purchase["purchase_id"],
            "loan_amount": "148000",
        })
        assert resp.status_code == 201
        body = resp.json()
        assert Decimal(body["loan_amount"]) == Decimal("148000")
        assert Decimal(body["monthly_payment"]) == 0
        assert body["lender"] == ""
        assert body["balloon_payment"] is False
        assert body["loan_start"] is None

    @pytest.mark.asyncio
    async def test_missing_loan_id_is_400(self, client, property_id):
        purchase = await _purchase(client, property_id)
        resp = await client.post("/api/loan_details", json={
            "property_id": property_id, "purchase_id": purchase["purchase_id"],
        })
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_duplicate_pair_is_409_and_leaves_row(self, client, property_id):
        purchase = await _purchase(client, property_id)
        await client.post("/api/loan_details", json={
            "loan_id": "LN-1", "property_id": property_id, "purchase_id": purchase["purchase_id"], "lender": "First Bank",
        })

        resp = await client.post("/api/loan_details", json={
            "loan_id": "LN-2", "property_id": property_id, "purchase_id": purchase["purchase_id"], "lender": "Other Bank",
        })
        assert resp.status_code == 409
        assert resp.json() == {"error": "Loan already exists for this property"}

        loan = (await client.get("/api/loan_details", params={"property_id": property_id})).json()
        assert loan["loan_id"] == "LN-1"
        assert loan["lender"] == "First Bank"

    @pytest.mark.asyncio
    async def test_duplicate_loan_number_is_409(self, client, property_id):
        purchase = await _purchase(client, property_id)
        other = (await client.post("/api/properties", json={"property_name": "Elm", "address": "2 Elm St", "owner": "Jane"})).json()
        other_purchase = await _purchase(client, other["property_id"])

        await client.post("/api/loan_details", json={
            "loan_id": "LN-1", "property_id": property_id, "purchase_id": purchase["purchase_id"],
        })
        resp = await client.post("/api/loan_details", json={
            "loan_id": "LN-1", "property_id": other["property_id"], "purchase_id": other_purchase["purchase_id"],
        })
        assert resp.status_code == 409

    @pytest.mark.asyncio
    async def test_patch_by_loan_number(self, client, property_id):
        purchase = await _purchase(client, property_id)
        await client.post("/api/loan_details", json={
            "loan_id": "LN-1", "property_id": property_id, "purchase_id": purchase["purchase_id"],
        })
        resp = await client.patch("/api/loan_details/LN-1", json={"interest_rate": "6.875", "refinanced": True})
        assert resp.status_code == 200
        assert Decimal(resp.json()["interest_rate"]) == Decimal("6.875")
        assert resp.json()["refinanced"] is True

    @pytest.mark.asyncio
    async def test_rate_beyond_column_is_400(self, client, property_id):
        purchase = await _purchase(client, property_id)
        await client.post("/api/loan_details", json={
            "loan_id": "LN-1", "property_id": property_id, "purchase_id": purchase["purchase_id"],
        })
        resp = await client.patch("/api/loan_details/LN-1", json={"interest_rate": 100})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Validation failed"

    @pytest.mark.asyncio
    async def test_patch_by_property_purchase(self, client, property_id):
        purchase = await _purchase(client, property_id)
        await client.post("/api/loan_details", json={
            "loan_id": "LN-1", "property_id": property_id, "purchase_id": purchase["purchase_id"],
        })
        resp = await client.patch("/api/loan_details/by_property_purchase", json={
            "property_id": property_id, "purchase_id": purchase["purchase_id"], "lender": "Credit Union",
        })
        assert resp.status_code == 200
        assert resp.json()["loan_id"] == "LN-1"
        assert resp.json()["lender"] == "Credit Union"

    @pytest.mark.asyncio
    async def test_patch_unknown_loan_is_404(self, client):
        resp = await client.patch("/api/loan_details/NOPE", json={"lender": "x"})
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_delete(self, client, property_id):
        purchase = await _purchase(client, property_id)
        await client.post("/api/loan_details", json={
            "loan_id": "LN-1", "property_id": property_id, "purchase_id": purchase["purchase_id"],
        })
        assert (await client.delete("/api/loan_details/LN-1")).status_code == 204
        assert (await client.delete("/api/loan_details/LN-1")).status_code == 404
