"""Purchase details auto-creation, end to end and against a scripted client."""
import asyncio

import httpx
import pytest

from app.client.api import ApiError, PortfolioClient
from app.client.purchase import PurchaseDetailsLoader, ensure_purchase_details, has_loan


class TestEnsurePurchaseDetails:
    @pytest.mark.asyncio
    async def test_first_view_creates_row_seeded_with_property_date(self, portfolio):
        prop = await portfolio.create_property({
            "property_name": "Oak St", "address": "1 Oak St", "owner": "Jane", "type": "Residential", "status": "Vacant",
        })
        assert await portfolio.get_purchase_details(prop["property_id"]) is None

        details = await ensure_purchase_details(portfolio, prop["property_id"])
        assert details["property_id"] == prop["property_id"]
        assert details["closing_date"] == prop["created_at"][:10]
        assert details["purchase_price"] is None

    @pytest.mark.asyncio
    async def test_second_view_reuses_row(self, portfolio):
        prop = await portfolio.create_property({"property_name": "Oak", "address": "1 Oak St", "owner": "Jane"})
        first = await ensure_purchase_details(portfolio, prop["property_id"])
        second = await ensure_purchase_details(portfolio, prop["property_id"])
        assert second["purchase_id"] == first["purchase_id"]

    @pytest.mark.asyncio
    async def test_concurrent_calls_share_one_creation(self, portfolio):
        prop = await portfolio.create_property({"property_name": "Oak", "address": "1 Oak St", "owner": "Jane"})
        loader = PurchaseDetailsLoader(portfolio)

        a, b = await asyncio.gather(loader.ensure(prop["property_id"]), loader.ensure(prop["property_id"]))
        assert a == b

        # Still exactly one row on the server
        fetched = await portfolio.get_purchase_details(prop["property_id"])
        assert fetched["purchase_id"] == a["purchase_id"]


class ScriptedClient:
    """Stands in for PortfolioClient: the row appears between the fetch and the create."""

    def __init__(self):
        self.row = None
        self.creates = 0

    async def get_purchase_details(self, property_id):
        return self.row

    async def get_property(self, property_id):
        return {"property_id": property_id, "created_at": "2024-03-09T12:00:00"}

    async def create_purchase_details(self, payload):
        self.creates += 1
        self.row = {"purchase_id": 1, **payload}
        raise ApiError(409, "Conflicting record")


class TestConflictIsRefetch:
    @pytest.mark.asyncio
    async def test_409_answered_with_fetch(self):
        client = ScriptedClient()
        details = await PurchaseDetailsLoader(client).ensure(5)
        assert details == {"purchase_id": 1, "property_id": 5, "closing_date": "2024-03-09"}
        assert client.creates == 1

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self):
        client = ScriptedClient()

        async def fail(payload):
            raise ApiError(500, "Store error")

        client.create_purchase_details = fail
        with pytest.raises(ApiError) as exc:
            await PurchaseDetailsLoader(client).ensure(5)
        assert exc.value.status_code == 500


class TestHasLoan:
    def test_case_insensitive(self):
        assert has_loan({"financing_type": "Loan"})
        assert has_loan({"financing_type": "LOAN"})
        assert not has_loan({"financing_type": "Cash"})
        assert not has_loan({"financing_type": None})
        assert not has_loan(None)


class TestApiClient:
    @pytest.mark.asyncio
    async def test_errors_carry_server_body(self, portfolio):
        with pytest.raises(ApiError) as exc:
            await portfolio.get_property(999)
        assert exc.value.status_code == 404
        assert exc.value.error == "Property not found"

    @pytest.mark.asyncio
    async def test_validation_details(self, portfolio):
        with pytest.raises(ApiError) as exc:
            await portfolio.create_property({"property_name": "Oak"})
        assert exc.value.status_code == 400
        assert exc.value.error == "Validation failed"
        assert isinstance(exc.value.details, list)

    @pytest.mark.asyncio
    async def test_delete_returns_none(self, portfolio):
        prop = await portfolio.create_property({"property_name": "Oak", "address": "1 Oak St", "owner": "Jane"})
        txn = await portfolio.create_transaction({"property_id": prop["property_id"], "amount": 5, "date": "2024-01-01"})
        assert await portfolio.delete_transaction(txn["transaction_id"]) is None
        assert await portfolio.list_transactions(prop["property_id"]) == []

    @pytest.mark.asyncio
    async def test_loan_conflict(self, portfolio):
        prop = await portfolio.create_property({"property_name": "Oak", "address": "1 Oak St", "owner": "Jane"})
        details = await ensure_purchase_details(portfolio, prop["property_id"])
        loan = {"loan_id": "LN-1", "property_id": prop["property_id"], "purchase_id": details["purchase_id"]}
        await portfolio.create_loan_details(loan)

        with pytest.raises(ApiError) as exc:
            await portfolio.create_loan_details({**loan, "loan_id": "LN-2"})
        assert exc.value.status_code == 409
        assert exc.value.error == "Loan already exists for this property"

    @pytest.mark.asyncio
    async def test_non_json_success_is_api_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>proxy</html>"))
        async with PortfolioClient("http://portfolio.test", transport=transport) as client:
            with pytest.raises(ApiError) as exc:
                await client.list_properties()
        assert exc.value.status_code == 200
        assert exc.value.error == "Unreadable response"

    @pytest.mark.asyncio
    async def test_contact_name_taken(self, portfolio):
        first = await portfolio.create_contact({"name": "Ana Ruiz", "phone": "5550102000"})
        with pytest.raises(ApiError) as exc:
            await portfolio.create_contact({"name": " ana ruiz ", "phone": "5559998888"})
        assert exc.value.status_code == 409
        assert exc.value.details == {"contact_id": first["contact_id"]}

        # A longer name that only contains it is a different contact
        await portfolio.create_contact({"name": "Ana Ruiz Jr", "phone": "5559998888"})
        assert len(await portfolio.list_contacts()) == 2
