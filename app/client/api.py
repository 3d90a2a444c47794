"""Async HTTP client for the portfolio API.

Every non-2xx answer is raised as ``ApiError`` carrying the server's
``{"error", "details"}`` body.
"""
import logging
from typing import Any

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, error: str, details: Any = None):
        super().__init__(f"{status_code}: {error}")
        self.status_code = status_code
        self.error = error
        self.details = details

    @classmethod
    def from_response(cls, resp: httpx.Response) -> "ApiError":
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and "error" in body:
            return cls(resp.status_code, str(body["error"]), body.get("details"))
        return cls(resp.status_code, resp.reason_phrase or "Request failed", resp.text or None)


class PortfolioClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.api_base,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "PortfolioClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request(self, method: str, path: str, **kwargs) -> Any:
        resp = await self._http.request(method, path, **kwargs)
        if resp.is_error:
            error = ApiError.from_response(resp)
            logger.debug("%s %s -> %d %s", method, path, resp.status_code, error.error)
            raise error
        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            raise ApiError(resp.status_code, "Unreadable response", resp.text[:200]) from None

    # ─── Properties ───────────────────────────────────────────────────────────

    async def list_properties(self) -> list[dict]:
        return await self.request("GET", "/api/properties")

    async def get_property(self, property_id: int) -> dict:
        return await self.request("GET", f"/api/properties/{property_id}")

    async def create_property(self, payload: dict) -> dict:
        return await self.request("POST", "/api/properties", json=payload)

    async def update_property(self, property_id: int, fields: dict) -> dict:
        return await self.request("PATCH", f"/api/properties/{property_id}", json=fields)

    async def delete_property(self, property_id: int) -> None:
        await self.request("DELETE", f"/api/properties/{property_id}")

    async def property_markers(self) -> list[dict]:
        return await self.request("GET", "/api/property_markers")

    async def geocode_missing(self) -> dict:
        return await self.request("POST", "/api/admin/geocode-missing")

    # ─── Purchase / loan details ──────────────────────────────────────────────

    async def get_purchase_details(self, property_id: int) -> dict | None:
        """None when the property has no purchase details yet."""
        try:
            return await self.request("GET", "/api/purchase_details", params={"property_id": property_id})
        except ApiError as exc:
            if exc.status_code == 404:
                return None
            raise

    async def create_purchase_details(self, payload: dict) -> dict:
        return await self.request("POST", "/api/purchase_details", json=payload)

    async def update_purchase_details(self, purchase_id: int, fields: dict) -> dict:
        return await self.request("PATCH", f"/api/purchase_details/{purchase_id}", json=fields)

    async def get_loan_details(self, property_id: int) -> dict | None:
        try:
            return await self.request("GET", "/api/loan_details", params={"property_id": property_id})
        except ApiError as exc:
            if exc.status_code == 404:
                return None
            raise

    async def create_loan_details(self, payload: dict) -> dict:
        return await self.request("POST", "/api/loan_details", json=payload)

    async def update_loan_details(self, loan_id: str, fields: dict) -> dict:
        return await self.request("PATCH", f"/api/loan_details/{loan_id}", json=fields)

    async def update_loan_by_property_purchase(self, property_id: int, purchase_id: int, fields: dict) -> dict:
        body = {**fields, "property_id": property_id, "purchase_id": purchase_id}
        return await self.request("PATCH", "/api/loan_details/by_property_purchase", json=body)

    async def delete_loan_details(self, loan_id: str) -> None:
        await self.request("DELETE", f"/api/loan_details/{loan_id}")

    # ─── Rent log / payment log ───────────────────────────────────────────────

    async def list_rent_log(self, property_id: int, year: int | None = None) -> list[dict]:
        params = {"property_id": property_id}
        if year is not None:
            params["year"] = year
        return await self.request("GET", "/api/rentlog", params=params)

    async def record_rent(self, payload: dict) -> dict:
        return await self.request("POST", "/api/rentlog", json=payload)

    async def update_rent(self, rent_id: int, fields: dict) -> dict:
        return await self.request("PATCH", f"/api/rentlog/{rent_id}", json=fields)

    async def delete_rent(self, rent_id: int) -> None:
        await self.request("DELETE", f"/api/rentlog/{rent_id}")

    async def list_payment_log(self, property_id: int, year: int) -> list[dict]:
        return await self.request("GET", "/api/paymentlog", params={"property_id": property_id, "year": year})

    async def record_payment(self, payload: dict) -> dict:
        return await self.request("POST", "/api/paymentlog", json=payload)

    # ─── Transactions ─────────────────────────────────────────────────────────

    async def list_transactions(self, property_id: int | None = None) -> list[dict]:
        params = {"property_id": property_id} if property_id is not None else None
        return await self.request("GET", "/api/transactions", params=params)

    async def create_transaction(self, payload: dict) -> dict:
        return await self.request("POST", "/api/transactions", json=payload)

    async def update_transaction(self, transaction_id: int, fields: dict) -> dict:
        return await self.request("PATCH", f"/api/transactions/{transaction_id}", json=fields)

    async def delete_transaction(self, transaction_id: int) -> None:
        await self.request("DELETE", f"/api/transactions/{transaction_id}")

    # ─── Contacts ─────────────────────────────────────────────────────────────

    async def list_contacts(self, q: str | None = None) -> list[dict]:
        params = {"q": q} if q else None
        return await self.request("GET", "/api/contacts", params=params)

    async def create_contact(self, payload: dict) -> dict:
        """Refuses a name an existing contact already has; the server does not check."""
        name = str(payload.get("name") or "").strip()
        if name:
            for contact in await self.list_contacts(name):
                if contact["name"].strip().lower() == name.lower():
                    raise ApiError(409, "Contact already exists", {"contact_id": contact["contact_id"]})
        return await self.request("POST", "/api/contacts", json=payload)

    async def update_contact(self, contact_id: int, fields: dict) -> dict:
        return await self.request("PATCH", f"/api/contacts/{contact_id}", json=fields)

    async def delete_contact(self, contact_id: int) -> None:
        await self.request("DELETE", f"/api/contacts/{contact_id}")

    # ─── Tenants ──────────────────────────────────────────────────────────────

    async def list_tenants(self, property_id: int) -> list[dict]:
        return await self.request("GET", "/api/tenant", params={"property_id": property_id})

    async def save_tenant(self, payload: dict) -> dict:
        return await self.request("POST", "/api/tenant", json=payload)

    async def update_tenant(self, tenant_id: int, fields: dict) -> dict:
        return await self.request("PATCH", f"/api/tenant/{tenant_id}", json=fields)

    async def delete_tenant(self, tenant_id: int) -> None:
        await self.request("DELETE", f"/api/tenant/{tenant_id}")

    # ─── Reports ──────────────────────────────────────────────────────────────

    async def rent_report(self, year: int, property_ids: list[int] | None = None) -> dict:
        params = {"year": year, "property_id": property_ids or []}
        return await self.request("GET", "/api/reports/rent", params=params)

    async def expense_report(self, year: int, property_ids: list[int] | None = None) -> dict:
        params = {"year": year, "property_id": property_ids or []}
        return await self.request("GET", "/api/reports/expenses", params=params)
