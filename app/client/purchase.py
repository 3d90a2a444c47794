"""Purchase details are created the first time a property is opened."""
import asyncio
import logging

from app.client.api import ApiError, PortfolioClient

logger = logging.getLogger(__name__)


def has_loan(details: dict | None) -> bool:
    """Whether the loan section applies. Older rows store the financing type as 'LOAN'."""
    if not details:
        return False
    return str(details.get("financing_type") or "").strip().lower() == "loan"


class PurchaseDetailsLoader:
    """Fetches purchase details, creating them when absent.

    Concurrent calls for one property share a single fetch-or-create, and a
    409 from the server (another session created the row first) is answered
    with a re-fetch, so a property never ends up with two rows.
    """

    def __init__(self, client: PortfolioClient):
        self.client = client
        self._pending: dict[int, asyncio.Task] = {}

    async def ensure(self, property_id: int) -> dict:
        task = self._pending.get(property_id)
        if task is None:
            task = asyncio.ensure_future(self._load(property_id))
            self._pending[property_id] = task
            task.add_done_callback(lambda _: self._pending.pop(property_id, None))
        return await task

    async def _load(self, property_id: int) -> dict:
        details = await self.client.get_purchase_details(property_id)
        if details is not None:
            return details

        prop = await self.client.get_property(property_id)
        seed = {"property_id": property_id, "closing_date": prop["created_at"][:10]}
        try:
            details = await self.client.create_purchase_details(seed)
        except ApiError as exc:
            if exc.status_code != 409:
                raise
            logger.info("Purchase details for property %d created elsewhere, re-fetching", property_id)
            details = await self.client.get_purchase_details(property_id)
            if details is None:
                raise
        logger.info("Purchase details ready for property %d", property_id)
        return details


async def ensure_purchase_details(client: PortfolioClient, property_id: int) -> dict:
    return await PurchaseDetailsLoader(client).ensure(property_id)
