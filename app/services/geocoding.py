"""Address geocoding via OpenStreetMap Nominatim.

Nominatim's usage policy allows one request per second and requires an
identifying User-Agent; both come from settings.
"""
import asyncio
import logging
from datetime import datetime, timezone

import httpx
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.property import Property

logger = logging.getLogger(__name__)


def full_address(prop: Property) -> str:
    parts = [prop.address, prop.city, prop.state, prop.zipcode]
    return ", ".join(p for p in parts if p)


async def geocode(client: httpx.AsyncClient, query: str) -> tuple[float, float] | None:
    """Return (lat, lng) for the best match, or None when nothing matched or the lookup failed."""
    try:
        resp = await client.get(
            settings.geocoder_url,
            params={"format": "json", "limit": 1, "q": query},
            headers={
                "User-Agent": settings.geocoder_user_agent,
                "Accept-Language": "en-US,en;q=0.8",
            },
            timeout=10,
        )
    except httpx.HTTPError as exc:
        logger.warning("Geocode request failed for %r: %s", query, exc)
        return None
    if resp.status_code != 200:
        logger.warning("Geocoder returned %d for %r", resp.status_code, query)
        return None
    hits = resp.json()
    if not hits:
        return None
    try:
        return float(hits[0]["lat"]), float(hits[0]["lon"])
    except (KeyError, TypeError, ValueError):
        logger.warning("Unexpected geocoder payload for %r: %s", query, str(hits)[:200])
        return None


async def geocode_missing(
    db: AsyncSession,
    client: httpx.AsyncClient,
    delay_seconds: float | None = None,
) -> list[int]:
    """Fill lat/lng on every property that lacks them. Returns the updated property ids."""
    delay = settings.geocoder_delay_seconds if delay_seconds is None else delay_seconds
    result = await db.execute(
        select(Property)
        .where(or_(Property.lat.is_(None), Property.lng.is_(None)))
        .order_by(Property.property_id)
    )
    props = result.scalars().all()

    updated: list[int] = []
    for i, prop in enumerate(props):
        hit = await geocode(client, full_address(prop))
        if hit:
            prop.lat, prop.lng = hit
            prop.geocoded_at = datetime.now(timezone.utc)
            updated.append(prop.property_id)
        if delay and i < len(props) - 1:
            await asyncio.sleep(delay)

    await db.flush()
    logger.info("Geocoded %d of %d properties", len(updated), len(props))
    return updated
