import logging

import httpx
from fastapi import APIRouter, Depends
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.errors import NotFound
from app.models.property import Property
from app.models.property_details import LoanDetails, PurchaseDetails
from app.models.rental import PaymentLog, RentLog, Tenant
from app.models.transaction import Transaction
from app.schemas.property import (
    GeocodeResult,
    PropertyCreate,
    PropertyMarker,
    PropertyResponse,
    PropertyUpdate,
)
from app.services.geocoding import geocode_missing

logger = logging.getLogger(__name__)

router = APIRouter(tags=["properties"])

# Children first: loan_details references purchase_details
_DEPENDENTS = (LoanDetails, PurchaseDetails, RentLog, PaymentLog, Transaction, Tenant)


async def get_property_or_404(property_id: int, db: AsyncSession) -> Property:
    prop = await db.get(Property, property_id)
    if not prop:
        raise NotFound("Property not found")
    return prop


@router.get("/properties", response_model=list[PropertyResponse])
async def list_properties(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Property).order_by(Property.property_id))
    return result.scalars().all()


@router.get("/properties/{property_id}", response_model=PropertyResponse)
async def get_property(property_id: int, db: AsyncSession = Depends(get_db)):
    return await get_property_or_404(property_id, db)


@router.post("/properties", response_model=PropertyResponse, status_code=201)
async def create_property(
    payload: PropertyCreate,
    db: AsyncSession = Depends(get_db),
):
    prop = Property(**payload.model_dump())
    db.add(prop)
    await db.flush()
    await db.refresh(prop)
    logger.info("Created property %d (%s)", prop.property_id, prop.property_name)
    return prop


@router.put("/properties/{property_id}", response_model=PropertyResponse)
async def replace_property(
    property_id: int,
    payload: PropertyCreate,
    db: AsyncSession = Depends(get_db),
):
    prop = await get_property_or_404(property_id, db)
    for field, value in payload.model_dump().items():
        setattr(prop, field, value)
    await db.flush()
    await db.refresh(prop)
    return prop


@router.patch("/properties/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: int,
    payload: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
):
    prop = await get_property_or_404(property_id, db)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(prop, field, value)
    await db.flush()
    await db.refresh(prop)
    return prop


@router.delete("/properties/{property_id}", status_code=204)
async def delete_property(
    property_id: int,
    db: AsyncSession = Depends(get_db),
):
    prop = await get_property_or_404(property_id, db)
    # Same unit of work as the property itself; the FKs cascade too where the store enforces them
    for model in _DEPENDENTS:
        await db.execute(delete(model).where(model.property_id == property_id))
    await db.delete(prop)
    await db.flush()
    logger.info("Deleted property %d and its records", property_id)


# ─── Map ──────────────────────────────────────────────────────────────────────

@router.get("/property_markers", response_model=list[PropertyMarker])
async def list_property_markers(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Property).order_by(Property.property_id))
    return [
        PropertyMarker(
            id=p.property_id,
            name=p.property_name or "Property",
            address=p.address,
            city=p.city or "",
            state=p.state or "",
            zipcode=p.zipcode or "",
            lat=p.lat,
            lng=p.lng,
        )
        for p in result.scalars().all()
    ]


async def get_geocoder_client():
    async with httpx.AsyncClient() as client:
        yield client


@router.post("/admin/geocode-missing", response_model=GeocodeResult)
async def geocode_missing_properties(
    db: AsyncSession = Depends(get_db),
    client: httpx.AsyncClient = Depends(get_geocoder_client),
):
    ids = await geocode_missing(db, client)
    return GeocodeResult(updated_count=len(ids), ids=ids)
