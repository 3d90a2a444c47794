import logging
from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.errors import NotFound, ValidationError
from app.models.contact import Contact
from app.models.rental import PaymentLog, RentLog, Tenant
from app.routers.properties import get_property_or_404
from app.schemas.rental import (
    PaymentLogResponse,
    PaymentLogUpsert,
    RentLogResponse,
    RentLogUpdate,
    RentLogUpsert,
    TenantCreate,
    TenantReplace,
    TenantResponse,
    TenantUpdate,
)
from app.services.leases import status_sort_key, tenant_status
from app.services.rent_calendar import month_index
from app.services.upsert import upsert

logger = logging.getLogger(__name__)

# Mounted twice: /api/rentlog and its legacy alias /api/rentroll
rent_log_router = APIRouter(tags=["rent-log"])
router = APIRouter(tags=["rentals"])

_MONTH_KEY = ("property_id", "month", "year")


# ─── Rent log ─────────────────────────────────────────────────────────────────

async def _get_rent(rent_id: int, db: AsyncSession) -> RentLog:
    rent = await db.get(RentLog, rent_id)
    if not rent:
        raise NotFound("Rent entry not found")
    return rent


@rent_log_router.get("", response_model=list[RentLogResponse])
async def list_rent_log(
    property_id: int,
    year: int | None = None,
    db: AsyncSession = Depends(get_db),
):
    query = select(RentLog).where(RentLog.property_id == property_id)
    if year is not None:
        query = query.where(RentLog.year == year)
    result = await db.execute(query)
    # Month is stored as text; calendar order is applied here
    return sorted(result.scalars().all(), key=lambda r: (r.year, month_index(r.month)))


@rent_log_router.post("", response_model=RentLogResponse)
async def upsert_rent_log(
    payload: RentLogUpsert,
    db: AsyncSession = Depends(get_db),
):
    """Record rent for a property-month. A second write for the same month merges into the first."""
    await get_property_or_404(payload.property_id, db)
    key = payload.model_dump(include=set(_MONTH_KEY))
    present = payload.model_dump(exclude_unset=True, exclude=set(_MONTH_KEY))
    create_values = {
        "rent_amount": 0,
        "date_deposited": date.today(),
        "check_number": None,
        "notes": None,
        **present,
    }
    rent = await upsert(db, RentLog, key, create_values, present)
    logger.info("Rent %s %d for property %d: %s", rent.month, rent.year, rent.property_id, rent.rent_amount)
    return rent


@rent_log_router.get("/{rent_id}", response_model=RentLogResponse)
async def get_rent_log(rent_id: int, db: AsyncSession = Depends(get_db)):
    return await _get_rent(rent_id, db)


@rent_log_router.patch("/{rent_id}", response_model=RentLogResponse)
async def update_rent_log(
    rent_id: int,
    payload: RentLogUpdate,
    db: AsyncSession = Depends(get_db),
):
    rent = await _get_rent(rent_id, db)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(rent, field, value)
    await db.flush()
    await db.refresh(rent)
    return rent


@rent_log_router.delete("/{rent_id}", status_code=204)
async def delete_rent_log(rent_id: int, db: AsyncSession = Depends(get_db)):
    rent = await _get_rent(rent_id, db)
    await db.delete(rent)
    await db.flush()
    logger.info("Deleted rent entry %d", rent_id)


# ─── Payment log ──────────────────────────────────────────────────────────────

@router.get("/paymentlog", response_model=list[PaymentLogResponse])
async def list_payment_log(
    property_id: int,
    year: int,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(PaymentLog).where(PaymentLog.property_id == property_id, PaymentLog.year == year)
    )
    return sorted(result.scalars().all(), key=lambda p: month_index(p.month))


@router.post("/paymentlog", response_model=PaymentLogResponse)
async def upsert_payment_log(
    payload: PaymentLogUpsert,
    db: AsyncSession = Depends(get_db),
):
    await get_property_or_404(payload.property_id, db)
    key = payload.model_dump(include=set(_MONTH_KEY))
    present = payload.model_dump(exclude_unset=True, exclude=set(_MONTH_KEY))
    payment = await upsert(db, PaymentLog, key, present, present)
    logger.info("Payment %s %d recorded for property %d", payment.month, payment.year, payment.property_id)
    return payment


# ─── Tenants ──────────────────────────────────────────────────────────────────

def _refresh_status(tenant: Tenant, today: date | None = None) -> bool:
    """Recompute tenant_status from the lease dates. Returns True when it changed."""
    status = tenant_status(tenant.lease_start, tenant.lease_end, today)
    if tenant.tenant_status == status:
        return False
    tenant.tenant_status = status
    return True


async def _get_tenant(tenant_id: int, db: AsyncSession) -> Tenant:
    tenant = await db.get(Tenant, tenant_id)
    if not tenant:
        raise NotFound("Tenant not found")
    return tenant


@router.get("/tenant", response_model=list[TenantResponse])
async def list_tenants(
    property_id: int,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Tenant).where(Tenant.property_id == property_id).order_by(Tenant.tenant_id)
    )
    tenants = result.scalars().all()
    today = date.today()
    stale = [t for t in tenants if _refresh_status(t, today)]
    if stale:
        await db.flush()
        for t in stale:
            await db.refresh(t)
        logger.info("Refreshed status of %d tenants for property %d", len(stale), property_id)
    return sorted(tenants, key=lambda t: status_sort_key(t.tenant_status))


@router.post("/tenant", response_model=TenantResponse)
async def upsert_tenant(
    payload: TenantCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a tenant, or merge into the one with the same name and lease start."""
    await get_property_or_404(payload.property_id, db)
    values = payload.model_dump(exclude_unset=True, exclude={"property_id", "contact_id"})

    if payload.contact_id is not None:
        contact = await db.get(Contact, payload.contact_id)
        if not contact:
            raise NotFound("Contact not found")
        if not values.get("tenant_name"):
            values["tenant_name"] = contact.contact_name

    if not values.get("tenant_name"):
        raise ValidationError("tenant_name or contact_id is required")

    if payload.lease_start is None:
        # NULL never conflicts, so there is no natural key to merge on
        tenant = Tenant(property_id=payload.property_id, **values)
        db.add(tenant)
    else:
        key = {
            "property_id": payload.property_id,
            "tenant_name": values.pop("tenant_name"),
            "lease_start": values.pop("lease_start"),
        }
        update_values = {**values, "updated_at": func.now()} if values else {}
        tenant = await upsert(db, Tenant, key, values, update_values)

    _refresh_status(tenant)
    await db.flush()
    await db.refresh(tenant)
    logger.info("Saved tenant %d (%s) for property %d", tenant.tenant_id, tenant.tenant_name, tenant.property_id)
    return tenant


async def _save_tenant(tenant: Tenant, values: dict, db: AsyncSession) -> Tenant:
    for field, value in values.items():
        setattr(tenant, field, value)
    if tenant.lease_start and tenant.lease_end and tenant.lease_end < tenant.lease_start:
        raise ValidationError("lease_end must not be before lease_start")
    _refresh_status(tenant)
    await db.flush()
    await db.refresh(tenant)
    return tenant


@router.put("/tenant/{tenant_id}", response_model=TenantResponse)
async def replace_tenant(
    tenant_id: int,
    payload: TenantReplace,
    db: AsyncSession = Depends(get_db),
):
    tenant = await _get_tenant(tenant_id, db)
    return await _save_tenant(tenant, payload.model_dump(), db)


@router.patch("/tenant/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: int,
    payload: TenantUpdate,
    db: AsyncSession = Depends(get_db),
):
    tenant = await _get_tenant(tenant_id, db)
    return await _save_tenant(tenant, payload.model_dump(exclude_unset=True), db)


@router.delete("/tenant/{tenant_id}", status_code=204)
async def delete_tenant(tenant_id: int, db: AsyncSession = Depends(get_db)):
    tenant = await _get_tenant(tenant_id, db)
    await db.delete(tenant)
    await db.flush()
    logger.info("Deleted tenant %d", tenant_id)
