"""
Yearly reports.
Endpoints:
  GET /reports/rent?year=2024&property_id=1&property_id=2
  GET /reports/expenses?year=2024
Without property_id every property is reported.
"""
import logging
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.errors import NotFound
from app.models.property import Property
from app.models.rental import RentLog
from app.models.transaction import Transaction
from app.schemas.report import ExpenseReport, RentReport
from app.services.reports import build_expense_report, build_rent_report

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reports"])


async def _selected_properties(property_ids: list[int] | None, db: AsyncSession) -> list[Property]:
    query = select(Property).order_by(Property.property_id)
    if property_ids:
        query = query.where(Property.property_id.in_(property_ids))
    props = list((await db.execute(query)).scalars().all())
    if property_ids:
        missing = sorted(set(property_ids) - {p.property_id for p in props})
        if missing:
            raise NotFound("Property not found", {"property_ids": missing})
    return props


@router.get("/reports/rent", response_model=RentReport)
async def rent_report(
    year: int = Query(ge=1900, le=3000),
    property_id: list[int] | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    props = await _selected_properties(property_id, db)
    result = await db.execute(
        select(RentLog).where(
            RentLog.year == year,
            RentLog.property_id.in_([p.property_id for p in props]),
        )
    )
    report = build_rent_report(year, props, result.scalars().all())
    logger.info("Rent report %d: %d properties, total %s", year, len(props), report.grand_total)
    return report


@router.get("/reports/expenses", response_model=ExpenseReport)
async def expense_report(
    year: int = Query(ge=1900, le=3000),
    property_id: list[int] | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    props = await _selected_properties(property_id, db)
    result = await db.execute(
        select(Transaction).where(
            Transaction.transaction_date >= date(year, 1, 1),
            Transaction.transaction_date <= date(year, 12, 31),
            Transaction.property_id.in_([p.property_id for p in props]),
        )
    )
    report = build_expense_report(year, props, result.scalars().all())
    logger.info("Expense report %d: %d properties, total %s", year, len(props), report.grand_total)
    return report
