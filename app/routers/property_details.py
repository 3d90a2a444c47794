import logging
from datetime import date

from fastapi import APIRouter, Depends, Response
from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.errors import ConflictError, NotFound
from app.models.property_details import LoanDetails, PurchaseDetails
from app.routers.properties import get_property_or_404
from app.schemas.property_details import (
    LoanDetailsCreate,
    LoanDetailsKeyedUpdate,
    LoanDetailsResponse,
    LoanDetailsUpdate,
    PurchaseDetailsCreate,
    PurchaseDetailsResponse,
    PurchaseDetailsUpdate,
)
from app.services.upsert import insert_or_get

logger = logging.getLogger(__name__)

router = APIRouter(tags=["property-details"])

LOAN_EXISTS = "Loan already exists for this property"

# Stored for every column the create body leaves out
_LOAN_DEFAULTS = {
    "loan_amount": 0,
    "lender": "",
    "interest_rate": 0,
    "loan_term": 0,
    "amortization_period": 0,
    "monthly_payment": 0,
    "loan_type": "",
    "balloon_payment": False,
    "prepayment_penalty": False,
    "refinanced": False,
    "loan_status": "",
    "notes": "",
}


def _apply(obj, payload) -> None:
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(obj, field, value)


# ─── Purchase details ─────────────────────────────────────────────────────────

@router.get("/purchase_details", response_model=PurchaseDetailsResponse)
async def get_purchase_details_for_property(
    property_id: int,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(PurchaseDetails).where(PurchaseDetails.property_id == property_id)
    )
    details = result.scalar_one_or_none()
    if not details:
        raise NotFound("not_found")
    return details


@router.get("/purchase_details/{purchase_id}", response_model=PurchaseDetailsResponse)
async def get_purchase_details(
    purchase_id: int,
    db: AsyncSession = Depends(get_db),
):
    details = await db.get(PurchaseDetails, purchase_id)
    if not details:
        raise NotFound("not_found")
    return details


@router.post("/purchase_details", response_model=PurchaseDetailsResponse, status_code=201)
async def create_purchase_details(
    payload: PurchaseDetailsCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Idempotent: a property that already has purchase details gets them back untouched."""
    await get_property_or_404(payload.property_id, db)
    values = payload.model_dump(exclude={"property_id"})
    if values["closing_date"] is None:
        values["closing_date"] = date.today()
    details, created = await insert_or_get(
        db, PurchaseDetails, {"property_id": payload.property_id}, values
    )
    if created:
        logger.info("Created purchase details %d for property %d", details.purchase_id, details.property_id)
    else:
        response.status_code = 200
    return details


@router.patch("/purchase_details/{purchase_id}", response_model=PurchaseDetailsResponse)
async def update_purchase_details(
    purchase_id: int,
    payload: PurchaseDetailsUpdate,
    db: AsyncSession = Depends(get_db),
):
    details = await db.get(PurchaseDetails, purchase_id)
    if not details:
        raise NotFound("not_found")
    _apply(details, payload)
    await db.flush()
    await db.refresh(details)
    return details


# ─── Loan details ─────────────────────────────────────────────────────────────

async def _get_loan(loan_id: str, db: AsyncSession) -> LoanDetails:
    loan = await db.get(LoanDetails, loan_id)
    if not loan:
        raise NotFound("Loan not found")
    return loan


@router.get("/loan_details", response_model=LoanDetailsResponse)
async def get_loan_details_for_property(
    property_id: int,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(LoanDetails)
        .where(LoanDetails.property_id == property_id)
        .order_by(LoanDetails.loan_start.is_(None), LoanDetails.loan_start, LoanDetails.loan_id)
        .limit(1)
    )
    loan = result.scalar_one_or_none()
    if not loan:
        raise NotFound("not_found")
    return loan


@router.post("/loan_details", response_model=LoanDetailsResponse, status_code=201)
async def create_loan_details(
    payload: LoanDetailsCreate,
    db: AsyncSession = Depends(get_db),
):
    purchase = await db.get(PurchaseDetails, payload.purchase_id)
    if not purchase or purchase.property_id != payload.property_id:
        raise NotFound("Purchase details not found for this property")

    existing = await db.execute(
        select(LoanDetails.loan_id).where(
            or_(
                LoanDetails.loan_id == payload.loan_id,
                and_(
                    LoanDetails.property_id == payload.property_id,
                    LoanDetails.purchase_id == payload.purchase_id,
                ),
            )
        )
    )
    if existing.first():
        logger.warning(
            "Rejected loan %s: property %d purchase %d already financed",
            payload.loan_id, payload.property_id, payload.purchase_id,
        )
        raise ConflictError(LOAN_EXISTS)

    loan = LoanDetails(**{**_LOAN_DEFAULTS, **payload.model_dump(exclude_unset=True)})
    db.add(loan)
    try:
        await db.flush()
    except IntegrityError:
        logger.warning("Concurrent create of loan for property %d lost", payload.property_id)
        raise ConflictError(LOAN_EXISTS) from None
    await db.refresh(loan)
    logger.info("Created loan %s for property %d", loan.loan_id, loan.property_id)
    return loan


# Must be declared before /{loan_id} so the literal path wins
@router.patch("/loan_details/by_property_purchase", response_model=LoanDetailsResponse)
async def update_loan_details_by_property_purchase(
    payload: LoanDetailsKeyedUpdate,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(LoanDetails).where(
            LoanDetails.property_id == payload.property_id,
            LoanDetails.purchase_id == payload.purchase_id,
        )
    )
    loan = result.scalar_one_or_none()
    if not loan:
        raise NotFound("Loan not found")
    for field, value in payload.model_dump(
        exclude_unset=True, exclude={"property_id", "purchase_id"}
    ).items():
        setattr(loan, field, value)
    await db.flush()
    await db.refresh(loan)
    return loan


@router.patch("/loan_details/{loan_id}", response_model=LoanDetailsResponse)
async def update_loan_details(
    loan_id: str,
    payload: LoanDetailsUpdate,
    db: AsyncSession = Depends(get_db),
):
    loan = await _get_loan(loan_id, db)
    _apply(loan, payload)
    await db.flush()
    await db.refresh(loan)
    return loan


@router.delete("/loan_details/{loan_id}", status_code=204)
async def delete_loan_details(
    loan_id: str,
    db: AsyncSession = Depends(get_db),
):
    loan = await _get_loan(loan_id, db)
    await db.delete(loan)
    await db.flush()
    logger.info("Deleted loan %s", loan_id)
