import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.errors import NotFound
from app.models.transaction import Transaction
from app.routers.properties import get_property_or_404
from app.schemas.transaction import TransactionCreate, TransactionResponse, TransactionUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["transactions"])


async def _get_transaction(transaction_id: int, db: AsyncSession) -> Transaction:
    txn = await db.get(Transaction, transaction_id)
    if not txn:
        raise NotFound("Transaction not found")
    return txn


@router.get("/transactions", response_model=list[TransactionResponse])
async def list_transactions(
    property_id: int | None = None,
    db: AsyncSession = Depends(get_db),
):
    query = select(Transaction).order_by(
        Transaction.transaction_date.desc(), Transaction.transaction_id.desc()
    )
    if property_id is not None:
        query = query.where(Transaction.property_id == property_id)
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(transaction_id: int, db: AsyncSession = Depends(get_db)):
    return await _get_transaction(transaction_id, db)


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    payload: TransactionCreate,
    db: AsyncSession = Depends(get_db),
):
    await get_property_or_404(payload.property_id, db)
    txn = Transaction(**payload.model_dump())
    db.add(txn)
    await db.flush()
    await db.refresh(txn)
    logger.info(
        "Transaction %d for property %d: %s %s",
        txn.transaction_id, txn.property_id, txn.transaction_type, txn.transaction_amount,
    )
    return txn


@router.patch("/transactions/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: int,
    payload: TransactionUpdate,
    db: AsyncSession = Depends(get_db),
):
    txn = await _get_transaction(transaction_id, db)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(txn, field, value)
    await db.flush()
    await db.refresh(txn)
    return txn


@router.delete("/transactions/{transaction_id}", status_code=204)
async def delete_transaction(transaction_id: int, db: AsyncSession = Depends(get_db)):
    txn = await _get_transaction(transaction_id, db)
    await db.delete(txn)
    await db.flush()
    logger.info("Deleted transaction %d", transaction_id)
