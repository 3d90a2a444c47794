import logging
import re

from fastapi import APIRouter, Depends
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.errors import NotFound
from app.models.contact import Contact
from app.schemas.contact import ContactCreate, ContactResponse, ContactUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["contacts"])


async def _get_contact(contact_id: int, db: AsyncSession) -> Contact:
    contact = await db.get(Contact, contact_id)
    if not contact:
        raise NotFound("Contact not found")
    return contact


@router.get("/contacts", response_model=list[ContactResponse])
async def list_contacts(
    q: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    query = select(Contact).order_by(Contact.contact_name, Contact.contact_id)
    if q and q.strip():
        term = f"%{q.strip()}%"
        conditions = [
            Contact.contact_name.ilike(term),
            Contact.contact_email.ilike(term),
            Contact.contact_type.ilike(term),
            Contact.contact_notes.ilike(term),
        ]
        # Phones are stored as bare digits: "(555) 010" matches 5550100000
        digits = re.sub(r"\D", "", q)
        if digits:
            conditions.append(Contact.contact_phone.contains(digits))
        query = query.where(or_(*conditions))
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/contacts/{contact_id}", response_model=ContactResponse)
async def get_contact(contact_id: int, db: AsyncSession = Depends(get_db)):
    return await _get_contact(contact_id, db)


@router.post("/contacts", response_model=ContactResponse, status_code=201)
async def create_contact(
    payload: ContactCreate,
    db: AsyncSession = Depends(get_db),
):
    contact = Contact(**payload.to_columns())
    db.add(contact)
    await db.flush()
    await db.refresh(contact)
    logger.info("Created contact %d (%s)", contact.contact_id, contact.contact_name)
    return contact


@router.patch("/contacts/{contact_id}", response_model=ContactResponse)
async def update_contact(
    contact_id: int,
    payload: ContactUpdate,
    db: AsyncSession = Depends(get_db),
):
    contact = await _get_contact(contact_id, db)
    for column, value in payload.to_columns().items():
        setattr(contact, column, value)
    await db.flush()
    await db.refresh(contact)
    return contact


@router.delete("/contacts/{contact_id}", status_code=204)
async def delete_contact(contact_id: int, db: AsyncSession = Depends(get_db)):
    contact = await _get_contact(contact_id, db)
    await db.delete(contact)
    await db.flush()
    logger.info("Deleted contact %d", contact_id)
