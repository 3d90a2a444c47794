import re
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.contact import CONTACT_TYPES
from app.schemas.common import max_length

_COLUMNS = {
    "name": "contact_name",
    "phone": "contact_phone",
    "email": "contact_email",
    "contact_type": "contact_type",
    "notes": "contact_notes",
}


def normalize_phone(v: str | int | None) -> str:
    """Keep the digits, clamp to ten. Anything shorter is rejected."""
    digits = re.sub(r"\D", "", str(v or ""))[:10]
    if len(digits) != 10:
        raise ValueError("phone must have 10 digits")
    return digits


def _name(v: str | None) -> str:
    name = (v or "").strip()
    if not name:
        raise ValueError("name is required")
    return name


def _contact_type(v: str | None) -> str | None:
    if v is None or not v.strip():
        return None
    for known in CONTACT_TYPES:
        if v.strip().lower() == known.lower():
            return known
    raise ValueError(f"contact_type must be one of: {', '.join(CONTACT_TYPES)}")


def _optional(v: str | None) -> str | None:
    if v is None or not str(v).strip():
        return None
    return str(v).strip()


class ContactCreate(BaseModel):
    name: Annotated[str, max_length(255)]
    phone: str
    email: Annotated[str | None, max_length(255)] = None
    contact_type: str | None = None
    notes: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def valid_name(cls, v):
        return _name(v)

    @field_validator("phone", mode="before")
    @classmethod
    def valid_phone(cls, v):
        return normalize_phone(v)

    @field_validator("contact_type", mode="before")
    @classmethod
    def valid_type(cls, v):
        return _contact_type(v)

    @field_validator("email", "notes", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        return _optional(v)

    def to_columns(self) -> dict:
        return {_COLUMNS[k]: v for k, v in self.model_dump(exclude_unset=True).items()}


class ContactUpdate(ContactCreate):
    name: Annotated[str | None, max_length(255)] = None
    phone: str | None = None


class ContactResponse(BaseModel):
    """Reads the contact_* columns, answers with the short names the UI uses."""
    model_config = ConfigDict(from_attributes=True)

    contact_id: int
    name: str = Field(validation_alias="contact_name")
    phone: str = Field(validation_alias="contact_phone")
    email: str | None = Field(validation_alias="contact_email")
    contact_type: str | None
    notes: str | None = Field(validation_alias="contact_notes")
    created_at: datetime
    updated_at: datetime
