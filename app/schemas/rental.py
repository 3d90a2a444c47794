from datetime import date, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, field_validator, model_validator

from app.schemas.common import DateOnly, Money, Text, WholeNumber, max_length, reject_null
from app.services.rent_calendar import normalize_month


def _month(v):
    if isinstance(v, bool) or not isinstance(v, (str, int)):
        raise ValueError("month must be a month name or number")
    return normalize_month(v)


MonthName = Annotated[str, BeforeValidator(_month)]


# ─── Rent log ─────────────────────────────────────────────────────────────────

class RentLogUpsert(BaseModel):
    """POST body: (property_id, month, year) names the row, the rest is merged into it."""
    property_id: int
    month: MonthName
    year: int
    rent_amount: Money = None  # 0 on first write
    date_deposited: DateOnly = None  # today on first write
    check_number: WholeNumber = None
    notes: Text = None

    @field_validator("rent_amount", "date_deposited")
    @classmethod
    def not_null(cls, v, info):
        return reject_null(v, info.field_name)


class RentLogUpdate(BaseModel):
    rent_amount: Money = None
    date_deposited: DateOnly = None
    check_number: WholeNumber = None
    notes: Text = None

    @field_validator("rent_amount", "date_deposited")
    @classmethod
    def not_null(cls, v, info):
        return reject_null(v, info.field_name)


class RentLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rent_id: int
    property_id: int
    month: str
    year: int
    rent_amount: Decimal
    date_deposited: date
    check_number: int | None
    notes: str | None


# ─── Payment log ──────────────────────────────────────────────────────────────

class PaymentLogUpsert(BaseModel):
    property_id: int
    month: MonthName
    year: int
    payment_amount: Money = None
    check_number: WholeNumber = None
    notes: Text = None
    date_paid: DateOnly = None


class PaymentLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    property_id: int
    year: int
    month: str
    payment_amount: Decimal | None
    check_number: int | None
    notes: str | None
    date_paid: date | None


# ─── Tenant ───────────────────────────────────────────────────────────────────

class _LeaseDates(BaseModel):
    lease_start: DateOnly = None
    lease_end: DateOnly = None

    @model_validator(mode="after")
    def end_after_start(self):
        if self.lease_start and self.lease_end and self.lease_end < self.lease_start:
            raise ValueError("lease_end must not be before lease_start")
        return self


TenantName = Annotated[Text, max_length(255)]


def _tenant_name(v):
    if v is None or not str(v).strip():
        raise ValueError("tenant_name is required")
    return str(v).strip()


class TenantCreate(_LeaseDates):
    property_id: int
    tenant_name: TenantName = None
    contact_id: int | None = None  # copies the contact's name when tenant_name is empty
    rent_amount: Money = None


class TenantUpdate(_LeaseDates):
    tenant_name: TenantName = None
    rent_amount: Money = None

    # Only runs when tenant_name is in the body
    @field_validator("tenant_name", mode="before")
    @classmethod
    def named(cls, v):
        return _tenant_name(v)


class TenantReplace(TenantUpdate):
    """PUT body: the whole row, so the name is mandatory."""
    tenant_name: Annotated[str, max_length(255)]


class TenantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tenant_id: int
    property_id: int
    tenant_name: str | None
    tenant_status: str | None
    lease_start: date | None
    lease_end: date | None
    rent_amount: Decimal | None
    created_at: datetime
    updated_at: datetime
