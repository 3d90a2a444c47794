from datetime import date
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, field_validator

from app.schemas.common import DateOnly, Money, Rate, Text, WholeNumber, max_length


# ─── Purchase details ─────────────────────────────────────────────────────────

class PurchaseDetailsCreate(BaseModel):
    property_id: int
    closing_date: DateOnly = None  # defaults to today
    purchase_price: Money = None
    financing_type: Text = None
    acquisition_type: Text = None
    buyer: Text = None
    seller: Text = None
    closing_costs: Money = None
    earnest_money: Money = None
    down_payment: Money = None
    notes: Text = None


class PurchaseDetailsUpdate(BaseModel):
    closing_date: DateOnly = None
    purchase_price: Money = None
    financing_type: Text = None
    acquisition_type: Text = None
    buyer: Text = None
    seller: Text = None
    closing_costs: Money = None
    earnest_money: Money = None
    down_payment: Money = None
    notes: Text = None


class PurchaseDetailsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    purchase_id: int
    property_id: int
    closing_date: date | None
    purchase_price: Decimal | None
    financing_type: str | None
    acquisition_type: str | None
    buyer: str | None
    seller: str | None
    closing_costs: Decimal | None
    earnest_money: Decimal | None
    down_payment: Decimal | None
    notes: str | None


# ─── Loan details ─────────────────────────────────────────────────────────────

class LoanDetailsUpdate(BaseModel):
    loan_amount: Money = None
    lender: Text = None
    interest_rate: Rate = None  # percent, e.g. 6.875
    loan_term: WholeNumber = None  # months
    loan_start: DateOnly = None
    loan_end: DateOnly = None
    amortization_period: WholeNumber = None
    monthly_payment: Money = None
    loan_type: Text = None
    balloon_payment: bool | None = None
    prepayment_penalty: bool | None = None
    refinanced: bool | None = None
    loan_status: Text = None
    notes: Text = None


class LoanDetailsCreate(LoanDetailsUpdate):
    loan_id: Annotated[str, max_length(100)]
    property_id: int
    purchase_id: int

    @field_validator("loan_id", mode="before")
    @classmethod
    def loan_number(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            v = str(v)
        if not isinstance(v, str) or not v.strip():
            raise ValueError("loan_id is required")
        return v.strip()


class LoanDetailsKeyedUpdate(LoanDetailsUpdate):
    """PATCH body addressed by (property_id, purchase_id) instead of loan number."""
    property_id: int
    purchase_id: int


class LoanDetailsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    loan_id: str
    property_id: int
    purchase_id: int
    loan_amount: Decimal | None
    lender: str | None
    interest_rate: Decimal | None
    loan_term: int | None
    loan_start: date | None
    loan_end: date | None
    amortization_period: int | None
    monthly_payment: Decimal | None
    loan_type: str | None
    balloon_payment: bool | None
    prepayment_penalty: bool | None
    refinanced: bool | None
    loan_status: str | None
    notes: str | None
