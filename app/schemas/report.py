from datetime import date
from decimal import Decimal

from pydantic import BaseModel


# ─── Rent report ──────────────────────────────────────────────────────────────

class RentReportMonth(BaseModel):
    month: str
    amount: Decimal | None  # None: nothing logged for the month


class RentReportProperty(BaseModel):
    property_id: int
    property_name: str
    months: list[RentReportMonth]
    total: Decimal


class RentReport(BaseModel):
    year: int
    properties: list[RentReportProperty]
    grand_total: Decimal


# ─── Expense report ───────────────────────────────────────────────────────────

class ExpenseReportRow(BaseModel):
    transaction_id: int
    transaction_date: date
    transaction_type: str | None
    transaction_amount: Decimal
    notes: str | None


class ExpenseReportProperty(BaseModel):
    property_id: int
    property_name: str
    rows: list[ExpenseReportRow]
    total: Decimal


class ExpenseReport(BaseModel):
    year: int
    properties: list[ExpenseReportProperty]
    grand_total: Decimal
