"""Yearly rent and expense reports.

Pure builders: the router loads the rows, these group them per property and
add up the totals. Every requested property gets a section, empty or not.
"""
from collections import defaultdict
from collections.abc import Iterable
from decimal import Decimal

from app.models.property import Property
from app.models.rental import RentLog
from app.models.transaction import Transaction
from app.schemas.report import (
    ExpenseReport,
    ExpenseReportProperty,
    ExpenseReportRow,
    RentReport,
    RentReportMonth,
    RentReportProperty,
)
from app.services.rent_calendar import MONTHS, month_index

ZERO = Decimal("0.00")


def build_rent_report(year: int, properties: Iterable[Property], rents: Iterable[RentLog]) -> RentReport:
    """Twelve months per property; a month with no entry reports None and counts as zero."""
    by_month: dict[int, dict[int, Decimal]] = defaultdict(dict)
    for rent in rents:
        idx = month_index(rent.month)
        if idx >= len(MONTHS) or rent.rent_amount is None:
            continue
        months = by_month[rent.property_id]
        months[idx] = months.get(idx, ZERO) + rent.rent_amount

    sections = []
    for prop in properties:
        months = by_month.get(prop.property_id, {})
        sections.append(RentReportProperty(
            property_id=prop.property_id,
            property_name=prop.property_name,
            months=[RentReportMonth(month=m, amount=months.get(i)) for i, m in enumerate(MONTHS)],
            total=sum(months.values(), ZERO),
        ))
    return RentReport(
        year=year,
        properties=sections,
        grand_total=sum((s.total for s in sections), ZERO),
    )


def build_expense_report(
    year: int,
    properties: Iterable[Property],
    transactions: Iterable[Transaction],
) -> ExpenseReport:
    """Transactions of the year per property, oldest first, with their sum."""
    rows: dict[int, list[ExpenseReportRow]] = defaultdict(list)
    for txn in sorted(transactions, key=lambda t: (t.transaction_date, t.transaction_id)):
        if txn.transaction_date.year != year:
            continue
        rows[txn.property_id].append(ExpenseReportRow(
            transaction_id=txn.transaction_id,
            transaction_date=txn.transaction_date,
            transaction_type=txn.transaction_type,
            transaction_amount=txn.transaction_amount,
            notes=txn.notes,
        ))

    sections = [
        ExpenseReportProperty(
            property_id=prop.property_id,
            property_name=prop.property_name,
            rows=rows.get(prop.property_id, []),
            total=sum((r.transaction_amount for r in rows.get(prop.property_id, [])), ZERO),
        )
        for prop in properties
    ]
    return ExpenseReport(
        year=year,
        properties=sections,
        grand_total=sum((s.total for s in sections), ZERO),
    )
