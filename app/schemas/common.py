"""Lenient input types for values typed into table cells.

The browser sends whatever the cell held: "" for a cleared cell, "1,200" for
a formatted amount, a full ISO timestamp where only the date matters.
"""
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any

from pydantic import AfterValidator, BeforeValidator


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _to_decimal(v: Any) -> Any:
    v = _blank_to_none(v)
    if isinstance(v, str):
        return v.strip().lstrip("$").replace(",", "")
    return v


def _to_int(v: Any) -> Any:
    v = _blank_to_none(v)
    if isinstance(v, str):
        return v.strip().replace(",", "")
    return v


def _to_date(v: Any) -> Any:
    v = _blank_to_none(v)
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, str) and len(v) > 10 and v[10] in "T ":
        # 2025-07-22T03:00:25.000Z -> 2025-07-22
        return v[:10]
    return v


def _to_str(v: Any) -> Any:
    if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
        return str(v)
    return v


def numeric(precision: int, scale: int):
    """Round to the column's scale and reject what a NUMERIC(precision, scale) cannot hold."""
    step = Decimal(1).scaleb(-scale)
    limit = Decimal(10) ** (precision - scale)

    def check(v: Decimal | None) -> Decimal | None:
        if v is None:
            return v
        if not v.is_finite():
            raise ValueError("must be a finite number")
        too_big = ValueError(f"must be less than {limit} in magnitude")
        # Range first: quantize overflows the context on huge exponents
        if abs(v) >= limit:
            raise too_big
        v = v.quantize(step, rounding=ROUND_HALF_UP)
        if abs(v) >= limit:
            raise too_big
        return v

    return AfterValidator(check)


def max_length(n: int):
    def check(v: str | None) -> str | None:
        if v is not None and len(v) > n:
            raise ValueError(f"must be at most {n} characters")
        return v

    return AfterValidator(check)


INT32_MAX = 2**31


def _int32(v: int | None) -> int | None:
    if v is not None and not -INT32_MAX <= v < INT32_MAX:
        raise ValueError("out of range")
    return v


# Optional by construction: the validator must see "" before the None check
Amount = Annotated[Decimal | None, BeforeValidator(_to_decimal)]
Money = Annotated[Amount, numeric(12, 2)]
Rate = Annotated[Amount, numeric(6, 4)]
WholeNumber = Annotated[int | None, BeforeValidator(_to_int), AfterValidator(_int32)]
DateOnly = Annotated[date | None, BeforeValidator(_to_date)]
Text = Annotated[str | None, BeforeValidator(_to_str)]


def reject_null(value: Any, field: str) -> Any:
    """For PATCH bodies: an explicit null is not allowed on NOT NULL columns."""
    if value is None:
        raise ValueError(f"{field} cannot be null")
    return value
