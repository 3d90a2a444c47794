"""Tenant status rule.

Status is never entered by hand: it is a pure function of the lease dates and
today's date, recomputed on every write and refreshed on read.
"""
from datetime import date

CURRENT = "Current"
FUTURE = "Future"
PAST = "Past"

# Display order: sitting tenants first, then upcoming, then former, then incomplete leases
_STATUS_ORDER = {CURRENT: 0, FUTURE: 1, PAST: 2}


def tenant_status(lease_start: date | None, lease_end: date | None, today: date | None = None) -> str | None:
    if lease_start is None or lease_end is None:
        return None
    today = today or date.today()
    if today < lease_start:
        return FUTURE
    if today > lease_end:
        return PAST
    return CURRENT


def status_sort_key(status: str | None) -> int:
    return _STATUS_ORDER.get(status, len(_STATUS_ORDER))
