"""Month handling for the monthly logs (rent log, payment log)."""

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_FULL_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)
_LOOKUP: dict[str, str] = {}
for _abbr, _full in zip(MONTHS, _FULL_NAMES):
    _LOOKUP[_abbr.lower()] = _abbr
    _LOOKUP[_full] = _abbr
_LOOKUP["sept"] = "Sep"


def normalize_month(value: str | int) -> str:
    """Map 'jan', 'January', 'JAN' or 1 to 'Jan'. Raises ValueError otherwise."""
    if isinstance(value, int):
        if 1 <= value <= 12:
            return MONTHS[value - 1]
        raise ValueError(f"month number {value} out of range 1-12")
    key = value.strip().lower()
    if key.isdigit():
        return normalize_month(int(key))
    try:
        return _LOOKUP[key]
    except KeyError:
        raise ValueError(f"unknown month '{value}'") from None


def month_index(month: str) -> int:
    """Calendar position of a stored month, 0-based. Unknown values sort last."""
    try:
        return MONTHS.index(month)
    except ValueError:
        return len(MONTHS)
