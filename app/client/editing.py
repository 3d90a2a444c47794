"""Inline cell editing with optimistic display and uniform rollback.

A ``RowEditor`` owns one table row. The row it holds is always the last state
the server confirmed: an edit is shown optimistically while it is saving, and
on any failure the display falls back to that confirmed row.
"""
import logging
from collections.abc import Awaitable, Callable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

import httpx

from app.client.api import ApiError

logger = logging.getLogger(__name__)


class CellState(str, Enum):
    VIEWING = "viewing"
    EDITING = "editing"
    SAVING = "saving"


class ColumnType(str, Enum):
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    TEXT = "text"


class CoercionError(ValueError):
    pass


_TRUE = {"true", "yes", "y", "1", "on"}
_FALSE = {"false", "no", "n", "0", "off", ""}


def coerce_cell(raw: Any, column_type: ColumnType) -> Any:
    """Turn an edit-buffer value into the JSON value sent for its column."""
    if column_type == ColumnType.NUMBER:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return None
        if isinstance(raw, bool):
            raise CoercionError("expected a number")
        try:
            value = Decimal(str(raw).strip().lstrip("$").replace(",", ""))
        except InvalidOperation:
            raise CoercionError(f"'{raw}' is not a number") from None
        if not value.is_finite():
            raise CoercionError(f"'{raw}' is not a number")
        return int(value) if value == value.to_integral_value() else float(value)

    if column_type == ColumnType.DATE:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return None
        if isinstance(raw, datetime):
            return raw.date().isoformat()
        if isinstance(raw, date):
            return raw.isoformat()
        try:
            return date.fromisoformat(str(raw).strip()[:10]).isoformat()
        except ValueError:
            raise CoercionError(f"'{raw}' is not a date (YYYY-MM-DD)") from None

    if column_type == ColumnType.BOOLEAN:
        if isinstance(raw, bool):
            return raw
        text = "" if raw is None else str(raw).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise CoercionError(f"'{raw}' is not yes/no")

    return None if raw is None else str(raw)


SaveFn = Callable[[dict], Awaitable[dict]]


class RowEditor:
    def __init__(self, row: dict, save: SaveFn, columns: dict[str, ColumnType] | None = None):
        self.row = dict(row)
        self.columns = columns or {}
        self.error: str | None = None
        self._save = save
        self._states: dict[str, CellState] = {}
        self._buffer: dict[str, Any] = {}
        self._pending: dict[str, Any] = {}

    def state(self, field: str) -> CellState:
        return self._states.get(field, CellState.VIEWING)

    def display(self, field: str) -> Any:
        """Buffer while editing, the value in flight while saving, else the confirmed row."""
        if field in self._buffer:
            return self._buffer[field]
        if field in self._pending:
            return self._pending[field]
        return self.row.get(field)

    def begin(self, field: str) -> None:
        if self.state(field) != CellState.VIEWING:
            return
        self._buffer[field] = self.row.get(field)
        self._states[field] = CellState.EDITING

    def edit(self, field: str, value: Any) -> None:
        if self.state(field) != CellState.EDITING:
            raise RuntimeError(f"{field} is not being edited")
        self._buffer[field] = value

    def cancel(self, field: str) -> None:
        """Escape: drop the buffer, no request."""
        if self.state(field) != CellState.EDITING:
            return
        del self._buffer[field]
        self._states[field] = CellState.VIEWING

    async def commit(self, field: str) -> bool:
        """Blur/Enter: save the buffer as a one-field PATCH. Returns whether it was saved."""
        if self.state(field) != CellState.EDITING:
            return False
        raw = self._buffer.pop(field)
        try:
            value = coerce_cell(raw, self.columns.get(field, ColumnType.TEXT))
        except CoercionError as exc:
            self._fail(field, str(exc))
            return False

        self._states[field] = CellState.SAVING
        self._pending[field] = value
        try:
            confirmed = dict(await self._save({field: value}))
        except ApiError as exc:
            self._fail(field, exc.error)
            return False
        except httpx.HTTPError as exc:
            self._fail(field, f"Network error: {exc}")
            return False
        except Exception as exc:
            logger.exception("Unexpected failure saving %s", field)
            self._fail(field, f"Save failed: {exc}")
            return False

        # The server's row carries derived values (e.g. tenant_status), take all of it
        self.row = confirmed
        self._pending.pop(field, None)
        self._states[field] = CellState.VIEWING
        self.error = None
        return True

    def _fail(self, field: str, message: str) -> None:
        logger.warning("Save of %s failed: %s", field, message)
        self._pending.pop(field, None)
        self._states[field] = CellState.VIEWING
        self.error = message


class DeleteConfirmation:
    """Delete guarded by typing DELETE."""

    WORD = "DELETE"

    def __init__(self, delete: Callable[[], Awaitable[Any]]):
        self._delete = delete
        self.confirming = False
        self.typed = ""
        self.error: str | None = None

    def request(self) -> None:
        self.confirming = True
        self.typed = ""
        self.error = None

    def type(self, text: str) -> None:
        if self.confirming:
            self.typed = text

    def cancel(self) -> None:
        self.confirming = False
        self.typed = ""

    async def confirm(self) -> bool:
        if not self.confirming or self.typed != self.WORD:
            return False
        try:
            await self._delete()
        except ApiError as exc:
            self.error = exc.error
            return False
        except httpx.HTTPError as exc:
            self.error = f"Network error: {exc}"
            return False
        except Exception as exc:
            logger.exception("Unexpected failure deleting")
            self.error = f"Delete failed: {exc}"
            return False
        finally:
            self.cancel()
        return True
