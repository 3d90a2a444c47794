"""Natural-key writes.

The found/not-found decision is delegated to the store: a single
``INSERT ... ON CONFLICT (key)`` statement runs against the unique index on
the natural key, so two concurrent writes for one key can never produce two
rows. PostgreSQL and SQLite share the ON CONFLICT syntax; the
dialect-specific ``insert`` construct is picked from the session's bind.
"""
import logging
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import Base
from app.core.errors import StoreError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _insert(db: AsyncSession, model: type[Base]):
    dialect = db.get_bind().dialect.name
    if dialect not in _INSERTS:
        raise StoreError(f"natural-key writes are not supported on {dialect}")
    return _INSERTS[dialect](model)


async def _fetch(db: AsyncSession, model: type[ModelT], key: dict[str, Any]) -> ModelT:
    # populate_existing: the statement bypassed the identity map, reload the row
    query = select(model).filter_by(**key).execution_options(populate_existing=True)
    return (await db.execute(query)).scalar_one()


async def upsert(
    db: AsyncSession,
    model: type[ModelT],
    key: dict[str, Any],
    create_values: dict[str, Any],
    update_values: dict[str, Any],
) -> ModelT:
    """Insert ``key`` + ``create_values``, or merge ``update_values`` into the row matching ``key``.

    Partial merge: columns absent from ``update_values`` keep their stored
    value; a column present with ``None`` is overwritten with NULL.
    """
    stmt = _insert(db, model).values({**create_values, **key})
    if update_values:
        stmt = stmt.on_conflict_do_update(index_elements=list(key), set_=update_values)
    else:
        stmt = stmt.on_conflict_do_nothing(index_elements=list(key))
    await db.execute(stmt)
    row = await _fetch(db, model, key)
    logger.debug("upsert %s %s", model.__tablename__, key)
    return row


async def insert_or_get(
    db: AsyncSession,
    model: type[ModelT],
    key: dict[str, Any],
    create_values: dict[str, Any],
) -> tuple[ModelT, bool]:
    """Insert a row for ``key`` unless one exists. Returns ``(row, created)``.

    An existing row is returned untouched.
    """
    stmt = (
        _insert(db, model)
        .values({**create_values, **key})
        .on_conflict_do_nothing(index_elements=list(key))
    )
    result = await db.execute(stmt)
    created = result.rowcount == 1
    row = await _fetch(db, model, key)
    return row, created
