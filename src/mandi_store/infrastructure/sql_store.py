"""SqlStore: StoreProtocol over SQLAlchemy async Core statements.

Every call runs in its own short transaction. Conditional writes compile to a
single `UPDATE ... WHERE <key> AND <conditions> RETURNING *`, so the database
row lock is the only concurrency control: zero rows returned means the
precondition was false at the moment of the write.

Error translation:
  IntegrityError (duplicate key, CHECK violation) -> ConditionFailedError
  any other SQLAlchemyError / OSError             -> StoreUnavailableError
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from sqlalchemy import Table, and_, insert, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.mandi_common.database import async_session_factory
from src.mandi_common.datetime_utils import ensure_utc
from src.mandi_common.errors import StoreUnavailableError
from src.mandi_store.domain.store import (
    BIDS,
    NOTIFICATIONS,
    OPERATORS,
    PRODUCTS,
    Condition,
    ConditionFailedError,
    Mutation,
    StartKey,
    index_column,
    table_key,
)
from src.mandi_store.infrastructure.db_models import BidORM, NotificationORM, ProductORM

logger = logging.getLogger(__name__)

_TABLES: dict[str, Table] = {
    PRODUCTS: ProductORM.__table__,  # type: ignore[dict-item]
    BIDS: BidORM.__table__,  # type: ignore[dict-item]
    NOTIFICATIONS: NotificationORM.__table__,  # type: ignore[dict-item]
}


def _table(name: str) -> Table:
    try:
        return _TABLES[name]
    except KeyError:
        raise ValueError(f"Unknown table: {name}") from None


def _clause(table: Table, cond: Condition) -> Any:
    column = table.c[cond.field]
    return OPERATORS[cond.op](column, cond.value)


def _to_item(row: Any) -> dict[str, Any]:
    return {
        k: ensure_utc(v) if isinstance(v, datetime) else v
        for k, v in dict(row).items()
    }


class SqlStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        self._session_factory = session_factory or async_session_factory

    @asynccontextmanager
    async def _transaction(self, table: str, key: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session, session.begin():
                yield session
        except IntegrityError as exc:
            raise ConditionFailedError(table, key) from exc
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Store operation failed on %s/%s: %s", table, key, exc)
            raise StoreUnavailableError() from exc

    async def get(self, table: str, key: str) -> dict[str, Any] | None:
        t = _table(table)
        stmt = select(t).where(t.c[table_key(table)] == key)
        async with self._transaction(table, key) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return _to_item(row) if row else None

    async def put(self, table: str, item: dict[str, Any]) -> None:
        t = _table(table)
        key = str(item[table_key(table)])
        async with self._transaction(table, key) as session:
            await session.execute(insert(t).values(**item))

    async def update_conditional(
        self,
        table: str,
        key: str,
        mutation: Mutation,
        conditions: list[Condition],
    ) -> dict[str, Any]:
        t = _table(table)
        values: dict[str, Any] = dict(mutation.set)
        for column, delta in mutation.increment.items():
            values[column] = t.c[column] + delta

        stmt = (
            update(t)
            .where(t.c[table_key(table)] == key, *[_clause(t, c) for c in conditions])
            .values(**values)
            .returning(*t.c)
        )
        async with self._transaction(table, key) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
            if row is None:
                raise ConditionFailedError(table, key)
            item = _to_item(row)
        return item

    async def query(
        self,
        table: str,
        index: str,
        value: Any,
        filters: list[Condition] | None = None,
        start_after: StartKey | None = None,
        limit: int = 20,
    ) -> list[dict[str, Any]]:
        t = _table(table)
        pk = t.c[table_key(table)]
        stmt = select(t).where(t.c[index_column(table, index)] == value)
        for cond in filters or []:
            stmt = stmt.where(_clause(t, cond))
        if start_after is not None:
            stmt = stmt.where(
                or_(
                    t.c.created_at < start_after.created_at,
                    and_(t.c.created_at == start_after.created_at, pk < start_after.key),
                )
            )
        stmt = stmt.order_by(t.c.created_at.desc(), pk.desc()).limit(limit)

        async with self._transaction(table, f"index:{index}") as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [_to_item(row) for row in rows]
