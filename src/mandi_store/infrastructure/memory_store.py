"""InMemoryStore: StoreProtocol held in process memory.

Used for local demo runs (STORE_BACKEND=memory) and tests. Every method
finishes its check-and-write without awaiting anything in between, so on a
single event loop a conditional update is atomic exactly like the SQL one.
Items are deep-copied on the way in and out; callers never alias stored state.
"""

import copy
from typing import Any

from src.mandi_store.domain.store import (
    TABLE_KEYS,
    Condition,
    ConditionFailedError,
    Mutation,
    StartKey,
    index_column,
    table_key,
)


class InMemoryStore:
    def __init__(self) -> None:
        self._tables: dict[str, dict[str, dict[str, Any]]] = {name: {} for name in TABLE_KEYS}

    def _rows(self, table: str) -> dict[str, dict[str, Any]]:
        table_key(table)
        return self._tables[table]

    async def get(self, table: str, key: str) -> dict[str, Any] | None:
        item = self._rows(table).get(key)
        return copy.deepcopy(item) if item is not None else None

    async def put(self, table: str, item: dict[str, Any]) -> None:
        rows = self._rows(table)
        key = str(item[table_key(table)])
        if key in rows:
            raise ConditionFailedError(table, key)
        rows[key] = copy.deepcopy(item)

    async def update_conditional(
        self,
        table: str,
        key: str,
        mutation: Mutation,
        conditions: list[Condition],
    ) -> dict[str, Any]:
        rows = self._rows(table)
        current = rows.get(key)
        if current is None or not all(c.matches(current) for c in conditions):
            raise ConditionFailedError(table, key)

        updated = dict(current)
        updated.update(copy.deepcopy(mutation.set))
        for column, delta in mutation.increment.items():
            updated[column] = updated[column] + delta
        rows[key] = updated
        return copy.deepcopy(updated)

    async def query(
        self,
        table: str,
        index: str,
        value: Any,
        filters: list[Condition] | None = None,
        start_after: StartKey | None = None,
        limit: int = 20,
    ) -> list[dict[str, Any]]:
        pk = table_key(table)
        column = index_column(table, index)
        matched = [
            item
            for item in self._rows(table).values()
            if item.get(column) == value and all(c.matches(item) for c in filters or [])
        ]
        matched.sort(key=lambda item: (item["created_at"], item[pk]), reverse=True)
        if start_after is not None:
            boundary = (start_after.created_at, start_after.key)
            matched = [item for item in matched if (item["created_at"], item[pk]) < boundary]
        return [copy.deepcopy(item) for item in matched[:limit]]

    def clear(self) -> None:
        for rows in self._tables.values():
            rows.clear()
