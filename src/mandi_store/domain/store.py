"""Store Protocol: the key-value table abstraction every repository sits on.

Items are plain dicts keyed by column name. Each table has a single-column
primary key and zero or more secondary indexes; an index query returns items
whose index column equals a value, newest first by (created_at, key).

Both backends (SQL and in-memory) share the table/index layout declared here
so that repositories never know which one they are talking to.
"""

import operator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Literal, Protocol

PRODUCTS = "products"
BIDS = "bids"
NOTIFICATIONS = "notifications"

TABLE_KEYS: dict[str, str] = {
    PRODUCTS: "id",
    BIDS: "id",
    NOTIFICATIONS: "id",
}

# (table, index name) -> partition column
INDEXES: dict[tuple[str, str], str] = {
    (PRODUCTS, "vendor"): "vendor_id",
    (BIDS, "product"): "product_id",
    (BIDS, "buyer"): "buyer_id",
    (BIDS, "vendor"): "vendor_id",
    (NOTIFICATIONS, "user"): "user_id",
}

Op = Literal["eq", "ne", "gt", "gte", "lt", "lte"]

OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "eq": operator.eq,
    "ne": operator.ne,
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
}


class ConditionFailedError(Exception):
    """A conditional write did not match (precondition false, or key missing/taken).

    Internal signal between the store and repositories; never reaches the API.
    """

    def __init__(self, table: str, key: str) -> None:
        self.table = table
        self.key = key
        super().__init__(f"Condition failed on {table}/{key}")


@dataclass(frozen=True)
class Condition:
    """Predicate on one attribute of the current item: `item[field] <op> value`."""

    field: str
    op: Op
    value: Any

    def matches(self, item: dict[str, Any]) -> bool:
        current = item.get(self.field)
        if current is None:
            return False
        return bool(OPERATORS[self.op](current, self.value))


@dataclass(frozen=True)
class Mutation:
    """Attributes to overwrite (`set`) and numeric attributes to add to (`increment`)."""

    set: dict[str, Any] = field(default_factory=dict)
    increment: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class StartKey:
    """Exclusive start position for an index query (last item of the previous page)."""

    created_at: datetime
    key: str


def table_key(table: str) -> str:
    try:
        return TABLE_KEYS[table]
    except KeyError:
        raise ValueError(f"Unknown table: {table}") from None


def index_column(table: str, index: str) -> str:
    try:
        return INDEXES[(table, index)]
    except KeyError:
        raise ValueError(f"Unknown index {index!r} on table {table!r}") from None


class StoreProtocol(Protocol):
    async def get(self, table: str, key: str) -> dict[str, Any] | None: ...

    async def put(self, table: str, item: dict[str, Any]) -> None:
        """Insert a new item. Raises ConditionFailedError if the key already exists."""
        ...

    async def update_conditional(
        self,
        table: str,
        key: str,
        mutation: Mutation,
        conditions: list[Condition],
    ) -> dict[str, Any]:
        """Apply `mutation` iff the item exists and every condition holds, atomically.

        Returns the item after the update. Raises ConditionFailedError otherwise,
        leaving the item untouched.
        """
        ...

    async def query(
        self,
        table: str,
        index: str,
        value: Any,
        filters: list[Condition] | None = None,
        start_after: StartKey | None = None,
        limit: int = 20,
    ) -> list[dict[str, Any]]: ...
