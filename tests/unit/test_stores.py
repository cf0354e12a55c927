"""Both StoreProtocol backends must behave identically.

The SQL backend runs on SQLite (aiosqlite) with the ORM tables created from
metadata; PostgreSQL-specific DDL lives in the Alembic migrations.
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Any

import pytest

from src.mandi_common.money import line_total
from src.mandi_store.domain.store import (
    BIDS,
    PRODUCTS,
    Condition,
    ConditionFailedError,
    Mutation,
    StartKey,
)
from src.mandi_store.infrastructure.db_models import BidORM
from src.mandi_store.infrastructure.memory_store import InMemoryStore

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


@pytest.fixture(params=["memory", "sql"])
def any_store(request: pytest.FixtureRequest, sql_store: Any) -> Any:
    return InMemoryStore() if request.param == "memory" else sql_store


def _product(pid: str = "prd_1", qty: int = 100, **kwargs: Any) -> dict[str, Any]:
    item: dict[str, Any] = {
        "id": pid,
        "vendor_id": "vendor-1",
        "title": "Wheat",
        "category": "grains",
        "unit": "quintal",
        "pricing": {"retail": {"price": "25.00"}},
        "quantity_available": qty,
        "status": "active",
        "created_at": T0,
        "updated_at": T0,
    }
    item.update(kwargs)
    return item


def _bid(bid_id: str, created_at: datetime, **kwargs: Any) -> dict[str, Any]:
    item: dict[str, Any] = {
        "id": bid_id,
        "product_id": "prd_1",
        "buyer_id": "buyer-1",
        "vendor_id": "vendor-1",
        "buyer_type": "B2C",
        "amount": Decimal("25.00"),
        "quantity": 2,
        "total_amount": Decimal("50.00"),
        "unit": "quintal",
        "message": None,
        "voice_message_ref": None,
        "delivery_location": None,
        "vendor_message": None,
        "counter_offer": None,
        "status": "pending",
        "created_at": created_at,
        "updated_at": created_at,
        "expires_at": created_at + timedelta(hours=24),
    }
    item.update(kwargs)
    return item


async def test_put_then_get(any_store) -> None:
    await any_store.put(PRODUCTS, _product())

    item = await any_store.get(PRODUCTS, "prd_1")

    assert item["quantity_available"] == 100
    assert item["pricing"] == {"retail": {"price": "25.00"}}
    assert item["created_at"] == T0


async def test_get_missing_returns_none(any_store) -> None:
    assert await any_store.get(PRODUCTS, "prd_missing") is None


async def test_put_existing_key_fails(any_store) -> None:
    await any_store.put(PRODUCTS, _product())
    with pytest.raises(ConditionFailedError):
        await any_store.put(PRODUCTS, _product(title="Other"))
    assert (await any_store.get(PRODUCTS, "prd_1"))["title"] == "Wheat"


async def test_conditional_decrement(any_store) -> None:
    await any_store.put(PRODUCTS, _product())

    item = await any_store.update_conditional(
        PRODUCTS,
        "prd_1",
        Mutation(increment={"quantity_available": -30}),
        [Condition("quantity_available", "gte", 30)],
    )

    assert item["quantity_available"] == 70


async def test_failed_condition_leaves_item_untouched(any_store) -> None:
    await any_store.put(PRODUCTS, _product(qty=10))

    with pytest.raises(ConditionFailedError):
        await any_store.update_conditional(
            PRODUCTS,
            "prd_1",
            Mutation(set={"title": "Changed"}, increment={"quantity_available": -30}),
            [Condition("quantity_available", "gte", 30)],
        )

    item = await any_store.get(PRODUCTS, "prd_1")
    assert item["quantity_available"] == 10
    assert item["title"] == "Wheat"


async def test_update_missing_key_fails(any_store) -> None:
    with pytest.raises(ConditionFailedError):
        await any_store.update_conditional(
            PRODUCTS, "prd_missing", Mutation(set={"status": "deleted"}), []
        )


async def test_compare_and_set_on_status(any_store) -> None:
    await any_store.put(BIDS, _bid("bid_1", T0))
    cas = [Condition("status", "eq", "pending")]

    await any_store.update_conditional(BIDS, "bid_1", Mutation(set={"status": "accepted"}), cas)
    with pytest.raises(ConditionFailedError):
        await any_store.update_conditional(
            BIDS, "bid_1", Mutation(set={"status": "rejected"}), cas
        )

    assert (await any_store.get(BIDS, "bid_1"))["status"] == "accepted"


async def test_query_newest_first_with_filters(any_store) -> None:
    for i in range(4):
        await any_store.put(BIDS, _bid(f"bid_{i}", T0 + timedelta(minutes=i)))
    await any_store.put(BIDS, _bid("bid_other", T0, buyer_id="buyer-2"))
    await any_store.update_conditional(
        BIDS, "bid_1", Mutation(set={"status": "rejected"}), []
    )

    all_mine = await any_store.query(BIDS, "buyer", "buyer-1")
    pending = await any_store.query(
        BIDS, "buyer", "buyer-1", filters=[Condition("status", "eq", "pending")]
    )

    assert [i["id"] for i in all_mine] == ["bid_3", "bid_2", "bid_1", "bid_0"]
    assert [i["id"] for i in pending] == ["bid_3", "bid_2", "bid_0"]


async def test_query_pages_with_ties_on_created_at(any_store) -> None:
    for bid_id in ("bid_a", "bid_b", "bid_c"):
        await any_store.put(BIDS, _bid(bid_id, T0))

    first = await any_store.query(BIDS, "vendor", "vendor-1", limit=2)
    last = first[-1]
    rest = await any_store.query(
        BIDS,
        "vendor",
        "vendor-1",
        start_after=StartKey(last["created_at"], last["id"]),
        limit=2,
    )

    assert [i["id"] for i in first] == ["bid_c", "bid_b"]
    assert [i["id"] for i in rest] == ["bid_a"]


async def test_unknown_index_is_rejected(any_store) -> None:
    with pytest.raises(ValueError):
        await any_store.query(BIDS, "status", "pending")


async def test_memory_store_returns_copies() -> None:
    store = InMemoryStore()
    await store.put(PRODUCTS, _product())

    item = await store.get(PRODUCTS, "prd_1")
    item["pricing"]["retail"]["price"] = "0.01"

    assert (await store.get(PRODUCTS, "prd_1"))["pricing"]["retail"]["price"] == "25.00"


def test_total_amount_column_holds_largest_line_total() -> None:
    largest = line_total(Decimal("9999999999.99"), (1 << 31) - 1)
    column = BidORM.__table__.c.total_amount.type

    assert len(str(int(largest))) <= column.precision - column.scale
