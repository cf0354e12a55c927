"""ListBids: selectors, role defaults, visibility and cursor pagination."""

import base64
import json
from datetime import timedelta
from decimal import Decimal

import pytest

from src.mandi_bidding.application.schemas import PlaceBidRequest, UpdateBidStatusRequest
from src.mandi_bidding.application.service import BidLedgerService
from src.mandi_common.errors import InvalidFilterError, NotAuthorizedError, ProductNotFoundError


def _place(product_id: str, quantity: int = 50, buyer_type: str = "B2B") -> PlaceBidRequest:
    return PlaceBidRequest(
        product_id=product_id, amount=Decimal("45.00"), quantity=quantity, buyer_type=buyer_type
    )


@pytest.fixture
async def seeded(ledger, make_product, b2b_buyer, b2c_buyer):
    """Two products of vendor-1; buyer-1 bids on both, buyer-2 on the first."""
    rice = await make_product(title="Rice")
    onion = await make_product(title="Onion")
    return {
        "rice": rice,
        "onion": onion,
        "b1_rice": await ledger.place_bid(b2b_buyer, _place(rice.id)),
        "b1_onion": await ledger.place_bid(b2b_buyer, _place(onion.id)),
        "b2_rice": await ledger.place_bid(b2c_buyer, _place(rice.id, 5, "B2C")),
    }


async def test_vendor_default_view_is_own_sales(ledger, vendor, seeded) -> None:
    page = await ledger.list_bids(vendor)
    assert len(page.items) == 3
    assert page.has_more is False
    assert page.next_cursor is None


async def test_buyer_default_view_is_own_bids(ledger, b2b_buyer, seeded) -> None:
    page = await ledger.list_bids(b2b_buyer)
    assert {b.id for b in page.items} == {seeded["b1_rice"].id, seeded["b1_onion"].id}


async def test_newest_first(ledger, vendor, seeded) -> None:
    page = await ledger.list_bids(vendor)
    stamps = [(b.created_at, b.id) for b in page.items]
    assert stamps == sorted(stamps, reverse=True)


async def test_product_vendor_sees_all_bids_on_product(ledger, vendor, seeded) -> None:
    page = await ledger.list_bids(vendor, product_id=seeded["rice"].id)
    assert {b.id for b in page.items} == {seeded["b1_rice"].id, seeded["b2_rice"].id}


async def test_other_buyer_sees_only_own_bids_on_product(ledger, b2c_buyer, seeded) -> None:
    page = await ledger.list_bids(b2c_buyer, product_id=seeded["rice"].id)
    assert [b.id for b in page.items] == [seeded["b2_rice"].id]


async def test_other_vendor_sees_nothing_on_foreign_product(ledger, other_vendor, seeded) -> None:
    page = await ledger.list_bids(other_vendor, product_id=seeded["rice"].id)
    assert page.items == []


async def test_unknown_product(ledger, vendor, seeded) -> None:
    with pytest.raises(ProductNotFoundError):
        await ledger.list_bids(vendor, product_id="prd_missing")


async def test_two_selectors_is_invalid(ledger, vendor, seeded) -> None:
    with pytest.raises(InvalidFilterError) as exc_info:
        await ledger.list_bids(vendor, product_id=seeded["rice"].id, vendor_id="vendor-1")
    assert exc_info.value.http_status == 400


async def test_cannot_list_someone_elses_bids(ledger, b2b_buyer, seeded) -> None:
    with pytest.raises(NotAuthorizedError):
        await ledger.list_bids(b2b_buyer, buyer_id="buyer-2")
    with pytest.raises(NotAuthorizedError):
        await ledger.list_bids(b2b_buyer, vendor_id="vendor-1")


async def test_status_filter(ledger, vendor, seeded) -> None:
    await ledger.update_bid_status(
        vendor, seeded["b1_onion"].id, UpdateBidStatusRequest(status="rejected")
    )

    rejected = await ledger.list_bids(vendor, vendor_id="vendor-1", status="rejected")
    pending = await ledger.list_bids(vendor, vendor_id="vendor-1", status="pending")

    assert [b.id for b in rejected.items] == [seeded["b1_onion"].id]
    assert len(pending.items) == 2


async def test_cursor_walks_every_bid_once(ledger, vendor, seeded) -> None:
    seen: list[str] = []
    cursor = None
    while True:
        page = await ledger.list_bids(vendor, cursor=cursor, limit=2)
        seen.extend(b.id for b in page.items)
        if not page.has_more:
            break
        cursor = page.next_cursor

    assert len(seen) == 3
    assert len(set(seen)) == 3


async def test_garbage_cursor_restarts_from_first_page(ledger, vendor, seeded) -> None:
    page = await ledger.list_bids(vendor, cursor="not-a-cursor")
    assert len(page.items) == 3


async def test_cursor_without_utc_offset_restarts_from_first_page(
    ledger, vendor, seeded
) -> None:
    naive = json.dumps({"ts": "2030-01-01T00:00:00", "id": "bid_x"})
    cursor = base64.urlsafe_b64encode(naive.encode()).decode()

    page = await ledger.list_bids(vendor, cursor=cursor, limit=2)

    assert len(page.items) == 2
    assert page.has_more is True


async def test_expired_pending_bid_is_flagged(
    bids, catalog, notifier, make_product, b2b_buyer
) -> None:
    ledger = BidLedgerService(bids, catalog, notifier, ttl=timedelta(seconds=-1))
    product = await make_product()
    await ledger.place_bid(b2b_buyer, _place(product.id))

    page = await ledger.list_bids(b2b_buyer)
    assert page.items[0].is_expired is True
