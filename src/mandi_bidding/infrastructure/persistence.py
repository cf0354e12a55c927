"""BidRepository: concrete BidRepositoryProtocol on top of the Store.

Status changes are compare-and-set on the previously read status:
  UPDATE bids SET status = :to ... WHERE id = :id AND status = :from
so two racing writers on one bid can never both succeed.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from src.mandi_bidding.domain.models import Bid, CounterOffer, DeliveryLocation
from src.mandi_common.errors import BidNotFoundError, InvalidTransitionError
from src.mandi_common.money import to_money
from src.mandi_store.domain.store import (
    BIDS,
    Condition,
    ConditionFailedError,
    Mutation,
    StartKey,
    StoreProtocol,
)


def _counter_offer_to_item(offer: CounterOffer | None) -> dict[str, Any] | None:
    if offer is None:
        return None
    return {"amount": str(offer.amount), "quantity": offer.quantity, "message": offer.message}


def _item_to_counter_offer(data: dict[str, Any] | None) -> CounterOffer | None:
    if not data:
        return None
    return CounterOffer(
        amount=to_money(Decimal(str(data["amount"]))),
        quantity=data["quantity"],
        message=data.get("message"),
    )


def _location_to_item(location: DeliveryLocation | None) -> dict[str, Any] | None:
    if location is None:
        return None
    return {
        "state": location.state,
        "district": location.district,
        "address": location.address,
    }


def _item_to_location(data: dict[str, Any] | None) -> DeliveryLocation | None:
    if not data:
        return None
    return DeliveryLocation(
        state=data["state"],
        district=data["district"],
        address=data.get("address"),
    )


def _item_to_bid(item: dict[str, Any]) -> Bid:
    return Bid(
        id=item["id"],
        product_id=item["product_id"],
        buyer_id=item["buyer_id"],
        vendor_id=item["vendor_id"],
        buyer_type=item["buyer_type"],
        amount=to_money(item["amount"]),
        quantity=item["quantity"],
        total_amount=to_money(item["total_amount"]),
        unit=item["unit"],
        status=item["status"],
        created_at=item["created_at"],
        updated_at=item["updated_at"],
        expires_at=item["expires_at"],
        message=item.get("message"),
        voice_message_ref=item.get("voice_message_ref"),
        delivery_location=_item_to_location(item.get("delivery_location")),
        vendor_message=item.get("vendor_message"),
        counter_offer=_item_to_counter_offer(item.get("counter_offer")),
    )


def _bid_to_item(bid: Bid) -> dict[str, Any]:
    return {
        "id": bid.id,
        "product_id": bid.product_id,
        "buyer_id": bid.buyer_id,
        "vendor_id": bid.vendor_id,
        "buyer_type": bid.buyer_type,
        "amount": bid.amount,
        "quantity": bid.quantity,
        "total_amount": bid.total_amount,
        "unit": bid.unit,
        "message": bid.message,
        "voice_message_ref": bid.voice_message_ref,
        "delivery_location": _location_to_item(bid.delivery_location),
        "vendor_message": bid.vendor_message,
        "counter_offer": _counter_offer_to_item(bid.counter_offer),
        "status": bid.status,
        "created_at": bid.created_at,
        "updated_at": bid.updated_at,
        "expires_at": bid.expires_at,
    }


class BidRepository:
    def __init__(self, store: StoreProtocol) -> None:
        self._store = store

    async def save(self, bid: Bid) -> None:
        await self._store.put(BIDS, _bid_to_item(bid))

    async def get_by_id(self, bid_id: str) -> Bid | None:
        item = await self._store.get(BIDS, bid_id)
        return _item_to_bid(item) if item else None

    async def transition(
        self,
        bid: Bid,
        to_status: str,
        updated_at: datetime,
        vendor_message: str | None = None,
        counter_offer: CounterOffer | None = None,
    ) -> Bid:
        changes: dict[str, Any] = {"status": to_status, "updated_at": updated_at}
        if vendor_message is not None:
            changes["vendor_message"] = vendor_message
        if counter_offer is not None:
            changes["counter_offer"] = _counter_offer_to_item(counter_offer)
        try:
            item = await self._store.update_conditional(
                BIDS,
                bid.id,
                Mutation(set=changes),
                [Condition("status", "eq", bid.status)],
            )
        except ConditionFailedError:
            current = await self.get_by_id(bid.id)
            if current is None:
                raise BidNotFoundError(bid.id) from None
            raise InvalidTransitionError(bid.id, current.status, to_status) from None
        return _item_to_bid(item)

    async def list_by(
        self,
        index: str,
        value: str,
        filters: list[Condition],
        start_after: StartKey | None,
        limit: int,
    ) -> list[Bid]:
        items = await self._store.query(
            BIDS,
            index,
            value,
            filters=filters,
            start_after=start_after,
            limit=limit,
        )
        return [_item_to_bid(item) for item in items]
