"""BidLedgerService: the bid lifecycle.

place_bid:
  buyer type matches the caller's role → validate against the product
  → persist as pending → notify the vendor

update_bid_status:
  load → party check → state machine → guard → expiry (accept only)
  accept:  decrement inventory (the gate) → CAS bid status;
           if the CAS loses, restore inventory and re-raise
  other:   CAS bid status
  → notify the counterparty

Notifications are sent strictly after the write they describe and can
never fail the operation.
"""

import logging
from datetime import datetime, timedelta

from config.settings import settings
from src.mandi_bidding.application.schemas import (
    BidListResponse,
    BidResponse,
    PlaceBidRequest,
    UpdateBidStatusRequest,
)
from src.mandi_bidding.domain.authorization import (
    can_transition,
    is_bid_vendor,
    is_party,
    may_bid_as,
)
from src.mandi_bidding.domain.models import Bid, CounterOffer
from src.mandi_bidding.domain.repository import BidRepositoryProtocol
from src.mandi_bidding.domain.state_machine import check_transition
from src.mandi_bidding.domain.validation import validate_bid
from src.mandi_bidding.infrastructure.persistence import BidRepository
from src.mandi_catalog.domain.repository import ProductCatalogProtocol
from src.mandi_catalog.infrastructure.persistence import ProductCatalog
from src.mandi_common.datetime_utils import utc_now
from src.mandi_common.enums import BidStatus, NotificationType
from src.mandi_common.errors import (
    BidExpiredError,
    BidNotFoundError,
    InvalidFilterError,
    NotAuthorizedError,
    ProductNotFoundError,
)
from src.mandi_common.id_generator import new_bid_id
from src.mandi_common.money import line_total, to_money
from src.mandi_common.pagination import cursor_decode, cursor_encode
from src.mandi_gateway.auth.dependencies import CurrentUser
from src.mandi_notify.application.service import Notifier, get_notifier
from src.mandi_notify.domain.models import NotificationEvent
from src.mandi_store.application.service import get_store
from src.mandi_store.domain.store import Condition, StartKey

logger = logging.getLogger(__name__)


class BidLedgerService:
    def __init__(
        self,
        bids: BidRepositoryProtocol,
        catalog: ProductCatalogProtocol,
        notifier: Notifier,
        ttl: timedelta | None = None,
    ) -> None:
        self._bids = bids
        self._catalog = catalog
        self._notifier = notifier
        self._ttl = ttl or timedelta(hours=settings.BID_TTL_HOURS)

    # ------------------------------------------------------------------
    # Place
    # ------------------------------------------------------------------

    async def place_bid(self, user: CurrentUser, req: PlaceBidRequest) -> BidResponse:
        if not may_bid_as(user.role.value, req.buyer_type):
            raise NotAuthorizedError(
                f"{user.role.value} accounts cannot place {req.buyer_type} bids"
            )
        product = await self._catalog.get_product(req.product_id)
        product = validate_bid(
            product, req.product_id, user.user_id, req.buyer_type, req.quantity
        )

        now = utc_now()
        amount = to_money(req.amount)
        bid = Bid(
            id=new_bid_id(),
            product_id=product.id,
            buyer_id=user.user_id,
            vendor_id=product.vendor_id,
            buyer_type=req.buyer_type,
            amount=amount,
            quantity=req.quantity,
            total_amount=line_total(amount, req.quantity),
            unit=product.unit,
            status=BidStatus.PENDING.value,
            created_at=now,
            updated_at=now,
            expires_at=now + self._ttl,
            message=req.message,
            voice_message_ref=req.voice_message_ref,
            delivery_location=req.delivery_location.to_domain()
            if req.delivery_location
            else None,
        )
        await self._bids.save(bid)
        logger.info(
            "Bid placed",
            extra={
                "bid_id": bid.id,
                "product_id": bid.product_id,
                "user_id": bid.buyer_id,
                "quantity": bid.quantity,
            },
        )

        await self._notifier.notify(
            bid.vendor_id,
            NotificationEvent(
                type=NotificationType.NEW_BID.value,
                payload={
                    "bid_id": bid.id,
                    "product_id": bid.product_id,
                    "buyer_type": bid.buyer_type,
                    "amount": str(bid.amount),
                    "quantity": bid.quantity,
                    "total_amount": str(bid.total_amount),
                },
            ),
        )
        return BidResponse.from_domain(bid, now)

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    async def update_bid_status(
        self, user: CurrentUser, bid_id: str, req: UpdateBidStatusRequest
    ) -> BidResponse:
        bid = await self._bids.get_by_id(bid_id)
        if bid is None:
            raise BidNotFoundError(bid_id)
        if not is_party(user.user_id, bid):
            raise NotAuthorizedError()

        from_status = bid.status
        to_status = req.status
        check_transition(bid.id, from_status, to_status)
        if not can_transition(user.user_id, user.role.value, bid, from_status, to_status):
            raise NotAuthorizedError(
                f"Not authorized to move this bid from {from_status} to {to_status}"
            )
        acting_as_vendor = is_bid_vendor(user.user_id, user.role.value, bid)
        if (req.vendor_message or req.counter_offer) and not acting_as_vendor:
            raise NotAuthorizedError("Only the vendor can attach a response or counter offer")

        now = utc_now()
        counter_offer = req.counter_offer.to_domain() if req.counter_offer else None
        if to_status == BidStatus.ACCEPTED.value:
            if bid.is_expired(now):
                raise BidExpiredError(bid.id)
            updated = await self._accept(bid, now, req.vendor_message, counter_offer)
        else:
            updated = await self._bids.transition(
                bid, to_status, now, req.vendor_message, counter_offer
            )

        logger.info(
            "Bid status changed",
            extra={
                "bid_id": bid.id,
                "actor_id": user.user_id,
                "from_status": from_status,
                "to_status": to_status,
            },
        )

        await self._notifier.notify(
            updated.counterparty_of(user.user_id),
            NotificationEvent(
                type=NotificationType.BID_STATUS_UPDATE.value,
                payload={
                    "bid_id": updated.id,
                    "product_id": updated.product_id,
                    "status": updated.status,
                    "previous_status": from_status,
                    "vendor_message": updated.vendor_message,
                    "counter_offer": {
                        "amount": str(updated.counter_offer.amount),
                        "quantity": updated.counter_offer.quantity,
                        "message": updated.counter_offer.message,
                    }
                    if updated.counter_offer
                    else None,
                },
            ),
        )
        return BidResponse.from_domain(updated, now)

    async def _accept(
        self,
        bid: Bid,
        now: datetime,
        vendor_message: str | None,
        counter_offer: CounterOffer | None,
    ) -> Bid:
        # Raises InsufficientInventory / ProductUnavailable with no effect on stock
        await self._catalog.decrement_inventory(bid.product_id, bid.quantity)
        try:
            return await self._bids.transition(
                bid, BidStatus.ACCEPTED.value, now, vendor_message, counter_offer
            )
        except Exception:
            await self._restore_after_failed_accept(bid)
            raise

    async def _restore_after_failed_accept(self, bid: Bid) -> None:
        try:
            await self._catalog.restore_inventory(bid.product_id, bid.quantity)
        except Exception:
            logger.exception(
                "Inventory restore failed after lost acceptance",
                extra={"bid_id": bid.id, "product_id": bid.product_id, "quantity": bid.quantity},
            )
            return
        logger.warning(
            "Bid acceptance lost a race, inventory restored",
            extra={"bid_id": bid.id, "product_id": bid.product_id, "quantity": bid.quantity},
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_bid(self, user: CurrentUser, bid_id: str) -> BidResponse:
        bid = await self._bids.get_by_id(bid_id)
        if bid is None:
            raise BidNotFoundError(bid_id)
        if not is_party(user.user_id, bid):
            raise NotAuthorizedError()
        return BidResponse.from_domain(bid, utc_now())

    async def list_bids(
        self,
        user: CurrentUser,
        product_id: str | None = None,
        buyer_id: str | None = None,
        vendor_id: str | None = None,
        status: str | None = None,
        cursor: str | None = None,
        limit: int = 20,
    ) -> BidListResponse:
        selectors = [
            (index, value)
            for index, value in (
                ("product", product_id),
                ("buyer", buyer_id),
                ("vendor", vendor_id),
            )
            if value
        ]
        if len(selectors) > 1:
            raise InvalidFilterError("use only one of product_id, buyer_id, vendor_id")
        if not selectors:
            selectors = [("vendor" if user.is_vendor else "buyer", user.user_id)]
        index, value = selectors[0]

        filters: list[Condition] = []
        if index in ("buyer", "vendor") and value != user.user_id:
            raise NotAuthorizedError("You can only list your own bids")
        if index == "product":
            product = await self._catalog.get_product(value)
            if product is None:
                raise ProductNotFoundError(value)
            if product.vendor_id == user.user_id:
                filters.append(Condition("vendor_id", "eq", user.user_id))
            else:
                filters.append(Condition("buyer_id", "eq", user.user_id))
        if status:
            filters.append(Condition("status", "eq", status))

        decoded = cursor_decode(cursor)
        start_after = StartKey(*decoded) if decoded else None
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        rows = await self._bids.list_by(index, value, filters, start_after, limit + 1)
        has_more = len(rows) > limit
        page = rows[:limit]
        next_cursor = (
            cursor_encode(page[-1].created_at, page[-1].id) if has_more and page else None
        )
        now = utc_now()
        return BidListResponse(
            items=[BidResponse.from_domain(b, now) for b in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )


_ledger: BidLedgerService | None = None


def get_bid_ledger() -> BidLedgerService:
    global _ledger  # noqa: PLW0603
    if _ledger is None:
        store = get_store()
        _ledger = BidLedgerService(BidRepository(store), ProductCatalog(store), get_notifier())
    return _ledger
