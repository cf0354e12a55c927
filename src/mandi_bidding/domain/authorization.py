"""Authorization guard for bids: pure functions, no I/O.

Who may take which edge of the state machine:

    pending  -> accepted    vendor
    pending  -> rejected    vendor
    pending  -> cancelled   vendor or buyer
    accepted -> completed   vendor
    accepted -> cancelled   vendor

"vendor" means the bid's frozen vendor_id acting with the vendor role;
"buyer" means the bid's buyer_id. Reads require being either party.

Placing a bid: b2b_buyer accounts bid B2B, b2c_buyer accounts bid B2C, vendors
buying from another vendor may use either.
"""

from typing import Literal

from src.mandi_bidding.domain.models import Bid
from src.mandi_common.enums import BidStatus, BuyerType, UserRole

_Who = Literal["vendor", "either"]

_RULES: dict[tuple[str, str], _Who] = {
    (BidStatus.PENDING.value, BidStatus.ACCEPTED.value): "vendor",
    (BidStatus.PENDING.value, BidStatus.REJECTED.value): "vendor",
    (BidStatus.PENDING.value, BidStatus.CANCELLED.value): "either",
    (BidStatus.ACCEPTED.value, BidStatus.COMPLETED.value): "vendor",
    (BidStatus.ACCEPTED.value, BidStatus.CANCELLED.value): "vendor",
}


_BUYER_TYPE_BY_ROLE: dict[str, str] = {
    UserRole.B2B_BUYER.value: BuyerType.B2B.value,
    UserRole.B2C_BUYER.value: BuyerType.B2C.value,
}


def may_bid_as(actor_role: str, buyer_type: str) -> bool:
    expected = _BUYER_TYPE_BY_ROLE.get(actor_role)
    return expected is None or expected == buyer_type


def is_party(user_id: str, bid: Bid) -> bool:
    return user_id in (bid.buyer_id, bid.vendor_id)


def is_bid_vendor(actor_id: str, actor_role: str, bid: Bid) -> bool:
    return actor_id == bid.vendor_id and actor_role == UserRole.VENDOR.value


def can_transition(
    actor_id: str,
    actor_role: str,
    bid: Bid,
    from_status: str,
    to_status: str,
) -> bool:
    who = _RULES.get((from_status, to_status))
    if who is None:
        return False
    if is_bid_vendor(actor_id, actor_role, bid):
        return True
    return who == "either" and actor_id == bid.buyer_id
