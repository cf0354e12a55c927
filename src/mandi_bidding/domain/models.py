"""Bid domain model: pure dataclasses, no persistence dependency."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class CounterOffer:
    amount: Decimal
    quantity: int
    message: str | None = None


@dataclass(frozen=True)
class DeliveryLocation:
    state: str
    district: str
    address: str | None = None


@dataclass
class Bid:
    id: str
    product_id: str
    buyer_id: str
    vendor_id: str  # product's vendor at bid time; never re-resolved
    buyer_type: str  # B2B / B2C
    amount: Decimal  # unit price offered
    quantity: int
    total_amount: Decimal  # amount * quantity, fixed at creation
    unit: str
    status: str
    created_at: datetime
    updated_at: datetime
    expires_at: datetime
    message: str | None = None
    voice_message_ref: str | None = None
    delivery_location: DeliveryLocation | None = None
    vendor_message: str | None = None
    counter_offer: CounterOffer | None = None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def counterparty_of(self, user_id: str) -> str:
        return self.buyer_id if user_id == self.vendor_id else self.vendor_id
