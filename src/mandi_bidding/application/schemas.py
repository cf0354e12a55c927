"""Pydantic schemas for mandi_bidding API requests and responses."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from src.mandi_bidding.domain.models import Bid, CounterOffer, DeliveryLocation
from src.mandi_common.money import money_to_display, to_money

# Largest value an INT column holds
_MAX_QUANTITY = (1 << 31) - 1

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class DeliveryLocationIn(BaseModel):
    state: str = Field(..., min_length=1, max_length=64)
    district: str = Field(..., min_length=1, max_length=64)
    address: str | None = Field(None, max_length=500)

    def to_domain(self) -> DeliveryLocation:
        return DeliveryLocation(state=self.state, district=self.district, address=self.address)


class CounterOfferIn(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    quantity: int = Field(..., gt=0, le=_MAX_QUANTITY)
    message: str | None = Field(None, max_length=500)

    def to_domain(self) -> CounterOffer:
        return CounterOffer(
            amount=to_money(self.amount), quantity=self.quantity, message=self.message
        )


class PlaceBidRequest(BaseModel):
    product_id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    quantity: int = Field(..., gt=0, le=_MAX_QUANTITY)
    buyer_type: Literal["B2B", "B2C"]
    message: str | None = Field(None, max_length=1000)
    voice_message_ref: str | None = Field(None, max_length=500)
    delivery_location: DeliveryLocationIn | None = None


class UpdateBidStatusRequest(BaseModel):
    # "pending" is accepted here and rejected by the state machine
    status: Literal["pending", "accepted", "rejected", "completed", "cancelled"]
    vendor_message: str | None = Field(None, max_length=1000)
    counter_offer: CounterOfferIn | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class DeliveryLocationOut(BaseModel):
    state: str
    district: str
    address: str | None


class CounterOfferOut(BaseModel):
    amount: Decimal
    amount_display: str
    quantity: int
    message: str | None


class BidResponse(BaseModel):
    id: str
    product_id: str
    buyer_id: str
    vendor_id: str
    buyer_type: str
    amount: Decimal
    amount_display: str
    quantity: int
    unit: str
    total_amount: Decimal
    total_amount_display: str
    status: str
    message: str | None
    voice_message_ref: str | None
    delivery_location: DeliveryLocationOut | None
    vendor_message: str | None
    counter_offer: CounterOfferOut | None
    is_expired: bool
    created_at: str
    updated_at: str
    expires_at: str

    @classmethod
    def from_domain(cls, b: Bid, now: datetime) -> "BidResponse":
        location = b.delivery_location
        offer = b.counter_offer
        return cls(
            id=b.id,
            product_id=b.product_id,
            buyer_id=b.buyer_id,
            vendor_id=b.vendor_id,
            buyer_type=b.buyer_type,
            amount=b.amount,
            amount_display=money_to_display(b.amount),
            quantity=b.quantity,
            unit=b.unit,
            total_amount=b.total_amount,
            total_amount_display=money_to_display(b.total_amount),
            status=b.status,
            message=b.message,
            voice_message_ref=b.voice_message_ref,
            delivery_location=DeliveryLocationOut(
                state=location.state, district=location.district, address=location.address
            )
            if location
            else None,
            vendor_message=b.vendor_message,
            counter_offer=CounterOfferOut(
                amount=offer.amount,
                amount_display=money_to_display(offer.amount),
                quantity=offer.quantity,
                message=offer.message,
            )
            if offer
            else None,
            is_expired=b.status == "pending" and b.is_expired(now),
            created_at=b.created_at.isoformat(),
            updated_at=b.updated_at.isoformat(),
            expires_at=b.expires_at.isoformat(),
        )


class BidListResponse(BaseModel):
    items: list[BidResponse]
    next_cursor: str | None
    has_more: bool
