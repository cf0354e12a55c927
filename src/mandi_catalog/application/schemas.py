"""Pydantic schemas for mandi_catalog API requests and responses.

Money fields are Decimal and serialize as strings ("45.00"); every money
field has a `*_display` sibling for UI ("₹45.00").
"""

from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from src.mandi_catalog.domain.models import Pricing, Product, RetailTier, WholesaleTier
from src.mandi_common.money import money_to_display, to_money

# Largest value an INT column holds
_MAX_QUANTITY = (1 << 31) - 1

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class WholesaleTierIn(BaseModel):
    price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    min_quantity: int | None = Field(None, gt=0, le=_MAX_QUANTITY)


class RetailTierIn(BaseModel):
    price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)


class PricingIn(BaseModel):
    wholesale: WholesaleTierIn | None = None
    retail: RetailTierIn | None = None

    @model_validator(mode="after")
    def at_least_one_tier(self) -> "PricingIn":
        if self.wholesale is None and self.retail is None:
            raise ValueError("pricing must include a wholesale or retail tier")
        return self

    def to_domain(self) -> Pricing:
        return Pricing(
            wholesale=WholesaleTier(
                price=to_money(self.wholesale.price),
                min_quantity=self.wholesale.min_quantity,
            )
            if self.wholesale
            else None,
            retail=RetailTier(price=to_money(self.retail.price)) if self.retail else None,
        )


class CreateProductRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    category: str | None = Field(None, max_length=32)
    unit: str = Field(..., min_length=1, max_length=16)
    quantity_available: int = Field(..., ge=0, le=_MAX_QUANTITY)
    pricing: PricingIn


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class WholesaleTierOut(BaseModel):
    price: Decimal
    price_display: str
    min_quantity: int | None


class RetailTierOut(BaseModel):
    price: Decimal
    price_display: str


class PricingOut(BaseModel):
    wholesale: WholesaleTierOut | None
    retail: RetailTierOut | None


class ProductResponse(BaseModel):
    id: str
    vendor_id: str
    title: str
    category: str | None
    unit: str
    pricing: PricingOut
    quantity_available: int
    status: str
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, p: Product) -> "ProductResponse":
        wholesale = p.pricing.wholesale
        retail = p.pricing.retail
        return cls(
            id=p.id,
            vendor_id=p.vendor_id,
            title=p.title,
            category=p.category,
            unit=p.unit,
            pricing=PricingOut(
                wholesale=WholesaleTierOut(
                    price=wholesale.price,
                    price_display=money_to_display(wholesale.price),
                    min_quantity=wholesale.min_quantity,
                )
                if wholesale
                else None,
                retail=RetailTierOut(
                    price=retail.price,
                    price_display=money_to_display(retail.price),
                )
                if retail
                else None,
            ),
            quantity_available=p.quantity_available,
            status=p.status,
            created_at=p.created_at.isoformat(),
            updated_at=p.updated_at.isoformat(),
        )
