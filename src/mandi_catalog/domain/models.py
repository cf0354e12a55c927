"""Domain models for mandi_catalog: pure dataclasses, no persistence concerns."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class WholesaleTier:
    price: Decimal
    min_quantity: int | None = None


@dataclass
class RetailTier:
    price: Decimal


@dataclass
class Pricing:
    """At least one tier is present on every stored product."""

    wholesale: WholesaleTier | None = None
    retail: RetailTier | None = None


@dataclass
class Product:
    id: str
    vendor_id: str
    title: str
    category: str | None
    unit: str  # kg, quintal, dozen ...
    pricing: Pricing
    quantity_available: int
    status: str  # active / deleted
    created_at: datetime
    updated_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status == "active"
