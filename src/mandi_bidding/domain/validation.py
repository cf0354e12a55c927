"""Bid placement rules, evaluated in a fixed order so each failure is distinct.

1. product exists and is active         -> ProductUnavailableError
2. B2B needs a wholesale tier           -> PricingTierUnavailableError
3. B2C needs a retail tier              -> PricingTierUnavailableError
4. B2B quantity >= wholesale minimum    -> BelowMinimumQuantityError
5. quantity <= stock at placement time  -> InsufficientInventoryError
6. buyer is not the product's vendor    -> NotAuthorizedError

Check 5 is advisory; stock is only reserved when the vendor accepts.
"""

from src.mandi_catalog.domain.models import Product
from src.mandi_common.enums import BuyerType
from src.mandi_common.errors import (
    BelowMinimumQuantityError,
    InsufficientInventoryError,
    NotAuthorizedError,
    PricingTierUnavailableError,
    ProductUnavailableError,
)


def validate_bid(
    product: Product | None,
    product_id: str,
    buyer_id: str,
    buyer_type: str,
    quantity: int,
) -> Product:
    """Return the product when a bid on it may be placed, else raise."""
    if product is None or not product.is_active:
        raise ProductUnavailableError(product_id)

    wholesale = product.pricing.wholesale
    if buyer_type == BuyerType.B2B.value and wholesale is None:
        raise PricingTierUnavailableError(buyer_type)
    if buyer_type == BuyerType.B2C.value and product.pricing.retail is None:
        raise PricingTierUnavailableError(buyer_type)

    if (
        buyer_type == BuyerType.B2B.value
        and wholesale.min_quantity is not None
        and quantity < wholesale.min_quantity
    ):
        raise BelowMinimumQuantityError(wholesale.min_quantity, product.unit)

    if quantity > product.quantity_available:
        raise InsufficientInventoryError(
            requested=quantity,
            available=product.quantity_available,
            unit=product.unit,
        )

    if buyer_id == product.vendor_id:
        raise NotAuthorizedError("Vendors cannot bid on their own products")

    return product
