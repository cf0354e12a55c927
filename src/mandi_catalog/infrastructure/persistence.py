"""ProductCatalog: concrete ProductCatalogProtocol on top of the Store.

Inventory is only ever changed through `update_conditional`:
  decrement: quantity_available -= q  WHERE quantity_available >= q AND status = 'active'
  restore:   quantity_available += q  (compensation for a lost bid-write race)
A failed decrement is re-read once to tell the caller *why* it failed.
"""

from decimal import Decimal
from typing import Any

from src.mandi_catalog.domain.models import Pricing, Product, RetailTier, WholesaleTier
from src.mandi_common.datetime_utils import utc_now
from src.mandi_common.errors import (
    InsufficientInventoryError,
    ProductNotFoundError,
    ProductUnavailableError,
)
from src.mandi_common.money import to_money
from src.mandi_store.domain.store import (
    PRODUCTS,
    Condition,
    ConditionFailedError,
    Mutation,
    StoreProtocol,
)

# ---------------------------------------------------------------------------
# Item mappers
# ---------------------------------------------------------------------------


def pricing_to_item(pricing: Pricing) -> dict[str, Any]:
    """JSON-safe form: Decimal prices travel as strings."""
    data: dict[str, Any] = {}
    if pricing.wholesale is not None:
        data["wholesale"] = {
            "price": str(pricing.wholesale.price),
            "min_quantity": pricing.wholesale.min_quantity,
        }
    if pricing.retail is not None:
        data["retail"] = {"price": str(pricing.retail.price)}
    return data


def _item_to_pricing(data: dict[str, Any]) -> Pricing:
    wholesale = data.get("wholesale")
    retail = data.get("retail")
    return Pricing(
        wholesale=WholesaleTier(
            price=to_money(Decimal(str(wholesale["price"]))),
            min_quantity=wholesale.get("min_quantity"),
        )
        if wholesale
        else None,
        retail=RetailTier(price=to_money(Decimal(str(retail["price"])))) if retail else None,
    )


def _item_to_product(item: dict[str, Any]) -> Product:
    return Product(
        id=item["id"],
        vendor_id=item["vendor_id"],
        title=item["title"],
        category=item.get("category"),
        unit=item["unit"],
        pricing=_item_to_pricing(item["pricing"] or {}),
        quantity_available=item["quantity_available"],
        status=item["status"],
        created_at=item["created_at"],
        updated_at=item["updated_at"],
    )


def _product_to_item(product: Product) -> dict[str, Any]:
    return {
        "id": product.id,
        "vendor_id": product.vendor_id,
        "title": product.title,
        "category": product.category,
        "unit": product.unit,
        "pricing": pricing_to_item(product.pricing),
        "quantity_available": product.quantity_available,
        "status": product.status,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ProductCatalog:
    def __init__(self, store: StoreProtocol) -> None:
        self._store = store

    async def get_product(self, product_id: str) -> Product | None:
        item = await self._store.get(PRODUCTS, product_id)
        return _item_to_product(item) if item else None

    async def save_product(self, product: Product) -> None:
        await self._store.put(PRODUCTS, _product_to_item(product))

    async def mark_deleted(self, product_id: str) -> Product:
        """Soft delete. Deleting an already deleted product returns it unchanged."""
        try:
            item = await self._store.update_conditional(
                PRODUCTS,
                product_id,
                Mutation(set={"status": "deleted", "updated_at": utc_now()}),
                [Condition("status", "eq", "active")],
            )
        except ConditionFailedError:
            product = await self.get_product(product_id)
            if product is None:
                raise ProductNotFoundError(product_id) from None
            return product
        return _item_to_product(item)

    async def decrement_inventory(self, product_id: str, quantity: int) -> Product:
        try:
            item = await self._store.update_conditional(
                PRODUCTS,
                product_id,
                Mutation(
                    set={"updated_at": utc_now()},
                    increment={"quantity_available": -quantity},
                ),
                [
                    Condition("quantity_available", "gte", quantity),
                    Condition("status", "eq", "active"),
                ],
            )
        except ConditionFailedError:
            product = await self.get_product(product_id)
            if product is None:
                raise ProductNotFoundError(product_id) from None
            if not product.is_active:
                raise ProductUnavailableError(product_id) from None
            raise InsufficientInventoryError(
                requested=quantity,
                available=product.quantity_available,
                unit=product.unit,
            ) from None
        return _item_to_product(item)

    async def restore_inventory(self, product_id: str, quantity: int) -> Product:
        try:
            item = await self._store.update_conditional(
                PRODUCTS,
                product_id,
                Mutation(
                    set={"updated_at": utc_now()},
                    increment={"quantity_available": quantity},
                ),
                [],
            )
        except ConditionFailedError:
            raise ProductNotFoundError(product_id) from None
        return _item_to_product(item)
