# src/mandi_catalog/domain/repository.py
"""ProductCatalog Protocol: what the bid core consumes from the catalog.

Unit tests inject a mock that conforms to this Protocol.
"""

from typing import Protocol

from src.mandi_catalog.domain.models import Product


class ProductCatalogProtocol(Protocol):
    async def get_product(self, product_id: str) -> Product | None: ...

    async def save_product(self, product: Product) -> None: ...

    async def mark_deleted(self, product_id: str) -> Product: ...

    async def decrement_inventory(self, product_id: str, quantity: int) -> Product:
        """Atomically take `quantity` from stock, or raise without partial effect.

        Raises ProductNotFoundError, ProductUnavailableError or
        InsufficientInventoryError.
        """
        ...

    async def restore_inventory(self, product_id: str, quantity: int) -> Product: ...
