"""ProductApplicationService: vendor-side product management.

The bid core only reads products and moves inventory through the catalog;
this service is how products get into the catalog and out of sale.
"""

import logging

from src.mandi_catalog.application.schemas import CreateProductRequest, ProductResponse
from src.mandi_catalog.domain.models import Product
from src.mandi_catalog.domain.repository import ProductCatalogProtocol
from src.mandi_common.datetime_utils import utc_now
from src.mandi_common.enums import ProductStatus, UserRole
from src.mandi_common.errors import NotAuthorizedError, ProductNotFoundError
from src.mandi_common.id_generator import new_product_id
from src.mandi_gateway.auth.dependencies import CurrentUser

logger = logging.getLogger(__name__)


class ProductApplicationService:
    def __init__(self, catalog: ProductCatalogProtocol) -> None:
        self._catalog = catalog

    async def create_product(
        self, user: CurrentUser, req: CreateProductRequest
    ) -> ProductResponse:
        if user.role != UserRole.VENDOR:
            raise NotAuthorizedError("Only vendors can list products")

        now = utc_now()
        product = Product(
            id=new_product_id(),
            vendor_id=user.user_id,
            title=req.title,
            category=req.category,
            unit=req.unit,
            pricing=req.pricing.to_domain(),
            quantity_available=req.quantity_available,
            status=ProductStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        await self._catalog.save_product(product)
        logger.info("Product listed", extra={"product_id": product.id, "user_id": user.user_id})
        return ProductResponse.from_domain(product)

    async def get_product(self, product_id: str) -> ProductResponse:
        product = await self._catalog.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return ProductResponse.from_domain(product)

    async def delete_product(self, user: CurrentUser, product_id: str) -> ProductResponse:
        product = await self._catalog.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        if product.vendor_id != user.user_id:
            raise NotAuthorizedError("Only the owning vendor can delete this product")
        product = await self._catalog.mark_deleted(product_id)
        logger.info("Product withdrawn", extra={"product_id": product_id, "user_id": user.user_id})
        return ProductResponse.from_domain(product)
