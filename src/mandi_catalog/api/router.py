"""mandi_catalog REST endpoints.

POST   /products               : vendor lists a product
GET    /products/{product_id}  : product detail (any authenticated user)
DELETE /products/{product_id}  : owning vendor withdraws a product (soft delete)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from src.mandi_catalog.application.schemas import CreateProductRequest
from src.mandi_catalog.application.service import ProductApplicationService
from src.mandi_catalog.infrastructure.persistence import ProductCatalog
from src.mandi_common.response import ApiResponse, request_response
from src.mandi_gateway.auth.dependencies import CurrentUser, get_current_user
from src.mandi_store.application.service import get_store

router = APIRouter(prefix="/products", tags=["products"])

_service: ProductApplicationService | None = None


def get_product_service() -> ProductApplicationService:
    global _service  # noqa: PLW0603
    if _service is None:
        _service = ProductApplicationService(ProductCatalog(get_store()))
    return _service


ServiceDep = Annotated[ProductApplicationService, Depends(get_product_service)]
UserDep = Annotated[CurrentUser, Depends(get_current_user)]


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
async def create_product(
    request: Request,
    body: CreateProductRequest,
    current_user: UserDep,
    service: ServiceDep,
) -> ApiResponse:
    result = await service.create_product(current_user, body)
    return request_response(request, result.model_dump(mode="json"), "Product listed")


@router.get("/{product_id}", response_model=ApiResponse)
async def get_product(
    product_id: str,
    request: Request,
    current_user: UserDep,
    service: ServiceDep,
) -> ApiResponse:
    result = await service.get_product(product_id)
    return request_response(request, result.model_dump(mode="json"))


@router.delete("/{product_id}", response_model=ApiResponse)
async def delete_product(
    product_id: str,
    request: Request,
    current_user: UserDep,
    service: ServiceDep,
) -> ApiResponse:
    result = await service.delete_product(current_user, product_id)
    return request_response(request, result.model_dump(mode="json"), "Product withdrawn")
