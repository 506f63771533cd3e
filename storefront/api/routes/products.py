"""Product API routes."""

from decimal import Decimal
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from storefront.api.deps import StaffAccount
from storefront.models.product import DeleteOutcome
from storefront.schemas.product import (
    ProductDeleteResponse,
    ProductListResponse,
    ProductResponse,
)
from storefront.services.image_storage import ImageUpload
from storefront.services.product_service import ProductService, get_product_service

router = APIRouter(prefix="/products", tags=["products"])


async def _read_upload(image: UploadFile | None) -> ImageUpload | None:
    if image is None:
        return None
    content = await image.read()
    if not content:
        return None
    return ImageUpload(
        content=content,
        file_name=image.filename or "image.png",
        content_type=image.content_type,
    )


@router.get("", response_model=ProductListResponse)
async def list_products(
    category: Annotated[str | None, Query(description="Filter by category")] = None,
    product_service: ProductService = Depends(get_product_service),
) -> ProductListResponse:
    """List active products. Public."""
    products = await product_service.list_products(category=category)
    return ProductListResponse(products=[ProductResponse(**p) for p in products])


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: UUID,
    product_service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Get an active product by ID. Public."""
    product = await product_service.get_product(product_id)
    return ProductResponse(**product)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    actor: StaffAccount,
    name: Annotated[str, Form(min_length=1, max_length=255)],
    description: Annotated[str, Form()],
    price: Annotated[Decimal, Form(ge=0)],
    quantity: Annotated[int, Form(ge=0)],
    category: Annotated[str, Form(min_length=1, max_length=100)],
    image: Annotated[UploadFile, File(description="Product image (PNG, JPG or WebP)")],
    product_service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Create a product. Staff only."""
    product = await product_service.create_product(
        actor,
        {
            "name": name,
            "description": description,
            "price": price,
            "quantity": quantity,
            "category": category,
        },
        await _read_upload(image),
    )
    return ProductResponse(**product)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: UUID,
    actor: StaffAccount,
    name: Annotated[str | None, Form(max_length=255)] = None,
    description: Annotated[str | None, Form()] = None,
    price: Annotated[Decimal | None, Form(ge=0)] = None,
    quantity: Annotated[int | None, Form(ge=0)] = None,
    category: Annotated[str | None, Form(max_length=100)] = None,
    is_active: Annotated[bool | None, Form()] = None,
    image: Annotated[UploadFile | None, File(description="Replacement image")] = None,
    product_service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Update a product. Staff only; omitted fields keep their values."""
    product = await product_service.update_product(
        actor,
        product_id,
        {
            "name": name,
            "description": description,
            "price": price,
            "quantity": quantity,
            "category": category,
            "is_active": is_active,
        },
        await _read_upload(image),
    )
    return ProductResponse(**product)


@router.delete("/{product_id}", response_model=ProductDeleteResponse)
async def delete_product(
    product_id: UUID,
    actor: StaffAccount,
    product_service: ProductService = Depends(get_product_service),
) -> ProductDeleteResponse:
    """Delete a product. Staff only.

    Products that appear on past orders are deactivated instead.
    """
    outcome = await product_service.delete_product(actor, product_id)
    if outcome is DeleteOutcome.DEACTIVATED:
        message = "Product has order history and was deactivated instead of deleted"
    else:
        message = "Product deleted successfully"
    return ProductDeleteResponse(outcome=outcome, message=message)
