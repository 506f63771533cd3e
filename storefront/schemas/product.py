"""Product Pydantic schemas for API request/response models."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from storefront.models.product import DeleteOutcome


class ProductResponse(BaseModel):
    """Schema for product API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Product unique identifier")
    name: str = Field(description="Product name")
    description: str = Field(description="Product description")
    price: Decimal = Field(description="Unit price")
    quantity: int = Field(ge=0, description="Units in stock")
    category: str = Field(description="Product category")
    image_url: str | None = Field(default=None, description="Product image URL")
    is_active: bool = Field(description="Whether the product is shown in the catalog")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")


class ProductListResponse(BaseModel):
    """Schema for product list response."""

    model_config = ConfigDict(from_attributes=True)

    products: list[ProductResponse] = Field(description="List of products")


class ProductDeleteResponse(BaseModel):
    """Schema for product delete response."""

    model_config = ConfigDict(from_attributes=True)

    outcome: DeleteOutcome = Field(description="Whether the product was deleted or deactivated")
    message: str = Field(description="Confirmation message")
