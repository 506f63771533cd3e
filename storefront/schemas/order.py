"""Order Pydantic schemas for API request/response models."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from storefront.models.order import OrderStatus


class OrderItemRequest(BaseModel):
    """A single requested line: product and quantity.

    Prices are never accepted from the client; they are read from the
    catalog when the order is created.
    """

    model_config = ConfigDict(from_attributes=True)

    product_id: UUID = Field(description="Product UUID")
    quantity: int = Field(ge=1, description="Units requested")


class OrderCreateRequest(BaseModel):
    """Schema for placing a reservation order via POST /orders."""

    model_config = ConfigDict(from_attributes=True)

    items: list[OrderItemRequest] = Field(min_length=1, description="Requested lines")


class ApproveOrderRequest(BaseModel):
    """Schema for approving an order."""

    model_config = ConfigDict(from_attributes=True)

    note: str | None = Field(default=None, max_length=2000, description="Optional staff note")


class OrderOwnerSchema(BaseModel):
    """Owner summary shown to staff."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Account ID")
    name: str | None = Field(default=None, description="Account name")
    email: str | None = Field(default=None, description="Account email")
    vip_number: str | None = Field(default=None, description="VIP Circle number")


class OrderLineItemSchema(BaseModel):
    """Schema for a single line item in an order."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID | None = Field(default=None, description="Line item ID")
    product_id: UUID = Field(description="Product UUID")
    product_name: str = Field(description="Product name when ordered")
    product_price: Decimal = Field(description="Unit price when ordered")
    quantity: int = Field(ge=1, description="Quantity ordered")
    subtotal: Decimal = Field(description="Unit price times quantity")


class OrderResponse(BaseModel):
    """Schema for order API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Order unique identifier")
    account_id: UUID = Field(description="Owner account ID")
    order_number: str = Field(description="Human-readable order number")
    status: OrderStatus = Field(description="Order status")
    total_amount: Decimal = Field(description="Sum of line subtotals")
    admin_note: str | None = Field(default=None, description="Staff note")
    items: list[OrderLineItemSchema] = Field(default_factory=list, description="Order line items")
    account: OrderOwnerSchema | None = Field(default=None, description="Owner (staff views only)")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")
    approved_at: datetime | None = Field(default=None, description="Approval timestamp")
    discarded_at: datetime | None = Field(default=None, description="Discard timestamp")


class OrderCreateResponse(BaseModel):
    """Schema for a placed order."""

    model_config = ConfigDict(from_attributes=True)

    order: OrderResponse = Field(description="The pending order")
    message: str = Field(description="Confirmation message")


class OrderListResponse(BaseModel):
    """Schema for order list API responses."""

    model_config = ConfigDict(from_attributes=True)

    items: list[OrderResponse] = Field(description="List of orders")


class OrderTransitionResponse(BaseModel):
    """Schema for approve/discard responses."""

    model_config = ConfigDict(from_attributes=True)

    order: OrderResponse = Field(description="The order after the transition")
    message: str = Field(description="Confirmation message")
    vip_approved_orders: int | None = Field(
        default=None,
        description="Owner's VIP counter after approval, if the owner is a member",
    )
    vip_milestone_reached: bool = Field(
        default=False,
        description="Whether this approval brought the owner to a reward milestone",
    )
