"""Order model type definitions for database operations."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TypedDict
from uuid import UUID


class OrderStatus(str, Enum):
    """Order status values matching the database enum.

    ``approved`` and ``discarded`` are terminal.
    """

    PENDING = "pending"
    APPROVED = "approved"
    DISCARDED = "discarded"

    @property
    def is_terminal(self) -> bool:
        """Whether no transition leaves this status."""
        return self is not OrderStatus.PENDING


class OrderLineItem(TypedDict):
    """Structure for a single line item in an order.

    ``product_name`` and ``product_price`` are copies taken when the order
    was placed; ``subtotal`` is never recomputed.
    """

    id: UUID
    order_id: UUID
    product_id: UUID
    product_name: str
    product_price: Decimal
    quantity: int
    subtotal: Decimal
    created_at: datetime


class OrderLineItemCreate(TypedDict):
    """Data for a line item inserted together with its order."""

    product_id: str
    product_name: str
    product_price: str
    quantity: int
    subtotal: str


class Order(TypedDict, total=False):
    """Order table row representation.

    ``items`` and ``account`` are only present when the row is read
    with its line items and owner joined.
    """

    id: UUID
    account_id: UUID
    order_number: str
    status: OrderStatus
    total_amount: Decimal
    admin_note: str | None
    created_at: datetime
    updated_at: datetime
    approved_at: datetime | None
    discarded_at: datetime | None
    items: list[OrderLineItem]
    account: dict


class OrderCreate(TypedDict):
    """Data required to create a new order."""

    account_id: str
    order_number: str
    status: str
    total_amount: str
