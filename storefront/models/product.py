"""Product model type definitions for database operations."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TypedDict
from uuid import UUID


class Product(TypedDict):
    """Product table row representation.

    Represents a product stored in the products table. ``price`` is a
    two-place decimal and ``quantity`` is the units in stock.
    """

    id: UUID
    name: str
    description: str
    price: Decimal
    quantity: int
    category: str
    image_url: str | None
    image_id: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ProductCreate(TypedDict, total=False):
    """Data required to create a new product."""

    name: str
    description: str
    price: Decimal
    quantity: int
    category: str
    image_url: str
    image_id: str
    is_active: bool


class ProductUpdate(TypedDict, total=False):
    """Data that can be updated on a product."""

    name: str
    description: str
    price: Decimal
    quantity: int
    category: str
    image_url: str
    image_id: str
    is_active: bool


class DeleteOutcome(str, Enum):
    """What happened to a product on delete."""

    DELETED = "deleted"
    DEACTIVATED = "deactivated"
