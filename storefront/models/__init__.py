"""Database model type definitions."""

from storefront.models.account import Account, AccountRole
from storefront.models.order import Order, OrderLineItem, OrderStatus
from storefront.models.product import DeleteOutcome, Product

__all__ = [
    "Account",
    "AccountRole",
    "DeleteOutcome",
    "Order",
    "OrderLineItem",
    "OrderStatus",
    "Product",
]
