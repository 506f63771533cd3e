"""Order lifecycle: checkout, staff approval and discard.

Stock is not touched when an order is placed. Approval is the single
point where inventory is committed and VIP progress is credited;
discarding a pending order therefore has nothing to give back.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID

from storefront.api.middleware.error_handler import (
    AuthorizationError,
    InsufficientStockError,
    InvalidStateError,
    NotFoundError,
    StorageFailureError,
    ValidationError,
)
from storefront.core.config import Settings, get_settings
from storefront.core.identifiers import IdentifierTakenError, allocation_retrying, generate_order_number
from storefront.core.money import money_str, to_money
from storefront.models.account import Account
from storefront.models.order import Order, OrderLineItemCreate, OrderStatus
from storefront.schemas.order import OrderItemRequest
from storefront.services.access import is_staff, require_customer, require_staff
from storefront.services.catalog_store import CatalogStore
from storefront.services.order_ledger import OrderLedger

logger = logging.getLogger(__name__)

ALREADY_PROCESSED = "Order already processed"


@dataclass
class ApprovalResult:
    """Outcome of an approval.

    ``vip_approved_orders`` is None when the owner is not a VIP member.
    """

    order: Order
    vip_approved_orders: int | None = None
    vip_milestone_reached: bool = False


class OrderService:
    """Drives orders from pending to approved or discarded."""

    def __init__(
        self,
        ledger: OrderLedger | None = None,
        catalog: CatalogStore | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize order service.

        Args:
            ledger: Optional order ledger for testing.
            catalog: Optional catalog store for testing.
            settings: Optional settings for testing.
        """
        self.ledger = ledger or OrderLedger()
        self.catalog = catalog or CatalogStore()
        self.settings = settings or get_settings()

    async def create_order(self, account: Account, items: list[OrderItemRequest]) -> Order:
        """Place a pending reservation order.

        Prices and names are read from the catalog and copied into the
        line items; stock is checked but not reduced.

        Args:
            account: The ordering customer account.
            items: Requested product/quantity lines.

        Returns:
            Order: The created pending order with its items.

        Raises:
            AuthorizationError: If the account is a staff account.
            ValidationError: If the cart is empty or a product is inactive.
            NotFoundError: If a product does not exist.
            InsufficientStockError: If a quantity exceeds current stock.
        """
        require_customer(account, "Staff accounts cannot place orders")
        if not items:
            raise ValidationError("Cart is empty")

        # Repeated products are merged so stock is checked against the total.
        requested: dict[str, int] = {}
        for item in items:
            if item.quantity < 1:
                raise ValidationError(
                    "Quantity must be at least 1",
                    details=[{"loc": ["items", str(item.product_id)], "msg": "quantity < 1", "type": "value_error"}],
                )
            key = str(item.product_id)
            requested[key] = requested.get(key, 0) + item.quantity

        line_items: list[OrderLineItemCreate] = []
        total = Decimal("0.00")
        for product_id, quantity in requested.items():
            product = await self.catalog.get_product(product_id)
            if product is None:
                raise NotFoundError(f"Product {product_id} not found")
            if not product["is_active"]:
                raise ValidationError(f"{product['name']} is no longer available")
            if quantity > product["quantity"]:
                raise InsufficientStockError(
                    f"Insufficient stock for {product['name']}",
                    details=[{
                        "loc": ["items", product_id],
                        "msg": f"requested {quantity}, available {product['quantity']}",
                        "type": "insufficient_stock",
                    }],
                )

            price = to_money(product["price"])
            subtotal = to_money(price * quantity)
            total += subtotal
            line_items.append({
                "product_id": product_id,
                "product_name": product["name"],
                "product_price": money_str(price),
                "quantity": quantity,
                "subtotal": money_str(subtotal),
            })

        order = await self.ledger.create_order_with_items(
            {
                "account_id": str(account["id"]),
                "order_number": await self._new_order_number(),
                "status": OrderStatus.PENDING.value,
                "total_amount": money_str(total),
            },
            line_items,
        )
        logger.info(
            "Order %s placed by account %s: %d line(s), total %s",
            order["order_number"],
            account["id"],
            len(line_items),
            order["total_amount"],
        )
        return order

    async def list_orders(self, account: Account) -> list[Order]:
        """List the account's own orders, or every order for staff."""
        if is_staff(account):
            return await self.ledger.list_orders()
        return await self.ledger.list_orders(account_id=account["id"])

    async def get_order(self, account: Account, order_id: UUID) -> Order:
        """Get one order visible to ``account``.

        Raises:
            NotFoundError: If the order does not exist.
            AuthorizationError: If a customer asks for someone else's order.
        """
        order = await self.ledger.get_order(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        if not is_staff(account) and str(order["account_id"]) != str(account["id"]):
            raise AuthorizationError("Not authorized to view this order")
        return order

    async def approve_order(
        self,
        actor: Account,
        order_id: UUID,
        note: str | None = None,
    ) -> ApprovalResult:
        """Approve a pending order.

        The status change, the stock reduction for every line (clamped at
        zero) and the owner's VIP credit are applied by the ledger in a
        single transaction. An order that stopped being pending after it
        was read, e.g. because a concurrent approval won, is rejected.

        Args:
            actor: The approving staff account.
            order_id: Order UUID.
            note: Optional staff note.

        Returns:
            ApprovalResult: The approved order and VIP progress.

        Raises:
            AuthorizationError: If the actor is not staff.
            NotFoundError: If the order does not exist.
            InvalidStateError: If the order is not pending.
            StorageFailureError: If the transaction failed; nothing was changed.
        """
        require_staff(actor)
        order = await self._get_pending_order(order_id)

        approved = await self.ledger.approve_order(order_id, note=note or None)
        if approved is None:
            raise InvalidStateError(ALREADY_PROCESSED)

        vip_counter = approved.vip_approved_orders
        milestone = vip_counter is not None and vip_counter % self.settings.vip_reward_interval == 0
        logger.info(
            "Order %s approved by %s%s",
            order["order_number"],
            actor["id"],
            f"; VIP counter now {vip_counter}" if vip_counter is not None else "",
        )
        if milestone:
            logger.info("Account %s reached a VIP reward milestone (%d)", order["account_id"], vip_counter)

        return ApprovalResult(
            order=_merge(order, approved.order),
            vip_approved_orders=vip_counter,
            vip_milestone_reached=milestone,
        )

    async def discard_order(self, actor: Account, order_id: UUID) -> Order:
        """Discard a pending order.

        Stock is left unchanged: it was never reduced for a pending order.

        Raises:
            AuthorizationError: If the actor is not staff.
            NotFoundError: If the order does not exist.
            InvalidStateError: If the order is not pending.
        """
        require_staff(actor)
        order = await self._get_pending_order(order_id)

        now = _now()
        discarded = await self.ledger.set_order_status(
            order_id,
            OrderStatus.DISCARDED,
            {"discarded_at": now, "updated_at": now},
        )
        if discarded is None:
            raise InvalidStateError(ALREADY_PROCESSED)

        logger.info("Order %s discarded by %s", order["order_number"], actor["id"])
        return _merge(order, discarded)

    async def _get_pending_order(self, order_id: UUID) -> Order:
        order = await self.ledger.get_order(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        if order["status"].is_terminal:
            raise InvalidStateError(ALREADY_PROCESSED)
        return order

    async def _new_order_number(self) -> str:
        attempts = self.settings.order_number_max_attempts
        try:
            async for attempt in allocation_retrying(attempts):
                with attempt:
                    candidate = generate_order_number()
                    if await self.ledger.order_number_exists(candidate):
                        raise IdentifierTakenError(f"Order number {candidate} already taken")
                    return candidate
        except IdentifierTakenError as e:
            raise StorageFailureError(
                f"Could not allocate a unique order number after {attempts} attempts"
            ) from e


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _merge(order: Order, updated: dict[str, Any]) -> Order:
    """Combine a status update result with the items and owner already loaded."""
    merged = {**order, **updated}
    merged["items"] = order.get("items", [])
    if "account" in order:
        merged["account"] = order["account"]
    return merged


def get_order_service() -> OrderService:
    """Get order service instance.

    Returns:
        OrderService: Order service instance.
    """
    return OrderService()
