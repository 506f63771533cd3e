"""Order ledger: orders and their snapshotted line items."""

from datetime import datetime
from typing import Any, NamedTuple
from uuid import UUID

from storefront.api.middleware.error_handler import StorageFailureError
from storefront.core.money import to_money
from storefront.models.order import (
    Order,
    OrderCreate,
    OrderLineItem,
    OrderLineItemCreate,
    OrderStatus,
)
from storefront.services.store_base import SupabaseStore

ORDERS_TABLE = "orders"
ORDER_ITEMS_TABLE = "order_items"
PLACE_ORDER_FN = "place_order"
APPROVE_ORDER_FN = "approve_order"

ORDER_WITH_ITEMS = "*, items:order_items(*)"
ORDER_WITH_ITEMS_AND_ACCOUNT = "*, items:order_items(*), account:accounts(*)"


def _to_line_item(row: dict[str, Any]) -> OrderLineItem:
    item = dict(row)
    item["product_price"] = to_money(row["product_price"])
    item["subtotal"] = to_money(row["subtotal"])
    item["quantity"] = int(row["quantity"])
    return item


def _to_order(row: dict[str, Any]) -> Order:
    order = dict(row)
    order["status"] = OrderStatus(row["status"])
    order["total_amount"] = to_money(row["total_amount"])
    order["items"] = [_to_line_item(item) for item in row.get("items") or []]
    return order


class ApprovedOrder(NamedTuple):
    """Result of a successful approval."""

    order: Order
    vip_approved_orders: int | None


class OrderLedger(SupabaseStore):
    """Data access for the orders and order_items tables."""

    async def create_order_with_items(
        self,
        order: OrderCreate,
        items: list[OrderLineItemCreate],
    ) -> Order:
        """Insert an order together with all of its line items.

        Both inserts run inside the ``place_order`` database function, so
        either the order and every item exist or neither does.

        Args:
            order: Order row data.
            items: Line item rows (without ``order_id``).

        Returns:
            Order: The created order with its items.

        Raises:
            StorageFailureError: If the function fails or returns nothing.
        """
        rows = self._execute(
            self.supabase.rpc(PLACE_ORDER_FN, {"p_order": dict(order), "p_items": list(items)}),
            "create order",
        )
        if not rows:
            raise StorageFailureError("Could not create order")
        return _to_order(rows[0])

    async def approve_order(self, order_id: UUID | str, note: str | None = None) -> ApprovedOrder | None:
        """Approve a pending order and apply its side effects in one transaction.

        The ``approve_order`` database function flips the status, reduces
        stock for every line (never below zero) and credits the owner's
        VIP counter when they hold a VIP number.

        Args:
            order_id: Order UUID.
            note: Optional staff note stored on the order.

        Returns:
            ApprovedOrder or None if the order was not pending.

        Raises:
            StorageFailureError: If the function fails; nothing is changed.
        """
        rows = self._execute(
            self.supabase.rpc(APPROVE_ORDER_FN, {"p_order_id": str(order_id), "p_note": note}),
            "approve order",
        )
        if not rows:
            return None
        counter = rows[0].get("vip_approved_orders")
        return ApprovedOrder(
            order=_to_order(rows[0]["order"]),
            vip_approved_orders=int(counter) if counter is not None else None,
        )

    async def order_number_exists(self, order_number: str) -> bool:
        """Check whether an order number is already taken."""
        rows = self._execute(
            self.supabase.table(ORDERS_TABLE).select("id").eq("order_number", order_number).limit(1),
            "look up order number",
        )
        return bool(rows)

    async def get_order(self, order_id: UUID | str) -> Order | None:
        """Get an order with its line items and owner account joined."""
        rows = self._execute(
            self.supabase.table(ORDERS_TABLE)
            .select(ORDER_WITH_ITEMS_AND_ACCOUNT)
            .eq("id", str(order_id)),
            "load order",
        )
        return _to_order(rows[0]) if rows else None

    async def list_orders(self, account_id: UUID | str | None = None) -> list[Order]:
        """List orders newest first.

        Args:
            account_id: Restrict to one owner; ``None`` lists every order
                with its owner account joined.
        """
        if account_id is None:
            query = self.supabase.table(ORDERS_TABLE).select(ORDER_WITH_ITEMS_AND_ACCOUNT)
        else:
            query = (
                self.supabase.table(ORDERS_TABLE)
                .select(ORDER_WITH_ITEMS)
                .eq("account_id", str(account_id))
            )

        rows = self._execute(query.order("created_at", desc=True), "list orders")
        return [_to_order(row) for row in rows]

    async def list_orders_since(self, since: datetime) -> list[Order]:
        """List orders created at or after ``since``, oldest first, without items."""
        rows = self._execute(
            self.supabase.table(ORDERS_TABLE)
            .select("id, status, total_amount, created_at")
            .gte("created_at", since.isoformat())
            .order("created_at"),
            "list orders for analytics",
        )
        return [_to_order(row) for row in rows]

    async def set_order_status(
        self,
        order_id: UUID | str,
        status: OrderStatus,
        fields: dict[str, Any] | None = None,
        expected_status: OrderStatus = OrderStatus.PENDING,
    ) -> Order | None:
        """Move an order to ``status`` if it is still in ``expected_status``.

        The update filters on the current status, so of two concurrent
        transitions on the same order only one matches a row.

        Args:
            order_id: Order UUID.
            status: New status.
            fields: Extra columns to write (timestamps, note).
            expected_status: Status the order must currently have.

        Returns:
            Order or None if the order was not in ``expected_status``.
        """
        update = {**(fields or {}), "status": status.value}
        rows = self._execute(
            self.supabase.table(ORDERS_TABLE)
            .update(update)
            .eq("id", str(order_id))
            .eq("status", expected_status.value),
            "update order status",
        )
        return _to_order(rows[0]) if rows else None

    async def any_line_item_references_product(self, product_id: UUID | str) -> bool:
        """Check whether any order line item points at a product."""
        rows = self._execute(
            self.supabase.table(ORDER_ITEMS_TABLE).select("id").eq("product_id", str(product_id)).limit(1),
            "check product order history",
        )
        return bool(rows)
