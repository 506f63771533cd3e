"""In-memory stand-ins for the Supabase stores used by the service tests."""

import copy
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import uuid4

import pytest

from storefront.api.middleware.error_handler import StorageFailureError
from storefront.core.config import Settings
from storefront.core.money import to_money
from storefront.models.order import OrderStatus
from storefront.services.image_storage import StoredImage
from storefront.services.order_ledger import ApprovedOrder


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class InMemoryCatalog:
    """Products keyed by ID, with the same async surface as CatalogStore."""

    def __init__(self) -> None:
        self.products: dict[str, dict[str, Any]] = {}

    def add(self, **fields: Any) -> dict[str, Any]:
        product = {
            "id": str(uuid4()),
            "name": "Widget",
            "description": "A widget",
            "price": Decimal("10.00"),
            "quantity": 5,
            "category": "general",
            "image_url": "https://cdn.example.com/products/widget.png",
            "image_id": "products/widget.png",
            "is_active": True,
            "created_at": _now(),
            "updated_at": _now(),
        }
        product.update(fields)
        product["price"] = to_money(product["price"])
        self.products[product["id"]] = product
        return copy.deepcopy(product)

    def stock(self, product_id: str) -> int:
        return self.products[product_id]["quantity"]

    async def get_product(self, product_id: Any) -> dict[str, Any] | None:
        product = self.products.get(str(product_id))
        return copy.deepcopy(product) if product else None

    async def list_products(self, active_only: bool = True, category: str | None = None) -> list[dict[str, Any]]:
        products = [
            copy.deepcopy(p)
            for p in self.products.values()
            if (p["is_active"] or not active_only) and (category is None or p["category"] == category)
        ]
        return sorted(products, key=lambda p: p["created_at"], reverse=True)

    async def create_product(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.add(**data)

    async def update_product(self, product_id: Any, fields: dict[str, Any]) -> dict[str, Any] | None:
        product = self.products.get(str(product_id))
        if product is None:
            return None
        product.update(fields)
        if "price" in fields:
            product["price"] = to_money(fields["price"])
        product["updated_at"] = _now()
        return copy.deepcopy(product)

    async def set_active(self, product_id: Any, active: bool) -> dict[str, Any] | None:
        return await self.update_product(product_id, {"is_active": active})

    async def delete_product(self, product_id: Any) -> bool:
        return self.products.pop(str(product_id), None) is not None


class InMemoryAccounts:
    """Accounts keyed by ID, with the same async surface as AccountStore."""

    def __init__(self) -> None:
        self.accounts: dict[str, dict[str, Any]] = {}
        self.lose_enrollment_race = False

    def add(self, account: dict[str, Any]) -> dict[str, Any]:
        self.accounts[str(account["id"])] = copy.deepcopy(account)
        return account

    async def get_account(self, account_id: Any) -> dict[str, Any] | None:
        account = self.accounts.get(str(account_id))
        return copy.deepcopy(account) if account else None

    async def get_account_by_user_id(self, user_id: Any) -> dict[str, Any] | None:
        for account in self.accounts.values():
            if str(account["user_id"]) == str(user_id):
                return copy.deepcopy(account)
        return None

    async def list_customers(self) -> list[dict[str, Any]]:
        return [copy.deepcopy(a) for a in self.accounts.values() if a["role"] == "customer"]

    async def vip_number_exists(self, vip_number: str) -> bool:
        return any(a.get("vip_number") == vip_number for a in self.accounts.values())

    async def set_vip_number(self, account_id: Any, vip_number: str) -> dict[str, Any] | None:
        account = self.accounts.get(str(account_id))
        if account is None or account.get("vip_number") or self.lose_enrollment_race:
            return None
        account["vip_number"] = vip_number
        return copy.deepcopy(account)


class InMemoryLedger:
    """Orders keyed by ID, with the same async surface as OrderLedger."""

    def __init__(self, accounts: InMemoryAccounts, catalog: InMemoryCatalog) -> None:
        self.orders: dict[str, dict[str, Any]] = {}
        self.accounts = accounts
        self.catalog = catalog
        self.taken_numbers: set[str] = set()
        # Simulates another request winning the status update.
        self.lose_status_race = False
        self.approval_error: BaseException | None = None

    def add(self, **fields: Any) -> dict[str, Any]:
        order = {
            "id": str(uuid4()),
            "account_id": str(uuid4()),
            "order_number": f"ORD-20260101-{len(self.orders):04d}",
            "status": OrderStatus.PENDING,
            "total_amount": Decimal("0.00"),
            "admin_note": None,
            "created_at": _now(),
            "updated_at": _now(),
            "approved_at": None,
            "discarded_at": None,
            "items": [],
        }
        order.update(fields)
        order["status"] = OrderStatus(order["status"])
        order["total_amount"] = to_money(order["total_amount"])
        self.orders[order["id"]] = order
        return copy.deepcopy(order)

    async def create_order_with_items(self, order: dict[str, Any], items: list[dict[str, Any]]) -> dict[str, Any]:
        order_id = str(uuid4())
        line_items = [
            {
                **item,
                "id": str(uuid4()),
                "order_id": order_id,
                "product_price": to_money(item["product_price"]),
                "subtotal": to_money(item["subtotal"]),
                "created_at": _now(),
            }
            for item in items
        ]
        self.taken_numbers.add(order["order_number"])
        return self.add(id=order_id, items=line_items, **order)

    async def order_number_exists(self, order_number: str) -> bool:
        return order_number in self.taken_numbers

    async def get_order(self, order_id: Any) -> dict[str, Any] | None:
        order = self.orders.get(str(order_id))
        if order is None:
            return None
        joined = copy.deepcopy(order)
        joined["account"] = await self.accounts.get_account(order["account_id"])
        return joined

    async def list_orders(self, account_id: Any = None) -> list[dict[str, Any]]:
        orders = [
            copy.deepcopy(o)
            for o in self.orders.values()
            if account_id is None or str(o["account_id"]) == str(account_id)
        ]
        return sorted(orders, key=lambda o: o["created_at"], reverse=True)

    async def list_orders_since(self, since: datetime) -> list[dict[str, Any]]:
        orders = [
            copy.deepcopy(o)
            for o in self.orders.values()
            if datetime.fromisoformat(o["created_at"]) >= since
        ]
        return sorted(orders, key=lambda o: o["created_at"])

    async def approve_order(self, order_id: Any, note: str | None = None) -> ApprovedOrder | None:
        # Mirrors the database function: every change lands or none does.
        if self.approval_error is not None:
            raise self.approval_error
        order = self.orders.get(str(order_id))
        if order is None or order["status"] != OrderStatus.PENDING or self.lose_status_race:
            return None

        for item in order["items"]:
            product = self.catalog.products[str(item["product_id"])]
            product["quantity"] = max(0, product["quantity"] - item["quantity"])

        counter = None
        owner = self.accounts.accounts.get(str(order["account_id"]))
        if owner is not None and owner.get("vip_number"):
            owner["vip_approved_orders"] += 1
            counter = owner["vip_approved_orders"]

        order.update({
            "status": OrderStatus.APPROVED,
            "approved_at": _now(),
            "admin_note": note,
            "updated_at": _now(),
        })
        row = copy.deepcopy(order)
        row.pop("items")
        return ApprovedOrder(order=row, vip_approved_orders=counter)

    async def set_order_status(
        self,
        order_id: Any,
        status: OrderStatus,
        fields: dict[str, Any] | None = None,
        expected_status: OrderStatus = OrderStatus.PENDING,
    ) -> dict[str, Any] | None:
        order = self.orders.get(str(order_id))
        if order is None or order["status"] != expected_status:
            return None
        if self.lose_status_race and status is not OrderStatus.PENDING:
            return None
        order.update(fields or {})
        order["status"] = status
        row = copy.deepcopy(order)
        row.pop("items")
        return row

    async def any_line_item_references_product(self, product_id: Any) -> bool:
        return any(
            str(item["product_id"]) == str(product_id)
            for order in self.orders.values()
            for item in order["items"]
        )


class InMemoryImages:
    """Records stored and released images."""

    def __init__(self) -> None:
        self.stored: list[str] = []
        self.released: list[str] = []
        self.fail_release = False

    async def store(self, content: bytes, file_name: str, content_type: str | None) -> StoredImage:
        image_id = f"products/{uuid4()}.{file_name.rsplit('.', 1)[-1]}"
        self.stored.append(image_id)
        return StoredImage(url=f"https://cdn.example.com/{image_id}", id=image_id)

    async def release(self, image_id: str) -> None:
        if self.fail_release:
            raise StorageFailureError(f"Could not release image {image_id}")
        self.released.append(image_id)


@pytest.fixture
def settings() -> Settings:
    """Create settings with the default lifecycle limits."""
    return Settings(
        supabase_url="https://test-project.supabase.co",
        supabase_secret_key="test-secret-key",
        supabase_signing_key_jwk="test-signing-key-jwk",
    )


@pytest.fixture
def catalog() -> InMemoryCatalog:
    """Create an empty in-memory catalog."""
    return InMemoryCatalog()


@pytest.fixture
def accounts() -> InMemoryAccounts:
    """Create an empty in-memory account store."""
    return InMemoryAccounts()


@pytest.fixture
def ledger(accounts: InMemoryAccounts, catalog: InMemoryCatalog) -> InMemoryLedger:
    """Create an empty in-memory order ledger."""
    return InMemoryLedger(accounts, catalog)


@pytest.fixture
def images() -> InMemoryImages:
    """Create an in-memory image store."""
    return InMemoryImages()
