"""Catalog store: product records, stock levels and the active flag."""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from storefront.api.middleware.error_handler import StorageFailureError
from storefront.core.money import money_str, to_money
from storefront.models.product import Product, ProductCreate, ProductUpdate
from storefront.services.store_base import SupabaseStore

PRODUCTS_TABLE = "products"


def _to_product(row: dict[str, Any]) -> Product:
    """Normalize a products row (price to Decimal, quantity to int)."""
    product = dict(row)
    product["price"] = to_money(row["price"])
    product["quantity"] = int(row.get("quantity") or 0)
    product["is_active"] = bool(row.get("is_active", True))
    return product


def _to_row(data: ProductCreate | ProductUpdate) -> dict[str, Any]:
    row = dict(data)
    if "price" in row:
        row["price"] = money_str(row["price"])
    return row


class CatalogStore(SupabaseStore):
    """Data access for the products table."""

    async def get_product(self, product_id: UUID | str) -> Product | None:
        """Get a product by ID.

        Args:
            product_id: Product UUID.

        Returns:
            Product or None if not found.
        """
        rows = self._execute(
            self.supabase.table(PRODUCTS_TABLE).select("*").eq("id", str(product_id)),
            "load product",
        )
        return _to_product(rows[0]) if rows else None

    async def list_products(
        self,
        active_only: bool = True,
        category: str | None = None,
    ) -> list[Product]:
        """List products, newest first.

        Args:
            active_only: Exclude deactivated products.
            category: Optional category filter.

        Returns:
            list[Product]: Matching products.
        """
        query = self.supabase.table(PRODUCTS_TABLE).select("*").order("created_at", desc=True)
        if active_only:
            query = query.eq("is_active", True)
        if category:
            query = query.eq("category", category)

        return [_to_product(row) for row in self._execute(query, "list products")]

    async def create_product(self, data: ProductCreate) -> Product:
        """Insert a new product row.

        Raises:
            StorageFailureError: If the insert returns nothing.
        """
        rows = self._execute(
            self.supabase.table(PRODUCTS_TABLE).insert(_to_row(data)),
            "create product",
        )
        if not rows:
            raise StorageFailureError("Could not create product")
        return _to_product(rows[0])

    async def update_product(self, product_id: UUID | str, fields: ProductUpdate) -> Product | None:
        """Persist the given fields; fields not supplied keep their values.

        Returns:
            Product or None if not found.
        """
        row = _to_row(fields)
        row["updated_at"] = datetime.now(timezone.utc).isoformat()
        rows = self._execute(
            self.supabase.table(PRODUCTS_TABLE).update(row).eq("id", str(product_id)),
            "update product",
        )
        return _to_product(rows[0]) if rows else None

    async def set_active(self, product_id: UUID | str, active: bool) -> Product | None:
        """Set the active flag of a product."""
        return await self.update_product(product_id, {"is_active": active})

    async def delete_product(self, product_id: UUID | str) -> bool:
        """Hard delete a product row.

        Returns:
            bool: True if a row was removed.
        """
        rows = self._execute(
            self.supabase.table(PRODUCTS_TABLE).delete().eq("id", str(product_id)),
            "delete product",
        )
        return bool(rows)
