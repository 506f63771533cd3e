"""Product service: catalog maintenance and product retirement."""

import logging
from typing import Any
from uuid import UUID

from storefront.api.middleware.error_handler import (
    NotFoundError,
    StorageFailureError,
    ValidationError,
)
from storefront.models.account import Account
from storefront.models.product import DeleteOutcome, Product, ProductCreate, ProductUpdate
from storefront.services.access import require_staff
from storefront.services.catalog_store import CatalogStore
from storefront.services.image_storage import ImageStorage, ImageUpload, StoredImage
from storefront.services.order_ledger import OrderLedger

logger = logging.getLogger(__name__)


class ProductService:
    """Service for product operations."""

    def __init__(
        self,
        catalog: CatalogStore | None = None,
        ledger: OrderLedger | None = None,
        images: ImageStorage | None = None,
    ) -> None:
        """Initialize product service.

        Args:
            catalog: Optional catalog store for testing.
            ledger: Optional order ledger for testing.
            images: Optional image storage for testing.
        """
        self.catalog = catalog or CatalogStore()
        self.ledger = ledger or OrderLedger()
        self.images = images or ImageStorage()

    async def list_products(self, category: str | None = None, include_inactive: bool = False) -> list[Product]:
        """List catalog products, newest first."""
        return await self.catalog.list_products(active_only=not include_inactive, category=category)

    async def get_product(self, product_id: UUID, include_inactive: bool = False) -> Product:
        """Get a product by ID.

        Raises:
            NotFoundError: If missing, or inactive and ``include_inactive`` is False.
        """
        product = await self.catalog.get_product(product_id)
        if product is None or (not product["is_active"] and not include_inactive):
            raise NotFoundError("Product not found")
        return product

    async def create_product(self, actor: Account, data: ProductCreate, image: ImageUpload | None) -> Product:
        """Create a product with its image.

        The image is stored first; if the record cannot be inserted the
        image is released again.

        Raises:
            AuthorizationError: If the actor is not staff.
            ValidationError: If the image is missing or invalid.
        """
        require_staff(actor)
        if image is None or not image.content:
            raise ValidationError("Product image is required")
        _validate_fields(data)

        stored = await self.images.store(image.content, image.file_name, image.content_type)
        try:
            product = await self.catalog.create_product(
                {**data, "image_url": stored.url, "image_id": stored.id, "is_active": True}
            )
        except Exception:
            await self._release_quietly(stored.id)
            raise

        logger.info("Created product %s (%s)", product["id"], product["name"])
        return product

    async def update_product(
        self,
        actor: Account,
        product_id: UUID,
        fields: ProductUpdate,
        image: ImageUpload | None = None,
    ) -> Product:
        """Update a product; fields left out keep their values.

        A replacement image is stored before the record changes, and the
        previous image is released only once the record points at the
        new one.

        Args:
            actor: The staff account making the change.
            product_id: Product UUID.
            fields: Fields to change (None values are ignored).
            image: Optional replacement image.

        Returns:
            Product: The updated product.

        Raises:
            AuthorizationError: If the actor is not staff.
            NotFoundError: If the product does not exist.
            ValidationError: If a field or the image is invalid.
        """
        require_staff(actor)
        product = await self.catalog.get_product(product_id)
        if product is None:
            raise NotFoundError("Product not found")

        changes: dict[str, Any] = {k: v for k, v in fields.items() if v is not None}
        _validate_fields(changes)

        stored: StoredImage | None = None
        if image is not None and image.content:
            stored = await self.images.store(image.content, image.file_name, image.content_type)
            changes["image_url"] = stored.url
            changes["image_id"] = stored.id

        if not changes:
            return product

        try:
            updated = await self.catalog.update_product(product_id, changes)
        except Exception:
            if stored is not None:
                await self._release_quietly(stored.id)
            raise

        if updated is None:
            if stored is not None:
                await self._release_quietly(stored.id)
            raise NotFoundError("Product not found")

        if stored is not None and product.get("image_id"):
            await self._release_quietly(product["image_id"])

        logger.info("Updated product %s", product_id)
        return updated

    async def delete_product(self, actor: Account, product_id: UUID) -> DeleteOutcome:
        """Delete a product, or deactivate it if any order references it.

        Products with order history keep their record so historical line
        items stay intact. Products without history are removed and their
        image is released; a failed image release does not undo the delete.

        Raises:
            AuthorizationError: If the actor is not staff.
            NotFoundError: If the product does not exist.
        """
        require_staff(actor)
        product = await self.catalog.get_product(product_id)
        if product is None:
            raise NotFoundError("Product not found")

        if await self.ledger.any_line_item_references_product(product_id):
            await self.catalog.set_active(product_id, False)
            logger.info("Deactivated product %s (has order history)", product_id)
            return DeleteOutcome.DEACTIVATED

        if not await self.catalog.delete_product(product_id):
            raise NotFoundError("Product not found")

        if product.get("image_id"):
            await self._release_quietly(product["image_id"])

        logger.info("Deleted product %s", product_id)
        return DeleteOutcome.DELETED

    async def _release_quietly(self, image_id: str) -> None:
        try:
            await self.images.release(image_id)
        except StorageFailureError as e:
            logger.warning("Failed to release image %s: %s", image_id, e.message)


def _validate_fields(data: dict[str, Any]) -> None:
    if "price" in data and data["price"] is not None and data["price"] < 0:
        raise ValidationError("Price cannot be negative")
    if "quantity" in data and data["quantity"] is not None and data["quantity"] < 0:
        raise ValidationError("Quantity cannot be negative")
    if "name" in data and not str(data["name"]).strip():
        raise ValidationError("Name cannot be empty")


def get_product_service() -> ProductService:
    """Get product service instance.

    Returns:
        ProductService: Product service instance.
    """
    return ProductService()
