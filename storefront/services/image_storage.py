"""Product image storage in a Supabase Storage bucket."""

import logging
from dataclasses import dataclass
from uuid import uuid4

from supabase import Client

from storefront.api.middleware.error_handler import StorageFailureError, ValidationError
from storefront.core.config import get_settings
from storefront.core.supabase import get_supabase_client

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {"image/png", "image/jpeg", "image/jpg", "image/webp"}


@dataclass(frozen=True)
class StoredImage:
    """A stored image: public URL plus the storage path used to release it."""

    url: str
    id: str


class ImageStorage:
    """Stores and releases product images."""

    def __init__(self, supabase_client: Client | None = None, bucket: str | None = None) -> None:
        settings = get_settings()
        self._supabase_client = supabase_client
        self.bucket = bucket or settings.product_image_bucket
        self.max_size_bytes = settings.max_image_size_bytes

    @property
    def supabase(self) -> Client:
        """Get Supabase client."""
        if self._supabase_client is None:
            self._supabase_client = get_supabase_client()
        return self._supabase_client

    def validate(self, content: bytes, content_type: str | None) -> None:
        """Validate an uploaded image.

        Raises:
            ValidationError: If the type is not an image or the file is too large.
        """
        if content_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                f"Invalid image type: {content_type}. "
                f"Allowed types: {', '.join(sorted(ALLOWED_MIME_TYPES))}"
            )
        if not content:
            raise ValidationError("Image file is empty")
        if len(content) > self.max_size_bytes:
            raise ValidationError(
                f"Image too large: {len(content) / (1024 * 1024):.1f} MB. "
                f"Maximum size: {self.max_size_bytes / (1024 * 1024):.0f} MB"
            )

    async def store(self, content: bytes, file_name: str, content_type: str | None) -> StoredImage:
        """Upload an image and return where it lives.

        Raises:
            ValidationError: If the image is rejected.
            StorageFailureError: If the upload fails.
        """
        self.validate(content, content_type)

        extension = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else "png"
        storage_path = f"products/{uuid4()}.{extension}"

        bucket = self.supabase.storage.from_(self.bucket)
        try:
            bucket.upload(
                path=storage_path,
                file=content,
                file_options={"content-type": content_type},
            )
            url = bucket.get_public_url(storage_path)
        except Exception as e:
            logger.error("Failed to upload product image: %s", e)
            raise StorageFailureError("Could not store product image") from e

        logger.info("Stored product image %s", storage_path)
        return StoredImage(url=url, id=storage_path)

    async def release(self, image_id: str) -> None:
        """Remove a stored image.

        Raises:
            StorageFailureError: If the removal fails. Callers on cleanup
                paths log and continue.
        """
        try:
            self.supabase.storage.from_(self.bucket).remove([image_id])
        except Exception as e:
            raise StorageFailureError(f"Could not release image {image_id}") from e


@dataclass(frozen=True)
class ImageUpload:
    """An uploaded image waiting to be stored."""

    content: bytes
    file_name: str
    content_type: str | None
