"""Shared plumbing for the Supabase-backed stores."""

import logging
from typing import Any

from supabase import Client

from storefront.api.middleware.error_handler import StorageFailureError
from storefront.core.supabase import get_supabase_client

logger = logging.getLogger(__name__)


class SupabaseStore:
    """Base class for table-level data access.

    Subclasses build PostgREST queries and run them through ``_execute``
    so that any client or transport failure reaches callers as
    ``StorageFailureError``.
    """

    def __init__(self, supabase_client: Client | None = None) -> None:
        """Initialize the store.

        Args:
            supabase_client: Optional Supabase client for testing.
        """
        self._supabase_client = supabase_client

    @property
    def supabase(self) -> Client:
        """Get Supabase client."""
        if self._supabase_client is None:
            self._supabase_client = get_supabase_client()
        return self._supabase_client

    def _execute(self, query: Any, action: str) -> list[dict[str, Any]]:
        """Execute a query and return its rows.

        Args:
            query: A built PostgREST request.
            action: Short description used in logs and error messages.

        Returns:
            list[dict]: Returned rows (empty when nothing matched).

        Raises:
            StorageFailureError: If the request fails.
        """
        try:
            response = query.execute()
        except Exception as e:
            logger.error("Storage failure while trying to %s: %s", action, e)
            raise StorageFailureError(f"Could not {action}") from e

        if response is None or not response.data:
            return []
        if isinstance(response.data, dict):
            return [response.data]
        return list(response.data)
