"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("SUPABASE_SIGNING_KEY_JWK", "test-signing-key-jwk")


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from storefront.core.config import get_settings

    # Clear the cache to ensure fresh settings
    get_settings.cache_clear()

    settings = get_settings()
    yield settings

    # Clean up cache after tests
    get_settings.cache_clear()


@pytest.fixture
def mock_supabase_client() -> Generator[MagicMock, None, None]:
    """Provide a mocked Supabase client.

    Yields:
        MagicMock: Mocked Supabase client for testing.
    """
    mock_client = MagicMock()

    # Configure default mock responses
    mock_response = MagicMock()
    mock_response.data = []
    mock_client.table.return_value.select.return_value.limit.return_value.execute.return_value = (
        mock_response
    )

    with patch("storefront.core.supabase.get_supabase_client", return_value=mock_client):
        yield mock_client


@pytest.fixture
def client(mock_supabase_client: MagicMock) -> Generator[TestClient, None, None]:
    """Provide a test client for the FastAPI application.

    Dependency overrides installed by a test are removed afterwards.

    Args:
        mock_supabase_client: Mocked Supabase client fixture.

    Yields:
        TestClient: FastAPI test client.
    """
    from storefront.main import app

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def make_account(role: str = "customer", **overrides: Any) -> dict[str, Any]:
    """Build an account row as the account store returns it."""
    from storefront.models.account import AccountRole

    account = {
        "id": str(uuid4()),
        "user_id": str(uuid4()),
        "email": f"{role}@example.com",
        "name": f"Test {role.title()}",
        "role": AccountRole(role),
        "vip_number": None,
        "vip_approved_orders": 0,
        "created_at": "2026-01-05T10:00:00+00:00",
        "updated_at": "2026-01-05T10:00:00+00:00",
    }
    account.update(overrides)
    return account


@pytest.fixture
def customer_account() -> dict[str, Any]:
    """Create a customer account."""
    return make_account("customer")


@pytest.fixture
def staff_account() -> dict[str, Any]:
    """Create a staff account."""
    return make_account("staff")


@pytest.fixture
def account_factory() -> Any:
    """Provide the account row builder for tests that need several accounts."""
    return make_account
