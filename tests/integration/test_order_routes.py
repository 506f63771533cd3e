"""Integration tests for order API routes."""

from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from storefront.api.deps import get_current_account
from storefront.api.middleware.error_handler import (
    AuthorizationError,
    InsufficientStockError,
    InvalidStateError,
    StorageFailureError,
)
from storefront.main import app
from storefront.models.order import OrderStatus
from storefront.services.order_service import ApprovalResult, get_order_service


@pytest.fixture
def mock_order_service() -> MagicMock:
    """Create mock order service and install it."""
    service = MagicMock()
    app.dependency_overrides[get_order_service] = lambda: service
    return service


@pytest.fixture
def login() -> Callable[[dict], None]:
    """Return a function that makes requests act as the given account."""

    def _login(account: dict) -> None:
        app.dependency_overrides[get_current_account] = lambda: account

    return _login


@pytest.fixture
def sample_order(customer_account: dict) -> dict:
    """Create sample order data."""
    product_id = str(uuid4())
    return {
        "id": str(uuid4()),
        "account_id": customer_account["id"],
        "order_number": "ORD-20261019-0042",
        "status": OrderStatus.PENDING,
        "total_amount": Decimal("30.00"),
        "admin_note": None,
        "items": [
            {
                "id": str(uuid4()),
                "product_id": product_id,
                "product_name": "Widget",
                "product_price": Decimal("10.00"),
                "quantity": 3,
                "subtotal": Decimal("30.00"),
            }
        ],
        "created_at": datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc),
        "updated_at": datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc),
        "approved_at": None,
        "discarded_at": None,
    }


class TestCreateOrder:
    """Tests for POST /api/v1/orders endpoint."""

    def test_create_order_success(
        self,
        client: TestClient,
        login: Any,
        mock_order_service: MagicMock,
        customer_account: dict,
        sample_order: dict,
    ) -> None:
        """Test placing an order returns 201 with the pending order."""
        login(customer_account)
        mock_order_service.create_order = AsyncMock(return_value=sample_order)

        response = client.post(
            "/api/v1/orders",
            json={"items": [{"product_id": sample_order["items"][0]["product_id"], "quantity": 3}]},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Order placed successfully! Please visit the store for pickup."
        assert data["order"]["status"] == "pending"
        assert Decimal(data["order"]["total_amount"]) == Decimal("30.00")
        assert data["order"]["order_number"] == "ORD-20261019-0042"
        account_arg, items_arg = mock_order_service.create_order.call_args[0]
        assert account_arg == customer_account
        assert items_arg[0].quantity == 3

    def test_create_order_empty_cart(
        self, client: TestClient, login: Any, mock_order_service: MagicMock, customer_account: dict
    ) -> None:
        """Test an empty item list is rejected by validation."""
        login(customer_account)
        mock_order_service.create_order = AsyncMock()

        response = client.post("/api/v1/orders", json={"items": []})

        assert response.status_code == 422
        mock_order_service.create_order.assert_not_called()

    def test_create_order_zero_quantity(
        self, client: TestClient, login: Any, mock_order_service: MagicMock, customer_account: dict
    ) -> None:
        """Test a quantity below one is rejected by validation."""
        login(customer_account)

        response = client.post(
            "/api/v1/orders",
            json={"items": [{"product_id": str(uuid4()), "quantity": 0}]},
        )

        assert response.status_code == 422

    def test_create_order_insufficient_stock(
        self, client: TestClient, login: Any, mock_order_service: MagicMock, customer_account: dict
    ) -> None:
        """Test insufficient stock maps to 409."""
        login(customer_account)
        mock_order_service.create_order = AsyncMock(
            side_effect=InsufficientStockError("Insufficient stock for Widget")
        )

        response = client.post(
            "/api/v1/orders",
            json={"items": [{"product_id": str(uuid4()), "quantity": 6}]},
        )

        assert response.status_code == 409
        data = response.json()
        assert data["error"] == "insufficient_stock"
        assert data["message"] == "Insufficient stock for Widget"

    def test_create_order_requires_auth(self, client: TestClient) -> None:
        """Test requests without a token are rejected."""
        response = client.post("/api/v1/orders", json={"items": [{"product_id": str(uuid4()), "quantity": 1}]})

        assert response.status_code == 401


class TestReadOrders:
    """Tests for GET /api/v1/orders endpoints."""

    def test_list_orders(
        self,
        client: TestClient,
        login: Any,
        mock_order_service: MagicMock,
        customer_account: dict,
        sample_order: dict,
    ) -> None:
        """Test listing the caller's orders."""
        login(customer_account)
        mock_order_service.list_orders = AsyncMock(return_value=[sample_order])

        response = client.get("/api/v1/orders")

        assert response.status_code == 200
        assert len(response.json()["items"]) == 1

    def test_get_foreign_order_forbidden(
        self, client: TestClient, login: Any, mock_order_service: MagicMock, customer_account: dict
    ) -> None:
        """Test 403 for another customer's order."""
        login(customer_account)
        mock_order_service.get_order = AsyncMock(side_effect=AuthorizationError("Not authorized to view this order"))

        response = client.get(f"/api/v1/orders/{uuid4()}")

        assert response.status_code == 403
        assert response.json()["error"] == "authorization_error"


class TestApproveOrder:
    """Tests for POST /api/v1/orders/{id}/approve endpoint."""

    def test_approve_success(
        self,
        client: TestClient,
        login: Any,
        mock_order_service: MagicMock,
        staff_account: dict,
        sample_order: dict,
    ) -> None:
        """Test approval returns the order and VIP progress."""
        login(staff_account)
        approved = {
            **sample_order,
            "status": OrderStatus.APPROVED,
            "approved_at": datetime(2026, 10, 20, 11, 0, tzinfo=timezone.utc),
            "admin_note": "Collected",
        }
        mock_order_service.approve_order = AsyncMock(
            return_value=ApprovalResult(order=approved, vip_approved_orders=10, vip_milestone_reached=True)
        )

        response = client.post(f"/api/v1/orders/{sample_order['id']}/approve", json={"note": "Collected"})

        assert response.status_code == 200
        data = response.json()
        assert data["order"]["status"] == "approved"
        assert data["order"]["admin_note"] == "Collected"
        assert data["vip_approved_orders"] == 10
        assert data["vip_milestone_reached"] is True
        assert mock_order_service.approve_order.call_args.kwargs["note"] == "Collected"

    def test_approve_without_body(
        self,
        client: TestClient,
        login: Any,
        mock_order_service: MagicMock,
        staff_account: dict,
        sample_order: dict,
    ) -> None:
        """Test the note is optional."""
        login(staff_account)
        mock_order_service.approve_order = AsyncMock(
            return_value=ApprovalResult(order={**sample_order, "status": OrderStatus.APPROVED})
        )

        response = client.post(f"/api/v1/orders/{sample_order['id']}/approve")

        assert response.status_code == 200
        assert mock_order_service.approve_order.call_args.kwargs["note"] is None
        assert response.json()["vip_approved_orders"] is None

    def test_customer_cannot_approve(
        self, client: TestClient, login: Any, mock_order_service: MagicMock, customer_account: dict
    ) -> None:
        """Test customers get 403 before the service is reached."""
        login(customer_account)
        mock_order_service.approve_order = AsyncMock()

        response = client.post(f"/api/v1/orders/{uuid4()}/approve")

        assert response.status_code == 403
        mock_order_service.approve_order.assert_not_called()

    def test_approve_processed_order(
        self, client: TestClient, login: Any, mock_order_service: MagicMock, staff_account: dict
    ) -> None:
        """Test approving a processed order maps to 409."""
        login(staff_account)
        mock_order_service.approve_order = AsyncMock(side_effect=InvalidStateError())

        response = client.post(f"/api/v1/orders/{uuid4()}/approve")

        assert response.status_code == 409
        assert response.json()["message"] == "Order already processed"

    def test_approve_storage_failure(
        self, client: TestClient, login: Any, mock_order_service: MagicMock, staff_account: dict
    ) -> None:
        """Test a failed approval maps to 503."""
        login(staff_account)
        mock_order_service.approve_order = AsyncMock(
            side_effect=StorageFailureError("Could not approve order; no changes were kept")
        )

        response = client.post(f"/api/v1/orders/{uuid4()}/approve")

        assert response.status_code == 503
        assert response.json()["error"] == "storage_failure"


class TestDiscardOrder:
    """Tests for POST /api/v1/orders/{id}/discard endpoint."""

    def test_discard_success(
        self,
        client: TestClient,
        login: Any,
        mock_order_service: MagicMock,
        staff_account: dict,
        sample_order: dict,
    ) -> None:
        """Test discarding returns the discarded order."""
        login(staff_account)
        mock_order_service.discard_order = AsyncMock(
            return_value={
                **sample_order,
                "status": OrderStatus.DISCARDED,
                "discarded_at": datetime(2026, 10, 20, 11, 0, tzinfo=timezone.utc),
            }
        )

        response = client.post(f"/api/v1/orders/{sample_order['id']}/discard")

        assert response.status_code == 200
        data = response.json()
        assert data["order"]["status"] == "discarded"
        assert data["message"] == "Order discarded successfully"
        assert data["vip_milestone_reached"] is False

    def test_discard_processed_order(
        self, client: TestClient, login: Any, mock_order_service: MagicMock, staff_account: dict
    ) -> None:
        """Test discarding a processed order maps to 409."""
        login(staff_account)
        mock_order_service.discard_order = AsyncMock(side_effect=InvalidStateError())

        response = client.post(f"/api/v1/orders/{uuid4()}/discard")

        assert response.status_code == 409
        assert response.json()["error"] == "invalid_state"
