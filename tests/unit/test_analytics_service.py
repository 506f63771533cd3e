"""Unit tests for AnalyticsService."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import pytest

from storefront.api.middleware.error_handler import AuthorizationError
from storefront.models.order import OrderStatus
from storefront.services.analytics_service import AnalyticsService

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def analytics_service(ledger: Any) -> AnalyticsService:
    """Create AnalyticsService over the in-memory ledger."""
    return AnalyticsService(ledger=ledger)


class TestMonthlySales:
    """Tests for monthly_sales method."""

    @pytest.mark.asyncio
    async def test_covers_twelve_months_oldest_first(
        self, analytics_service: AnalyticsService, staff_account: dict
    ) -> None:
        """Test every month is present even without orders."""
        summary = await analytics_service.monthly_sales(staff_account, now=NOW)

        assert len(summary) == 12
        assert summary[0].month == "2025-04"
        assert summary[-1].month == "2026-03"
        assert all(m.approved_amount == Decimal("0.00") for m in summary)

    @pytest.mark.asyncio
    async def test_totals_by_status(
        self, analytics_service: AnalyticsService, ledger: Any, staff_account: dict
    ) -> None:
        """Test approved and discarded totals are summed; pending is ignored."""
        ledger.add(status=OrderStatus.APPROVED, total_amount="30.00", created_at="2026-03-02T09:00:00+00:00")
        ledger.add(status=OrderStatus.APPROVED, total_amount="12.50", created_at="2026-03-10T09:00:00+00:00")
        ledger.add(status=OrderStatus.DISCARDED, total_amount="8.00", created_at="2026-02-20T09:00:00+00:00")
        ledger.add(status=OrderStatus.PENDING, total_amount="99.00", created_at="2026-03-11T09:00:00+00:00")
        # Outside the window
        ledger.add(status=OrderStatus.APPROVED, total_amount="50.00", created_at="2025-01-11T09:00:00+00:00")

        summary = {m.month: m for m in await analytics_service.monthly_sales(staff_account, now=NOW)}

        assert summary["2026-03"].approved_amount == Decimal("42.50")
        assert summary["2026-03"].approved_count == 2
        assert summary["2026-03"].discarded_count == 0
        assert summary["2026-02"].discarded_amount == Decimal("8.00")
        assert summary["2026-02"].discarded_count == 1
        assert sum(m.approved_count for m in summary.values()) == 2

    @pytest.mark.asyncio
    async def test_custom_window(self, analytics_service: AnalyticsService, staff_account: dict) -> None:
        """Test a shorter window crosses the year boundary correctly."""
        summary = await analytics_service.monthly_sales(staff_account, months=4, now=NOW)

        assert [m.month for m in summary] == ["2025-12", "2026-01", "2026-02", "2026-03"]

    @pytest.mark.asyncio
    async def test_customer_cannot_view(self, analytics_service: AnalyticsService, customer_account: dict) -> None:
        """Test analytics are staff only."""
        with pytest.raises(AuthorizationError):
            await analytics_service.monthly_sales(customer_account, now=NOW)
