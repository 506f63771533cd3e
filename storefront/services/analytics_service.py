"""Monthly sales summary over approved and discarded orders."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from storefront.models.account import Account
from storefront.models.order import OrderStatus
from storefront.services.access import require_staff
from storefront.services.order_ledger import OrderLedger


@dataclass
class MonthlySales:
    """Totals for one calendar month (``YYYY-MM``)."""

    month: str
    approved_amount: Decimal = field(default_factory=lambda: Decimal("0.00"))
    discarded_amount: Decimal = field(default_factory=lambda: Decimal("0.00"))
    approved_count: int = 0
    discarded_count: int = 0


def _month_start(year: int, month: int) -> datetime:
    return datetime(year, month, 1, tzinfo=timezone.utc)


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _parse_timestamp(value: datetime | str) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


class AnalyticsService:
    """Read-only reporting over the order ledger."""

    def __init__(self, ledger: OrderLedger | None = None) -> None:
        self.ledger = ledger or OrderLedger()

    async def monthly_sales(
        self,
        actor: Account,
        months: int = 12,
        now: datetime | None = None,
    ) -> list[MonthlySales]:
        """Summarize the last ``months`` calendar months, oldest first.

        Months without orders are included with zero totals. Pending
        orders are not counted.
        """
        require_staff(actor)
        now = now or datetime.now(timezone.utc)
        start_year, start_month = _shift_month(now.year, now.month, -(months - 1))

        buckets: dict[str, MonthlySales] = {}
        for offset in range(months):
            year, month = _shift_month(start_year, start_month, offset)
            key = f"{year:04d}-{month:02d}"
            buckets[key] = MonthlySales(month=key)

        orders = await self.ledger.list_orders_since(_month_start(start_year, start_month))
        for order in orders:
            key = f"{_parse_timestamp(order['created_at']):%Y-%m}"
            bucket = buckets.get(key)
            if bucket is None:
                continue
            if order["status"] == OrderStatus.APPROVED:
                bucket.approved_amount += order["total_amount"]
                bucket.approved_count += 1
            elif order["status"] == OrderStatus.DISCARDED:
                bucket.discarded_amount += order["total_amount"]
                bucket.discarded_count += 1

        return list(buckets.values())


def get_analytics_service() -> AnalyticsService:
    """Get analytics service instance."""
    return AnalyticsService()
