"""Sales analytics schemas."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class MonthlySalesSchema(BaseModel):
    """Totals for one calendar month."""

    model_config = ConfigDict(from_attributes=True)

    month: str = Field(description="Month as YYYY-MM")
    approved_amount: Decimal = Field(description="Sum of approved order totals")
    discarded_amount: Decimal = Field(description="Sum of discarded order totals")
    approved_count: int = Field(description="Number of approved orders")
    discarded_count: int = Field(description="Number of discarded orders")


class SalesAnalyticsResponse(BaseModel):
    """Schema for the monthly sales summary."""

    model_config = ConfigDict(from_attributes=True)

    data: list[MonthlySalesSchema] = Field(description="Monthly totals, oldest first")
