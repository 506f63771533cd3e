"""Account and VIP Circle Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from storefront.models.account import AccountRole


class AccountResponse(BaseModel):
    """Schema for account API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Account ID")
    email: str | None = Field(default=None, description="Email address")
    name: str | None = Field(default=None, description="Display name")
    role: AccountRole = Field(description="Account role")
    vip_number: str | None = Field(default=None, description="VIP Circle number")
    vip_approved_orders: int = Field(default=0, ge=0, description="Approved orders counted toward VIP rewards")
    created_at: datetime | None = Field(default=None, description="Creation timestamp")


class CustomerListResponse(BaseModel):
    """Schema for the staff customer list."""

    model_config = ConfigDict(from_attributes=True)

    customers: list[AccountResponse] = Field(description="Customer accounts")


class VipEnrollResponse(BaseModel):
    """Schema for VIP enrollment response."""

    model_config = ConfigDict(from_attributes=True)

    vip_number: str = Field(description="Assigned VIP Circle number")
    message: str = Field(description="Confirmation message")


class VipStatusResponse(BaseModel):
    """Schema for VIP progress."""

    model_config = ConfigDict(from_attributes=True)

    enrolled: bool = Field(description="Whether the account is a member")
    vip_number: str | None = Field(default=None, description="VIP Circle number")
    approved_orders: int = Field(ge=0, description="Approved orders counted so far")
    orders_until_reward: int | None = Field(default=None, description="Approvals left until the next reward")
    reward_milestone_reached: bool = Field(description="Whether the counter sits on a reward milestone")
