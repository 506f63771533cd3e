"""Account model type definitions for database operations."""

from datetime import datetime
from enum import Enum
from typing import TypedDict
from uuid import UUID


class AccountRole(str, Enum):
    """Account role values.

    Fixed when the account is created; customer and staff are exclusive.
    """

    CUSTOMER = "customer"
    STAFF = "staff"


class Account(TypedDict):
    """Account table row representation.

    Represents a storefront account stored in the accounts table.
    """

    id: UUID
    user_id: UUID
    email: str | None
    name: str | None
    role: AccountRole
    vip_number: str | None
    vip_approved_orders: int
    created_at: datetime
    updated_at: datetime
