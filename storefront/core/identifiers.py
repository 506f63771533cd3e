"""Human-readable identifier generation for orders and VIP memberships."""

import logging
import secrets
from datetime import datetime, timezone

from tenacity import AsyncRetrying, before_sleep_log, retry_if_exception_type, stop_after_attempt

logger = logging.getLogger(__name__)

ORDER_NUMBER_PREFIX = "ORD"
VIP_NUMBER_PREFIX = "VIP"


class IdentifierTakenError(Exception):
    """A generated candidate is already assigned."""


def allocation_retrying(max_attempts: int) -> AsyncRetrying:
    """Retry policy for finding an unused identifier.

    Each attempt generates a fresh candidate; only ``IdentifierTakenError``
    triggers another one and it is re-raised when attempts run out.
    """
    return AsyncRetrying(
        retry=retry_if_exception_type(IdentifierTakenError),
        stop=stop_after_attempt(max_attempts),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


def generate_order_number(now: datetime | None = None) -> str:
    """Generate an order number such as ``ORD-20261019-0427``.

    The date part comes from the creation day (UTC) and the suffix is a
    random four digit number.
    """
    now = now or datetime.now(timezone.utc)
    suffix = secrets.randbelow(10_000)
    return f"{ORDER_NUMBER_PREFIX}-{now:%Y%m%d}-{suffix:04d}"


def generate_vip_number() -> str:
    """Generate a candidate VIP membership number such as ``VIP-00417263``."""
    return f"{VIP_NUMBER_PREFIX}-{secrets.randbelow(100_000_000):08d}"
