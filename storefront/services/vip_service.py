"""VIP Circle enrollment and progress."""

import logging
from dataclasses import dataclass

from storefront.api.middleware.error_handler import AlreadyEnrolledError, StorageFailureError
from storefront.core.config import Settings, get_settings
from storefront.core.identifiers import IdentifierTakenError, allocation_retrying, generate_vip_number
from storefront.models.account import Account
from storefront.services.access import require_customer
from storefront.services.account_store import AccountStore

logger = logging.getLogger(__name__)


@dataclass
class VipStatus:
    """VIP progress for one account."""

    enrolled: bool
    vip_number: str | None
    approved_orders: int
    orders_until_reward: int | None
    reward_milestone_reached: bool


class VipService:
    """Service for VIP Circle membership."""

    def __init__(self, accounts: AccountStore | None = None, settings: Settings | None = None) -> None:
        self.accounts = accounts or AccountStore()
        self.settings = settings or get_settings()

    async def enroll(self, account: Account) -> Account:
        """Give an account a unique VIP membership number.

        Candidate numbers are generated until one is not yet assigned,
        up to ``vip_number_max_attempts`` tries.

        Args:
            account: The enrolling customer account.

        Returns:
            Account: The account with its new VIP number.

        Raises:
            AuthorizationError: If the account is a staff account.
            AlreadyEnrolledError: If the account already holds a number.
            StorageFailureError: If no unused number was found.
        """
        require_customer(account, "Only customer accounts can join the VIP Circle")
        if account.get("vip_number"):
            raise AlreadyEnrolledError()

        attempts = self.settings.vip_number_max_attempts
        try:
            async for attempt in allocation_retrying(attempts):
                with attempt:
                    candidate = generate_vip_number()
                    if await self.accounts.vip_number_exists(candidate):
                        raise IdentifierTakenError(f"VIP number {candidate} already assigned")

                    enrolled = await self.accounts.set_vip_number(account["id"], candidate)
                    if enrolled is None:
                        # Another request enrolled this account first.
                        raise AlreadyEnrolledError()

                    logger.info("Account %s enrolled in VIP Circle as %s", account["id"], candidate)
                    return enrolled
        except IdentifierTakenError as e:
            raise StorageFailureError(f"Could not allocate a unique VIP number after {attempts} attempts") from e

    def status(self, account: Account) -> VipStatus:
        """Summarize VIP progress for an account."""
        interval = self.settings.vip_reward_interval
        count = int(account.get("vip_approved_orders") or 0)
        vip_number = account.get("vip_number")

        if not vip_number:
            return VipStatus(
                enrolled=False,
                vip_number=None,
                approved_orders=count,
                orders_until_reward=None,
                reward_milestone_reached=False,
            )

        return VipStatus(
            enrolled=True,
            vip_number=vip_number,
            approved_orders=count,
            orders_until_reward=interval - (count % interval),
            reward_milestone_reached=count > 0 and count % interval == 0,
        )


def get_vip_service() -> VipService:
    """Get VIP service instance."""
    return VipService()
