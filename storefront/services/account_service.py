"""Account lookups for the API layer."""

from uuid import UUID

from storefront.models.account import Account
from storefront.services.access import require_staff
from storefront.services.account_store import AccountStore


class AccountService:
    """Service for resolving and listing accounts."""

    def __init__(self, accounts: AccountStore | None = None) -> None:
        self.accounts = accounts or AccountStore()

    async def get_account_for_user(self, user_id: UUID) -> Account | None:
        """Get the storefront account of an authenticated user."""
        return await self.accounts.get_account_by_user_id(user_id)

    async def list_customers(self, actor: Account) -> list[Account]:
        """List customer accounts (staff only)."""
        require_staff(actor)
        return await self.accounts.list_customers()


def get_account_service() -> AccountService:
    """Get account service instance."""
    return AccountService()
