"""Role checks applied at every service entry point."""

from storefront.api.middleware.error_handler import AuthenticationError, AuthorizationError
from storefront.models.account import Account, AccountRole


def require_role(account: Account | None, role: AccountRole, message: str) -> Account:
    """Ensure ``account`` exists and carries ``role``.

    Args:
        account: The acting account.
        role: Role the operation requires.
        message: Error message when the role does not match.

    Returns:
        Account: The same account, for chaining.

    Raises:
        AuthenticationError: If there is no account.
        AuthorizationError: If the account has another role.
    """
    if account is None:
        raise AuthenticationError()
    if AccountRole(account["role"]) is not role:
        raise AuthorizationError(message)
    return account


def require_staff(account: Account | None) -> Account:
    return require_role(account, AccountRole.STAFF, "Staff access required")


def require_customer(account: Account | None, message: str = "Customer account required") -> Account:
    return require_role(account, AccountRole.CUSTOMER, message)


def is_staff(account: Account) -> bool:
    return AccountRole(account["role"]) is AccountRole.STAFF
