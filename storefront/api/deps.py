"""FastAPI dependency injection functions."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from storefront.api.middleware.auth import AuthError, AuthErrorCode, decode_jwt
from storefront.api.middleware.error_handler import AuthorizationError
from storefront.models.account import Account
from storefront.schemas.auth import UserContext
from storefront.services.access import require_staff
from storefront.services.account_service import AccountService, get_account_service


async def get_current_user(
    authorization: Annotated[str, Header(description="Bearer token")] = "",
) -> UserContext:
    """Extract and validate the current user from the Authorization header.

    Args:
        authorization: The Authorization header value (Bearer token).

    Returns:
        UserContext: The authenticated user's context.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired.
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format. Expected: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = decode_jwt(parts[1])
        return payload.to_user_context()

    except AuthError as e:
        if e.code == AuthErrorCode.TOKEN_EXPIRED:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
                headers={"WWW-Authenticate": "Bearer"},
            ) from e

        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


CurrentUser = Annotated[UserContext, Depends(get_current_user)]


async def get_current_account(
    user: CurrentUser,
    account_service: AccountService = Depends(get_account_service),
) -> Account:
    """Resolve the storefront account of the authenticated user.

    Raises:
        AuthorizationError: If the user has no storefront account.
    """
    account = await account_service.get_account_for_user(user.user_id)
    if account is None:
        raise AuthorizationError("No storefront account for this user")
    return account


CurrentAccount = Annotated[Account, Depends(get_current_account)]


async def get_staff_account(account: CurrentAccount) -> Account:
    """Require the current account to be staff."""
    return require_staff(account)


StaffAccount = Annotated[Account, Depends(get_staff_account)]
