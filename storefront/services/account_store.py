"""Account store: identity, role and VIP Circle fields."""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from storefront.models.account import Account, AccountRole
from storefront.services.store_base import SupabaseStore

ACCOUNTS_TABLE = "accounts"


def _to_account(row: dict[str, Any]) -> Account:
    account = dict(row)
    account["role"] = AccountRole(row["role"])
    account["vip_approved_orders"] = int(row.get("vip_approved_orders") or 0)
    return account


class AccountStore(SupabaseStore):
    """Data access for the accounts table."""

    async def get_account(self, account_id: UUID | str) -> Account | None:
        """Get an account by its ID."""
        rows = self._execute(
            self.supabase.table(ACCOUNTS_TABLE).select("*").eq("id", str(account_id)),
            "load account",
        )
        return _to_account(rows[0]) if rows else None

    async def get_account_by_user_id(self, user_id: UUID | str) -> Account | None:
        """Get the account linked to an auth user."""
        rows = self._execute(
            self.supabase.table(ACCOUNTS_TABLE).select("*").eq("user_id", str(user_id)),
            "load account",
        )
        return _to_account(rows[0]) if rows else None

    async def list_customers(self) -> list[Account]:
        """List customer accounts, newest first."""
        rows = self._execute(
            self.supabase.table(ACCOUNTS_TABLE)
            .select("*")
            .eq("role", AccountRole.CUSTOMER.value)
            .order("created_at", desc=True),
            "list customers",
        )
        return [_to_account(row) for row in rows]

    async def vip_number_exists(self, vip_number: str) -> bool:
        """Check whether a VIP number is already assigned."""
        rows = self._execute(
            self.supabase.table(ACCOUNTS_TABLE).select("id").eq("vip_number", vip_number).limit(1),
            "look up VIP number",
        )
        return bool(rows)

    async def set_vip_number(self, account_id: UUID | str, vip_number: str) -> Account | None:
        """Assign a VIP number to an account that has none.

        The update only matches while ``vip_number`` is still null, so an
        assigned number is never overwritten.

        Returns:
            Account or None if the account already holds a number.
        """
        rows = self._execute(
            self.supabase.table(ACCOUNTS_TABLE)
            .update({
                "vip_number": vip_number,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            })
            .eq("id", str(account_id))
            .is_("vip_number", "null"),
            "assign VIP number",
        )
        return _to_account(rows[0]) if rows else None
