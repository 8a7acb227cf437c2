"""Utility for resolving account names to IDs."""

from finkeep.domain.account import AccountService
from finkeep.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, owner_id: str, account: str | int) -> int:
    """Resolve one of the owner's accounts by name or ID.

    Args:
        account_service: AccountService instance
        owner_id: Owner whose accounts are searched
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        ForbiddenError: If an ID is given that the owner cannot use
        NotFoundError: If no account has the given name
    """
    if isinstance(account, int):
        return account_service.get_account(owner_id, account).id

    # Try to parse as integer (handles string IDs like "1")
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None
    if account_id is not None:
        return account_service.get_account(owner_id, account_id).id

    for acc in account_service.list_accounts(owner_id):
        if acc.name == account:
            return acc.id

    raise NotFoundError(f"Account '{account}' not found")
