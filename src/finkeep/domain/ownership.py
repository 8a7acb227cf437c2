"""Ownership checks shared by every mutation."""

from typing import Optional

from finkeep.database.base import Database
from finkeep.domain.entities import Account, Transaction
from finkeep.domain.errors import (
    ForbiddenError,
    UnauthenticatedError,
    account_access_denied,
    not_authenticated,
    transaction_access_denied,
)


class OwnershipGuard:
    """Refuse access to accounts and transactions the caller does not own.

    A missing row and a row owned by someone else produce the same
    ``ForbiddenError`` so callers cannot probe for other users' IDs.
    """

    def __init__(self, db: Database):
        self.db = db

    def require_identity(self, owner_id: Optional[str]) -> str:
        """Return the identity, or raise if none was supplied."""
        if owner_id is None or not str(owner_id).strip():
            raise UnauthenticatedError(not_authenticated())
        return owner_id

    def verify_account(self, owner_id: str, account_id: int, for_update: bool = False) -> Account:
        account = self.db.get_account(account_id, for_update=for_update)
        if account is None or account.owner_id != owner_id:
            raise ForbiddenError(account_access_denied(account_id))
        return account

    def verify_transaction(self, owner_id: str, transaction_id: int) -> Transaction:
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None or transaction.owner_id != owner_id:
            raise ForbiddenError(transaction_access_denied(transaction_id))
        return transaction
