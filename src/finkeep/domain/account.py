"""Account domain service."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from finkeep.database.base import Database
from finkeep.domain.entities import Account as AccountEntity, AccountGroup
from finkeep.domain.errors import ConflictError, ValidationError, duplicate_account_name
from finkeep.domain.ownership import OwnershipGuard
from finkeep.logging_setup import get_logger
from finkeep.utils.date_parser import to_naive_utc, utcnow
from finkeep.utils.precision import quantize_amount

logger = get_logger(__name__)


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db
        self.guard = OwnershipGuard(db)

    def create_account(
        self,
        owner_id: str,
        name: str,
        account_group: AccountGroup,
        initial_balance: Decimal = Decimal("0"),
        balance_as_of: Optional[datetime] = None,
    ) -> int:
        """Create a new account.

        Args:
            owner_id: Owning user
            name: Account name, unique per owner
            account_group: Group deciding the balance sign rules
            initial_balance: Opening balance
            balance_as_of: Instant the opening balance is correct at. Only
                transactions dated on or after it move the balance. Defaults
                to now.

        Returns:
            Account ID

        Raises:
            ConflictError: If the owner already has an account with this name
        """
        owner_id = self.guard.require_identity(owner_id)
        name = name.strip()
        if not name:
            raise ValidationError("Account name cannot be empty")

        for acc in self.db.list_accounts(owner_id):
            if acc.name == name:
                raise ConflictError(duplicate_account_name(name))

        as_of = to_naive_utc(balance_as_of) if balance_as_of is not None else utcnow()
        account_id = self.db.create_account(
            owner_id=owner_id,
            name=name,
            account_group=AccountGroup(account_group),
            current_balance=quantize_amount(initial_balance),
            balance_as_of=as_of,
        )
        logger.info("Created account %s (%s) for %s", account_id, name, owner_id)
        return account_id

    def get_account(self, owner_id: str, account_id: int) -> AccountEntity:
        """Get an account the caller owns.

        Raises:
            ForbiddenError: If the account is missing or owned by someone else
        """
        owner_id = self.guard.require_identity(owner_id)
        return self.guard.verify_account(owner_id, account_id)

    def list_accounts(self, owner_id: str) -> list[AccountEntity]:
        """List the caller's accounts."""
        owner_id = self.guard.require_identity(owner_id)
        return self.db.list_accounts(owner_id)

    def set_manual_balance(
        self,
        owner_id: str,
        account_id: int,
        balance: Decimal,
        at: Optional[datetime] = None,
    ) -> AccountEntity:
        """Overwrite the balance with a manually checked value.

        This also moves the checkpoint: transactions dated before ``at`` no
        longer affect the balance.
        """
        owner_id = self.guard.require_identity(owner_id)
        at = to_naive_utc(at) if at is not None else utcnow()
        with self.db.unit_of_work():
            self.guard.verify_account(owner_id, account_id, for_update=True)
            self.db.update_account_balance(
                account_id,
                quantize_amount(balance),
                balance_updated_at=at,
                manual_balance_updated_at=at,
            )
        logger.info("Manual balance of account %s set to %s as of %s", account_id, balance, at)
        return self.guard.verify_account(owner_id, account_id)
