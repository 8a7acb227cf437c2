"""Balance adjustment engine."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from finkeep.database.base import Database
from finkeep.domain.effects import BalanceDelta
from finkeep.domain.entities import AccountGroup, TransactionType
from finkeep.domain.errors import NotFoundError, account_not_found
from finkeep.logging_setup import get_logger
from finkeep.utils.date_parser import to_naive_utc
from finkeep.utils.precision import quantize_amount

logger = get_logger(__name__)

# Groups where a DEBIT grows the balance (money owed).
_LIABILITY_GROUPS = frozenset({AccountGroup.POSTPAID, AccountGroup.LOAN})


def balance_change(
    account_group: AccountGroup,
    amount: Decimal,
    direction: TransactionType,
    reverse: bool = False,
) -> Decimal:
    """Signed change a transaction makes to an account of ``account_group``.

    POSTPAID and LOAN accounts track what is owed, so a DEBIT increases them.
    PREPAID and INVESTMENT accounts track what is held, so a DEBIT decreases
    them. Reversing flips the direction.
    """
    if reverse:
        direction = direction.flipped()
    magnitude = quantize_amount(amount)
    debit_sign = 1 if account_group in _LIABILITY_GROUPS else -1
    if direction is TransactionType.DEBIT:
        return magnitude * debit_sign
    return magnitude * -debit_sign


class BalanceEngine:
    """Apply and reverse transaction amounts on account balances."""

    def __init__(self, db: Database):
        self.db = db

    def apply(
        self,
        account_id: int,
        amount: Decimal,
        direction: TransactionType,
        effective_at: datetime,
        reverse: bool = False,
        transaction_id: Optional[int] = None,
    ) -> BalanceDelta:
        """Adjust one account's balance.

        Transactions dated before the account's manual balance checkpoint are
        already reflected in the manually entered balance and leave it alone.

        A forward change stamps ``balance_updated_at`` with ``effective_at``. A
        reversal of ``transaction_id`` moves it back to the latest remaining
        transaction on the account, or to the checkpoint when none is left.

        Raises:
            NotFoundError: If the account does not exist
        """
        account = self.db.get_account(account_id, for_update=True)
        if account is None:
            raise NotFoundError(account_not_found(account_id))

        effective_at = to_naive_utc(effective_at)
        if effective_at < account.manual_balance_updated_at:
            logger.debug(
                "Balance of account %s untouched: %s predates checkpoint %s",
                account_id,
                effective_at,
                account.manual_balance_updated_at,
            )
            return BalanceDelta(
                account_id=account_id,
                change=Decimal("0.00"),
                previous_balance=account.current_balance,
                new_balance=account.current_balance,
                previous_updated_at=account.balance_updated_at,
                effective_at=effective_at,
                reverse=reverse,
                skipped=True,
            )

        change = balance_change(account.account_group, amount, direction, reverse=reverse)
        new_balance = quantize_amount(account.current_balance + change)
        if reverse:
            exclude = (transaction_id,) if transaction_id is not None else ()
            latest = self.db.latest_transaction_datetime(account_id, account.manual_balance_updated_at, exclude)
            updated_at = latest or account.manual_balance_updated_at
        else:
            updated_at = effective_at
        self.db.update_account_balance(account_id, new_balance, updated_at)
        logger.debug("Balance of account %s: %s -> %s", account_id, account.current_balance, new_balance)
        return BalanceDelta(
            account_id=account_id,
            change=change,
            previous_balance=account.current_balance,
            new_balance=new_balance,
            previous_updated_at=account.balance_updated_at,
            effective_at=effective_at,
            reverse=reverse,
        )
