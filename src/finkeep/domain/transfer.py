"""Transfer pairing: the two mirrored legs of a move between accounts."""

from typing import Any, Optional

from finkeep.domain.balance import BalanceEngine
from finkeep.domain.effects import MutationContext
from finkeep.domain.entities import AccountGroup, Transaction
from finkeep.logging_setup import get_logger

logger = get_logger(__name__)

# Fields kept identical on both legs after creation.
MIRRORED_FIELDS = ("description", "category_id", "alias_id", "payment_method")


class TransferPairing:
    """Create, move and remove the counter leg of a transfer.

    Both legs reference each other through ``linked_transaction_id`` and carry
    opposite transaction types for the same amount and date.
    """

    def __init__(self, balance: BalanceEngine):
        self.balance = balance

    def create_pair(self, ctx: MutationContext, primary: Transaction, counter_account_id: int) -> Transaction:
        """Insert the counter leg for ``primary`` and book it on its account."""
        db = ctx.db
        counter = ctx.counter_account or db.get_account(counter_account_id)
        leg_id = db.create_transaction(
            {
                "owner_id": primary.owner_id,
                "account_id": counter_account_id,
                "category_id": primary.category_id,
                "alias_id": primary.alias_id,
                "transaction_type": primary.transaction_type.flipped(),
                "amount": primary.amount,
                "transaction_datetime": primary.transaction_datetime,
                "description": primary.description,
                "location": primary.location,
                "payment_method": primary.payment_method,
                "is_investment": counter is not None and counter.account_group is AccountGroup.INVESTMENT,
                "is_transfer": True,
                "linked_transaction_id": primary.id,
            }
        )
        db.update_transaction(primary.id, {"is_transfer": True, "linked_transaction_id": leg_id})
        leg = db.get_transaction(leg_id)
        ctx.ledger.record(
            self.balance.apply(counter_account_id, leg.amount, leg.transaction_type, leg.transaction_datetime)
        )
        ctx.linked = leg
        logger.debug("Transfer %s paired with %s on account %s", primary.id, leg_id, counter_account_id)
        return leg

    def move_counter_leg(
        self, ctx: MutationContext, transaction: Transaction, new_counter_account_id: int
    ) -> Optional[Transaction]:
        """Re-book the counter leg on another account."""
        leg = self.linked_leg(ctx, transaction)
        if leg is None or leg.account_id == new_counter_account_id:
            return leg
        ctx.ledger.record(
            self.balance.apply(
                leg.account_id,
                leg.amount,
                leg.transaction_type,
                leg.transaction_datetime,
                reverse=True,
                transaction_id=leg.id,
            )
        )
        ctx.ledger.record(
            self.balance.apply(new_counter_account_id, leg.amount, leg.transaction_type, leg.transaction_datetime)
        )
        counter = ctx.counter_account or ctx.db.get_account(new_counter_account_id)
        ctx.db.update_transaction(
            leg.id,
            {
                "account_id": new_counter_account_id,
                "is_investment": counter is not None and counter.account_group is AccountGroup.INVESTMENT,
            },
        )
        ctx.linked = ctx.db.get_transaction(leg.id)
        return ctx.linked

    def mirror_fields(
        self, ctx: MutationContext, transaction: Transaction, changes: dict[str, Any]
    ) -> Optional[Transaction]:
        """Copy cosmetic changes of one leg onto the other."""
        mirrored = {k: v for k, v in changes.items() if k in MIRRORED_FIELDS}
        leg = self.linked_leg(ctx, transaction)
        if leg is None or not mirrored:
            return leg
        ctx.db.update_transaction(leg.id, mirrored)
        ctx.linked = ctx.db.get_transaction(leg.id)
        return ctx.linked

    def remove_pair(self, ctx: MutationContext, transaction: Transaction) -> Optional[Transaction]:
        """Reverse the counter leg's balance and return it for deletion.

        A counter leg that is already gone is ignored.
        """
        leg = self.linked_leg(ctx, transaction)
        if leg is None:
            return None
        ctx.ledger.record(
            self.balance.apply(
                leg.account_id,
                leg.amount,
                leg.transaction_type,
                leg.transaction_datetime,
                reverse=True,
                transaction_id=leg.id,
            )
        )
        return leg

    def linked_leg(self, ctx: MutationContext, transaction: Transaction) -> Optional[Transaction]:
        if transaction.linked_transaction_id is None:
            return None
        if ctx.linked is not None and ctx.linked.id == transaction.linked_transaction_id:
            return ctx.linked
        ctx.linked = ctx.db.get_transaction(transaction.linked_transaction_id)
        return ctx.linked
