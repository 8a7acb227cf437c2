"""Investment holdings aggregation with weighted-average cost basis.

The arithmetic lives in the pure ``apply_*``/``reverse_*`` functions, which
work on a ``Position`` and never touch storage. ``HoldingsAggregator`` loads
the stored holding, runs one of them and writes the result back.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from finkeep.database.base import Database
from finkeep.domain.effects import HoldingDelta
from finkeep.domain.entities import InvestmentAction, InvestmentHolding
from finkeep.domain.errors import (
    HoldingNotFoundError,
    InsufficientQuantityError,
    ValidationError,
    holding_not_found,
    insufficient_quantity,
)
from finkeep.logging_setup import get_logger
from finkeep.utils.precision import ZERO, quantize_amount, quantize_price, quantize_quantity

logger = get_logger(__name__)


@dataclass(frozen=True)
class Position:
    """Aggregate state of one holding."""

    quantity: Decimal
    average_price: Decimal
    invested: Decimal
    realized: Decimal = Decimal("0.00")

    @classmethod
    def of(cls, holding: InvestmentHolding) -> "Position":
        return cls(
            quantity=holding.total_quantity,
            average_price=holding.average_buy_price,
            invested=holding.total_invested_amount,
            realized=holding.realized_gain_loss,
        )


def _average(invested: Decimal, quantity: Decimal) -> Decimal:
    return quantize_price(invested / quantity)


def apply_buy(position: Optional[Position], quantity: Decimal, amount: Decimal) -> Position:
    """Add a purchase; the average price is recomputed from the new totals."""
    quantity = quantize_quantity(quantity)
    amount = quantize_amount(amount)
    if position is None:
        return Position(quantity=quantity, average_price=_average(amount, quantity), invested=amount)
    new_quantity = quantize_quantity(position.quantity + quantity)
    new_invested = quantize_amount(position.invested + amount)
    return Position(
        quantity=new_quantity,
        average_price=_average(new_invested, new_quantity),
        invested=new_invested,
        realized=position.realized,
    )


def reverse_buy(position: Position, quantity: Decimal, amount: Decimal) -> Optional[Position]:
    """Take a purchase back out. Returns None when nothing is left."""
    new_quantity = quantize_quantity(position.quantity - quantity)
    if new_quantity <= ZERO:
        return None
    new_invested = quantize_amount(position.invested - amount)
    return Position(
        quantity=new_quantity,
        average_price=_average(new_invested, new_quantity),
        invested=new_invested,
        realized=position.realized,
    )


def apply_sell(
    position: Position, quantity: Decimal, amount: Decimal, asset_symbol: str = ""
) -> Optional[Position]:
    """Sell at the current average cost. Returns None when fully sold.

    The average price does not move on a sale; the difference between the
    proceeds and the cost of the units sold is realized.

    Raises:
        InsufficientQuantityError: If more is sold than held
    """
    quantity = quantize_quantity(quantity)
    if position.quantity < quantity:
        raise InsufficientQuantityError(insufficient_quantity(asset_symbol, quantity, position.quantity))
    sold_cost = quantize_amount(position.average_price * quantity)
    new_quantity = quantize_quantity(position.quantity - quantity)
    if new_quantity == ZERO:
        return None
    return Position(
        quantity=new_quantity,
        average_price=position.average_price,
        invested=quantize_amount(position.invested - sold_cost),
        realized=quantize_amount(position.realized + quantize_amount(amount) - sold_cost),
    )


def reverse_sell(
    position: Optional[Position], quantity: Decimal, amount: Decimal, cost_price: Decimal
) -> Position:
    """Put sold units back at the average price they were sold against.

    A holding that the sale emptied comes back with no realized gain.
    Otherwise the average price is recomputed from the restored totals.
    """
    quantity = quantize_quantity(quantity)
    sold_cost = quantize_amount(cost_price * quantity)
    if position is None:
        return Position(quantity=quantity, average_price=quantize_price(cost_price), invested=sold_cost)
    new_quantity = quantize_quantity(position.quantity + quantity)
    new_invested = quantize_amount(position.invested + sold_cost)
    return Position(
        quantity=new_quantity,
        average_price=_average(new_invested, new_quantity),
        invested=new_invested,
        realized=quantize_amount(position.realized - (quantize_amount(amount) - sold_cost)),
    )


class HoldingsAggregator:
    """Keep ``investment_holdings`` in step with investment transactions."""

    def __init__(self, db: Database):
        self.db = db

    def apply(
        self,
        owner_id: str,
        asset_symbol: str,
        action: InvestmentAction,
        quantity: Decimal,
        price: Decimal,
        amount: Decimal,
        reverse: bool = False,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        transaction_id: Optional[int] = None,
        cost_basis_price: Optional[Decimal] = None,
    ) -> HoldingDelta:
        """Apply (or reverse) one investment action to the owner's holding.

        Forward actions stamp ``investment_holding_id`` on the transaction; a
        forward SELL also stamps the average price it was sold against, which
        a later reverse SELL uses.

        Raises:
            HoldingNotFoundError: Forward SELL of an asset not held
            InsufficientQuantityError: Forward SELL of more than is held
        """
        if quantity is None or quantize_quantity(quantity) <= ZERO:
            raise ValidationError("Quantity must be positive")

        holding = self.db.get_holding(owner_id, asset_symbol, for_update=True)
        before = Position.of(holding) if holding is not None else None

        if action is InvestmentAction.BUY:
            if reverse:
                if before is None:
                    # Already sold off; nothing left to take back
                    return self._unchanged(holding, asset_symbol, action, reverse)
                after = reverse_buy(before, quantity, amount)
            else:
                after = apply_buy(before, quantity, amount)
            stamp = {}
        elif action is InvestmentAction.SELL:
            if reverse:
                cost_price = cost_basis_price
                if cost_price is None:
                    cost_price = before.average_price if before is not None else price
                after = reverse_sell(before, quantity, amount, cost_price)
                stamp = {}
            else:
                if before is None:
                    raise HoldingNotFoundError(holding_not_found(asset_symbol))
                after = apply_sell(before, quantity, amount, asset_symbol)
                stamp = {"cost_basis_price": before.average_price}
        else:
            # DIVIDEND, BONUS and SPLIT only link the transaction to the holding
            if not reverse and holding is not None and transaction_id is not None:
                self.db.update_transaction(transaction_id, {"investment_holding_id": holding.id})
            return self._unchanged(holding, asset_symbol, action, reverse)

        holding_id, created, removed = self._store(
            owner_id, asset_symbol, holding, after, account_id, category_id
        )
        if not reverse and transaction_id is not None:
            stamp["investment_holding_id"] = holding_id
            self.db.update_transaction(transaction_id, stamp)

        empty = Position(quantity=ZERO, average_price=ZERO, invested=Decimal("0.00"))
        old = before or empty
        new = after or empty
        delta = HoldingDelta(
            holding_id=holding_id,
            asset_symbol=asset_symbol,
            action=action,
            reverse=reverse,
            quantity_change=new.quantity - old.quantity,
            invested_change=new.invested - old.invested,
            realized_change=new.realized - old.realized,
            created=created,
            removed=removed,
        )
        logger.debug(
            "Holding %s %s%s: quantity %s -> %s",
            asset_symbol,
            "reverse " if reverse else "",
            action.value,
            old.quantity,
            new.quantity,
        )
        return delta

    def _unchanged(
        self,
        holding: Optional[InvestmentHolding],
        asset_symbol: str,
        action: InvestmentAction,
        reverse: bool,
    ) -> HoldingDelta:
        return HoldingDelta(
            holding_id=holding.id if holding is not None else None,
            asset_symbol=asset_symbol,
            action=action,
            reverse=reverse,
            quantity_change=Decimal("0"),
            invested_change=Decimal("0.00"),
            realized_change=Decimal("0.00"),
        )

    def _store(
        self,
        owner_id: str,
        asset_symbol: str,
        holding: Optional[InvestmentHolding],
        after: Optional[Position],
        account_id: Optional[int],
        category_id: Optional[int],
    ) -> tuple[Optional[int], bool, bool]:
        """Write the new position. Returns (holding ID, created, removed)."""
        if after is None:
            if holding is None:
                return None, False, False
            self.db.delete_holding(holding.id)
            return holding.id, False, True

        if holding is not None:
            self.db.update_holding(
                holding.id,
                total_quantity=after.quantity,
                average_buy_price=after.average_price,
                total_invested_amount=after.invested,
                realized_gain_loss=after.realized,
            )
            return holding.id, False, False

        if account_id is None or category_id is None:
            raise ValidationError("An account and category are required to open a holding")
        holding_id = self.db.create_holding(
            owner_id=owner_id,
            account_id=account_id,
            category_id=category_id,
            asset_symbol=asset_symbol,
            total_quantity=after.quantity,
            average_buy_price=after.average_price,
            total_invested_amount=after.invested,
            realized_gain_loss=after.realized,
        )
        return holding_id, True, False

    def list_holdings(self, owner_id: str) -> list[InvestmentHolding]:
        """List holdings. Market value is not tracked."""
        return self.db.list_holdings(owner_id)
