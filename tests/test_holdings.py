"""Tests for holdings aggregation."""

from decimal import Decimal
import pytest

from conftest import OWNER
from finkeep.domain.entities import InvestmentAction
from finkeep.domain.errors import ConflictError, HoldingNotFoundError, InsufficientQuantityError
from finkeep.domain.holdings import (
    HoldingsAggregator,
    Position,
    apply_buy,
    apply_sell,
    reverse_buy,
    reverse_sell,
)


def test_apply_buy_opens_position():
    position = apply_buy(None, Decimal("10"), Decimal("1000"))
    assert position.quantity == Decimal("10.000000")
    assert position.average_price == Decimal("100.0000")
    assert position.invested == Decimal("1000.00")
    assert position.realized == Decimal("0.00")


def test_apply_buy_recomputes_weighted_average():
    position = apply_buy(None, Decimal("10"), Decimal("1000"))
    position = apply_buy(position, Decimal("5"), Decimal("650"))
    assert position.quantity == Decimal("15.000000")
    assert position.invested == Decimal("1650.00")
    assert position.average_price == Decimal("110.0000")


def test_reverse_buy_to_zero_removes_position():
    position = apply_buy(None, Decimal("3"), Decimal("30"))
    assert reverse_buy(position, Decimal("3"), Decimal("30")) is None


def test_reverse_buy_restores_previous_average():
    first = apply_buy(None, Decimal("10"), Decimal("1000"))
    second = apply_buy(first, Decimal("5"), Decimal("650"))
    assert reverse_buy(second, Decimal("5"), Decimal("650")) == first


def test_sell_keeps_average_and_realizes_gain():
    position = apply_buy(None, Decimal("10"), Decimal("1000"))
    after = apply_sell(position, Decimal("4"), Decimal("600"))
    assert after.quantity == Decimal("6.000000")
    assert after.average_price == Decimal("100.0000")
    assert after.invested == Decimal("600.00")
    assert after.realized == Decimal("200.00")


def test_sell_everything_removes_position():
    position = apply_buy(None, Decimal("2"), Decimal("20"))
    assert apply_sell(position, Decimal("2"), Decimal("30")) is None


def test_sell_more_than_held_fails():
    position = apply_buy(None, Decimal("2"), Decimal("20"))
    with pytest.raises(InsufficientQuantityError):
        apply_sell(position, Decimal("2.5"), Decimal("30"), "ACME")


def test_reverse_sell_round_trips():
    position = apply_buy(None, Decimal("10"), Decimal("1000"))
    sold = apply_sell(position, Decimal("4"), Decimal("600"))
    assert reverse_sell(sold, Decimal("4"), Decimal("600"), position.average_price) == position


def test_reverse_sell_after_later_buy_recomputes_average():
    position = apply_buy(None, Decimal("10"), Decimal("1000"))
    sold = apply_sell(position, Decimal("4"), Decimal("600"))
    bought = apply_buy(sold, Decimal("6"), Decimal("1200"))  # average now 150

    restored = reverse_sell(bought, Decimal("4"), Decimal("600"), position.average_price)

    assert restored.quantity == Decimal("16.000000")
    assert restored.invested == Decimal("2200.00")
    assert restored.average_price == Decimal("137.5000")
    assert restored.realized == Decimal("0.00")


def test_reverse_sell_recreates_drained_position():
    restored = reverse_sell(None, Decimal("2"), Decimal("30"), Decimal("10"))
    assert restored == Position(
        quantity=Decimal("2.000000"), average_price=Decimal("10.0000"), invested=Decimal("20.00")
    )


def test_fractional_quantities_keep_precision():
    position = apply_buy(None, Decimal("0.333333"), Decimal("100"))
    position = apply_buy(position, Decimal("0.666667"), Decimal("200"))
    assert position.quantity == Decimal("1.000000")
    assert position.invested == Decimal("300.00")
    assert position.average_price == Decimal("300.0000")


# Aggregator against storage


@pytest.fixture
def aggregator(temp_db):
    return HoldingsAggregator(temp_db)


def _buy(aggregator, accounts, categories, quantity, amount, symbol="ACME"):
    return aggregator.apply(
        OWNER,
        symbol,
        InvestmentAction.BUY,
        Decimal(quantity),
        Decimal(amount) / Decimal(quantity),
        Decimal(amount),
        account_id=accounts["INVESTMENT"],
        category_id=categories[900].id,
    )


def test_buy_then_sell_scenario(temp_db, aggregator, accounts, categories):
    _buy(aggregator, accounts, categories, "10", "1000")
    aggregator.apply(OWNER, "ACME", InvestmentAction.SELL, Decimal("4"), Decimal("150"), Decimal("600"))

    holding = temp_db.get_holding(OWNER, "ACME")
    assert holding.total_quantity == Decimal("6")
    assert holding.average_buy_price == Decimal("100")
    assert holding.realized_gain_loss == Decimal("200")


def test_first_buy_creates_holding(temp_db, aggregator, accounts, categories):
    delta = _buy(aggregator, accounts, categories, "2", "50")

    holding = temp_db.get_holding(OWNER, "ACME")
    assert delta.created
    assert delta.holding_id == holding.id
    assert holding.account_id == accounts["INVESTMENT"]
    assert holding.average_buy_price * holding.total_quantity == holding.total_invested_amount


def test_reverse_only_buy_deletes_holding(temp_db, aggregator, accounts, categories):
    _buy(aggregator, accounts, categories, "5", "500")
    delta = aggregator.apply(
        OWNER, "ACME", InvestmentAction.BUY, Decimal("5"), Decimal("100"), Decimal("500"), reverse=True
    )
    assert delta.removed
    assert temp_db.get_holding(OWNER, "ACME") is None


def test_sell_without_holding_is_conflict(aggregator):
    with pytest.raises(HoldingNotFoundError) as excinfo:
        aggregator.apply(OWNER, "NOPE", InvestmentAction.SELL, Decimal("1"), Decimal("1"), Decimal("1"))
    assert isinstance(excinfo.value, ConflictError)
    assert excinfo.value.kind == "CONFLICT"


def test_oversell_leaves_holding_untouched(temp_db, aggregator, accounts, categories):
    _buy(aggregator, accounts, categories, "3", "300")
    with pytest.raises(InsufficientQuantityError):
        aggregator.apply(OWNER, "ACME", InvestmentAction.SELL, Decimal("4"), Decimal("100"), Decimal("400"))
    assert temp_db.get_holding(OWNER, "ACME").total_quantity == Decimal("3")


def test_reverse_sell_uses_cost_basis(temp_db, aggregator, accounts, categories):
    _buy(aggregator, accounts, categories, "10", "1000")
    _buy(aggregator, accounts, categories, "10", "2000")  # average now 150
    aggregator.apply(OWNER, "ACME", InvestmentAction.SELL, Decimal("5"), Decimal("200"), Decimal("1000"))
    aggregator.apply(
        OWNER,
        "ACME",
        InvestmentAction.SELL,
        Decimal("5"),
        Decimal("200"),
        Decimal("1000"),
        reverse=True,
        cost_basis_price=Decimal("150"),
    )

    holding = temp_db.get_holding(OWNER, "ACME")
    assert holding.total_quantity == Decimal("20")
    assert holding.total_invested_amount == Decimal("3000")
    assert holding.average_buy_price == Decimal("150")
    assert holding.realized_gain_loss == Decimal("0")


@pytest.mark.parametrize("action", [InvestmentAction.DIVIDEND, InvestmentAction.BONUS, InvestmentAction.SPLIT])
def test_non_trading_actions_do_not_move_quantity(temp_db, aggregator, accounts, categories, action):
    _buy(aggregator, accounts, categories, "4", "400")
    delta = aggregator.apply(OWNER, "ACME", action, Decimal("1"), Decimal("1"), Decimal("12"))

    holding = temp_db.get_holding(OWNER, "ACME")
    assert delta.quantity_change == 0
    assert holding.total_quantity == Decimal("4")
    assert holding.total_invested_amount == Decimal("400")


def test_holdings_are_per_owner(temp_db, aggregator, accounts, categories):
    _buy(aggregator, accounts, categories, "1", "10")
    assert temp_db.get_holding("someone-else", "ACME") is None
    assert [h.asset_symbol for h in aggregator.list_holdings(OWNER)] == ["ACME"]
