"""Tests for the balance adjustment engine."""

from datetime import datetime
from decimal import Decimal
import pytest

from finkeep.domain.balance import BalanceEngine, balance_change
from finkeep.domain.entities import AccountGroup, TransactionType
from finkeep.domain.errors import NotFoundError


@pytest.mark.parametrize(
    "group,direction,expected",
    [
        (AccountGroup.PREPAID, TransactionType.DEBIT, Decimal("-10.00")),
        (AccountGroup.PREPAID, TransactionType.CREDIT, Decimal("10.00")),
        (AccountGroup.INVESTMENT, TransactionType.DEBIT, Decimal("-10.00")),
        (AccountGroup.INVESTMENT, TransactionType.CREDIT, Decimal("10.00")),
        (AccountGroup.POSTPAID, TransactionType.DEBIT, Decimal("10.00")),
        (AccountGroup.POSTPAID, TransactionType.CREDIT, Decimal("-10.00")),
        (AccountGroup.LOAN, TransactionType.DEBIT, Decimal("10.00")),
        (AccountGroup.LOAN, TransactionType.CREDIT, Decimal("-10.00")),
    ],
)
def test_balance_change_sign_rules(group, direction, expected):
    assert balance_change(group, Decimal("10"), direction) == expected


def test_balance_change_reverse_flips_direction():
    forward = balance_change(AccountGroup.PREPAID, Decimal("12.34"), TransactionType.DEBIT)
    backward = balance_change(AccountGroup.PREPAID, Decimal("12.34"), TransactionType.DEBIT, reverse=True)
    assert forward == -backward


def test_balance_change_rounds_half_up():
    assert balance_change(AccountGroup.PREPAID, Decimal("0.125"), TransactionType.CREDIT) == Decimal("0.13")


def test_apply_updates_balance_and_timestamp(temp_db, accounts):
    engine = BalanceEngine(temp_db)
    when = datetime(2024, 2, 1, 12, 0)

    delta = engine.apply(accounts["PREPAID"], Decimal("250.50"), TransactionType.DEBIT, when)

    account = temp_db.get_account(accounts["PREPAID"])
    assert account.current_balance == Decimal("749.50")
    assert account.balance_updated_at == when
    assert delta.change == Decimal("-250.50")
    assert delta.previous_balance == Decimal("1000.00")
    assert delta.new_balance == Decimal("749.50")
    assert not delta.skipped


def test_transaction_before_checkpoint_is_ignored(temp_db, accounts):
    engine = BalanceEngine(temp_db)
    before = temp_db.get_account(accounts["POSTPAID"])

    delta = engine.apply(accounts["POSTPAID"], Decimal("99.99"), TransactionType.DEBIT, datetime(2023, 12, 31))

    after = temp_db.get_account(accounts["POSTPAID"])
    assert delta.skipped
    assert delta.change == Decimal("0.00")
    assert after.current_balance == before.current_balance
    assert after.balance_updated_at == before.balance_updated_at


@pytest.mark.parametrize("group", ["PREPAID", "POSTPAID", "LOAN", "INVESTMENT"])
@pytest.mark.parametrize("direction", [TransactionType.DEBIT, TransactionType.CREDIT])
def test_reverse_restores_balance_and_timestamp(temp_db, accounts, group, direction):
    engine = BalanceEngine(temp_db)
    before = temp_db.get_account(accounts[group])
    when = datetime(2024, 3, 15)

    forward = engine.apply(accounts[group], Decimal("123.45"), direction, when)
    backward = engine.apply(accounts[group], Decimal("123.45"), direction, when, reverse=True)

    after = temp_db.get_account(accounts[group])
    assert backward.change == -forward.change
    assert after.current_balance == before.current_balance
    assert after.balance_updated_at == before.balance_updated_at


def test_missing_account_raises_not_found(temp_db):
    engine = BalanceEngine(temp_db)
    with pytest.raises(NotFoundError):
        engine.apply(4242, Decimal("1"), TransactionType.DEBIT, datetime(2024, 1, 2))


def test_aware_datetime_is_normalized(temp_db, accounts):
    from datetime import timedelta, timezone

    engine = BalanceEngine(temp_db)
    aware = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))

    engine.apply(accounts["PREPAID"], Decimal("1"), TransactionType.CREDIT, aware)

    assert temp_db.get_account(accounts["PREPAID"]).balance_updated_at == datetime(2024, 5, 1, 10, 0)
