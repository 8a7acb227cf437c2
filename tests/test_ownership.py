"""Tests for OwnershipGuard."""

import pytest

from conftest import OWNER
from finkeep.domain.errors import ForbiddenError, UnauthenticatedError
from finkeep.domain.ownership import OwnershipGuard


@pytest.fixture
def guard(temp_db):
    return OwnershipGuard(temp_db)


@pytest.mark.parametrize("owner", [None, "", "  "])
def test_require_identity_rejects_blank(guard, owner):
    with pytest.raises(UnauthenticatedError) as exc_info:
        guard.require_identity(owner)
    assert exc_info.value.kind == "UNAUTHENTICATED"


def test_require_identity_passes_through(guard):
    assert guard.require_identity(OWNER) == OWNER


def test_verify_own_account(guard, accounts):
    account = guard.verify_account(OWNER, accounts["PREPAID"])
    assert account.id == accounts["PREPAID"]


def test_missing_and_foreign_accounts_look_the_same(guard, foreign_account):
    with pytest.raises(ForbiddenError) as missing:
        guard.verify_account(OWNER, 9999)
    with pytest.raises(ForbiddenError) as foreign:
        guard.verify_account(OWNER, foreign_account)

    assert "not found or access denied" in str(missing.value)
    assert "not found or access denied" in str(foreign.value)


def test_verify_transaction(guard, transaction_service, accounts, categories):
    from datetime import datetime
    from decimal import Decimal

    from finkeep.domain.transaction import TransactionInput

    txn = transaction_service.create_transaction(
        OWNER,
        TransactionInput(
            account_id=accounts["PREPAID"],
            category_number=100,
            transaction_type="DEBIT",
            amount=Decimal("12.00"),
            transaction_datetime=datetime(2024, 2, 1),
        ),
    )

    assert guard.verify_transaction(OWNER, txn.id).id == txn.id
    with pytest.raises(ForbiddenError):
        guard.verify_transaction("someone-else", txn.id)
    with pytest.raises(ForbiddenError):
        guard.verify_transaction(OWNER, txn.id + 100)
