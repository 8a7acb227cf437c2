"""Shared pytest fixtures for finkeep tests."""

import tempfile
import os
from datetime import datetime
from decimal import Decimal
import pytest

from finkeep.database.factories import create_sqlite_database
from finkeep.domain.account import AccountService
from finkeep.domain.category import CategoryService
from finkeep.domain.entities import AccountGroup, CategoryType
from finkeep.domain.transaction import TransactionService

OWNER = "user-1"
OTHER_OWNER = "user-2"

# Opening balances are correct as of this instant, so every transaction in
# the tests falls after the checkpoint unless a test says otherwise.
OPENED = datetime(2024, 1, 1)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def accounts(account_service):
    """One account per group for OWNER, keyed by group name."""
    opening = {
        AccountGroup.PREPAID: Decimal("1000.00"),
        AccountGroup.POSTPAID: Decimal("0.00"),
        AccountGroup.LOAN: Decimal("5000.00"),
        AccountGroup.INVESTMENT: Decimal("0.00"),
    }
    ids = {}
    for group, balance in opening.items():
        ids[group.value] = account_service.create_account(
            OWNER,
            name=f"{group.value.title()} Account",
            account_group=group,
            initial_balance=balance,
            balance_as_of=OPENED,
        )
    return ids


@pytest.fixture
def foreign_account(account_service):
    """An account owned by someone else."""
    return account_service.create_account(
        OTHER_OWNER, name="Not Yours", account_group=AccountGroup.PREPAID, balance_as_of=OPENED
    )


@pytest.fixture
def categories(category_service):
    """A few categories keyed by their number."""
    rows = [
        (100, "Groceries", CategoryType.GENERAL),
        (200, "Utilities", CategoryType.GENERAL),
        (300, "Subscriptions", CategoryType.GENERAL),
        (700, "Transfers", CategoryType.GENERAL),
        (900, "Stocks", CategoryType.INVESTMENT),
    ]
    for number, name, category_type in rows:
        category_service.create_category(number, name, category_type)
    return {number: category_service.resolve(number) for number, _, _ in rows}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
