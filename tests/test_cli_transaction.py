"""Tests for transaction, holding, pattern and alias commands."""

import re

from conftest import OWNER
from finkeep.cli.main import cli


def _invoke(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "--user", OWNER] + list(args), **kwargs)


def _created_id(result):
    match = re.search(r"Created transaction (\d+)", result.output)
    assert match, result.output
    return match.group(1)


def _add_expense(cli_runner, temp_db, *extra):
    return _invoke(
        cli_runner,
        temp_db,
        "transaction",
        "add",
        "--account",
        "Prepaid Account",
        "--category",
        "100",
        "--type",
        "debit",
        "--amount",
        "42.50",
        "--date",
        "2024-02-05",
        *extra,
    )


def test_add_and_show(cli_runner, temp_db, accounts, categories):
    """Test adding a transaction and showing it."""
    result = _add_expense(cli_runner, temp_db, "--description", "Weekly shop", "--alias", "Corner Shop")

    assert result.exit_code == 0
    txn_id = _created_id(result)

    shown = _invoke(cli_runner, temp_db, "transaction", "show", txn_id)
    assert shown.exit_code == 0
    assert "Amount:      42.50" in shown.output
    assert "Description: Weekly shop" in shown.output
    assert "Date:        2024-02-05 00:00" in shown.output

    listed = _invoke(cli_runner, temp_db, "account", "list")
    assert "957.50" in listed.output


def test_add_with_account_id(cli_runner, temp_db, accounts, categories):
    result = _invoke(
        cli_runner,
        temp_db,
        "transaction",
        "add",
        "--account",
        str(accounts["PREPAID"]),
        "--category",
        "100",
        "--type",
        "CREDIT",
        "--amount",
        "$1,000.00",
        "--date",
        "2024-02-05",
    )

    assert result.exit_code == 0
    assert "2000.00" in _invoke(cli_runner, temp_db, "account", "list").output


def test_add_rejects_negative_amount(cli_runner, temp_db, accounts, categories):
    result = _add_expense(cli_runner, temp_db, "--amount", "-5")

    assert result.exit_code == 1
    assert "Error [INVALID]" in result.output


def test_add_unknown_category(cli_runner, temp_db, accounts, categories):
    result = _add_expense(cli_runner, temp_db, "--category", "555")

    assert result.exit_code == 1
    assert "Error [NOT_FOUND]: Category 555 not found" in result.output


def test_add_transfer(cli_runner, temp_db, accounts, categories):
    """Test that a transfer prints both legs."""
    result = _invoke(
        cli_runner,
        temp_db,
        "transaction",
        "add",
        "--account",
        "Prepaid Account",
        "--to-account",
        "Postpaid Account",
        "--category",
        "700",
        "--type",
        "DEBIT",
        "--amount",
        "500",
        "--date",
        "2024-02-10",
    )

    assert result.exit_code == 0
    assert "Counter leg: transaction" in result.output

    txn_id = _created_id(result)
    shown = _invoke(cli_runner, temp_db, "transaction", "show", txn_id)
    assert "Transfer leg of:" in shown.output


def test_update_description(cli_runner, temp_db, accounts, categories):
    txn_id = _created_id(_add_expense(cli_runner, temp_db))

    result = _invoke(cli_runner, temp_db, "transaction", "update", txn_id, "--description", "Corrected")

    assert result.exit_code == 0
    assert f"Updated transaction {txn_id}" in result.output
    assert "Description: Corrected" in _invoke(cli_runner, temp_db, "transaction", "show", txn_id).output


def test_update_amount_rejected(cli_runner, temp_db, accounts, categories):
    txn_id = _created_id(_add_expense(cli_runner, temp_db))

    result = _invoke(cli_runner, temp_db, "transaction", "update", txn_id, "--amount", "99")

    assert result.exit_code == 1
    assert "Error [VALIDATION]" in result.output
    assert "cannot be changed" in result.output


def test_update_clear_alias(cli_runner, temp_db, accounts, categories):
    txn_id = _created_id(_add_expense(cli_runner, temp_db, "--alias", "Corner Shop"))

    result = _invoke(cli_runner, temp_db, "transaction", "update", txn_id, "--alias", "")

    assert result.exit_code == 0
    assert "No aliases found" in _invoke(cli_runner, temp_db, "alias", "list").output


def test_delete_with_confirmation(cli_runner, temp_db, accounts, categories):
    txn_id = _created_id(_add_expense(cli_runner, temp_db))

    cancelled = _invoke(cli_runner, temp_db, "transaction", "delete", txn_id, input="n\n")
    assert "Deletion cancelled." in cancelled.output

    deleted = _invoke(cli_runner, temp_db, "transaction", "delete", txn_id, input="y\n")
    assert deleted.exit_code == 0
    assert f"Deleted transaction {txn_id}" in deleted.output
    assert "1000.00" in _invoke(cli_runner, temp_db, "account", "list").output


def test_delete_twice(cli_runner, temp_db, accounts, categories):
    txn_id = _created_id(_add_expense(cli_runner, temp_db))

    first = _invoke(cli_runner, temp_db, "transaction", "delete", txn_id, "--yes")
    second = _invoke(cli_runner, temp_db, "transaction", "delete", txn_id, "--yes")

    assert first.exit_code == 0
    assert second.exit_code == 0


def test_show_other_users_transaction(cli_runner, temp_db, accounts, categories):
    txn_id = _created_id(_add_expense(cli_runner, temp_db))

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--user", "user-2", "transaction", "show", txn_id]
    )

    assert result.exit_code == 1
    assert "Error [FORBIDDEN]" in result.output


def test_buy_then_list_holdings(cli_runner, temp_db, accounts, categories):
    result = _invoke(
        cli_runner,
        temp_db,
        "transaction",
        "add",
        "--account",
        "Investment Account",
        "--category",
        "900",
        "--type",
        "DEBIT",
        "--amount",
        "1000",
        "--date",
        "2024-03-01",
        "--action",
        "buy",
        "--asset",
        "acme",
        "--quantity",
        "10",
        "--price",
        "100",
    )
    assert result.exit_code == 0

    holdings = _invoke(cli_runner, temp_db, "holding", "list")
    assert "ACME" in holdings.output
    assert "10.000000" in holdings.output
    assert "100.0000" in holdings.output


def test_sell_without_holding(cli_runner, temp_db, accounts, categories):
    result = _invoke(
        cli_runner,
        temp_db,
        "transaction",
        "add",
        "--account",
        "Investment Account",
        "--category",
        "900",
        "--type",
        "CREDIT",
        "--amount",
        "150",
        "--action",
        "SELL",
        "--asset",
        "ACME",
        "--quantity",
        "1",
        "--price",
        "150",
    )

    assert result.exit_code == 1
    assert "Error [CONFLICT]" in result.output
    assert "No holdings found" in _invoke(cli_runner, temp_db, "holding", "list").output


def test_recurring_pattern_lifecycle(cli_runner, temp_db, accounts, categories):
    result = _add_expense(cli_runner, temp_db, "--category", "300", "--recurring", "monthly")
    assert result.exit_code == 0

    listed = _invoke(cli_runner, temp_db, "pattern", "list")
    assert "MONTHLY" in listed.output
    assert "count   1" in listed.output
    assert "next 2024-03-05" in listed.output

    match = re.search(r"ID:\s+(\d+) \| MONTHLY", listed.output)
    pattern_id = match.group(1)

    paused = _invoke(cli_runner, temp_db, "pattern", "pause", pattern_id)
    assert f"Pattern {pattern_id} paused" in paused.output
    assert "paused" in _invoke(cli_runner, temp_db, "pattern", "list").output

    _invoke(cli_runner, temp_db, "pattern", "deactivate", pattern_id)
    assert "inactive" in _invoke(cli_runner, temp_db, "pattern", "list").output


def test_pattern_unknown_id(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "pattern", "pause", "99")

    assert result.exit_code == 1
    assert "Error [NOT_FOUND]" in result.output


def test_alias_list_and_rename(cli_runner, temp_db, accounts, categories):
    _add_expense(cli_runner, temp_db, "--alias", "Corner Shop")
    _add_expense(cli_runner, temp_db, "--alias", "Corner Shop")

    listed = _invoke(cli_runner, temp_db, "alias", "list")
    assert "Corner Shop | used 2x" in listed.output

    alias_id = re.search(r"ID:\s+(\d+) \| Corner Shop", listed.output).group(1)
    renamed = _invoke(cli_runner, temp_db, "alias", "rename", alias_id, "The Corner Shop")

    assert renamed.exit_code == 0
    assert "Renamed alias" in renamed.output
    assert "The Corner Shop | used 2x" in _invoke(cli_runner, temp_db, "alias", "list").output


def test_help_does_not_need_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "transaction" in result.output
