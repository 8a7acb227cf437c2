"""Transaction management commands."""

import click
from finkeep.cli.account_resolution import resolve_account_or_exit
from finkeep.cli.error_handling import handle_domain_error
from finkeep.domain.account import AccountService
from finkeep.domain.entities import Frequency, InvestmentAction, Transaction, TransactionType
from finkeep.domain.errors import DomainError
from finkeep.domain.transaction import TransactionInput, TransactionPatch, TransactionService
from finkeep.services.location import LocationClient
from finkeep.utils.amount_parser import parse_amount, parse_decimal
from finkeep.utils.date_parser import parse_datetime

_TYPES = [t.value for t in TransactionType]
_ACTIONS = [a.value for a in InvestmentAction]
_FREQUENCIES = [f.value for f in Frequency]


def format_transaction(txn: Transaction) -> list[str]:
    """Render a transaction as display lines."""
    lines = [
        f"Transaction {txn.id}",
        f"  Date:        {txn.transaction_datetime:%Y-%m-%d %H:%M}",
        f"  Type:        {txn.transaction_type.value}",
        f"  Amount:      {txn.amount}",
        f"  Account:     {txn.account_id}",
        f"  Category:    {txn.category_id}",
    ]
    if txn.alias_id is not None:
        lines.append(f"  Alias:       {txn.alias_id}")
    if txn.description:
        lines.append(f"  Description: {txn.description}")
    if txn.payment_method:
        lines.append(f"  Payment:     {txn.payment_method}")
    if txn.location:
        lines.append(f"  Location:    {txn.location}")
    if txn.is_transfer:
        lines.append(f"  Transfer leg of: {txn.linked_transaction_id}")
    if txn.investment_action is not None:
        lines.append(
            f"  Investment:  {txn.investment_action.value} {txn.quantity} {txn.asset_symbol} @ {txn.price_per_unit}"
        )
    if txn.is_recurring:
        lines.append(f"  Recurring:   pattern {txn.recurring_pattern_id}")
    return lines


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--category", "category_number", type=int, required=True, help="Category number")
@click.option("--type", "transaction_type", type=click.Choice(_TYPES, case_sensitive=False), required=True)
@click.option("--amount", required=True, help="Transaction amount (e.g., 123.45)")
@click.option("--date", help="Date and time (e.g., 2024-01-15, '2024-01-15 09:30', 'today'; default: now)")
@click.option("--description", help="Transaction description")
@click.option("--alias", "alias_name", help="Merchant or asset display name")
@click.option("--logo-url", help="Logo URL for the alias")
@click.option("--payment-method", help="Payment method (e.g., card, cash)")
@click.option("--location", help="Location text")
@click.option("--locate", is_flag=True, help="Look up the location from your IP when --location is not given")
@click.option("--to-account", help="Counter account name or ID (makes this a transfer)")
@click.option("--recurring", "frequency", type=click.Choice(_FREQUENCIES, case_sensitive=False), help="Repeat frequency")
@click.option("--every-days", type=int, help="Interval in days for CUSTOM frequency")
@click.option("--action", "investment_action", type=click.Choice(_ACTIONS, case_sensitive=False), help="Investment action")
@click.option("--asset", "asset_symbol", help="Asset symbol for investment actions")
@click.option("--quantity", help="Units bought or sold")
@click.option("--price", help="Price per unit")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    category_number: int,
    transaction_type: str,
    amount: str,
    date: str | None,
    description: str | None,
    alias_name: str | None,
    logo_url: str | None,
    payment_method: str | None,
    location: str | None,
    locate: bool,
    to_account: str | None,
    frequency: str | None,
    every_days: int | None,
    investment_action: str | None,
    asset_symbol: str | None,
    quantity: str | None,
    price: str | None,
):
    """Add a transaction.

    Examples:
        finkeep transaction add --account Checking --category 100 --type DEBIT --amount 42.50 --alias "Corner Shop"
        finkeep transaction add --account Checking --to-account Visa --category 700 --type DEBIT --amount 500
        finkeep transaction add --account Brokerage --category 900 --type DEBIT --amount 1000 \\
            --action BUY --asset ACME --quantity 10 --price 100
        finkeep transaction add --account Checking --category 300 --type DEBIT --amount 15 --recurring MONTHLY
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    location_client = LocationClient() if locate else None
    service = TransactionService(db, location_client=location_client)

    account_id = resolve_account_or_exit(ctx, account_service, account)
    other_account_id = resolve_account_or_exit(ctx, account_service, to_account) if to_account else None

    try:
        data = TransactionInput(
            account_id=account_id,
            category_number=category_number,
            transaction_type=transaction_type.upper(),
            amount=parse_amount(amount),
            transaction_datetime=parse_datetime(date) if date is not None else None,
            description=description,
            alias_name=alias_name,
            alias_logo_url=logo_url,
            payment_method=payment_method,
            location=location,
            other_account_id=other_account_id,
            is_recurring=frequency is not None,
            recurring_frequency=frequency.upper() if frequency else None,
            custom_frequency_days=every_days,
            asset_symbol=asset_symbol,
            quantity=parse_decimal(quantity) if quantity is not None else None,
            price_per_unit=parse_decimal(price) if price is not None else None,
            investment_action=investment_action.upper() if investment_action else None,
        )
        txn = service.create_transaction(ctx.obj["user"], data)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created transaction {txn.id}")
    if txn.linked_transaction_id is not None:
        click.echo(f"Counter leg: transaction {txn.linked_transaction_id}")


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--description", help="Transaction description")
@click.option("--category", "category_number", type=int, help="Category number")
@click.option("--alias", "alias_name", help="Merchant or asset display name, or empty string to clear")
@click.option("--logo-url", help="Logo URL for the alias")
@click.option("--payment-method", help="Payment method")
@click.option("--account", help="Move to another account (name or ID)")
@click.option("--to-account", help="Move the counter leg of a transfer (name or ID)")
@click.option("--recurring/--not-recurring", "is_recurring", default=None, help="Turn recurrence on or off")
@click.option("--frequency", type=click.Choice(_FREQUENCIES, case_sensitive=False), help="Repeat frequency")
@click.option("--every-days", type=int, help="Interval in days for CUSTOM frequency")
@click.option("--asset", "asset_symbol", help="Asset symbol (investment transactions)")
@click.option("--quantity", help="Units (investment transactions)")
@click.option("--amount", help="Rejected unless equal to the stored amount")
@click.option("--date", help="Rejected unless equal to the stored date")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    description: str | None,
    category_number: int | None,
    alias_name: str | None,
    logo_url: str | None,
    payment_method: str | None,
    account: str | None,
    to_account: str | None,
    is_recurring: bool | None,
    frequency: str | None,
    every_days: int | None,
    asset_symbol: str | None,
    quantity: str | None,
    amount: str | None,
    date: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. Amount and date cannot change;
    delete the transaction and add it again instead.

    Examples:
        finkeep transaction update 7 --description "Weekly groceries" --category 110
        finkeep transaction update 7 --alias ""  # Clear alias
        finkeep transaction update 9 --to-account Savings
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    service = TransactionService(db)

    patch = TransactionPatch()
    if description is not None:
        patch.description = description
    if category_number is not None:
        patch.category_number = category_number
    if alias_name is not None:
        patch.alias_name = alias_name or None
    if logo_url is not None:
        patch.alias_logo_url = logo_url
    if payment_method is not None:
        patch.payment_method = payment_method
    if account is not None:
        patch.account_id = resolve_account_or_exit(ctx, account_service, account)
    if to_account is not None:
        patch.other_account_id = resolve_account_or_exit(ctx, account_service, to_account)
    if is_recurring is not None:
        patch.is_recurring = is_recurring
    if frequency is not None:
        patch.recurring_frequency = frequency.upper()
    if every_days is not None:
        patch.custom_frequency_days = every_days
    if asset_symbol is not None:
        patch.asset_symbol = asset_symbol

    try:
        if quantity is not None:
            patch.quantity = parse_decimal(quantity)
        if amount is not None:
            patch.amount = parse_amount(amount)
        if date is not None:
            patch.transaction_datetime = parse_datetime(date)
        service.update_transaction(ctx.obj["user"], transaction_id, patch)
        click.echo(f"Updated transaction {transaction_id}")
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction and undo its effects.

    Deleting one leg of a transfer deletes both legs.

    Examples:
        finkeep transaction delete 7
        finkeep transaction delete 7 --yes
    """
    service = TransactionService(ctx.obj["db"])

    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        result = service.delete_transaction(ctx.obj["user"], transaction_id)
        click.echo(f"Deleted transaction {result.transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int) -> None:
    """Show one transaction."""
    service = TransactionService(ctx.obj["db"])

    try:
        txn = service.get_transaction(ctx.obj["user"], transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    for line in format_transaction(txn):
        click.echo(line)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
