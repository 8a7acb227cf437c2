"""Account management commands."""

import click
from finkeep.cli.account_resolution import resolve_account_or_exit
from finkeep.cli.error_handling import handle_domain_error
from finkeep.domain.account import AccountService
from finkeep.domain.entities import AccountGroup
from finkeep.domain.errors import DomainError
from finkeep.utils.amount_parser import parse_decimal
from finkeep.utils.date_parser import parse_datetime


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--group",
    "account_group_name",
    type=click.Choice([g.value for g in AccountGroup], case_sensitive=False),
    default=AccountGroup.PREPAID.value,
    show_default=True,
    help="Account group, which decides how debits and credits move the balance",
)
@click.option("--balance", default="0", help="Opening balance (e.g., 1500.00)")
@click.option("--as-of", help="Instant the opening balance is correct at (default: now)")
@click.pass_context
def create_account(ctx, name: str, account_group_name: str, balance: str, as_of: str | None):
    """Create a new account.

    Examples:
        finkeep account create "Checking" --balance 1200
        finkeep account create "Visa" --group POSTPAID
        finkeep account create "Brokerage" --group INVESTMENT --as-of 2024-01-01
    """
    service = AccountService(ctx.obj["db"])

    try:
        opening = parse_decimal(balance)
        balance_as_of = parse_datetime(as_of) if as_of is not None else None
        account_id = service.create_account(
            ctx.obj["user"],
            name=name,
            account_group=AccountGroup(account_group_name.upper()),
            initial_balance=opening,
            balance_as_of=balance_as_of,
        )
        click.echo(f"Created account '{name}' (ID: {account_id})")
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List your accounts with their balances."""
    service = AccountService(ctx.obj["db"])

    try:
        accounts = service.list_accounts(ctx.obj["user"])
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.account_group.value:10s} | "
            f"{acc.current_balance:>12} | since {acc.manual_balance_updated_at:%Y-%m-%d %H:%M}"
        )


@account_group.command("set-balance")
@click.argument("account", metavar="ACCOUNT")
@click.argument("balance", metavar="BALANCE")
@click.option("--at", help="Instant the balance was checked (default: now)")
@click.pass_context
def set_balance(ctx, account: str, balance: str, at: str | None) -> None:
    """Set an account's balance to a manually checked value.

    Transactions dated before the check no longer move the balance.

    ACCOUNT can be an account name or ID.

    Examples:
        finkeep account set-balance "Checking" 980.50
        finkeep account set-balance 2 -300 --at 2024-03-01
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        updated = service.set_manual_balance(
            ctx.obj["user"],
            account_id,
            parse_decimal(balance),
            at=parse_datetime(at) if at is not None else None,
        )
        click.echo(f"Balance of '{updated.name}' set to {updated.current_balance}")
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
