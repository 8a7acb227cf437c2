"""Investment holding commands."""

import click
from finkeep.cli.error_handling import handle_domain_error
from finkeep.domain.errors import DomainError
from finkeep.domain.holdings import HoldingsAggregator
from finkeep.domain.ownership import OwnershipGuard


@click.group()
def holding_group():
    """View investment holdings."""
    pass


@holding_group.command("list")
@click.pass_context
def list_holdings(ctx):
    """List holdings with their cost basis and realized gain."""
    db = ctx.obj["db"]

    try:
        owner_id = OwnershipGuard(db).require_identity(ctx.obj["user"])
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    holdings = HoldingsAggregator(db).list_holdings(owner_id)
    if not holdings:
        click.echo("No holdings found.")
        return

    click.echo(f"\n{'Asset':10s} {'Quantity':>16s} {'Avg price':>12s} {'Invested':>14s} {'Realized':>12s}")
    click.echo("-" * 68)
    for h in holdings:
        click.echo(
            f"{h.asset_symbol:10s} {h.total_quantity:>16} {h.average_buy_price:>12} "
            f"{h.total_invested_amount:>14} {h.realized_gain_loss:>12}"
        )


def register_commands(cli):
    """Register holding commands with main CLI."""
    cli.add_command(holding_group, name="holding")
