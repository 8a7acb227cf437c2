"""Merchant alias commands."""

import click
from finkeep.cli.error_handling import handle_domain_error
from finkeep.domain.alias import MerchantAliasRegistry
from finkeep.domain.errors import DomainError
from finkeep.domain.ownership import OwnershipGuard


@click.group()
def alias_group():
    """Manage merchant and asset aliases."""
    pass


@alias_group.command("list")
@click.pass_context
def list_aliases(ctx):
    """List aliases, most used first."""
    db = ctx.obj["db"]

    try:
        owner_id = OwnershipGuard(db).require_identity(ctx.obj["user"])
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    aliases = MerchantAliasRegistry(db).list_aliases(owner_id)
    if not aliases:
        click.echo("No aliases found.")
        return

    for a in aliases:
        symbol = f" [{a.asset_symbol}]" if a.asset_symbol else ""
        click.echo(f"ID: {a.id:3d} | {a.name}{symbol} | used {a.usage_count}x")


@alias_group.command("rename")
@click.argument("alias_id", type=int)
@click.argument("name")
@click.pass_context
def rename_alias(ctx, alias_id: int, name: str):
    """Rename an alias."""
    db = ctx.obj["db"]

    try:
        owner_id = OwnershipGuard(db).require_identity(ctx.obj["user"])
        alias = MerchantAliasRegistry(db).rename(owner_id, alias_id, name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Renamed alias {alias.id} to '{alias.name}'")


def register_commands(cli):
    """Register alias commands with main CLI."""
    cli.add_command(alias_group, name="alias")
