"""CLI helpers for account resolution and error handling."""

from __future__ import annotations

import click
from finkeep.cli.error_handling import handle_domain_error
from finkeep.domain.account import AccountService
from finkeep.domain.errors import DomainError
from finkeep.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Resolve the current user's account by name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, ctx.obj["user"], account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
