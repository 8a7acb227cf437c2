"""CLI error handling helpers."""

import click

from finkeep.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error with its kind and exit with failure."""
    kind = getattr(error, "kind", "INVALID")
    click.echo(f"Error [{kind}]: {error}", err=True)
    ctx.exit(1)
