"""Main CLI entry point."""

import click
from finkeep.database.factories import create_sqlite_database
from finkeep.logging_setup import configure_logging

# Import and register all commands at module level
from finkeep.cli.commands import (
    account,
    category,
    transaction,
    holding,
    pattern,
    alias,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINKEEP_DB_PATH environment variable)",
    envvar="FINKEEP_DB_PATH",
)
@click.option(
    "--user",
    help="User ID that owns the records (defaults to FINKEEP_USER)",
    envvar="FINKEEP_USER",
)
@click.option(
    "--log-level",
    help="Logging level such as DEBUG or INFO (defaults to FINKEEP_LOG_LEVEL, then WARNING)",
    envvar="FINKEEP_LOG_LEVEL",
    default="WARNING",
    show_default=True,
)
@click.pass_context
def cli(ctx, db_path: str | None, user: str | None, log_level: str):
    """Finkeep - Personal finance ledger.

    Record payments, transfers, investment trades and recurring bills while
    account balances, holdings and recurring patterns stay in step.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)
    ctx.obj["user"] = user

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
transaction.register_commands(cli)
holding.register_commands(cli)
pattern.register_commands(cli)
alias.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
