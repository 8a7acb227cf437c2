"""Recurring pattern commands."""

import click
from finkeep.cli.error_handling import handle_domain_error
from finkeep.domain.errors import DomainError
from finkeep.domain.ownership import OwnershipGuard
from finkeep.domain.recurring import RecurringPatternEngine


@click.group()
def pattern_group():
    """Manage recurring payment patterns."""
    pass


@pattern_group.command("list")
@click.pass_context
def list_patterns(ctx):
    """List recurring patterns with their status."""
    db = ctx.obj["db"]

    try:
        owner_id = OwnershipGuard(db).require_identity(ctx.obj["user"])
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    patterns = RecurringPatternEngine(db).list_patterns(owner_id)
    if not patterns:
        click.echo("No recurring patterns found.")
        return

    click.echo("\nRecurring patterns:")
    click.echo("-" * 80)
    for pattern, status in patterns:
        state = "inactive" if not pattern.is_active else ("paused" if pattern.is_paused else status.value)
        click.echo(
            f"ID: {pattern.id:3d} | {pattern.frequency.value:8s} | {pattern.amount:>10} | "
            f"count {pattern.generated_count:3d} | next {pattern.next_due_date:%Y-%m-%d} | {state}"
        )


def _change_pattern(ctx, pattern_id: int, action: str) -> None:
    db = ctx.obj["db"]
    engine = RecurringPatternEngine(db)
    try:
        owner_id = OwnershipGuard(db).require_identity(ctx.obj["user"])
        getattr(engine, action)(owner_id, pattern_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Pattern {pattern_id} {action}d")


@pattern_group.command("pause")
@click.argument("pattern_id", type=int)
@click.pass_context
def pause_pattern(ctx, pattern_id: int):
    """Pause a pattern."""
    _change_pattern(ctx, pattern_id, "pause")


@pattern_group.command("resume")
@click.argument("pattern_id", type=int)
@click.pass_context
def resume_pattern(ctx, pattern_id: int):
    """Resume a paused pattern."""
    _change_pattern(ctx, pattern_id, "resume")


@pattern_group.command("deactivate")
@click.argument("pattern_id", type=int)
@click.pass_context
def deactivate_pattern(ctx, pattern_id: int):
    """Stop a pattern from collecting new recurring transactions."""
    _change_pattern(ctx, pattern_id, "deactivate")


def register_commands(cli):
    """Register pattern commands with main CLI."""
    cli.add_command(pattern_group, name="pattern")
