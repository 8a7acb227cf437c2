"""Category management commands."""

import click
from finkeep.cli.error_handling import handle_domain_error
from finkeep.domain.category import CategoryService
from finkeep.domain.entities import CategoryType
from finkeep.domain.errors import DomainError


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List all categories by number."""
    service = CategoryService(ctx.obj["db"])

    categories = service.list_categories()
    if not categories:
        click.echo("No categories found. Use 'category add' to create one.")
        return

    click.echo("\nCategories:")
    for cat in categories:
        click.echo(f"{cat.number:5d}  {cat.name} ({cat.category_type.value.lower()})")


@category_group.command("add")
@click.argument("number", type=int)
@click.argument("name")
@click.option(
    "--type",
    "category_type",
    type=click.Choice([t.value for t in CategoryType], case_sensitive=False),
    default=CategoryType.GENERAL.value,
    show_default=True,
    help="Category type",
)
@click.pass_context
def add_category(ctx, number: int, name: str, category_type: str):
    """Create a new category with a stable numeric code.

    Examples:
        finkeep category add 100 "Groceries"
        finkeep category add 900 "Stocks" --type INVESTMENT
    """
    service = CategoryService(ctx.obj["db"])

    try:
        category_id = service.create_category(
            number=number, name=name, category_type=CategoryType(category_type.upper())
        )
        click.echo(f"Created category {number} '{name}' (ID: {category_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
