"""Initialize default categories."""

import click

from moneytrack.domain.category import CategoryService


@click.command("init-categories")
@click.pass_context
def init_categories(ctx):
    """Create the default income and expense categories.

    Categories that already exist are left untouched, so the command can be
    run more than once.
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    created, skipped = service.initialize_defaults()

    if skipped == 0:
        click.echo(f"Successfully created {created} categories.")
    else:
        click.echo(f"Created {created} categories ({skipped} already existed).")


def register_commands(cli):
    """Register init-categories command with main CLI."""
    cli.add_command(init_categories)
