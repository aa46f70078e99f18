"""Main CLI entry point."""

import logging
import os
from datetime import datetime

import click
from dotenv import load_dotenv

from moneytrack.database.factories import create_sqlite_database

# Import and register all commands at module level
from moneytrack.cli.commands import (
    serve,
    init_categories,
    user,
    add,
    summary,
    goal,
    report,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging() -> None:
    """Configure root logging from the LOG_LEVEL environment variable."""
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides MONEYTRACK_DB_PATH environment variable)",
    envvar="MONEYTRACK_DB_PATH",
)
@click.pass_context
def cli(ctx, db_path: str | None):
    """moneytrack - Personal finance tracker.

    Record income and expenses, follow savings goals, summarize spending by
    category and export reports. `moneytrack serve` runs the REST API.
    """
    ctx.ensure_object(dict)
    ctx.obj.setdefault("clock", datetime.now)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
serve.register_commands(cli)
init_categories.register_commands(cli)
user.register_commands(cli)
add.register_commands(cli)
summary.register_commands(cli)
goal.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    load_dotenv()
    configure_logging()
    cli()


if __name__ == "__main__":
    main()
