"""CLI error handling helpers."""

import logging

import click

from moneytrack.domain.errors import ConflictError, DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Print the error to stderr and exit with status 1.

    Conflicts from concurrent goal updates are transient, so they carry a
    hint to run the command again.
    """
    logger.debug("%s failed: %r", ctx.command_path, error)
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, ConflictError) and "modified concurrently" in str(error):
        click.echo("Run the command again to retry.", err=True)
    ctx.exit(1)
