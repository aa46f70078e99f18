"""Run the REST API server."""

import os

import click
import uvicorn

from moneytrack.api import create_app
from moneytrack.cli.date_filters import context_clock


@click.command("serve")
@click.option("--host", default=lambda: os.getenv("MONEYTRACK_HOST", "127.0.0.1"), help="Bind address")
@click.option(
    "--port",
    type=int,
    default=lambda: int(os.getenv("MONEYTRACK_PORT", "8000")),
    help="Bind port",
)
@click.pass_context
def serve(ctx, host: str, port: int):
    """Serve the REST API.

    Examples:
        moneytrack serve
        moneytrack --db-path ./finance.db serve --port 5000
    """
    app = create_app(ctx.obj["db"], clock=context_clock(ctx))
    click.echo(f"Serving moneytrack API on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_config=None)


def register_commands(cli):
    """Register serve command with main CLI."""
    cli.add_command(serve)
