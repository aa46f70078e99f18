"""User management commands."""

import click

from moneytrack.cli.error_handling import handle_domain_error
from moneytrack.domain.errors import DomainError
from moneytrack.domain.user import UserService


@click.group()
def user_group():
    """Manage users."""
    pass


@user_group.command("create")
@click.argument("name", metavar="NAME")
@click.argument("email", metavar="EMAIL")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Password (prompted when omitted)",
)
@click.pass_context
def create_user(ctx, name: str, email: str, password: str):
    """Create a new user.

    Examples:
        moneytrack user create "Ana Souza" ana@example.com
        moneytrack user create "Bob" bob@example.com --password secret
    """
    service = UserService(ctx.obj["db"])

    try:
        user_id = service.create_user(name=name, email=email, password=password)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created user '{name}' (ID: {user_id})")


@user_group.command("list")
@click.pass_context
def list_users(ctx):
    """List all users."""
    service = UserService(ctx.obj["db"])

    users = service.list_users()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\nUsers:")
    click.echo("-" * 60)
    for user in users:
        click.echo(f"ID: {user.id:3d} | {user.name:20s} | {user.email}")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
