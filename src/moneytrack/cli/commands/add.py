"""Add transaction command."""

import click

from moneytrack.cli.date_filters import context_clock
from moneytrack.cli.error_handling import handle_domain_error
from moneytrack.domain.errors import DomainError
from moneytrack.domain.transaction import TransactionService
from moneytrack.utils.amount_parser import parse_amount
from moneytrack.utils.date_parser import parse_date


@click.command("add")
@click.option("--user", "user_id", type=int, required=True, help="User ID")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice(["income", "expense"], case_sensitive=False),
    required=True,
    help="Transaction type",
)
@click.option("--amount", required=True, help="Positive amount (e.g., 123.45 or '$1,200')")
@click.option("--description", required=True, help="Transaction description")
@click.option("--category", required=True, help="Category name (e.g., 'Food')")
@click.option(
    "--date",
    default="today",
    show_default=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.pass_context
def add_transaction(
    ctx,
    user_id: int,
    txn_type: str,
    amount: str,
    description: str,
    category: str,
    date: str,
):
    """Add a transaction.

    Examples:
        moneytrack add --user 1 --type expense --amount 42.50 --description "Groceries" --category Food
        moneytrack add --user 1 --type income --amount 3000 --description "March pay" --category Salary --date 2024-03-05
    """
    service = TransactionService(ctx.obj["db"])

    try:
        txn_date = parse_date(date, today=context_clock(ctx)().date())
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        transaction_id = service.create_transaction(
            user_id=user_id,
            txn_type=txn_type,
            amount=txn_amount,
            description=description,
            category=category,
            date=txn_date,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    txn = service.require_transaction(transaction_id)
    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Type: {txn.type.value}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Amount: ${txn.amount:,.2f}")
    click.echo(f"  Description: {txn.description}")
    click.echo(f"  Category: {txn.category}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
