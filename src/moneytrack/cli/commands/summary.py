"""Summary command."""

import click

from moneytrack.cli.date_filters import (
    context_clock,
    date_range_options,
    resolve_cli_date_range,
)
from moneytrack.cli.error_handling import handle_domain_error
from moneytrack.domain import aggregation
from moneytrack.domain.errors import DomainError
from moneytrack.domain.transaction import TransactionService


def _display_category_breakdown(summary) -> None:
    """Display expense categories sorted by value (highest first)."""
    if not summary.expenses_by_category:
        click.echo("No expenses in this period.")
        return

    for total in aggregation.sort_by_amount(summary.expenses_by_category):
        total_str = f"${total.amount:,.2f}"
        click.echo(f"{total.category:<30} {total_str:>15} {total.percentage:>6.1f}%")


@click.command("summary")
@click.option("--user", "user_id", type=int, required=True, help="User ID")
@click.option(
    "--period",
    type=click.Choice(["all", "month", "year"], case_sensitive=False),
    default="all",
    show_default=True,
    help="Only include the current month or year",
)
@date_range_options
@click.option("--recent", type=int, default=0, help="Also list the N most recent transactions")
@click.option("--monthly", is_flag=True, help="Also show income and expenses of the last 6 months")
@click.pass_context
def summary(
    ctx,
    user_id: int,
    period: str,
    start_date: str | None,
    end_date: str | None,
    date_range: str | None,
    recent: int,
    monthly: bool,
):
    """Show income, expenses, balance and spending by category.

    Examples:
        moneytrack summary --user 1
        moneytrack summary --user 1 --period month
        moneytrack summary --user 1 --range last-month --recent 5
    """
    service = TransactionService(ctx.obj["db"])

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, date_range=date_range
    )

    try:
        result = service.get_summary(
            user_id, period=period, now=context_clock(ctx)(), start_date=start, end_date=end
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Income:       ${result.total_income:,.2f}")
    click.echo(f"Expenses:     ${result.total_expenses:,.2f}")
    click.echo(f"Balance:      ${result.balance:,.2f}")
    click.echo(f"Transactions: {result.transaction_count}")
    click.echo("\nExpenses by category:")
    click.echo("-" * 53)
    _display_category_breakdown(result)

    if monthly:
        click.echo("\nMonthly totals:")
        click.echo("-" * 53)
        for month in service.monthly_totals(user_id):
            click.echo(
                f"{month.month}  income ${month.income:>12,.2f}  expense ${month.expense:>12,.2f}"
            )

    if recent > 0:
        click.echo("\nRecent transactions:")
        click.echo("-" * 53)
        for txn in service.recent_transactions(user_id, limit=recent):
            sign = "+" if txn.type.value == "income" else "-"
            click.echo(
                f"{txn.date}  {txn.description[:24]:<24} {txn.category:<14} {sign}${txn.amount:,.2f}"
            )


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
