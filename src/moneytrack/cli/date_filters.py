"""CLI helpers for the reference clock and date range resolution."""

from datetime import date, datetime
from typing import Callable

import click

from moneytrack.utils.date_parser import get_date_range, parse_date

DATE_RANGES = ("this-month", "this-year", "this-week", "last-month", "last-year", "last-week")


def context_clock(ctx) -> Callable[[], datetime]:
    """Clock stored on the CLI context, or datetime.now."""
    return (ctx.obj or {}).get("clock", datetime.now)


def date_range_options(command):
    """Attach --start-date, --end-date and --range options to a command."""
    command = click.option(
        "--range",
        "date_range",
        type=click.Choice(DATE_RANGES, case_sensitive=False),
        help="Named calendar range (cannot be combined with --start-date/--end-date)",
    )(command)
    command = click.option(
        "--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')"
    )(command)
    command = click.option(
        "--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')"
    )(command)
    return command


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    date_range: str | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from a named range or explicit dates."""
    today = context_clock(ctx)().date()
    if date_range and (start_date or end_date):
        click.echo(
            "Error: --range cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if date_range:
        return get_date_range(date_range, today=today)

    start = None
    end = None

    if start_date:
        try:
            start = parse_date(start_date, today=today)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date, today=today)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date must be on or before end date.", err=True)
        ctx.exit(1)

    return start, end
