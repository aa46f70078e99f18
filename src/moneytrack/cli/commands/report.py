"""Report export command."""

import csv
from pathlib import Path

import click

from moneytrack.cli.date_filters import date_range_options, resolve_cli_date_range
from moneytrack.cli.error_handling import handle_domain_error
from moneytrack.domain.errors import DomainError
from moneytrack.domain.report import ReportService

PAGE_SEPARATOR = "\f"


def write_text_report(path: Path, pages: list[list[str]]) -> None:
    """Write pages as plain text, separated by form feeds."""
    with open(path, "w", encoding="utf-8") as f:
        for number, lines in enumerate(pages, start=1):
            if number > 1:
                f.write(PAGE_SEPARATOR)
            for line in lines:
                f.write(line + "\n")
            f.write(f"\nPage {number} of {len(pages)}\n")


def write_sheet(path: Path, rows: list[list[str]]) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerows(rows)


@click.command("report")
@click.option("--user", "user_id", type=int, required=True, help="User ID")
@date_range_options
@click.option(
    "--type",
    "txn_type",
    type=click.Choice(["income", "expense"], case_sensitive=False),
    help="Only include one transaction type",
)
@click.option("--category", help="Only include one category")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "csv", "both"], case_sensitive=False),
    default="both",
    show_default=True,
    help="Paged text document, one CSV file per sheet, or both",
)
@click.option(
    "--no-transactions", is_flag=True, help="Leave out the detailed transaction listing"
)
@click.option(
    "--output",
    type=click.Path(),
    default="financial-report",
    show_default=True,
    help="Output path without extension",
)
@click.pass_context
def report(
    ctx,
    user_id: int,
    start_date: str | None,
    end_date: str | None,
    date_range: str | None,
    txn_type: str | None,
    category: str | None,
    output_format: str,
    no_transactions: bool,
    output: str,
):
    """Export a financial report.

    Examples:
        moneytrack report --user 1 --range this-year
        moneytrack report --user 1 --start-date 2024-01-01 --end-date 2024-03-31 --format csv
    """
    service = ReportService(ctx.obj["db"])

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, date_range=date_range
    )

    try:
        data = service.build_report(
            user_id, start_date=start, end_date=end, txn_type=txn_type, category=category
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    base = Path(output)
    if base.parent != Path("."):
        base.parent.mkdir(parents=True, exist_ok=True)
    include_transactions = not no_transactions
    written = []

    if output_format in ("text", "both"):
        text_path = base.with_name(base.name + ".txt")
        write_text_report(text_path, service.render_pages(data, include_transactions))
        written.append(text_path)

    if output_format in ("csv", "both"):
        for sheet_name, rows in service.render_sheets(data, include_transactions).items():
            sheet_path = base.with_name(f"{base.name}_{sheet_name.lower()}.csv")
            write_sheet(sheet_path, rows)
            written.append(sheet_path)

    click.echo(f"Report covers {data.summary.transaction_count} transactions.")
    for path in written:
        click.echo(f"  Wrote {path}")


def register_commands(cli):
    """Register report command with main CLI."""
    cli.add_command(report)
