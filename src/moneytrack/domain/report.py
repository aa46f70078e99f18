"""Report building: filtered stats rendered as paged text or tabular sheets."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from moneytrack.database.base import Database
from moneytrack.domain import aggregation
from moneytrack.domain.entities import FinancialSummary, Transaction, TransactionType
from moneytrack.domain.errors import NotFoundError, ValidationError, user_not_found
from moneytrack.domain.validation import parse_transaction_type

# Vertical layout of the paged document, in layout units
PAGE_TOP = 20
PAGE_BREAK_AT = 250
TITLE_ADVANCE = 20
PERIOD_ADVANCE = 15
HEADING_ADVANCE = 15
LINE_ADVANCE = 10
SECTION_GAP = 20
CATEGORY_SECTION_GAP = 15
ENTRY_FIRST_LINE_ADVANCE = 7
ENTRY_SECOND_LINE_ADVANCE = 12

SUMMARY_SHEET = "Summary"
TRANSACTIONS_SHEET = "Transactions"


def format_money(amount: Decimal) -> str:
    return f"${amount:,.2f}"


def format_percentage(value: Decimal) -> str:
    return f"{value:.1f}%"


@dataclass(frozen=True)
class ReportData:
    """Filtered transactions and their stats."""

    transactions: tuple[Transaction, ...]
    summary: FinancialSummary
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def period_label(self) -> Optional[str]:
        if self.start_date is None and self.end_date is None:
            return None
        start = self.start_date.isoformat() if self.start_date else "beginning"
        end = self.end_date.isoformat() if self.end_date else "today"
        return f"Period: {start} to {end}"


class _PageWriter:
    """Accumulates lines into pages using a vertical cursor."""

    def __init__(self):
        self.pages: list[list[str]] = [[]]
        self.cursor = PAGE_TOP

    def write(self, text: str, advance: int) -> None:
        self.pages[-1].append(text)
        self.cursor += advance

    def skip(self, advance: int) -> None:
        self.cursor += advance

    def break_if_needed(self) -> None:
        if self.cursor > PAGE_BREAK_AT:
            self.pages.append([])
            self.cursor = PAGE_TOP


class ReportService:
    """Service for building exportable financial reports."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def build_report(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        txn_type: Optional[TransactionType | str] = None,
        category: Optional[str] = None,
    ) -> ReportData:
        """Collect a user's transactions matching the filters and compute stats.

        Raises:
            NotFoundError: If the user doesn't exist
            ValidationError: If the date range is inverted or the type unknown
        """
        if self.db.get_user(user_id) is None:
            raise NotFoundError(user_not_found(user_id))
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("start date must be on or before end date")
        if txn_type is not None:
            txn_type = parse_transaction_type(txn_type)

        transactions = aggregation.filter_transactions(
            self.db.list_transactions(user_id=user_id),
            start_date=start_date,
            end_date=end_date,
            txn_type=txn_type,
            category=category,
        )
        return ReportData(
            transactions=tuple(transactions),
            summary=aggregation.build_summary(transactions),
            start_date=start_date,
            end_date=end_date,
        )

    def render_pages(self, report: ReportData, include_transactions: bool = True) -> list[list[str]]:
        """Render the report as pages of text lines."""
        summary = report.summary
        writer = _PageWriter()

        writer.write("Financial Report", TITLE_ADVANCE)
        if report.period_label:
            writer.write(report.period_label, PERIOD_ADVANCE)

        writer.write("Financial Summary", HEADING_ADVANCE)
        writer.write(f"Income: {format_money(summary.total_income)}", LINE_ADVANCE)
        writer.write(f"Expenses: {format_money(summary.total_expenses)}", LINE_ADVANCE)
        writer.write(f"Balance: {format_money(summary.balance)}", LINE_ADVANCE)
        writer.write(f"Total Transactions: {summary.transaction_count}", LINE_ADVANCE)
        writer.skip(SECTION_GAP)

        if summary.expenses_by_category:
            writer.write("Expenses by Category", HEADING_ADVANCE)
            for total in summary.expenses_by_category:
                share = aggregation.percentage(total.amount, summary.total_expenses)
                writer.write(
                    f"{total.category}: {format_money(total.amount)} ({format_percentage(share)})",
                    LINE_ADVANCE,
                )
            writer.skip(CATEGORY_SECTION_GAP)

        if include_transactions and report.transactions:
            writer.write("Detailed Transactions", HEADING_ADVANCE)
            for index, txn in enumerate(report.transactions, start=1):
                writer.break_if_needed()
                sign = "+" if txn.type == TransactionType.INCOME else "-"
                label = "Income" if txn.type == TransactionType.INCOME else "Expense"
                writer.write(f"{index}. {txn.description}", ENTRY_FIRST_LINE_ADVANCE)
                writer.write(
                    f"   {label} - {txn.category} - {txn.date.isoformat()} - "
                    f"{sign}{format_money(txn.amount)}",
                    ENTRY_SECOND_LINE_ADVANCE,
                )

        return writer.pages

    def render_sheets(
        self, report: ReportData, include_transactions: bool = True
    ) -> dict[str, list[list[str]]]:
        """Render the report as named sheets of rows."""
        summary = report.summary
        summary_rows = [
            ["Period Summary"],
            ["Income", format_money(summary.total_income)],
            ["Expenses", format_money(summary.total_expenses)],
            ["Balance", format_money(summary.balance)],
            ["Transactions", str(summary.transaction_count)],
            [],
            ["Expenses by Category"],
            ["Category", "Amount", "Percentage"],
        ]
        for total in summary.expenses_by_category:
            share = aggregation.percentage(total.amount, summary.total_expenses)
            summary_rows.append(
                [total.category, format_money(total.amount), format_percentage(share)]
            )

        sheets = {SUMMARY_SHEET: summary_rows}

        if include_transactions and report.transactions:
            rows = [["Date", "Description", "Category", "Type", "Amount"]]
            for txn in report.transactions:
                signed = txn.amount if txn.type == TransactionType.INCOME else -txn.amount
                rows.append(
                    [
                        txn.date.isoformat(),
                        txn.description,
                        txn.category,
                        "Income" if txn.type == TransactionType.INCOME else "Expense",
                        f"{signed:.2f}",
                    ]
                )
            sheets[TRANSACTIONS_SHEET] = rows

        return sheets
