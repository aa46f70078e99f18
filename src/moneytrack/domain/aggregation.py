"""Pure aggregation functions over transactions.

Every function takes the transactions to aggregate and, where relevant, the
reference time ``now`` explicitly. Nothing here reads the wall clock, so
results are reproducible for a fixed ``now``.
"""

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from moneytrack.domain.entities import (
    BalancePoint,
    CategoryTotal,
    FinancialSummary,
    MonthlyTotal,
    Period,
    Transaction,
    TransactionType,
)
from moneytrack.domain.errors import ValidationError

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def coerce_period(period: Period | str) -> Period:
    """Convert a period token into a Period, rejecting unknown tokens."""
    if isinstance(period, Period):
        return period
    try:
        return Period(str(period).strip().lower())
    except ValueError:
        raise ValidationError(
            f"Unknown period '{period}'. Supported periods: all, month, year"
        )


def matches_period(txn_date: date, period: Period | str, now: datetime) -> bool:
    """Return whether a date falls in the period relative to ``now``."""
    period = coerce_period(period)
    if period == Period.ALL:
        return True
    if period == Period.MONTH:
        return txn_date.year == now.year and txn_date.month == now.month
    return txn_date.year == now.year


def filter_transactions(
    transactions: Iterable[Transaction],
    period: Period | str = Period.ALL,
    now: Optional[datetime] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    txn_type: Optional[TransactionType] = None,
    category: Optional[str] = None,
) -> list[Transaction]:
    """Filter transactions by period, inclusive date range, type and category.

    Args:
        transactions: Transactions to filter
        period: Period token relative to ``now``
        now: Reference time; required unless period is ``all``
        start_date: Optional inclusive lower bound
        end_date: Optional inclusive upper bound
        txn_type: Optional transaction type
        category: Optional exact category name

    Returns:
        Matching transactions in their original order
    """
    period = coerce_period(period)
    if period != Period.ALL and now is None:
        raise ValueError("A reference time is required for period filtering")

    result = []
    for txn in transactions:
        if period != Period.ALL and not matches_period(txn.date, period, now):
            continue
        if start_date is not None and txn.date < start_date:
            continue
        if end_date is not None and txn.date > end_date:
            continue
        if txn_type is not None and txn.type != txn_type:
            continue
        if category is not None and txn.category != category:
            continue
        result.append(txn)
    return result


def _sum_by_type(
    transactions: Iterable[Transaction],
    txn_type: TransactionType,
    period: Period | str,
    now: Optional[datetime],
) -> Decimal:
    return sum(
        (txn.amount for txn in filter_transactions(transactions, period, now, txn_type=txn_type)),
        ZERO,
    )


def total_income(
    transactions: Iterable[Transaction],
    period: Period | str = Period.ALL,
    now: Optional[datetime] = None,
) -> Decimal:
    """Sum income amounts within the period."""
    return _sum_by_type(transactions, TransactionType.INCOME, period, now)


def total_expenses(
    transactions: Iterable[Transaction],
    period: Period | str = Period.ALL,
    now: Optional[datetime] = None,
) -> Decimal:
    """Sum expense amounts within the period."""
    return _sum_by_type(transactions, TransactionType.EXPENSE, period, now)


def balance(
    transactions: Sequence[Transaction],
    period: Period | str = Period.ALL,
    now: Optional[datetime] = None,
) -> Decimal:
    """Income minus expenses within the period."""
    return total_income(transactions, period, now) - total_expenses(transactions, period, now)


def percentage(part: Decimal, total: Decimal) -> Decimal:
    """Return ``part`` as a percentage of ``total``; 0 when total is 0."""
    if total == 0:
        return ZERO
    return part / total * HUNDRED


def expenses_by_category(
    transactions: Iterable[Transaction],
    period: Period | str = Period.ALL,
    now: Optional[datetime] = None,
) -> list[CategoryTotal]:
    """Group expenses within the period by category.

    The result is in first-seen order; use ``sort_by_amount`` for display.
    """
    expenses = filter_transactions(transactions, period, now, txn_type=TransactionType.EXPENSE)
    totals: dict[str, Decimal] = {}
    for txn in expenses:
        totals[txn.category] = totals.get(txn.category, ZERO) + txn.amount

    grand_total = sum(totals.values(), ZERO)
    return [
        CategoryTotal(category=name, amount=amount, percentage=percentage(amount, grand_total))
        for name, amount in totals.items()
    ]


def sort_by_amount(totals: Iterable[CategoryTotal]) -> list[CategoryTotal]:
    """Sort category totals by amount descending, then by name."""
    return sorted(totals, key=lambda total: (-total.amount, total.category))


def recent_transactions(transactions: Iterable[Transaction], limit: int = 5) -> list[Transaction]:
    """Return the most recent transactions, newest first."""
    ordered = sorted(transactions, key=lambda txn: (txn.date, txn.id), reverse=True)
    return ordered[: max(limit, 0)]


def monthly_totals(transactions: Iterable[Transaction], months: int = 6) -> list[MonthlyTotal]:
    """Income and expense per YYYY-MM key for the last ``months`` keys present."""
    income: dict[str, Decimal] = defaultdict(lambda: ZERO)
    expense: dict[str, Decimal] = defaultdict(lambda: ZERO)
    keys = set()

    for txn in transactions:
        key = txn.date.strftime("%Y-%m")
        keys.add(key)
        if txn.type == TransactionType.INCOME:
            income[key] += txn.amount
        else:
            expense[key] += txn.amount

    ordered = sorted(keys)[-months:] if months > 0 else []
    return [MonthlyTotal(month=key, income=income[key], expense=expense[key]) for key in ordered]


def balance_evolution(transactions: Iterable[Transaction], limit: int = 30) -> list[BalancePoint]:
    """Running balance after each transaction in chronological order."""
    running = ZERO
    points = []
    for txn in sorted(transactions, key=lambda t: (t.date, t.id)):
        signed = txn.amount if txn.type == TransactionType.INCOME else -txn.amount
        running += signed
        points.append(BalancePoint(date=txn.date, balance=running, amount=signed))
    return points[-limit:] if limit > 0 else []


def build_summary(
    transactions: Sequence[Transaction],
    period: Period | str = Period.ALL,
    now: Optional[datetime] = None,
) -> FinancialSummary:
    """Build totals, balance and sorted category breakdown for the period."""
    in_period = filter_transactions(transactions, period, now)
    income = total_income(in_period)
    expenses = total_expenses(in_period)
    return FinancialSummary(
        total_income=income,
        total_expenses=expenses,
        balance=income - expenses,
        transaction_count=len(in_period),
        expenses_by_category=tuple(sort_by_amount(expenses_by_category(in_period))),
    )
