"""Domain model entities for moneytrack.

These are pure data classes representing business concepts, independent of
database schema. The same entities flow through the SQLAlchemy storage layer,
the client state store and the report builders, so aggregation logic only
ever sees these types.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of money flow for a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class CategoryKind(str, Enum):
    """Whether a category labels income or expense transactions."""

    INCOME = "income"
    EXPENSE = "expense"


class Period(str, Enum):
    """Time window relative to a reference time."""

    ALL = "all"
    MONTH = "month"
    YEAR = "year"


class GoalStatus(str, Enum):
    """Goal status, evaluated in declaration order."""

    COMPLETED = "completed"
    OVERDUE = "overdue"
    URGENT = "urgent"
    ACTIVE = "active"


@dataclass(frozen=True)
class User:
    """User domain entity."""

    id: int
    name: str
    email: str
    password_hash: str
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category label with an explicit income/expense kind."""

    name: str
    kind: CategoryKind
    id: Optional[int] = None


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    user_id: Optional[int]
    type: TransactionType
    amount: Decimal
    description: str
    category: str
    date: date
    created_at: datetime


@dataclass(frozen=True)
class Goal:
    """Savings goal domain entity."""

    id: int
    user_id: Optional[int]
    title: str
    target_amount: Decimal
    current_amount: Decimal
    deadline: date
    created_at: datetime
    description: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.current_amount >= self.target_amount


@dataclass(frozen=True)
class CategoryTotal:
    """Summed expense amount for a single category."""

    category: str
    amount: Decimal
    percentage: Decimal = Decimal("0")


@dataclass(frozen=True)
class MonthlyTotal:
    """Income and expense totals for a YYYY-MM period key."""

    month: str
    income: Decimal
    expense: Decimal


@dataclass(frozen=True)
class BalancePoint:
    """Running balance after a single transaction."""

    date: date
    balance: Decimal
    amount: Decimal


@dataclass(frozen=True)
class FinancialSummary:
    """Aggregated totals over a filtered set of transactions."""

    total_income: Decimal
    total_expenses: Decimal
    balance: Decimal
    transaction_count: int
    expenses_by_category: tuple[CategoryTotal, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class GoalProgress:
    """Derived progress snapshot of a goal at a reference time."""

    goal: Goal
    progress: Decimal
    is_completed: bool
    days_remaining: int
    amount_remaining: Decimal
    status: GoalStatus


@dataclass(frozen=True)
class ContributionResult:
    """Outcome of adding money to a goal."""

    goal: Goal
    completed_now: bool
