"""Request and response models for the REST API.

JSON uses camelCase keys; models also accept snake_case field names.
Amounts are accepted as numbers or numeric strings and returned as numbers.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from moneytrack.domain.entities import (
    Category,
    CategoryTotal,
    FinancialSummary,
    Goal,
    GoalProgress,
    Transaction,
    User,
)
from moneytrack.utils.date_parser import parse_date


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _coerce_date(value: Any) -> Any:
    if isinstance(value, str) and value.strip():
        text = value.strip()
        # ISO timestamps (e.g. from JS clients): keep the calendar date
        if len(text) > 10 and text[10] in "Tt ":
            text = text[:10]
        return parse_date(text)
    return value


# Users

class UserCreate(CamelModel):
    name: str
    email: str
    password: str


class UserUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserOut(CamelModel):
    id: int
    name: str
    email: str
    created_at: dt.datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserOut":
        return cls(id=user.id, name=user.name, email=user.email, created_at=user.created_at)


# Categories

class CategoryCreate(CamelModel):
    name: str
    kind: str


class CategoryOut(CamelModel):
    id: Optional[int] = None
    name: str
    kind: str

    @classmethod
    def from_entity(cls, category: Category) -> "CategoryOut":
        return cls(id=category.id, name=category.name, kind=category.kind.value)


# Transactions

class TransactionCreate(CamelModel):
    user_id: int
    type: str
    amount: Decimal
    description: str
    category: str
    date: dt.date

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        return _coerce_date(value)


class TransactionUpdate(CamelModel):
    type: Optional[str] = None
    amount: Optional[Decimal] = None
    description: Optional[str] = None
    category: Optional[str] = None
    date: Optional[dt.date] = None

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        return _coerce_date(value)


class TransactionOut(CamelModel):
    id: int
    user_id: Optional[int] = None
    type: str
    amount: float
    description: str
    category: str
    date: dt.date
    created_at: dt.datetime

    @classmethod
    def from_entity(cls, txn: Transaction) -> "TransactionOut":
        return cls(
            id=txn.id,
            user_id=txn.user_id,
            type=txn.type.value,
            amount=float(txn.amount),
            description=txn.description,
            category=txn.category,
            date=txn.date,
            created_at=txn.created_at,
        )


class CategoryTotalOut(CamelModel):
    category: str
    amount: float
    percentage: float


class SummaryOut(CamelModel):
    period: str
    total_income: float
    total_expenses: float
    balance: float
    transaction_count: int
    expenses_by_category: list[CategoryTotalOut]

    @classmethod
    def from_summary(cls, summary: FinancialSummary, period: str) -> "SummaryOut":
        return cls(
            period=period,
            total_income=float(summary.total_income),
            total_expenses=float(summary.total_expenses),
            balance=float(summary.balance),
            transaction_count=summary.transaction_count,
            expenses_by_category=[_category_total_out(t) for t in summary.expenses_by_category],
        )


def _category_total_out(total: CategoryTotal) -> CategoryTotalOut:
    return CategoryTotalOut(
        category=total.category,
        amount=float(total.amount),
        percentage=round(float(total.percentage), 2),
    )


# Goals

class GoalCreate(CamelModel):
    user_id: int
    title: str
    target_amount: Decimal
    deadline: dt.date
    current_amount: Decimal = Decimal("0")
    description: Optional[str] = None

    @field_validator("deadline", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        return _coerce_date(value)


class GoalUpdate(CamelModel):
    title: Optional[str] = None
    target_amount: Optional[Decimal] = None
    current_amount: Optional[Decimal] = None
    deadline: Optional[dt.date] = None
    description: Optional[str] = None

    @field_validator("deadline", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        return _coerce_date(value)


class ProgressAmount(CamelModel):
    amount: Decimal


class GoalOut(CamelModel):
    id: int
    user_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    target_amount: float
    current_amount: float
    deadline: dt.date
    created_at: dt.datetime

    @classmethod
    def from_entity(cls, goal: Goal) -> "GoalOut":
        return cls(
            id=goal.id,
            user_id=goal.user_id,
            title=goal.title,
            description=goal.description,
            target_amount=float(goal.target_amount),
            current_amount=float(goal.current_amount),
            deadline=goal.deadline,
            created_at=goal.created_at,
        )


class GoalProgressOut(GoalOut):
    progress: float
    is_completed: bool
    days_remaining: int
    amount_remaining: float
    status: str
    just_completed: bool = False

    @classmethod
    def from_progress(cls, snapshot: GoalProgress, just_completed: bool = False) -> "GoalProgressOut":
        goal = GoalOut.from_entity(snapshot.goal)
        return cls(
            **goal.model_dump(),
            progress=round(float(snapshot.progress), 2),
            is_completed=snapshot.is_completed,
            days_remaining=snapshot.days_remaining,
            amount_remaining=float(snapshot.amount_remaining),
            status=snapshot.status.value,
            just_completed=just_completed,
        )
