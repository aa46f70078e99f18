"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so string columns become domain
enums and Decimal amounts before leaving the database package.
"""

from decimal import Decimal

from moneytrack.domain import entities as domain
from moneytrack.database.models import (
    User as ORMUser,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    Goal as ORMGoal,
)


def _decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        name=orm_user.name,
        email=orm_user.email,
        password_hash=orm_user.password_hash,
        created_at=orm_user.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        kind=domain.CategoryKind(orm_category.kind),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        user_id=orm_transaction.user_id,
        type=domain.TransactionType(orm_transaction.type),
        amount=_decimal(orm_transaction.amount),
        description=orm_transaction.description,
        category=orm_transaction.category,
        date=orm_transaction.date,
        created_at=orm_transaction.created_at,
    )


def goal_to_domain(orm_goal: ORMGoal) -> domain.Goal:
    """Convert SQLAlchemy Goal model to domain Goal entity."""
    return domain.Goal(
        id=orm_goal.id,
        user_id=orm_goal.user_id,
        title=orm_goal.title,
        target_amount=_decimal(orm_goal.target_amount),
        current_amount=_decimal(orm_goal.current_amount),
        deadline=orm_goal.deadline,
        created_at=orm_goal.created_at,
        description=orm_goal.description,
    )
