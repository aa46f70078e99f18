"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from moneytrack.database.models import (
    User as ORMUser,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    Goal as ORMGoal,
)
from moneytrack.database.mappers import (
    user_to_domain,
    category_to_domain,
    transaction_to_domain,
    goal_to_domain,
)
from moneytrack.domain.entities import (
    Category,
    CategoryKind,
    Goal,
    Transaction,
    TransactionType,
    User,
)


class TestUserMapper:
    """Tests for User mapper."""

    def test_user_to_domain(self):
        """Test converting ORM User to domain User."""
        orm_user = ORMUser(
            id=1,
            name="Ana",
            email="ana@example.com",
            password_hash="hash",
            created_at=datetime.now(UTC),
        )
        domain_user = user_to_domain(orm_user)

        assert isinstance(domain_user, User)
        assert domain_user.email == "ana@example.com"
        assert domain_user.created_at == orm_user.created_at


class TestCategoryMapper:
    """Tests for Category mapper."""

    def test_category_kind_becomes_enum(self):
        orm_category = ORMCategory(id=3, name="Salary", kind="income")
        domain_category = category_to_domain(orm_category)

        assert isinstance(domain_category, Category)
        assert domain_category.kind is CategoryKind.INCOME
        assert domain_category.id == 3


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_transaction_to_domain(self):
        """Test converting ORM Transaction to domain Transaction."""
        orm_txn = ORMTransaction(
            id=7,
            user_id=1,
            type="expense",
            amount=Decimal("45.20"),
            description="Groceries",
            category="Food",
            date=date(2024, 1, 10),
            created_at=datetime.now(UTC),
        )
        txn = transaction_to_domain(orm_txn)

        assert isinstance(txn, Transaction)
        assert txn.type is TransactionType.EXPENSE
        assert txn.amount == Decimal("45.20")
        assert txn.date == date(2024, 1, 10)

    def test_float_amount_becomes_decimal(self):
        orm_txn = ORMTransaction(
            id=1,
            user_id=1,
            type="income",
            amount=12.5,
            description="Tip",
            category="Other",
            date=date(2024, 1, 1),
            created_at=datetime.now(UTC),
        )
        assert transaction_to_domain(orm_txn).amount == Decimal("12.5")


class TestGoalMapper:
    """Tests for Goal mapper."""

    def test_goal_to_domain(self):
        orm_goal = ORMGoal(
            id=2,
            user_id=1,
            title="Car",
            target_amount=Decimal("5000.00"),
            current_amount=Decimal("1250.00"),
            deadline=date(2025, 1, 1),
            description=None,
            created_at=datetime.now(UTC),
        )
        goal = goal_to_domain(orm_goal)

        assert isinstance(goal, Goal)
        assert goal.current_amount == Decimal("1250.00")
        assert goal.description is None
        assert not goal.is_completed
