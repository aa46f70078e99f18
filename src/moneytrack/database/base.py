"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from moneytrack.domain.entities import (
    Category,
    CategoryKind,
    Goal,
    Transaction,
    TransactionType,
    User,
)


class Database(ABC):
    """Abstract database interface for moneytrack."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, name: str, email: str, password_hash: str) -> int:
        """Create a user. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        pass

    @abstractmethod
    def list_users(self) -> list[User]:
        """List all users ordered by ID."""
        pass

    @abstractmethod
    def update_user(
        self,
        user_id: int,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password_hash: Optional[str] = None,
    ) -> None:
        """Update user fields that are not None."""
        pass

    @abstractmethod
    def delete_user(self, user_id: int) -> None:
        """Delete a user together with its transactions and goals."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, name: str, kind: CategoryKind) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name."""
        pass

    @abstractmethod
    def list_categories(self, kind: Optional[CategoryKind] = None) -> list[Category]:
        """List categories, optionally filtered by kind."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        user_id: int,
        txn_type: TransactionType,
        amount: Decimal,
        description: str,
        category: str,
        date: date,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        user_id: Optional[int] = None,
        txn_type: Optional[TransactionType] = None,
        category: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """List transactions newest first with optional filters.

        Args:
            user_id: Optional owner filter
            txn_type: Optional income/expense filter
            category: Optional exact category name filter
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
        """
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        txn_type: Optional[TransactionType] = None,
        amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
        date: Optional[date] = None,
    ) -> None:
        """Update transaction fields that are not None."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    # Goal operations
    @abstractmethod
    def create_goal(
        self,
        user_id: int,
        title: str,
        target_amount: Decimal,
        current_amount: Decimal,
        deadline: date,
        description: Optional[str] = None,
    ) -> int:
        """Create a goal. Returns goal ID."""
        pass

    @abstractmethod
    def get_goal(self, goal_id: int) -> Optional[Goal]:
        """Get goal by ID."""
        pass

    @abstractmethod
    def list_goals(
        self,
        user_id: int,
        deadline_from: Optional[date] = None,
        deadline_to: Optional[date] = None,
    ) -> list[Goal]:
        """List a user's goals ordered by deadline, optionally within a deadline window."""
        pass

    @abstractmethod
    def update_goal(
        self,
        goal_id: int,
        title: Optional[str] = None,
        target_amount: Optional[Decimal] = None,
        current_amount: Optional[Decimal] = None,
        deadline: Optional[date] = None,
        description: Optional[str] = None,
    ) -> None:
        """Update goal fields that are not None."""
        pass

    @abstractmethod
    def delete_goal(self, goal_id: int) -> None:
        """Delete a goal."""
        pass

    @abstractmethod
    def compare_and_set_goal_amount(
        self, goal_id: int, expected: Decimal, new_amount: Decimal
    ) -> bool:
        """Atomically set current_amount if it still equals ``expected``.

        Returns:
            True if the row was updated, False if the stored amount changed
            (or the goal no longer exists)
        """
        pass
