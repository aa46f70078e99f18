"""Transaction domain service."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from moneytrack.database.base import Database
from moneytrack.domain import aggregation
from moneytrack.domain.entities import (
    BalancePoint,
    FinancialSummary,
    MonthlyTotal,
    Period,
    Transaction as TransactionEntity,
    TransactionType,
)
from moneytrack.domain.errors import (
    NotFoundError,
    ValidationError,
    transaction_not_found,
    user_not_found,
)
from moneytrack.domain.validation import (
    parse_transaction_type,
    require_positive,
    require_text,
)


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_user(self, user_id: int) -> None:
        if self.db.get_user(user_id) is None:
            raise NotFoundError(user_not_found(user_id))

    def _check_category_kind(self, category: str, txn_type: TransactionType) -> None:
        """Reject registered categories whose kind contradicts the transaction type."""
        registered = self.db.get_category_by_name(category)
        if registered is None:
            return
        if registered.kind.value != txn_type.value:
            raise ValidationError(
                f"Category '{category}' is an {registered.kind.value} category "
                f"and cannot be used for {txn_type.value} transactions"
            )

    def create_transaction(
        self,
        user_id: int,
        txn_type: TransactionType | str,
        amount: Decimal,
        description: str,
        category: str,
        date: date,
    ) -> int:
        """Create a transaction.

        Args:
            user_id: Owner user ID
            txn_type: "income" or "expense"
            amount: Positive amount
            description: Description text
            category: Category name
            date: Transaction date

        Returns:
            Transaction ID

        Raises:
            ValidationError: If a field is missing or invalid
            NotFoundError: If the user doesn't exist
        """
        txn_type = parse_transaction_type(txn_type)
        amount = require_positive(amount, "amount")
        description = require_text(description, "description")
        category = require_text(category, "category")
        if date is None:
            raise ValidationError("date is required")

        self._require_user(user_id)
        self._check_category_kind(category, txn_type)

        return self.db.create_transaction(
            user_id=user_id,
            txn_type=txn_type,
            amount=amount,
            description=description,
            category=category,
            date=date,
        )

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        """Get transaction by ID.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def update_transaction(
        self,
        transaction_id: int,
        txn_type: Optional[TransactionType | str] = None,
        amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
        date: Optional[date] = None,
    ) -> TransactionEntity:
        """Update transaction fields that are provided.

        Raises:
            NotFoundError: If the transaction doesn't exist
            ValidationError: If a provided field is invalid
        """
        existing = self.require_transaction(transaction_id)

        if txn_type is not None:
            txn_type = parse_transaction_type(txn_type)
        if amount is not None:
            amount = require_positive(amount, "amount")
        if description is not None:
            description = require_text(description, "description")
        if category is not None:
            category = require_text(category, "category")

        if txn_type is not None or category is not None:
            self._check_category_kind(category or existing.category, txn_type or existing.type)

        self.db.update_transaction(
            transaction_id=transaction_id,
            txn_type=txn_type,
            amount=amount,
            description=description,
            category=category,
            date=date,
        )
        return self.require_transaction(transaction_id)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        self.require_transaction(transaction_id)
        self.db.delete_transaction(transaction_id)

    def list_transactions(
        self,
        user_id: int,
        txn_type: Optional[TransactionType | str] = None,
        category: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[TransactionEntity]:
        """List a user's transactions, newest first.

        Args:
            user_id: Owner user ID
            txn_type: Optional type filter
            category: Optional category name filter
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
        """
        if txn_type is not None:
            txn_type = parse_transaction_type(txn_type)
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("start date must be on or before end date")
        return self.db.list_transactions(
            user_id=user_id,
            txn_type=txn_type,
            category=category,
            start_date=start_date,
            end_date=end_date,
        )

    def list_by_category(self, user_id: int, category: str) -> list[TransactionEntity]:
        """List a user's transactions in one category."""
        return self.list_transactions(user_id, category=category)

    def list_by_type(self, user_id: int, txn_type: TransactionType | str) -> list[TransactionEntity]:
        """List a user's income or expense transactions."""
        return self.list_transactions(user_id, txn_type=parse_transaction_type(txn_type))

    def get_summary(
        self,
        user_id: int,
        period: Period | str = Period.ALL,
        now: Optional[datetime] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> FinancialSummary:
        """Get income, expenses, balance and category breakdown for a user.

        Args:
            user_id: Owner user ID
            period: Period token relative to ``now``
            now: Reference time (defaults to the current time)
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date

        Returns:
            FinancialSummary for the matching transactions
        """
        period = aggregation.coerce_period(period)
        if now is None:
            now = datetime.now()
        transactions = self.list_transactions(user_id, start_date=start_date, end_date=end_date)
        return aggregation.build_summary(transactions, period, now)

    def recent_transactions(self, user_id: int, limit: int = 5) -> list[TransactionEntity]:
        """Most recent transactions of a user."""
        return aggregation.recent_transactions(self.list_transactions(user_id), limit)

    def monthly_totals(self, user_id: int, months: int = 6) -> list[MonthlyTotal]:
        """Income and expense per month for the last months with activity."""
        return aggregation.monthly_totals(self.list_transactions(user_id), months)

    def balance_evolution(self, user_id: int, limit: int = 30) -> list[BalancePoint]:
        """Running balance over a user's most recent transactions."""
        return aggregation.balance_evolution(self.list_transactions(user_id), limit)
