"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or a lost update."""


def user_not_found(user_id: int) -> str:
    """Return message for missing user."""
    return f"User {user_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def goal_not_found(goal_id: int) -> str:
    """Return message for missing goal."""
    return f"Goal {goal_id} not found"


def email_in_use(email: str) -> str:
    """Return message for a duplicate user email."""
    return f"Email '{email}' is already in use"


def category_exists(name: str) -> str:
    """Return message for a duplicate category name."""
    return f"Category '{name}' already exists"


def invalid_transaction_type(value: str) -> str:
    """Return message for an unknown transaction type."""
    return f"Type must be 'income' or 'expense', got '{value}'"


def amount_not_positive(field_name: str, amount: Decimal) -> str:
    """Return message for an amount that must be greater than zero."""
    return f"{field_name} must be a positive number, got {amount}"


def amount_negative(field_name: str, amount: Decimal) -> str:
    """Return message for an amount that must not be negative."""
    return f"{field_name} must be a non-negative number, got {amount}"
