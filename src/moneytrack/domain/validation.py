"""Field validation helpers shared by the domain services."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from moneytrack.domain.entities import CategoryKind, TransactionType
from moneytrack.domain.errors import (
    ValidationError,
    amount_negative,
    amount_not_positive,
    invalid_transaction_type,
)

CENT = Decimal("0.01")
# Amount columns are Numeric(12, 2): at most 10 integer digits
MAX_AMOUNT = Decimal("10000000000")


def to_amount(value, field_name: str) -> Decimal:
    """Coerce a numeric value to a Decimal rounded to cents.

    Raises:
        ValidationError: If the value is not a finite number below MAX_AMOUNT
    """
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
        if amount.is_finite() and abs(amount) < MAX_AMOUNT:
            return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number, got '{value}'")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a finite number")
    raise ValidationError(f"{field_name} must be less than {MAX_AMOUNT:,}")


def require_positive(value, field_name: str) -> Decimal:
    """Return the amount, raising if it is not greater than zero."""
    amount = to_amount(value, field_name)
    if amount <= 0:
        raise ValidationError(amount_not_positive(field_name, amount))
    return amount


def require_non_negative(value, field_name: str) -> Decimal:
    """Return the amount, raising if it is negative."""
    amount = to_amount(value, field_name)
    if amount < 0:
        raise ValidationError(amount_negative(field_name, amount))
    return amount


def require_text(value: Optional[str], field_name: str) -> str:
    """Return stripped text, raising if it is missing or blank."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def parse_transaction_type(value) -> TransactionType:
    """Convert a string to a TransactionType."""
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(str(value).strip().lower())
    except ValueError:
        raise ValidationError(invalid_transaction_type(value))


def parse_category_kind(value) -> CategoryKind:
    """Convert a string to a CategoryKind."""
    if isinstance(value, CategoryKind):
        return value
    try:
        return CategoryKind(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Kind must be 'income' or 'expense', got '{value}'")
