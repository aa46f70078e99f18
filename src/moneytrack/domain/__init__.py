"""Domain layer for moneytrack application.

Services live in their own modules (``moneytrack.domain.transaction`` etc.)
and are imported from there; this package only re-exports the error types.
"""

from moneytrack.domain.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
]
