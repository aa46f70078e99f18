"""FastAPI dependencies shared by the route modules."""

from datetime import date, datetime
from typing import Callable, Optional

from fastapi import Depends, Request

from moneytrack.database.base import Database
from moneytrack.domain.category import CategoryService
from moneytrack.domain.errors import ValidationError
from moneytrack.domain.goal import GoalService
from moneytrack.domain.transaction import TransactionService
from moneytrack.domain.user import UserService
from moneytrack.utils.date_parser import parse_date


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_clock(request: Request) -> Callable[[], datetime]:
    return request.app.state.clock


def get_user_service(db: Database = Depends(get_db)) -> UserService:
    return UserService(db)


def get_category_service(db: Database = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


def get_transaction_service(db: Database = Depends(get_db)) -> TransactionService:
    return TransactionService(db)


def get_goal_service(
    db: Database = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> GoalService:
    return GoalService(db, clock=clock)


def parse_query_date(value: Optional[str], field_name: str) -> Optional[date]:
    """Parse an optional date query parameter.

    Raises:
        ValidationError: If the value is not a recognizable date
    """
    if value is None or not value.strip():
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {field_name}: {e}")
