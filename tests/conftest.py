"""Shared pytest fixtures for moneytrack tests."""

import tempfile
import os
from datetime import date, datetime
from decimal import Decimal
import pytest

from moneytrack.database.factories import create_sqlite_database
from moneytrack.domain.category import CategoryService
from moneytrack.domain.goal import GoalService
from moneytrack.domain.report import ReportService
from moneytrack.domain.transaction import TransactionService
from moneytrack.domain.user import UserService

# Reference time for everything date-dependent
NOW = datetime(2024, 1, 15, 12, 0, 0)


def fixed_clock():
    return NOW


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def clock():
    """Return a clock frozen at NOW."""
    return fixed_clock


@pytest.fixture
def user_service(temp_db):
    """Create a UserService with a temporary database."""
    return UserService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def goal_service(temp_db, clock):
    """Create a GoalService with a temporary database and fixed clock."""
    return GoalService(temp_db, clock=clock)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def sample_user(user_service):
    """Create a sample user for testing."""
    user_id = user_service.create_user(
        name="Test User", email="test@example.com", password="secret123"
    )
    return user_service.get_user(user_id)


@pytest.fixture
def sample_categories(category_service):
    """Initialize the default categories."""
    category_service.initialize_defaults()
    return category_service.list_categories()


@pytest.fixture
def sample_transactions(transaction_service, sample_user):
    """Create January/February 2024 transactions for the sample user."""
    rows = [
        ("income", "1000.00", "January salary", "Salary", date(2024, 1, 5)),
        ("expense", "300.00", "Groceries", "Food", date(2024, 1, 10)),
        ("expense", "200.00", "Restaurant", "Food", date(2024, 2, 1)),
    ]
    ids = []
    for txn_type, amount, description, category, txn_date in rows:
        ids.append(
            transaction_service.create_transaction(
                user_id=sample_user.id,
                txn_type=txn_type,
                amount=Decimal(amount),
                description=description,
                category=category,
                date=txn_date,
            )
        )
    return [transaction_service.get_transaction(txn_id) for txn_id in ids]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def api_client(temp_db, clock):
    """Create a FastAPI test client over the temporary database."""
    from fastapi.testclient import TestClient
    from moneytrack.api import create_app

    app = create_app(temp_db, clock=clock)
    with TestClient(app) as client:
        yield client
