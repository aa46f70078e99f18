"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from moneytrack.database.sqlalchemy_db import SQLAlchemyDatabase

DEFAULT_DB_DIR = ".moneytrack"
DEFAULT_DB_NAME = "moneytrack.db"
IN_MEMORY = ":memory:"


def sqlite_url(database_path: str) -> str:
    """Build a SQLite URL for a file path; full URLs and ":memory:" pass through."""
    if "://" in database_path:
        return database_path
    if database_path == IN_MEMORY:
        return "sqlite://"
    return f"sqlite:///{database_path}"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: File path, ":memory:" or a full database URL. If None,
            MONEYTRACK_DB_PATH is used, then ~/.moneytrack/moneytrack.db.
            Missing parent directories of a file path are created.
    """
    database_path = database_path or os.environ.get("MONEYTRACK_DB_PATH")
    if not database_path:
        database_path = str(Path.home() / DEFAULT_DB_DIR / DEFAULT_DB_NAME)

    url = sqlite_url(database_path)
    if url.startswith("sqlite:///"):
        Path(url[len("sqlite:///"):]).expanduser().parent.mkdir(parents=True, exist_ok=True)
    return SQLAlchemyDatabase(url)
