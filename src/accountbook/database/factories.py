"""Database factory functions."""

import os
from pathlib import Path
from typing import Optional

from accountbook.database.sqlalchemy_db import SQLAlchemyDatabase

DEFAULT_DIRECTORY = Path.home() / ".accountbook"


def default_database_path() -> str:
    """Ledger file location: ACCOUNTBOOK_DB_PATH, else ~/.accountbook/accountbook.db."""
    configured = os.environ.get("ACCOUNTBOOK_DB_PATH")
    if configured:
        return configured
    DEFAULT_DIRECTORY.mkdir(exist_ok=True)
    return str(DEFAULT_DIRECTORY / "accountbook.db")


def create_database(database_url: str) -> SQLAlchemyDatabase:
    """Create a database for any SQLAlchemy URL (sqlite, postgresql, ...)."""
    return SQLAlchemyDatabase(database_url)


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite ledger.

    Args:
        database_path: File path, or ":memory:" for a throwaway ledger.
            None falls back to default_database_path().
    """
    if database_path is None:
        database_path = default_database_path()
    if database_path == ":memory:":
        return create_database("sqlite://")
    return create_database(f"sqlite:///{database_path}")
