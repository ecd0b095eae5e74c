"""Tests for database factories."""

from decimal import Decimal

from accountbook.database.factories import create_sqlite_database, default_database_path
from accountbook.domain.currency import ExchangeRateService


def test_database_path_from_environment(monkeypatch, tmp_path):
    """ACCOUNTBOOK_DB_PATH picks the ledger file."""
    path = tmp_path / "ledger.db"
    monkeypatch.setenv("ACCOUNTBOOK_DB_PATH", str(path))

    assert default_database_path() == str(path)
    db = create_sqlite_database()
    assert db.database_url == f"sqlite:///{path}"


def test_in_memory_database():
    """":memory:" gives a working throwaway ledger."""
    db = create_sqlite_database(":memory:")
    db.connect()
    try:
        ExchangeRateService(db).set_rate("USD", Decimal("2500"))
        assert [r.currency_code for r in db.list_exchange_rates()] == ["USD"]
    finally:
        db.disconnect()
