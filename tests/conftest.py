"""Shared pytest fixtures for accountbook tests."""

import tempfile
import os
from datetime import date, datetime, UTC
from decimal import Decimal
import pytest

from accountbook.database.factories import create_sqlite_database
from accountbook.domain.aging import AgingService
from accountbook.domain.balances import BalanceService
from accountbook.domain.bank import BankAccountService
from accountbook.domain.chart import ChartOfAccountsService
from accountbook.domain.currency import ExchangeRateService
from accountbook.domain.entities import JournalLineDraft
from accountbook.domain.journal import JournalService
from accountbook.domain.postings import AutoPostingService
from accountbook.domain.reconciliation import ReconciliationService
from accountbook.domain.reports import ReportService

FIXED_NOW = datetime(2024, 3, 31, 12, 0, tzinfo=UTC)


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
def chart_service(temp_db):
    """Create a ChartOfAccountsService with a temporary database."""
    return ChartOfAccountsService(temp_db)


@pytest.fixture
def rate_service(temp_db):
    """Create an ExchangeRateService with a temporary database."""
    return ExchangeRateService(temp_db)


@pytest.fixture
def journal_service(temp_db):
    """Create a JournalService with a fixed clock."""
    return JournalService(temp_db, clock=lambda: FIXED_NOW)


@pytest.fixture
def balance_service(temp_db):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db)


@pytest.fixture
def bank_service(temp_db):
    """Create a BankAccountService with a temporary database."""
    return BankAccountService(temp_db)


@pytest.fixture
def reconciliation_service(temp_db):
    """Create a ReconciliationService with a fixed clock."""
    return ReconciliationService(temp_db, clock=lambda: FIXED_NOW)


@pytest.fixture
def aging_service(temp_db):
    """Create an AgingService with a temporary database."""
    return AgingService(temp_db)


@pytest.fixture
def posting_service(temp_db, journal_service):
    """Create an AutoPostingService sharing the fixed-clock journal service."""
    return AutoPostingService(temp_db, journal_service)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def sample_chart(chart_service):
    """Seed the default chart of accounts and return {code: account_id}."""
    from accountbook.cli.commands.init_chart import seed_chart

    seed_chart(chart_service)
    return {account.code: account.id for account in chart_service.list_accounts()}


@pytest.fixture
def usd_rate(rate_service):
    """Store a USD rate of 2500 TZS."""
    return rate_service.set_rate("USD", Decimal("2500"), "US Dollar")


@pytest.fixture
def make_entry(journal_service, sample_chart):
    """Factory creating a two-line TZS entry, posted unless told otherwise."""

    def _make(debit_code, credit_code, amount, entry_date=date(2024, 3, 15), post=True, description="Test entry"):
        entry = journal_service.create_entry(
            entry_date=entry_date,
            description=description,
            lines=[
                JournalLineDraft(account_id=sample_chart[debit_code], debit_amount=Decimal(amount)),
                JournalLineDraft(account_id=sample_chart[credit_code], credit_amount=Decimal(amount)),
            ],
        )
        if post:
            entry = journal_service.post_directly(entry.id)
        return entry

    return _make


@pytest.fixture
def sample_bank_account(bank_service, sample_chart):
    """Create a TZS bank account linked to ledger account 1120."""
    return bank_service.create_bank_account(
        name="CRDB Main",
        bank_name="CRDB",
        chart_account_id=sample_chart["1120"],
        opening_balance=Decimal("1000.00"),
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
