"""Tests for financial statements."""

from datetime import date
from decimal import Decimal

from accountbook.domain.entities import NormalBalance
from accountbook.domain.reports import trial_balance_columns


class TestTrialBalanceColumns:
    """Tests for splitting balances into debit and credit columns."""

    def test_debit_normal(self):
        """Positive debit-normal balances sit in the debit column."""
        assert trial_balance_columns(NormalBalance.DEBIT, Decimal("10")) == (Decimal("10"), Decimal("0"))
        assert trial_balance_columns(NormalBalance.DEBIT, Decimal("-10")) == (Decimal("0"), Decimal("10"))

    def test_credit_normal(self):
        """Positive credit-normal balances sit in the credit column."""
        assert trial_balance_columns(NormalBalance.CREDIT, Decimal("10")) == (Decimal("0"), Decimal("10"))
        assert trial_balance_columns(NormalBalance.CREDIT, Decimal("-10")) == (Decimal("10"), Decimal("0"))


class TestReportService:
    """Tests for ReportService."""

    def _book(self, make_entry):
        make_entry("1120", "3100", "10000", entry_date=date(2024, 1, 2))
        make_entry("1210", "4110", "3000", entry_date=date(2024, 2, 5))
        make_entry("6210", "1120", "1200", entry_date=date(2024, 3, 1))

    def test_trial_balance_balances(self, make_entry, report_service):
        """Debits equal credits and only non-zero accounts are listed."""
        self._book(make_entry)
        tb = report_service.trial_balance()

        assert tb.is_balanced
        assert tb.total_debit == tb.total_credit == Decimal("13000")
        assert [row.code for row in tb.rows] == ["1120", "1210", "3100", "4110", "6210"]

    def test_trial_balance_as_of(self, make_entry, report_service):
        """Later entries are left out."""
        self._book(make_entry)
        tb = report_service.trial_balance(as_of=date(2024, 1, 31))
        assert [row.code for row in tb.rows] == ["1120", "3100"]
        assert tb.total_debit == Decimal("10000")

    def test_income_statement(self, make_entry, report_service):
        """Revenue less expenses for the period."""
        self._book(make_entry)
        statement = report_service.income_statement(date(2024, 1, 1), date(2024, 3, 31))
        assert statement.total_revenue == Decimal("3000")
        assert statement.total_expenses == Decimal("1200")
        assert statement.net_income == Decimal("1800")

        february = report_service.income_statement(date(2024, 2, 1), date(2024, 2, 29))
        assert february.total_expenses == Decimal("0")
        assert february.net_income == Decimal("3000")

    def test_balance_sheet(self, make_entry, report_service):
        """Assets equal liabilities, equity and current earnings."""
        self._book(make_entry)
        sheet = report_service.balance_sheet()
        assert sheet.total_assets == Decimal("11800")
        assert sheet.total_liabilities == Decimal("0")
        assert sheet.total_equity == Decimal("10000")
        assert sheet.current_earnings == Decimal("1800")
        assert sheet.is_balanced

    def test_voided_entries_excluded(self, make_entry, journal_service, report_service):
        """Voided entries do not reach the statements."""
        entry = make_entry("1120", "4110", "500")
        journal_service.void(entry.id)
        assert report_service.trial_balance().rows == ()
