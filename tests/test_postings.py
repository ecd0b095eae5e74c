"""Tests for automatic postings behind business events."""

import pytest
from datetime import date
from decimal import Decimal

from accountbook.domain.entities import EntryStatus
from accountbook.domain.errors import ValidationError
from accountbook.domain.postings import (
    agent_cost_account_for,
    cash_account_for,
    expense_account_for,
)

ENTRY_DATE = date(2024, 3, 10)


def _codes(entry, sample_chart):
    by_id = {account_id: code for code, account_id in sample_chart.items()}
    debit = [by_id[line.account_id] for line in entry.lines if line.debit_amount > 0]
    credit = [by_id[line.account_id] for line in entry.lines if line.credit_amount > 0]
    return debit, credit


class TestAccountMaps:
    """Tests for the account code lookups."""

    def test_cash_account_for_currency(self):
        """Each currency has its cash account; unknown currencies use TZS cash."""
        assert cash_account_for("TZS") == "1120"
        assert cash_account_for("usd") == "1130"
        assert cash_account_for("GBP") == "1140"
        assert cash_account_for("KES") == "1120"

    def test_expense_categories(self):
        """Categories map to expense accounts with a fallback."""
        assert expense_account_for("customs") == "5300"
        assert expense_account_for(" Fuel ") == "5200"
        assert expense_account_for("unknown") == "6900"

    def test_agent_regions(self):
        """Regions map to agent cost accounts with a fallback."""
        assert agent_cost_account_for("China") == "5130"
        assert agent_cost_account_for(None) == "5100"
        assert agent_cost_account_for("mars") == "5100"


class TestAutoPostingService:
    """Tests for AutoPostingService."""

    def test_invoice_issued(self, posting_service, sample_chart):
        """Invoices debit receivables and credit shipping revenue."""
        entry = posting_service.invoice_issued(
            "INV-001", Decimal("150000"), customer_name="ACME", entry_date=ENTRY_DATE
        )
        assert entry.status == EntryStatus.POSTED
        assert entry.reference_type == "invoice"
        assert entry.reference_id == "INV-001"
        assert entry.description == "Invoice INV-001 issued to ACME"
        assert _codes(entry, sample_chart) == (["1210"], ["4110"])

    def test_entry_date_defaults_to_journal_clock(self, posting_service, sample_chart):
        """Without an entry date the journal service's clock supplies it."""
        entry = posting_service.invoice_issued("INV-003", Decimal("1000"))
        assert entry.entry_date == date(2024, 3, 31)
        assert entry.entry_number == "JE-2024-0001"

    def test_foreign_invoice_uses_stored_rate(self, posting_service, sample_chart, usd_rate):
        """Foreign invoices convert at the table rate."""
        entry = posting_service.invoice_issued("INV-002", Decimal("100"), currency="USD", entry_date=ENTRY_DATE)
        assert all(line.exchange_rate == Decimal("2500") for line in entry.lines)
        assert entry.total_debits == Decimal("250000")

    def test_payment_received_to_currency_cash(self, posting_service, sample_chart):
        """Payments land on the cash account of their currency."""
        entry = posting_service.invoice_payment_received(
            "INV-001", Decimal("100"), currency="GBP", exchange_rate=Decimal("3200"), entry_date=ENTRY_DATE
        )
        assert _codes(entry, sample_chart) == (["1140"], ["1210"])
        assert entry.total_credits == Decimal("320000")

    def test_payment_received_to_chosen_account(self, posting_service, sample_chart):
        """A deposit account overrides the currency default."""
        entry = posting_service.invoice_payment_received(
            "INV-001", Decimal("500"), deposit_account_id=sample_chart["1110"], entry_date=ENTRY_DATE
        )
        assert _codes(entry, sample_chart) == (["1110"], ["1210"])

    def test_expense_approved_and_paid(self, posting_service, sample_chart):
        """Approved expenses go to payables, paid ones to the bank."""
        approved = posting_service.expense_approved("customs", Decimal("80000"), entry_date=ENTRY_DATE)
        assert _codes(approved, sample_chart) == (["5300"], ["2110"])
        assert approved.description == "Expense approved: customs"

        paid = posting_service.expense_paid(
            "insurance", Decimal("20000"), sample_chart["1120"], description="Cargo cover", entry_date=ENTRY_DATE
        )
        assert _codes(paid, sample_chart) == (["6600"], ["1120"])
        assert paid.description == "Expense paid: Cargo cover"

    def test_agent_flows(self, posting_service, sample_chart):
        """Agent invoices, billing and payments hit the agent accounts."""
        received = posting_service.agent_invoice_received(
            "AG-1", Decimal("1000"), agent_name="Dubai Freight", origin_region="dubai", entry_date=ENTRY_DATE
        )
        assert _codes(received, sample_chart) == (["5120"], ["2120"])

        billed = posting_service.agent_billed("AG-2", Decimal("400"), entry_date=ENTRY_DATE)
        assert _codes(billed, sample_chart) == (["1210"], ["4110"])

        paid = posting_service.agent_payment("AG-1", Decimal("1000"), entry_date=ENTRY_DATE)
        assert _codes(paid, sample_chart) == (["2120"], ["1120"])

    def test_agent_payment_rate_from_base_amount(self, posting_service, sample_chart):
        """The rate is derived from the TZS amount actually paid."""
        entry = posting_service.agent_payment(
            "AG-1",
            Decimal("1000"),
            currency="USD",
            amount_in_base=Decimal("2550000"),
            entry_date=ENTRY_DATE,
        )
        assert all(line.exchange_rate == Decimal("2550") for line in entry.lines)
        assert _codes(entry, sample_chart) == (["2120"], ["1130"])

    def test_amount_must_be_positive(self, posting_service, sample_chart):
        """Zero amounts are refused."""
        with pytest.raises(ValidationError):
            posting_service.invoice_issued("INV-0", Decimal("0"), entry_date=ENTRY_DATE)

    def test_missing_account_code(self, posting_service):
        """Posting against an empty chart fails on the account lookup."""
        with pytest.raises(ValidationError, match="1210"):
            posting_service.invoice_issued("INV-1", Decimal("10"), entry_date=ENTRY_DATE)
