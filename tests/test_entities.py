"""Tests for domain entities."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import datetime, date, UTC
from decimal import Decimal

from accountbook.domain.entities import (
    AgingBucket,
    AgingReport,
    AgingSummary,
    BalanceSheet,
    BankTransaction,
    JournalEntry,
    JournalLine,
    JournalLineDraft,
    OpenItem,
    OpenItemKind,
    EntryStatus,
    TrialBalance,
)


def _line(debit="0", credit="0", rate="1"):
    return JournalLine(
        id=1,
        journal_entry_id=1,
        account_id=1,
        description=None,
        debit_amount=Decimal(debit),
        credit_amount=Decimal(credit),
        currency="TZS",
        exchange_rate=Decimal(rate),
        amount_in_base=Decimal("0"),
    )


class TestJournalEntities:
    """Tests for journal entities."""

    def test_draft_amount(self):
        """A draft's amount is whichever side is set."""
        assert JournalLineDraft(account_id=1, credit_amount=Decimal("5")).amount == Decimal("5")
        assert JournalLineDraft(account_id=1).exchange_rate is None

    def test_line_base_amounts(self):
        """Base amounts multiply by the line rate."""
        line = _line(debit="10", rate="2500")
        assert line.debit_in_base == Decimal("25000")
        assert line.credit_in_base == Decimal("0")

    def test_entry_totals(self):
        """Entry totals sum the lines in base currency."""
        entry = JournalEntry(
            id=1,
            entry_number="JE-2024-0001",
            entry_date=date(2024, 1, 1),
            description="Test",
            status=EntryStatus.DRAFT,
            reference_type=None,
            reference_id=None,
            posted_at=None,
            notes=None,
            rejection_reason=None,
            voided_at=None,
            created_at=datetime.now(UTC),
            lines=(_line(debit="10", rate="2500"), _line(credit="25000")),
        )
        assert entry.total_debits == Decimal("25000")
        assert entry.total_credits == Decimal("25000")

    def test_entry_immutability(self):
        """Entities are frozen."""
        line = _line(debit="1")
        with pytest.raises(FrozenInstanceError):
            line.debit_amount = Decimal("2")


class TestOtherEntities:
    """Tests for bank, aging and report entities."""

    def test_bank_transaction_signed_amount(self):
        """Money out is negative."""
        txn = BankTransaction(
            id=1,
            bank_account_id=1,
            transaction_date=date(2024, 1, 1),
            description=None,
            reference=None,
            debit_amount=Decimal("30"),
            credit_amount=Decimal("0"),
            is_reconciled=False,
            reconciled_at=None,
            journal_entry_id=None,
            created_at=datetime.now(UTC),
        )
        assert txn.amount == Decimal("30")
        assert txn.signed_amount == Decimal("-30")

    def test_open_item_aging_date(self):
        """Open items age from the document date without a due date."""
        item = OpenItem(
            id=1,
            kind=OpenItemKind.PAYABLE,
            reference="B-1",
            party_name=None,
            document_date=date(2024, 1, 1),
            due_date=None,
            amount=Decimal("1"),
            currency="TZS",
            is_settled=False,
            created_at=datetime.now(UTC),
        )
        assert item.aging_date == date(2024, 1, 1)

    def test_aging_summary_net_position(self):
        """Net position subtracts payables from receivables."""

        def report(total):
            empty = AgingBucket("current", "Current (0-30)", 0, 30)
            return AgingReport(date(2024, 1, 1), empty, empty, empty, empty, Decimal(total), 0)

        summary = AgingSummary(receivables=report("100"), payables=report("250"))
        assert summary.net_position == Decimal("-150")

    def test_trial_balance_tolerance(self):
        """Trial balances are balanced within one cent."""
        assert TrialBalance(None, (), Decimal("10.005"), Decimal("10")).is_balanced
        assert not TrialBalance(None, (), Decimal("10.01"), Decimal("10")).is_balanced

    def test_balance_sheet_includes_current_earnings(self):
        """Unclosed earnings count on the equity side."""
        sheet = BalanceSheet(
            as_of=None,
            assets=(),
            liabilities=(),
            equity=(),
            total_assets=Decimal("150"),
            total_liabilities=Decimal("50"),
            total_equity=Decimal("60"),
            current_earnings=Decimal("40"),
        )
        assert sheet.is_balanced


def test_services_exported_from_domain_package():
    """Services are importable from the domain package."""
    import accountbook.domain as domain
    from accountbook.domain.journal import JournalService

    assert domain.JournalService is JournalService
    assert set(domain.__all__) >= {"ReconciliationService", "AgingService", "BalanceService"}
    with pytest.raises(AttributeError):
        domain.NoSuchService
