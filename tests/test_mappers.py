"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from accountbook.database.models import (
    BankAccount as ORMBankAccount,
    BankTransaction as ORMBankTransaction,
    ChartAccount as ORMChartAccount,
    ExchangeRate as ORMExchangeRate,
    JournalEntry as ORMJournalEntry,
    JournalLine as ORMJournalLine,
    OpenItem as ORMOpenItem,
)
from accountbook.database.mappers import (
    bank_account_to_domain,
    bank_transaction_to_domain,
    chart_account_to_domain,
    exchange_rate_to_domain,
    journal_entry_to_domain,
    open_item_to_domain,
)
from accountbook.domain.entities import (
    AccountType,
    BankAccount,
    ChartAccount,
    EntryStatus,
    JournalEntry,
    NormalBalance,
    OpenItemKind,
)


class TestChartAccountMapper:
    """Tests for ChartAccount mapper."""

    def test_chart_account_to_domain(self):
        """Test converting ORM ChartAccount to domain ChartAccount."""
        orm_account = ORMChartAccount(
            id=1,
            code="1110",
            name="Petty Cash",
            account_type="asset",
            normal_balance="debit",
            subtype="cash",
            parent_id=None,
            currency="TZS",
            is_active=True,
            created_at=datetime.now(UTC),
        )
        account = chart_account_to_domain(orm_account)

        assert isinstance(account, ChartAccount)
        assert account.code == "1110"
        assert account.account_type == AccountType.ASSET
        assert account.normal_balance == NormalBalance.DEBIT
        assert account.created_at == orm_account.created_at


class TestJournalEntryMapper:
    """Tests for JournalEntry mapper."""

    def test_journal_entry_with_lines(self):
        """Test converting an ORM entry and its lines."""
        orm_entry = ORMJournalEntry(
            id=7,
            entry_number="JE-2024-0007",
            entry_date=date(2024, 3, 1),
            description="USD receipt",
            status="posted",
            created_at=datetime.now(UTC),
            lines=[
                ORMJournalLine(
                    id=1,
                    journal_entry_id=7,
                    account_id=3,
                    debit_amount=Decimal("100.00"),
                    credit_amount=Decimal("0"),
                    currency="USD",
                    exchange_rate=Decimal("2500"),
                    amount_in_base=Decimal("250000.00"),
                ),
                ORMJournalLine(
                    id=2,
                    journal_entry_id=7,
                    account_id=9,
                    debit_amount=Decimal("0"),
                    credit_amount=Decimal("250000.00"),
                    currency="TZS",
                    exchange_rate=Decimal("1"),
                    amount_in_base=Decimal("250000.00"),
                ),
            ],
        )
        entry = journal_entry_to_domain(orm_entry)

        assert isinstance(entry, JournalEntry)
        assert entry.status == EntryStatus.POSTED
        assert len(entry.lines) == 2
        assert entry.lines[0].currency == "USD"
        assert entry.total_debits == entry.total_credits == Decimal("250000")


class TestBankMappers:
    """Tests for bank account and transaction mappers."""

    def test_bank_account_current_balance(self):
        """Current balance is opening balance plus net movement."""
        orm_account = ORMBankAccount(
            id=1,
            name="CRDB Main",
            bank_name="CRDB",
            currency="TZS",
            opening_balance=Decimal("1000.00"),
            is_active=True,
            created_at=datetime.now(UTC),
        )
        account = bank_account_to_domain(orm_account, Decimal("-250.00"))

        assert isinstance(account, BankAccount)
        assert account.opening_balance == Decimal("1000.00")
        assert account.current_balance == Decimal("750.00")

    def test_bank_transaction_amounts(self):
        """Missing amounts map to zero."""
        orm_txn = ORMBankTransaction(
            id=5,
            bank_account_id=1,
            transaction_date=date(2024, 3, 5),
            debit_amount=None,
            credit_amount=Decimal("40.00"),
            is_reconciled=False,
            created_at=datetime.now(UTC),
        )
        txn = bank_transaction_to_domain(orm_txn)

        assert txn.debit_amount == Decimal("0")
        assert txn.amount == Decimal("40.00")
        assert txn.signed_amount == Decimal("40.00")


class TestOtherMappers:
    """Tests for exchange rate and open item mappers."""

    def test_exchange_rate_to_domain(self):
        """Test converting ORM ExchangeRate."""
        rate = exchange_rate_to_domain(
            ORMExchangeRate(currency_code="USD", currency_name="US Dollar", rate_to_base=Decimal("2500"))
        )
        assert rate.currency_code == "USD"
        assert rate.rate_to_base == Decimal("2500")

    def test_open_item_to_domain(self):
        """Open items age from their due date when present."""
        item = open_item_to_domain(
            ORMOpenItem(
                id=3,
                kind="receivable",
                reference="INV-3",
                document_date=date(2024, 1, 1),
                due_date=date(2024, 2, 1),
                amount=Decimal("10"),
                currency="TZS",
                is_settled=False,
                created_at=datetime.now(UTC),
            )
        )
        assert item.kind == OpenItemKind.RECEIVABLE
        assert item.aging_date == date(2024, 2, 1)
