"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from accountbook.domain.entities import (
    AccountType,
    BankAccount,
    BankTransaction,
    ChartAccount,
    EntryStatus,
    ExchangeRate,
    JournalEntry,
    JournalLine,
    JournalLineDraft,
    NormalBalance,
    OpenItem,
    OpenItemKind,
)


class Database(ABC):
    """Abstract database interface for accountbook."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Chart of accounts operations
    @abstractmethod
    def create_chart_account(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        normal_balance: NormalBalance,
        subtype: Optional[str] = None,
        parent_id: Optional[int] = None,
        currency: str = "TZS",
        description: Optional[str] = None,
    ) -> int:
        """Create a chart account. Returns account ID."""
        pass

    @abstractmethod
    def get_chart_account(self, account_id: int) -> Optional[ChartAccount]:
        """Get chart account by ID."""
        pass

    @abstractmethod
    def get_chart_account_by_code(self, code: str) -> Optional[ChartAccount]:
        """Get chart account by code."""
        pass

    @abstractmethod
    def list_chart_accounts(self, active_only: bool = False) -> list[ChartAccount]:
        """List chart accounts ordered by code."""
        pass

    @abstractmethod
    def update_chart_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        subtype: Optional[str] = None,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
        parent_id: Optional[int] = None,
        update_parent: bool = False,
    ) -> None:
        """Update chart account fields. None leaves a field unchanged.

        parent_id is only applied when update_parent is True, so that a
        parent can be cleared.
        """
        pass

    # Journal operations
    @abstractmethod
    def next_sequence(self, counter_key: str) -> int:
        """Increment and return the named counter, starting at 1."""
        pass

    @abstractmethod
    def create_journal_entry(
        self,
        entry_number: str,
        entry_date: date,
        description: str,
        status: EntryStatus,
        lines: Sequence[JournalLineDraft],
        reference_type: Optional[str] = None,
        reference_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a journal entry with its lines. Returns entry ID."""
        pass

    @abstractmethod
    def get_journal_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry (with lines) by ID."""
        pass

    @abstractmethod
    def get_journal_entry_by_number(self, entry_number: str) -> Optional[JournalEntry]:
        """Get journal entry (with lines) by entry number."""
        pass

    @abstractmethod
    def list_journal_entries(
        self,
        status: Optional[EntryStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> list[JournalEntry]:
        """List journal entries, newest first, with optional filters."""
        pass

    @abstractmethod
    def update_journal_entry(
        self,
        entry_id: int,
        entry_date: Optional[date] = None,
        description: Optional[str] = None,
        notes: Optional[str] = None,
        lines: Optional[Sequence[JournalLineDraft]] = None,
    ) -> None:
        """Update an entry's header and optionally replace its lines."""
        pass

    @abstractmethod
    def delete_journal_entry(self, entry_id: int) -> None:
        """Delete a journal entry and its lines."""
        pass

    @abstractmethod
    def set_journal_status(
        self,
        entry_id: int,
        status: EntryStatus,
        posted_at: Optional[datetime] = None,
        voided_at: Optional[datetime] = None,
        rejection_reason: Optional[str] = None,
    ) -> None:
        """Set an entry's status and the matching timestamp."""
        pass

    @abstractmethod
    def list_journal_lines(
        self,
        statuses: Optional[Iterable[EntryStatus]] = None,
        account_ids: Optional[Iterable[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[JournalLine]:
        """List journal lines filtered by entry status, account and entry date."""
        pass

    # Exchange rate operations
    @abstractmethod
    def upsert_exchange_rate(
        self, currency_code: str, rate_to_base: Decimal, currency_name: Optional[str] = None
    ) -> None:
        """Create or update the rate for a currency."""
        pass

    @abstractmethod
    def get_exchange_rate(self, currency_code: str) -> Optional[ExchangeRate]:
        """Get the rate for a currency."""
        pass

    @abstractmethod
    def list_exchange_rates(self) -> list[ExchangeRate]:
        """List all stored rates ordered by currency code."""
        pass

    # Bank account operations
    @abstractmethod
    def create_bank_account(
        self,
        name: str,
        bank_name: str,
        currency: str = "TZS",
        account_number: Optional[str] = None,
        chart_account_id: Optional[int] = None,
        opening_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a bank account. Returns bank account ID."""
        pass

    @abstractmethod
    def get_bank_account(self, bank_account_id: int) -> Optional[BankAccount]:
        """Get bank account by ID, with its derived current balance."""
        pass

    @abstractmethod
    def list_bank_accounts(self) -> list[BankAccount]:
        """List all bank accounts ordered by name."""
        pass

    @abstractmethod
    def update_bank_account(
        self,
        bank_account_id: int,
        chart_account_id: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update bank account fields. None leaves a field unchanged."""
        pass

    # Bank transaction operations
    @abstractmethod
    def create_bank_transaction(
        self,
        bank_account_id: int,
        transaction_date: date,
        debit_amount: Decimal = Decimal("0"),
        credit_amount: Decimal = Decimal("0"),
        description: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> int:
        """Create a bank statement line. Returns transaction ID."""
        pass

    @abstractmethod
    def get_bank_transaction(self, transaction_id: int) -> Optional[BankTransaction]:
        """Get bank transaction by ID."""
        pass

    @abstractmethod
    def list_bank_transactions(
        self,
        bank_account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reconciled: Optional[bool] = None,
    ) -> list[BankTransaction]:
        """List bank transactions ordered by date, with optional filters."""
        pass

    @abstractmethod
    def find_bank_transaction_by_entry(self, journal_entry_id: int) -> Optional[BankTransaction]:
        """Get the bank transaction linked to a journal entry, if any."""
        pass

    @abstractmethod
    def set_bank_transaction_reconciliation(
        self,
        transaction_id: int,
        is_reconciled: bool,
        journal_entry_id: Optional[int] = None,
        reconciled_at: Optional[datetime] = None,
    ) -> None:
        """Set the reconciliation state of a bank transaction."""
        pass

    # Open item operations
    @abstractmethod
    def create_open_item(
        self,
        kind: OpenItemKind,
        reference: str,
        document_date: date,
        amount: Decimal,
        currency: str = "TZS",
        party_name: Optional[str] = None,
        due_date: Optional[date] = None,
    ) -> int:
        """Create an open receivable or payable. Returns item ID."""
        pass

    @abstractmethod
    def get_open_item(self, item_id: int) -> Optional[OpenItem]:
        """Get open item by ID."""
        pass

    @abstractmethod
    def list_open_items(
        self, kind: Optional[OpenItemKind] = None, include_settled: bool = False
    ) -> list[OpenItem]:
        """List open items, oldest first."""
        pass

    @abstractmethod
    def settle_open_item(self, item_id: int) -> None:
        """Mark an open item settled."""
        pass
