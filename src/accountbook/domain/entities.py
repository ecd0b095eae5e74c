"""Domain model entities for accountbook.

These are pure data classes representing business concepts, independent of
database schema. Money is always Decimal; amounts "in base" are in the base
currency (TZS).
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Chart of accounts classification."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"


class NormalBalance(str, Enum):
    """Side on which an account's balance increases."""

    DEBIT = "debit"
    CREDIT = "credit"


class EntryStatus(str, Enum):
    """Journal entry lifecycle states."""

    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    POSTED = "posted"
    REJECTED = "rejected"
    VOIDED = "voided"


class OpenItemKind(str, Enum):
    """Open item side for aging reports."""

    RECEIVABLE = "receivable"
    PAYABLE = "payable"


def normal_balance_for(account_type: AccountType) -> NormalBalance:
    """Return the normal balance side implied by an account type."""
    if account_type in (AccountType.ASSET, AccountType.EXPENSE):
        return NormalBalance.DEBIT
    return NormalBalance.CREDIT


@dataclass(frozen=True)
class ChartAccount:
    """Chart of accounts entry. Forms a tree through parent_id."""

    id: int
    code: str
    name: str
    account_type: AccountType
    normal_balance: NormalBalance
    subtype: Optional[str]
    parent_id: Optional[int]
    currency: str
    description: Optional[str]
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class JournalLineDraft:
    """A journal line as submitted, before it is stored.

    exchange_rate may be left as None to have it looked up from the rate
    table when the entry is created.
    """

    account_id: int
    debit_amount: Decimal = Decimal("0")
    credit_amount: Decimal = Decimal("0")
    currency: str = "TZS"
    exchange_rate: Optional[Decimal] = None
    description: Optional[str] = None

    @property
    def amount(self) -> Decimal:
        return self.debit_amount or self.credit_amount


@dataclass(frozen=True)
class JournalLine:
    """Stored journal line."""

    id: int
    journal_entry_id: int
    account_id: int
    description: Optional[str]
    debit_amount: Decimal
    credit_amount: Decimal
    currency: str
    exchange_rate: Decimal
    amount_in_base: Decimal

    @property
    def amount(self) -> Decimal:
        return self.debit_amount or self.credit_amount

    @property
    def debit_in_base(self) -> Decimal:
        return self.debit_amount * self.exchange_rate

    @property
    def credit_in_base(self) -> Decimal:
        return self.credit_amount * self.exchange_rate


@dataclass(frozen=True)
class JournalEntry:
    """Journal entry header with its lines."""

    id: int
    entry_number: str
    entry_date: date
    description: str
    status: EntryStatus
    reference_type: Optional[str]
    reference_id: Optional[str]
    posted_at: Optional[datetime]
    notes: Optional[str]
    rejection_reason: Optional[str]
    voided_at: Optional[datetime]
    created_at: datetime
    lines: tuple[JournalLine, ...] = ()

    @property
    def total_debits(self) -> Decimal:
        return sum((line.debit_in_base for line in self.lines), Decimal("0"))

    @property
    def total_credits(self) -> Decimal:
        return sum((line.credit_in_base for line in self.lines), Decimal("0"))


@dataclass(frozen=True)
class BankAccount:
    """Bank account linked to a cash/bank ledger account."""

    id: int
    name: str
    bank_name: str
    account_number: Optional[str]
    currency: str
    chart_account_id: Optional[int]
    opening_balance: Decimal
    current_balance: Decimal
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class BankTransaction:
    """Bank statement line.

    A credit is money into the bank account, a debit is money out, as read
    from the bank statement.
    """

    id: int
    bank_account_id: int
    transaction_date: date
    description: Optional[str]
    reference: Optional[str]
    debit_amount: Decimal
    credit_amount: Decimal
    is_reconciled: bool
    reconciled_at: Optional[datetime]
    journal_entry_id: Optional[int]
    created_at: datetime

    @property
    def amount(self) -> Decimal:
        return self.debit_amount or self.credit_amount

    @property
    def signed_amount(self) -> Decimal:
        return self.credit_amount - self.debit_amount


@dataclass(frozen=True)
class ExchangeRate:
    """Rate converting one unit of a currency into the base currency."""

    currency_code: str
    currency_name: Optional[str]
    rate_to_base: Decimal
    updated_at: Optional[datetime]


@dataclass(frozen=True)
class OpenItem:
    """Outstanding receivable (invoice) or payable (approved expense)."""

    id: int
    kind: OpenItemKind
    reference: str
    party_name: Optional[str]
    document_date: date
    due_date: Optional[date]
    amount: Decimal
    currency: str
    is_settled: bool
    created_at: datetime

    @property
    def aging_date(self) -> date:
        return self.due_date or self.document_date


@dataclass(frozen=True)
class AgingItem:
    """One open item placed in an aging bucket."""

    id: int
    reference: str
    party_name: Optional[str]
    date: date
    days_outstanding: int
    amount: Decimal
    currency: str


@dataclass(frozen=True)
class AgingBucket:
    """Items whose days outstanding fall in [min_days, max_days]."""

    key: str
    label: str
    min_days: int
    max_days: Optional[int]
    items: tuple[AgingItem, ...] = ()
    total: Decimal = Decimal("0")
    count: int = 0


@dataclass(frozen=True)
class AgingReport:
    """Aging buckets plus grand totals."""

    as_of: date
    current: AgingBucket
    days30: AgingBucket
    days60: AgingBucket
    days90_plus: AgingBucket
    total_outstanding: Decimal
    total_count: int

    @property
    def buckets(self) -> tuple[AgingBucket, ...]:
        return (self.current, self.days30, self.days60, self.days90_plus)


@dataclass(frozen=True)
class AgingSummary:
    """Receivables and payables aging side by side."""

    receivables: AgingReport
    payables: AgingReport

    @property
    def net_position(self) -> Decimal:
        return self.receivables.total_outstanding - self.payables.total_outstanding


@dataclass(frozen=True)
class ReconciliationCandidate:
    """A posted journal line considered against a bank transaction."""

    line: JournalLine
    entry_number: Optional[str] = None
    entry_date: Optional[date] = None
    is_match: bool = False
    difference: Optional[Decimal] = None


@dataclass(frozen=True)
class ReconciliationSummary:
    """Bank versus book position for one bank account."""

    bank_balance: Decimal
    book_balance: Decimal
    unreconciled_deposits: Decimal
    unreconciled_payments: Decimal
    matched_count: int
    unmatched_count: int

    @property
    def difference(self) -> Decimal:
        return self.bank_balance - self.book_balance


@dataclass(frozen=True)
class TrialBalanceRow:
    """One account line of a trial balance."""

    account_id: int
    code: str
    name: str
    normal_balance: NormalBalance
    balance: Decimal
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class TrialBalance:
    """Trial balance as of a date."""

    as_of: Optional[date]
    rows: tuple[TrialBalanceRow, ...]
    total_debit: Decimal
    total_credit: Decimal

    @property
    def is_balanced(self) -> bool:
        return abs(self.total_debit - self.total_credit) < Decimal("0.01")


@dataclass(frozen=True)
class StatementLine:
    """Account and amount shown on an income statement or balance sheet."""

    account_id: int
    code: str
    name: str
    amount: Decimal


@dataclass(frozen=True)
class IncomeStatement:
    """Revenue and expenses over a period."""

    start_date: Optional[date]
    end_date: Optional[date]
    revenue: tuple[StatementLine, ...]
    expenses: tuple[StatementLine, ...]
    total_revenue: Decimal
    total_expenses: Decimal

    @property
    def net_income(self) -> Decimal:
        return self.total_revenue - self.total_expenses


@dataclass(frozen=True)
class BalanceSheet:
    """Assets, liabilities and equity as of a date."""

    as_of: Optional[date]
    assets: tuple[StatementLine, ...]
    liabilities: tuple[StatementLine, ...]
    equity: tuple[StatementLine, ...]
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    current_earnings: Decimal = field(default=Decimal("0"))

    @property
    def is_balanced(self) -> bool:
        right = self.total_liabilities + self.total_equity + self.current_earnings
        return abs(self.total_assets - right) < Decimal("0.01")
