"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic: enum-valued columns are stored as
plain strings and become Enum members on the way out.
"""

from decimal import Decimal

from accountbook.domain import entities as domain
from accountbook.database.models import (
    BankAccount as ORMBankAccount,
    BankTransaction as ORMBankTransaction,
    ChartAccount as ORMChartAccount,
    ExchangeRate as ORMExchangeRate,
    JournalEntry as ORMJournalEntry,
    JournalLine as ORMJournalLine,
    OpenItem as ORMOpenItem,
)


def _decimal(value) -> Decimal:
    return Decimal(value) if value is not None else Decimal("0")


def chart_account_to_domain(orm_account: ORMChartAccount) -> domain.ChartAccount:
    """Convert SQLAlchemy ChartAccount model to domain ChartAccount entity."""
    return domain.ChartAccount(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        normal_balance=domain.NormalBalance(orm_account.normal_balance),
        subtype=orm_account.subtype,
        parent_id=orm_account.parent_id,
        currency=orm_account.currency,
        description=orm_account.description,
        is_active=orm_account.is_active,
        created_at=orm_account.created_at,
    )


def journal_line_to_domain(orm_line: ORMJournalLine) -> domain.JournalLine:
    """Convert SQLAlchemy JournalLine model to domain JournalLine entity."""
    return domain.JournalLine(
        id=orm_line.id,
        journal_entry_id=orm_line.journal_entry_id,
        account_id=orm_line.account_id,
        description=orm_line.description,
        debit_amount=_decimal(orm_line.debit_amount),
        credit_amount=_decimal(orm_line.credit_amount),
        currency=orm_line.currency,
        exchange_rate=_decimal(orm_line.exchange_rate),
        amount_in_base=_decimal(orm_line.amount_in_base),
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model (with lines) to domain JournalEntry entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        entry_number=orm_entry.entry_number,
        entry_date=orm_entry.entry_date,
        description=orm_entry.description,
        status=domain.EntryStatus(orm_entry.status),
        reference_type=orm_entry.reference_type,
        reference_id=orm_entry.reference_id,
        posted_at=orm_entry.posted_at,
        notes=orm_entry.notes,
        rejection_reason=orm_entry.rejection_reason,
        voided_at=orm_entry.voided_at,
        created_at=orm_entry.created_at,
        lines=tuple(journal_line_to_domain(line) for line in orm_entry.lines),
    )


def bank_account_to_domain(
    orm_account: ORMBankAccount, net_movement: Decimal = Decimal("0")
) -> domain.BankAccount:
    """Convert SQLAlchemy BankAccount model to domain BankAccount entity.

    net_movement is the sum of credits less debits of the account's
    transactions; current_balance is derived from it.
    """
    opening = _decimal(orm_account.opening_balance)
    return domain.BankAccount(
        id=orm_account.id,
        name=orm_account.name,
        bank_name=orm_account.bank_name,
        account_number=orm_account.account_number,
        currency=orm_account.currency,
        chart_account_id=orm_account.chart_account_id,
        opening_balance=opening,
        current_balance=opening + net_movement,
        is_active=orm_account.is_active,
        created_at=orm_account.created_at,
    )


def bank_transaction_to_domain(orm_txn: ORMBankTransaction) -> domain.BankTransaction:
    """Convert SQLAlchemy BankTransaction model to domain BankTransaction entity."""
    return domain.BankTransaction(
        id=orm_txn.id,
        bank_account_id=orm_txn.bank_account_id,
        transaction_date=orm_txn.transaction_date,
        description=orm_txn.description,
        reference=orm_txn.reference,
        debit_amount=_decimal(orm_txn.debit_amount),
        credit_amount=_decimal(orm_txn.credit_amount),
        is_reconciled=orm_txn.is_reconciled,
        reconciled_at=orm_txn.reconciled_at,
        journal_entry_id=orm_txn.journal_entry_id,
        created_at=orm_txn.created_at,
    )


def exchange_rate_to_domain(orm_rate: ORMExchangeRate) -> domain.ExchangeRate:
    """Convert SQLAlchemy ExchangeRate model to domain ExchangeRate entity."""
    return domain.ExchangeRate(
        currency_code=orm_rate.currency_code,
        currency_name=orm_rate.currency_name,
        rate_to_base=_decimal(orm_rate.rate_to_base),
        updated_at=orm_rate.updated_at,
    )


def open_item_to_domain(orm_item: ORMOpenItem) -> domain.OpenItem:
    """Convert SQLAlchemy OpenItem model to domain OpenItem entity."""
    return domain.OpenItem(
        id=orm_item.id,
        kind=domain.OpenItemKind(orm_item.kind),
        reference=orm_item.reference,
        party_name=orm_item.party_name,
        document_date=orm_item.document_date,
        due_date=orm_item.due_date,
        amount=_decimal(orm_item.amount),
        currency=orm_item.currency,
        is_settled=orm_item.is_settled,
        created_at=orm_item.created_at,
    )
