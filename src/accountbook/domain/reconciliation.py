"""Bank reconciliation: matching statement lines against the ledger."""

import logging
from dataclasses import replace
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Callable, Iterable, Optional, Protocol

from rapidfuzz import fuzz

from accountbook.database.base import Database
from accountbook.domain.entities import (
    BankAccount,
    BankTransaction,
    EntryStatus,
    ReconciliationCandidate,
    ReconciliationSummary,
)
from accountbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    bank_account_not_found,
    bank_transaction_not_found,
    entry_already_reconciled,
    journal_entry_not_found,
)

logger = logging.getLogger(__name__)

MATCH_TOLERANCE = Decimal("0.01")


class MatchStrategy(Protocol):
    """Decides whether a ledger candidate matches a bank transaction."""

    def matches(self, transaction: BankTransaction, candidate: ReconciliationCandidate) -> bool:
        ...


class AmountMatch:
    """Match when amounts differ by less than one cent."""

    def matches(self, transaction: BankTransaction, candidate: ReconciliationCandidate) -> bool:
        return abs(candidate.line.amount - transaction.amount) < MATCH_TOLERANCE


class AmountDateWindowMatch:
    """Amount match whose entry date is within a number of days of the transaction."""

    def __init__(self, days: int = 3):
        if days < 0:
            raise ValidationError("Date window cannot be negative")
        self.days = days
        self.amount = AmountMatch()

    def matches(self, transaction: BankTransaction, candidate: ReconciliationCandidate) -> bool:
        if candidate.entry_date is None:
            return False
        within = abs((transaction.transaction_date - candidate.entry_date).days) <= self.days
        return within and self.amount.matches(transaction, candidate)


class DescriptionMatch:
    """Fuzzy match on description text, ignoring amounts.

    threshold is a 0-1 similarity over word-sorted, lowercased text.
    """

    def __init__(self, threshold: float = 0.6):
        self.threshold = threshold

    def matches(self, transaction: BankTransaction, candidate: ReconciliationCandidate) -> bool:
        left = (transaction.description or "").strip().lower()
        right = (candidate.line.description or "").strip().lower()
        if not left or not right:
            return False
        # token_sort_ratio ignores word order; it scores 0-100
        return fuzz.token_sort_ratio(left, right) / 100 >= self.threshold


class AllOf:
    """Match only when every wrapped strategy matches."""

    def __init__(self, *strategies: MatchStrategy):
        self.strategies = strategies

    def matches(self, transaction: BankTransaction, candidate: ReconciliationCandidate) -> bool:
        return all(s.matches(transaction, candidate) for s in self.strategies)


def find_matches(
    transaction: BankTransaction,
    candidates: Iterable[ReconciliationCandidate],
    strategy: Optional[MatchStrategy] = None,
) -> list[ReconciliationCandidate]:
    """Flag candidates that match the transaction and put them first.

    Every candidate is returned, with is_match and difference filled in.
    Order within matches and within non-matches is preserved.
    """
    strategy = strategy or AmountMatch()
    flagged = [
        replace(
            candidate,
            is_match=strategy.matches(transaction, candidate),
            difference=candidate.line.amount - transaction.amount,
        )
        for candidate in candidates
    ]
    return [c for c in flagged if c.is_match] + [c for c in flagged if not c.is_match]


def summarize(
    bank_account: BankAccount,
    transactions: Iterable[BankTransaction],
    book_balance: Decimal,
) -> ReconciliationSummary:
    """Bank versus book position for one bank account's transactions."""
    transactions = list(transactions)
    unreconciled = [t for t in transactions if not t.is_reconciled]
    bank_balance = bank_account.opening_balance + sum(
        (t.signed_amount for t in transactions), Decimal("0")
    )
    return ReconciliationSummary(
        bank_balance=bank_balance,
        book_balance=book_balance,
        unreconciled_deposits=sum((t.credit_amount for t in unreconciled), Decimal("0")),
        unreconciled_payments=sum((t.debit_amount for t in unreconciled), Decimal("0")),
        matched_count=len(transactions) - len(unreconciled),
        unmatched_count=len(unreconciled),
    )


class ReconciliationService:
    """Service linking bank transactions to posted journal entries."""

    def __init__(
        self,
        db: Database,
        strategy: Optional[MatchStrategy] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize reconciliation service.

        Args:
            db: Database instance
            strategy: Matching strategy, amount-only by default
            clock: Callable returning the current time, used for reconciled_at
        """
        self.db = db
        self.strategy = strategy or AmountMatch()
        self.clock = clock or (lambda: datetime.now(UTC))

    def _require_bank_account(self, bank_account_id: int) -> BankAccount:
        bank_account = self.db.get_bank_account(bank_account_id)
        if bank_account is None:
            raise NotFoundError(bank_account_not_found(bank_account_id))
        return bank_account

    def _require_transaction(self, transaction_id: int) -> BankTransaction:
        transaction = self.db.get_bank_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(bank_transaction_not_found(transaction_id))
        return transaction

    def candidate_lines(self, bank_account_id: int) -> list[ReconciliationCandidate]:
        """Posted lines on the bank's ledger account not yet reconciled.

        Lines whose entry is already linked to a transaction of this bank
        account are left out. An unlinked bank account has no candidates.
        """
        bank_account = self._require_bank_account(bank_account_id)
        if bank_account.chart_account_id is None:
            return []

        linked = {
            t.journal_entry_id
            for t in self.db.list_bank_transactions(bank_account_id=bank_account_id)
            if t.journal_entry_id is not None
        }
        entries = self.db.list_journal_entries(
            status=EntryStatus.POSTED, account_id=bank_account.chart_account_id
        )
        candidates = []
        for entry in entries:
            if entry.id in linked:
                continue
            for line in entry.lines:
                if line.account_id == bank_account.chart_account_id:
                    candidates.append(
                        ReconciliationCandidate(
                            line=line, entry_number=entry.entry_number, entry_date=entry.entry_date
                        )
                    )
        return candidates

    def suggest_matches(self, transaction_id: int) -> list[ReconciliationCandidate]:
        """Candidates for a bank transaction, matching ones first."""
        transaction = self._require_transaction(transaction_id)
        return find_matches(
            transaction, self.candidate_lines(transaction.bank_account_id), self.strategy
        )

    def reconcile(self, transaction_id: int, journal_entry_id: int) -> BankTransaction:
        """Link a bank transaction to a posted journal entry.

        Raises:
            NotFoundError: If the transaction or entry does not exist
            ValidationError: If the entry is not posted
            ConflictError: If the entry is already linked to another transaction
        """
        transaction = self._require_transaction(transaction_id)
        entry = self.db.get_journal_entry(journal_entry_id)
        if entry is None:
            raise NotFoundError(journal_entry_not_found(journal_entry_id))
        if entry.status != EntryStatus.POSTED:
            raise ValidationError(
                f"Only posted entries can be reconciled; {entry.entry_number} is {entry.status.value}"
            )
        existing = self.db.find_bank_transaction_by_entry(journal_entry_id)
        if existing is not None and existing.id != transaction_id:
            raise ConflictError(entry_already_reconciled(entry.entry_number, existing.id))

        self.db.set_bank_transaction_reconciliation(
            transaction_id,
            is_reconciled=True,
            journal_entry_id=journal_entry_id,
            reconciled_at=self.clock(),
        )
        logger.info(
            "Bank transaction %s reconciled with %s", transaction.id, entry.entry_number
        )
        return self._require_transaction(transaction_id)

    def unreconcile(self, transaction_id: int) -> BankTransaction:
        """Remove the reconciliation flag and journal link."""
        self._require_transaction(transaction_id)
        self.db.set_bank_transaction_reconciliation(
            transaction_id, is_reconciled=False, journal_entry_id=None, reconciled_at=None
        )
        logger.info("Bank transaction %s unreconciled", transaction_id)
        return self._require_transaction(transaction_id)

    def mark_reconciled(self, transaction_id: int) -> BankTransaction:
        """Mark a transaction reconciled without a journal entry (adjustments)."""
        transaction = self._require_transaction(transaction_id)
        self.db.set_bank_transaction_reconciliation(
            transaction_id,
            is_reconciled=True,
            journal_entry_id=transaction.journal_entry_id,
            reconciled_at=self.clock(),
        )
        logger.info("Bank transaction %s marked reconciled", transaction_id)
        return self._require_transaction(transaction_id)

    def book_balance(self, bank_account: BankAccount, as_of: Optional[date] = None) -> Decimal:
        """Ledger view of the bank balance, in the bank account's currency.

        Opening balance plus posted debits less credits on the linked ledger
        account. Unlinked accounts fall back to the derived current balance.
        """
        if bank_account.chart_account_id is None:
            return bank_account.current_balance
        lines = self.db.list_journal_lines(
            statuses=(EntryStatus.POSTED,),
            account_ids=(bank_account.chart_account_id,),
            end_date=as_of,
        )
        movement = sum((line.debit_amount - line.credit_amount for line in lines), Decimal("0"))
        return bank_account.opening_balance + movement

    def summary(self, bank_account_id: int, as_of: Optional[date] = None) -> ReconciliationSummary:
        """Reconciliation summary for a bank account up to an optional date."""
        bank_account = self._require_bank_account(bank_account_id)
        transactions = self.db.list_bank_transactions(
            bank_account_id=bank_account_id, end_date=as_of
        )
        return summarize(bank_account, transactions, self.book_balance(bank_account, as_of))
