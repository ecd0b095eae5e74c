"""Journal entry validation, posting workflow and domain service."""

import logging
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Callable, Iterable, Mapping, Optional, Sequence

from accountbook.database.base import Database
from accountbook.domain.currency import BASE_CURRENCY, normalize_currency, rate_for
from accountbook.domain.entities import (
    EntryStatus,
    JournalEntry,
    JournalLine,
    JournalLineDraft,
)
from accountbook.domain.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    UnbalancedEntryError,
    ValidationError,
    chart_account_not_found,
    journal_entry_not_found,
)

logger = logging.getLogger(__name__)

BALANCE_TOLERANCE = Decimal("0.01")

JOURNAL_COUNTER = "journal"
JOURNAL_PREFIX = "JE"

# Allowed status changes: current -> reachable states
TRANSITIONS: dict[EntryStatus, frozenset[EntryStatus]] = {
    EntryStatus.DRAFT: frozenset({EntryStatus.PENDING_APPROVAL}),
    EntryStatus.PENDING_APPROVAL: frozenset({EntryStatus.POSTED, EntryStatus.REJECTED}),
    EntryStatus.REJECTED: frozenset({EntryStatus.PENDING_APPROVAL}),
    EntryStatus.POSTED: frozenset({EntryStatus.VOIDED}),
    EntryStatus.VOIDED: frozenset(),
}

EDITABLE_STATUSES = frozenset({EntryStatus.DRAFT, EntryStatus.REJECTED})


def check_transition(current: EntryStatus, requested: EntryStatus) -> None:
    """Raise InvalidTransitionError unless current -> requested is allowed."""
    if requested not in TRANSITIONS[EntryStatus(current)]:
        raise InvalidTransitionError(EntryStatus(current).value, EntryStatus(requested).value)


def line_totals(lines: Iterable[JournalLine | JournalLineDraft]) -> tuple[Decimal, Decimal]:
    """Sum debits and credits of lines in the base currency.

    Every line must carry its exchange rate; drafts without one are
    resolved by resolve_line_rates first.
    """
    total_debits = Decimal("0")
    total_credits = Decimal("0")
    for line in lines:
        if line.exchange_rate is None:
            raise ValidationError("Journal line has no exchange rate")
        total_debits += line.debit_amount * line.exchange_rate
        total_credits += line.credit_amount * line.exchange_rate
    return total_debits, total_credits


def is_balanced(lines: Iterable[JournalLine | JournalLineDraft]) -> bool:
    """Return True if debits and credits agree within the tolerance."""
    total_debits, total_credits = line_totals(lines)
    return abs(total_debits - total_credits) < BALANCE_TOLERANCE


def validate_balance(lines: Iterable[JournalLine | JournalLineDraft]) -> tuple[Decimal, Decimal]:
    """Check the double-entry invariant.

    Returns:
        Tuple of (total_debits, total_credits) in the base currency

    Raises:
        UnbalancedEntryError: If the totals differ by 0.01 or more
    """
    total_debits, total_credits = line_totals(lines)
    if abs(total_debits - total_credits) >= BALANCE_TOLERANCE:
        raise UnbalancedEntryError(total_debits, total_credits)
    return total_debits, total_credits


def validate_line_amounts(lines: Sequence[JournalLineDraft]) -> None:
    """Check line count and per-line amount rules.

    Raises:
        ValidationError: On fewer than two lines, negative amounts, or a line
            that is not exactly one of debit or credit
    """
    if len(lines) < 2:
        raise ValidationError("A journal entry needs at least two lines")
    for index, line in enumerate(lines, start=1):
        if line.debit_amount < 0 or line.credit_amount < 0:
            raise ValidationError(f"Line {index}: amounts cannot be negative")
        if line.debit_amount > 0 and line.credit_amount > 0:
            raise ValidationError(f"Line {index}: a line is either a debit or a credit, not both")
        if line.debit_amount == 0 and line.credit_amount == 0:
            raise ValidationError(f"Line {index}: debit or credit amount is required")
        if line.exchange_rate is not None and line.exchange_rate <= 0:
            raise ValidationError(f"Line {index}: exchange rate must be positive")


def resolve_line_rates(
    lines: Sequence[JournalLineDraft], rates: Mapping[str, Decimal], *, strict: bool = False
) -> list[JournalLineDraft]:
    """Fill in missing exchange rates from the rate table.

    Base currency lines always get rate 1, whatever was supplied.
    """
    resolved = []
    for line in lines:
        currency = normalize_currency(line.currency)
        if currency == BASE_CURRENCY:
            rate = Decimal("1")
        elif line.exchange_rate is not None:
            rate = Decimal(line.exchange_rate)
        else:
            rate = rate_for(currency, rates, strict=strict)
        resolved.append(
            JournalLineDraft(
                account_id=line.account_id,
                debit_amount=Decimal(line.debit_amount),
                credit_amount=Decimal(line.credit_amount),
                currency=currency,
                exchange_rate=rate,
                description=line.description,
            )
        )
    return resolved


def format_entry_number(year: int, sequence: int) -> str:
    """Format an entry number such as JE-2025-0042."""
    return f"{JOURNAL_PREFIX}-{year}-{sequence:04d}"


class JournalService:
    """Service for creating journal entries and moving them through approval."""

    def __init__(
        self,
        db: Database,
        strict_rates: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize journal service.

        Args:
            db: Database instance
            strict_rates: If True, unknown currencies raise MissingRateError
            clock: Callable returning the current time, used for posted_at
                and voided_at
        """
        self.db = db
        self.strict_rates = strict_rates
        self.clock = clock or (lambda: datetime.now(UTC))

    def _rates(self) -> dict[str, Decimal]:
        return {rate.currency_code: rate.rate_to_base for rate in self.db.list_exchange_rates()}

    def _prepare_lines(self, lines: Sequence[JournalLineDraft]) -> list[JournalLineDraft]:
        """Validate lines against the chart of accounts and resolve their rates."""
        validate_line_amounts(lines)
        for index, line in enumerate(lines, start=1):
            account = self.db.get_chart_account(line.account_id)
            if account is None:
                raise ValidationError(f"Line {index}: {chart_account_not_found(line.account_id)}")
            if not account.is_active:
                raise ValidationError(f"Line {index}: account {account.code} is inactive")
        return resolve_line_rates(lines, self._rates(), strict=self.strict_rates)

    def _require_entry(self, entry_id: int) -> JournalEntry:
        entry = self.db.get_journal_entry(entry_id)
        if entry is None:
            raise NotFoundError(journal_entry_not_found(entry_id))
        return entry

    def create_entry(
        self,
        entry_date: date,
        description: str,
        lines: Sequence[JournalLineDraft],
        reference_type: Optional[str] = None,
        reference_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> JournalEntry:
        """Create a draft journal entry.

        Balance is not required for a draft; it is enforced on submission
        and on approval.

        Args:
            entry_date: Accounting date of the entry
            description: Entry description
            lines: At least two line drafts
            reference_type: Optional free-form source tag (invoice, payment, ...)
            reference_id: Optional identifier of the source document
            notes: Optional notes

        Returns:
            The stored entry in draft status

        Raises:
            ValidationError: On missing description, too few lines, bad
                amounts, or unknown/inactive accounts
        """
        if not description or not description.strip():
            raise ValidationError("Description is required")
        prepared = self._prepare_lines(lines)

        sequence = self.db.next_sequence(JOURNAL_COUNTER)
        entry_number = format_entry_number(entry_date.year, sequence)
        entry_id = self.db.create_journal_entry(
            entry_number=entry_number,
            entry_date=entry_date,
            description=description.strip(),
            status=EntryStatus.DRAFT,
            lines=prepared,
            reference_type=reference_type,
            reference_id=reference_id,
            notes=notes,
        )
        logger.info("Created journal entry %s (%d lines)", entry_number, len(prepared))
        return self._require_entry(entry_id)

    def get_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get a journal entry with its lines, or None if not found."""
        return self.db.get_journal_entry(entry_id)

    def get_entry_by_number(self, entry_number: str) -> Optional[JournalEntry]:
        """Get a journal entry by its entry number."""
        return self.db.get_journal_entry_by_number(entry_number)

    def list_entries(
        self,
        status: Optional[EntryStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> list[JournalEntry]:
        """List journal entries, newest first, with optional filters."""
        return self.db.list_journal_entries(
            status=status, start_date=start_date, end_date=end_date, account_id=account_id
        )

    def update_draft(
        self,
        entry_id: int,
        entry_date: Optional[date] = None,
        description: Optional[str] = None,
        lines: Optional[Sequence[JournalLineDraft]] = None,
        notes: Optional[str] = None,
    ) -> JournalEntry:
        """Edit a draft or rejected entry.

        Raises:
            NotFoundError: If the entry does not exist
            InvalidTransitionError: If the entry is no longer editable
            ValidationError: If replacement lines are invalid
        """
        entry = self._require_entry(entry_id)
        if entry.status not in EDITABLE_STATUSES:
            raise InvalidTransitionError(entry.status.value, "edit")
        if description is not None and not description.strip():
            raise ValidationError("Description is required")

        prepared = self._prepare_lines(lines) if lines is not None else None
        self.db.update_journal_entry(
            entry_id,
            entry_date=entry_date,
            description=description.strip() if description is not None else None,
            notes=notes,
            lines=prepared,
        )
        return self._require_entry(entry_id)

    def delete_draft(self, entry_id: int) -> None:
        """Delete a draft or rejected entry and its lines."""
        entry = self._require_entry(entry_id)
        if entry.status not in EDITABLE_STATUSES:
            raise InvalidTransitionError(entry.status.value, "delete")
        self.db.delete_journal_entry(entry_id)
        logger.info("Deleted journal entry %s", entry.entry_number)

    def submit_for_approval(self, entry_id: int) -> JournalEntry:
        """Move a draft or rejected entry to pending_approval.

        Raises:
            InvalidTransitionError: If the entry is not draft or rejected
            UnbalancedEntryError: If the entry does not balance
        """
        entry = self._require_entry(entry_id)
        check_transition(entry.status, EntryStatus.PENDING_APPROVAL)
        validate_balance(entry.lines)
        self.db.set_journal_status(entry_id, EntryStatus.PENDING_APPROVAL, rejection_reason=None)
        logger.info("Journal entry %s submitted for approval", entry.entry_number)
        return self._require_entry(entry_id)

    def approve(self, entry_id: int) -> JournalEntry:
        """Post a pending entry. Its lines count towards balances from now on."""
        entry = self._require_entry(entry_id)
        check_transition(entry.status, EntryStatus.POSTED)
        validate_balance(entry.lines)
        self.db.set_journal_status(entry_id, EntryStatus.POSTED, posted_at=self.clock())
        logger.info("Journal entry %s posted", entry.entry_number)
        return self._require_entry(entry_id)

    def reject(self, entry_id: int, reason: str) -> JournalEntry:
        """Reject a pending entry, returning it to an editable state."""
        if not reason or not reason.strip():
            raise ValidationError("A rejection reason is required")
        entry = self._require_entry(entry_id)
        check_transition(entry.status, EntryStatus.REJECTED)
        self.db.set_journal_status(entry_id, EntryStatus.REJECTED, rejection_reason=reason.strip())
        logger.info("Journal entry %s rejected: %s", entry.entry_number, reason.strip())
        return self._require_entry(entry_id)

    def void(self, entry_id: int) -> JournalEntry:
        """Void a posted entry.

        Lines are kept for the audit trail and excluded from balances. No
        reversing entry is generated.

        Raises:
            ConflictError: If a bank transaction is still reconciled to the entry
        """
        entry = self._require_entry(entry_id)
        check_transition(entry.status, EntryStatus.VOIDED)
        linked = self.db.find_bank_transaction_by_entry(entry_id)
        if linked is not None:
            raise ConflictError(
                f"Journal entry {entry.entry_number} is reconciled with bank transaction "
                f"{linked.id}; unreconcile it first"
            )
        self.db.set_journal_status(entry_id, EntryStatus.VOIDED, voided_at=self.clock())
        logger.info("Journal entry %s voided", entry.entry_number)
        return self._require_entry(entry_id)

    def post_directly(self, entry_id: int) -> JournalEntry:
        """Submit and approve in one step, for system-generated entries."""
        self.submit_for_approval(entry_id)
        return self.approve(entry_id)
