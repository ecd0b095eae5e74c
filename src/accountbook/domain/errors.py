"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class UnbalancedEntryError(ValidationError):
    """Journal entry debits and credits differ by at least the tolerance."""

    def __init__(self, total_debits: Decimal, total_credits: Decimal):
        self.total_debits = total_debits
        self.total_credits = total_credits
        self.difference = total_debits - total_credits
        super().__init__(
            f"Entry is not balanced: debits {total_debits:,.2f} != credits "
            f"{total_credits:,.2f} (difference {abs(self.difference):,.2f})"
        )


class InvalidTransitionError(DomainError):
    """Journal entry status change not allowed from its current status."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move journal entry from '{current}' to '{requested}'")


class MissingRateError(ValidationError):
    """No exchange rate is known for a currency (strict conversion only)."""

    def __init__(self, currency_code: str):
        self.currency_code = currency_code
        super().__init__(f"No exchange rate for currency '{currency_code}'")


def chart_account_not_found(account: int | str) -> str:
    """Return message for missing chart account by ID or code."""
    if isinstance(account, int):
        return f"Account {account} not found"
    return f"Account '{account}' not found"


def journal_entry_not_found(entry_id: int) -> str:
    """Return message for missing journal entry."""
    return f"Journal entry {entry_id} not found"


def bank_account_not_found(bank_account_id: int) -> str:
    """Return message for missing bank account."""
    return f"Bank account {bank_account_id} not found"


def bank_transaction_not_found(transaction_id: int) -> str:
    """Return message for missing bank transaction."""
    return f"Bank transaction {transaction_id} not found"


def duplicate_account_code(code: str) -> str:
    """Return message for duplicate chart account code."""
    return f"Account with code '{code}' already exists"


def entry_already_reconciled(entry_number: str, transaction_id: int) -> str:
    """Return message when a journal entry is linked to another bank transaction."""
    return (
        f"Journal entry {entry_number} is already reconciled with "
        f"bank transaction {transaction_id}"
    )
