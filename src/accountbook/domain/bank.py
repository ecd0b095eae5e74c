"""Bank account domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from accountbook.database.base import Database
from accountbook.domain.currency import BASE_CURRENCY, normalize_currency
from accountbook.domain.entities import AccountType, BankAccount, BankTransaction
from accountbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    bank_account_not_found,
    bank_transaction_not_found,
    chart_account_not_found,
)


class BankAccountService:
    """Service for managing bank accounts and their statement lines."""

    def __init__(self, db: Database):
        """Initialize bank account service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_bank_account(self, bank_account_id: int) -> BankAccount:
        bank_account = self.db.get_bank_account(bank_account_id)
        if bank_account is None:
            raise NotFoundError(bank_account_not_found(bank_account_id))
        return bank_account

    def _check_chart_account(self, chart_account_id: int) -> None:
        account = self.db.get_chart_account(chart_account_id)
        if account is None:
            raise NotFoundError(chart_account_not_found(chart_account_id))
        if account.account_type != AccountType.ASSET:
            raise ValidationError(f"Account {account.code} is not an asset account")
        if not account.is_active:
            raise ValidationError(f"Account {account.code} is inactive")

    def create_bank_account(
        self,
        name: str,
        bank_name: str,
        currency: str = BASE_CURRENCY,
        account_number: Optional[str] = None,
        chart_account_id: Optional[int] = None,
        opening_balance: Decimal = Decimal("0"),
    ) -> BankAccount:
        """Create a bank account.

        Raises:
            ConflictError: If name already exists
            ValidationError: If the linked chart account is not an active asset account
        """
        if not name or not name.strip():
            raise ValidationError("Bank account name is required")
        for existing in self.db.list_bank_accounts():
            if existing.name == name.strip():
                raise ConflictError(f"Bank account with name '{name.strip()}' already exists")
        if chart_account_id is not None:
            self._check_chart_account(chart_account_id)

        bank_account_id = self.db.create_bank_account(
            name=name.strip(),
            bank_name=bank_name,
            currency=normalize_currency(currency),
            account_number=account_number,
            chart_account_id=chart_account_id,
            opening_balance=opening_balance,
        )
        return self._require_bank_account(bank_account_id)

    def get_bank_account(self, bank_account_id: int) -> Optional[BankAccount]:
        """Get bank account by ID."""
        return self.db.get_bank_account(bank_account_id)

    def list_bank_accounts(self, active_only: bool = False) -> list[BankAccount]:
        """List bank accounts ordered by name."""
        accounts = self.db.list_bank_accounts()
        if active_only:
            accounts = [a for a in accounts if a.is_active]
        return accounts

    def link_chart_account(self, bank_account_id: int, chart_account_id: int) -> BankAccount:
        """Link a bank account to its ledger account."""
        self._require_bank_account(bank_account_id)
        self._check_chart_account(chart_account_id)
        self.db.update_bank_account(bank_account_id, chart_account_id=chart_account_id)
        return self._require_bank_account(bank_account_id)

    def set_active(self, bank_account_id: int, is_active: bool) -> BankAccount:
        """Retire or re-enable a bank account."""
        self._require_bank_account(bank_account_id)
        self.db.update_bank_account(bank_account_id, is_active=is_active)
        return self._require_bank_account(bank_account_id)

    def add_transaction(
        self,
        bank_account_id: int,
        transaction_date: date,
        debit_amount: Decimal = Decimal("0"),
        credit_amount: Decimal = Decimal("0"),
        description: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> BankTransaction:
        """Record a bank statement line.

        Exactly one of debit_amount (money out) or credit_amount (money in)
        must be positive.
        """
        self._require_bank_account(bank_account_id)
        if debit_amount < 0 or credit_amount < 0:
            raise ValidationError("Amounts cannot be negative")
        if (debit_amount > 0) == (credit_amount > 0):
            raise ValidationError("Exactly one of debit or credit amount must be set")

        transaction_id = self.db.create_bank_transaction(
            bank_account_id=bank_account_id,
            transaction_date=transaction_date,
            debit_amount=debit_amount,
            credit_amount=credit_amount,
            description=description,
            reference=reference,
        )
        transaction = self.db.get_bank_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(bank_transaction_not_found(transaction_id))
        return transaction

    def list_transactions(
        self,
        bank_account_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reconciled: Optional[bool] = None,
    ) -> list[BankTransaction]:
        """List a bank account's transactions in date order."""
        self._require_bank_account(bank_account_id)
        return self.db.list_bank_transactions(
            bank_account_id=bank_account_id,
            start_date=start_date,
            end_date=end_date,
            reconciled=reconciled,
        )

    def current_balance(self, bank_account_id: int) -> Decimal:
        """Opening balance plus net of all the account's transactions."""
        return self._require_bank_account(bank_account_id).current_balance
