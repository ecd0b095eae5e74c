"""Automatic journal entries raised by invoices, payments and expenses.

Each template builds a balanced two-line entry from fixed account codes and
posts it through the normal approval workflow, so the balance invariant and
account checks apply exactly as for manual entries.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from accountbook.database.base import Database
from accountbook.domain.currency import BASE_CURRENCY, normalize_currency
from accountbook.domain.entities import JournalEntry, JournalLineDraft
from accountbook.domain.errors import ValidationError, chart_account_not_found
from accountbook.domain.journal import JournalService

logger = logging.getLogger(__name__)

CASH_TZS = "1120"
CASH_USD = "1130"
CASH_GBP = "1140"
ACCOUNTS_RECEIVABLE = "1210"
ACCOUNTS_PAYABLE = "2110"
AGENT_PAYABLES = "2120"
SHIPPING_REVENUE = "4110"
HANDLING_FEE_REVENUE = "4120"

EXPENSE_ACCOUNTS = {
    "shipping": "5200",
    "handling": "5200",
    "fuel": "5200",
    "customs": "5300",
    "storage": "6200",
    "packaging": "6400",
    "insurance": "6600",
    "other": "6900",
}

AGENT_COST_ACCOUNTS = {
    "europe": "5110",
    "dubai": "5120",
    "china": "5130",
    "india": "5140",
    "usa": "5150",
    "uk": "5160",
}
DEFAULT_AGENT_COST_ACCOUNT = "5100"

CASH_ACCOUNTS = {"TZS": CASH_TZS, "USD": CASH_USD, "GBP": CASH_GBP}


def cash_account_for(currency: str) -> str:
    """Cash account code for a currency, TZS cash for anything else."""
    return CASH_ACCOUNTS.get(normalize_currency(currency), CASH_TZS)


def expense_account_for(category: str) -> str:
    """Expense account code for an expense category."""
    return EXPENSE_ACCOUNTS.get(category.strip().lower(), EXPENSE_ACCOUNTS["other"])


def agent_cost_account_for(region: Optional[str]) -> str:
    """Agent cost account code for an origin region."""
    if not region:
        return DEFAULT_AGENT_COST_ACCOUNT
    return AGENT_COST_ACCOUNTS.get(region.strip().lower(), DEFAULT_AGENT_COST_ACCOUNT)


@dataclass(frozen=True)
class TemplateLine:
    """One side of a templated entry. Exactly one of account_code/account_id is set."""

    description: str
    is_debit: bool
    account_code: Optional[str] = None
    account_id: Optional[int] = None


class AutoPostingService:
    """Creates and posts the journal entries behind business events."""

    def __init__(self, db: Database, journal_service: Optional[JournalService] = None):
        """Initialize automatic posting service.

        Args:
            db: Database instance
            journal_service: JournalService used to create and post entries
        """
        self.db = db
        self.journal_service = journal_service or JournalService(db)

    def _resolve_account(self, template_line: TemplateLine) -> int:
        if template_line.account_id is not None:
            account = self.db.get_chart_account(template_line.account_id)
            if account is None:
                raise ValidationError(chart_account_not_found(template_line.account_id))
            return account.id
        account = self.db.get_chart_account_by_code(template_line.account_code or "")
        if account is None:
            raise ValidationError(chart_account_not_found(template_line.account_code or ""))
        return account.id

    def _post(
        self,
        description: str,
        reference_type: str,
        reference_id: Optional[str],
        amount: Decimal,
        currency: str,
        exchange_rate: Optional[Decimal],
        debit: TemplateLine,
        credit: TemplateLine,
        entry_date: Optional[date] = None,
    ) -> JournalEntry:
        if amount <= 0:
            raise ValidationError("Amount must be positive")
        currency = normalize_currency(currency)
        if currency == BASE_CURRENCY:
            exchange_rate = Decimal("1")

        lines = [
            JournalLineDraft(
                account_id=self._resolve_account(debit),
                debit_amount=amount,
                currency=currency,
                exchange_rate=exchange_rate,
                description=debit.description,
            ),
            JournalLineDraft(
                account_id=self._resolve_account(credit),
                credit_amount=amount,
                currency=currency,
                exchange_rate=exchange_rate,
                description=credit.description,
            ),
        ]
        entry = self.journal_service.create_entry(
            entry_date=entry_date or self.journal_service.clock().date(),
            description=description,
            lines=lines,
            reference_type=reference_type,
            reference_id=reference_id,
        )
        posted = self.journal_service.post_directly(entry.id)
        logger.info("Auto-posted %s for %s %s", posted.entry_number, reference_type, reference_id)
        return posted

    def invoice_issued(
        self,
        invoice_number: str,
        amount: Decimal,
        currency: str = BASE_CURRENCY,
        exchange_rate: Optional[Decimal] = None,
        customer_name: Optional[str] = None,
        invoice_id: Optional[str] = None,
        entry_date: Optional[date] = None,
    ) -> JournalEntry:
        """Debit receivables, credit shipping revenue."""
        to_customer = f" to {customer_name}" if customer_name else ""
        return self._post(
            description=f"Invoice {invoice_number} issued{to_customer}",
            reference_type="invoice",
            reference_id=invoice_id or invoice_number,
            amount=amount,
            currency=currency,
            exchange_rate=exchange_rate,
            debit=TemplateLine(f"AR - Invoice {invoice_number}", True, ACCOUNTS_RECEIVABLE),
            credit=TemplateLine(f"Revenue - Invoice {invoice_number}", False, SHIPPING_REVENUE),
            entry_date=entry_date,
        )

    def invoice_payment_received(
        self,
        invoice_number: str,
        amount: Decimal,
        currency: str = BASE_CURRENCY,
        exchange_rate: Optional[Decimal] = None,
        deposit_account_id: Optional[int] = None,
        invoice_id: Optional[str] = None,
        entry_date: Optional[date] = None,
    ) -> JournalEntry:
        """Debit cash (or the chosen deposit account), credit receivables."""
        cash = TemplateLine(
            f"Cash received - Invoice {invoice_number}",
            True,
            account_code=None if deposit_account_id else cash_account_for(currency),
            account_id=deposit_account_id,
        )
        return self._post(
            description=f"Payment received for Invoice {invoice_number}",
            reference_type="payment",
            reference_id=invoice_id or invoice_number,
            amount=amount,
            currency=currency,
            exchange_rate=exchange_rate,
            debit=cash,
            credit=TemplateLine(f"Clear AR - Invoice {invoice_number}", False, ACCOUNTS_RECEIVABLE),
            entry_date=entry_date,
        )

    def expense_approved(
        self,
        category: str,
        amount: Decimal,
        currency: str = BASE_CURRENCY,
        exchange_rate: Optional[Decimal] = None,
        description: Optional[str] = None,
        expense_id: Optional[str] = None,
        entry_date: Optional[date] = None,
    ) -> JournalEntry:
        """Debit the category's expense account, credit accounts payable."""
        label = description or category
        return self._post(
            description=f"Expense approved: {label}",
            reference_type="expense",
            reference_id=expense_id,
            amount=amount,
            currency=currency,
            exchange_rate=exchange_rate,
            debit=TemplateLine(description or f"{category} expense", True, expense_account_for(category)),
            credit=TemplateLine(f"Payable for expense: {label}", False, ACCOUNTS_PAYABLE),
            entry_date=entry_date,
        )

    def expense_paid(
        self,
        category: str,
        amount: Decimal,
        bank_chart_account_id: int,
        currency: str = BASE_CURRENCY,
        exchange_rate: Optional[Decimal] = None,
        description: Optional[str] = None,
        expense_id: Optional[str] = None,
        entry_date: Optional[date] = None,
    ) -> JournalEntry:
        """Debit the expense account, credit the paying bank's ledger account."""
        label = description or category
        return self._post(
            description=f"Expense paid: {label}",
            reference_type="expense",
            reference_id=expense_id,
            amount=amount,
            currency=currency,
            exchange_rate=exchange_rate,
            debit=TemplateLine(description or f"{category} expense", True, expense_account_for(category)),
            credit=TemplateLine(f"Paid from bank - {label}", False, account_id=bank_chart_account_id),
            entry_date=entry_date,
        )

    def agent_invoice_received(
        self,
        invoice_number: str,
        amount: Decimal,
        currency: str = BASE_CURRENCY,
        exchange_rate: Optional[Decimal] = None,
        agent_name: Optional[str] = None,
        origin_region: Optional[str] = None,
        invoice_id: Optional[str] = None,
        entry_date: Optional[date] = None,
    ) -> JournalEntry:
        """Debit the region's agent cost account, credit agent payables."""
        from_agent = f" from {agent_name}" if agent_name else ""
        return self._post(
            description=f"Agent invoice {invoice_number}{from_agent}",
            reference_type="invoice",
            reference_id=invoice_id or invoice_number,
            amount=amount,
            currency=currency,
            exchange_rate=exchange_rate,
            debit=TemplateLine(
                f"Agent cost - Invoice {invoice_number}", True, agent_cost_account_for(origin_region)
            ),
            credit=TemplateLine(f"Payable to agent - Invoice {invoice_number}", False, AGENT_PAYABLES),
            entry_date=entry_date,
        )

    def agent_billed(
        self,
        invoice_number: str,
        amount: Decimal,
        currency: str = BASE_CURRENCY,
        exchange_rate: Optional[Decimal] = None,
        agent_name: Optional[str] = None,
        invoice_id: Optional[str] = None,
        entry_date: Optional[date] = None,
    ) -> JournalEntry:
        """Debit receivables, credit revenue for clearing services billed to an agent."""
        to_agent = f" to {agent_name}" if agent_name else ""
        return self._post(
            description=f"Agent invoice {invoice_number}{to_agent} (clearing services)",
            reference_type="invoice",
            reference_id=invoice_id or invoice_number,
            amount=amount,
            currency=currency,
            exchange_rate=exchange_rate,
            debit=TemplateLine(
                f"Receivable from agent - Invoice {invoice_number}", True, ACCOUNTS_RECEIVABLE
            ),
            credit=TemplateLine(
                f"Clearing service revenue - Invoice {invoice_number}", False, SHIPPING_REVENUE
            ),
            entry_date=entry_date,
        )

    def agent_payment(
        self,
        invoice_number: str,
        amount: Decimal,
        currency: str = BASE_CURRENCY,
        exchange_rate: Optional[Decimal] = None,
        source_account_id: Optional[int] = None,
        amount_in_base: Optional[Decimal] = None,
        invoice_id: Optional[str] = None,
        entry_date: Optional[date] = None,
    ) -> JournalEntry:
        """Debit agent payables, credit cash (or the chosen source account).

        If amount_in_base is given, the rate is derived from it.
        """
        if amount_in_base is not None and amount:
            exchange_rate = Decimal(amount_in_base) / Decimal(amount)
        cash = TemplateLine(
            f"Payment to agent - Invoice {invoice_number}",
            False,
            account_code=None if source_account_id else cash_account_for(currency),
            account_id=source_account_id,
        )
        return self._post(
            description=f"Payment to agent for Invoice {invoice_number}",
            reference_type="payment",
            reference_id=invoice_id or invoice_number,
            amount=amount,
            currency=currency,
            exchange_rate=exchange_rate,
            debit=TemplateLine(f"Clear agent payable - Invoice {invoice_number}", True, AGENT_PAYABLES),
            credit=cash,
            entry_date=entry_date,
        )
