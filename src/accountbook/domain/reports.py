"""Financial statements built from account balances."""

from datetime import date
from decimal import Decimal
from typing import Optional

from accountbook.database.base import Database
from accountbook.domain.balances import BalanceService, compute_balances
from accountbook.domain.entities import (
    AccountType,
    BalanceSheet,
    ChartAccount,
    IncomeStatement,
    NormalBalance,
    StatementLine,
    TrialBalance,
    TrialBalanceRow,
)

ZERO = Decimal("0")


def trial_balance_columns(normal_balance: NormalBalance, balance: Decimal) -> tuple[Decimal, Decimal]:
    """Split a signed balance into (debit, credit) trial balance columns.

    A positive balance sits on the account's normal side; a negative one
    shows its absolute value on the opposite side.
    """
    if NormalBalance(normal_balance) == NormalBalance.DEBIT:
        return (balance, ZERO) if balance >= 0 else (ZERO, -balance)
    return (ZERO, balance) if balance >= 0 else (-balance, ZERO)


def _statement_lines(
    accounts: list[ChartAccount], balances: dict[int, Decimal], account_type: AccountType
) -> tuple[StatementLine, ...]:
    return tuple(
        StatementLine(account_id=a.id, code=a.code, name=a.name, amount=balances.get(a.id, ZERO))
        for a in accounts
        if a.account_type == account_type and balances.get(a.id, ZERO) != 0
    )


class ReportService:
    """Service producing trial balance, income statement and balance sheet."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db
        self.balances = BalanceService(db)

    def _leaf_balances(
        self, start_date: Optional[date] = None, as_of: Optional[date] = None
    ) -> tuple[list[ChartAccount], dict[int, Decimal]]:
        # Statements list direct balances so parents are not counted twice.
        accounts = self.db.list_chart_accounts()
        lines = self.balances.posted_lines(start_date=start_date, as_of=as_of)
        return accounts, compute_balances({a.id: a for a in accounts}, lines, rollup=False)

    def trial_balance(self, as_of: Optional[date] = None) -> TrialBalance:
        """Trial balance of every account with a non-zero balance."""
        accounts, balances = self._leaf_balances(as_of=as_of)
        rows = []
        for account in accounts:
            balance = balances.get(account.id, ZERO)
            if balance == 0:
                continue
            debit, credit = trial_balance_columns(account.normal_balance, balance)
            rows.append(
                TrialBalanceRow(
                    account_id=account.id,
                    code=account.code,
                    name=account.name,
                    normal_balance=account.normal_balance,
                    balance=balance,
                    debit=debit,
                    credit=credit,
                )
            )
        return TrialBalance(
            as_of=as_of,
            rows=tuple(rows),
            total_debit=sum((r.debit for r in rows), ZERO),
            total_credit=sum((r.credit for r in rows), ZERO),
        )

    def income_statement(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> IncomeStatement:
        """Revenue and expenses for entries dated within the period."""
        accounts, balances = self._leaf_balances(start_date=start_date, as_of=end_date)
        revenue = _statement_lines(accounts, balances, AccountType.REVENUE)
        expenses = _statement_lines(accounts, balances, AccountType.EXPENSE)
        return IncomeStatement(
            start_date=start_date,
            end_date=end_date,
            revenue=revenue,
            expenses=expenses,
            total_revenue=sum((line.amount for line in revenue), ZERO),
            total_expenses=sum((line.amount for line in expenses), ZERO),
        )

    def balance_sheet(self, as_of: Optional[date] = None) -> BalanceSheet:
        """Assets, liabilities and equity, with unclosed earnings to date."""
        accounts, balances = self._leaf_balances(as_of=as_of)
        assets = _statement_lines(accounts, balances, AccountType.ASSET)
        liabilities = _statement_lines(accounts, balances, AccountType.LIABILITY)
        equity = _statement_lines(accounts, balances, AccountType.EQUITY)
        revenue = _statement_lines(accounts, balances, AccountType.REVENUE)
        expenses = _statement_lines(accounts, balances, AccountType.EXPENSE)
        return BalanceSheet(
            as_of=as_of,
            assets=assets,
            liabilities=liabilities,
            equity=equity,
            total_assets=sum((line.amount for line in assets), ZERO),
            total_liabilities=sum((line.amount for line in liabilities), ZERO),
            total_equity=sum((line.amount for line in equity), ZERO),
            current_earnings=sum((line.amount for line in revenue), ZERO)
            - sum((line.amount for line in expenses), ZERO),
        )
