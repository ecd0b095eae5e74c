"""Account balance aggregation over posted journal lines."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from accountbook.database.base import Database
from accountbook.domain.entities import ChartAccount, EntryStatus, JournalLine, NormalBalance
from accountbook.domain.errors import NotFoundError, chart_account_not_found

ZERO = Decimal("0")


def build_children_map(accounts: Mapping[int, ChartAccount]) -> dict[int, list[int]]:
    """Map each account ID to the IDs of its direct children."""
    children: dict[int, list[int]] = defaultdict(list)
    for account in accounts.values():
        if account.parent_id is not None:
            children[account.parent_id].append(account.id)
    return children


def descendant_ids(account_id: int, children: Mapping[int, list[int]]) -> set[int]:
    """Return all descendant IDs of an account, not including itself."""
    result: set[int] = set()
    stack = list(children.get(account_id, ()))
    while stack:
        child_id = stack.pop()
        if child_id in result:
            continue
        result.add(child_id)
        stack.extend(children.get(child_id, ()))
    return result


def signed_balance(normal_balance: NormalBalance, debits: Decimal, credits: Decimal) -> Decimal:
    """Apply the normal-balance sign convention to debit and credit totals."""
    if NormalBalance(normal_balance) == NormalBalance.DEBIT:
        return debits - credits
    return credits - debits


def direct_totals(posted_lines: Iterable[JournalLine]) -> dict[int, tuple[Decimal, Decimal]]:
    """Sum base-currency debits and credits per account."""
    totals: dict[int, list[Decimal]] = defaultdict(lambda: [ZERO, ZERO])
    for line in posted_lines:
        totals[line.account_id][0] += line.debit_in_base
        totals[line.account_id][1] += line.credit_in_base
    return {account_id: (pair[0], pair[1]) for account_id, pair in totals.items()}


def compute_balances(
    accounts: Mapping[int, ChartAccount],
    posted_lines: Iterable[JournalLine],
    *,
    rollup: bool = True,
) -> dict[int, Decimal]:
    """Compute the balance of every account in one pass.

    Args:
        accounts: Chart of accounts keyed by ID
        posted_lines: Lines of posted entries only
        rollup: If True, a parent's balance includes the balances of all
            its descendants

    Returns:
        Dictionary mapping account ID to balance in the base currency
    """
    totals = direct_totals(posted_lines)
    own = {
        account_id: signed_balance(account.normal_balance, *totals.get(account_id, (ZERO, ZERO)))
        for account_id, account in accounts.items()
    }
    if not rollup:
        return own

    children = build_children_map(accounts)
    memo: dict[int, Decimal] = {}

    def rolled(account_id: int, path: frozenset[int]) -> Decimal:
        if account_id in memo:
            return memo[account_id]
        total = own.get(account_id, ZERO)
        for child_id in children.get(account_id, ()):
            # Parent links are kept acyclic on write; skip rather than recurse forever.
            if child_id in path:
                continue
            total += rolled(child_id, path | {child_id})
        memo[account_id] = total
        return total

    return {account_id: rolled(account_id, frozenset({account_id})) for account_id in accounts}


def compute_balance(
    account_id: int,
    accounts: Mapping[int, ChartAccount],
    posted_lines: Iterable[JournalLine],
    *,
    rollup: bool = True,
) -> Decimal:
    """Compute one account's balance from posted lines.

    Raises:
        NotFoundError: If account_id is not in accounts
    """
    if account_id not in accounts:
        raise NotFoundError(chart_account_not_found(account_id))
    if not rollup:
        totals = direct_totals(line for line in posted_lines if line.account_id == account_id)
        debits, credits = totals.get(account_id, (ZERO, ZERO))
        return signed_balance(accounts[account_id].normal_balance, debits, credits)

    children = build_children_map(accounts)
    relevant = {account_id} | descendant_ids(account_id, children)
    subset = {aid: accounts[aid] for aid in relevant if aid in accounts}
    lines = [line for line in posted_lines if line.account_id in relevant]
    return compute_balances(subset, lines)[account_id]


class BalanceService:
    """Service computing account balances from the ledger."""

    def __init__(self, db: Database):
        """Initialize balance service.

        Args:
            db: Database instance
        """
        self.db = db

    def accounts_by_id(self) -> dict[int, ChartAccount]:
        """Return the whole chart of accounts keyed by ID."""
        return {account.id: account for account in self.db.list_chart_accounts()}

    def posted_lines(
        self, start_date: Optional[date] = None, as_of: Optional[date] = None
    ) -> list[JournalLine]:
        """Lines of posted entries, optionally limited to an entry date range."""
        return self.db.list_journal_lines(
            statuses=(EntryStatus.POSTED,), start_date=start_date, end_date=as_of
        )

    def account_balance(
        self, account_id: int, as_of: Optional[date] = None, rollup: bool = True
    ) -> Decimal:
        """Balance of one account, including descendants when rollup is set.

        Raises:
            NotFoundError: If the account does not exist
        """
        return compute_balance(
            account_id, self.accounts_by_id(), self.posted_lines(as_of=as_of), rollup=rollup
        )

    def all_balances(
        self,
        start_date: Optional[date] = None,
        as_of: Optional[date] = None,
        rollup: bool = True,
    ) -> dict[int, Decimal]:
        """Balances of every account."""
        return compute_balances(
            self.accounts_by_id(), self.posted_lines(start_date=start_date, as_of=as_of), rollup=rollup
        )
