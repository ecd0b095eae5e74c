"""Chart of accounts domain service."""

import logging
from typing import Any, Optional

from accountbook.database.base import Database
from accountbook.domain.currency import BASE_CURRENCY, normalize_currency
from accountbook.domain.entities import AccountType, ChartAccount, normal_balance_for
from accountbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    chart_account_not_found,
    duplicate_account_code,
)

logger = logging.getLogger(__name__)


def parse_account_type(value: str | AccountType) -> AccountType:
    """Parse an account type name.

    Raises:
        ValidationError: If the value is not a known account type
    """
    try:
        return AccountType(value.strip().lower() if isinstance(value, str) else value)
    except ValueError:
        valid = ", ".join(t.value for t in AccountType)
        raise ValidationError(f"Unknown account type '{value}'. Valid types: {valid}")


def would_create_cycle(
    account_id: int, new_parent_id: Optional[int], parents: dict[int, Optional[int]]
) -> bool:
    """Return True if making new_parent_id the parent of account_id forms a cycle.

    Args:
        account_id: Account being re-parented
        new_parent_id: Proposed parent, or None for a root account
        parents: Current parent link of every account
    """
    seen = set()
    current = new_parent_id
    while current is not None:
        if current == account_id or current in seen:
            return True
        seen.add(current)
        current = parents.get(current)
    return False


class ChartOfAccountsService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database):
        """Initialize chart of accounts service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_account(self, account_id: int) -> ChartAccount:
        account = self.db.get_chart_account(account_id)
        if account is None:
            raise NotFoundError(chart_account_not_found(account_id))
        return account

    def _check_parent(self, parent_id: int, account_type: AccountType) -> ChartAccount:
        parent = self._require_account(parent_id)
        if parent.account_type != account_type:
            raise ValidationError(
                f"Parent account {parent.code} is {parent.account_type.value}, "
                f"not {AccountType(account_type).value}"
            )
        return parent

    def create_account(
        self,
        code: str,
        name: str,
        account_type: str | AccountType,
        subtype: Optional[str] = None,
        parent_id: Optional[int] = None,
        currency: str = BASE_CURRENCY,
        description: Optional[str] = None,
    ) -> ChartAccount:
        """Create a chart account. The normal balance follows from the type.

        Args:
            code: Unique account code (e.g., "1100")
            name: Account name
            account_type: asset, liability, equity, revenue or expense
            subtype: Optional free-text subtype (e.g., "cash")
            parent_id: Optional parent account ID
            currency: Account currency
            description: Optional description

        Returns:
            The created account

        Raises:
            ValidationError: If code/name is empty, the type is unknown or the
                parent has a different type
            ConflictError: If the code is already used
            NotFoundError: If the parent does not exist
        """
        code = code.strip() if code else ""
        name = name.strip() if name else ""
        if not code:
            raise ValidationError("Account code is required")
        if not name:
            raise ValidationError("Account name is required")
        parsed_type = parse_account_type(account_type)

        if self.db.get_chart_account_by_code(code) is not None:
            raise ConflictError(duplicate_account_code(code))
        if parent_id is not None:
            self._check_parent(parent_id, parsed_type)

        account_id = self.db.create_chart_account(
            code=code,
            name=name,
            account_type=parsed_type,
            normal_balance=normal_balance_for(parsed_type),
            subtype=subtype,
            parent_id=parent_id,
            currency=normalize_currency(currency),
            description=description,
        )
        logger.info("Created account %s %s", code, name)
        return self._require_account(account_id)

    def get_account(self, account_id: int) -> Optional[ChartAccount]:
        """Get account by ID."""
        return self.db.get_chart_account(account_id)

    def get_account_by_code(self, code: str) -> Optional[ChartAccount]:
        """Get account by code."""
        return self.db.get_chart_account_by_code(code.strip())

    def list_accounts(
        self, account_type: Optional[AccountType] = None, active_only: bool = False
    ) -> list[ChartAccount]:
        """List accounts ordered by code."""
        accounts = self.db.list_chart_accounts(active_only=active_only)
        if account_type is not None:
            accounts = [a for a in accounts if a.account_type == AccountType(account_type)]
        return accounts

    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        subtype: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ChartAccount:
        """Update descriptive fields. Code and type are fixed once created."""
        self._require_account(account_id)
        if name is not None and not name.strip():
            raise ValidationError("Account name is required")
        self.db.update_chart_account(
            account_id,
            name=name.strip() if name is not None else None,
            subtype=subtype,
            description=description,
        )
        return self._require_account(account_id)

    def set_parent(self, account_id: int, parent_id: Optional[int]) -> ChartAccount:
        """Re-parent an account, refusing any change that forms a cycle.

        Raises:
            NotFoundError: If either account does not exist
            ValidationError: If the new parent is the account or one of its
                descendants, or has a different account type
        """
        account = self._require_account(account_id)
        if parent_id is not None:
            self._check_parent(parent_id, account.account_type)

        parents = {a.id: a.parent_id for a in self.db.list_chart_accounts()}
        if would_create_cycle(account_id, parent_id, parents):
            raise ValidationError(
                f"Cannot make account {parent_id} the parent of {account_id}: it would create a cycle"
            )
        self.db.update_chart_account(account_id, parent_id=parent_id, update_parent=True)
        return self._require_account(account_id)

    def deactivate(self, account_id: int) -> ChartAccount:
        """Retire an account. Existing postings keep referencing it."""
        self._require_account(account_id)
        self.db.update_chart_account(account_id, is_active=False)
        logger.info("Account %s deactivated", account_id)
        return self._require_account(account_id)

    def activate(self, account_id: int) -> ChartAccount:
        """Re-enable a retired account."""
        self._require_account(account_id)
        self.db.update_chart_account(account_id, is_active=True)
        return self._require_account(account_id)

    def get_tree(self, active_only: bool = False) -> list[dict[str, Any]]:
        """Get the chart as nested dictionaries.

        Returns a list of root accounts, each a dict with the account entity
        under "account" and its children under "children".
        """
        accounts = self.db.list_chart_accounts(active_only=active_only)
        ids = {a.id for a in accounts}

        def build(parent_id: Optional[int]) -> list[dict[str, Any]]:
            nodes = []
            for account in accounts:
                is_root = account.parent_id is None or account.parent_id not in ids
                if (parent_id is None and is_root) or (
                    parent_id is not None and account.parent_id == parent_id
                ):
                    nodes.append({"account": account, "children": build(account.id)})
            return nodes

        return build(None)
