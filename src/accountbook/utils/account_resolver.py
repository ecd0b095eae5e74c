"""Utilities for resolving account codes and names to IDs."""

from accountbook.domain.bank import BankAccountService
from accountbook.domain.chart import ChartOfAccountsService
from accountbook.domain.errors import NotFoundError, bank_account_not_found, chart_account_not_found


def resolve_chart_account(chart_service: ChartOfAccountsService, account: str | int) -> int:
    """Resolve a chart account code or ID to its ID.

    Strings are looked up as account codes first, since codes are usually
    numeric; "#12" always means ID 12.

    Raises:
        NotFoundError: If no account matches
    """
    if isinstance(account, int):
        if chart_service.get_account(account) is None:
            raise NotFoundError(chart_account_not_found(account))
        return account

    text = account.strip()
    if text.startswith("#") and text[1:].isdigit():
        return resolve_chart_account(chart_service, int(text[1:]))

    found = chart_service.get_account_by_code(text)
    if found is not None:
        return found.id

    if text.isdigit() and chart_service.get_account(int(text)) is not None:
        return int(text)

    raise NotFoundError(chart_account_not_found(text))


def resolve_bank_account(bank_service: BankAccountService, account: str | int) -> int:
    """Resolve a bank account name or ID to its ID.

    Raises:
        NotFoundError: If no bank account matches
    """
    if isinstance(account, int) or account.strip().isdigit():
        account_id = int(account)
        if bank_service.get_bank_account(account_id) is None:
            raise NotFoundError(bank_account_not_found(account_id))
        return account_id

    for bank_account in bank_service.list_bank_accounts():
        if bank_account.name == account.strip():
            return bank_account.id

    raise NotFoundError(f"Bank account '{account.strip()}' not found")
