"""CLI helpers for resolving accounts and entries."""

from __future__ import annotations

import click
from accountbook.domain.bank import BankAccountService
from accountbook.domain.chart import ChartOfAccountsService
from accountbook.domain.entities import JournalEntry
from accountbook.domain.errors import journal_entry_not_found
from accountbook.domain.journal import JournalService
from accountbook.utils.account_resolver import resolve_bank_account, resolve_chart_account


def resolve_chart_account_or_exit(
    ctx: click.Context, chart_service: ChartOfAccountsService, account: str | int
) -> int:
    """Resolve an account code or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_chart_account(chart_service, account)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_bank_account_or_exit(
    ctx: click.Context, bank_service: BankAccountService, account: str | int
) -> int:
    """Resolve a bank account name or ID, or exit with a CLI error."""
    try:
        return resolve_bank_account(bank_service, account)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_entry_or_exit(
    ctx: click.Context, journal_service: JournalService, entry: str
) -> JournalEntry:
    """Resolve an entry number (JE-2024-0001) or ID, or exit with a CLI error."""
    found = journal_service.get_entry_by_number(entry.strip().upper())
    if found is None and entry.strip().isdigit():
        found = journal_service.get_entry(int(entry))
    if found is None:
        click.echo(f"Error: {journal_entry_not_found(entry)}", err=True)
        ctx.exit(1)
    return found
