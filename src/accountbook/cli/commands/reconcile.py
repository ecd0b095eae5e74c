"""Bank reconciliation commands."""

import click
from accountbook.cli.date_filters import parse_date_option
from accountbook.cli.error_handling import handle_domain_error
from accountbook.cli.resolution import resolve_bank_account_or_exit, resolve_entry_or_exit
from accountbook.domain.bank import BankAccountService
from accountbook.domain.journal import JournalService
from accountbook.domain.reconciliation import (
    AllOf,
    AmountDateWindowMatch,
    AmountMatch,
    DescriptionMatch,
    MatchStrategy,
    ReconciliationService,
)

STRATEGIES = ("amount", "amount-date", "description", "amount-description")


def build_strategy(name: str, days: int, threshold: float) -> MatchStrategy:
    """Build the match strategy selected on the command line."""
    if name == "amount-date":
        return AmountDateWindowMatch(days=days)
    if name == "description":
        return DescriptionMatch(threshold=threshold)
    if name == "amount-description":
        return AllOf(AmountMatch(), DescriptionMatch(threshold=threshold))
    return AmountMatch()


@click.group()
def reconcile_group():
    """Match bank statement lines to posted journal entries."""
    pass


@reconcile_group.command("candidates")
@click.argument("transaction_id", type=int, metavar="TRANSACTION_ID")
@click.option("--strategy", type=click.Choice(STRATEGIES), default="amount", show_default=True, help="How candidates are matched")
@click.option("--days", type=int, default=3, show_default=True, help="Date window for amount-date matching")
@click.option("--threshold", type=float, default=0.6, show_default=True, help="Similarity threshold for description matching")
@click.pass_context
def show_candidates(ctx, transaction_id: int, strategy: str, days: int, threshold: float):
    """List posted ledger lines that could match a bank transaction.

    Matches are listed first and marked with '*'.
    """
    try:
        service = ReconciliationService(ctx.obj["db"], strategy=build_strategy(strategy, days, threshold))
        candidates = service.suggest_matches(transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not candidates:
        click.echo("No unreconciled ledger lines for this bank account.")
        return

    click.echo(f"\n   {'Entry':14s} | {'Date':10s} | {'Debit':>14s} | {'Credit':>14s} | {'Diff':>12s} | Description")
    click.echo("-" * 100)
    for candidate in candidates:
        line = candidate.line
        mark = " * " if candidate.is_match else "   "
        debit = f"{line.debit_amount:,.2f}" if line.debit_amount else ""
        credit = f"{line.credit_amount:,.2f}" if line.credit_amount else ""
        entry_date = candidate.entry_date.isoformat() if candidate.entry_date else ""
        click.echo(
            f"{mark}{candidate.entry_number or '':14s} | {entry_date:10s} | {debit:>14s} | {credit:>14s} | "
            f"{candidate.difference:>12,.2f} | {line.description or ''}"
        )


@reconcile_group.command("match")
@click.argument("transaction_id", type=int, metavar="TRANSACTION_ID")
@click.argument("entry", metavar="ENTRY")
@click.pass_context
def match_transaction(ctx, transaction_id: int, entry: str):
    """Reconcile a bank transaction with a posted journal entry."""
    db = ctx.obj["db"]
    found = resolve_entry_or_exit(ctx, JournalService(db), entry)
    try:
        ReconciliationService(db).reconcile(transaction_id, found.id)
        click.echo(f"Reconciled bank transaction {transaction_id} with {found.entry_number}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@reconcile_group.command("unmatch")
@click.argument("transaction_id", type=int, metavar="TRANSACTION_ID")
@click.pass_context
def unmatch_transaction(ctx, transaction_id: int):
    """Undo the reconciliation of a bank transaction."""
    try:
        ReconciliationService(ctx.obj["db"]).unreconcile(transaction_id)
        click.echo(f"Bank transaction {transaction_id} is no longer reconciled")
    except ValueError as e:
        handle_domain_error(ctx, e)


@reconcile_group.command("mark")
@click.argument("transaction_id", type=int, metavar="TRANSACTION_ID")
@click.pass_context
def mark_transaction(ctx, transaction_id: int):
    """Mark a bank transaction reconciled without a journal entry."""
    try:
        ReconciliationService(ctx.obj["db"]).mark_reconciled(transaction_id)
        click.echo(f"Marked bank transaction {transaction_id} as reconciled")
    except ValueError as e:
        handle_domain_error(ctx, e)


@reconcile_group.command("summary")
@click.argument("bank_account", metavar="BANK_ACCOUNT")
@click.option("--as-of", help="Only transactions and entries up to this date")
@click.pass_context
def reconciliation_summary(ctx, bank_account: str, as_of: str | None):
    """Compare the bank statement balance with the books."""
    db = ctx.obj["db"]
    bank_service = BankAccountService(db)
    bank_account_id = resolve_bank_account_or_exit(ctx, bank_service, bank_account)
    as_of_date = parse_date_option(ctx, as_of, "as-of date")
    account = bank_service.get_bank_account(bank_account_id)
    summary = ReconciliationService(db).summary(bank_account_id, as_of=as_of_date)

    click.echo(f"\nReconciliation: {account.name} ({account.currency})")
    click.echo("-" * 50)
    click.echo(f"{'Bank balance':26s} {summary.bank_balance:>20,.2f}")
    click.echo(f"{'Book balance':26s} {summary.book_balance:>20,.2f}")
    click.echo(f"{'Difference':26s} {summary.difference:>20,.2f}")
    click.echo(f"{'Unreconciled deposits':26s} {summary.unreconciled_deposits:>20,.2f}")
    click.echo(f"{'Unreconciled payments':26s} {summary.unreconciled_payments:>20,.2f}")
    click.echo(f"Matched: {summary.matched_count}  Unmatched: {summary.unmatched_count}")


def register_commands(cli):
    """Register reconcile commands with main CLI."""
    cli.add_command(reconcile_group, name="reconcile")
