"""Bank account and statement commands."""

from decimal import Decimal

import click
from accountbook.cli.date_filters import parse_date_option, resolve_cli_date_range
from accountbook.cli.error_handling import handle_domain_error
from accountbook.cli.resolution import resolve_bank_account_or_exit, resolve_chart_account_or_exit
from accountbook.domain.bank import BankAccountService
from accountbook.domain.chart import ChartOfAccountsService
from accountbook.domain.export import write_bank_transactions
from accountbook.utils.amount_parser import parse_amount


def _amount_option(ctx, value: str | None, label: str) -> Decimal:
    if not value:
        return Decimal("0")
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.group()
def bank_group():
    """Manage bank accounts and statement lines."""
    pass


@bank_group.command("create")
@click.argument("name", metavar="NAME")
@click.option("--bank", "bank_name", help="Bank name (defaults to NAME)")
@click.option("--currency", default="TZS", show_default=True, help="Account currency")
@click.option("--account-number", help="Bank account number")
@click.option("--ledger-account", help="Linked chart account (code or ID), must be an asset")
@click.option("--opening-balance", help="Opening balance from the first statement")
@click.pass_context
def create_bank_account(
    ctx,
    name: str,
    bank_name: str | None,
    currency: str,
    account_number: str | None,
    ledger_account: str | None,
    opening_balance: str | None,
):
    """Create a bank account.

    Examples:
        accountbook bank create "CRDB Main" --bank CRDB --ledger-account 1120
        accountbook bank create "NMB USD" --bank NMB --currency USD --ledger-account 1130 --opening-balance 1500
    """
    db = ctx.obj["db"]
    service = BankAccountService(db)
    chart_account_id = (
        resolve_chart_account_or_exit(ctx, ChartOfAccountsService(db), ledger_account) if ledger_account else None
    )

    try:
        created = service.create_bank_account(
            name=name,
            bank_name=bank_name if bank_name is not None else name,
            currency=currency,
            account_number=account_number,
            chart_account_id=chart_account_id,
            opening_balance=_amount_option(ctx, opening_balance, "opening balance"),
        )
        click.echo(f"Created bank account '{created.name}' (ID: {created.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@bank_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive bank accounts")
@click.pass_context
def list_bank_accounts(ctx, include_inactive: bool):
    """List bank accounts with their statement balances."""
    db = ctx.obj["db"]
    accounts = BankAccountService(db).list_bank_accounts(active_only=not include_inactive)
    if not accounts:
        click.echo("No bank accounts found.")
        return

    chart = ChartOfAccountsService(db)
    click.echo("\nBank Accounts:")
    click.echo("-" * 80)
    for acc in accounts:
        linked = chart.get_account(acc.chart_account_id) if acc.chart_account_id else None
        ledger = linked.code if linked else "-"
        status = "" if acc.is_active else " | inactive"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.bank_name:12s} | Ledger: {ledger:6s} | "
            f"{acc.current_balance:>16,.2f} {acc.currency}{status}"
        )


@bank_group.command("link")
@click.argument("bank_account", metavar="BANK_ACCOUNT")
@click.argument("ledger_account", metavar="LEDGER_ACCOUNT")
@click.pass_context
def link_bank_account(ctx, bank_account: str, ledger_account: str):
    """Link a bank account to its chart account."""
    db = ctx.obj["db"]
    service = BankAccountService(db)
    bank_account_id = resolve_bank_account_or_exit(ctx, service, bank_account)
    chart_account_id = resolve_chart_account_or_exit(ctx, ChartOfAccountsService(db), ledger_account)
    try:
        updated = service.link_chart_account(bank_account_id, chart_account_id)
        click.echo(f"Linked '{updated.name}' to ledger account {ledger_account}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@bank_group.command("deactivate")
@click.argument("bank_account", metavar="BANK_ACCOUNT")
@click.pass_context
def deactivate_bank_account(ctx, bank_account: str):
    """Deactivate a bank account."""
    service = BankAccountService(ctx.obj["db"])
    bank_account_id = resolve_bank_account_or_exit(ctx, service, bank_account)
    updated = service.set_active(bank_account_id, False)
    click.echo(f"Deactivated bank account '{updated.name}'")


@bank_group.command("add-transaction")
@click.argument("bank_account", metavar="BANK_ACCOUNT")
@click.option("--date", "transaction_date", default="today", show_default=True, help="Statement date")
@click.option("--credit", help="Money in (deposit)")
@click.option("--debit", help="Money out (payment)")
@click.option("--description", "-d", help="Statement description")
@click.option("--reference", help="Statement reference")
@click.pass_context
def add_transaction(
    ctx,
    bank_account: str,
    transaction_date: str,
    credit: str | None,
    debit: str | None,
    description: str | None,
    reference: str | None,
):
    """Record a bank statement line.

    Use --credit for money in and --debit for money out, as printed on the
    bank statement.
    """
    service = BankAccountService(ctx.obj["db"])
    bank_account_id = resolve_bank_account_or_exit(ctx, service, bank_account)
    try:
        txn = service.add_transaction(
            bank_account_id=bank_account_id,
            transaction_date=parse_date_option(ctx, transaction_date, "date"),
            debit_amount=_amount_option(ctx, debit, "debit amount"),
            credit_amount=_amount_option(ctx, credit, "credit amount"),
            description=description,
            reference=reference,
        )
        click.echo(f"Added bank transaction {txn.id} ({txn.signed_amount:+,.2f})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@bank_group.command("transactions")
@click.argument("bank_account", metavar="BANK_ACCOUNT")
@click.option("--start-date", help="Transactions on or after this date")
@click.option("--end-date", help="Transactions on or before this date")
@click.option("--unreconciled", is_flag=True, help="Only unreconciled transactions")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False, writable=True), help="Write the listing to a CSV file")
@click.pass_context
def list_transactions(
    ctx,
    bank_account: str,
    start_date: str | None,
    end_date: str | None,
    unreconciled: bool,
    csv_path: str | None,
):
    """List a bank account's statement lines."""
    service = BankAccountService(ctx.obj["db"])
    bank_account_id = resolve_bank_account_or_exit(ctx, service, bank_account)
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=None)
    transactions = service.list_transactions(
        bank_account_id, start_date=start, end_date=end, reconciled=False if unreconciled else None
    )

    if csv_path:
        with open(csv_path, "w", newline="", encoding="utf-8") as out:
            count = write_bank_transactions(out, transactions)
        click.echo(f"Wrote {count} transactions to {csv_path}")
        return

    if not transactions:
        click.echo("No bank transactions found.")
        return

    click.echo(f"\n{'ID':>5s} | {'Date':10s} | {'Debit':>14s} | {'Credit':>14s} | Rec | Description")
    click.echo("-" * 90)
    for txn in transactions:
        debit = f"{txn.debit_amount:,.2f}" if txn.debit_amount else ""
        credit = f"{txn.credit_amount:,.2f}" if txn.credit_amount else ""
        mark = " x " if txn.is_reconciled else "   "
        click.echo(
            f"{txn.id:5d} | {txn.transaction_date.isoformat():10s} | {debit:>14s} | {credit:>14s} | {mark} | "
            f"{txn.description or ''}"
        )


def register_commands(cli):
    """Register bank commands with main CLI."""
    cli.add_command(bank_group, name="bank")
