"""Chart of accounts commands."""

from decimal import Decimal
from typing import Any

import click
from accountbook.cli.date_filters import parse_date_option
from accountbook.cli.error_handling import handle_domain_error
from accountbook.cli.resolution import resolve_chart_account_or_exit
from accountbook.domain.balances import BalanceService
from accountbook.domain.chart import ChartOfAccountsService
from accountbook.domain.entities import AccountType
from accountbook.domain.export import write_chart_of_accounts

ACCOUNT_TYPES = [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), required=True, help="Account type")
@click.option("--subtype", help="Free-text subtype (e.g. cash, operating)")
@click.option("--parent", help="Parent account code or ID")
@click.option("--currency", default="TZS", show_default=True, help="Account currency")
@click.option("--description", help="Account description")
@click.pass_context
def create_account(
    ctx,
    code: str,
    name: str,
    account_type: str,
    subtype: str | None,
    parent: str | None,
    currency: str,
    description: str | None,
):
    """Create a chart account.

    The normal balance follows from the type: assets and expenses are
    debit-normal, liabilities, equity and revenue credit-normal.

    Examples:
        accountbook account create 1120 "Bank Account - TZS" --type asset --parent 1100
        accountbook account create 6900 "Other Expenses" --type expense
    """
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)

    parent_id = resolve_chart_account_or_exit(ctx, service, parent) if parent else None

    try:
        created = service.create_account(
            code=code,
            name=name,
            account_type=account_type,
            subtype=subtype,
            parent_id=parent_id,
            currency=currency,
            description=description,
        )
        click.echo(
            f"Created account {created.code} '{created.name}' (ID: {created.id}, "
            f"normal balance: {created.normal_balance.value})"
        )
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), help="Only this account type")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive accounts")
@click.option("--balances", is_flag=True, help="Show rolled-up balances in TZS")
@click.option("--as-of", help="Balance date (default: all posted entries)")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False, writable=True), help="Write the listing to a CSV file")
@click.pass_context
def list_accounts(
    ctx,
    account_type: str | None,
    include_inactive: bool,
    balances: bool,
    as_of: str | None,
    csv_path: str | None,
):
    """List chart accounts ordered by code."""
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)
    as_of_date = parse_date_option(ctx, as_of, "as-of date")

    accounts = service.list_accounts(account_type=account_type, active_only=not include_inactive)
    account_balances = BalanceService(db).all_balances(as_of=as_of_date) if balances or as_of else None

    if csv_path:
        with open(csv_path, "w", newline="", encoding="utf-8") as out:
            count = write_chart_of_accounts(out, accounts, account_balances)
        click.echo(f"Wrote {count} accounts to {csv_path}")
        return

    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nChart of Accounts:")
    click.echo("-" * 80)
    for acc in accounts:
        line = f"{acc.code:6s} | {acc.name:32s} | {acc.account_type.value:9s} | {acc.normal_balance.value:6s}"
        if not acc.is_active:
            line += " | inactive"
        if account_balances is not None:
            line += f" | {account_balances.get(acc.id, Decimal('0')):>16,.2f}"
        click.echo(line)


def _render_tree(nodes: list[dict[str, Any]], balances: dict[int, Decimal] | None, depth: int = 0) -> None:
    for node in nodes:
        acc = node["account"]
        line = f"{'  ' * depth}{acc.code} {acc.name}"
        if balances is not None:
            line += f"  {balances.get(acc.id, Decimal('0')):,.2f}"
        click.echo(line)
        _render_tree(node["children"], balances, depth + 1)


@account_group.command("tree")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive accounts")
@click.option("--balances", is_flag=True, help="Show rolled-up balances in TZS")
@click.pass_context
def show_tree(ctx, include_inactive: bool, balances: bool):
    """Show the chart of accounts as a tree."""
    db = ctx.obj["db"]
    tree = ChartOfAccountsService(db).get_tree(active_only=not include_inactive)
    if not tree:
        click.echo("No accounts found.")
        return
    _render_tree(tree, BalanceService(db).all_balances() if balances else None)


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--subtype", help="New subtype")
@click.option("--description", help="New description")
@click.pass_context
def update_account(ctx, account: str, name: str | None, subtype: str | None, description: str | None):
    """Update an account's name, subtype or description.

    ACCOUNT can be an account code or ID (#ID).
    """
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)
    account_id = resolve_chart_account_or_exit(ctx, service, account)

    if name is None and subtype is None and description is None:
        click.echo("Error: Nothing to update. Use --name, --subtype or --description.", err=True)
        ctx.exit(1)

    try:
        updated = service.update_account(account_id, name=name, subtype=subtype, description=description)
        click.echo(f"Updated account {updated.code} '{updated.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("set-parent")
@click.argument("account", metavar="ACCOUNT")
@click.argument("parent", metavar="PARENT", required=False)
@click.pass_context
def set_parent(ctx, account: str, parent: str | None):
    """Move an account under PARENT, or to the top level if PARENT is omitted."""
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)
    account_id = resolve_chart_account_or_exit(ctx, service, account)
    parent_id = resolve_chart_account_or_exit(ctx, service, parent) if parent else None

    try:
        moved = service.set_parent(account_id, parent_id)
        if parent_id is None:
            click.echo(f"Account {moved.code} is now a top-level account")
        else:
            click.echo(f"Account {moved.code} moved under {parent}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("deactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def deactivate_account(ctx, account: str):
    """Deactivate an account. It can no longer be used on new entries."""
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)
    account_id = resolve_chart_account_or_exit(ctx, service, account)
    updated = service.deactivate(account_id)
    click.echo(f"Deactivated account {updated.code} '{updated.name}'")


@account_group.command("activate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def activate_account(ctx, account: str):
    """Re-activate an account."""
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)
    account_id = resolve_chart_account_or_exit(ctx, service, account)
    updated = service.activate(account_id)
    click.echo(f"Activated account {updated.code} '{updated.name}'")


@account_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@click.option("--as-of", help="Only entries dated on or before this date")
@click.option("--direct", is_flag=True, help="Exclude child accounts")
@click.pass_context
def account_balance(ctx, account: str, as_of: str | None, direct: bool):
    """Show an account's balance in TZS.

    Positive balances sit on the account's normal side.
    """
    db = ctx.obj["db"]
    chart = ChartOfAccountsService(db)
    account_id = resolve_chart_account_or_exit(ctx, chart, account)
    as_of_date = parse_date_option(ctx, as_of, "as-of date")

    acc = chart.get_account(account_id)
    balance = BalanceService(db).account_balance(account_id, as_of=as_of_date, rollup=not direct)
    suffix = f" as of {as_of_date.isoformat()}" if as_of_date else ""
    click.echo(f"{acc.code} {acc.name}: {balance:,.2f} TZS{suffix}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
