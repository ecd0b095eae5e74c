"""Financial report commands."""

import click
from accountbook.cli.date_filters import PERIODS, parse_date_option, resolve_cli_date_range
from accountbook.domain.entities import StatementLine
from accountbook.domain.reports import ReportService


def _echo_section(title: str, lines: tuple[StatementLine, ...], total_label: str, total) -> None:
    click.echo(f"\n{title}")
    for line in lines:
        click.echo(f"  {line.code:6s} {line.name:36s} {line.amount:>18,.2f}")
    click.echo(f"  {total_label:43s} {total:>18,.2f}")


@click.group()
def report_group():
    """Trial balance, income statement and balance sheet in TZS."""
    pass


@report_group.command("trial-balance")
@click.option("--as-of", help="Include entries dated on or before this date")
@click.pass_context
def trial_balance(ctx, as_of: str | None):
    """Show the trial balance of posted entries."""
    as_of_date = parse_date_option(ctx, as_of, "as-of date")
    report = ReportService(ctx.obj["db"]).trial_balance(as_of=as_of_date)

    heading = f" as of {as_of_date.isoformat()}" if as_of_date else ""
    click.echo(f"\nTrial Balance{heading}")
    click.echo("-" * 80)
    for row in report.rows:
        debit = f"{row.debit:,.2f}" if row.debit else ""
        credit = f"{row.credit:,.2f}" if row.credit else ""
        click.echo(f"{row.code:6s} {row.name:36s} {debit:>17s} {credit:>17s}")
    click.echo("-" * 80)
    click.echo(f"{'Total':43s} {report.total_debit:>17,.2f} {report.total_credit:>17,.2f}")
    if not report.is_balanced:
        click.echo("Warning: trial balance does not balance", err=True)


@report_group.command("income-statement")
@click.option("--start-date", help="Period start")
@click.option("--end-date", help="Period end")
@click.option("--period", type=click.Choice(PERIODS), help="Reporting period instead of explicit dates")
@click.pass_context
def income_statement(ctx, start_date: str | None, end_date: str | None, period: str | None):
    """Show revenue, expenses and net income for a period."""
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=period)
    report = ReportService(ctx.obj["db"]).income_statement(start_date=start, end_date=end)

    span = f"{start.isoformat() if start else 'beginning'} to {end.isoformat() if end else 'date'}"
    click.echo(f"\nIncome Statement, {span}")
    click.echo("-" * 70)
    _echo_section("Revenue", report.revenue, "Total revenue", report.total_revenue)
    _echo_section("Expenses", report.expenses, "Total expenses", report.total_expenses)
    click.echo("-" * 70)
    click.echo(f"{'Net income':45s} {report.net_income:>18,.2f}")


@report_group.command("balance-sheet")
@click.option("--as-of", help="Balance sheet date")
@click.pass_context
def balance_sheet(ctx, as_of: str | None):
    """Show assets, liabilities and equity."""
    as_of_date = parse_date_option(ctx, as_of, "as-of date")
    report = ReportService(ctx.obj["db"]).balance_sheet(as_of=as_of_date)

    heading = f" as of {as_of_date.isoformat()}" if as_of_date else ""
    click.echo(f"\nBalance Sheet{heading}")
    click.echo("-" * 70)
    _echo_section("Assets", report.assets, "Total assets", report.total_assets)
    _echo_section("Liabilities", report.liabilities, "Total liabilities", report.total_liabilities)
    _echo_section("Equity", report.equity, "Total equity", report.total_equity)
    click.echo(f"  {'Current earnings':43s} {report.current_earnings:>18,.2f}")
    click.echo("-" * 70)
    total_right = report.total_liabilities + report.total_equity + report.current_earnings
    click.echo(f"{'Liabilities and equity':45s} {total_right:>18,.2f}")
    if not report.is_balanced:
        click.echo("Warning: balance sheet does not balance", err=True)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
