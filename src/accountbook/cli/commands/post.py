"""Commands that post the standard entries for business events."""

import click
from accountbook.cli.date_filters import parse_date_option
from accountbook.cli.error_handling import handle_domain_error
from accountbook.cli.resolution import resolve_chart_account_or_exit
from accountbook.domain.chart import ChartOfAccountsService
from accountbook.domain.entities import JournalEntry
from accountbook.domain.journal import JournalService
from accountbook.domain.postings import AGENT_COST_ACCOUNTS, EXPENSE_ACCOUNTS, AutoPostingService
from accountbook.utils.amount_parser import parse_amount, parse_money


def _posting_service(ctx) -> AutoPostingService:
    db = ctx.obj["db"]
    return AutoPostingService(db, JournalService(db, strict_rates=ctx.obj.get("strict_rates", False)))


def _money_args(amount: str, currency: str | None, rate: str | None):
    value, parsed_currency = parse_money(amount)
    return value, (currency or parsed_currency or "TZS"), (parse_amount(rate) if rate else None)


def _echo_posted(entry: JournalEntry) -> None:
    click.echo(f"Posted {entry.entry_number}: {entry.description} ({entry.total_debits:,.2f} TZS)")


def money_options(f):
    """Shared amount options for the posting commands."""
    f = click.option("--date", "entry_date", help="Entry date (default: today)")(f)
    f = click.option("--rate", help="Exchange rate to TZS (default: stored rate)")(f)
    f = click.option("--currency", help="Currency (default: from AMOUNT, else TZS)")(f)
    return f


@click.group()
def post_group():
    """Post the standard entries for invoices, payments and expenses."""
    pass


@post_group.command("invoice")
@click.argument("invoice_number", metavar="INVOICE_NUMBER")
@click.argument("amount", metavar="AMOUNT")
@click.option("--customer", help="Customer name")
@money_options
@click.pass_context
def post_invoice(ctx, invoice_number, amount, customer, currency, rate, entry_date):
    """Invoice issued: debit receivables, credit shipping revenue."""
    try:
        value, code, parsed_rate = _money_args(amount, currency, rate)
        entry = _posting_service(ctx).invoice_issued(
            invoice_number,
            value,
            currency=code,
            exchange_rate=parsed_rate,
            customer_name=customer,
            entry_date=parse_date_option(ctx, entry_date, "date"),
        )
        _echo_posted(entry)
    except ValueError as e:
        handle_domain_error(ctx, e)


@post_group.command("payment")
@click.argument("invoice_number", metavar="INVOICE_NUMBER")
@click.argument("amount", metavar="AMOUNT")
@click.option("--deposit-account", help="Account receiving the cash (default: cash account for the currency)")
@money_options
@click.pass_context
def post_payment(ctx, invoice_number, amount, deposit_account, currency, rate, entry_date):
    """Customer payment: debit cash, credit receivables."""
    deposit_id = (
        resolve_chart_account_or_exit(ctx, ChartOfAccountsService(ctx.obj["db"]), deposit_account)
        if deposit_account
        else None
    )
    try:
        value, code, parsed_rate = _money_args(amount, currency, rate)
        entry = _posting_service(ctx).invoice_payment_received(
            invoice_number,
            value,
            currency=code,
            exchange_rate=parsed_rate,
            deposit_account_id=deposit_id,
            entry_date=parse_date_option(ctx, entry_date, "date"),
        )
        _echo_posted(entry)
    except ValueError as e:
        handle_domain_error(ctx, e)


@post_group.command("expense")
@click.argument("category", type=click.Choice(sorted(EXPENSE_ACCOUNTS)), metavar="CATEGORY")
@click.argument("amount", metavar="AMOUNT")
@click.option("--description", "-d", help="Expense description")
@click.option("--paid-from", help="Bank ledger account that paid it; omit to record a payable")
@money_options
@click.pass_context
def post_expense(ctx, category, amount, description, paid_from, currency, rate, entry_date):
    """Expense: debit the category's expense account, credit payables or the paying bank."""
    paid_from_id = (
        resolve_chart_account_or_exit(ctx, ChartOfAccountsService(ctx.obj["db"]), paid_from) if paid_from else None
    )
    try:
        value, code, parsed_rate = _money_args(amount, currency, rate)
        service = _posting_service(ctx)
        kwargs = dict(
            currency=code,
            exchange_rate=parsed_rate,
            description=description,
            entry_date=parse_date_option(ctx, entry_date, "date"),
        )
        if paid_from_id is None:
            entry = service.expense_approved(category, value, **kwargs)
        else:
            entry = service.expense_paid(category, value, paid_from_id, **kwargs)
        _echo_posted(entry)
    except ValueError as e:
        handle_domain_error(ctx, e)


@post_group.command("agent-invoice")
@click.argument("invoice_number", metavar="INVOICE_NUMBER")
@click.argument("amount", metavar="AMOUNT")
@click.option("--agent", help="Agent name")
@click.option("--region", type=click.Choice(sorted(AGENT_COST_ACCOUNTS)), help="Agent origin region")
@money_options
@click.pass_context
def post_agent_invoice(ctx, invoice_number, amount, agent, region, currency, rate, entry_date):
    """Agent bill received: debit agent costs, credit agent payables."""
    try:
        value, code, parsed_rate = _money_args(amount, currency, rate)
        entry = _posting_service(ctx).agent_invoice_received(
            invoice_number,
            value,
            currency=code,
            exchange_rate=parsed_rate,
            agent_name=agent,
            origin_region=region,
            entry_date=parse_date_option(ctx, entry_date, "date"),
        )
        _echo_posted(entry)
    except ValueError as e:
        handle_domain_error(ctx, e)


@post_group.command("agent-billed")
@click.argument("invoice_number", metavar="INVOICE_NUMBER")
@click.argument("amount", metavar="AMOUNT")
@click.option("--agent", help="Agent name")
@money_options
@click.pass_context
def post_agent_billed(ctx, invoice_number, amount, agent, currency, rate, entry_date):
    """Clearing services billed to an agent: debit receivables, credit revenue."""
    try:
        value, code, parsed_rate = _money_args(amount, currency, rate)
        entry = _posting_service(ctx).agent_billed(
            invoice_number,
            value,
            currency=code,
            exchange_rate=parsed_rate,
            agent_name=agent,
            entry_date=parse_date_option(ctx, entry_date, "date"),
        )
        _echo_posted(entry)
    except ValueError as e:
        handle_domain_error(ctx, e)


@post_group.command("agent-payment")
@click.argument("invoice_number", metavar="INVOICE_NUMBER")
@click.argument("amount", metavar="AMOUNT")
@click.option("--source-account", help="Account paying the agent (default: cash account for the currency)")
@click.option("--amount-in-tzs", help="TZS actually paid; the rate is derived from it")
@money_options
@click.pass_context
def post_agent_payment(ctx, invoice_number, amount, source_account, amount_in_tzs, currency, rate, entry_date):
    """Agent paid: debit agent payables, credit cash."""
    source_id = (
        resolve_chart_account_or_exit(ctx, ChartOfAccountsService(ctx.obj["db"]), source_account)
        if source_account
        else None
    )
    try:
        value, code, parsed_rate = _money_args(amount, currency, rate)
        entry = _posting_service(ctx).agent_payment(
            invoice_number,
            value,
            currency=code,
            exchange_rate=parsed_rate,
            source_account_id=source_id,
            amount_in_base=parse_amount(amount_in_tzs) if amount_in_tzs else None,
            entry_date=parse_date_option(ctx, entry_date, "date"),
        )
        _echo_posted(entry)
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register posting commands with main CLI."""
    cli.add_command(post_group, name="post")
