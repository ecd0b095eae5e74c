"""Journal entry commands."""

from decimal import Decimal

import click
from accountbook.cli.date_filters import PERIODS, parse_date_option, resolve_cli_date_range
from accountbook.cli.error_handling import handle_domain_error
from accountbook.cli.resolution import resolve_chart_account_or_exit, resolve_entry_or_exit
from accountbook.domain.chart import ChartOfAccountsService
from accountbook.domain.entities import EntryStatus, JournalEntry, JournalLineDraft
from accountbook.domain.journal import JournalService
from accountbook.utils.amount_parser import parse_amount

LINE_HELP = "Line as ACCOUNT:debit|credit:AMOUNT[:CURRENCY[:RATE]] (repeat for each line)"


def parse_line_option(text: str) -> tuple[str, str, Decimal, str | None, Decimal | None]:
    """Split a --line value into (account, side, amount, currency, rate).

    Examples: "1120:debit:2500", "1130:credit:100:USD:2500".
    """
    parts = [p.strip() for p in text.split(":")]
    if len(parts) < 3 or len(parts) > 5:
        raise ValueError(f"Invalid line '{text}'. Expected ACCOUNT:debit|credit:AMOUNT[:CURRENCY[:RATE]]")
    account, side, amount_str = parts[:3]
    side = side.lower()
    if side not in ("debit", "credit", "dr", "cr"):
        raise ValueError(f"Invalid side '{parts[1]}' in line '{text}'. Use debit or credit")
    currency = parts[3].upper() if len(parts) > 3 and parts[3] else None
    rate = parse_amount(parts[4]) if len(parts) > 4 and parts[4] else None
    return account, ("debit" if side in ("debit", "dr") else "credit"), parse_amount(amount_str), currency, rate


def build_line_drafts(ctx: click.Context, db, line_options: tuple[str, ...]) -> list[JournalLineDraft]:
    """Turn --line options into line drafts, or exit with a CLI error."""
    chart = ChartOfAccountsService(db)
    drafts = []
    for text in line_options:
        try:
            account, side, amount, currency, rate = parse_line_option(text)
        except ValueError as e:
            handle_domain_error(ctx, e)
        account_id = resolve_chart_account_or_exit(ctx, chart, account)
        drafts.append(
            JournalLineDraft(
                account_id=account_id,
                debit_amount=amount if side == "debit" else Decimal("0"),
                credit_amount=amount if side == "credit" else Decimal("0"),
                currency=currency or "TZS",
                exchange_rate=rate,
            )
        )
    return drafts


def _journal_service(ctx) -> JournalService:
    return JournalService(ctx.obj["db"], strict_rates=ctx.obj.get("strict_rates", False))


def _echo_entry(db, entry: JournalEntry) -> None:
    chart = ChartOfAccountsService(db)
    click.echo(f"\n{entry.entry_number}  {entry.entry_date.isoformat()}  [{entry.status.value}]")
    click.echo(f"  {entry.description}")
    if entry.reference_type:
        click.echo(f"  Reference: {entry.reference_type} {entry.reference_id or ''}".rstrip())
    if entry.rejection_reason:
        click.echo(f"  Rejected: {entry.rejection_reason}")
    if entry.notes:
        click.echo(f"  Notes: {entry.notes}")
    click.echo("-" * 80)
    for line in entry.lines:
        acc = chart.get_account(line.account_id)
        label = f"{acc.code} {acc.name}" if acc else f"#{line.account_id}"
        debit = f"{line.debit_amount:,.2f}" if line.debit_amount else ""
        credit = f"{line.credit_amount:,.2f}" if line.credit_amount else ""
        rate = f" @ {line.exchange_rate}" if line.currency != "TZS" else ""
        click.echo(f"  {label:34s} {debit:>14s} {credit:>14s} {line.currency}{rate}")
    click.echo("-" * 80)
    click.echo(f"  {'Total (TZS)':34s} {entry.total_debits:>14,.2f} {entry.total_credits:>14,.2f}")


@click.group()
def journal_group():
    """Create journal entries and move them through approval."""
    pass


@journal_group.command("create")
@click.option("--date", "entry_date", default="today", show_default=True, help="Entry date")
@click.option("--description", "-d", required=True, help="Entry description")
@click.option("--line", "lines", multiple=True, required=True, help=LINE_HELP)
@click.option("--reference-type", help="Source document type (invoice, payment, expense, ...)")
@click.option("--reference-id", help="Source document identifier")
@click.option("--notes", help="Notes")
@click.option("--submit", is_flag=True, help="Submit for approval after creating")
@click.option("--post", "post_now", is_flag=True, help="Submit and approve after creating")
@click.pass_context
def create_entry(
    ctx,
    entry_date: str,
    description: str,
    lines: tuple[str, ...],
    reference_type: str | None,
    reference_id: str | None,
    notes: str | None,
    submit: bool,
    post_now: bool,
):
    """Create a draft journal entry.

    Foreign-currency lines without a rate use the stored exchange rate.

    Examples:
        accountbook journal create -d "Office rent" --line 6210:debit:500000 --line 1120:credit:500000
        accountbook journal create -d "USD deposit" --line 1130:debit:100:USD:2500 --line 4110:credit:250000
    """
    db = ctx.obj["db"]
    service = _journal_service(ctx)
    parsed_date = parse_date_option(ctx, entry_date, "entry date")
    drafts = build_line_drafts(ctx, db, lines)

    try:
        entry = service.create_entry(
            entry_date=parsed_date,
            description=description,
            lines=drafts,
            reference_type=reference_type,
            reference_id=reference_id,
            notes=notes,
        )
        click.echo(f"Created journal entry {entry.entry_number} (ID: {entry.id})")
        if post_now:
            entry = service.post_directly(entry.id)
            click.echo(f"Posted {entry.entry_number}")
        elif submit:
            entry = service.submit_for_approval(entry.id)
            click.echo(f"Submitted {entry.entry_number} for approval")
    except ValueError as e:
        handle_domain_error(ctx, e)


@journal_group.command("update")
@click.argument("entry", metavar="ENTRY")
@click.option("--date", "entry_date", help="New entry date")
@click.option("--description", "-d", help="New description")
@click.option("--notes", help="New notes")
@click.option("--line", "lines", multiple=True, help=f"{LINE_HELP}; replaces all lines")
@click.pass_context
def update_entry(
    ctx, entry: str, entry_date: str | None, description: str | None, notes: str | None, lines: tuple[str, ...]
):
    """Edit a draft or rejected entry.

    ENTRY can be an entry number (JE-2024-0001) or ID.
    """
    db = ctx.obj["db"]
    service = _journal_service(ctx)
    found = resolve_entry_or_exit(ctx, service, entry)
    drafts = build_line_drafts(ctx, db, lines) if lines else None

    try:
        updated = service.update_draft(
            found.id,
            entry_date=parse_date_option(ctx, entry_date, "entry date"),
            description=description,
            notes=notes,
            lines=drafts,
        )
        click.echo(f"Updated journal entry {updated.entry_number}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@journal_group.command("list")
@click.option("--status", type=click.Choice([s.value for s in EntryStatus]), help="Only entries with this status")
@click.option("--account", help="Only entries with a line on this account (code or ID)")
@click.option("--start-date", help="Entries dated on or after this date")
@click.option("--end-date", help="Entries dated on or before this date")
@click.option("--period", type=click.Choice(PERIODS), help="Reporting period instead of explicit dates")
@click.pass_context
def list_entries(
    ctx,
    status: str | None,
    account: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
):
    """List journal entries, newest first."""
    db = ctx.obj["db"]
    service = _journal_service(ctx)
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=period)
    account_id = resolve_chart_account_or_exit(ctx, ChartOfAccountsService(db), account) if account else None

    entries = service.list_entries(
        status=EntryStatus(status) if status else None,
        start_date=start,
        end_date=end,
        account_id=account_id,
    )
    if not entries:
        click.echo("No journal entries found.")
        return

    click.echo(f"\n{'Number':14s} | {'Date':10s} | {'Status':16s} | {'Debits (TZS)':>16s} | Description")
    click.echo("-" * 90)
    for entry in entries:
        click.echo(
            f"{entry.entry_number:14s} | {entry.entry_date.isoformat():10s} | {entry.status.value:16s} | "
            f"{entry.total_debits:>16,.2f} | {entry.description}"
        )


@journal_group.command("show")
@click.argument("entry", metavar="ENTRY")
@click.pass_context
def show_entry(ctx, entry: str):
    """Show an entry with its lines."""
    found = resolve_entry_or_exit(ctx, _journal_service(ctx), entry)
    _echo_entry(ctx.obj["db"], found)


@journal_group.command("submit")
@click.argument("entry", metavar="ENTRY")
@click.pass_context
def submit_entry(ctx, entry: str):
    """Submit a draft or rejected entry for approval."""
    service = _journal_service(ctx)
    found = resolve_entry_or_exit(ctx, service, entry)
    try:
        updated = service.submit_for_approval(found.id)
        click.echo(f"Submitted {updated.entry_number} for approval")
    except ValueError as e:
        handle_domain_error(ctx, e)


@journal_group.command("approve")
@click.argument("entry", metavar="ENTRY")
@click.pass_context
def approve_entry(ctx, entry: str):
    """Approve and post a pending entry."""
    service = _journal_service(ctx)
    found = resolve_entry_or_exit(ctx, service, entry)
    try:
        updated = service.approve(found.id)
        click.echo(f"Posted {updated.entry_number}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@journal_group.command("reject")
@click.argument("entry", metavar="ENTRY")
@click.option("--reason", "-r", required=True, help="Why the entry is rejected")
@click.pass_context
def reject_entry(ctx, entry: str, reason: str):
    """Reject a pending entry back to its preparer."""
    service = _journal_service(ctx)
    found = resolve_entry_or_exit(ctx, service, entry)
    try:
        updated = service.reject(found.id, reason)
        click.echo(f"Rejected {updated.entry_number}: {updated.rejection_reason}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@journal_group.command("void")
@click.argument("entry", metavar="ENTRY")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def void_entry(ctx, entry: str, yes: bool):
    """Void a posted entry. Its lines stop counting towards balances."""
    service = _journal_service(ctx)
    found = resolve_entry_or_exit(ctx, service, entry)
    if not yes and not click.confirm(f"Void {found.entry_number} ({found.description})?"):
        click.echo("Void cancelled.")
        return
    try:
        updated = service.void(found.id)
        click.echo(f"Voided {updated.entry_number}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@journal_group.command("delete")
@click.argument("entry", metavar="ENTRY")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_entry(ctx, entry: str, yes: bool):
    """Delete a draft or rejected entry."""
    service = _journal_service(ctx)
    found = resolve_entry_or_exit(ctx, service, entry)
    if not yes and not click.confirm(f"Delete {found.entry_number} ({found.description})?"):
        click.echo("Deletion cancelled.")
        return
    try:
        service.delete_draft(found.id)
        click.echo(f"Deleted {found.entry_number}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register journal commands with main CLI."""
    cli.add_command(journal_group, name="journal")
