"""Receivables and payables aging commands."""

from datetime import date

import click
from accountbook.cli.date_filters import parse_date_option
from accountbook.cli.error_handling import handle_domain_error
from accountbook.domain.aging import AgingService
from accountbook.domain.entities import AgingReport, OpenItemKind
from accountbook.domain.export import write_aging_report
from accountbook.utils.amount_parser import parse_money

KINDS = [k.value for k in OpenItemKind]


def _aging_service(ctx) -> AgingService:
    return AgingService(ctx.obj["db"], strict_rates=ctx.obj.get("strict_rates", False))


def _echo_report(title: str, report: AgingReport) -> None:
    click.echo(f"\n{title} aging as of {report.as_of.isoformat()}")
    click.echo("-" * 50)
    for bucket in report.buckets:
        click.echo(f"{bucket.label:16s} {bucket.count:5d} {bucket.total:>20,.2f}")
    click.echo("-" * 50)
    click.echo(f"{'Total':16s} {report.total_count:5d} {report.total_outstanding:>20,.2f}")


@click.group()
def aging_group():
    """Track open receivables and payables and age them."""
    pass


@aging_group.command("add-item")
@click.argument("kind", type=click.Choice(KINDS), metavar="KIND")
@click.argument("reference", metavar="REFERENCE")
@click.argument("amount", metavar="AMOUNT")
@click.option("--date", "document_date", default="today", show_default=True, help="Invoice or bill date")
@click.option("--due-date", help="Due date; aging counts from it when set")
@click.option("--party", help="Customer or supplier name")
@click.option("--currency", help="Currency (default: from AMOUNT, else TZS)")
@click.pass_context
def add_item(
    ctx,
    kind: str,
    reference: str,
    amount: str,
    document_date: str,
    due_date: str | None,
    party: str | None,
    currency: str | None,
):
    """Record an outstanding receivable or payable.

    KIND is receivable or payable.

    Examples:
        accountbook aging add-item receivable INV-2024-001 "USD 1,200" --party "Acme Ltd"
        accountbook aging add-item payable BILL-77 450000 --due-date 2024-03-31
    """
    try:
        value, parsed_currency = parse_money(amount)
        item = _aging_service(ctx).add_open_item(
            kind=OpenItemKind(kind),
            reference=reference,
            document_date=parse_date_option(ctx, document_date, "date"),
            amount=value,
            currency=currency or parsed_currency or "TZS",
            party_name=party,
            due_date=parse_date_option(ctx, due_date, "due date"),
        )
        click.echo(f"Added {item.kind.value} {item.reference} (ID: {item.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@aging_group.command("list")
@click.option("--kind", type=click.Choice(KINDS), help="Only receivables or payables")
@click.pass_context
def list_items(ctx, kind: str | None):
    """List unsettled items, oldest first."""
    items = _aging_service(ctx).list_open_items(kind=OpenItemKind(kind) if kind else None)
    if not items:
        click.echo("No open items.")
        return

    for item in items:
        due = item.due_date.isoformat() if item.due_date else "-"
        click.echo(
            f"ID: {item.id:3d} | {item.kind.value:10s} | {item.reference:16s} | {item.document_date.isoformat()} | "
            f"due {due:10s} | {item.amount:>14,.2f} {item.currency} | {item.party_name or ''}"
        )


@aging_group.command("settle")
@click.argument("item_id", type=int, metavar="ITEM_ID")
@click.pass_context
def settle_item(ctx, item_id: int):
    """Mark an open item settled."""
    try:
        _aging_service(ctx).settle(item_id)
        click.echo(f"Settled open item {item_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@aging_group.command("report")
@click.argument("kind", type=click.Choice(KINDS), metavar="KIND")
@click.option("--as-of", help="Aging date (default: today)")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False, writable=True), help="Write items with their buckets to a CSV file")
@click.pass_context
def aging_report(ctx, kind: str, as_of: str | None, csv_path: str | None):
    """Show the aging buckets for receivables or payables in TZS."""
    as_of_date = parse_date_option(ctx, as_of, "as-of date") or date.today()
    try:
        report = _aging_service(ctx).aging_report(OpenItemKind(kind), as_of_date)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if csv_path:
        with open(csv_path, "w", newline="", encoding="utf-8") as out:
            count = write_aging_report(out, report)
        click.echo(f"Wrote {count} items to {csv_path}")
        return

    _echo_report("Receivables" if kind == "receivable" else "Payables", report)


@aging_group.command("summary")
@click.option("--as-of", help="Aging date (default: today)")
@click.pass_context
def aging_summary(ctx, as_of: str | None):
    """Show receivables and payables aging with the net position."""
    as_of_date = parse_date_option(ctx, as_of, "as-of date") or date.today()
    try:
        summary = _aging_service(ctx).aging_summary(as_of_date)
    except ValueError as e:
        handle_domain_error(ctx, e)

    _echo_report("Receivables", summary.receivables)
    _echo_report("Payables", summary.payables)
    click.echo(f"\nNet position: {summary.net_position:,.2f} TZS")


def register_commands(cli):
    """Register aging commands with main CLI."""
    cli.add_command(aging_group, name="aging")
