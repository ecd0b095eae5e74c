"""Exchange rate commands."""

import click
from accountbook.cli.error_handling import handle_domain_error
from accountbook.domain.currency import BASE_CURRENCY, ExchangeRateService
from accountbook.utils.amount_parser import parse_amount


def _format_rate(rate) -> str:
    return f"{rate.normalize():,f}"


@click.group()
def rate_group():
    """Manage exchange rates to TZS."""
    pass


@rate_group.command("set")
@click.argument("currency", metavar="CURRENCY")
@click.argument("rate", metavar="RATE")
@click.option("--name", help="Currency name (e.g. US Dollar)")
@click.pass_context
def set_rate(ctx, currency: str, rate: str, name: str | None):
    """Set how many TZS one unit of CURRENCY is worth.

    Examples:
        accountbook rate set USD 2500 --name "US Dollar"
        accountbook rate set GBP 3150.50
    """
    service = ExchangeRateService(ctx.obj["db"])
    try:
        stored = service.set_rate(currency, parse_amount(rate), name)
        click.echo(f"1 {stored.currency_code} = {_format_rate(stored.rate_to_base)} {BASE_CURRENCY}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@rate_group.command("list")
@click.pass_context
def list_rates(ctx):
    """List stored exchange rates."""
    rates = ExchangeRateService(ctx.obj["db"]).list_rates()
    if not rates:
        click.echo(f"No exchange rates set. Amounts in other currencies count as {BASE_CURRENCY}.")
        return

    click.echo(f"\nExchange rates to {BASE_CURRENCY}:")
    click.echo("-" * 60)
    for rate in rates:
        updated = rate.updated_at.strftime("%Y-%m-%d") if rate.updated_at else ""
        click.echo(f"{rate.currency_code:5s} | {rate.currency_name or '':20s} | {_format_rate(rate.rate_to_base):>14s} | {updated}")


@rate_group.command("convert")
@click.argument("amount", metavar="AMOUNT")
@click.argument("currency", metavar="CURRENCY")
@click.pass_context
def convert(ctx, amount: str, currency: str):
    """Convert AMOUNT in CURRENCY to TZS."""
    service = ExchangeRateService(ctx.obj["db"], strict=ctx.obj.get("strict_rates", False))
    try:
        value = parse_amount(amount)
        converted = service.convert(value, currency)
        click.echo(f"{value:,.2f} {currency.upper()} = {converted:,.2f} {BASE_CURRENCY}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register rate commands with main CLI."""
    cli.add_command(rate_group, name="rate")
