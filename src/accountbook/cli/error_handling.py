"""CLI error handling helpers."""

import click

from accountbook.domain.errors import DomainError, UnbalancedEntryError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, UnbalancedEntryError):
        click.echo(
            f"Debits {error.total_debits:,.2f} TZS, credits {error.total_credits:,.2f} TZS",
            err=True,
        )
    ctx.exit(1)
