"""Main CLI entry point."""

import click
from accountbook.database.factories import create_sqlite_database
from accountbook.logging_config import LEVELS, configure_logging

# Import and register all commands at module level
from accountbook.cli.commands import (
    account,
    init_chart,
    journal,
    bank,
    reconcile,
    rate,
    aging,
    report,
    post,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides ACCOUNTBOOK_DB_PATH environment variable)",
    envvar="ACCOUNTBOOK_DB_PATH",
)
@click.option(
    "--strict-rates",
    is_flag=True,
    default=False,
    envvar="ACCOUNTBOOK_STRICT_RATES",
    help="Fail on currencies without an exchange rate instead of treating them as base currency",
)
@click.option(
    "--log-level",
    type=click.Choice(LEVELS, case_sensitive=False),
    envvar="ACCOUNTBOOK_LOG_LEVEL",
    help="Log level for diagnostics on stderr (default: WARNING)",
)
@click.pass_context
def cli(ctx, db_path: str | None, strict_rates: bool, log_level: str | None):
    """Accountbook - double-entry bookkeeping in Tanzanian shillings.

    Keep a chart of accounts, post journal entries through an approval
    workflow, reconcile bank statements and age receivables and payables.
    Foreign-currency amounts are converted to TZS.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["strict_rates"] = strict_rates
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
init_chart.register_commands(cli)
journal.register_commands(cli)
bank.register_commands(cli)
reconcile.register_commands(cli)
rate.register_commands(cli)
aging.register_commands(cli)
report.register_commands(cli)
post.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
