"""Initialize the default chart of accounts."""

import click
from accountbook.domain.chart import ChartOfAccountsService


# (code, name, type, subtype, parent code, currency)
INITIAL_ACCOUNTS = [
    # Assets
    ("1000", "Assets", "asset", "header", None, "TZS"),
    ("1100", "Cash and Bank", "asset", "cash", "1000", "TZS"),
    ("1110", "Petty Cash", "asset", "cash", "1100", "TZS"),
    ("1120", "Bank Account - TZS", "asset", "cash", "1100", "TZS"),
    ("1130", "Bank Account - USD", "asset", "cash", "1100", "USD"),
    ("1140", "Bank Account - GBP", "asset", "cash", "1100", "GBP"),
    ("1200", "Accounts Receivable", "asset", "accounts_receivable", "1000", "TZS"),
    ("1210", "Trade Receivables", "asset", "accounts_receivable", "1200", "TZS"),
    ("1300", "Prepaid Expenses", "asset", "prepaid", "1000", "TZS"),
    # Liabilities
    ("2000", "Liabilities", "liability", "header", None, "TZS"),
    ("2100", "Accounts Payable", "liability", "accounts_payable", "2000", "TZS"),
    ("2110", "Trade Payables", "liability", "accounts_payable", "2100", "TZS"),
    ("2120", "Agent Payables", "liability", "accounts_payable", "2100", "TZS"),
    ("2200", "Tax Liabilities", "liability", "tax", "2000", "TZS"),
    ("2210", "VAT Payable", "liability", "tax", "2200", "TZS"),
    ("2220", "Withholding Tax Payable", "liability", "tax", "2200", "TZS"),
    ("2300", "Accrued Expenses", "liability", "accrued", "2000", "TZS"),
    # Equity
    ("3000", "Equity", "equity", "header", None, "TZS"),
    ("3100", "Share Capital", "equity", "capital", "3000", "TZS"),
    ("3200", "Retained Earnings", "equity", "retained_earnings", "3000", "TZS"),
    ("3300", "Current Year Earnings", "equity", "current_earnings", "3000", "TZS"),
    # Revenue
    ("4000", "Revenue", "revenue", "header", None, "TZS"),
    ("4100", "Shipping Revenue", "revenue", "operating", "4000", "TZS"),
    ("4110", "Air Freight Revenue", "revenue", "operating", "4100", "TZS"),
    ("4120", "Handling Fee Revenue", "revenue", "operating", "4100", "TZS"),
    ("4200", "Other Income", "revenue", "other", "4000", "TZS"),
    ("4210", "Foreign Exchange Gain", "revenue", "other", "4200", "TZS"),
    # Cost of services
    ("5000", "Cost of Services", "expense", "header", None, "TZS"),
    ("5100", "Agent Costs", "expense", "cost_of_goods", "5000", "TZS"),
    ("5110", "Europe Agent Costs", "expense", "cost_of_goods", "5100", "TZS"),
    ("5120", "Dubai Agent Costs", "expense", "cost_of_goods", "5100", "TZS"),
    ("5130", "China Agent Costs", "expense", "cost_of_goods", "5100", "TZS"),
    ("5140", "India Agent Costs", "expense", "cost_of_goods", "5100", "TZS"),
    ("5150", "USA Agent Costs", "expense", "cost_of_goods", "5100", "TZS"),
    ("5160", "UK Agent Costs", "expense", "cost_of_goods", "5100", "TZS"),
    ("5200", "Freight Costs", "expense", "cost_of_goods", "5000", "TZS"),
    ("5300", "Customs and Duties", "expense", "cost_of_goods", "5000", "TZS"),
    # Operating expenses
    ("6000", "Operating Expenses", "expense", "header", None, "TZS"),
    ("6100", "Salaries and Wages", "expense", "operating", "6000", "TZS"),
    ("6110", "Employee Salaries", "expense", "operating", "6100", "TZS"),
    ("6120", "Commissions", "expense", "operating", "6100", "TZS"),
    ("6200", "Rent and Utilities", "expense", "operating", "6000", "TZS"),
    ("6210", "Office Rent", "expense", "operating", "6200", "TZS"),
    ("6220", "Warehouse Rent", "expense", "operating", "6200", "TZS"),
    ("6230", "Utilities", "expense", "operating", "6200", "TZS"),
    ("6300", "Transportation", "expense", "operating", "6000", "TZS"),
    ("6400", "Office Expenses", "expense", "operating", "6000", "TZS"),
    ("6500", "Professional Fees", "expense", "operating", "6000", "TZS"),
    ("6600", "Insurance", "expense", "operating", "6000", "TZS"),
    ("6700", "Depreciation", "expense", "operating", "6000", "TZS"),
    ("6800", "Foreign Exchange Loss", "expense", "other", "6000", "TZS"),
    ("6900", "Other Expenses", "expense", "other", "6000", "TZS"),
]


def seed_chart(service: ChartOfAccountsService) -> tuple[int, list[str]]:
    """Create the default accounts, parents before children.

    Returns the number created and a warning per account that failed.
    Accounts whose code already exists are skipped.
    """
    ids: dict[str, int] = {}
    created = 0
    warnings = []
    for code, name, account_type, subtype, parent_code, currency in INITIAL_ACCOUNTS:
        existing = service.get_account_by_code(code)
        if existing is not None:
            ids[code] = existing.id
            continue
        try:
            account = service.create_account(
                code=code,
                name=name,
                account_type=account_type,
                subtype=subtype,
                parent_id=ids.get(parent_code) if parent_code else None,
                currency=currency,
            )
            ids[code] = account.id
            created += 1
        except ValueError as e:
            warnings.append(f"Could not create account {code} '{name}': {e}")
    return created, warnings


@click.command("init-chart")
@click.option("--force", is_flag=True, help="Add missing default accounts to a non-empty chart")
@click.pass_context
def init_chart(ctx, force: bool):
    """Initialize database with the default chart of accounts."""
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)

    # Check if accounts already exist
    existing = service.list_accounts()
    if existing and not force:
        click.echo("Accounts already exist. Use --force to add missing default accounts.")
        return

    click.echo("Creating default chart of accounts...")
    created, warnings = seed_chart(service)
    for warning in warnings:
        click.echo(f"Warning: {warning}", err=True)

    if not warnings:
        click.echo(f"Successfully created {created} accounts.")
    else:
        click.echo(f"Created {created} accounts with {len(warnings)} errors.")


def register_commands(cli):
    """Register init-chart command with main CLI."""
    cli.add_command(init_chart)
