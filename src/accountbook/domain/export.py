"""CSV export of computed listings."""

import csv
from decimal import Decimal
from typing import Iterable, Mapping, Optional, TextIO

from accountbook.domain.entities import AgingReport, BankTransaction, ChartAccount


def _money(value: Decimal) -> str:
    return f"{value:.2f}"


def write_chart_of_accounts(
    out: TextIO,
    accounts: Iterable[ChartAccount],
    balances: Optional[Mapping[int, Decimal]] = None,
) -> int:
    """Write the chart of accounts as CSV. Returns the number of rows written."""
    writer = csv.writer(out)
    header = ["code", "name", "type", "subtype", "normal_balance", "currency", "active"]
    if balances is not None:
        header.append("balance")
    writer.writerow(header)
    count = 0
    for account in accounts:
        row = [
            account.code,
            account.name,
            account.account_type.value,
            account.subtype or "",
            account.normal_balance.value,
            account.currency,
            "yes" if account.is_active else "no",
        ]
        if balances is not None:
            row.append(_money(balances.get(account.id, Decimal("0"))))
        writer.writerow(row)
        count += 1
    return count


def write_aging_report(out: TextIO, report: AgingReport) -> int:
    """Write every aging item with its bucket label as CSV."""
    writer = csv.writer(out)
    writer.writerow(["bucket", "reference", "party", "date", "days_outstanding", "amount", "currency"])
    count = 0
    for bucket in report.buckets:
        for item in bucket.items:
            writer.writerow(
                [
                    bucket.label,
                    item.reference,
                    item.party_name or "",
                    item.date.isoformat(),
                    item.days_outstanding,
                    _money(item.amount),
                    item.currency,
                ]
            )
            count += 1
    return count


def write_bank_transactions(out: TextIO, transactions: Iterable[BankTransaction]) -> int:
    """Write bank transactions as CSV."""
    writer = csv.writer(out)
    writer.writerow(
        ["id", "date", "description", "reference", "debit", "credit", "reconciled", "journal_entry_id"]
    )
    count = 0
    for txn in transactions:
        writer.writerow(
            [
                txn.id,
                txn.transaction_date.isoformat(),
                txn.description or "",
                txn.reference or "",
                _money(txn.debit_amount),
                _money(txn.credit_amount),
                "yes" if txn.is_reconciled else "no",
                txn.journal_entry_id if txn.journal_entry_id is not None else "",
            ]
        )
        count += 1
    return count
