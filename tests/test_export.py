"""Tests for CSV export."""

import csv
import io
from datetime import date
from decimal import Decimal

from accountbook.domain.aging import classify
from accountbook.domain.entities import AgingItem
from accountbook.domain.export import (
    write_aging_report,
    write_bank_transactions,
    write_chart_of_accounts,
)


def _rows(buffer):
    return list(csv.reader(io.StringIO(buffer.getvalue())))


def test_chart_of_accounts_csv(chart_service, sample_chart):
    """Accounts are written with an optional balance column."""
    accounts = chart_service.list_accounts()
    out = io.StringIO()
    count = write_chart_of_accounts(out, accounts, {sample_chart["1110"]: Decimal("12.5")})

    rows = _rows(out)
    assert count == len(accounts)
    assert rows[0] == ["code", "name", "type", "subtype", "normal_balance", "currency", "active", "balance"]
    petty = next(row for row in rows if row[0] == "1110")
    assert petty == ["1110", "Petty Cash", "asset", "cash", "debit", "TZS", "yes", "12.50"]
    assert next(row for row in rows if row[0] == "1000")[-1] == "0.00"


def test_chart_without_balances(chart_service, sample_chart):
    """Without balances there is no balance column."""
    out = io.StringIO()
    write_chart_of_accounts(out, chart_service.list_accounts())
    assert "balance" not in _rows(out)[0]


def test_aging_report_csv():
    """Each item is written with its bucket label."""
    items = [
        AgingItem(1, "INV-1", "ACME", date(2024, 3, 1), 0, Decimal("100"), "TZS"),
        AgingItem(2, "INV-2", None, date(2023, 11, 1), 0, Decimal("250.5"), "TZS"),
    ]
    out = io.StringIO()
    assert write_aging_report(out, classify(items, date(2024, 3, 31))) == 2

    rows = _rows(out)
    assert rows[1] == ["Current (0-30)", "INV-1", "ACME", "2024-03-01", "30", "100.00", "TZS"]
    assert rows[2] == ["90+ Days", "INV-2", "", "2023-11-01", "151", "250.50", "TZS"]


def test_bank_transactions_csv(bank_service, sample_bank_account):
    """Bank transactions are written with reconciliation state."""
    bank_service.add_transaction(
        sample_bank_account.id, date(2024, 3, 5), credit_amount=Decimal("500"), description="Deposit", reference="R1"
    )
    out = io.StringIO()
    count = write_bank_transactions(out, bank_service.list_transactions(sample_bank_account.id))

    rows = _rows(out)
    assert count == 1
    assert rows[1][1:] == ["2024-03-05", "Deposit", "R1", "0.00", "500.00", "no", ""]
