"""Tests for chart of accounts commands."""

import pytest
from click.testing import CliRunner
from accountbook.cli.main import cli


def _run(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def test_init_chart(cli_runner, temp_db):
    """Test seeding the default chart of accounts."""
    result = _run(cli_runner, temp_db, "init-chart")

    assert result.exit_code == 0
    assert "Successfully created" in result.output

    again = _run(cli_runner, temp_db, "init-chart")
    assert again.exit_code == 0
    assert "Accounts already exist" in again.output


def test_account_create(cli_runner, temp_db):
    """Test creating an account reports its normal balance."""
    result = _run(cli_runner, temp_db, "account", "create", "1000", "Assets", "--type", "asset")

    assert result.exit_code == 0
    assert "Created account 1000 'Assets'" in result.output
    assert "normal balance: debit" in result.output


def test_account_create_with_parent(cli_runner, temp_db):
    """Test creating a child account by parent code."""
    _run(cli_runner, temp_db, "account", "create", "4000", "Revenue", "--type", "revenue")
    result = _run(cli_runner, temp_db, "account", "create", "4100", "Sales", "--type", "revenue", "--parent", "4000")

    assert result.exit_code == 0
    child = temp_db.get_chart_account_by_code("4100")
    assert temp_db.get_chart_account(child.parent_id).code == "4000"


def test_account_create_duplicate(cli_runner, temp_db):
    """Test creating a duplicate code fails."""
    result1 = _run(cli_runner, temp_db, "account", "create", "1000", "Assets", "--type", "asset")
    assert result1.exit_code == 0

    result2 = _run(cli_runner, temp_db, "account", "create", "1000", "Other", "--type", "asset")
    assert result2.exit_code == 1
    assert "already exists" in result2.output.lower()


def test_account_create_unknown_parent(cli_runner, temp_db):
    """Test an unknown parent code is reported."""
    result = _run(cli_runner, temp_db, "account", "create", "1100", "Cash", "--type", "asset", "--parent", "9999")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_account_list_empty(cli_runner, temp_db):
    """Test listing accounts when none exist."""
    result = _run(cli_runner, temp_db, "account", "list")

    assert result.exit_code == 0
    assert "No accounts found" in result.output


def test_account_list_with_balances(cli_runner, temp_db, make_entry):
    """Test listing accounts with balances."""
    make_entry("1110", "4110", "2500")
    result = _run(cli_runner, temp_db, "account", "list", "--type", "asset", "--balances")

    assert result.exit_code == 0
    assert "Chart of Accounts:" in result.output
    assert "Petty Cash" in result.output
    assert "Shipping Revenue" not in result.output
    assert "2,500.00" in result.output


def test_account_list_csv(cli_runner, temp_db, sample_chart, tmp_path):
    """Test writing the chart to CSV."""
    out = tmp_path / "chart.csv"
    result = _run(cli_runner, temp_db, "account", "list", "--csv", str(out))

    assert result.exit_code == 0
    assert f"Wrote {len(sample_chart)} accounts" in result.output
    assert out.read_text(encoding="utf-8").startswith("code,name,type")


def test_account_tree(cli_runner, temp_db, sample_chart):
    """Test the indented tree view."""
    result = _run(cli_runner, temp_db, "account", "tree")

    assert result.exit_code == 0
    assert "1000 Assets" in result.output
    assert "    1110 Petty Cash" in result.output


def test_account_balance_rollup(cli_runner, temp_db, make_entry):
    """Test a parent balance includes its children unless --direct."""
    make_entry("1110", "4110", "1000")

    result = _run(cli_runner, temp_db, "account", "balance", "1100")
    assert result.exit_code == 0
    assert "1100 Cash and Bank: 1,000.00 TZS" in result.output

    direct = _run(cli_runner, temp_db, "account", "balance", "1100", "--direct")
    assert "1100 Cash and Bank: 0.00 TZS" in direct.output


def test_account_set_parent_cycle(cli_runner, temp_db, sample_chart):
    """Test moving an account under its own child fails."""
    result = _run(cli_runner, temp_db, "account", "set-parent", "1000", "1110")

    assert result.exit_code == 1
    assert "cycle" in result.output


def test_account_update_and_deactivate(cli_runner, temp_db, sample_chart):
    """Test renaming and deactivating an account by code."""
    result = _run(cli_runner, temp_db, "account", "update", "6900", "--name", "Sundry Expenses")
    assert result.exit_code == 0
    assert "Updated account 6900 'Sundry Expenses'" in result.output

    result = _run(cli_runner, temp_db, "account", "deactivate", "6900")
    assert result.exit_code == 0
    listing = _run(cli_runner, temp_db, "account", "list")
    assert "Sundry Expenses" not in listing.output
    assert "Sundry Expenses" in _run(cli_runner, temp_db, "account", "list", "--all").output


def test_account_update_nothing(cli_runner, temp_db, sample_chart):
    """Test update without options fails."""
    result = _run(cli_runner, temp_db, "account", "update", "6900")
    assert result.exit_code == 1
    assert "Nothing to update" in result.output


def test_account_addressed_by_id(cli_runner, temp_db, sample_chart):
    """Test '#ID' addresses an account by ID."""
    result = _run(cli_runner, temp_db, "account", "balance", f"#{sample_chart['6900']}")
    assert result.exit_code == 0
    assert "6900 Other Expenses" in result.output
