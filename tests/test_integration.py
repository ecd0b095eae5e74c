"""Integration tests for end-to-end workflows."""

from accountbook.cli.main import cli


def test_full_workflow(cli_runner, temp_db):
    """Test complete workflow: chart → rate → bank → journal → statement → reconcile → report."""

    def run(*args):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])
        assert result.exit_code == 0, result.output
        return result

    # Step 1: Initialize chart of accounts
    assert "Successfully created" in run("init-chart").output

    # Step 2: Set the USD rate
    assert "1 USD = 2,500 TZS" in run("rate", "set", "USD", "2500", "--name", "US Dollar").output

    # Step 3: Create a bank account backed by the TZS bank ledger account
    run("bank", "create", "CRDB Main", "--bank", "CRDB", "--ledger-account", "1120")

    # Step 4: Post a customer receipt and a USD sale
    receipt = run(
        "journal",
        "create",
        "--date",
        "2024-03-10",
        "-d",
        "Customer payment",
        "--line",
        "1120:debit:250000",
        "--line",
        "1210:credit:250000",
        "--post",
    )
    assert "Posted JE-2024-0001" in receipt.output

    sale = run(
        "journal",
        "create",
        "--date",
        "2024-03-12",
        "-d",
        "Air freight in USD",
        "--line",
        "1130:debit:100:USD",
        "--line",
        "4110:credit:250000",
        "--post",
    )
    assert "Posted JE-2024-0002" in sale.output

    # Step 5: Record the matching bank statement line
    run("bank", "add-transaction", "CRDB Main", "--date", "2024-03-11", "--credit", "250000", "-d", "ACME")

    # Step 6: The receipt is suggested and matched
    candidates = run("reconcile", "candidates", "1")
    assert any(line.startswith(" * JE-2024-0001") for line in candidates.output.splitlines())
    assert "Reconciled bank transaction 1 with JE-2024-0001" in run("reconcile", "match", "1", "JE-2024-0001").output

    summary = run("reconcile", "summary", "CRDB Main")
    assert "Matched: 1  Unmatched: 0" in summary.output
    assert "250,000.00" in summary.output

    # Step 7: Trial balance reflects both entries in TZS
    report = run("report", "trial-balance")
    assert "Trial Balance" in report.output
    assert "500,000.00" in report.output
    assert "does not balance" not in report.output
