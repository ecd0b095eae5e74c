"""Tests for bank accounts and account resolution."""

import pytest
from datetime import date
from decimal import Decimal

from accountbook.domain.errors import ConflictError, NotFoundError, ValidationError
from accountbook.utils.account_resolver import resolve_bank_account, resolve_chart_account


class TestBankAccountService:
    """Tests for BankAccountService."""

    def test_create_bank_account(self, bank_service, sample_bank_account, sample_chart):
        """Test the created account is linked and carries its opening balance."""
        assert sample_bank_account.name == "CRDB Main"
        assert sample_bank_account.chart_account_id == sample_chart["1120"]
        assert sample_bank_account.opening_balance == Decimal("1000.00")
        assert sample_bank_account.current_balance == Decimal("1000.00")

    def test_duplicate_name(self, bank_service, sample_bank_account):
        """Test bank account names are unique."""
        with pytest.raises(ConflictError):
            bank_service.create_bank_account("CRDB Main", "CRDB")

    def test_name_required(self, bank_service):
        """Test a blank name is refused."""
        with pytest.raises(ValidationError):
            bank_service.create_bank_account(" ", "CRDB")

    def test_link_requires_active_asset(self, bank_service, chart_service, sample_chart):
        """Test only active asset accounts can back a bank account."""
        with pytest.raises(ValidationError, match="not an asset"):
            bank_service.create_bank_account("NMB", "NMB", chart_account_id=sample_chart["4110"])

        chart_service.deactivate(sample_chart["1130"])
        account = bank_service.create_bank_account("NMB", "NMB", currency="usd")
        assert account.currency == "USD"
        with pytest.raises(ValidationError, match="inactive"):
            bank_service.link_chart_account(account.id, sample_chart["1130"])

    def test_transactions_update_balance(self, bank_service, sample_bank_account):
        """Test the current balance is opening plus credits less debits."""
        bank_service.add_transaction(sample_bank_account.id, date(2024, 3, 2), credit_amount=Decimal("500"))
        bank_service.add_transaction(sample_bank_account.id, date(2024, 3, 1), debit_amount=Decimal("120.50"))

        assert bank_service.current_balance(sample_bank_account.id) == Decimal("1379.50")
        transactions = bank_service.list_transactions(sample_bank_account.id)
        assert [t.transaction_date for t in transactions] == [date(2024, 3, 1), date(2024, 3, 2)]

    def test_transaction_filters(self, bank_service, sample_bank_account):
        """Test date and reconciliation filters."""
        bank_service.add_transaction(sample_bank_account.id, date(2024, 2, 1), credit_amount=Decimal("1"))
        bank_service.add_transaction(sample_bank_account.id, date(2024, 3, 1), credit_amount=Decimal("2"))

        march = bank_service.list_transactions(sample_bank_account.id, start_date=date(2024, 3, 1))
        assert [t.amount for t in march] == [Decimal("2")]
        assert len(bank_service.list_transactions(sample_bank_account.id, reconciled=False)) == 2

    @pytest.mark.parametrize(
        "debit,credit",
        [("0", "0"), ("5", "5"), ("-5", "0")],
    )
    def test_invalid_transaction_amounts(self, bank_service, sample_bank_account, debit, credit):
        """Test a statement line is exactly one positive side."""
        with pytest.raises(ValidationError):
            bank_service.add_transaction(
                sample_bank_account.id, date(2024, 3, 1), debit_amount=Decimal(debit), credit_amount=Decimal(credit)
            )

    def test_deactivate(self, bank_service, sample_bank_account):
        """Test inactive bank accounts are hidden from active listings."""
        bank_service.set_active(sample_bank_account.id, False)
        assert bank_service.list_bank_accounts(active_only=True) == []
        assert len(bank_service.list_bank_accounts()) == 1

    def test_missing_bank_account(self, bank_service):
        """Test unknown IDs raise NotFoundError."""
        with pytest.raises(NotFoundError):
            bank_service.add_transaction(99, date(2024, 3, 1), credit_amount=Decimal("1"))


class TestAccountResolver:
    """Tests for resolving accounts from command-line text."""

    def test_chart_account_by_code_first(self, chart_service, sample_chart):
        """Test numeric text is tried as a code before an ID."""
        assert resolve_chart_account(chart_service, "1110") == sample_chart["1110"]
        assert resolve_chart_account(chart_service, f"#{sample_chart['1110']}") == sample_chart["1110"]
        assert resolve_chart_account(chart_service, sample_chart["4110"]) == sample_chart["4110"]

    def test_chart_account_id_fallback(self, chart_service, sample_chart):
        """Test digits that are not a code fall back to an ID."""
        assert resolve_chart_account(chart_service, "3") == 3

    def test_chart_account_missing(self, chart_service, sample_chart):
        """Test unknown codes raise NotFoundError."""
        with pytest.raises(NotFoundError):
            resolve_chart_account(chart_service, "9999")
        with pytest.raises(NotFoundError):
            resolve_chart_account(chart_service, "#9999")

    def test_bank_account_by_name_or_id(self, bank_service, sample_bank_account):
        """Test bank accounts resolve by name or ID."""
        assert resolve_bank_account(bank_service, "CRDB Main") == sample_bank_account.id
        assert resolve_bank_account(bank_service, str(sample_bank_account.id)) == sample_bank_account.id
        with pytest.raises(NotFoundError):
            resolve_bank_account(bank_service, "Other")


def test_add_transaction_raises_when_line_cannot_be_read_back(
    bank_service, sample_bank_account, temp_db, monkeypatch
):
    """A stored statement line that cannot be loaded is reported as not found."""
    monkeypatch.setattr(temp_db, "get_bank_transaction", lambda transaction_id: None)
    with pytest.raises(NotFoundError):
        bank_service.add_transaction(sample_bank_account.id, date(2024, 3, 1), credit_amount=Decimal("1"))
