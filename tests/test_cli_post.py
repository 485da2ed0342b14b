"""Tests for posting commands."""

from decimal import Decimal

from tagledger.rates.source import FALLBACK_API, PRIMARY_API


def _balance(temp_db, account_id):
    # The CLI writes through its own connection; start a fresh session.
    temp_db.disconnect()
    return temp_db.get_account(account_id).balance


class TestPostIncome:
    """Tests for `post income`."""

    def test_post_income(self, run_cli, temp_db, accounts):
        """Test recording income by account names."""
        result = run_cli(
            "post", "income", "January salary", "5000",
            "--account", "Checking", "--income", "Salary", "--date", "2024-01-31",
        )

        assert result.exit_code == 0
        assert "Posted income transaction 1: January salary (5,000.00) on 2024-01-31" in result.output
        assert "DEBIT  Checking" in result.output
        assert "CREDIT Salary" in result.output
        assert _balance(temp_db, accounts["Checking"]) == Decimal("15000")

    def test_post_tagged_income(self, run_cli, temp_db, accounts, vehicle_tag):
        """Test that --tag assigns the income to the tag."""
        result = run_cli(
            "post", "income", "Bonus", "2000",
            "--account", "Checking", "--income", "Salary", "--tag", "Vehicle",
        )

        assert result.exit_code == 0
        temp_db.disconnect()
        assert temp_db.get_tag_balance(vehicle_tag, accounts["Checking"]).balance == Decimal("2000")

    def test_rejects_non_positive_amount(self, run_cli, accounts):
        """Test that zero amounts are rejected before posting."""
        result = run_cli("post", "income", "Nothing", "0", "--account", "Checking", "--income", "Salary")

        assert result.exit_code == 1
        assert "Error: Amount must be positive" in result.output

    def test_unknown_account(self, run_cli, accounts):
        """Test that an unknown account name fails."""
        result = run_cli("post", "income", "Pay", "10", "--account", "Nowhere", "--income", "Salary")

        assert result.exit_code == 1
        assert "Error: Account 'Nowhere' not found" in result.output

    def test_invalid_date(self, run_cli, accounts):
        """Test that an unparseable date fails."""
        result = run_cli(
            "post", "income", "Pay", "10", "--account", "Checking", "--income", "Salary",
            "--date", "gibberish",
        )

        assert result.exit_code == 1
        assert "Could not parse date" in result.output


class TestPostExpense:
    """Tests for `post expense`."""

    def test_post_expense(self, run_cli, temp_db, accounts):
        """Test recording an expense."""
        result = run_cli(
            "post", "expense", "Groceries", "1,250.50", "--account", "Checking", "--expense", "Groceries"
        )

        assert result.exit_code == 0
        assert "Posted expense transaction" in result.output
        assert _balance(temp_db, accounts["Checking"]) == Decimal("8749.50")

    def test_tagged_expense_without_allocation(self, run_cli, temp_db, accounts, vehicle_tag):
        """Test that a tagged expense with nothing allocated fails and posts nothing."""
        result = run_cli(
            "post", "expense", "Tyres", "100", "--account", "Checking", "--expense", "Groceries",
            "--tag", "Vehicle",
        )

        assert result.exit_code == 1
        assert "Error: No balance for tag" in result.output
        assert _balance(temp_db, accounts["Checking"]) == Decimal("10000")
        assert temp_db.count_transactions() == 0


class TestPostTransfer:
    """Tests for `post transfer`."""

    def test_same_currency(self, run_cli, temp_db, accounts):
        """Test a transfer between LKR accounts."""
        result = run_cli("post", "transfer", "Save", "4000", "--from", "Checking", "--to", "Savings")

        assert result.exit_code == 0
        assert "Posted transfer transaction" in result.output
        assert _balance(temp_db, accounts["Savings"]) == Decimal("4000")

    def test_cross_currency(self, run_cli, temp_db, accounts):
        """Test a USD to LKR transfer using the looked-up rate."""
        result = run_cli("post", "transfer", "Dollars", "100", "--from", "USD Wallet", "--to", "Checking")

        assert result.exit_code == 0
        assert "30,000.00" in result.output
        assert _balance(temp_db, accounts["Checking"]) == Decimal("40000")
        assert _balance(temp_db, accounts["USD Wallet"]) == Decimal("900")

    def test_custom_rate(self, run_cli, temp_db, accounts, rate_api):
        """Test that --rate is used instead of a lookup."""
        result = run_cli(
            "post", "transfer", "Dollars", "10", "--from", "USD Wallet", "--to", "Checking", "--rate", "295"
        )

        assert result.exit_code == 0
        assert "2,950.00" in result.output
        assert rate_api.requests == []

    def test_rate_unavailable(self, run_cli, temp_db, accounts, rate_api):
        """Test that a failed lookup exits with an error and posts nothing."""
        rate_api.down.update({PRIMARY_API, FALLBACK_API})

        result = run_cli("post", "transfer", "Dollars", "10", "--from", "USD Wallet", "--to", "Checking")

        assert result.exit_code == 1
        assert "Error: Exchange rate not found for USD to LKR" in result.output
        assert _balance(temp_db, accounts["USD Wallet"]) == Decimal("1000")

    def test_tagged_transfer(self, run_cli, temp_db, accounts, vehicle_tag):
        """Test that the destination receives the tag allocation."""
        result = run_cli(
            "post", "transfer", "Car fund", "4000", "--from", "Checking", "--to", "Savings", "--tag", "Vehicle"
        )

        assert result.exit_code == 0
        temp_db.disconnect()
        assert temp_db.get_tag_balance(vehicle_tag, accounts["Savings"]).balance == Decimal("4000")

    def test_same_account(self, run_cli, accounts):
        """Test that transferring to the same account fails."""
        result = run_cli("post", "transfer", "Loop", "10", "--from", "Checking", "--to", "Checking")

        assert result.exit_code == 1
        assert "same account" in result.output
