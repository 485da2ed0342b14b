"""Tests for account and tag commands."""

from decimal import Decimal


class TestAccountCommands:
    """Tests for the account command group."""

    def test_create_account(self, run_cli, temp_db):
        """Test creating an account from the CLI."""
        result = run_cli("account", "create", "Checking", "--type", "asset", "--balance", "10,000")

        assert result.exit_code == 0
        assert "Created asset account 'Checking'" in result.output
        assert "Rs. 10,000.00" in result.output
        assert temp_db.get_account_by_name("Checking").balance == Decimal("10000")

    def test_create_foreign_account(self, run_cli):
        """Test creating an account in another currency."""
        result = run_cli(
            "account", "create", "Wallet", "--type", "ASSET", "--currency", "usd", "--balance", "25"
        )

        assert result.exit_code == 0
        assert "$ 25.00" in result.output

    def test_create_duplicate(self, run_cli, accounts):
        """Test that duplicate names fail with an error."""
        result = run_cli("account", "create", "Checking", "--type", "asset")

        assert result.exit_code == 1
        assert "Error: Account with name 'Checking' already exists" in result.output

    def test_create_requires_type(self, run_cli):
        """Test that the account type is mandatory."""
        result = run_cli("account", "create", "Checking")

        assert result.exit_code != 0
        assert "--type" in result.output

    def test_list_accounts(self, run_cli, accounts):
        """Test listing accounts with and without a type filter."""
        result = run_cli("account", "list")
        assert result.exit_code == 0
        assert "Checking" in result.output
        assert "USD Wallet" in result.output

        result = run_cli("account", "list", "--type", "income")
        assert "Salary" in result.output
        assert "Checking" not in result.output

    def test_list_empty(self, run_cli):
        """Test the message shown without accounts."""
        result = run_cli("account", "list")

        assert result.exit_code == 0
        assert "No accounts found." in result.output

    def test_show_account_with_tag_balances(self, run_cli, accounts, vehicle_tag, tag_balance_service):
        """Test that show lists allocations and the available remainder."""
        tag_balance_service.assign(vehicle_tag, accounts["Checking"], Decimal("4000"))

        result = run_cli("account", "show", "Checking")

        assert result.exit_code == 0
        assert "Balance: Rs. 10,000.00" in result.output
        assert "Vehicle" in result.output
        assert "Rs. 6,000.00" in result.output

    def test_show_unknown_account(self, run_cli):
        """Test that an unknown account exits with an error."""
        result = run_cli("account", "show", "Nowhere")

        assert result.exit_code == 1
        assert "Error: Account 'Nowhere' not found" in result.output

    def test_verify(self, run_cli, accounts, transaction_service):
        """Test that verify reports a consistent account."""
        transaction_service.create_income_transaction(
            "Pay", Decimal("500"), accounts["Checking"], accounts["Salary"]
        )

        result = run_cli("account", "verify", "Checking")

        assert result.exit_code == 0
        assert "Computed balance: Rs. 10,500.00" in result.output
        assert "is consistent" in result.output


class TestTagCommands:
    """Tests for the tag command group."""

    def test_create_and_list(self, run_cli):
        """Test creating and listing tags."""
        result = run_cli("tag", "create", "Vehicle", "--description", "Car fund")
        assert result.exit_code == 0
        assert "Created tag 'Vehicle' (ID: 1)" in result.output

        result = run_cli("tag", "list")
        assert "Vehicle" in result.output
        assert "Car fund" in result.output

    def test_create_duplicate(self, run_cli, vehicle_tag):
        """Test that duplicate tags fail."""
        result = run_cli("tag", "create", "Vehicle")

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_show(self, run_cli, accounts, vehicle_tag, transaction_service):
        """Test the tag summary output."""
        transaction_service.create_income_transaction(
            "Car money", Decimal("3000"), accounts["Checking"], accounts["Salary"], tag_id=vehicle_tag
        )

        result = run_cli("tag", "show", "Vehicle")

        assert result.exit_code == 0
        assert "Car money" in result.output
        assert "3,000.00" in result.output

    def test_show_unknown(self, run_cli):
        """Test that an unknown tag exits with an error."""
        result = run_cli("tag", "show", "Holiday")

        assert result.exit_code == 1
        assert "Error: Tag 'Holiday' not found" in result.output
