"""Tests for tag balance commands."""

from decimal import Decimal


def test_assign(run_cli, accounts, vehicle_tag):
    """Test assigning part of an account balance to a tag."""
    result = run_cli("tag-balance", "assign", "Vehicle", "Checking", "4000")

    assert result.exit_code == 0
    assert "tag balance is now Rs. 4,000.00" in result.output


def test_assign_exceeding_balance(run_cli, accounts, vehicle_tag):
    """Test that assigning more than the account holds fails."""
    run_cli("tag-balance", "assign", "Vehicle", "Checking", "4000")

    result = run_cli("tag-balance", "assign", "Vehicle", "Checking", "7000")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_assign_unknown_tag(run_cli, accounts):
    """Test that an unknown tag fails."""
    result = run_cli("tag-balance", "assign", "Holiday", "Checking", "10")

    assert result.exit_code == 1
    assert "Tag 'Holiday' not found" in result.output


def test_remove_partial_and_exact(run_cli, temp_db, accounts, vehicle_tag):
    """Test partial removal and clearing a tag balance."""
    run_cli("tag-balance", "assign", "Vehicle", "Checking", "4000")

    result = run_cli("tag-balance", "remove", "Vehicle", "Checking", "1000")
    assert result.exit_code == 0
    assert "tag balance is now Rs. 3,000.00" in result.output

    result = run_cli("tag-balance", "remove", "Vehicle", "Checking", "3000")
    assert result.exit_code == 0
    assert "tag balance cleared" in result.output
    temp_db.disconnect()
    assert temp_db.get_tag_balance(vehicle_tag, accounts["Checking"]) is None


def test_remove_too_much(run_cli, accounts, vehicle_tag):
    """Test that removing more than the tag holds fails."""
    run_cli("tag-balance", "assign", "Vehicle", "Checking", "100")

    result = run_cli("tag-balance", "remove", "Vehicle", "Checking", "150")

    assert result.exit_code == 1
    assert "Insufficient tag balance" in result.output


def test_show(run_cli, accounts, vehicle_tag, tag_balance_service):
    """Test showing balances per currency, per account and for one currency."""
    tag_balance_service.assign(vehicle_tag, accounts["Checking"], Decimal("4000"))
    tag_balance_service.assign(vehicle_tag, accounts["USD Wallet"], Decimal("50"))

    result = run_cli("tag-balance", "show", "Vehicle")
    assert result.exit_code == 0
    assert "LKR: Rs. 4,000.00" in result.output
    assert "USD: $ 50.00" in result.output

    result = run_cli("tag-balance", "show", "Vehicle", "--currency", "usd")
    assert "USD: $ 50.00" in result.output
    assert "LKR" not in result.output

    result = run_cli("tag-balance", "show", "Vehicle", "--account", "Savings")
    assert "LKR: Rs. 0.00" in result.output


def test_show_empty(run_cli, vehicle_tag):
    """Test the message for a tag without balances."""
    result = run_cli("tag-balance", "show", "Vehicle")

    assert result.exit_code == 0
    assert "No balances assigned to this tag." in result.output


def test_validate(run_cli, accounts, vehicle_tag, tag_balance_service, transaction_service):
    """Test validation before and after the account is overdrawn by allocations."""
    tag_balance_service.assign(vehicle_tag, accounts["Checking"], Decimal("8000"))

    result = run_cli("tag-balance", "validate", "Vehicle", "Checking")
    assert result.exit_code == 0
    assert "Available:          Rs. 2,000.00" in result.output

    transaction_service.create_expense_transaction(
        "Rent", Decimal("5000"), accounts["Groceries"], accounts["Checking"]
    )

    result = run_cli("tag-balance", "validate", "Vehicle", "Checking")
    assert result.exit_code == 1
    assert "exceed the account balance" in result.output
