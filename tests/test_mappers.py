"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from tagledger.database.models import (
    Account as ORMAccount,
    ExchangeRate as ORMExchangeRate,
    TagBalance as ORMTagBalance,
    TransactionEntry as ORMTransactionEntry,
)
from tagledger.database.mappers import (
    account_to_domain,
    exchange_rate_to_domain,
    tag_balance_to_domain,
    transaction_entry_to_domain,
)
from tagledger.domain.entities import Account, AccountType, EntryType, ExchangeRate


class TestAccountMapper:
    """Tests for account_to_domain."""

    def test_account_to_domain(self):
        """Test converting ORM Account to domain Account."""
        now = datetime.now(UTC)
        orm_account = ORMAccount(
            id=1,
            name="Checking",
            type=AccountType.ASSET,
            balance=Decimal("1500.25"),
            opening_balance=Decimal("1000"),
            currency="LKR",
            description="Main account",
            created_at=now,
        )

        account = account_to_domain(orm_account)

        assert isinstance(account, Account)
        assert account.type == AccountType.ASSET
        assert account.balance == Decimal("1500.25")
        assert account.opening_balance == Decimal("1000")
        assert account.created_at == now

    def test_float_balance_becomes_decimal(self):
        """Test that float values read back from SQLite are converted exactly."""
        orm_account = ORMAccount(
            id=2,
            name="Wallet",
            type=AccountType.ASSET,
            balance=0.1,
            opening_balance=None,
            currency="USD",
            created_at=datetime.now(UTC),
        )

        account = account_to_domain(orm_account)

        assert account.balance == Decimal("0.1")
        assert account.opening_balance == Decimal("0")


class TestTransactionEntryMapper:
    """Tests for transaction_entry_to_domain."""

    def test_cross_currency_entry(self):
        """Test that optional conversion fields survive mapping."""
        orm_entry = ORMTransactionEntry(
            id=5,
            transaction_id=3,
            account_id=1,
            entry_type=EntryType.DEBIT,
            debit_amount=Decimal("300000"),
            credit_amount=Decimal("0"),
            original_amount=Decimal("1000"),
            original_currency="USD",
            exchange_rate=Decimal("300"),
            created_at=datetime.now(UTC),
        )

        entry = transaction_entry_to_domain(orm_entry)

        assert entry.entry_type == EntryType.DEBIT
        assert entry.amount == Decimal("300000")
        assert entry.original_amount == Decimal("1000")
        assert entry.exchange_rate == Decimal("300")

    def test_plain_entry(self):
        """Test that missing conversion fields stay None."""
        orm_entry = ORMTransactionEntry(
            id=6,
            transaction_id=3,
            account_id=2,
            entry_type=EntryType.CREDIT,
            debit_amount=Decimal("0"),
            credit_amount=Decimal("50"),
            created_at=datetime.now(UTC),
        )

        entry = transaction_entry_to_domain(orm_entry)

        assert entry.original_amount is None
        assert entry.exchange_rate is None
        assert entry.amount == Decimal("50")


def test_tag_balance_to_domain():
    """Test converting ORM TagBalance to domain TagBalance."""
    now = datetime.now(UTC)
    row = ORMTagBalance(
        id=1, tag_id=2, account_id=3, currency="LKR", balance=Decimal("400"), created_at=now, updated_at=now
    )

    tag_balance = tag_balance_to_domain(row)

    assert tag_balance.balance == Decimal("400")
    assert tag_balance.updated_at == now


def test_exchange_rate_to_domain():
    """Test converting ORM ExchangeRate to domain ExchangeRate."""
    row = ORMExchangeRate(
        id=1,
        from_currency="USD",
        to_currency="LKR",
        date=date(2024, 1, 15),
        rate=Decimal("300.5"),
        created_at=datetime.now(UTC),
    )

    rate = exchange_rate_to_domain(row)

    assert isinstance(rate, ExchangeRate)
    assert rate.date == date(2024, 1, 15)
    assert rate.rate == Decimal("300.5")
