"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from tagledger.domain.entities import (
    Account,
    AccountType,
    EntryLine,
    ExchangeRate,
    Tag,
    TagBalance,
    Transaction,
    TransactionEntry,
    TransactionType,
)


class Database(ABC):
    """Abstract ledger store for tagledger.

    Write methods commit immediately when called on their own. Inside an
    ``atomic()`` scope they only flush, and the scope commits or rolls back
    everything at once.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Open an all-or-nothing write scope.

        Nested scopes join the outermost one. Any exception rolls back every
        write made in the scope; store driver errors surface as StoreError.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        account_type: AccountType,
        currency: str,
        description: Optional[str] = None,
        balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by name."""
        pass

    @abstractmethod
    def list_accounts(self, account_type: Optional[AccountType] = None) -> list[Account]:
        """List accounts, optionally filtered by type."""
        pass

    @abstractmethod
    def increment_account_balance(self, account_id: int, delta: Decimal) -> None:
        """Atomically add ``delta`` to the account balance (may be negative).

        Raises AccountNotFoundError if no row was updated.
        """
        pass

    # Tag operations
    @abstractmethod
    def create_tag(
        self, name: str, description: Optional[str] = None, color: Optional[str] = None
    ) -> int:
        """Create a tag. Returns tag ID."""
        pass

    @abstractmethod
    def get_tag(self, tag_id: int) -> Optional[Tag]:
        """Get tag by ID."""
        pass

    @abstractmethod
    def get_tag_by_name(self, name: str) -> Optional[Tag]:
        """Get tag by name."""
        pass

    @abstractmethod
    def list_tags(self) -> list[Tag]:
        """List all tags."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        description: str,
        amount: Decimal,
        date: date,
        transaction_type: TransactionType,
        tag_id: Optional[int] = None,
    ) -> int:
        """Insert a transaction header. Returns transaction ID."""
        pass

    @abstractmethod
    def create_entry(self, transaction_id: int, entry: EntryLine) -> int:
        """Insert one entry of a transaction. Returns entry ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def get_entries(self, transaction_id: int) -> list[TransactionEntry]:
        """Get the entries of a transaction in insertion order."""
        pass

    @abstractmethod
    def list_account_entries(self, account_id: int) -> list[TransactionEntry]:
        """Get every entry posted to an account."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        tag_id: Optional[int] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions, newest first, with optional filters.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            account_id: Only transactions with an entry on this account
            tag_id: Only transactions labelled with this tag
            offset: Number of rows to skip
            limit: Maximum number of rows to return
        """
        pass

    @abstractmethod
    def count_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        tag_id: Optional[int] = None,
    ) -> int:
        """Count transactions matching the same filters as list_transactions."""
        pass

    @abstractmethod
    def get_tag_entry_totals(
        self, tag_id: int, account_type: Optional[AccountType] = None
    ) -> list[tuple[int, Decimal, Decimal]]:
        """Sum entries of a tag's transactions per account.

        Returns (account_id, total_debits, total_credits) tuples.
        """
        pass

    # Tag balance operations
    @abstractmethod
    def get_tag_balance(
        self, tag_id: int, account_id: int, currency: Optional[str] = None
    ) -> Optional[TagBalance]:
        """Get the tag balance row for a tag in an account."""
        pass

    @abstractmethod
    def list_tag_balances(
        self,
        tag_id: Optional[int] = None,
        account_id: Optional[int] = None,
        currency: Optional[str] = None,
    ) -> list[TagBalance]:
        """List tag balance rows with optional filters."""
        pass

    @abstractmethod
    def create_tag_balance(
        self, tag_id: int, account_id: int, currency: str, balance: Decimal
    ) -> int:
        """Insert a tag balance row. Returns its ID."""
        pass

    @abstractmethod
    def increment_tag_balance(self, tag_balance_id: int, delta: Decimal) -> None:
        """Atomically add ``delta`` to a tag balance row."""
        pass

    @abstractmethod
    def delete_tag_balance(self, tag_balance_id: int) -> None:
        """Delete a tag balance row."""
        pass

    # Exchange rate operations
    @abstractmethod
    def get_exchange_rate(
        self, from_currency: str, to_currency: str, on_date: date
    ) -> Optional[ExchangeRate]:
        """Get a cached rate for the pair and calendar day."""
        pass

    @abstractmethod
    def add_exchange_rate(
        self, from_currency: str, to_currency: str, on_date: date, rate: Decimal
    ) -> bool:
        """Cache a rate. Returns False if the key already existed."""
        pass

    @abstractmethod
    def upsert_exchange_rate(
        self, from_currency: str, to_currency: str, on_date: date, rate: Decimal
    ) -> None:
        """Insert a rate or overwrite the existing one for the same key."""
        pass
