"""Domain model entities for tagledger.

These are pure data classes representing ledger concepts, independent of the
database schema. Persisted entities are produced by the mapper layer; value
objects (entry lines, check results, pages) are built by the services.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Account classification driving the normal balance convention."""

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class EntryType(str, Enum):
    """Side of a double-entry leg."""

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class TransactionType(str, Enum):
    """Kind of domain event recorded by a transaction."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    TRANSFER = "TRANSFER"


@dataclass(frozen=True)
class Account:
    """Ledger account domain entity."""

    id: int
    name: str
    type: AccountType
    balance: Decimal
    currency: str
    description: Optional[str]
    opening_balance: Decimal
    created_at: datetime


@dataclass(frozen=True)
class Tag:
    """Tag domain entity. A label with no behavior of its own."""

    id: int
    name: str
    description: Optional[str]
    color: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction header domain entity."""

    id: int
    description: str
    amount: Decimal
    date: date
    transaction_type: TransactionType
    tag_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class TransactionEntry:
    """A committed debit or credit leg of a transaction."""

    id: int
    transaction_id: int
    account_id: int
    entry_type: EntryType
    debit_amount: Decimal
    credit_amount: Decimal
    original_amount: Optional[Decimal]
    original_currency: Optional[str]
    exchange_rate: Optional[Decimal]
    created_at: datetime

    @property
    def amount(self) -> Decimal:
        """The nonzero side of the entry."""
        return self.debit_amount if self.entry_type == EntryType.DEBIT else self.credit_amount


@dataclass(frozen=True)
class TagBalance:
    """Virtual sub-balance of a tag inside one account."""

    id: int
    tag_id: int
    account_id: int
    currency: str
    balance: Decimal
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ExchangeRate:
    """Cached exchange rate for one calendar day."""

    id: int
    from_currency: str
    to_currency: str
    date: date
    rate: Decimal
    created_at: datetime


@dataclass(frozen=True)
class EntryLine:
    """Candidate entry proposed for a transaction, before it is persisted.

    ``original_amount``, ``original_currency`` and ``exchange_rate`` describe
    cross-currency legs: ``amount`` is in the account currency and equals
    ``original_amount * exchange_rate``.
    """

    account_id: int
    entry_type: EntryType
    amount: Decimal
    original_amount: Optional[Decimal] = None
    original_currency: Optional[str] = None
    exchange_rate: Optional[Decimal] = None

    @property
    def debit_amount(self) -> Decimal:
        return self.amount if self.entry_type == EntryType.DEBIT else Decimal("0")

    @property
    def credit_amount(self) -> Decimal:
        return self.amount if self.entry_type == EntryType.CREDIT else Decimal("0")


@dataclass(frozen=True)
class PostedTransaction:
    """A committed transaction together with its entries."""

    transaction: Transaction
    entries: list[TransactionEntry]


@dataclass(frozen=True)
class ConversionResult:
    """Result of converting an amount between two currencies."""

    original_amount: Decimal
    converted_amount: Decimal
    from_currency: str
    to_currency: str
    exchange_rate: Decimal
    date: date


@dataclass(frozen=True)
class BalanceCheck:
    """Outcome of a double-entry balance check."""

    is_balanced: bool
    total_debits: Decimal
    total_credits: Decimal
    valuation_currency: str


@dataclass(frozen=True)
class TagBalanceValidation:
    """Aggregate tag balance check for one account."""

    is_valid: bool
    total_tag_balances: Decimal
    account_balance: Decimal
    available_balance: Decimal


@dataclass(frozen=True)
class TagBalanceTotal:
    """Balance of one tag summed across accounts."""

    tag_id: int
    currency: Optional[str]
    balance: Decimal
    balances: list[TagBalance] = field(default_factory=list)


@dataclass(frozen=True)
class TagAssetTotal:
    """Net movement of a tag's transactions on one asset account."""

    account_id: int
    account_name: str
    total: Decimal


@dataclass(frozen=True)
class TagSummary:
    """Tagged transactions with their per-asset-account totals."""

    tag: Tag
    transactions: list[Transaction]
    asset_totals: list[TagAssetTotal]
    total_amount: Decimal


@dataclass(frozen=True)
class TransactionPage:
    """One page of transactions."""

    items: list[Transaction]
    page: int
    page_size: int
    total: int
    total_pages: int


@dataclass(frozen=True)
class BalanceVerification:
    """Stored account balance compared with the balance rebuilt from entries."""

    account_id: int
    recorded_balance: Decimal
    computed_balance: Decimal

    @property
    def is_consistent(self) -> bool:
        return self.recorded_balance == self.computed_balance
