"""SQLAlchemy models for tagledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Enum,
    UniqueConstraint,
    CheckConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from tagledger.domain.entities import AccountType, EntryType, TransactionType

Base = declarative_base()

# Money columns keep minor units; rates keep enough digits for inverse quotes.
MONEY = Numeric(18, 2)
RATE = Numeric(24, 10)


class Account(Base):
    """Ledger account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    type = Column(Enum(AccountType, native_enum=False), nullable=False)
    balance = Column(MONEY, nullable=False, default=0)
    opening_balance = Column(MONEY, nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="LKR")
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    entries = relationship("TransactionEntry", back_populates="account")
    tag_balances = relationship("TagBalance", back_populates="account")


class Tag(Base):
    """Tag model."""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)
    color = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="tag")
    tag_balances = relationship("TagBalance", back_populates="tag", cascade="all, delete-orphan")


class Transaction(Base):
    """Transaction header model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    description = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False)
    transaction_type = Column(Enum(TransactionType, native_enum=False), nullable=False)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    tag = relationship("Tag", back_populates="transactions")
    entries = relationship(
        "TransactionEntry", back_populates="transaction", cascade="all, delete-orphan"
    )


class TransactionEntry(Base):
    """Debit or credit leg of a transaction."""

    __tablename__ = "transaction_entries"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    entry_type = Column(Enum(EntryType, native_enum=False), nullable=False)
    debit_amount = Column(MONEY, nullable=False, default=0)
    credit_amount = Column(MONEY, nullable=False, default=0)
    original_amount = Column(MONEY, nullable=True)
    original_currency = Column(String(3), nullable=True)
    exchange_rate = Column(RATE, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "transaction_id", "account_id", "entry_type", name="uq_entry_transaction_account_type"
        ),
    )

    # Relationships
    transaction = relationship("Transaction", back_populates="entries")
    account = relationship("Account", back_populates="entries")


class TagBalance(Base):
    """Virtual tag balance inside an account."""

    __tablename__ = "tag_balances"

    id = Column(Integer, primary_key=True)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    currency = Column(String(3), nullable=False)
    balance = Column(MONEY, nullable=False, default=0)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("tag_id", "account_id", "currency", name="uq_tag_account_currency"),
        CheckConstraint("balance >= 0", name="ck_tag_balance_non_negative"),
    )

    # Relationships
    tag = relationship("Tag", back_populates="tag_balances")
    account = relationship("Account", back_populates="tag_balances")


class ExchangeRate(Base):
    """Exchange rate cached per calendar day."""

    __tablename__ = "exchange_rates"

    id = Column(Integer, primary_key=True)
    from_currency = Column(String(3), nullable=False)
    to_currency = Column(String(3), nullable=False)
    date = Column(Date, nullable=False)
    rate = Column(RATE, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        UniqueConstraint("from_currency", "to_currency", "date", name="uq_rate_pair_date"),
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
