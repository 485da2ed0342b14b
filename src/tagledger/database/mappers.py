"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so services never see ORM objects
and the schema can change without touching ledger rules.
"""

from decimal import Decimal
from typing import Optional

from tagledger.domain import entities as domain
from tagledger.database.models import (
    Account as ORMAccount,
    Tag as ORMTag,
    Transaction as ORMTransaction,
    TransactionEntry as ORMTransactionEntry,
    TagBalance as ORMTagBalance,
    ExchangeRate as ORMExchangeRate,
)


def _decimal(value) -> Decimal:
    # SQLite hands back floats for arithmetic results; go through str.
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value or 0))


def _optional_decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    return _decimal(value)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        type=domain.AccountType(orm_account.type),
        balance=_decimal(orm_account.balance),
        currency=orm_account.currency,
        description=orm_account.description,
        opening_balance=_decimal(orm_account.opening_balance),
        created_at=orm_account.created_at,
    )


def tag_to_domain(orm_tag: ORMTag) -> domain.Tag:
    """Convert SQLAlchemy Tag model to domain Tag entity."""
    return domain.Tag(
        id=orm_tag.id,
        name=orm_tag.name,
        description=orm_tag.description,
        color=orm_tag.color,
        created_at=orm_tag.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        description=orm_transaction.description,
        amount=_decimal(orm_transaction.amount),
        date=orm_transaction.date,
        transaction_type=domain.TransactionType(orm_transaction.transaction_type),
        tag_id=orm_transaction.tag_id,
        created_at=orm_transaction.created_at,
    )


def transaction_entry_to_domain(orm_entry: ORMTransactionEntry) -> domain.TransactionEntry:
    """Convert SQLAlchemy TransactionEntry model to domain TransactionEntry entity."""
    return domain.TransactionEntry(
        id=orm_entry.id,
        transaction_id=orm_entry.transaction_id,
        account_id=orm_entry.account_id,
        entry_type=domain.EntryType(orm_entry.entry_type),
        debit_amount=_decimal(orm_entry.debit_amount),
        credit_amount=_decimal(orm_entry.credit_amount),
        original_amount=_optional_decimal(orm_entry.original_amount),
        original_currency=orm_entry.original_currency,
        exchange_rate=_optional_decimal(orm_entry.exchange_rate),
        created_at=orm_entry.created_at,
    )


def tag_balance_to_domain(orm_tag_balance: ORMTagBalance) -> domain.TagBalance:
    """Convert SQLAlchemy TagBalance model to domain TagBalance entity."""
    return domain.TagBalance(
        id=orm_tag_balance.id,
        tag_id=orm_tag_balance.tag_id,
        account_id=orm_tag_balance.account_id,
        currency=orm_tag_balance.currency,
        balance=_decimal(orm_tag_balance.balance),
        created_at=orm_tag_balance.created_at,
        updated_at=orm_tag_balance.updated_at,
    )


def exchange_rate_to_domain(orm_rate: ORMExchangeRate) -> domain.ExchangeRate:
    """Convert SQLAlchemy ExchangeRate model to domain ExchangeRate entity."""
    return domain.ExchangeRate(
        id=orm_rate.id,
        from_currency=orm_rate.from_currency,
        to_currency=orm_rate.to_currency,
        date=orm_rate.date,
        rate=_decimal(orm_rate.rate),
        created_at=orm_rate.created_at,
    )
