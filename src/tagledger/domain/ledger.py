"""Atomic posting of transactions to the ledger store."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from tagledger.database.base import Database
from tagledger.domain.entities import (
    AccountType,
    EntryLine,
    EntryType,
    PostedTransaction,
    TransactionType,
)
from tagledger.domain.errors import (
    AccountNotFoundError,
    TransactionNotFoundError,
    account_not_found,
    transaction_not_found,
)

logger = logging.getLogger(__name__)

# Account types whose balance grows with debits (normal debit balance).
DEBIT_NORMAL_TYPES = frozenset({AccountType.ASSET, AccountType.EXPENSE})


def signed_delta(account_type: AccountType, entry_type: EntryType, amount: Decimal) -> Decimal:
    """Return the change an entry makes to an account balance.

    A debit increases ASSET and EXPENSE balances and decreases LIABILITY and
    INCOME balances; a credit does the opposite.
    """
    increases = (entry_type == EntryType.DEBIT) == (account_type in DEBIT_NORMAL_TYPES)
    return amount if increases else -amount


class LedgerExecutor:
    """Writes a transaction header, its entries and the balance deltas as one unit."""

    def __init__(self, db: Database):
        """Initialize ledger executor.

        Args:
            db: Database instance
        """
        self.db = db

    def execute(
        self,
        description: str,
        amount: Decimal,
        transaction_type: TransactionType,
        entries: Sequence[EntryLine],
        date: date,
        tag_id: Optional[int] = None,
    ) -> PostedTransaction:
        """Persist a validated entry set.

        Args:
            description: Transaction description
            amount: Informational amount stored on the header
            transaction_type: INCOME, EXPENSE or TRANSFER
            entries: Entries that already passed validation
            date: Transaction date
            tag_id: Optional tag label

        Returns:
            The committed transaction and its entries

        Raises:
            AccountNotFoundError: If an entry references a missing account
            StoreError: If the store rejects any write
        """
        with self.db.atomic():
            transaction_id = self.db.create_transaction(
                description=description,
                amount=amount,
                date=date,
                transaction_type=transaction_type,
                tag_id=tag_id,
            )
            for entry in entries:
                self.db.create_entry(transaction_id, entry)

            for entry in entries:
                account = self.db.get_account(entry.account_id)
                if account is None:
                    raise AccountNotFoundError(account_not_found(entry.account_id))
                delta = signed_delta(account.type, entry.entry_type, entry.amount)
                self.db.increment_account_balance(entry.account_id, delta)

            transaction = self.db.get_transaction(transaction_id)
            if transaction is None:
                raise TransactionNotFoundError(transaction_not_found(transaction_id))
            posted = PostedTransaction(
                transaction=transaction, entries=self.db.get_entries(transaction_id)
            )

        logger.info(
            f"Posted {transaction_type.value} transaction {transaction_id} "
            f"with {len(entries)} entries"
        )
        return posted
