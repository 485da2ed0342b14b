"""Tag balance domain service.

A tag balance is a virtual budgeting allocation inside a physical account:
money in the account is earmarked for a tag without moving anywhere. Rows
are created on first assignment and deleted only when a removal empties
them exactly.
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Optional

from tagledger.database.base import Database
from tagledger.domain.entities import (
    Account,
    TagBalance as TagBalanceEntity,
    TagBalanceTotal,
    TagBalanceValidation,
)
from tagledger.domain.errors import (
    AccountNotFoundError,
    ExceedsAccountBalanceError,
    InsufficientTagBalanceError,
    TagBalanceNotFoundError,
    TagNotFoundError,
    ValidationError,
    account_not_found,
    amount_not_positive,
    exceeds_account_balance,
    insufficient_tag_balance,
    tag_balance_not_found,
    tag_not_found,
)
from tagledger.utils.amount_parser import to_minor_units

logger = logging.getLogger(__name__)


class TagBalanceService:
    """Service for assigning account funds to tags."""

    def __init__(self, db: Database):
        """Initialize tag balance service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_account(self, account_id: int) -> Account:
        account = self.db.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_not_found(account_id))
        return account

    def _require_tag(self, tag_id: int) -> None:
        if self.db.get_tag(tag_id) is None:
            raise TagNotFoundError(tag_not_found(tag_id))

    @staticmethod
    def _minor_amount(amount: Decimal) -> Decimal:
        rounded = to_minor_units(Decimal(amount))
        if rounded <= 0:
            raise ValidationError(amount_not_positive(amount))
        return rounded

    def assign(self, tag_id: int, account_id: int, amount: Decimal) -> TagBalanceEntity:
        """Earmark part of an account balance for a tag.

        Only this tag's running total is compared with the account balance;
        the sum over all tags is checked by validate().

        Args:
            tag_id: Tag to assign to
            account_id: Account backing the allocation
            amount: Amount in the account currency, rounded to minor units

        Returns:
            The updated tag balance

        Raises:
            ValidationError: If amount rounds to zero or less
            AccountNotFoundError: If the account does not exist
            TagNotFoundError: If the tag does not exist
            ExceedsAccountBalanceError: If the tag total would exceed the account balance
        """
        amount = self._minor_amount(amount)
        account = self._require_account(account_id)
        self._require_tag(tag_id)

        current = self.db.get_tag_balance(tag_id, account_id, account.currency)
        current_balance = current.balance if current is not None else Decimal("0")
        prospective = current_balance + amount
        if prospective > account.balance:
            raise ExceedsAccountBalanceError(exceeds_account_balance(prospective, account.balance))

        with self.db.atomic():
            if current is None:
                self.db.create_tag_balance(tag_id, account_id, account.currency, amount)
            else:
                self.db.increment_tag_balance(current.id, amount)
            updated = self.db.get_tag_balance(tag_id, account_id, account.currency)

        logger.info(f"Assigned {amount} {account.currency} to tag {tag_id} in account {account_id}")
        return updated

    def remove(self, tag_id: int, account_id: int, amount: Decimal) -> Optional[TagBalanceEntity]:
        """Release part of a tag's allocation.

        Args:
            tag_id: Tag to remove from
            account_id: Account holding the allocation
            amount: Positive amount to release

        Returns:
            The updated tag balance, or None when the row was emptied and deleted

        Raises:
            ValidationError: If amount is not positive
            TagBalanceNotFoundError: If the tag has no balance in the account
            InsufficientTagBalanceError: If amount exceeds the tag balance
        """
        amount = self._minor_amount(amount)
        current = self.db.get_tag_balance(tag_id, account_id)
        if current is None:
            raise TagBalanceNotFoundError(tag_balance_not_found(tag_id, account_id))
        if amount > current.balance:
            raise InsufficientTagBalanceError(insufficient_tag_balance(amount, current.balance))

        with self.db.atomic():
            if amount == current.balance:
                self.db.delete_tag_balance(current.id)
                updated = None
            else:
                self.db.increment_tag_balance(current.id, -amount)
                updated = self.db.get_tag_balance(tag_id, account_id, current.currency)

        logger.info(f"Removed {amount} {current.currency} from tag {tag_id} in account {account_id}")
        return updated

    def validate(self, tag_id: int, account_id: int) -> TagBalanceValidation:
        """Check that all tag balances of an account fit inside its balance.

        Advisory only: nothing enforces this at write time.

        Raises:
            AccountNotFoundError: If the account does not exist
            TagNotFoundError: If the tag does not exist
        """
        account = self._require_account(account_id)
        self._require_tag(tag_id)

        rows = self.db.list_tag_balances(account_id=account_id, currency=account.currency)
        total = sum((row.balance for row in rows), Decimal("0"))
        return TagBalanceValidation(
            is_valid=total <= account.balance,
            total_tag_balances=total,
            account_balance=account.balance,
            available_balance=account.balance - total,
        )

    def get_tag_balance_in_account(self, tag_id: int, account_id: int) -> TagBalanceTotal:
        """Balance of a tag in one account; zero in the account currency when unset."""
        account = self._require_account(account_id)
        row = self.db.get_tag_balance(tag_id, account_id, account.currency)
        return TagBalanceTotal(
            tag_id=tag_id,
            currency=account.currency,
            balance=row.balance if row is not None else Decimal("0"),
            balances=[row] if row is not None else [],
        )

    def get_tag_balance(self, tag_id: int, currency: Optional[str] = None) -> TagBalanceTotal:
        """Balance of a tag summed across accounts.

        Args:
            tag_id: Tag ID
            currency: Restrict to accounts in this currency

        Raises:
            TagNotFoundError: If the tag does not exist
            ValidationError: If no currency is given and the tag spans several
        """
        self._require_tag(tag_id)
        rows = self.db.list_tag_balances(
            tag_id=tag_id, currency=currency.upper() if currency else None
        )
        currencies = {row.currency for row in rows}
        if currency is None and len(currencies) > 1:
            raise ValidationError(
                f"Tag {tag_id} holds balances in {', '.join(sorted(currencies))}; specify a currency"
            )
        resolved = currency.upper() if currency else (currencies.pop() if currencies else None)
        return TagBalanceTotal(
            tag_id=tag_id,
            currency=resolved,
            balance=sum((row.balance for row in rows), Decimal("0")),
            balances=rows,
        )

    def get_tag_balances_by_currency(self, tag_id: int) -> list[TagBalanceTotal]:
        """Balance of a tag grouped per currency."""
        self._require_tag(tag_id)
        grouped: dict[str, list[TagBalanceEntity]] = defaultdict(list)
        for row in self.db.list_tag_balances(tag_id=tag_id):
            grouped[row.currency].append(row)
        return [
            TagBalanceTotal(
                tag_id=tag_id,
                currency=currency,
                balance=sum((row.balance for row in rows), Decimal("0")),
                balances=rows,
            )
            for currency, rows in sorted(grouped.items())
        ]

    def get_account_tag_balances(self, account_id: int) -> list[TagBalanceEntity]:
        """All tag balances held in an account."""
        self._require_account(account_id)
        return self.db.list_tag_balances(account_id=account_id)
