"""Transaction domain service.

Maps income, expense and transfer requests to double-entry legs, checks
that they balance and hands them to the ledger executor. Tagged variants
follow the posting with one tag balance update.
"""

import logging
from contextlib import nullcontext
from datetime import date
from decimal import Decimal, InvalidOperation
from math import ceil
from typing import Iterable, Optional, Sequence

from tagledger.database.base import Database
from tagledger.domain.account import normalize_currency
from tagledger.domain.currency import RATE_QUANTUM, CurrencyService
from tagledger.domain.entities import (
    Account,
    BalanceVerification,
    EntryLine,
    EntryType,
    PostedTransaction,
    Transaction as TransactionEntity,
    TransactionEntry,
    TransactionPage,
    TransactionType,
)
from tagledger.domain.errors import (
    AccountNotFoundError,
    RateUnavailableError,
    TagNotFoundError,
    TransactionNotFoundError,
    UnbalancedEntryError,
    ValidationError,
    account_not_found,
    amount_not_positive,
    rate_unavailable,
    tag_not_found,
    transaction_not_found,
    unbalanced_entry,
)
from tagledger.domain.ledger import LedgerExecutor, signed_delta
from tagledger.domain.tag_balance import TagBalanceService
from tagledger.domain.validation import DoubleEntryValidator, check_structure, normalize_entries
from tagledger.utils.amount_parser import to_minor_units

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for composing and posting transactions."""

    def __init__(
        self,
        db: Database,
        currency_service: CurrencyService,
        validator: Optional[DoubleEntryValidator] = None,
        executor: Optional[LedgerExecutor] = None,
        tag_balances: Optional[TagBalanceService] = None,
        shared_scope: bool = True,
    ):
        """Initialize transaction service.

        Args:
            db: Database instance
            currency_service: Resolver used for cross-currency transfers
            validator: Balance checker (built from currency_service if omitted)
            executor: Ledger writer (built from db if omitted)
            tag_balances: Allocator for tagged variants (built from db if omitted)
            shared_scope: If True, a tagged posting and its tag balance update
                commit together; if False the posting commits first and the
                tag balance update runs as a second unit
        """
        self.db = db
        self.currency_service = currency_service
        self.validator = validator or DoubleEntryValidator(currency_service)
        self.executor = executor or LedgerExecutor(db)
        self.tag_balances = tag_balances or TagBalanceService(db)
        self.shared_scope = shared_scope

    # Helpers
    @staticmethod
    def _minor_amount(amount: Decimal) -> Decimal:
        """Round to minor units; reject anything that rounds to zero or less."""
        rounded = to_minor_units(Decimal(amount))
        if rounded <= 0:
            raise ValidationError(amount_not_positive(amount))
        return rounded

    @staticmethod
    def _checked_rate(exchange_rate: Decimal) -> Decimal:
        """Quantize a custom rate to stored precision; it must stay positive."""
        try:
            rate = Decimal(exchange_rate).quantize(RATE_QUANTUM)
        except InvalidOperation as e:
            raise ValidationError(f"Exchange rate out of range: {exchange_rate}") from e
        if rate <= 0:
            raise ValidationError(f"Exchange rate must be positive, got {exchange_rate}")
        return rate

    def _load_accounts(self, account_ids: Iterable[int]) -> dict[int, Account]:
        accounts = {}
        for account_id in account_ids:
            if account_id in accounts:
                continue
            account = self.db.get_account(account_id)
            if account is None:
                raise AccountNotFoundError(account_not_found(account_id))
            accounts[account_id] = account
        return accounts

    def _check_tag(self, tag_id: Optional[int]) -> None:
        if tag_id is not None and self.db.get_tag(tag_id) is None:
            raise TagNotFoundError(tag_not_found(tag_id))

    def _tag_scope(self):
        return self.db.atomic() if self.shared_scope else nullcontext()

    def _post(
        self,
        description: str,
        amount: Decimal,
        transaction_type: TransactionType,
        entries: Sequence[EntryLine],
        on_date: date,
        tag_id: Optional[int],
    ) -> PostedTransaction:
        """Validate an entry set and hand it to the executor."""
        check_structure(entries)
        entries = normalize_entries(entries)
        amount = to_minor_units(Decimal(amount))
        accounts = self._load_accounts(e.account_id for e in entries)
        self._check_tag(tag_id)

        check = self.validator.check(entries, accounts, on_date)
        if not check.is_balanced:
            logger.warning(
                f"Rejected unbalanced {transaction_type.value} transaction '{description}'"
            )
            raise UnbalancedEntryError(
                unbalanced_entry(check.total_debits, check.total_credits, check.valuation_currency)
            )

        return self.executor.execute(
            description=description,
            amount=amount,
            transaction_type=transaction_type,
            entries=entries,
            date=on_date,
            tag_id=tag_id,
        )

    # Posting
    def create_transaction(
        self,
        description: str,
        amount: Decimal,
        transaction_type: TransactionType,
        entries: Sequence[EntryLine],
        on_date: Optional[date] = None,
        tag_id: Optional[int] = None,
    ) -> PostedTransaction:
        """Post an arbitrary balanced entry set.

        Args:
            description: Transaction description
            amount: Informational amount stored on the header
            transaction_type: INCOME, EXPENSE or TRANSFER
            entries: Debit and credit legs
            on_date: Transaction date (defaults to today)
            tag_id: Optional tag label

        Returns:
            The committed transaction and its entries

        Raises:
            ValidationError: If an entry amount is not positive or a side is missing
            AccountNotFoundError: If an entry references a missing account
            TagNotFoundError: If tag_id does not exist
            UnbalancedEntryError: If the valuated debits and credits differ
            RateUnavailableError: If a foreign leg cannot be valuated
        """
        return self._post(
            description,
            amount,
            TransactionType(transaction_type),
            list(entries),
            on_date or date.today(),
            tag_id,
        )

    def create_income_transaction(
        self,
        description: str,
        amount: Decimal,
        asset_account_id: int,
        income_account_id: int,
        on_date: Optional[date] = None,
        tag_id: Optional[int] = None,
    ) -> PostedTransaction:
        """Record income: debit the asset account, credit the income account."""
        amount = self._minor_amount(amount)
        entries = [
            EntryLine(asset_account_id, EntryType.DEBIT, amount),
            EntryLine(income_account_id, EntryType.CREDIT, amount),
        ]
        return self._post(
            description, amount, TransactionType.INCOME, entries, on_date or date.today(), tag_id
        )

    def create_expense_transaction(
        self,
        description: str,
        amount: Decimal,
        expense_account_id: int,
        asset_account_id: int,
        on_date: Optional[date] = None,
        tag_id: Optional[int] = None,
    ) -> PostedTransaction:
        """Record an expense: debit the expense account, credit the asset account."""
        amount = self._minor_amount(amount)
        entries = [
            EntryLine(expense_account_id, EntryType.DEBIT, amount),
            EntryLine(asset_account_id, EntryType.CREDIT, amount),
        ]
        return self._post(
            description, amount, TransactionType.EXPENSE, entries, on_date or date.today(), tag_id
        )

    def compose_transfer(
        self,
        amount: Decimal,
        from_account_id: int,
        to_account_id: int,
        on_date: date,
        from_currency: Optional[str] = None,
        to_currency: Optional[str] = None,
        exchange_rate: Optional[Decimal] = None,
    ) -> list[EntryLine]:
        """Build the legs of a transfer, converting when currencies differ.

        The destination leg carries the source amount and rate; the source leg
        carries the converted amount and the inverse rate, so either leg can be
        traced back to the other.

        Raises:
            ValidationError: On same-account transfers, mismatched currency
                overrides or a non-positive custom rate
            AccountNotFoundError: If either account does not exist
            RateUnavailableError: If no rate is given and none can be resolved
        """
        amount = self._minor_amount(amount)
        if from_account_id == to_account_id:
            raise ValidationError("Cannot transfer to the same account")
        accounts = self._load_accounts([from_account_id, to_account_id])
        source = accounts[from_account_id]
        destination = accounts[to_account_id]

        if from_currency and normalize_currency(from_currency) != source.currency:
            raise ValidationError(
                f"Account '{source.name}' holds {source.currency}, not {from_currency.upper()}"
            )
        if to_currency and normalize_currency(to_currency) != destination.currency:
            raise ValidationError(
                f"Account '{destination.name}' holds {destination.currency}, not {to_currency.upper()}"
            )

        if source.currency == destination.currency:
            return [
                EntryLine(to_account_id, EntryType.DEBIT, amount),
                EntryLine(from_account_id, EntryType.CREDIT, amount),
            ]

        if exchange_rate is not None:
            rate = self._checked_rate(exchange_rate)
            converted = amount * rate
        else:
            conversion = self.currency_service.convert(
                amount, source.currency, destination.currency, on_date
            )
            rate = conversion.exchange_rate
            if rate <= 0:
                raise RateUnavailableError(rate_unavailable(source.currency, destination.currency))
            converted = conversion.converted_amount
        converted = to_minor_units(converted)

        return [
            EntryLine(
                to_account_id,
                EntryType.DEBIT,
                converted,
                original_amount=amount,
                original_currency=source.currency,
                exchange_rate=rate,
            ),
            EntryLine(
                from_account_id,
                EntryType.CREDIT,
                amount,
                original_amount=converted,
                original_currency=destination.currency,
                exchange_rate=(Decimal("1") / rate).quantize(RATE_QUANTUM),
            ),
        ]

    def create_transfer_transaction(
        self,
        description: str,
        amount: Decimal,
        from_account_id: int,
        to_account_id: int,
        on_date: Optional[date] = None,
        tag_id: Optional[int] = None,
        from_currency: Optional[str] = None,
        to_currency: Optional[str] = None,
        exchange_rate: Optional[Decimal] = None,
    ) -> PostedTransaction:
        """Move money between accounts, converting across currencies.

        Args:
            description: Transaction description
            amount: Amount in the source account currency
            from_account_id: Account credited
            to_account_id: Account debited
            on_date: Transaction date (defaults to today)
            tag_id: Optional tag label
            from_currency: Optional source currency; must match the account
            to_currency: Optional destination currency; must match the account
            exchange_rate: Optional custom rate (destination units per source unit)
        """
        on_date = on_date or date.today()
        entries = self.compose_transfer(
            amount, from_account_id, to_account_id, on_date, from_currency, to_currency, exchange_rate
        )
        return self._post(description, amount, TransactionType.TRANSFER, entries, on_date, tag_id)

    # Tagged variants
    def create_tagged_income_transaction(
        self,
        description: str,
        amount: Decimal,
        tag_id: int,
        asset_account_id: int,
        income_account_id: int,
        on_date: Optional[date] = None,
    ) -> PostedTransaction:
        """Record income and assign it to a tag in the receiving asset account."""
        amount = self._minor_amount(amount)
        entries = [
            EntryLine(asset_account_id, EntryType.DEBIT, amount),
            EntryLine(income_account_id, EntryType.CREDIT, amount),
        ]
        with self._tag_scope():
            posted = self._post(
                description, amount, TransactionType.INCOME, entries, on_date or date.today(), tag_id
            )
            self.tag_balances.assign(tag_id, asset_account_id, amount)
        return posted

    def create_tagged_expense_transaction(
        self,
        description: str,
        amount: Decimal,
        tag_id: int,
        expense_account_id: int,
        asset_account_id: int,
        on_date: Optional[date] = None,
    ) -> PostedTransaction:
        """Record an expense and release the same amount from the tag."""
        amount = self._minor_amount(amount)
        entries = [
            EntryLine(expense_account_id, EntryType.DEBIT, amount),
            EntryLine(asset_account_id, EntryType.CREDIT, amount),
        ]
        with self._tag_scope():
            posted = self._post(
                description, amount, TransactionType.EXPENSE, entries, on_date or date.today(), tag_id
            )
            self.tag_balances.remove(tag_id, asset_account_id, amount)
        return posted

    def create_tagged_transfer_transaction(
        self,
        description: str,
        amount: Decimal,
        tag_id: int,
        from_account_id: int,
        to_account_id: int,
        on_date: Optional[date] = None,
        from_currency: Optional[str] = None,
        to_currency: Optional[str] = None,
        exchange_rate: Optional[Decimal] = None,
    ) -> PostedTransaction:
        """Transfer money and assign the amount received to a tag in the destination."""
        on_date = on_date or date.today()
        entries = self.compose_transfer(
            amount, from_account_id, to_account_id, on_date, from_currency, to_currency, exchange_rate
        )
        received = entries[0].amount
        with self._tag_scope():
            posted = self._post(
                description, amount, TransactionType.TRANSFER, entries, on_date, tag_id
            )
            self.tag_balances.assign(tag_id, to_account_id, received)
        return posted

    # Queries
    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def get_posted_transaction(self, transaction_id: int) -> PostedTransaction:
        """Get a transaction with its entries.

        Raises:
            TransactionNotFoundError: If the transaction does not exist
        """
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise TransactionNotFoundError(transaction_not_found(transaction_id))
        return PostedTransaction(transaction=transaction, entries=self.db.get_entries(transaction_id))

    def get_entries(self, transaction_id: int) -> list[TransactionEntry]:
        """Get the entries of a transaction."""
        return self.db.get_entries(transaction_id)

    def list_transactions(
        self,
        page: int = 1,
        page_size: int = 10,
        account_id: Optional[int] = None,
        tag_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> TransactionPage:
        """List transactions newest first, one page at a time.

        Raises:
            ValidationError: If page or page_size is less than 1
        """
        if page < 1 or page_size < 1:
            raise ValidationError("Invalid pagination parameters")

        filters = dict(start_date=start_date, end_date=end_date, account_id=account_id, tag_id=tag_id)
        total = self.db.count_transactions(**filters)
        items = self.db.list_transactions(
            **filters, offset=(page - 1) * page_size, limit=page_size
        )
        return TransactionPage(
            items=items,
            page=page,
            page_size=page_size,
            total=total,
            total_pages=ceil(total / page_size) or 1,
        )

    def get_account_transactions(self, account_id: int) -> list[TransactionEntity]:
        """All transactions touching an account, newest first."""
        self._load_accounts([account_id])
        return self.db.list_transactions(account_id=account_id)

    def verify_account_balance(self, account_id: int) -> BalanceVerification:
        """Rebuild an account balance from its opening balance and entries.

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        account = self._load_accounts([account_id])[account_id]
        computed = account.opening_balance
        for entry in self.db.list_account_entries(account_id):
            computed += signed_delta(account.type, entry.entry_type, entry.amount)
        return BalanceVerification(
            account_id=account_id,
            recorded_balance=account.balance,
            computed_balance=computed,
        )
