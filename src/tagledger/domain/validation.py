"""Double-entry balance checks."""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Mapping, Sequence

from tagledger.domain.currency import CurrencyService
from tagledger.domain.entities import Account, BalanceCheck, EntryLine, EntryType
from tagledger.domain.errors import ValidationError, amount_not_positive
from tagledger.utils.amount_parser import to_minor_units

# Minor-unit rounding allowance when comparing debit and credit totals.
BALANCE_TOLERANCE = Decimal("0.01")


def normalize_entries(entries: Sequence[EntryLine]) -> list[EntryLine]:
    """Round entry amounts to minor units, as the ledger stores them."""
    return [
        replace(
            entry,
            amount=to_minor_units(entry.amount),
            original_amount=(
                to_minor_units(entry.original_amount) if entry.original_amount is not None else None
            ),
        )
        for entry in entries
    ]


def check_structure(entries: Sequence[EntryLine]) -> None:
    """Reject entry sets that cannot form a transaction.

    Amounts are compared at minor-unit precision, so a leg that rounds to
    zero is rejected.

    Raises:
        ValidationError: If there is no debit or no credit leg, any amount
            is not positive, or a declared exchange rate is not positive
    """
    if not any(e.entry_type == EntryType.DEBIT for e in entries):
        raise ValidationError("Transaction needs at least one debit entry")
    if not any(e.entry_type == EntryType.CREDIT for e in entries):
        raise ValidationError("Transaction needs at least one credit entry")
    for entry in entries:
        if to_minor_units(entry.amount) <= 0:
            raise ValidationError(amount_not_positive(entry.amount))
        if entry.exchange_rate is not None and entry.exchange_rate <= 0:
            raise ValidationError(f"Exchange rate must be positive, got {entry.exchange_rate}")


class DoubleEntryValidator:
    """Checks that debits equal credits, valuating foreign legs when needed."""

    def __init__(self, currency_service: CurrencyService):
        self.currency_service = currency_service

    def check(
        self,
        entries: Sequence[EntryLine],
        accounts: Mapping[int, Account],
        on_date: date,
    ) -> BalanceCheck:
        """Compare debit and credit totals within BALANCE_TOLERANCE.

        Args:
            entries: Candidate entries, in posting order
            accounts: Every referenced account by ID
            on_date: Transaction date used for rate lookups

        Returns:
            BalanceCheck with the valuated totals

        Raises:
            RateUnavailableError: If a foreign leg cannot be valuated
        """
        currencies = {accounts[e.account_id].currency for e in entries}
        base = accounts[entries[0].account_id].currency

        if len(currencies) == 1:
            debits = sum((e.debit_amount for e in entries), Decimal("0"))
            credits = sum((e.credit_amount for e in entries), Decimal("0"))
        else:
            debits = Decimal("0")
            credits = Decimal("0")
            for entry in entries:
                value = self._valuate(entry, accounts[entry.account_id].currency, base, on_date)
                if entry.entry_type == EntryType.DEBIT:
                    debits += value
                else:
                    credits += value

        return BalanceCheck(
            is_balanced=abs(debits - credits) <= BALANCE_TOLERANCE,
            total_debits=debits,
            total_credits=credits,
            valuation_currency=base,
        )

    def _valuate(self, entry: EntryLine, currency: str, base: str, on_date: date) -> Decimal:
        """Express an entry amount in the valuation currency."""
        if currency == base:
            return entry.amount

        declared = entry.original_currency.upper() if entry.original_currency else None
        if entry.exchange_rate and declared == base:
            # The leg states what it is worth in the base currency; trust it.
            if entry.original_amount is not None:
                return entry.original_amount
            return entry.amount / entry.exchange_rate

        return self.currency_service.convert(entry.amount, currency, base, on_date).converted_amount
