"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class UnbalancedEntryError(ValidationError):
    """Valuated debits and credits of a transaction do not match."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class AccountNotFoundError(NotFoundError):
    """Referenced account does not exist."""


class TagNotFoundError(NotFoundError):
    """Referenced tag does not exist."""


class TagBalanceNotFoundError(NotFoundError):
    """No tag balance exists for the tag and account."""


class TransactionNotFoundError(NotFoundError):
    """Referenced transaction does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class RateUnavailableError(DomainError):
    """No exchange rate could be resolved from the cache or any provider."""


class ExceedsAccountBalanceError(DomainError):
    """A tag allocation would exceed the backing account balance."""


class InsufficientTagBalanceError(DomainError):
    """A removal asks for more than the tag balance holds."""


class StoreError(DomainError):
    """The ledger store failed; wraps the underlying driver error."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def tag_not_found(tag_id: int) -> str:
    """Return message for missing tag."""
    return f"Tag {tag_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def tag_balance_not_found(tag_id: int, account_id: int) -> str:
    """Return message for missing tag balance."""
    return f"No balance for tag {tag_id} in account {account_id}"


def rate_unavailable(from_currency: str, to_currency: str) -> str:
    """Return message for an unresolvable exchange rate."""
    return f"Exchange rate not found for {from_currency} to {to_currency}"


def unbalanced_entry(total_debits: Decimal, total_credits: Decimal, currency: str) -> str:
    """Return message for a transaction whose legs do not balance."""
    return (
        f"Total debits must equal total credits "
        f"(debits {total_debits} {currency}, credits {total_credits} {currency})"
    )


def exceeds_account_balance(prospective: Decimal, account_balance: Decimal) -> str:
    """Return message when a tag allocation outgrows its account."""
    return (
        f"Tag balance ({prospective}) would exceed account balance ({account_balance})"
    )


def insufficient_tag_balance(requested: Decimal, available: Decimal) -> str:
    """Return message when removing more than a tag holds."""
    return f"Insufficient tag balance: requested {requested}, available {available}"


def amount_not_positive(amount: Decimal) -> str:
    """Return message for a zero or negative amount."""
    return f"Amount must be positive, got {amount}"
