"""Utilities for resolving account and tag names to IDs."""

from tagledger.domain.account import AccountService
from tagledger.domain.errors import AccountNotFoundError, TagNotFoundError
from tagledger.domain.tag import TagService


def _as_id(value: str | int) -> int | None:
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve account name or ID to account ID.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        AccountNotFoundError: If account is not found
    """
    account_id = _as_id(account)
    if account_id is not None:
        if account_service.get_account(account_id) is None:
            raise AccountNotFoundError(f"Account ID {account_id} not found")
        return account_id

    account_obj = account_service.get_account_by_name(account)
    if account_obj is None:
        raise AccountNotFoundError(f"Account '{account}' not found")
    return account_obj.id


def resolve_tag(tag_service: TagService, tag: str | int) -> int:
    """Resolve tag name or ID to tag ID.

    Raises:
        TagNotFoundError: If tag is not found
    """
    tag_id = _as_id(tag)
    if tag_id is not None:
        if tag_service.get_tag(tag_id) is None:
            raise TagNotFoundError(f"Tag ID {tag_id} not found")
        return tag_id

    tag_obj = tag_service.get_tag_by_name(tag)
    if tag_obj is None:
        raise TagNotFoundError(f"Tag '{tag}' not found")
    return tag_obj.id
