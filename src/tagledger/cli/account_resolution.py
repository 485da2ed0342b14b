"""CLI helpers for account and tag resolution."""

from __future__ import annotations

import click
from tagledger.cli.error_handling import handle_domain_error
from tagledger.domain.account import AccountService
from tagledger.domain.errors import NotFoundError
from tagledger.domain.tag import TagService
from tagledger.utils.resolvers import resolve_account, resolve_tag


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, account)
    except NotFoundError as exc:
        handle_domain_error(ctx, exc)


def resolve_tag_or_exit(ctx: click.Context, tag_service: TagService, tag: str | int) -> int:
    """Resolve tag name or ID, or exit with a CLI error."""
    try:
        return resolve_tag(tag_service, tag)
    except NotFoundError as exc:
        handle_domain_error(ctx, exc)
