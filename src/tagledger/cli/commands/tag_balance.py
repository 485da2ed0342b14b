"""Tag balance allocation commands."""

import click
from tagledger.cli.account_resolution import resolve_account_or_exit, resolve_tag_or_exit
from tagledger.cli.error_handling import handle_domain_error
from tagledger.domain.account import AccountService
from tagledger.domain.currency import format_amount
from tagledger.domain.tag import TagService
from tagledger.domain.tag_balance import TagBalanceService
from tagledger.utils.amount_parser import parse_positive_amount


def _resolve_pair(ctx, tag: str, account: str) -> tuple[int, int]:
    db = ctx.obj["db"]
    tag_id = resolve_tag_or_exit(ctx, TagService(db), tag)
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    return tag_id, account_id


def _parse(ctx, amount: str):
    try:
        return parse_positive_amount(amount)
    except ValueError as e:
        handle_domain_error(ctx, e)


@click.group()
def tag_balance_group():
    """Earmark account funds for tags."""
    pass


@tag_balance_group.command("show")
@click.argument("tag", metavar="TAG")
@click.option("--account", help="Only the balance held in this account (name or ID)")
@click.option("--currency", help="Only balances in this currency")
@click.pass_context
def show_tag_balance(ctx, tag: str, account: str | None, currency: str | None):
    """Show how much is allocated to a tag.

    Without --currency, balances are listed per currency.
    """
    db = ctx.obj["db"]
    service = TagBalanceService(db)
    account_service = AccountService(db)
    tag_id = resolve_tag_or_exit(ctx, TagService(db), tag)

    try:
        if account is not None:
            account_id = resolve_account_or_exit(ctx, account_service, account)
            totals = [service.get_tag_balance_in_account(tag_id, account_id)]
        elif currency is not None:
            totals = [service.get_tag_balance(tag_id, currency)]
        else:
            totals = service.get_tag_balances_by_currency(tag_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not totals:
        click.echo("No balances assigned to this tag.")
        return

    for total in totals:
        click.echo(f"\n{total.currency}: {format_amount(total.balance, total.currency)}")
        for row in total.balances:
            acc = account_service.get_account(row.account_id)
            name = acc.name if acc else str(row.account_id)
            click.echo(f"  {name:30s} {format_amount(row.balance, row.currency):>20s}")


@tag_balance_group.command("assign")
@click.argument("tag", metavar="TAG")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount")
@click.pass_context
def assign_tag_balance(ctx, tag: str, account: str, amount: str):
    """Assign AMOUNT of ACCOUNT's balance to TAG.

    Examples:
        tagledger tag-balance assign Vacation Bank 10000
    """
    service = TagBalanceService(ctx.obj["db"])
    value = _parse(ctx, amount)
    tag_id, account_id = _resolve_pair(ctx, tag, account)

    try:
        row = service.assign(tag_id, account_id, value)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Assigned {format_amount(value, row.currency)}; "
        f"tag balance is now {format_amount(row.balance, row.currency)}"
    )


@tag_balance_group.command("remove")
@click.argument("tag", metavar="TAG")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount")
@click.pass_context
def remove_tag_balance(ctx, tag: str, account: str, amount: str):
    """Release AMOUNT of TAG's allocation in ACCOUNT."""
    service = TagBalanceService(ctx.obj["db"])
    value = _parse(ctx, amount)
    tag_id, account_id = _resolve_pair(ctx, tag, account)

    try:
        row = service.remove(tag_id, account_id, value)
    except ValueError as e:
        handle_domain_error(ctx, e)
    if row is None:
        click.echo(f"Removed {value:,.2f}; tag balance cleared")
    else:
        click.echo(
            f"Removed {format_amount(value, row.currency)}; "
            f"tag balance is now {format_amount(row.balance, row.currency)}"
        )


@tag_balance_group.command("validate")
@click.argument("tag", metavar="TAG")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def validate_tag_balance(ctx, tag: str, account: str):
    """Check that ACCOUNT's tag allocations fit inside its balance.

    Exits with status 1 when the account is over-allocated.
    """
    db = ctx.obj["db"]
    service = TagBalanceService(db)
    tag_id, account_id = _resolve_pair(ctx, tag, account)
    currency = AccountService(db).require_account(account_id).currency

    result = service.validate(tag_id, account_id)
    click.echo(f"Account balance:    {format_amount(result.account_balance, currency)}")
    click.echo(f"Total tag balances: {format_amount(result.total_tag_balances, currency)}")
    click.echo(f"Available:          {format_amount(result.available_balance, currency)}")
    if result.is_valid:
        click.echo("Tag balances are within the account balance.")
    else:
        click.echo("Error: Tag balances exceed the account balance.", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register tag balance commands with main CLI."""
    cli.add_command(tag_balance_group, name="tag-balance")
