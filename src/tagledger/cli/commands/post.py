"""Posting commands for income, expense and transfer transactions."""

import click
from tagledger.cli.account_resolution import resolve_account_or_exit, resolve_tag_or_exit
from tagledger.cli.error_handling import handle_domain_error
from tagledger.domain.account import AccountService
from tagledger.domain.entities import PostedTransaction
from tagledger.domain.tag import TagService
from tagledger.domain.transaction import TransactionService
from tagledger.utils.amount_parser import parse_positive_amount
from tagledger.utils.date_parser import parse_date

DATE_HELP = "Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday'). Defaults to today."


def _parse_inputs(ctx, amount: str, date_str: str | None):
    try:
        value = parse_positive_amount(amount)
        on_date = parse_date(date_str) if date_str else None
    except ValueError as e:
        handle_domain_error(ctx, e)
    return value, on_date


def _resolve_tag(ctx, tag: str | None) -> int | None:
    if tag is None:
        return None
    return resolve_tag_or_exit(ctx, TagService(ctx.obj["db"]), tag)


def _echo_posted(account_service: AccountService, posted: PostedTransaction) -> None:
    txn = posted.transaction
    click.echo(
        f"Posted {txn.transaction_type.value.lower()} transaction {txn.id}: "
        f"{txn.description} ({txn.amount:,.2f}) on {txn.date}"
    )
    for entry in posted.entries:
        account = account_service.get_account(entry.account_id)
        name = account.name if account else str(entry.account_id)
        click.echo(f"  {entry.entry_type.value:6s} {name:25s} {entry.amount:>14,.2f}")


@click.group()
def post_group():
    """Post ledger transactions."""
    pass


@post_group.command("income")
@click.argument("description")
@click.argument("amount")
@click.option("--account", required=True, help="Asset account receiving the money (name or ID)")
@click.option("--income", "income_account", required=True, help="Income account (name or ID)")
@click.option("--date", "date_str", help=DATE_HELP)
@click.option("--tag", help="Assign the income to this tag (name or ID)")
@click.pass_context
def post_income(
    ctx,
    description: str,
    amount: str,
    account: str,
    income_account: str,
    date_str: str | None,
    tag: str | None,
):
    """Record income into an asset account.

    Examples:
        tagledger post income "January salary" 100000 --account Bank --income Salary
        tagledger post income "Bonus" 20000 --account Bank --income Salary --tag Vacation
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    service = TransactionService(db, ctx.obj["currency"])

    value, on_date = _parse_inputs(ctx, amount, date_str)
    asset_id = resolve_account_or_exit(ctx, account_service, account)
    income_id = resolve_account_or_exit(ctx, account_service, income_account)
    tag_id = _resolve_tag(ctx, tag)

    try:
        if tag_id is None:
            posted = service.create_income_transaction(
                description, value, asset_id, income_id, on_date=on_date
            )
        else:
            posted = service.create_tagged_income_transaction(
                description, value, tag_id, asset_id, income_id, on_date=on_date
            )
    except ValueError as e:
        handle_domain_error(ctx, e)
    _echo_posted(account_service, posted)


@post_group.command("expense")
@click.argument("description")
@click.argument("amount")
@click.option("--account", required=True, help="Asset account paying (name or ID)")
@click.option("--expense", "expense_account", required=True, help="Expense account (name or ID)")
@click.option("--date", "date_str", help=DATE_HELP)
@click.option("--tag", help="Draw the expense from this tag (name or ID)")
@click.pass_context
def post_expense(
    ctx,
    description: str,
    amount: str,
    account: str,
    expense_account: str,
    date_str: str | None,
    tag: str | None,
):
    """Record an expense paid from an asset account.

    Examples:
        tagledger post expense "Groceries" 5000 --account Bank --expense Food
        tagledger post expense "Hotel" 30000 --account Bank --expense Travel --tag Vacation
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    service = TransactionService(db, ctx.obj["currency"])

    value, on_date = _parse_inputs(ctx, amount, date_str)
    asset_id = resolve_account_or_exit(ctx, account_service, account)
    expense_id = resolve_account_or_exit(ctx, account_service, expense_account)
    tag_id = _resolve_tag(ctx, tag)

    try:
        if tag_id is None:
            posted = service.create_expense_transaction(
                description, value, expense_id, asset_id, on_date=on_date
            )
        else:
            posted = service.create_tagged_expense_transaction(
                description, value, tag_id, expense_id, asset_id, on_date=on_date
            )
    except ValueError as e:
        handle_domain_error(ctx, e)
    _echo_posted(account_service, posted)


@post_group.command("transfer")
@click.argument("description")
@click.argument("amount")
@click.option("--from", "from_account", required=True, help="Source account (name or ID)")
@click.option("--to", "to_account", required=True, help="Destination account (name or ID)")
@click.option("--rate", help="Exchange rate to use instead of looking one up")
@click.option("--from-currency", help="Source currency (defaults to the source account's)")
@click.option("--to-currency", help="Destination currency (defaults to the destination account's)")
@click.option("--date", "date_str", help=DATE_HELP)
@click.option("--tag", help="Assign the received amount to this tag (name or ID)")
@click.pass_context
def post_transfer(
    ctx,
    description: str,
    amount: str,
    from_account: str,
    to_account: str,
    rate: str | None,
    from_currency: str | None,
    to_currency: str | None,
    date_str: str | None,
    tag: str | None,
):
    """Move money between accounts, converting currency when they differ.

    AMOUNT is in the source account currency.

    Examples:
        tagledger post transfer "Savings" 10000 --from Bank --to Savings
        tagledger post transfer "Travel money" 100 --from "USD Wallet" --to Bank --rate 300
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    service = TransactionService(db, ctx.obj["currency"])

    value, on_date = _parse_inputs(ctx, amount, date_str)
    exchange_rate = None
    if rate is not None:
        exchange_rate, _ = _parse_inputs(ctx, rate, None)
    from_id = resolve_account_or_exit(ctx, account_service, from_account)
    to_id = resolve_account_or_exit(ctx, account_service, to_account)
    tag_id = _resolve_tag(ctx, tag)

    options = {
        "on_date": on_date,
        "from_currency": from_currency,
        "to_currency": to_currency,
        "exchange_rate": exchange_rate,
    }
    try:
        if tag_id is None:
            posted = service.create_transfer_transaction(description, value, from_id, to_id, **options)
        else:
            posted = service.create_tagged_transfer_transaction(
                description, value, tag_id, from_id, to_id, **options
            )
    except ValueError as e:
        handle_domain_error(ctx, e)
    _echo_posted(account_service, posted)


def register_commands(cli):
    """Register posting commands with main CLI."""
    cli.add_command(post_group, name="post")
