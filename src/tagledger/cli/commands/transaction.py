"""Transaction query commands."""

import click
from tagledger.cli.account_resolution import resolve_account_or_exit, resolve_tag_or_exit
from tagledger.cli.date_filters import period_options, resolve_cli_date_range
from tagledger.cli.error_handling import handle_domain_error
from tagledger.domain.account import AccountService
from tagledger.domain.tag import TagService
from tagledger.domain.transaction import TransactionService


@click.group()
def transaction_group():
    """Inspect posted transactions."""
    pass


@transaction_group.command("list")
@click.option("--account", help="Only transactions touching this account (name or ID)")
@click.option("--tag", help="Only transactions with this tag (name or ID)")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative)")
@period_options
@click.option("--page", default=1, show_default=True, type=int, help="Page number")
@click.option("--page-size", default=10, show_default=True, type=int, help="Transactions per page")
@click.pass_context
def list_transactions(
    ctx,
    account: str | None,
    tag: str | None,
    start_date: str | None,
    end_date: str | None,
    page: int,
    page_size: int,
    **period_flags: bool,
):
    """List transactions, newest first.

    Examples:
        tagledger transaction list
        tagledger transaction list --account Bank --this-month
        tagledger transaction list --tag Vacation --page 2
    """
    db = ctx.obj["db"]
    service = TransactionService(db, ctx.obj["currency"])

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    account_id = resolve_account_or_exit(ctx, AccountService(db), account) if account else None
    tag_id = resolve_tag_or_exit(ctx, TagService(db), tag) if tag else None

    try:
        result = service.list_transactions(
            page=page,
            page_size=page_size,
            account_id=account_id,
            tag_id=tag_id,
            start_date=start,
            end_date=end,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not result.items:
        click.echo("No transactions found.")
        return

    click.echo(f"\nTransactions (page {result.page} of {result.total_pages}, {result.total} total):")
    click.echo("-" * 80)
    for txn in result.items:
        click.echo(
            f"ID: {txn.id:4d} | {txn.date} | {txn.transaction_type.value:8s} | "
            f"{txn.description[:30]:30s} | {txn.amount:>12,.2f}"
        )


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int):
    """Show a transaction with its debit and credit entries."""
    db = ctx.obj["db"]
    service = TransactionService(db, ctx.obj["currency"])
    account_service = AccountService(db)

    try:
        posted = service.get_posted_transaction(transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    txn = posted.transaction
    click.echo(f"\nTransaction {txn.id}: {txn.description}")
    click.echo(f"Type: {txn.transaction_type.value}")
    click.echo(f"Date: {txn.date}")
    click.echo(f"Amount: {txn.amount:,.2f}")
    if txn.tag_id is not None:
        tag = TagService(db).get_tag(txn.tag_id)
        click.echo(f"Tag: {tag.name if tag else txn.tag_id}")

    click.echo("\nEntries:")
    click.echo("-" * 80)
    for entry in posted.entries:
        account = account_service.get_account(entry.account_id)
        name = account.name if account else str(entry.account_id)
        line = f"  {entry.entry_type.value:6s} {name:25s} {entry.amount:>14,.2f}"
        if entry.original_currency is not None:
            line += f"  ({entry.original_amount:,.2f} {entry.original_currency} @ {entry.exchange_rate})"
        click.echo(line)


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
