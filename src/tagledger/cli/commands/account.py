"""Account management commands."""

from decimal import Decimal

import click
from tagledger.cli.account_resolution import resolve_account_or_exit
from tagledger.cli.error_handling import handle_domain_error
from tagledger.domain.account import AccountService
from tagledger.domain.currency import format_amount
from tagledger.domain.entities import AccountType
from tagledger.domain.tag import TagService
from tagledger.domain.tag_balance import TagBalanceService
from tagledger.domain.transaction import TransactionService
from tagledger.utils.amount_parser import parse_amount

ACCOUNT_TYPES = [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    required=True,
    help="Account type",
)
@click.option("--currency", default="LKR", show_default=True, help="Currency code of the account")
@click.option("--balance", default="0", help="Opening balance")
@click.option("--description", help="Account description")
@click.pass_context
def create_account(
    ctx, name: str, account_type: str, currency: str, balance: str, description: str | None
):
    """Create a new account.

    Examples:
        tagledger account create "Bank" --type asset --balance 50000
        tagledger account create "Salary" --type income
        tagledger account create "USD Wallet" --type asset --currency USD
    """
    service = AccountService(ctx.obj["db"])

    try:
        opening = parse_amount(balance)
        account_id = service.create_account(
            name=name,
            account_type=AccountType(account_type.upper()),
            currency=currency,
            description=description,
            balance=opening,
        )
        account = service.get_account(account_id)
        click.echo(
            f"Created {account.type.value.lower()} account '{name}' (ID: {account_id}) "
            f"with balance {format_amount(account.balance, account.currency)}"
        )
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="Only list accounts of this type",
)
@click.pass_context
def list_accounts(ctx, account_type: str | None):
    """List all accounts."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts(AccountType(account_type.upper()) if account_type else None)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 72)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.type.value:9s} | "
            f"{format_amount(acc.balance, acc.currency):>20s}"
        )


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str):
    """Show an account with its tag allocations.

    ACCOUNT can be an account name or ID.
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    tag_service = TagService(db)
    tag_balance_service = TagBalanceService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account)
    acc = account_service.require_account(account_id)

    click.echo(f"\nAccount: {acc.name} (ID: {acc.id})")
    click.echo(f"Type: {acc.type.value}")
    click.echo(f"Currency: {acc.currency}")
    click.echo(f"Balance: {format_amount(acc.balance, acc.currency)}")
    if acc.description:
        click.echo(f"Description: {acc.description}")

    allocations = tag_balance_service.get_account_tag_balances(account_id)
    if not allocations:
        return

    click.echo("\nTag balances:")
    click.echo("-" * 60)
    allocated = Decimal("0")
    for row in allocations:
        tag = tag_service.get_tag(row.tag_id)
        tag_name = tag.name if tag else str(row.tag_id)
        click.echo(f"  {tag_name:30s} {format_amount(row.balance, row.currency):>20s}")
        if row.currency == acc.currency:
            allocated += row.balance
    click.echo("-" * 60)
    click.echo(f"  {'Available':30s} {format_amount(acc.balance - allocated, acc.currency):>20s}")


@account_group.command("verify")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def verify_account(ctx, account: str):
    """Recompute an account balance from its ledger entries.

    Exits with status 1 when the stored balance disagrees with the entries.
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    transaction_service = TransactionService(db, ctx.obj["currency"])

    account_id = resolve_account_or_exit(ctx, account_service, account)
    acc = account_service.require_account(account_id)

    result = transaction_service.verify_account_balance(account_id)
    click.echo(f"Recorded balance: {format_amount(result.recorded_balance, acc.currency)}")
    click.echo(f"Computed balance: {format_amount(result.computed_balance, acc.currency)}")
    if result.is_consistent:
        click.echo(f"Account '{acc.name}' is consistent.")
    else:
        click.echo(f"Error: Account '{acc.name}' balance does not match its entries.", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
