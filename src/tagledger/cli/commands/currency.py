"""Currency and exchange rate commands."""

import click
from tagledger.cli.error_handling import handle_domain_error
from tagledger.domain.currency import CURRENCY_INFO, format_amount
from tagledger.utils.amount_parser import parse_amount
from tagledger.utils.date_parser import parse_date


def _parse_day(ctx, date_str: str | None):
    if date_str is None:
        return None
    try:
        return parse_date(date_str)
    except ValueError as e:
        handle_domain_error(ctx, e)


@click.group()
def currency_group():
    """Look up and refresh exchange rates."""
    pass


@currency_group.command("list")
@click.pass_context
def list_currencies(ctx):
    """List supported currency codes."""
    codes = ctx.obj["currency"].list_supported_currencies()
    click.echo(f"\nSupported currencies ({len(codes)}):")
    for code in codes:
        info = CURRENCY_INFO.get(code)
        click.echo(f"  {code}  {info['name']}" if info else f"  {code}")


@currency_group.command("rate")
@click.argument("from_currency")
@click.argument("to_currency")
@click.option("--date", "date_str", help="Day of the quote (defaults to today)")
@click.pass_context
def show_rate(ctx, from_currency: str, to_currency: str, date_str: str | None):
    """Show the exchange rate from FROM_CURRENCY to TO_CURRENCY.

    Examples:
        tagledger currency rate USD LKR
        tagledger currency rate EUR USD --date 2024-01-15
    """
    on_date = _parse_day(ctx, date_str)
    try:
        rate = ctx.obj["currency"].get_rate(from_currency, to_currency, on_date)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"1 {from_currency.upper()} = {rate.normalize():f} {to_currency.upper()}")


@currency_group.command("convert")
@click.argument("amount")
@click.argument("from_currency")
@click.argument("to_currency")
@click.option("--date", "date_str", help="Day of the quote (defaults to today)")
@click.pass_context
def convert_amount(ctx, amount: str, from_currency: str, to_currency: str, date_str: str | None):
    """Convert AMOUNT from FROM_CURRENCY to TO_CURRENCY."""
    on_date = _parse_day(ctx, date_str)
    try:
        result = ctx.obj["currency"].convert(parse_amount(amount), from_currency, to_currency, on_date)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"{format_amount(result.original_amount, result.from_currency)} = "
        f"{format_amount(result.converted_amount, result.to_currency)} "
        f"(rate {result.exchange_rate.normalize():f} on {result.date})"
    )


@currency_group.command("refresh")
@click.option("--base", default="LKR", show_default=True, help="Base currency of the rate table")
@click.pass_context
def refresh_rates(ctx, base: str):
    """Fetch today's full rate table for a base currency and store it."""
    try:
        count = ctx.obj["currency"].bulk_refresh(base)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Stored {count} exchange rates for {base.upper()}")


def register_commands(cli):
    """Register currency commands with main CLI."""
    cli.add_command(currency_group, name="currency")
