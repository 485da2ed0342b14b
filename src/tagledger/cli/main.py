"""Main CLI entry point."""

import logging

import click
from tagledger.database.factories import create_sqlite_database
from tagledger.domain.currency import CurrencyService
from tagledger.logging_config import setup_logging
from tagledger.rates.factories import create_rate_sources

# Import and register all commands at module level
from tagledger.cli.commands import (
    account,
    currency,
    post,
    tag,
    tag_balance,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides TAGLEDGER_DB_PATH environment variable)",
    envvar="TAGLEDGER_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress messages to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Tagledger - Double-entry ledger with tag budgets.

    Post income, expenses and multi-currency transfers between accounts and
    earmark account funds for tags.
    """
    ctx.ensure_object(dict)
    setup_logging(logging.INFO if verbose else None)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db

        # Tests may inject sources backed by a mock transport
        sources = ctx.obj.get("rate_sources")
        if sources is None:
            sources = create_rate_sources()
            ctx.call_on_close(lambda: [source.close() for source in sources])
        ctx.obj["currency"] = CurrencyService(db, sources)
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
tag.register_commands(cli)
post.register_commands(cli)
transaction.register_commands(cli)
tag_balance.register_commands(cli)
currency.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
