"""Shared pytest fixtures for tagledger tests."""

import json
import logging
import os
import tempfile
from datetime import date
from decimal import Decimal

import httpx
import pytest

from tagledger.database.factories import create_sqlite_database
from tagledger.domain.account import AccountService
from tagledger.domain.currency import CurrencyService
from tagledger.domain.entities import AccountType
from tagledger.domain.tag import TagService
from tagledger.domain.tag_balance import TagBalanceService
from tagledger.domain.transaction import TransactionService
from tagledger.rates.source import FALLBACK_API, PRIMARY_API, RateSource

TODAY = date(2024, 1, 15)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


class FakeRateApi:
    """In-memory stand-in for the currency-api mirrors.

    ``tables`` maps a mirror URL to ``{base: {target: rate}}``; a mirror that
    is listed in ``down`` answers every request with HTTP 503.
    """

    def __init__(self):
        self.tables = {
            PRIMARY_API: {
                "usd": {"usd": 1, "lkr": 300, "eur": 0.9},
                "lkr": {"lkr": 1, "usd": 0.0033333333, "eur": 0.003},
                "eur": {"eur": 1, "usd": 1.1, "lkr": 330},
            },
            FALLBACK_API: {
                "usd": {"usd": 1, "lkr": 310, "eur": 0.95},
            },
        }
        self.down: set[str] = set()
        self.requests: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        for mirror, tables in self.tables.items():
            if not url.startswith(mirror):
                continue
            if mirror in self.down:
                return httpx.Response(503, text="unavailable")
            if url == f"{mirror}.json":
                names = {code: code.upper() for code in tables}
                return httpx.Response(200, content=json.dumps(names))
            base = url[len(mirror) + 1 :].removesuffix(".json")
            if base not in tables:
                return httpx.Response(404, text="not found")
            body = {"date": TODAY.isoformat(), base: tables[base]}
            return httpx.Response(200, content=json.dumps(body))
        return httpx.Response(404, text="not found")


@pytest.fixture
def rate_api():
    """Fake rate mirrors; tweak tables or mark mirrors down per test."""
    return FakeRateApi()


@pytest.fixture
def rate_sources(rate_api):
    """Primary and fallback sources backed by a mock transport."""
    client = httpx.Client(transport=httpx.MockTransport(rate_api.handler))
    yield [RateSource(PRIMARY_API, client=client), RateSource(FALLBACK_API, client=client)]
    client.close()


@pytest.fixture
def currency_service(temp_db, rate_sources):
    """Create a CurrencyService pinned to a fixed day."""
    return CurrencyService(temp_db, rate_sources, today=lambda: TODAY)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def tag_service(temp_db):
    """Create a TagService with a temporary database."""
    return TagService(temp_db)


@pytest.fixture
def tag_balance_service(temp_db):
    """Create a TagBalanceService with a temporary database."""
    return TagBalanceService(temp_db)


@pytest.fixture
def transaction_service(temp_db, currency_service):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db, currency_service)


@pytest.fixture
def accounts(account_service):
    """Create a small chart of accounts and return their IDs by name."""
    specs = [
        ("Checking", AccountType.ASSET, "LKR", Decimal("10000")),
        ("Savings", AccountType.ASSET, "LKR", Decimal("0")),
        ("USD Wallet", AccountType.ASSET, "USD", Decimal("1000")),
        ("Salary", AccountType.INCOME, "LKR", Decimal("0")),
        ("Groceries", AccountType.EXPENSE, "LKR", Decimal("0")),
        ("Credit Card", AccountType.LIABILITY, "LKR", Decimal("0")),
    ]
    return {
        name: account_service.create_account(
            name=name, account_type=account_type, currency=currency, balance=balance
        )
        for name, account_type, currency, balance in specs
    }


@pytest.fixture
def vehicle_tag(tag_service):
    """Create a sample tag and return its ID."""
    return tag_service.create_tag(name="Vehicle", description="Car fund")


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner.

    The CLI installs a stderr log handler on every run; restore the root
    logger afterwards so it does not outlive the captured stream.
    """
    from click.testing import CliRunner

    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield CliRunner()
    root.setLevel(level)
    root.handlers[:] = handlers


@pytest.fixture
def run_cli(cli_runner, temp_db, rate_sources):
    """Invoke the CLI against the temporary database and mock rate sources."""
    from tagledger.cli.main import cli

    def run(*args):
        return cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, *args],
            obj={"rate_sources": rate_sources},
        )

    return run
