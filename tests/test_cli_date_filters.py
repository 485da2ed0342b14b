"""Tests for CLI date filter helper."""

from datetime import date

import click
import pytest

from tagledger.cli.date_filters import resolve_cli_date_range
from tagledger.utils.date_parser import get_date_range


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_resolve_cli_date_range_rejects_multiple_periods(capsys):
    period_flags = {"this_month": True, "last_month": True}

    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(_ctx(), start_date=None, end_date=None, period_flags=period_flags)

    assert excinfo.value.exit_code == 1
    assert "Only one period option" in capsys.readouterr().err


def test_resolve_cli_date_range_rejects_period_with_start_end(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(), start_date="2024-01-01", end_date=None, period_flags={"this_month": True}
        )

    assert excinfo.value.exit_code == 1
    assert "cannot be combined" in capsys.readouterr().err


def test_resolve_cli_date_range_returns_period_range():
    result = resolve_cli_date_range(
        _ctx(), start_date=None, end_date=None, period_flags={"last_year": True, "this_month": False}
    )

    assert result == get_date_range("last-year")


def test_resolve_cli_date_range_parses_explicit_dates():
    result = resolve_cli_date_range(
        _ctx(), start_date="2024-01-01", end_date="2024-01-31", period_flags={"this_month": False}
    )

    assert result == (date(2024, 1, 1), date(2024, 1, 31))


def test_resolve_cli_date_range_invalid_start(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_date_range(_ctx(), start_date="gibberish", end_date=None, period_flags={})

    assert "Invalid start date" in capsys.readouterr().err


def test_resolve_cli_date_range_without_filters():
    assert resolve_cli_date_range(_ctx(), start_date=None, end_date=None, period_flags={}) == (None, None)
