"""Utility functions for tagledger."""

from tagledger.utils.date_parser import parse_date
from tagledger.utils.amount_parser import parse_amount, parse_positive_amount

__all__ = ["parse_date", "parse_amount", "parse_positive_amount"]
