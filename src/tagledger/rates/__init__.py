"""Exchange rate sources for tagledger."""

from tagledger.rates.source import RateSource, RateSourceError
from tagledger.rates.factories import create_rate_sources

__all__ = ["RateSource", "RateSourceError", "create_rate_sources"]
