"""Currency domain service: exchange rate resolution and conversion."""

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, Sequence, Union

from tagledger.database.base import Database
from tagledger.domain.entities import ConversionResult
from tagledger.domain.errors import RateUnavailableError, rate_unavailable
from tagledger.rates.source import RateSource, RateSourceError

logger = logging.getLogger(__name__)

# Cached rates keep ten decimal places, so every caller sees the stored value.
RATE_QUANTUM = Decimal("1E-10")

# Fallback when no source can list currencies (LKR first as default)
FALLBACK_CURRENCIES = [
    "LKR",
    "USD",
    "EUR",
    "GBP",
    "JPY",
    "AUD",
    "CAD",
    "CHF",
    "CNY",
    "SEK",
    "NZD",
    "MXN",
    "SGD",
    "HKD",
    "NOK",
    "TRY",
    "ZAR",
    "BRL",
    "INR",
    "KRW",
    "THB",
]

CURRENCY_INFO = {
    "LKR": {"symbol": "Rs.", "name": "Sri Lankan Rupee"},
    "USD": {"symbol": "$", "name": "US Dollar"},
    "EUR": {"symbol": "€", "name": "Euro"},
    "GBP": {"symbol": "£", "name": "British Pound"},
    "JPY": {"symbol": "¥", "name": "Japanese Yen"},
    "AUD": {"symbol": "A$", "name": "Australian Dollar"},
    "CAD": {"symbol": "C$", "name": "Canadian Dollar"},
    "CHF": {"symbol": "CHF", "name": "Swiss Franc"},
    "CNY": {"symbol": "¥", "name": "Chinese Yuan"},
    "INR": {"symbol": "₹", "name": "Indian Rupee"},
    "BRL": {"symbol": "R$", "name": "Brazilian Real"},
    "KRW": {"symbol": "₩", "name": "South Korean Won"},
    "THB": {"symbol": "฿", "name": "Thai Baht"},
}

DateLike = Union[date, datetime, None]


def format_amount(amount: Decimal, currency: str) -> str:
    """Format an amount with its currency symbol (or code when unknown)."""
    info = CURRENCY_INFO.get(currency.upper())
    symbol = info["symbol"] if info else currency.upper()
    return f"{symbol} {amount:,.2f}"


def usable_rate(rate: Optional[Decimal]) -> Optional[Decimal]:
    """Quantize a quoted rate to RATE_QUANTUM.

    Returns None when the quote is missing, out of range or rounds to zero.
    """
    if rate is None:
        return None
    try:
        rate = rate.quantize(RATE_QUANTUM)
    except InvalidOperation:
        return None
    return rate if rate > 0 else None


class CurrencyService:
    """Resolves, caches and applies exchange rates.

    Rates are looked up in the ledger store first, keyed by currency pair and
    calendar day. On a miss the sources are tried in order and the first
    usable answer is cached.
    """

    def __init__(
        self,
        db: Database,
        sources: Sequence[RateSource],
        today: Callable[[], date] = date.today,
    ):
        """Initialize currency service.

        Args:
            db: Database instance
            sources: Rate sources in fallback order, primary first
            today: Clock used when no date is given
        """
        self.db = db
        self.sources = list(sources)
        self._today = today

    def _day(self, on_date: DateLike) -> date:
        if on_date is None:
            return self._today()
        if isinstance(on_date, datetime):
            return on_date.date()
        return on_date

    def _fetch_table(self, base: str) -> dict[str, Decimal]:
        """Return the first rate table any source delivers for base."""
        for source in self.sources:
            try:
                return source.fetch_rates(base)
            except RateSourceError as e:
                logger.warning(f"Rate source {source.base_url} failed for {base}: {e}")
        raise RateUnavailableError(f"Failed to fetch exchange rates for {base}")

    def _fetch_rate(self, from_currency: str, to_currency: str) -> Decimal:
        for source in self.sources:
            try:
                table = source.fetch_rates(from_currency)
            except RateSourceError as e:
                logger.warning(f"Rate source {source.base_url} failed for {from_currency}: {e}")
                continue
            rate = usable_rate(table.get(to_currency))
            if rate is not None:
                return rate
            logger.warning(
                f"Rate source {source.base_url} has no usable {from_currency}->{to_currency} rate"
            )
        raise RateUnavailableError(rate_unavailable(from_currency, to_currency))

    def get_rate(self, from_currency: str, to_currency: str, on_date: DateLike = None) -> Decimal:
        """Get the exchange rate for a currency pair on a given day.

        Args:
            from_currency: Source currency code
            to_currency: Target currency code
            on_date: Day of the quote (defaults to today)

        Returns:
            Units of to_currency per unit of from_currency

        Raises:
            RateUnavailableError: If no source can supply the rate
        """
        source = from_currency.upper()
        target = to_currency.upper()
        if source == target:
            return Decimal("1")

        day = self._day(on_date)
        cached = self.db.get_exchange_rate(source, target, day)
        if cached is not None and cached.rate > 0:
            return cached.rate

        if cached is not None:
            logger.warning(
                f"Replacing unusable cached rate {source}->{target} on {day}: {cached.rate}"
            )
            rate = self._fetch_rate(source, target)
            self.db.upsert_exchange_rate(source, target, day, rate)
            return rate

        logger.info(f"Exchange rate cache miss for {source}->{target} on {day}")
        rate = self._fetch_rate(source, target)
        if not self.db.add_exchange_rate(source, target, day, rate):
            # Another resolver stored the same key first; use its value.
            existing = self.db.get_exchange_rate(source, target, day)
            if existing is not None:
                return existing.rate
        return rate

    def convert(
        self, amount: Decimal, from_currency: str, to_currency: str, on_date: DateLike = None
    ) -> ConversionResult:
        """Convert an amount between currencies.

        Raises:
            RateUnavailableError: If no rate can be resolved
        """
        day = self._day(on_date)
        rate = self.get_rate(from_currency, to_currency, day)
        return ConversionResult(
            original_amount=amount,
            converted_amount=amount * rate,
            from_currency=from_currency.upper(),
            to_currency=to_currency.upper(),
            exchange_rate=rate,
            date=day,
        )

    def list_supported_currencies(self) -> list[str]:
        """List supported currency codes, falling back to a static list."""
        for source in self.sources:
            try:
                return source.fetch_currencies()
            except RateSourceError as e:
                logger.warning(f"Failed to fetch supported currencies from {source.base_url}: {e}")
        return list(FALLBACK_CURRENCIES)

    def bulk_refresh(self, base: str = "LKR") -> int:
        """Fetch a full rate table for base and overwrite today's rates.

        Returns:
            Number of rates stored

        Raises:
            RateUnavailableError: If no source can supply the table
        """
        base = base.upper()
        table = self._fetch_table(base)
        day = self._today()
        count = 0
        with self.db.atomic():
            for target, quote in sorted(table.items()):
                rate = usable_rate(quote)
                if target == base or rate is None:
                    continue
                self.db.upsert_exchange_rate(base, target, day, rate)
                count += 1
        logger.info(f"Refreshed {count} exchange rates for {base} on {day}")
        return count
