"""HTTP exchange rate source.

Talks to the free currency-api mirrors. Every mirror serves the same shape:

    GET {base_url}/{base}.json  ->  {"date": "2025-01-01", "usd": {"lkr": 298.5, ...}}
    GET {base_url}.json         ->  {"usd": "US Dollar", "lkr": "Sri Lankan Rupee", ...}
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

PRIMARY_API = "https://cdn.jsdelivr.net/npm/@fawazahmed0/currency-api@latest/v1/currencies"
FALLBACK_API = "https://latest.currency-api.pages.dev/v1/currencies"
DEFAULT_SOURCES = (PRIMARY_API, FALLBACK_API)
DEFAULT_TIMEOUT = 10.0


class RateSourceError(Exception):
    """A rate source could not deliver a usable response."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class RateSource:
    """One currency-api mirror.

    Args:
        base_url: Mirror URL up to and including ``/currencies``
        client: Optional shared ``httpx.Client`` (tests pass one with a mock transport)
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def __repr__(self) -> str:
        return f"RateSource({self.base_url!r})"

    def _ensure_client(self) -> httpx.Client:
        """HTTP client (lazy init)."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout)
        return self._client

    def close(self) -> None:
        """Close the HTTP client if this source created it."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def _get_json(self, url: str) -> Any:
        client = self._ensure_client()
        try:
            response = client.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Rate source HTTP error: {e.response.status_code} for {url}")
            raise RateSourceError(str(e), source=self.base_url) from e
        except httpx.RequestError as e:
            logger.warning(f"Rate source request error: {e!r} for {url}")
            raise RateSourceError(str(e), source=self.base_url) from e
        except ValueError as e:
            logger.warning(f"Rate source returned invalid JSON for {url}")
            raise RateSourceError(f"Invalid JSON from {url}", source=self.base_url) from e

    def fetch_rates(self, base: str) -> dict[str, Decimal]:
        """Fetch the rate table for ``base``.

        Returns:
            Mapping of upper-case currency code to the amount of that currency
            one unit of ``base`` buys. Non-numeric and non-positive quotes
            are left out.

        Raises:
            RateSourceError: On transport failure or a malformed body
        """
        code = base.lower()
        data = self._get_json(f"{self.base_url}/{code}.json")
        table = data.get(code) if isinstance(data, dict) else None
        if not isinstance(table, dict):
            raise RateSourceError(f"No rate table for {base.upper()}", source=self.base_url)

        rates: dict[str, Decimal] = {}
        for currency, value in table.items():
            try:
                rate = Decimal(str(value))
            except (InvalidOperation, ValueError):
                logger.debug(f"Skipping non-numeric rate {currency}={value!r}")
                continue
            if not rate.is_finite() or rate <= 0:
                logger.debug(f"Skipping non-positive rate {currency}={value!r}")
                continue
            rates[currency.upper()] = rate
        return rates

    def fetch_currencies(self) -> list[str]:
        """Fetch the list of currency codes the source knows about."""
        data = self._get_json(f"{self.base_url}.json")
        if not isinstance(data, dict):
            raise RateSourceError("Malformed currency list", source=self.base_url)
        return sorted(code.upper() for code in data)
