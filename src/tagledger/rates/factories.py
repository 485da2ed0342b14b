"""Rate source factory functions."""

import os
from typing import Optional, Sequence

import httpx

from tagledger.rates.source import DEFAULT_SOURCES, DEFAULT_TIMEOUT, RateSource


def create_rate_sources(
    urls: Optional[Sequence[str]] = None,
    timeout: Optional[float] = None,
    client: Optional[httpx.Client] = None,
) -> list[RateSource]:
    """Create the ordered list of rate sources, primary first.

    Args:
        urls: Mirror base URLs. If None, checks TAGLEDGER_RATE_SOURCES
            (comma-separated), then defaults to the public currency-api mirrors
        timeout: Request timeout in seconds. If None, checks TAGLEDGER_RATE_TIMEOUT,
            then defaults to 10 seconds
        client: Optional shared HTTP client

    Returns:
        List of RateSource instances in fallback order
    """
    if urls is None:
        env_urls = os.environ.get("TAGLEDGER_RATE_SOURCES")
        if env_urls:
            urls = [u.strip() for u in env_urls.split(",") if u.strip()]
        else:
            urls = list(DEFAULT_SOURCES)

    if timeout is None:
        env_timeout = os.environ.get("TAGLEDGER_RATE_TIMEOUT")
        timeout = float(env_timeout) if env_timeout else DEFAULT_TIMEOUT

    return [RateSource(url, client=client, timeout=timeout) for url in urls]
