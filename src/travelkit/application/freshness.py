# src/travelkit/application/freshness.py
"""
Freshness Rules - When Cached Country Data Must Be Refreshed

Pure functions of two Country snapshots (target and origin) and the current
time. A cached value is stale when it is older than its window, or when it
was computed for a different origin than the current one.

Files that USE this module:
- travelkit.application.country_coordinator (decides which remote calls to make)
- tests.test_freshness (unit tests)

Files that this module USES:
- travelkit.domain.models (Country, now_millis)
"""
from __future__ import annotations

from datetime import timedelta  # Freshness windows
from typing import Optional  # Type hints

from travelkit.domain.models import Country, now_millis  # Country snapshots and the clock

RATE_FRESHNESS = timedelta(days=30)
VISA_FRESHNESS = timedelta(days=1)


def _millis(window: timedelta) -> int:
    return int(window.total_seconds() * 1000)


def should_fetch_rate(country: Country, origin: Country, now: Optional[int] = None,
                      max_age: timedelta = RATE_FRESHNESS) -> bool:
    """
    True when the country's exchange rate must be fetched again.

    Args:
        country: Target country snapshot
        origin: Origin country snapshot
        now: Current time in epoch milliseconds (defaults to the clock)
        max_age: Freshness window (default 30 days)
    """
    if now is None:
        now = now_millis()
    rate = country.currency.rate
    return (now - rate.last_update > _millis(max_age)
            or rate.from_currency_code != origin.currency.code)


def should_fetch_visa(country: Country, origin: Country, now: Optional[int] = None,
                      max_age: timedelta = VISA_FRESHNESS) -> bool:
    """
    True when the country's visa information must be fetched again.

    Args:
        country: Target country snapshot
        origin: Origin country snapshot
        now: Current time in epoch milliseconds (defaults to the clock)
        max_age: Freshness window (default 1 day)
    """
    if now is None:
        now = now_millis()
    visa = country.visa
    return (now - visa.last_update > _millis(max_age)
            or visa.from_country_id != origin.id)


def currency_pair_key(origin: Country, target: Country) -> str:
    """Rate lookup key, e.g. ``"USD_EUR"``."""
    return f"{origin.currency.code}_{target.currency.code}"


def visa_pair_key(origin: Country, target: Country) -> str:
    """Visa lookup key, e.g. ``"US-FR"``."""
    return f"{origin.id}-{target.id}"
