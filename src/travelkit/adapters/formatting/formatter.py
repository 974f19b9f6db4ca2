# src/travelkit/adapters/formatting/formatter.py
"""
Country Formatter - Text Presentation of Country Data

This module turns country records into the plain text printed by the
command line: currency and exchange rate, visa requirements and how old
each cached value is.

Files that USE this module:
- travelkit.app (prints countries and the list of names)
- tests.test_formatter (unit tests)

Files that this module USES:
- travelkit.domain.models (Country, now_millis)
"""
from __future__ import annotations

from typing import List, Optional

from travelkit.domain.models import Country, now_millis


def _fmt_age(last_update: int, now: Optional[int] = None) -> str:
    """
    Format the age of a cached value.

    Args:
        last_update: Epoch milliseconds of the last update (0 = never)
        now: Current time in epoch milliseconds (defaults to the clock)

    Returns:
        "never" for values that were never fetched, otherwise e.g. "3d 4h ago"
    """
    if last_update <= 0:
        return "never"
    if now is None:
        now = now_millis()
    seconds = max(0, (now - last_update) // 1000)
    days, rem = divmod(seconds, 86400)
    hours, rem = divmod(rem, 3600)
    minutes = rem // 60
    if days:
        return f"{days}d {hours}h ago"
    if hours:
        return f"{hours}h {minutes}m ago"
    return f"{minutes}m ago"


def format_country(country: Optional[Country], now: Optional[int] = None) -> str:
    """
    Format a country record as a plain text block.

    Args:
        country: Country to format (None when it is not in the store)
        now: Current time in epoch milliseconds (for the age columns)

    Returns:
        Multi-line string; "Country not found" when ``country`` is None
    """
    if country is None:
        return "Country not found"

    currency = country.currency
    rate = currency.rate
    if rate.from_currency_code:
        rate_line = (f"— Rate: 1 {rate.from_currency_code} = {rate.value:.4f} {currency.code}"
                     f" ({_fmt_age(rate.last_update, now)})")
    else:
        rate_line = "— Rate: N/A"

    visa = country.visa
    if visa.from_country_id:
        visa_line = f"— Visa ({visa.from_country_id}, {_fmt_age(visa.last_update, now)}): {visa.info}"
    else:
        visa_line = "— Visa: N/A"

    label = f"{currency.name} ({currency.code})" if currency.name else currency.code
    if currency.symbol:
        label = f"{label} {currency.symbol}"
    return (
        f"{country.name} [{country.id}]\n"
        f"— Currency: {label}\n"
        f"{rate_line}\n"
        f"{visa_line}"
    )


def format_names(names: Optional[List[str]]) -> str:
    """One country name per line ("No countries" for an empty store)."""
    if not names:
        return "No countries"
    return "\n".join(names)
