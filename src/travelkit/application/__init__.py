# src/travelkit/application/__init__.py
"""
Application Layer - Use Cases and Services

This package contains the coordinator that serves cached country data and
the freshness rules deciding when remote sources are consulted.
"""

from travelkit.application.country_coordinator import CountryCell, CountryCoordinator
from travelkit.application.freshness import (
    currency_pair_key,
    should_fetch_rate,
    should_fetch_visa,
    visa_pair_key,
)

__all__ = [
    "CountryCoordinator",
    "CountryCell",
    "should_fetch_rate",
    "should_fetch_visa",
    "currency_pair_key",
    "visa_pair_key",
]
