# src/travelkit/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models and business rules.
No dependencies on infrastructure or external systems.
"""

from travelkit.domain.models import (
    Country,
    Currency,
    Rate,
    Visa,
    now_millis,
)
from travelkit.domain.errors import (
    CountryNotFoundError,
    SeedDataError,
    StoreError,
    TravelKitError,
)

__all__ = [
    "Country",
    "Currency",
    "Rate",
    "Visa",
    "now_millis",
    "TravelKitError",
    "CountryNotFoundError",
    "SeedDataError",
    "StoreError",
]
