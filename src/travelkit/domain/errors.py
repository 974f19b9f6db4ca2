# src/travelkit/domain/errors.py
"""
Domain Errors - Business Logic Exceptions

This module defines domain-specific exceptions raised by the country store,
the seed loader and the coordinator.
"""


class TravelKitError(Exception):
    """Base exception for domain errors."""
    pass


class CountryNotFoundError(TravelKitError):
    """Raised when a country is not present in the local store."""
    pass


class SeedDataError(TravelKitError):
    """Raised when the bundled seed dataset is missing or malformed."""
    pass


class StoreError(TravelKitError):
    """Raised when the country store file cannot be read or written."""
    pass
