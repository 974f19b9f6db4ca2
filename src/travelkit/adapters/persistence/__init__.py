# src/travelkit/adapters/persistence/__init__.py
"""
Persistence Adapters - Data Storage

This package contains adapters for persisting data:
- Country store (JSON file, live lookups)
- Bundled seed dataset reader
- User preferences (origin country, first-launch flag)
"""

from travelkit.adapters.persistence.country_store import CountryStore
from travelkit.adapters.persistence.preferences_store import PreferencesStore
from travelkit.adapters.persistence.seed_reader import CountriesJsonReader

__all__ = [
    "CountryStore",
    "CountriesJsonReader",
    "PreferencesStore",
]
