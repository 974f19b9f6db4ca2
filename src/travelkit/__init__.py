# src/travelkit/__init__.py
"""
TravelKit - Per-Country Travel Data Coordinator

Keeps a local store of countries (currency, exchange rate, visa requirements)
and refreshes rates and visa information from remote APIs only when the
cached values are too old or the traveler's origin country changed.
"""

__version__ = "1.0.0"
