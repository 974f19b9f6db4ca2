# src/travelkit/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Live (observable) values
- Background executors
- Logging configuration
"""

from travelkit.shared.validators import (
    sanitize_country_name,
    validate_api_key,
    validate_country_id,
    validate_currency_code,
    validate_http_url,
)
from travelkit.shared.live import LiveValue, MediatorLiveValue, Subscription
from travelkit.shared.executors import AppExecutors

__all__ = [
    "validate_api_key",
    "validate_http_url",
    "validate_currency_code",
    "validate_country_id",
    "sanitize_country_name",
    "LiveValue",
    "MediatorLiveValue",
    "Subscription",
    "AppExecutors",
]
