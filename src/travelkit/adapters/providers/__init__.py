# src/travelkit/adapters/providers/__init__.py
"""
Provider Adapters - External API Clients

This package contains clients for the remote rate and visa sources.
Every call returns an ApiResponse instead of raising on remote failure.
"""

from travelkit.adapters.providers.base import (
    ApiErrorResponse,
    ApiResponse,
    ApiSuccessResponse,
)
from travelkit.adapters.providers.currency_converter import CurrencyConverterProvider, RateBody
from travelkit.adapters.providers.sherpa import SherpaProvider, VisaBody, basic_auth

__all__ = [
    "ApiResponse",
    "ApiSuccessResponse",
    "ApiErrorResponse",
    "CurrencyConverterProvider",
    "RateBody",
    "SherpaProvider",
    "VisaBody",
    "basic_auth",
]
