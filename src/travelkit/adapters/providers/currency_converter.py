# src/travelkit/adapters/providers/currency_converter.py
"""
Currency Converter API Provider - Exchange Rates Between Two Currencies

Client for the currconv ``/convert`` endpoint. A lookup key has the form
``"<FROM>_<TO>"`` (e.g. ``"USD_EUR"``); the compact response looks like
``{"USD_EUR": {"val": 0.92}}`` and the full one nests the same object under
``"results"``.

Files that USE this module:
- travelkit.application.country_coordinator (rate source)
- travelkit.app (composition root)
- tests.test_providers (unit tests)

Files that this module USES:
- travelkit.adapters.providers.base (ApiResponse, get_json)
- travelkit.config (settings for API configuration)
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional

from travelkit.adapters.providers.base import ApiErrorResponse, ApiResponse, get_json
from travelkit.config import settings

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateBody:
    """Conversion rate: units of the target currency per 1 unit of the source."""
    value: float


class CurrencyConverterProvider:
    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None,
                 timeout: Optional[int] = None):
        """
        Initialize the currency converter client.

        Args:
            base_url: Optional endpoint URL (defaults to settings.currconv_url)
            api_key: Optional API key (defaults to settings.currconv_api_key)
            timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
        """
        self.url = base_url or settings.currconv_url
        self.api_key = api_key if api_key is not None else settings.currconv_api_key
        self.timeout = timeout or settings.http_timeout_seconds

    @staticmethod
    def _parse(pair_key: str, payload: Any) -> RateBody:
        # Full responses wrap the pair under "results"
        if isinstance(payload, dict) and "results" in payload:
            payload = payload["results"]
        node = payload[pair_key]
        value = float(node["val"])
        if value <= 0:
            raise ValueError(f"non-positive rate {value} for {pair_key}")
        return RateBody(value=value)

    def convert(self, pair_key: str, response_format: str = "y") -> ApiResponse[RateBody]:
        """
        Look up the conversion rate for a currency pair.

        Args:
            pair_key: ``"<FROM>_<TO>"`` currency pair
            response_format: ``compact`` query flag ("y" for the compact payload)

        Returns:
            ApiSuccessResponse[RateBody] or ApiErrorResponse
        """
        if not self.api_key:
            log.error("CURRCONV_API_KEY is not configured")
            return ApiErrorResponse(error_message="Currency converter API key not configured")

        return get_json(
            "CurrencyConverter",
            self.url,
            lambda payload: self._parse(pair_key, payload),
            params={"q": pair_key, "compact": response_format, "apiKey": self.api_key},
            timeout=self.timeout,
        )
