# src/travelkit/adapters/providers/sherpa.py
"""
Sherpa API Provider - Visa Requirements Between Two Countries

Client for the Sherpa entry-requirements endpoint. A lookup key has the form
``"<originId>-<targetId>"`` (e.g. ``"US-FR"``) and every call is authorized
with an HTTP Basic ``Authorization`` header.

Files that USE this module:
- travelkit.application.country_coordinator (visa source and auth header)
- travelkit.app (composition root)
- tests.test_providers (unit tests)

Files that this module USES:
- travelkit.adapters.providers.base (ApiResponse, get_json)
- travelkit.config (settings for API configuration)
"""
import base64
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from travelkit.adapters.providers.base import ApiResponse, get_json
from travelkit.config import settings

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisaBody:
    info: str


def basic_auth(username: str, password: str) -> str:
    """
    Build an HTTP Basic authorization header value.

    Returns:
        ``"Basic "`` followed by base64 of ``"username:password"`` (no line wrap)
    """
    credentials = f"{username}:{password}".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


class SherpaProvider:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        """
        Initialize the Sherpa client.

        Args:
            base_url: Optional endpoint URL (defaults to settings.sherpa_url)
            timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
        """
        self.url = (base_url or settings.sherpa_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds

    @staticmethod
    def _extract_info(payload: Any) -> VisaBody:
        """
        Normalize the payload into a VisaBody:
        - dict with a non-empty 'info' field: use it as is
        - any other dict or list: compact JSON string, so nothing is lost
        """
        if isinstance(payload, dict):
            info = payload.get("info")
            if isinstance(info, str) and info:
                return VisaBody(info=info)
            if not payload:
                raise ValueError("empty visa payload")
        elif not isinstance(payload, list):
            raise TypeError(f"unexpected visa payload type: {type(payload).__name__}")
        return VisaBody(info=json.dumps(payload, ensure_ascii=False))

    def visa_requirements(self, auth_header: str, pair_key: str) -> ApiResponse[VisaBody]:
        """
        Look up visa requirements for travelers from one country to another.

        Args:
            auth_header: ``Authorization`` header value (see ``basic_auth``)
            pair_key: ``"<originId>-<targetId>"`` country pair

        Returns:
            ApiSuccessResponse[VisaBody] or ApiErrorResponse
        """
        return get_json(
            "Sherpa",
            f"{self.url}/{pair_key}",
            self._extract_info,
            headers={"Authorization": auth_header, "Accept": "application/json"},
            timeout=self.timeout,
        )
