# src/travelkit/adapters/providers/base.py
"""
Base Provider Interface - Remote Call Results and Shared HTTP Handling

Remote sources never raise for remote failures. Every call returns an
ApiResponse: ApiSuccessResponse carrying the parsed body, or ApiErrorResponse
carrying a human-readable message.

Files that USE this module:
- travelkit.adapters.providers.currency_converter (rate source)
- travelkit.adapters.providers.sherpa (visa source)
- travelkit.application.country_coordinator (dispatches on the response type)
- tests.test_providers (unit tests)

Files that this module USES:
- requests (HTTP client)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

import requests

log = logging.getLogger(__name__)

B = TypeVar("B")


class ApiResponse(Generic[B]):
    """Result of a remote call: ApiSuccessResponse or ApiErrorResponse."""

    @staticmethod
    def from_error(error: Exception) -> ApiErrorResponse:
        return ApiErrorResponse(error_message=str(error) or type(error).__name__)

    @staticmethod
    def create(response: requests.Response, parse: Callable[[Any], B]) -> ApiResponse[B]:
        """
        Build an ApiResponse from an HTTP response.

        Args:
            response: Completed HTTP response
            parse: Converts the decoded JSON payload to the response body;
                   may raise KeyError, ValueError or TypeError on bad schema

        Returns:
            ApiSuccessResponse for a 2xx status with a parsable payload,
            ApiErrorResponse otherwise
        """
        if not response.ok:
            message = response.text or response.reason or ""
            return ApiErrorResponse(error_message=f"HTTP {response.status_code}: {message}".strip())
        try:
            payload = response.json()
        except ValueError as e:
            return ApiErrorResponse(error_message=f"invalid JSON: {e}")
        try:
            return ApiSuccessResponse(body=parse(payload))
        except (KeyError, ValueError, TypeError) as e:
            return ApiErrorResponse(error_message=f"unexpected schema: {e}")


@dataclass(frozen=True)
class ApiSuccessResponse(ApiResponse[B]):
    body: B


@dataclass(frozen=True)
class ApiErrorResponse(ApiResponse[Any]):
    error_message: str


def get_json(
    name: str,
    url: str,
    parse: Callable[[Any], B],
    params: Optional[Dict[str, str]] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: int = 10,
) -> ApiResponse[B]:
    """
    GET ``url`` and wrap the outcome in an ApiResponse.

    Transport errors (timeouts, connection failures) become ApiErrorResponse.

    Args:
        name: Provider name used in log messages
        url: Endpoint URL
        parse: Payload-to-body converter (see ``ApiResponse.create``)
        params: Optional query parameters
        headers: Optional request headers
        timeout: Request timeout in seconds
    """
    try:
        log.info("Fetching %s from %s", name, url)
        resp = requests.get(url, params=params, headers=headers, timeout=timeout)
    except requests.exceptions.Timeout:
        log.warning("%s API timeout after %d seconds", name, timeout)
        return ApiErrorResponse(error_message=f"{name} API timeout after {timeout}s")
    except requests.exceptions.RequestException as e:
        log.warning("%s API request failed: %s", name, e)
        return ApiErrorResponse(error_message=f"{name} API request failed: {e}")

    result = ApiResponse.create(resp, parse)
    if isinstance(result, ApiErrorResponse):
        log.error("%s API returned an error: %s", name, result.error_message)
    return result
