# src/travelkit/shared/validators.py
"""
Input Validation Utilities - Configuration and Data Validation

This module provides validation functions for configuration values and for
country records loaded from the seed dataset, so that malformed data is
rejected before it reaches the local store or a remote lookup key.

Files that USE this module:
- travelkit.config.settings (uses validation functions in Settings field validators)
- travelkit.adapters.persistence.seed_reader (validates seed records)
- travelkit.app (sanitizes country names given on the command line)

Files that this module USES:
- None (pure utility functions)
"""
import re


def validate_api_key(api_key: str, min_length: int = 10) -> bool:
    """
    Validate API key format.

    Args:
        api_key: API key to validate
        min_length: Minimum length requirement

    Returns:
        True if valid, False otherwise
    """
    if not api_key:
        return False

    return len(api_key) >= min_length and not api_key.isspace()


def validate_http_url(url: str) -> bool:
    """
    Validate that a URL uses the http or https scheme and has a host.

    Args:
        url: URL to validate

    Returns:
        True if valid, False otherwise
    """
    if not url:
        return False
    return bool(re.match(r'^https?://[^\s/]+', url))


def validate_currency_code(code: str) -> bool:
    """
    Validate ISO 4217 currency code format (three upper-case letters).

    Args:
        code: Currency code to validate (e.g., 'EUR')

    Returns:
        True if valid, False otherwise
    """
    if not code:
        return False
    return bool(re.match(r'^[A-Z]{3}$', code))


def validate_country_id(country_id: str) -> bool:
    """
    Validate ISO 3166-1 alpha-2 country id format (two upper-case letters).

    Args:
        country_id: Country id to validate (e.g., 'FR')

    Returns:
        True if valid, False otherwise
    """
    if not country_id:
        return False
    return bool(re.match(r'^[A-Z]{2}$', country_id))


def sanitize_country_name(name: str, max_length: int = 100) -> str:
    """
    Sanitize a country name typed by the user.

    Collapses inner whitespace and strips characters that never occur in
    country names.

    Args:
        name: Input text to sanitize
        max_length: Maximum allowed length

    Returns:
        Sanitized name (empty string if nothing is left)
    """
    if not name:
        return ""

    sanitized = re.sub(r'[<>"]', '', name)
    sanitized = re.sub(r'\s+', ' ', sanitized).strip()

    return sanitized[:max_length]
