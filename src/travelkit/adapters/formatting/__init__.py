# src/travelkit/adapters/formatting/__init__.py
"""
Formatting Adapters - Text Output

This package contains plain text formatting for command line output.
"""

from travelkit.adapters.formatting.formatter import format_country, format_names

__all__ = [
    "format_country",
    "format_names",
]
