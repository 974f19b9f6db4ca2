# src/travelkit/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Providers (currency converter and visa APIs)
- Persistence (country store, seed dataset, preferences)
"""

__all__ = []
