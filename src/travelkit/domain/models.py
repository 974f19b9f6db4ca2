# src/travelkit/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains the immutable records describing a country as the
travel kit sees it:
- Country with its currency and visa information
- Exchange rate from the traveler's origin currency
- Visa requirements for travelers from the origin country

Updates never mutate a record; ``with_rate`` and ``with_visa`` return a new
Country sharing every field except the replaced one.

Files that USE this module:
- travelkit.application.* (coordinator and freshness rules)
- travelkit.adapters.persistence.* (store and seed loader serialize these models)
- tests.* (tests build domain models as fixtures)

Files that this module USES:
- None (pure domain layer, no external dependencies)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass, field, replace  # Immutable records and copy-with-replace
from datetime import datetime, timezone  # Current time for epoch-millisecond timestamps
from typing import Any, Dict, Optional  # Type hints for JSON mappings and optional values


def now_millis() -> int:
    """Current UTC time as epoch milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


@dataclass(frozen=True)
class Rate:
    """
    Exchange rate of a country's currency.

    Attributes:
        value: Units of this currency per 1 unit of ``from_currency_code``
        from_currency_code: Origin currency the rate was computed from
        last_update: Epoch milliseconds of the last successful fetch (0 = never)
    """
    value: float = 0.0
    from_currency_code: str = ""
    last_update: int = 0

    def to_json(self) -> dict:
        return {
            "value": self.value,
            "from_currency_code": self.from_currency_code,
            "last_update": self.last_update,
        }

    @staticmethod
    def from_json(data: Optional[Dict[str, Any]]) -> Rate:
        if not data:
            return Rate()
        return Rate(
            value=float(data.get("value", 0.0)),
            from_currency_code=str(data.get("from_currency_code", "")),
            last_update=int(data.get("last_update", 0)),
        )


@dataclass(frozen=True)
class Visa:
    """
    Visa requirements for entering a country.

    Attributes:
        info: Free-form requirement description
        from_country_id: Id of the origin country the info applies to
        last_update: Epoch milliseconds of the last successful fetch (0 = never)
    """
    info: str = ""
    from_country_id: str = ""
    last_update: int = 0

    def to_json(self) -> dict:
        return {
            "info": self.info,
            "from_country_id": self.from_country_id,
            "last_update": self.last_update,
        }

    @staticmethod
    def from_json(data: Optional[Dict[str, Any]]) -> Visa:
        if not data:
            return Visa()
        return Visa(
            info=str(data.get("info", "")),
            from_country_id=str(data.get("from_country_id", "")),
            last_update=int(data.get("last_update", 0)),
        )


@dataclass(frozen=True)
class Currency:
    """Currency used in a country, with its latest known exchange rate."""
    code: str
    name: str = ""
    symbol: str = ""
    rate: Rate = field(default_factory=Rate)

    def to_json(self) -> dict:
        return {
            "code": self.code,
            "name": self.name,
            "symbol": self.symbol,
            "rate": self.rate.to_json(),
        }

    @staticmethod
    def from_json(data: Dict[str, Any]) -> Currency:
        return Currency(
            code=str(data["code"]),
            name=str(data.get("name", "")),
            symbol=str(data.get("symbol", "")),
            rate=Rate.from_json(data.get("rate")),
        )


@dataclass(frozen=True)
class Country:
    """
    A country record as persisted in the local store.

    Attributes:
        id: Stable identifier (ISO 3166-1 alpha-2 code)
        name: Display name, unique across the store
        currency: Currency descriptor with the embedded exchange rate
        visa: Visa requirements for the current origin country
    """
    id: str
    name: str
    currency: Currency
    visa: Visa = field(default_factory=Visa)

    def with_rate(self, rate: Rate) -> Country:
        """Return a copy of this country with the exchange rate replaced."""
        return replace(self, currency=replace(self.currency, rate=rate))

    def with_visa(self, visa: Visa) -> Country:
        """Return a copy of this country with the visa record replaced."""
        return replace(self, visa=visa)

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "currency": self.currency.to_json(),
            "visa": self.visa.to_json(),
        }

    @staticmethod
    def from_json(data: Dict[str, Any]) -> Country:
        """
        Create a Country from its JSON dictionary.

        Missing ``rate`` and ``visa`` objects default to empty records, which
        are always considered stale.

        Raises:
            KeyError: If ``id``, ``name`` or ``currency.code`` is missing
        """
        return Country(
            id=str(data["id"]),
            name=str(data["name"]),
            currency=Currency.from_json(data["currency"]),
            visa=Visa.from_json(data.get("visa")),
        )
