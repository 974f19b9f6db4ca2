# src/travelkit/adapters/persistence/seed_reader.py
"""
Seed Reader - Bundled Country Dataset

Parses the static ``countries.json`` dataset shipped inside the package.
It is only used to populate an empty country store on first run.

Files that USE this module:
- travelkit.application.country_coordinator (setup seeds the store)
- travelkit.app (composition root)
- tests.test_seed_reader

Files that this module USES:
- travelkit.domain.models (Country.from_json)
- travelkit.shared.validators (id and currency code checks)
"""
from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import List, Optional

from travelkit.domain.errors import SeedDataError
from travelkit.domain.models import Country
from travelkit.shared.validators import validate_country_id, validate_currency_code

log = logging.getLogger(__name__)


class CountriesJsonReader:
    """Reads country records from the bundled dataset (or a given file)."""

    def __init__(self, path: Optional[Path] = None):
        """
        Args:
            path: Optional dataset path; defaults to the packaged
                  ``travelkit/data/countries.json``
        """
        self.path = path

    def _read_text(self) -> str:
        if self.path is not None:
            return Path(self.path).read_text(encoding="utf-8")
        return (resources.files("travelkit") / "data" / "countries.json").read_text(encoding="utf-8")

    def get_countries(self) -> List[Country]:
        """
        Parse the dataset.

        Returns:
            Country records in dataset order

        Raises:
            SeedDataError: If the dataset is unreadable, is not valid JSON,
                           or contains an invalid or duplicate record
        """
        try:
            data = json.loads(self._read_text())
        except (OSError, ValueError) as e:
            raise SeedDataError(f"Cannot read seed dataset: {e}") from e

        if not isinstance(data, list):
            raise SeedDataError("Seed dataset must be a JSON list of countries")

        countries: List[Country] = []
        seen_ids, seen_names = set(), set()
        for index, item in enumerate(data):
            try:
                country = Country.from_json(item)
            except (KeyError, TypeError, ValueError) as e:
                raise SeedDataError(f"Invalid seed record #{index}: {e}") from e
            if not validate_country_id(country.id):
                raise SeedDataError(f"Invalid country id {country.id!r} in seed record #{index}")
            if not validate_currency_code(country.currency.code):
                raise SeedDataError(
                    f"Invalid currency code {country.currency.code!r} for {country.name}"
                )
            if country.id in seen_ids or country.name in seen_names:
                raise SeedDataError(f"Duplicate seed record for {country.id}/{country.name}")
            seen_ids.add(country.id)
            seen_names.add(country.name)
            countries.append(country)

        log.info("Parsed %d countries from seed dataset", len(countries))
        return countries
