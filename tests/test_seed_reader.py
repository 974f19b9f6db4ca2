"""
Seed Reader Tests - Unit Tests for the Bundled Country Dataset

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- travelkit.adapters.persistence.seed_reader (CountriesJsonReader to test)
"""
import json

import pytest

from travelkit.adapters.persistence.seed_reader import CountriesJsonReader
from travelkit.domain.errors import SeedDataError
from travelkit.domain.models import Rate, Visa


def _write(tmp_path, records):
    path = tmp_path / "countries.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


class TestBundledDataset:
    def test_bundled_dataset_parses(self):
        countries = CountriesJsonReader().get_countries()

        assert len(countries) == 25
        assert len({c.id for c in countries}) == len(countries)
        france = next(c for c in countries if c.name == "France")
        assert france.id == "FR"
        assert france.currency.code == "EUR"

    def test_seed_records_start_stale(self):
        country = CountriesJsonReader().get_countries()[0]
        assert country.currency.rate == Rate()
        assert country.visa == Visa()


class TestCustomDataset:
    def test_reads_given_file(self, tmp_path):
        path = _write(tmp_path, [{"id": "FR", "name": "France", "currency": {"code": "EUR"}}])
        countries = CountriesJsonReader(path).get_countries()
        assert [c.name for c in countries] == ["France"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SeedDataError):
            CountriesJsonReader(tmp_path / "missing.json").get_countries()

    def test_not_a_list(self, tmp_path):
        with pytest.raises(SeedDataError, match="JSON list"):
            CountriesJsonReader(_write(tmp_path, {"countries": []})).get_countries()

    def test_missing_currency(self, tmp_path):
        with pytest.raises(SeedDataError, match="Invalid seed record #0"):
            CountriesJsonReader(_write(tmp_path, [{"id": "FR", "name": "France"}])).get_countries()

    def test_invalid_currency_code(self, tmp_path):
        path = _write(tmp_path, [{"id": "FR", "name": "France", "currency": {"code": "euro"}}])
        with pytest.raises(SeedDataError, match="Invalid currency code"):
            CountriesJsonReader(path).get_countries()

    def test_duplicate_country(self, tmp_path):
        record = {"id": "FR", "name": "France", "currency": {"code": "EUR"}}
        with pytest.raises(SeedDataError, match="Duplicate"):
            CountriesJsonReader(_write(tmp_path, [record, record])).get_countries()
