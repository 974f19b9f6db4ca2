# src/travelkit/adapters/persistence/country_store.py
"""
Country Store - Local Persistence of Country Records

This module keeps one record per country in a JSON file and exposes live
lookups: every write re-emits the new record to observers of that country's
name, and the list of names to observers of ``get_names``.

The file is the single source of truth; all access is serialized by one
re-entrant lock, and every write rewrites the file atomically. Observers are
notified after the lock is released, so they may read the store.

Files that USE this module:
- travelkit.application.country_coordinator (reads, seeds and writes back countries)
- travelkit.app (composition root)
- tests.test_country_store, tests.test_country_coordinator

Files that this module USES:
- travelkit.domain.models (Country serialization)
- travelkit.domain.errors (StoreError, CountryNotFoundError)
- travelkit.shared.live (LiveValue)
"""
from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
import threading
import weakref
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from travelkit.domain.errors import CountryNotFoundError, StoreError
from travelkit.domain.models import Country
from travelkit.shared.live import LiveValue

log = logging.getLogger(__name__)


class CountryStore:
    """JSON-file backed store of Country records keyed by id."""

    def __init__(self, store_file: Path):
        """
        Initialize the store and load existing records from ``store_file``.

        Args:
            store_file: Path to the JSON file (created on first write)
        """
        self.store_file = Path(store_file)
        self.store_file.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        self._records: Dict[str, Country] = {}
        self._id_by_name: Dict[str, str] = {}
        self._by_name: weakref.WeakValueDictionary[str, LiveValue[Optional[Country]]] = weakref.WeakValueDictionary()
        self._load()
        self._names: LiveValue[List[str]] = LiveValue(self._sorted_names())

    # --- file I/O ---

    def _load(self) -> None:
        """
        Load records from disk.

        A corrupt file is backed up next to the store (``.json.corrupt``) and
        the store starts empty, so the next ``setup()`` re-seeds it.
        """
        if not self.store_file.exists():
            log.info("No country store file found at %s", self.store_file)
            return

        try:
            with self.store_file.open("r", encoding="utf-8") as f:
                data = json.load(f)
            countries = [Country.from_json(item) for item in data["countries"]]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            backup_path = self.store_file.with_suffix(".json.corrupt")
            shutil.copy2(self.store_file, backup_path)
            self.store_file.unlink()
            log.warning("Country store corrupted, backed up to %s: %s", backup_path, e)
            return
        except OSError as e:
            raise StoreError(f"Failed to read country store {self.store_file}: {e}") from e

        for country in countries:
            self._records[country.id] = country
            self._id_by_name[country.name] = country.id
        log.info("Loaded %d countries from %s", len(self._records), self.store_file)

    def _save(self) -> None:
        """Write all records using temp file + atomic rename."""
        payload = {"countries": [c.to_json() for c in self._records.values()]}
        temp_fd, temp_path = tempfile.mkstemp(
            suffix=".json.tmp",
            dir=str(self.store_file.parent),
            text=True,
        )
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, str(self.store_file))
        except OSError as e:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise StoreError(f"Failed to save country store: {e}") from e

    # --- queries ---

    def _sorted_names(self) -> List[str]:
        return sorted(self._id_by_name)

    def count_countries(self) -> int:
        with self._lock:
            return len(self._records)

    def get(self, country_id: str) -> Optional[Country]:
        """Current record for ``country_id`` (None if unknown)."""
        with self._lock:
            return self._records.get(country_id)

    def get_by_name(self, name: str) -> Optional[Country]:
        with self._lock:
            country_id = self._id_by_name.get(name)
            return self._records.get(country_id) if country_id else None

    def find_by_name(self, name: str) -> LiveValue[Optional[Country]]:
        """
        Live lookup of a country by display name.

        The returned value holds the current record (None when no country has
        that name) and re-emits after every write to it. It stays cached only
        while someone holds a reference to it.
        """
        with self._lock:
            live = self._by_name.get(name)
            if live is None:
                live = LiveValue(self.get_by_name(name))
                self._by_name[name] = live
            return live

    def get_names(self) -> LiveValue[List[str]]:
        """Live, alphabetically ordered list of all country names."""
        return self._names

    # --- writes ---
    # Writers stage live values under the store lock and notify observers
    # only after releasing it.

    def _stage(self, name: str, country: Optional[Country]) -> Optional[Callable[[], None]]:
        live = self._by_name.get(name)
        return live.stage(country) if live is not None else None

    @staticmethod
    def _notify(pending: List[Optional[Callable[[], None]]]) -> None:
        for notify in pending:
            if notify is not None:
                notify()

    def _put(self, country: Country) -> Optional[str]:
        """Store ``country`` in memory; returns the previous name if it changed."""
        other_id = self._id_by_name.get(country.name)
        if other_id is not None and other_id != country.id:
            raise StoreError(f"Country name {country.name!r} already used by id {other_id!r}")
        previous = self._records.get(country.id)
        self._records[country.id] = country
        self._id_by_name[country.name] = country.id
        if previous is not None and previous.name != country.name:
            del self._id_by_name[previous.name]
            return previous.name
        return None

    def bulk_insert(self, countries: Iterable[Country]) -> None:
        """
        Insert countries, replacing any existing record with the same id.

        Inserting the same dataset twice leaves one record per country.
        """
        with self._lock:
            countries = list(countries)
            renamed = [self._put(country) for country in countries]
            self._save()
            pending = [self._stage(old_name, None) for old_name in renamed if old_name]
            pending += [self._stage(c.name, self._records[c.id]) for c in countries]
            pending.append(self._names.stage(self._sorted_names()))
        self._notify(pending)
        log.info("Inserted %d countries", len(countries))

    def _replace(self, country: Country) -> List[Optional[Callable[[], None]]]:
        if country.id not in self._records:
            raise CountryNotFoundError(f"Unknown country id {country.id!r}")
        old_name = self._put(country)
        self._save()
        pending = []
        if old_name:
            pending.append(self._stage(old_name, None))
            pending.append(self._names.stage(self._sorted_names()))
        pending.append(self._stage(country.name, country))
        return pending

    def update(self, country: Country) -> None:
        """
        Replace an existing record.

        Raises:
            CountryNotFoundError: If no record has ``country.id``
            StoreError: If the file cannot be written
        """
        with self._lock:
            pending = self._replace(country)
        self._notify(pending)
        log.debug("Updated country %s", country.id)

    def update_with(self, country_id: str, transform: Callable[[Country], Country]) -> Country:
        """
        Read-modify-write one record under the store lock.

        Args:
            country_id: Id of the record to change
            transform: Builds the new record from the currently stored one

        Returns:
            The stored result of ``transform``

        Raises:
            CountryNotFoundError: If no record has ``country_id``
        """
        with self._lock:
            current = self._records.get(country_id)
            if current is None:
                raise CountryNotFoundError(f"Unknown country id {country_id!r}")
            updated = transform(current)
            pending = self._replace(updated)
        self._notify(pending)
        log.debug("Updated country %s", country_id)
        return updated
