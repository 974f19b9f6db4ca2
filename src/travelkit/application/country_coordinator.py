# src/travelkit/application/country_coordinator.py
"""
Country Coordinator - Cached Country Data with Background Refresh

This module contains the core orchestration of the travel kit. It serves
country records from the local store immediately and, once per
``get_country`` call, refreshes the exchange rate and the visa information
from the remote sources when the freshness rules say the cached values are
stale. Refreshed values are written back through the store, which re-emits
the record to the caller's live cell.

Remote failures are logged and dropped: the caller keeps seeing the last
stored value.

Files that USE this module:
- travelkit.app (composition root and command line)
- tests.test_country_coordinator (unit tests)

Files that this module USES:
- travelkit.application.freshness (staleness predicates and lookup keys)
- travelkit.adapters.providers.base (ApiResponse variants)
- travelkit.adapters.persistence.* (store, seed dataset, preferences)
- travelkit.shared.live (MediatorLiveValue for the result cell)
- travelkit.shared.executors (disk and network pools)
"""
from __future__ import annotations

import asyncio  # Event loop, tasks and run_in_executor for blocking calls
import logging  # Logging for refresh outcomes and remote failures
import threading  # Lock serializing the seed check
from concurrent.futures import Future  # Future returned by setup()
from datetime import timedelta  # Freshness windows
from typing import Any, Awaitable, Callable, List, Optional, Protocol  # Type hints

from travelkit.adapters.persistence.country_store import CountryStore  # Local store (single source of truth)
from travelkit.adapters.persistence.preferences_store import PreferencesStore  # Current origin preference
from travelkit.adapters.persistence.seed_reader import CountriesJsonReader  # Bundled dataset for seeding
from travelkit.adapters.providers.base import ApiErrorResponse, ApiResponse, ApiSuccessResponse  # Remote call results
from travelkit.application.freshness import (
    RATE_FRESHNESS,
    VISA_FRESHNESS,
    currency_pair_key,
    should_fetch_rate,
    should_fetch_visa,
    visa_pair_key,
)  # Staleness rules and lookup keys
from travelkit.domain.models import Country, Rate, Visa, now_millis  # Domain records
from travelkit.shared.executors import AppExecutors  # Disk and network pools
from travelkit.shared.live import LiveValue, MediatorLiveValue  # Observable result cell

log = logging.getLogger(__name__)


class RateSource(Protocol):
    """Protocol for exchange rate lookups."""
    def convert(self, pair_key: str, response_format: str) -> ApiResponse:
        ...


class VisaSource(Protocol):
    """Protocol for visa requirement lookups."""
    def visa_requirements(self, auth_header: str, pair_key: str) -> ApiResponse:
        ...


def _is_stored(country: Optional[Country]) -> bool:
    return country is not None


def _log_refresh_outcome(task: asyncio.Task) -> None:
    if task.cancelled():
        log.debug("Country refresh cancelled")
        return
    exc = task.exception()
    if exc is not None:
        log.error("Country refresh failed: %s", exc, exc_info=exc)


class CountryCell(MediatorLiveValue[Optional[Country]]):
    """
    Live result of ``CountryCoordinator.get_country``.

    Forwards every stored version of the country. The refresh round starts
    when the cell gets its first observer (at most once per cell) and is
    cancelled, together with all source subscriptions, when the last
    observer goes away. Observe it from the event loop thread.

    Attributes:
        refresh: The refresh task once started; awaiting it waits until
                 every triggered write-back is persisted
    """

    def __init__(self, loop: asyncio.AbstractEventLoop,
                 refresh_factory: Callable[[], Awaitable[None]]):
        super().__init__(loop=loop)
        self._refresh_factory = refresh_factory
        self.refresh: Optional[asyncio.Task] = None

    def _on_active(self) -> None:
        super()._on_active()
        if self.refresh is None:
            self.refresh = self._loop.create_task(self._refresh_factory())
            self.refresh.add_done_callback(_log_refresh_outcome)

    def _on_inactive(self) -> None:
        super()._on_inactive()
        if self.has_observers:
            return
        if self.refresh is not None and not self.refresh.done():
            self.refresh.cancel()


class CountryCoordinator:
    """
    Serves country data from the local store and keeps it fresh.
    """

    def __init__(
        self,
        store: CountryStore,
        seed_reader: CountriesJsonReader,
        rate_source: RateSource,
        visa_source: VisaSource,
        preferences: PreferencesStore,
        executors: AppExecutors,
        auth_header: str,
        rate_max_age: timedelta = RATE_FRESHNESS,
        visa_max_age: timedelta = VISA_FRESHNESS,
    ):
        """
        Initialize the coordinator.

        Args:
            store: Local country store (single source of truth)
            seed_reader: Bundled dataset used when the store is empty
            rate_source: Exchange rate API client
            visa_source: Visa requirements API client
            preferences: Preference store holding the current origin
            executors: Disk and network worker pools
            auth_header: ``Authorization`` header for the visa source
            rate_max_age: Exchange rate freshness window
            visa_max_age: Visa information freshness window
        """
        self.store = store
        self.seed_reader = seed_reader
        self.rate_source = rate_source
        self.visa_source = visa_source
        self.preferences = preferences
        self.executors = executors
        self.auth_header = auth_header
        self.rate_max_age = rate_max_age
        self.visa_max_age = visa_max_age
        self._seed_lock = threading.Lock()

    # --- seeding ---

    def setup(self) -> Future:
        """
        Seed the store from the bundled dataset if it is empty.

        Runs on the disk pool and returns immediately; the returned future
        resolves to the number of inserted countries (0 when already seeded).
        """
        future = self.executors.disk_io.submit(self._seed_if_empty)
        future.add_done_callback(self._log_setup_outcome)
        return future

    def _seed_if_empty(self) -> int:
        with self._seed_lock:
            if self.store.count_countries() != 0:
                log.debug("Country store already populated, skipping seed")
                return 0
            countries = self.seed_reader.get_countries()
            self.store.bulk_insert(countries)
            log.info("Seeded country store with %d countries", len(countries))
            return len(countries)

    @staticmethod
    def _log_setup_outcome(future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            log.error("Seeding the country store failed: %s", exc, exc_info=exc)

    # --- queries ---

    def get_country_names(self) -> LiveValue[List[str]]:
        """Live, ordered list of all country names, straight from the store."""
        return self.store.get_names()

    def get_country(self, name: str, origin: Optional[str] = None) -> CountryCell:
        """
        Live view of a country, refreshed in the background when stale.

        Must be called from a running event loop; the cell delivers values on
        that loop.

        Args:
            name: Display name of the country
            origin: Origin country name; defaults to the current preference,
                    read once here

        Returns:
            CountryCell emitting the stored record first (None while no country
            has that name), then every newer stored version, including the
            ones written by this refresh. The refresh round starts once both
            the country and the origin are stored.
        """
        loop = asyncio.get_running_loop()
        origin_name = origin or self.preferences.origin

        country_source = self.store.find_by_name(name)
        origin_source = self.store.find_by_name(origin_name)

        cell = CountryCell(loop, lambda: self._refresh(name, country_source, origin_source))
        cell.add_source(country_source, cell.post_value)
        return cell

    # --- refresh round ---

    async def _refresh(self, name: str, country_source: LiveValue, origin_source: LiveValue) -> None:
        # Records missing now (e.g. setup still seeding) are awaited until stored
        if country_source.value is None:
            log.warning("Country %s not in local store yet, refresh waits for it", name)
        country = await country_source.first(_is_stored)
        if origin_source.value is None:
            log.warning("Origin country not in local store yet, refresh of %s waits for it", name)
        origin = await origin_source.first(_is_stored)

        now = now_millis()
        jobs = []
        if should_fetch_rate(country, origin, now, self.rate_max_age):
            jobs.append(self._refresh_rate(country, origin))
        if should_fetch_visa(country, origin, now, self.visa_max_age):
            jobs.append(self._refresh_visa(country, origin))

        if not jobs:
            log.debug("Cached data for %s is fresh", country.name)
            return
        await asyncio.gather(*jobs)

    async def _call_remote(self, call: Callable[..., ApiResponse], *args: Any) -> ApiResponse:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self.executors.network_io, call, *args)
        except Exception as e:
            return ApiResponse.from_error(e)

    async def _write_back(self, country_id: str, transform: Callable[[Country], Country]) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(self.executors.disk_io, self.store.update_with, country_id, transform)

    async def _refresh_rate(self, country: Country, origin: Country) -> None:
        response = await self._call_remote(
            self.rate_source.convert, currency_pair_key(origin, country), "y"
        )
        if isinstance(response, ApiSuccessResponse):
            rate = Rate(response.body.value, origin.currency.code, now_millis())
            await self._write_back(country.id, lambda current: current.with_rate(rate))
            log.info("Updated %s rate: %s per 1 %s", country.name, rate.value, rate.from_currency_code)
        elif isinstance(response, ApiErrorResponse):
            log.warning("Problem with fetching currency rate: %s", response.error_message)

    async def _refresh_visa(self, country: Country, origin: Country) -> None:
        response = await self._call_remote(
            self.visa_source.visa_requirements, self.auth_header, visa_pair_key(origin, country)
        )
        if isinstance(response, ApiSuccessResponse):
            visa = Visa(response.body.info, origin.id, now_millis())
            await self._write_back(country.id, lambda current: current.with_visa(visa))
            log.info("Updated %s visa info for travelers from %s", country.name, origin.id)
        elif isinstance(response, ApiErrorResponse):
            log.warning("Problem with fetching visa info: %s", response.error_message)
