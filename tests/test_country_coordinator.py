"""
Country Coordinator Tests - Unit Tests for Cached Country Data and Refresh

This module tests seeding, cache-first emission, the conditional rate and
visa refreshes, write-back merging, error handling and cancellation of the
refresh round when the result cell is no longer observed.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- travelkit.application.country_coordinator (CountryCoordinator to test)
- travelkit.adapters.persistence.* (real store and preferences on tmp_path)
- unittest.mock (Mock remote sources)
"""
import asyncio
import threading
import time
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from travelkit.adapters.persistence.country_store import CountryStore
from travelkit.adapters.persistence.preferences_store import PreferencesStore
from travelkit.adapters.persistence.seed_reader import CountriesJsonReader
from travelkit.adapters.providers.base import ApiErrorResponse, ApiSuccessResponse
from travelkit.adapters.providers.currency_converter import RateBody
from travelkit.adapters.providers.sherpa import VisaBody, basic_auth
from travelkit.application.country_coordinator import CountryCoordinator
from travelkit.domain.models import Country, Currency, Rate, Visa, now_millis
from travelkit.shared.executors import AppExecutors

DAY = 24 * 60 * 60 * 1000
AUTH = basic_auth("user", "secret")


def make_usa():
    return Country(id="US", name="United States", currency=Currency(code="USD", name="United States dollar"))


def make_france(rate_age_days=None, rate_from="USD", visa_age_days=None, visa_from="US"):
    now = now_millis()
    rate = Rate(0.85, rate_from, now - rate_age_days * DAY) if rate_age_days is not None else Rate()
    visa = Visa("Visa not required", visa_from, now - visa_age_days * DAY) if visa_age_days is not None else Visa()
    return Country(id="FR", name="France", currency=Currency(code="EUR", name="Euro", rate=rate), visa=visa)


@pytest.fixture
def env(tmp_path):
    executors = AppExecutors(disk_workers=2, network_workers=2)
    store = CountryStore(tmp_path / "countries.json")
    preferences = PreferencesStore(tmp_path / "preferences.json", default_origin="United States")
    rate_source = Mock()
    visa_source = Mock()
    seed_reader = CountriesJsonReader()
    coordinator = CountryCoordinator(
        store=store,
        seed_reader=seed_reader,
        rate_source=rate_source,
        visa_source=visa_source,
        preferences=preferences,
        executors=executors,
        auth_header=AUTH,
    )
    yield SimpleNamespace(
        store=store,
        preferences=preferences,
        rate_source=rate_source,
        visa_source=visa_source,
        seed_reader=seed_reader,
        coordinator=coordinator,
    )
    executors.shutdown()


async def observe_until_refreshed(coordinator, name, origin=None):
    values = []
    cell = coordinator.get_country(name, origin)
    subscription = cell.observe(values.append)
    await cell.refresh
    subscription.cancel()
    return values


async def observe_then_cancel(coordinator, name, origin=None):
    values = []
    cell = coordinator.get_country(name, origin)
    subscription = cell.observe(values.append)
    await asyncio.sleep(0.05)
    waiting = not cell.refresh.done()
    subscription.cancel()
    await asyncio.wait({cell.refresh})
    return values, waiting, cell


class TestSetup:
    def test_seeds_empty_store(self, env):
        inserted = env.coordinator.setup().result(timeout=5)

        expected = len(env.seed_reader.get_countries())
        assert inserted == expected
        assert env.store.count_countries() == expected

    def test_does_not_seed_populated_store(self, env):
        store = Mock()
        store.count_countries.return_value = 3
        seed_reader = Mock()
        env.coordinator.store = store
        env.coordinator.seed_reader = seed_reader

        assert env.coordinator.setup().result(timeout=5) == 0
        store.bulk_insert.assert_not_called()
        seed_reader.get_countries.assert_not_called()

    def test_concurrent_setup_seeds_once(self, env):
        futures = [env.coordinator.setup() for _ in range(4)]
        results = [f.result(timeout=5) for f in futures]

        expected = len(env.seed_reader.get_countries())
        assert sorted(results) == [0, 0, 0, expected]
        assert env.store.count_countries() == expected

    def test_country_names_come_from_store(self, env):
        env.coordinator.setup().result(timeout=5)

        names = env.coordinator.get_country_names()
        assert names is env.store.get_names()
        assert names.value == sorted(c.name for c in env.seed_reader.get_countries())


class TestGetCountry:
    def test_emits_cached_record_before_remote_calls(self, env):
        france = make_france(rate_age_days=40, visa_age_days=0)
        env.store.bulk_insert([make_usa(), france])
        env.rate_source.convert.return_value = ApiSuccessResponse(RateBody(0.92))

        async def scenario():
            values = []
            cell = env.coordinator.get_country("France", "United States")
            subscription = cell.observe(values.append)
            first_values = list(values)
            calls_before = env.rate_source.convert.call_count
            await cell.refresh
            subscription.cancel()
            return first_values, calls_before

        first_values, calls_before = asyncio.run(scenario())
        assert first_values == [france]
        assert calls_before == 0

    def test_stale_rate_is_refreshed_and_persisted(self, env):
        france = make_france(rate_age_days=40, visa_age_days=0)
        env.store.bulk_insert([make_usa(), france])
        env.rate_source.convert.return_value = ApiSuccessResponse(RateBody(0.92))
        before = now_millis()

        values = asyncio.run(observe_until_refreshed(env.coordinator, "France", "United States"))

        stored = env.store.get("FR")
        assert stored.currency.rate.value == 0.92
        assert stored.currency.rate.from_currency_code == "USD"
        assert stored.currency.rate.last_update >= before
        assert stored.visa == france.visa
        env.rate_source.convert.assert_called_once_with("USD_EUR", "y")
        env.visa_source.visa_requirements.assert_not_called()
        assert values[0] == france
        assert values[-1] == stored

    def test_fresh_rate_is_not_fetched(self, env):
        env.store.bulk_insert([make_usa(), make_france(rate_age_days=10, visa_age_days=0)])

        asyncio.run(observe_until_refreshed(env.coordinator, "France", "United States"))

        env.rate_source.convert.assert_not_called()
        env.visa_source.visa_requirements.assert_not_called()

    def test_rate_from_other_origin_currency_is_refetched(self, env):
        env.store.bulk_insert([make_usa(), make_france(rate_age_days=1, rate_from="PLN", visa_age_days=0)])
        env.rate_source.convert.return_value = ApiSuccessResponse(RateBody(0.92))

        asyncio.run(observe_until_refreshed(env.coordinator, "France", "United States"))

        env.rate_source.convert.assert_called_once_with("USD_EUR", "y")
        assert env.store.get("FR").currency.rate.from_currency_code == "USD"

    def test_stale_visa_is_refreshed_with_auth_header(self, env):
        env.store.bulk_insert([make_usa(), make_france(rate_age_days=1, visa_age_days=2)])
        env.visa_source.visa_requirements.return_value = ApiSuccessResponse(VisaBody("eVisa required"))

        asyncio.run(observe_until_refreshed(env.coordinator, "France", "United States"))

        env.visa_source.visa_requirements.assert_called_once_with(AUTH, "US-FR")
        visa = env.store.get("FR").visa
        assert visa.info == "eVisa required"
        assert visa.from_country_id == "US"

    def test_rate_and_visa_writes_do_not_clobber_each_other(self, env):
        env.store.bulk_insert([make_usa(), make_france()])
        env.rate_source.convert.return_value = ApiSuccessResponse(RateBody(0.92))
        env.visa_source.visa_requirements.return_value = ApiSuccessResponse(VisaBody("Visa not required"))

        asyncio.run(observe_until_refreshed(env.coordinator, "France", "United States"))

        stored = env.store.get("FR")
        assert stored.currency.rate.value == 0.92
        assert stored.visa.info == "Visa not required"
        assert stored.currency.name == "Euro"

    def test_origin_defaults_to_preference(self, env):
        env.store.bulk_insert([make_usa(), Country(id="PL", name="Poland", currency=Currency(code="PLN")),
                               make_france(rate_age_days=1, visa_age_days=0)])
        env.preferences.origin = "Poland"
        env.rate_source.convert.return_value = ApiSuccessResponse(RateBody(0.23))
        env.visa_source.visa_requirements.return_value = ApiSuccessResponse(VisaBody("EU citizen"))

        asyncio.run(observe_until_refreshed(env.coordinator, "France"))

        env.rate_source.convert.assert_called_once_with("PLN_EUR", "y")
        env.visa_source.visa_requirements.assert_called_once_with(AUTH, "PL-FR")

    def test_remote_errors_leave_record_unchanged(self, env):
        france = make_france(rate_age_days=40, visa_age_days=3)
        env.store.bulk_insert([make_usa(), france])
        env.rate_source.convert.return_value = ApiErrorResponse("quota exceeded")
        env.visa_source.visa_requirements.side_effect = RuntimeError("connection reset")

        values = asyncio.run(observe_until_refreshed(env.coordinator, "France", "United States"))

        assert env.store.get("FR") == france
        assert values == [france]

    def test_fresh_record_twice_issues_no_remote_calls(self, env):
        env.store.bulk_insert([make_usa(), make_france(rate_age_days=1, visa_age_days=0)])

        async def scenario():
            await observe_until_refreshed(env.coordinator, "France", "United States")
            await observe_until_refreshed(env.coordinator, "France", "United States")

        asyncio.run(scenario())
        assert env.rate_source.convert.call_count == 0
        assert env.visa_source.visa_requirements.call_count == 0

    def test_write_back_does_not_trigger_second_refresh(self, env):
        env.store.bulk_insert([make_usa(), make_france(rate_age_days=40, visa_age_days=0)])
        env.rate_source.convert.return_value = ApiSuccessResponse(RateBody(0.92))

        async def scenario():
            values = []
            cell = env.coordinator.get_country("France", "United States")
            subscription = cell.observe(values.append)
            await cell.refresh
            env.store.update_with("FR", lambda c: c.with_visa(Visa("changed", "US", now_millis())))
            subscription.cancel()
            return values

        values = asyncio.run(scenario())
        assert env.rate_source.convert.call_count == 1
        assert values[-1].visa.info == "changed"

    def test_unknown_country_emits_none_and_refresh_waits(self, env):
        env.store.bulk_insert([make_usa()])

        values, waiting, cell = asyncio.run(observe_then_cancel(env.coordinator, "Atlantis", "United States"))

        assert values == [None]
        assert waiting
        assert cell.refresh.cancelled()
        env.rate_source.convert.assert_not_called()

    def test_unknown_origin_refresh_waits(self, env):
        france = make_france()
        env.store.bulk_insert([france])

        values, waiting, cell = asyncio.run(observe_then_cancel(env.coordinator, "France", "Narnia"))

        assert values == [france]
        assert waiting
        assert cell.refresh.cancelled()
        env.rate_source.convert.assert_not_called()
        env.visa_source.visa_requirements.assert_not_called()

    def test_refresh_runs_once_seeding_lands(self, env):
        env.rate_source.convert.return_value = ApiSuccessResponse(RateBody(0.92))
        env.visa_source.visa_requirements.return_value = ApiSuccessResponse(VisaBody("Visa not required"))

        async def scenario():
            values = []
            cell = env.coordinator.get_country("France", "United States")
            subscription = cell.observe(values.append)
            await asyncio.sleep(0.05)
            waiting = not cell.refresh.done()
            await asyncio.wrap_future(env.coordinator.setup())
            await asyncio.wait_for(cell.refresh, 5)
            subscription.cancel()
            return values, waiting

        values, waiting = asyncio.run(scenario())

        assert waiting
        assert values[0] is None
        stored = env.store.get("FR")
        assert stored.currency.rate.value == 0.92
        assert stored.visa.info == "Visa not required"
        assert values[-1] == stored
        env.rate_source.convert.assert_called_once_with("USD_EUR", "y")
        env.visa_source.visa_requirements.assert_called_once_with(AUTH, "US-FR")

    def test_cell_observer_may_read_store_during_write_back(self, env):
        env.store.bulk_insert([make_usa(), make_france(rate_age_days=1, visa_age_days=0)])
        in_transform = threading.Event()
        created = threading.Event()
        release = threading.Event()
        seen = []

        def slow_transform(country):
            in_transform.set()
            release.wait(5)
            return country.with_visa(Visa("changed", "US", now_millis()))

        async def scenario():
            cell = env.coordinator.get_country("France", "United States")
            created.set()
            await asyncio.get_running_loop().run_in_executor(None, in_transform.wait, 5)
            subscription = cell.observe(lambda country: seen.append(env.store.get_by_name(country.name)))
            await cell.refresh
            await asyncio.sleep(0.05)
            subscription.cancel()

        writer = threading.Thread(target=env.store.update_with, args=("FR", slow_transform), daemon=True)
        reader = threading.Thread(target=asyncio.run, args=[scenario()], daemon=True)
        reader.start()
        assert created.wait(5)
        writer.start()
        assert in_transform.wait(5)
        time.sleep(0.1)  # reader now observes and waits for the store lock
        release.set()
        writer.join(5)
        reader.join(5)

        assert not writer.is_alive()
        assert not reader.is_alive()
        assert seen
        assert all(country.visa.info == "changed" for country in seen)

    def test_losing_last_observer_cancels_refresh(self, env):
        france = make_france(rate_age_days=40, visa_age_days=0)
        env.store.bulk_insert([make_usa(), france])
        release = threading.Event()

        def slow_convert(pair_key, response_format):
            release.wait(5)
            return ApiSuccessResponse(RateBody(0.92))

        env.rate_source.convert.side_effect = slow_convert

        async def scenario():
            cell = env.coordinator.get_country("France", "United States")
            subscription = cell.observe(lambda country: None)
            await asyncio.sleep(0.05)
            subscription.cancel()
            await asyncio.wait({cell.refresh})
            release.set()
            return cell

        cell = asyncio.run(scenario())
        assert cell.refresh.cancelled()
        assert not env.store.find_by_name("France").has_observers
        assert env.store.get("FR") == france

    def test_requires_running_event_loop(self, env):
        with pytest.raises(RuntimeError):
            env.coordinator.get_country("France")
