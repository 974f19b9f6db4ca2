# src/travelkit/app.py
"""
Application Entry Point - Composition Root and Command Line

This module wires the country store, the seed dataset, the remote sources,
the preferences and the executors into a CountryCoordinator, and exposes a
small command line:

    travelkit names                        list known countries
    travelkit country NAME [--origin NAME] show a country, refreshing stale data
    travelkit origin NAME                  remember the traveler's origin country

Files that USE this module:
- travelkit console script (pyproject entry point)

Files that this module USES:
- travelkit.config (settings)
- travelkit.shared.logging_conf (setup_logging)
- travelkit.application.country_coordinator (CountryCoordinator)
- travelkit.adapters.* (store, seed reader, preferences, providers, formatting)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import argparse  # Command line parsing
import asyncio  # Event loop the country cell delivers on
import logging  # Standard library for logging messages and errors
import sys  # System-specific parameters and functions for exit codes
from typing import List, Optional  # Type hints

from travelkit.adapters.formatting.formatter import format_country, format_names  # Plain text output
from travelkit.adapters.persistence.country_store import CountryStore  # Local country store
from travelkit.adapters.persistence.preferences_store import PreferencesStore  # Origin and first-launch flag
from travelkit.adapters.persistence.seed_reader import CountriesJsonReader  # Bundled dataset
from travelkit.adapters.providers.currency_converter import CurrencyConverterProvider  # Exchange rate source
from travelkit.adapters.providers.sherpa import SherpaProvider, basic_auth  # Visa requirements source
from travelkit.application.country_coordinator import CountryCoordinator  # Core orchestration
from travelkit.config import Settings  # Application configuration
from travelkit.domain.errors import CountryNotFoundError, TravelKitError  # Domain errors
from travelkit.shared.executors import AppExecutors  # Disk and network pools
from travelkit.shared.logging_conf import setup_logging  # Logging configuration
from travelkit.shared.validators import sanitize_country_name  # Input cleanup

logger = logging.getLogger(__name__)


def build_coordinator(settings: Settings, executors: AppExecutors) -> CountryCoordinator:
    """Create the coordinator and its collaborators from settings."""
    return CountryCoordinator(
        store=CountryStore(settings.country_store_file),
        seed_reader=CountriesJsonReader(),
        rate_source=CurrencyConverterProvider(),
        visa_source=SherpaProvider(),
        preferences=PreferencesStore(settings.preferences_file, settings.default_origin),
        executors=executors,
        auth_header=basic_auth(settings.sherpa_username, settings.sherpa_password),
        rate_max_age=settings.rate_freshness,
        visa_max_age=settings.visa_freshness,
    )


async def show_country(coordinator: CountryCoordinator, name: str,
                       origin: Optional[str] = None) -> None:
    """
    Print the stored country, then every refreshed version, until the
    refresh round is over.
    """
    cell = coordinator.get_country(name, origin)
    subscription = cell.observe(lambda country: print(format_country(country), end="\n\n"))
    try:
        if cell.refresh is not None:
            # failures are logged by the task itself
            await asyncio.wait({cell.refresh})
    finally:
        subscription.cancel()


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="travelkit", description="Per-country travel data")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("names", help="list known countries")

    country = commands.add_parser("country", help="show a country")
    country.add_argument("name")
    country.add_argument("--origin", help="origin country name (defaults to the saved preference)")

    origin = commands.add_parser("origin", help="set the origin country")
    origin.add_argument("name")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the command line.

    Seeds the store on first use, then executes the requested command.

    Returns:
        Process exit code
    """
    args = _parse_args(argv)

    from travelkit.config import settings

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        log_stdout=settings.log_stdout,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )

    executors = AppExecutors(settings.disk_io_workers, settings.network_io_workers)
    try:
        coordinator = build_coordinator(settings, executors)
        preferences = coordinator.preferences
        if preferences.is_first_launch:
            logger.info("First launch, preparing the country store")
            preferences.is_first_launch = False

        coordinator.setup().result()

        if args.command == "names":
            print(format_names(coordinator.get_country_names().value))
        elif args.command == "origin":
            name = sanitize_country_name(args.name)
            if coordinator.store.get_by_name(name) is None:
                logger.error("Unknown country: %s", name)
                return 1
            preferences.origin = name
            print(f"Origin set to {name}")
        elif args.command == "country":
            name = sanitize_country_name(args.name)
            origin = sanitize_country_name(args.origin) if args.origin else preferences.origin
            # the refresh round only starts once both records are stored
            for known in (name, origin):
                if coordinator.store.get_by_name(known) is None:
                    raise CountryNotFoundError(f"Unknown country: {known}")
            asyncio.run(show_country(coordinator, name, origin))
        return 0
    except TravelKitError as e:
        logger.error("%s", e)
        return 1
    finally:
        executors.shutdown()


if __name__ == "__main__":
    sys.exit(main())
