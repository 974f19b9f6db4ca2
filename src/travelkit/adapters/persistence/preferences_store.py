# src/travelkit/adapters/persistence/preferences_store.py
"""
Preferences Store - User Preferences

Stores the traveler's origin country and the first-launch flag in a small
JSON file. The first-launch flag is also exposed as a live value.

Files that USE this module:
- travelkit.application.country_coordinator (reads the current origin)
- travelkit.app (origin command, first-launch handling)

Files that this module USES:
- travelkit.shared.live (LiveValue for the first-launch flag)
"""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from travelkit.shared.live import LiveValue

logger = logging.getLogger(__name__)


class PreferencesStore:
    """Store and retrieve user preferences."""

    def __init__(self, store_file: Path, default_origin: str):
        """
        Initialize preferences store.

        Args:
            store_file: Path to JSON file for storing preferences
            default_origin: Origin country name used until the user picks one
        """
        self.store_file = Path(store_file)
        self.store_file.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._origin = default_origin
        self._first_launch = True
        self._load()
        self._first_launch_live: LiveValue[bool] = LiveValue(self._first_launch)

    def _load(self) -> None:
        if not self.store_file.exists():
            logger.info("No preferences file found")
            return

        try:
            with self.store_file.open("r", encoding="utf-8") as f:
                data = json.load(f)
            self._origin = str(data.get("origin") or self._origin)
            self._first_launch = bool(data.get("is_first_launch", True))
            logger.info("Loaded preferences: origin=%s", self._origin)
        except (OSError, ValueError, AttributeError) as e:
            logger.error("Failed to load preferences: %s", e)

    def _save(self) -> None:
        data = {"origin": self._origin, "is_first_launch": self._first_launch}
        try:
            with self.store_file.open("w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            logger.debug("Saved preferences: %s", data)
        except OSError as e:
            logger.error("Failed to save preferences: %s", e)

    @property
    def origin(self) -> str:
        """Name of the traveler's origin country."""
        return self._origin

    @origin.setter
    def origin(self, name: str) -> None:
        with self._lock:
            if self._origin != name:
                self._origin = name
                self._save()
                logger.info("Origin set: %s", name)

    @property
    def is_first_launch(self) -> bool:
        return self._first_launch

    @is_first_launch.setter
    def is_first_launch(self, value: bool) -> None:
        with self._lock:
            if self._first_launch == value:
                return
            self._first_launch = value
            self._save()
        self._first_launch_live.set_value(value)

    def is_first_launch_live(self) -> LiveValue[bool]:
        """Live first-launch flag; re-emits whenever the flag is set."""
        return self._first_launch_live
