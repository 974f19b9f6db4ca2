# src/travelkit/shared/live.py
"""
Live Values - Observable Value Holders

This module provides the small observable primitive shared by the local store
and the coordinator:
- LiveValue: holds the latest value and notifies observers on every change;
  a new observer immediately receives the current value (if any)
- LiveValue.first(): await the next value exactly once, then detach
- MediatorLiveValue: a LiveValue fed by other LiveValues; its sources are
  only observed while the mediator itself has observers

Values may be set from any thread. A LiveValue bound to an event loop
delivers ``post_value`` calls on that loop's thread.

Files that USE this module:
- travelkit.adapters.persistence.country_store (live lookups by name, live names)
- travelkit.adapters.persistence.preferences_store (live first-launch flag)
- travelkit.application.country_coordinator (CountryCell result cell)

Files that this module USES:
- None (pure utility implementation)
"""
from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")

_MISSING: Any = object()

log = logging.getLogger(__name__)


class Subscription:
    """Handle returned by ``LiveValue.observe``; cancelling it detaches the observer."""

    def __init__(self, on_cancel: Callable[[], None]):
        self._on_cancel = on_cancel
        self.cancelled = False

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        self._on_cancel()


class _Observer:
    __slots__ = ("callback", "active", "version")

    def __init__(self, callback: Callable[[Any], None]):
        self.callback = callback
        self.active = True
        self.version = 0


def _in_loop(loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False


class LiveValue(Generic[T]):
    """
    Thread-safe holder of a single value with change observers.

    Observers are always called with no lock held, so a callback may read
    other locked state (or this value) freely. An observer that raises is
    logged and skipped; the remaining observers are still notified.
    """

    def __init__(self, value: Any = _MISSING, loop: Optional[asyncio.AbstractEventLoop] = None):
        """
        Initialize a live value.

        Args:
            value: Optional initial value (observers receive it on subscribe)
            loop: Optional event loop that ``post_value`` delivers on
        """
        self._value = value
        self._version = 0 if value is _MISSING else 1
        self._loop = loop
        self._observers: List[_Observer] = []
        self._lock = threading.RLock()

    @property
    def value(self) -> Optional[T]:
        """Latest value, or None if nothing was set yet."""
        value = self._value
        return None if value is _MISSING else value

    @property
    def has_value(self) -> bool:
        return self._value is not _MISSING

    @property
    def has_observers(self) -> bool:
        with self._lock:
            return bool(self._observers)

    def set_value(self, value: T) -> None:
        """Store ``value`` and notify every active observer in the calling thread."""
        self.stage(value)()

    def stage(self, value: T) -> Callable[[], None]:
        """
        Store ``value`` now and return a callable that notifies observers of it.

        An owner that orders writes under its own lock stages while holding it
        and notifies after releasing it. Observers never see a value older
        than one they already received.
        """
        with self._lock:
            self._value = value
            self._version += 1
            version = self._version
            observers = list(self._observers)

        def notify() -> None:
            for observer in observers:
                self._deliver(observer, value, version)

        return notify

    def post_value(self, value: T) -> None:
        """
        Set the value on the bound event loop.

        Called from the loop thread (or on an unbound LiveValue) this is
        ``set_value``; from any other thread the update is scheduled on the loop.
        """
        loop = self._loop
        if loop is None or _in_loop(loop):
            self.set_value(value)
        else:
            loop.call_soon_threadsafe(self.set_value, value)

    def observe(self, callback: Callable[[T], None]) -> Subscription:
        """
        Register an observer.

        The observer is called with the current value right away when one is
        set, then with every later value until the subscription is cancelled.
        """
        observer = _Observer(callback)
        with self._lock:
            current, version = self._value, self._version
            self._observers.append(observer)
            activate = len(self._observers) == 1
        if current is not _MISSING:
            self._deliver(observer, current, version)
        # activation may emit, so it runs after the current value was delivered
        if activate and observer.active:
            self._on_active()
        return Subscription(lambda: self._remove(observer))

    def _deliver(self, observer: _Observer, value: T, version: int) -> None:
        with self._lock:
            # skip values older than one this observer already received
            if not observer.active or observer.version >= version:
                return
            observer.version = version
        try:
            observer.callback(value)
        except Exception:
            log.exception("Live value observer %r failed", observer.callback)

    def _remove(self, observer: _Observer) -> None:
        with self._lock:
            observer.active = False
            if observer not in self._observers:
                return
            self._observers.remove(observer)
            deactivate = not self._observers
        if deactivate:
            self._on_inactive()

    def _on_active(self) -> None:
        """Hook: the first observer was added. Called with no lock held."""

    def _on_inactive(self) -> None:
        """Hook: the last observer was removed. Called with no lock held."""

    async def first(self, accept: Optional[Callable[[T], bool]] = None) -> T:
        """
        Wait for the next value (the current one if set) and detach.

        Args:
            accept: Optional predicate; values it rejects are skipped

        The observer is removed as soon as an accepted value arrives, or when
        the awaiting task is cancelled.
        """
        loop = asyncio.get_running_loop()
        fut: asyncio.Future = loop.create_future()

        def _resolve(value: T) -> None:
            if not fut.done():
                fut.set_result(value)

        def _once(value: T) -> None:
            if accept is not None and not accept(value):
                return
            if _in_loop(loop):
                _resolve(value)
            else:
                loop.call_soon_threadsafe(_resolve, value)

        subscription = self.observe(_once)
        try:
            return await fut
        finally:
            subscription.cancel()


class MediatorLiveValue(LiveValue[T]):
    """
    LiveValue driven by other LiveValues.

    Each source is paired with a callback; source subscriptions exist only
    while the mediator is observed, so an unobserved mediator holds no
    references into its sources' observer lists.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        super().__init__(loop=loop)
        self._sources: Dict[int, Tuple[LiveValue, Callable[[Any], None], Optional[Subscription]]] = {}

    def add_source(self, source: LiveValue, on_change: Callable[[Any], None]) -> None:
        with self._lock:
            if id(source) in self._sources:
                raise ValueError("source already added")
            self._sources[id(source)] = (source, on_change, None)
            active = bool(self._observers)
        if active:
            self._subscribe_pending()

    def remove_source(self, source: LiveValue) -> None:
        with self._lock:
            entry = self._sources.pop(id(source), None)
        if entry and entry[2] is not None:
            entry[2].cancel()

    def _subscribe_pending(self) -> None:
        with self._lock:
            pending = [(key, source, on_change)
                       for key, (source, on_change, subscription) in self._sources.items()
                       if subscription is None]
        for key, source, on_change in pending:
            subscription = source.observe(on_change)
            with self._lock:
                entry = self._sources.get(key)
                keep = entry is not None and entry[2] is None and bool(self._observers)
                if keep:
                    self._sources[key] = (source, on_change, subscription)
            if not keep:
                subscription.cancel()

    def _on_active(self) -> None:
        self._subscribe_pending()

    def _on_inactive(self) -> None:
        with self._lock:
            if self._observers:
                return
            subscriptions = [entry[2] for entry in self._sources.values() if entry[2] is not None]
            for key, (source, on_change, _) in list(self._sources.items()):
                self._sources[key] = (source, on_change, None)
        for subscription in subscriptions:
            subscription.cancel()
