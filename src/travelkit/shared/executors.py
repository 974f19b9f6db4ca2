# src/travelkit/shared/executors.py
"""
Executors - Background Worker Pools

Holds the two thread pools used off the caller's thread:
- disk_io: small fixed-size pool for local store reads and writes
- network_io: separate pool for blocking HTTP calls, awaited from the
  event loop through ``loop.run_in_executor``

Files that USE this module:
- travelkit.application.country_coordinator (setup and write-backs on disk_io,
  remote lookups on network_io)
- travelkit.app (creates and shuts down the pools)

Files that this module USES:
- None (standard library only)
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

log = logging.getLogger(__name__)


@dataclass
class AppExecutors:
    """Disk and network worker pools shared by the application."""
    disk_workers: int = 3
    network_workers: int = 4
    disk_io: ThreadPoolExecutor = field(init=False)
    network_io: ThreadPoolExecutor = field(init=False)

    def __post_init__(self) -> None:
        self.disk_io = ThreadPoolExecutor(max_workers=self.disk_workers, thread_name_prefix="disk-io")
        self.network_io = ThreadPoolExecutor(max_workers=self.network_workers, thread_name_prefix="network-io")

    def shutdown(self, wait: bool = True) -> None:
        """Stop both pools; pending disk writes finish first when ``wait`` is True."""
        log.debug("Shutting down executors (wait=%s)", wait)
        self.network_io.shutdown(wait=wait, cancel_futures=not wait)
        self.disk_io.shutdown(wait=wait)
