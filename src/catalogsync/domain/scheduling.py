"""Serialized periodic execution of sync cycles."""

from __future__ import annotations

import threading
import time
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.domain.data_integration import SyncOutcome
from catalogsync.domain.errors import UnexpectedFault

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)


class SyncScheduler:
    """Run a sync cycle once immediately and then on a fixed interval.

    A single "cycle in progress" slot guards execution (``try_start`` /
    ``on_complete``). A tick or trigger arriving while a cycle runs is deferred and
    executed right after that cycle completes; deferred requests coalesce into one
    follow-up run, which is dropped once the scheduler has been stopped.
    """

    def __init__(
        self,
        cycle: Callable[[], SyncOutcome],
        *,
        interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("Sync interval must be positive")
        self._cycle = cycle
        self._interval = interval_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._running = False
        self._pending = False
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.last_outcome: SyncOutcome | None = None
        self.cycles_run = 0

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def is_running_cycle(self) -> bool:
        with self._lock:
            return self._running

    def try_start(self) -> bool:
        """Claim the cycle slot; when it is taken, remember the request and return ``False``."""

        with self._lock:
            if self._running:
                self._pending = True
                return False
            self._running = True
            return True

    def on_complete(self) -> bool:
        """Finish a cycle and report whether a deferred run inherits the slot.

        The slot stays claimed for the deferred run, so no other trigger can start in
        between. Once ``stop`` has been requested, deferred runs are dropped.
        """

        with self._lock:
            rerun = self._pending and not self._stop.is_set()
            self._pending = False
            self._running = rerun
            return rerun

    def trigger(self) -> SyncOutcome | None:
        """Run a cycle now, or defer it if one is already running."""

        if not self.try_start():
            log.info("Sync cycle already in progress; deferring until it completes")
            return None
        while True:
            try:
                outcome = self._execute()
            except BaseException:
                self._release()
                raise
            if not self.on_complete():
                return outcome
            log.info("Running deferred sync cycle")

    def run_forever(self) -> None:
        """Run eagerly, then every interval, until ``stop`` is called."""

        log.info("Catalog sync scheduler started (interval=%ss)", self._interval)
        next_tick = self._clock()
        while not self._stop.is_set():
            self.trigger()
            next_tick += self._interval
            delay = next_tick - self._clock()
            if delay <= 0:
                # The cycle overran its slot: the missed tick runs now.
                next_tick = self._clock()
                delay = 0.0
            self._stop.wait(delay)
        log.info("Catalog sync scheduler stopped")

    def start(self) -> threading.Thread:
        """Run the scheduler loop on a daemon thread."""

        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._stop.clear()
        self._thread = threading.Thread(
            target=self.run_forever, name="catalog-sync-scheduler", daemon=True
        )
        self._thread.start()
        return self._thread

    def stop(self, *, timeout: float | None = None) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _execute(self) -> SyncOutcome:
        try:
            outcome = self._cycle()
        except Exception as exc:  # noqa: BLE001
            log.exception("Sync cycle raised; the scheduler keeps running")
            fault = UnexpectedFault(f"Sync cycle raised: {exc!r}")
            fault.__cause__ = exc
            outcome = SyncOutcome(fault=fault)
        self.cycles_run += 1
        self.last_outcome = outcome
        return outcome

    def _release(self) -> None:
        with self._lock:
            self._running = False
            self._pending = False
