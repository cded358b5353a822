"""Per-interval memoization of fetched series stores."""

from __future__ import annotations

import logging
from concurrent.futures import CancelledError, Executor, Future
from enum import Enum
from threading import Lock
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from models.readings import Interval, Reading, TimeWindow
from services.series_store import SeriesStore, build_store, reading_count

logger = logging.getLogger(__name__)

RangeFetcher = Callable[[int, int], Sequence[Reading]]


class IntervalStatus(str, Enum):
    """Lifecycle of an interval request."""

    idle = "idle"
    pending = "pending"
    ready = "ready"
    failed = "failed"


class IntervalRangeCache:
    """Caches one :data:`SeriesStore` per interval for the lifetime of a session.

    ``now_ns`` is fixed at construction so that every window is anchored to
    the same instant no matter when it is first requested. Concurrent
    requests for the same uncached interval share a single fetch.
    """

    def __init__(self, now_ns: int) -> None:
        self.now_ns = now_ns
        self._stores: Dict[Interval, SeriesStore] = {}
        self._inflight: Dict[Interval, Future[SeriesStore]] = {}
        self._failures: Dict[Interval, str] = {}
        self._lock = Lock()

    def window(self, interval: Interval) -> TimeWindow:
        return TimeWindow(start=self.now_ns - interval.duration_ns, end=self.now_ns)

    def get(self, interval: Interval) -> Optional[SeriesStore]:
        with self._lock:
            return self._stores.get(interval)

    def cached_intervals(self) -> List[Interval]:
        with self._lock:
            return [interval for interval in Interval if interval in self._stores]

    def status(self, interval: Interval) -> IntervalStatus:
        with self._lock:
            if interval in self._stores:
                return IntervalStatus.ready
            if interval in self._inflight:
                return IntervalStatus.pending
            if interval in self._failures:
                return IntervalStatus.failed
            return IntervalStatus.idle

    def failure_reason(self, interval: Interval) -> Optional[str]:
        with self._lock:
            return self._failures.get(interval)

    def get_or_fetch(self, interval: Interval, fetch: RangeFetcher) -> SeriesStore:
        """Return the cached store, fetching and folding it on first use."""
        cached, future, owner = self._claim(interval)
        if cached is not None:
            return cached
        if not owner:
            return future.result()
        return self._load(interval, fetch, future)

    def request(
        self, interval: Interval, fetch: RangeFetcher, executor: Executor
    ) -> IntervalStatus:
        """Start loading ``interval`` in the background unless already cached or loading."""
        cached, future, owner = self._claim(interval)
        if cached is not None:
            return IntervalStatus.ready
        if owner:
            try:
                job = executor.submit(self._load, interval, fetch, future)
            except RuntimeError as exc:
                self._abandon(interval, future, exc)
                raise
            job.add_done_callback(
                lambda done, key=interval, shared=future: self._clear_cancelled(key, shared, done)
            )
        return IntervalStatus.pending

    def _clear_cancelled(
        self, interval: Interval, future: Future[SeriesStore], job: Future[SeriesStore]
    ) -> None:
        # A cancelled job never reached ``_load``, so nothing else resolves ``future``.
        if job.cancelled():
            self._abandon(interval, future, CancelledError())

    def _abandon(
        self, interval: Interval, future: Future[SeriesStore], exc: BaseException
    ) -> None:
        with self._lock:
            if self._inflight.get(interval) is future:
                self._inflight.pop(interval)
            self._failures[interval] = str(exc) or type(exc).__name__
        logger.warning(
            "Interval request abandoned",
            extra={"interval": interval.value, "reason": type(exc).__name__},
        )
        future.set_exception(exc)

    def _claim(
        self, interval: Interval
    ) -> Tuple[Optional[SeriesStore], Optional[Future[SeriesStore]], bool]:
        with self._lock:
            cached = self._stores.get(interval)
            if cached is not None:
                return cached, None, False
            pending = self._inflight.get(interval)
            if pending is not None:
                return None, pending, False
            future: Future[SeriesStore] = Future()
            self._inflight[interval] = future
            self._failures.pop(interval, None)
            return None, future, True

    def _load(
        self, interval: Interval, fetch: RangeFetcher, future: Future[SeriesStore]
    ) -> SeriesStore:
        window = self.window(interval)
        try:
            readings = fetch(window.start, window.end)
            store = build_store(readings)
        except Exception as exc:
            with self._lock:
                self._inflight.pop(interval, None)
                self._failures[interval] = str(exc) or type(exc).__name__
            logger.warning(
                "Interval fetch failed",
                extra={
                    "interval": interval.value,
                    "start": window.start,
                    "end": window.end,
                    "reason": str(exc),
                },
            )
            future.set_exception(exc)
            raise

        # Keyed by the interval that was requested, so late arrivals land in their own slot.
        with self._lock:
            self._stores[interval] = store
            self._inflight.pop(interval, None)
        future.set_result(store)
        logger.info(
            "Cached interval",
            extra={
                "interval": interval.value,
                "sensor_count": len(store),
                "reading_count": reading_count(store),
            },
        )
        return store
