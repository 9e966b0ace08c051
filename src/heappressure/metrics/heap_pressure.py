"""
Heap pressure metrics derived from collection-cycle notifications.

HeapPressureMonitor subscribes to every collector of a ManagedRuntime and
maintains two signals that consumers poll to spot memory pressure before it
turns into an out-of-memory failure:

- old_gen_usage_ratio(): share of the old-generation pool still occupied
  right after the latest collection cycle.
- gc_overhead_ratio(): share of recent wall-clock time spent in collection
  pauses, over a trailing window.
"""

import logging
import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, List, Optional, Tuple, Union

from ..models.config import MonitorConfig
from ..models.runtime import CollectionNotification, MemoryType
from ..runtime.base import (
    CollectionEventSource,
    ManagedRuntime,
    MemoryPool,
    SubscriptionHandle,
    read_pool_usage,
)
from ..runtime.classifiers import (
    CauseClassifier,
    PoolClassifier,
    SentinelCauseClassifier,
    SuffixPoolClassifier,
)
from ..runtime.cpython import CPythonRuntime
from ..validation import (
    ErrorSeverity,
    ListenerNotFoundError,
    handle_error,
    validate_duration_seconds,
)
from .windowed_sum import WindowedSum

logger = logging.getLogger(__name__)

Duration = Union[float, int, timedelta]


@dataclass(frozen=True)
class HeapPressureSnapshot:
    """
    Both heap pressure signals read together.

    Attributes:
        old_gen_usage_ratio: Old-gen occupancy after the latest cycle, [0..1].
        gc_overhead_ratio: Share of the elapsed window spent paused.
        old_gen_pool_name: Pool the occupancy refers to, None if unresolved.
        pause_time_ms: Pause time currently held by the window.
        elapsed_window_ms: Denominator used for gc_overhead_ratio.
    """

    old_gen_usage_ratio: float
    gc_overhead_ratio: float
    old_gen_pool_name: Optional[str]
    pause_time_ms: int
    elapsed_window_ms: float


class HeapPressureMonitor:
    """
    Tracks old-generation occupancy and GC overhead for a managed runtime.

    Subscriptions are made at construction and stay live until close(). The
    notification handler never raises and only touches state owned by the
    monitor, so it may race with close() or with readers on other threads.
    Several monitors can share one runtime.
    """

    def __init__(
        self,
        lookback: Duration,
        sample_interval: Duration,
        runtime: Optional[ManagedRuntime] = None,
        pool_classifier: Optional[PoolClassifier] = None,
        cause_classifier: Optional[CauseClassifier] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            lookback: Trailing window for the overhead ratio.
            sample_interval: Resolution of that window; one bucket per interval.
            runtime: Source of pools and collectors. Defaults to the running
                CPython interpreter.
            pool_classifier: Picks the old-generation pool by name. Defaults to
                the "Old Gen" / "Tenured Gen" suffix match.
            cause_classifier: Recognises concurrent-phase causes. Defaults to
                the "No GC" sentinel.
            clock: Monotonic clock returning seconds.

        Raises:
            ValidationError: If the durations are not positive or
                sample_interval exceeds lookback.
        """
        self._lookback = validate_duration_seconds(lookback, field_name="lookback")
        self._clock = clock
        self._pause_sum = WindowedSum(self._lookback, sample_interval, clock=clock)

        self._runtime = runtime if runtime is not None else CPythonRuntime()
        self._pool_classifier = pool_classifier or SuffixPoolClassifier()
        self._cause_classifier = cause_classifier or SentinelCauseClassifier()

        self._ratio_lock = threading.RLock()
        self._last_old_gen_ratio = 0.0

        self._subscriptions: List[Tuple[CollectionEventSource, SubscriptionHandle]] = []
        self._subscriptions_lock = threading.Lock()
        self._closed = False

        old_gen_pool = self._find_old_gen_pool()
        self._old_gen_pool_name = old_gen_pool.name if old_gen_pool else None
        self._old_gen_max_capacity = self._max_capacity(old_gen_pool)

        if old_gen_pool is None:
            logger.info("No old generation pool found; old gen usage will be reported as 0")
        else:
            logger.info(
                f"Monitoring old generation pool '{self._old_gen_pool_name}' "
                f"(max {self._old_gen_max_capacity} bytes)"
            )

        self._monitor_start_time = clock()
        self._subscribe()

    @classmethod
    def from_config(
        cls,
        config: MonitorConfig,
        runtime: Optional[ManagedRuntime] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> "HeapPressureMonitor":
        """Build a monitor from a validated MonitorConfig."""
        return cls(
            lookback=config.lookback_seconds,
            sample_interval=config.sample_interval_seconds,
            runtime=runtime,
            pool_classifier=SuffixPoolClassifier(config.old_gen_suffixes),
            cause_classifier=SentinelCauseClassifier(config.concurrent_phase_causes),
            clock=clock,
        )

    # --- Properties ---

    @property
    def lookback(self) -> float:
        return self._lookback

    @property
    def monitor_start_time(self) -> float:
        return self._monitor_start_time

    @property
    def old_gen_pool_name(self) -> Optional[str]:
        return self._old_gen_pool_name

    @property
    def old_gen_max_capacity(self) -> int:
        return self._old_gen_max_capacity

    @property
    def pause_sum(self) -> WindowedSum:
        return self._pause_sum

    @property
    def subscription_count(self) -> int:
        with self._subscriptions_lock:
            return len(self._subscriptions)

    @property
    def closed(self) -> bool:
        return self._closed

    # --- Metrics ---

    def old_gen_usage_ratio(self) -> float:
        """
        Returns:
            The share of the old gen pool used after the last GC event, in the
            range [0..1]. 0.0 until a cycle reporting that pool is observed.
        """
        with self._ratio_lock:
            return self._last_old_gen_ratio

    def gc_overhead_ratio(self) -> float:
        """
        Returns:
            An approximation of the share of wall-clock time spent in GC pauses
            over the lookback period, or since monitoring began if that is
            shorter. Nominally in [0..1]; not clamped.
        """
        elapsed_ms = self._elapsed_window_ms()
        if elapsed_ms <= 0:
            return 0.0
        return self._pause_sum.total() / elapsed_ms

    def snapshot(self) -> HeapPressureSnapshot:
        """Read both signals, plus the values they are computed from."""
        elapsed_ms = self._elapsed_window_ms()
        pause_time_ms = self._pause_sum.total()
        overhead = pause_time_ms / elapsed_ms if elapsed_ms > 0 else 0.0
        return HeapPressureSnapshot(
            old_gen_usage_ratio=self.old_gen_usage_ratio(),
            gc_overhead_ratio=overhead,
            old_gen_pool_name=self._old_gen_pool_name,
            pause_time_ms=pause_time_ms,
            elapsed_window_ms=elapsed_ms,
        )

    # --- Lifecycle ---

    def close(self) -> None:
        """
        Deregister every subscription made at construction.

        Safe to call more than once and from any thread; only the first call
        does any work. Listeners already removed by the runtime are ignored.
        """
        with self._subscriptions_lock:
            subscriptions = self._subscriptions
            self._subscriptions = []
            already_closed = self._closed
            self._closed = True

        if already_closed:
            return

        for source, handle in subscriptions:
            try:
                source.unsubscribe(handle)
            except ListenerNotFoundError:
                logger.debug(f"Listener on '{source.name}' was already removed")
            except Exception as e:
                handle_error(
                    error=e,
                    context=f"unsubscribing from '{source.name}'",
                    severity=ErrorSeverity.WARNING,
                    reraise=False,
                    logger=logger,
                )

        logger.info(f"Heap pressure monitor closed ({len(subscriptions)} subscriptions released)")

    def __enter__(self) -> "HeapPressureMonitor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # --- Internals ---

    def _on_notification(self, notification: CollectionNotification) -> None:
        if self._closed:
            return
        try:
            if not self._cause_classifier.is_concurrent_phase(notification.cause):
                self._pause_sum.add(notification.duration_ms)

            if self._old_gen_pool_name is None:
                return
            usage = notification.usage_after.get(self._old_gen_pool_name)
            if usage is None:
                return

            if self._old_gen_max_capacity > 0:
                ratio = usage.used / self._old_gen_max_capacity
            else:
                ratio = 0.0
            with self._ratio_lock:
                self._last_old_gen_ratio = ratio
        except Exception as e:
            handle_error(
                error=e,
                context=f"processing notification from '{notification.collector}'",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )

    def _elapsed_window_ms(self) -> float:
        elapsed = min(self._clock() - self._monitor_start_time, self._lookback)
        return max(elapsed, 0.0) * 1000.0

    def _find_old_gen_pool(self) -> Optional[MemoryPool]:
        for pool in self._runtime.memory_pools():
            if pool.pool_type is MemoryType.HEAP and self._pool_classifier.is_old_gen(pool.name):
                return pool
        return None

    @staticmethod
    def _max_capacity(pool: Optional[MemoryPool]) -> int:
        if pool is None:
            return 0
        usage = read_pool_usage(pool)
        if usage is None or usage.max is None or usage.max <= 0:
            return 0
        return usage.max

    def _subscribe(self) -> None:
        for collector in self._runtime.collectors():
            if not collector.supports_notifications:
                logger.debug(f"Collector '{collector.name}' does not emit notifications; skipped")
                continue
            try:
                handle = collector.subscribe(self._on_notification)
            except Exception:
                # Leave nothing registered if construction fails part way.
                self.close()
                raise
            with self._subscriptions_lock:
                self._subscriptions.append((collector, handle))
            logger.debug(f"Subscribed to collection notifications from '{collector.name}'")
