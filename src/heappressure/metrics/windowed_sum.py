"""
Moving-window sum over a ring of time buckets.

WindowedSum accumulates millisecond amounts (GC pause durations) and reports
the sum for the active bucket. Time-based rotation is self-driving: every
add() and total() call first catches the ring up with the clock, so no
background timer or thread is needed and behaviour is deterministic under a
simulated clock.
"""

import logging
import threading
import time
from datetime import timedelta
from typing import Callable, List, Union

from ..validation import ValidationError, validate_duration_seconds

logger = logging.getLogger(__name__)

Duration = Union[float, int, timedelta]


class WindowedSum:
    """
    A moving-window sum backed by a fixed ring of accumulators.

    Every recorded amount is added to all buckets; only the active bucket is
    read. When a bucket duration elapses the bucket about to become active is
    cleared and the active index advances, so the active bucket always holds
    the amounts recorded since the last rotation boundary.

    Thread safety:
        add() and total() may be called from any number of threads. Bucket
        mutation happens under a short lock; rotation is additionally guarded
        by a try-acquire so only one thread walks the ring while others carry
        on. When no rotation is due the check is a single timestamp comparison.

    Attributes:
        bucket_count: Number of buckets in the ring.
        bucket_duration: Seconds each bucket stays active.
        lookback: Configured trailing duration in seconds.
    """

    def __init__(
        self,
        lookback: Duration,
        bucket_duration: Duration,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            lookback: Trailing duration covered by the ring (seconds or timedelta).
            bucket_duration: Duration of one bucket (seconds or timedelta).
            clock: Monotonic clock returning seconds.

        Raises:
            ValidationError: If either duration is not positive, or lookback is
                shorter than bucket_duration.
        """
        self._lookback = validate_duration_seconds(lookback, field_name="lookback")
        self._bucket_duration = validate_duration_seconds(
            bucket_duration, field_name="bucket_duration"
        )
        if self._lookback < self._bucket_duration:
            raise ValidationError(
                f"lookback ({self._lookback}s) must be >= bucket_duration "
                f"({self._bucket_duration}s)",
                field_name="lookback",
                value=lookback,
            )

        self._bucket_count = max(1, round(self._lookback / self._bucket_duration))
        self._clock = clock

        self._buckets: List[int] = [0] * self._bucket_count
        self._current_index = 0
        self._last_rotation_time = clock()

        # Reentrant: a CPython collection can fire its callbacks, and so re-enter
        # add(), on a thread that is already inside the critical section.
        self._lock = threading.RLock()
        self._rotation_guard = threading.Lock()

        logger.debug(
            f"WindowedSum created: {self._bucket_count} buckets of "
            f"{self._bucket_duration}s covering {self._lookback}s"
        )

    @property
    def bucket_count(self) -> int:
        return self._bucket_count

    @property
    def bucket_duration(self) -> float:
        return self._bucket_duration

    @property
    def lookback(self) -> float:
        return self._lookback

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def last_rotation_time(self) -> float:
        return self._last_rotation_time

    def add(self, amount: int) -> None:
        """
        Record an amount, in milliseconds.

        Raises:
            ValidationError: If amount is negative.
        """
        if amount < 0:
            raise ValidationError(
                f"amount must be >= 0, got {amount}", field_name="amount", value=amount
            )
        self._rotate()
        with self._lock:
            for i in range(self._bucket_count):
                self._buckets[i] += amount

    def total(self) -> int:
        """
        Returns:
            The sum, in milliseconds, recorded in the active bucket.
        """
        self._rotate()
        with self._lock:
            return self._buckets[self._current_index]

    def reset(self) -> None:
        """Clear every bucket and restart the rotation schedule from now."""
        with self._lock:
            self._buckets = [0] * self._bucket_count
            self._current_index = 0
            self._last_rotation_time = self._clock()

    def _rotate(self) -> None:
        if self._clock() - self._last_rotation_time < self._bucket_duration:
            return

        if not self._rotation_guard.acquire(blocking=False):
            # Rotation already in progress.
            return

        try:
            with self._lock:
                elapsed = self._clock() - self._last_rotation_time
                steps = 0
                while elapsed >= self._bucket_duration and steps < self._bucket_count:
                    next_index = (self._current_index + 1) % self._bucket_count
                    self._buckets[next_index] = 0
                    self._current_index = next_index
                    elapsed -= self._bucket_duration
                    self._last_rotation_time += self._bucket_duration
                    steps += 1

                if elapsed >= self._bucket_duration:
                    # Idle for longer than the whole ring: every bucket is already
                    # cleared, so skip straight to the latest boundary.
                    skipped = int(elapsed // self._bucket_duration)
                    self._last_rotation_time += skipped * self._bucket_duration
        finally:
            self._rotation_guard.release()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(lookback={self._lookback}, "
            f"bucket_duration={self._bucket_duration}, buckets={self._bucket_count})"
        )
