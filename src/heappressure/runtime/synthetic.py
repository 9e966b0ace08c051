"""
In-process synthetic runtime.

SyntheticRuntime implements the ManagedRuntime interfaces without a real
collector behind them: pools hold whatever usage they are given, and
collectors deliver notifications synchronously from the thread that calls
emit(). It drives the monitor in tests and lets applications feed collection
events from their own sources.
"""

import itertools
import logging
import threading
from typing import Dict, Iterable, List, Mapping, Optional

from ..models.runtime import CollectionNotification, MemoryType, MemoryUsage
from ..validation import (
    ListenerNotFoundError,
    NotificationsUnsupportedError,
    PoolUsageError,
)
from .base import (
    CollectionEventSource,
    ManagedRuntime,
    MemoryPool,
    NotificationHandler,
    SubscriptionHandle,
)

logger = logging.getLogger(__name__)


class SyntheticMemoryPool(MemoryPool):
    """A memory pool whose usage is set by the caller."""

    def __init__(
        self,
        name: str,
        pool_type: MemoryType = MemoryType.HEAP,
        usage: Optional[MemoryUsage] = None,
    ):
        self._name = name
        self._pool_type = pool_type
        self._usage = usage
        self._failure: Optional[str] = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def pool_type(self) -> MemoryType:
        return self._pool_type

    def usage(self) -> Optional[MemoryUsage]:
        if self._failure is not None:
            raise PoolUsageError(self._name, self._failure)
        return self._usage

    def set_usage(self, usage: Optional[MemoryUsage]) -> None:
        self._usage = usage

    def fail_with(self, reason: Optional[str]) -> None:
        """Make usage() raise PoolUsageError until called again with None."""
        self._failure = reason

    def __repr__(self) -> str:
        return f"SyntheticMemoryPool({self._name!r}, {self._pool_type.value})"


class SyntheticCollector(CollectionEventSource):
    """
    A collector that delivers notifications on demand.

    Listener registration is thread safe; emit() snapshots the live listeners
    and calls each one from the calling thread.
    """

    def __init__(self, name: str, supports_notifications: bool = True):
        self._name = name
        self._supports_notifications = supports_notifications
        self._listeners: Dict[SubscriptionHandle, NotificationHandler] = {}
        self._sequence = itertools.count(1)
        self._cycle_ids = itertools.count(1)
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def supports_notifications(self) -> bool:
        return self._supports_notifications

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def subscribe(self, handler: NotificationHandler) -> SubscriptionHandle:
        if not self._supports_notifications:
            raise NotificationsUnsupportedError(self._name)
        handle = SubscriptionHandle(self._name, next(self._sequence))
        with self._lock:
            self._listeners[handle] = handler
        return handle

    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        with self._lock:
            if self._listeners.pop(handle, None) is None:
                raise ListenerNotFoundError(self._name, handle)

    def remove_all(self) -> None:
        """Drop every listener, as if the runtime removed them externally."""
        with self._lock:
            self._listeners.clear()

    def emit(self, notification: CollectionNotification) -> int:
        """
        Deliver a notification to every registered listener.

        Returns:
            Number of listeners invoked.
        """
        with self._lock:
            handlers = list(self._listeners.values())
        for handler in handlers:
            handler(notification)
        return len(handlers)

    def collect(
        self,
        cause: str,
        duration_ms: int,
        usage_after: Optional[Mapping[str, MemoryUsage]] = None,
        usage_before: Optional[Mapping[str, MemoryUsage]] = None,
        action: str = "",
    ) -> CollectionNotification:
        """Build a notification for this collector, emit it and return it."""
        notification = CollectionNotification(
            collector=self._name,
            cycle_id=next(self._cycle_ids),
            cause=cause,
            duration_ms=duration_ms,
            usage_before=usage_before or {},
            usage_after=usage_after or {},
            action=action,
        )
        self.emit(notification)
        return notification

    def __repr__(self) -> str:
        return f"SyntheticCollector({self._name!r})"


class SyntheticRuntime(ManagedRuntime):
    """A runtime assembled from synthetic pools and collectors."""

    def __init__(
        self,
        pools: Iterable[MemoryPool] = (),
        collectors: Iterable[CollectionEventSource] = (),
    ):
        self._pools: List[MemoryPool] = list(pools)
        self._collectors: List[CollectionEventSource] = list(collectors)

    def memory_pools(self) -> List[MemoryPool]:
        return list(self._pools)

    def collectors(self) -> List[CollectionEventSource]:
        return list(self._collectors)

    def pool(self, name: str) -> MemoryPool:
        for pool in self._pools:
            if pool.name == name:
                return pool
        raise KeyError(name)

    def collector(self, name: str) -> CollectionEventSource:
        for collector in self._collectors:
            if collector.name == name:
                return collector
        raise KeyError(name)

    @classmethod
    def hotspot_like(
        cls,
        old_gen_max: Optional[int] = 256 * 1024 * 1024,
        prefix: str = "G1",
    ) -> "SyntheticRuntime":
        """
        Build a runtime laid out like a HotSpot JVM: eden, survivor and old
        generation heap pools, a metaspace pool, and young/old collectors.
        """
        pools = [
            SyntheticMemoryPool(f"{prefix} Eden Space", usage=MemoryUsage(used=0)),
            SyntheticMemoryPool(f"{prefix} Survivor Space", usage=MemoryUsage(used=0)),
            SyntheticMemoryPool(
                f"{prefix} Old Gen", usage=MemoryUsage(used=0, max=old_gen_max)
            ),
            SyntheticMemoryPool("Metaspace", MemoryType.NON_HEAP, MemoryUsage(used=0)),
        ]
        collectors = [
            SyntheticCollector(f"{prefix} Young Generation"),
            SyntheticCollector(f"{prefix} Old Generation"),
        ]
        logger.debug(f"Built synthetic {prefix} runtime with {len(pools)} pools")
        return cls(pools, collectors)
