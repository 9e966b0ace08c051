"""
ManagedRuntime adapter for the running CPython interpreter.

CPython has no per-generation byte accounting, so the adapter exposes a
single heap pool, "Python Tenured Gen", backed by the process's resident set
size (via psutil) and bounded by the address-space rlimit when one is set,
else by physical memory. Collection cycles are observed through
``gc.callbacks``: each "start"/"stop" pair becomes one CollectionNotification
whose duration is the measured pause. A generation-0 pass that collects
nothing is reported with the "No GC" cause, and only generation 1 and 2
passes carry a pool usage snapshot.
"""

import gc
import itertools
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional

import psutil

from ..models.runtime import CollectionNotification, MemoryType, MemoryUsage
from ..validation import (
    ErrorSeverity,
    ListenerNotFoundError,
    PoolUsageError,
    handle_error,
)
from .base import (
    CollectionEventSource,
    ManagedRuntime,
    MemoryPool,
    NotificationHandler,
    SubscriptionHandle,
    read_pool_usage,
)
from .classifiers import NO_GC_CAUSE

logger = logging.getLogger(__name__)

PROCESS_POOL_NAME = "Python Tenured Gen"
COLLECTOR_NAME = "CPython Cyclic GC"
OLDEST_GENERATION = 2


class ProcessMemoryPool(MemoryPool):
    """
    Heap pool backed by the current process's memory counters.

    Attributes:
        process: psutil handle of the monitored process.
    """

    def __init__(self, process: Optional[psutil.Process] = None, name: str = PROCESS_POOL_NAME):
        self._name = name
        self.process = process or psutil.Process()
        self._max: Optional[int] = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def pool_type(self) -> MemoryType:
        return MemoryType.HEAP

    def usage(self) -> Optional[MemoryUsage]:
        try:
            info = self.process.memory_info()
            if self._max is None:
                self._max = self._resolve_max()
        except (psutil.Error, OSError) as e:
            raise PoolUsageError(self._name, str(e)) from e
        return MemoryUsage(used=info.rss, committed=info.vms, max=self._max or None)

    def _resolve_max(self) -> int:
        rlimit_as = getattr(psutil, "RLIMIT_AS", None)
        if rlimit_as is not None and hasattr(self.process, "rlimit"):
            soft, _hard = self.process.rlimit(rlimit_as)
            if soft not in (psutil.RLIM_INFINITY, -1) and soft > 0:
                return soft
        return psutil.virtual_memory().total


class CPythonGarbageCollector(CollectionEventSource):
    """
    Collection event source fed by CPython's ``gc.callbacks`` hook.

    The hook is installed when the first handler subscribes and removed when
    the last one unsubscribes. Handlers run on whichever thread triggered the
    collection.
    """

    def __init__(
        self,
        pool: MemoryPool,
        name: str = COLLECTOR_NAME,
        timer: Callable[[], float] = time.perf_counter,
    ):
        self._name = name
        self._pool = pool
        self._timer = timer
        self._listeners: Dict[SubscriptionHandle, NotificationHandler] = {}
        self._sequence = itertools.count(1)
        self._cycle_ids = itertools.count(1)
        # gc.callbacks may run on a thread that already holds the lock.
        self._lock = threading.RLock()
        self._local = threading.local()
        self._installed = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def installed(self) -> bool:
        """Whether the gc.callbacks hook is currently registered."""
        return self._installed

    def subscribe(self, handler: NotificationHandler) -> SubscriptionHandle:
        handle = SubscriptionHandle(self._name, next(self._sequence))
        with self._lock:
            self._listeners[handle] = handler
            if not self._installed:
                gc.callbacks.append(self._on_gc)
                self._installed = True
                logger.debug(f"Installed gc.callbacks hook for '{self._name}'")
        return handle

    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        with self._lock:
            if self._listeners.pop(handle, None) is None:
                raise ListenerNotFoundError(self._name, handle)
            if not self._listeners and self._installed:
                try:
                    gc.callbacks.remove(self._on_gc)
                except ValueError:
                    logger.debug(f"gc.callbacks hook for '{self._name}' was already removed")
                self._installed = False
                logger.debug(f"Removed gc.callbacks hook for '{self._name}'")

    def _on_gc(self, phase: str, info: Dict[str, Any]) -> None:
        if phase == "start":
            self._local.started = self._timer()
            return
        if phase != "stop":
            return

        started = getattr(self._local, "started", None)
        if started is None:
            # Hook was installed mid-collection.
            return
        self._local.started = None

        duration_ms = int(round((self._timer() - started) * 1000))
        generation = info.get("generation", OLDEST_GENERATION)
        if generation == 0 and info.get("collected", 0) == 0:
            cause = NO_GC_CAUSE
        else:
            cause = f"Generation {generation} collection"

        # Pool usage is sampled on generation 1 and 2 passes only.
        usage_after = {}
        if generation > 0:
            usage = read_pool_usage(self._pool)
            if usage is not None:
                usage_after[self._pool.name] = usage

        notification = CollectionNotification(
            collector=self._name,
            cycle_id=next(self._cycle_ids),
            cause=cause,
            duration_ms=duration_ms,
            usage_after=usage_after,
            action="end of major GC" if generation >= OLDEST_GENERATION else "end of minor GC",
        )

        with self._lock:
            handlers = list(self._listeners.values())
        for handler in handlers:
            try:
                handler(notification)
            except Exception as e:
                # Exceptions raised inside gc callbacks are only reported as unraisable.
                handle_error(
                    error=e,
                    context=f"'{self._name}' notification handler",
                    severity=ErrorSeverity.WARNING,
                    reraise=False,
                    logger=logger,
                )


class CPythonRuntime(ManagedRuntime):
    """The running interpreter, seen as a managed runtime."""

    def __init__(self, process: Optional[psutil.Process] = None):
        self.pool = ProcessMemoryPool(process)
        self.collector = CPythonGarbageCollector(self.pool)

    def memory_pools(self) -> List[MemoryPool]:
        return [self.pool]

    def collectors(self) -> List[CollectionEventSource]:
        return [self.collector]
