"""
Defines the interfaces the monitor needs from a managed runtime.

This module provides:
- MemoryPool: an abstract memory region with a name, type and usage snapshot.
- CollectionEventSource: an abstract collector that may deliver one
  CollectionNotification per completed cycle to subscribed handlers.
- SubscriptionHandle: the token returned by subscribe() and passed back to
  unsubscribe().
- ManagedRuntime: enumeration of a runtime's pools and collectors.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..models.runtime import CollectionNotification, MemoryType, MemoryUsage
from ..validation import PoolUsageError

logger = logging.getLogger(__name__)

NotificationHandler = Callable[[CollectionNotification], None]


@dataclass(frozen=True)
class SubscriptionHandle:
    """
    Opaque token identifying one listener registration.

    Attributes:
        source: Name of the event source the listener is registered with.
        sequence: Per-source registration number.
    """

    source: str
    sequence: int


class MemoryPool(ABC):
    """
    Abstract base class for a memory pool exposed by the runtime.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Pool name, e.g. "G1 Old Gen"."""

    @property
    @abstractmethod
    def pool_type(self) -> MemoryType:
        """Whether the pool is part of the heap."""

    @abstractmethod
    def usage(self) -> Optional[MemoryUsage]:
        """
        Current usage snapshot of the pool.

        Returns:
            The snapshot, or None if the runtime has no data for the pool.

        Raises:
            PoolUsageError: On a transient fault while querying the runtime.
        """


class CollectionEventSource(ABC):
    """
    Abstract base class for a collector that can report completed cycles.

    Handlers are invoked asynchronously on the source's own thread(s), once
    per completed cycle.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Collector name, e.g. "G1 Young Generation"."""

    @property
    def supports_notifications(self) -> bool:
        """Whether subscribe() can be used on this collector."""
        return True

    @abstractmethod
    def subscribe(self, handler: NotificationHandler) -> SubscriptionHandle:
        """
        Register a handler for collection notifications.

        Returns:
            A handle to pass to unsubscribe().

        Raises:
            NotificationsUnsupportedError: If supports_notifications is False.
        """

    @abstractmethod
    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        """
        Deregister a handler.

        Raises:
            ListenerNotFoundError: If the handle is not currently registered.
        """


class ManagedRuntime(ABC):
    """
    Abstract base class enumerating a runtime's memory pools and collectors.
    """

    @abstractmethod
    def memory_pools(self) -> List[MemoryPool]:
        """Returns every memory pool the runtime exposes."""

    @abstractmethod
    def collectors(self) -> List[CollectionEventSource]:
        """Returns every collector the runtime exposes."""


def read_pool_usage(pool: MemoryPool) -> Optional[MemoryUsage]:
    """
    Read a pool's usage, treating a transient query fault as "no data".

    Args:
        pool: The pool to query.

    Returns:
        The usage snapshot, or None if it is unavailable.
    """
    try:
        return pool.usage()
    except PoolUsageError as e:
        logger.debug(f"Ignoring unreadable usage for pool '{pool.name}': {e}")
        return None
