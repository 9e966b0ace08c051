"""
Runtime data models.

This module contains the value types exchanged with the managed runtime's
memory and collection subsystems: pool usage snapshots and the per-cycle
collection notification.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class MemoryType(Enum):
    """Kind of memory a pool belongs to."""
    HEAP = "heap"
    NON_HEAP = "non_heap"


@dataclass(frozen=True)
class MemoryUsage:
    """
    Snapshot of a memory pool's usage, in bytes.

    Attributes:
        used: Bytes currently occupied.
        committed: Bytes reserved by the runtime for the pool.
        max: Upper bound the pool may grow to, None when undefined.
    """

    used: int
    committed: int = 0
    max: Optional[int] = None


@dataclass(frozen=True)
class CollectionNotification:
    """
    One completed collection cycle, as reported by a collector.

    Attributes:
        collector: Name of the collector that ran the cycle.
        cycle_id: Sequence number of the cycle within that collector.
        cause: Why the cycle ran. Some collectors report "No GC" for
            concurrent-phase bookkeeping where no pause happened.
        duration_ms: Wall-clock duration of the cycle in milliseconds.
        usage_before: Pool name -> usage right before the cycle.
        usage_after: Pool name -> usage right after the cycle.
        action: Free-text description of the cycle ("end of major GC").
    """

    collector: str
    cycle_id: int
    cause: str
    duration_ms: int
    usage_before: Mapping[str, MemoryUsage] = field(default_factory=dict)
    usage_after: Mapping[str, MemoryUsage] = field(default_factory=dict)
    action: str = ""

    def __post_init__(self):
        # Listeners run on collector threads; keep the maps read-only.
        object.__setattr__(self, "usage_before", MappingProxyType(dict(self.usage_before)))
        object.__setattr__(self, "usage_after", MappingProxyType(dict(self.usage_after)))
