"""
Heap pressure metrics: the moving-window pause sum and the monitor that
derives old-gen occupancy and GC overhead from collection notifications.
"""

from .heap_pressure import HeapPressureMonitor, HeapPressureSnapshot
from .windowed_sum import WindowedSum

__all__ = [
    "HeapPressureMonitor",
    "HeapPressureSnapshot",
    "WindowedSum",
]
