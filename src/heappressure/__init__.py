"""
heappressure: memory pressure signals for managed runtimes.

This package derives two health signals from a runtime's collection-cycle
notifications, so consumers can detect memory pressure before it becomes an
out-of-memory failure:

- the fraction of the old-generation pool occupied right after the most
  recent collection cycle;
- the fraction of recent wall-clock time spent paused for collections, over
  a trailing window.

The package is organized into specialized modules:
- metrics: WindowedSum and HeapPressureMonitor
- runtime: collaborator interfaces, classifiers, synthetic and CPython runtimes
- models: data structures and type definitions
- config: TOML configuration loading and validation
- validation: exceptions, error handling and validators

Usage:
    from heappressure import HeapPressureMonitor

    with HeapPressureMonitor(lookback=300, sample_interval=1) as monitor:
        ...
        if monitor.gc_overhead_ratio() > 0.3 and monitor.old_gen_usage_ratio() > 0.9:
            ...
"""

# Main interfaces
from .metrics import HeapPressureMonitor, HeapPressureSnapshot, WindowedSum
from .config import get_config, clear_config_cache, set_config_path

# Model classes for external use
from .models import (
    AppConfig,
    CollectionNotification,
    MemoryType,
    MemoryUsage,
    MonitorConfig,
)

# Runtime collaborators
from .runtime import (
    CollectionEventSource,
    CPythonRuntime,
    ManagedRuntime,
    MemoryPool,
    SentinelCauseClassifier,
    SubscriptionHandle,
    SuffixPoolClassifier,
    SyntheticCollector,
    SyntheticMemoryPool,
    SyntheticRuntime,
)

# Errors
from .validation import (
    HeapPressureError,
    ListenerNotFoundError,
    NotificationsUnsupportedError,
    PoolUsageError,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "HeapPressureMonitor",
    "HeapPressureSnapshot",
    "WindowedSum",
    "get_config",
    "clear_config_cache",
    "set_config_path",
    # Models
    "AppConfig",
    "CollectionNotification",
    "MemoryType",
    "MemoryUsage",
    "MonitorConfig",
    # Runtime
    "CollectionEventSource",
    "CPythonRuntime",
    "ManagedRuntime",
    "MemoryPool",
    "SentinelCauseClassifier",
    "SubscriptionHandle",
    "SuffixPoolClassifier",
    "SyntheticCollector",
    "SyntheticMemoryPool",
    "SyntheticRuntime",
    # Errors
    "HeapPressureError",
    "ListenerNotFoundError",
    "NotificationsUnsupportedError",
    "PoolUsageError",
    "ValidationError",
]
