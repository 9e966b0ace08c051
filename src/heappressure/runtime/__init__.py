"""
Runtime collaborators: the interfaces the monitor consumes, the classifiers
that interpret pool names and collection causes, and two implementations
(a synthetic runtime and the running CPython interpreter).
"""

from .base import (
    CollectionEventSource,
    ManagedRuntime,
    MemoryPool,
    NotificationHandler,
    SubscriptionHandle,
    read_pool_usage,
)
from .classifiers import (
    NO_GC_CAUSE,
    CauseClassifier,
    PoolClassifier,
    SentinelCauseClassifier,
    SuffixPoolClassifier,
)
from .cpython import CPythonGarbageCollector, CPythonRuntime, ProcessMemoryPool
from .synthetic import SyntheticCollector, SyntheticMemoryPool, SyntheticRuntime

__all__ = [
    # Interfaces
    "CollectionEventSource",
    "ManagedRuntime",
    "MemoryPool",
    "NotificationHandler",
    "SubscriptionHandle",
    "read_pool_usage",
    # Classifiers
    "NO_GC_CAUSE",
    "CauseClassifier",
    "PoolClassifier",
    "SentinelCauseClassifier",
    "SuffixPoolClassifier",
    # Implementations
    "CPythonGarbageCollector",
    "CPythonRuntime",
    "ProcessMemoryPool",
    "SyntheticCollector",
    "SyntheticMemoryPool",
    "SyntheticRuntime",
]
