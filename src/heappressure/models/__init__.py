"""
Data models for the heap pressure monitor.

Configuration Models:
- Monitor window and classification settings
- Application-wide configuration root

Runtime Models:
- Memory pool usage snapshots and pool types
- Collection-cycle notifications delivered by collectors
"""

# Configuration models
from .config import AppConfig, MonitorConfig

# Runtime models
from .runtime import CollectionNotification, MemoryType, MemoryUsage

__all__ = [
    # Configuration
    "AppConfig",
    "MonitorConfig",
    # Runtime
    "CollectionNotification",
    "MemoryType",
    "MemoryUsage",
]
