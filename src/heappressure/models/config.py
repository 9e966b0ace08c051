"""
Configuration data models.

This module contains the configuration structures for the heap pressure
monitor, loaded from `config.toml`.
"""

from dataclasses import dataclass, field
from typing import List

DEFAULT_OLD_GEN_SUFFIXES = ["Old Gen", "Tenured Gen"]
DEFAULT_CONCURRENT_PHASE_CAUSES = ["No GC"]


@dataclass
class MonitorConfig:
    """
    Configuration for the heap pressure monitor, loaded from `config.toml`.
    """

    # [monitor.window]
    # Trailing duration over which GC overhead is computed.
    lookback_seconds: float = 300.0
    # Bucket granularity of the trailing window.
    sample_interval_seconds: float = 1.0

    # [monitor.pools]
    # Pool name suffixes recognised as the old generation.
    old_gen_suffixes: List[str] = field(
        default_factory=lambda: list(DEFAULT_OLD_GEN_SUFFIXES)
    )

    # [monitor.collection]
    # Cause strings reported for cycles that did not pause the application.
    concurrent_phase_causes: List[str] = field(
        default_factory=lambda: list(DEFAULT_CONCURRENT_PHASE_CAUSES)
    )


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    monitor: MonitorConfig
