"""
Configuration validation utilities.

This module turns the raw `[monitor]` table of `config.toml` into a
validated MonitorConfig.
"""

import logging
from typing import Any, Dict

from ..models.config import (
    DEFAULT_CONCURRENT_PHASE_CAUSES,
    DEFAULT_OLD_GEN_SUFFIXES,
    MonitorConfig,
)
from ..validation import (
    ValidationError,
    validate_positive_float,
    validate_string_list,
)

logger = logging.getLogger(__name__)


def validate_monitor_config(monitor_data: Dict[str, Any]) -> MonitorConfig:
    """
    Validate and create a MonitorConfig from raw configuration data.

    Args:
        monitor_data: Raw monitor configuration from TOML

    Returns:
        Validated MonitorConfig instance

    Raises:
        ValidationError: If validation fails
    """
    window_settings = monitor_data.get("window", {})
    pool_settings = monitor_data.get("pools", {})
    collection_settings = monitor_data.get("collection", {})

    try:
        lookback_seconds = validate_positive_float(
            window_settings.get("lookback_seconds", 300.0),
            min_value=0.001,  # 1ms minimum
            max_value=86400.0,  # one day maximum
            field_name="monitor.window.lookback_seconds",
        )

        sample_interval_seconds = validate_positive_float(
            window_settings.get("sample_interval_seconds", 1.0),
            min_value=0.001,
            max_value=lookback_seconds,
            field_name="monitor.window.sample_interval_seconds",
        )

        old_gen_suffixes = validate_string_list(
            pool_settings.get("old_gen_suffixes", DEFAULT_OLD_GEN_SUFFIXES),
            field_name="monitor.pools.old_gen_suffixes",
        )

        concurrent_phase_causes = validate_string_list(
            collection_settings.get(
                "concurrent_phase_causes", DEFAULT_CONCURRENT_PHASE_CAUSES
            ),
            field_name="monitor.collection.concurrent_phase_causes",
            allow_empty=True,
        )

        buckets = round(lookback_seconds / sample_interval_seconds)
        if buckets > 100_000:
            logger.warning(
                f"Window of {lookback_seconds}s at {sample_interval_seconds}s resolution "
                f"needs {buckets} buckets; consider a coarser sample interval"
            )

        return MonitorConfig(
            lookback_seconds=lookback_seconds,
            sample_interval_seconds=sample_interval_seconds,
            old_gen_suffixes=old_gen_suffixes,
            concurrent_phase_causes=concurrent_phase_causes,
        )

    except ValidationError as e:
        logger.error(f"Monitor configuration validation failed: {e}")
        raise
