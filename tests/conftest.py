"""
Pytest configuration and shared fixtures for the heappressure test suite.

This module provides common fixtures, test utilities, and configuration
for all test modules.
"""

import shutil
import sys
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict
from unittest.mock import Mock, patch

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from heappressure.config import clear_config_cache  # noqa: E402
from heappressure.runtime import SyntheticRuntime  # noqa: E402

MB = 1024 * 1024


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Test Utilities
# ============================================================================


class ManualClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self._lock = threading.Lock()

    def __call__(self) -> float:
        with self._lock:
            return self.now

    def advance(self, seconds: float) -> None:
        with self._lock:
            self.now += seconds


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def clock():
    """A manually advanced clock."""
    return ManualClock()


@pytest.fixture
def runtime():
    """A HotSpot-like synthetic runtime with a 256MB G1 old gen."""
    return SyntheticRuntime.hotspot_like(old_gen_max=256 * MB)


@pytest.fixture
def young_collector(runtime):
    return runtime.collector("G1 Young Generation")


@pytest.fixture
def old_collector(runtime):
    return runtime.collector("G1 Old Generation")


@pytest.fixture(autouse=True)
def reset_config_cache():
    """Make sure no test sees configuration cached by another."""
    clear_config_cache()
    yield
    clear_config_cache()


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def mock_process():
    """A psutil.Process stand-in with fixed memory counters."""
    process = Mock()
    process.pid = 12345
    process.memory_info.return_value = Mock(rss=64 * MB, vms=512 * MB)
    process.rlimit.return_value = (-1, -1)
    return process


@pytest.fixture
def mock_virtual_memory():
    """Report 1GB of physical memory."""
    with patch("heappressure.runtime.cpython.psutil.virtual_memory") as mock_vm:
        mock_vm.return_value = Mock(total=1024 * MB)
        yield mock_vm


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def sample_config_data() -> Dict[str, Any]:
    """Sample [monitor] table for testing."""
    return {
        "window": {
            "lookback_seconds": 60.0,
            "sample_interval_seconds": 2.0,
        },
        "pools": {
            "old_gen_suffixes": ["Old Gen", "Tenured Gen"],
        },
        "collection": {
            "concurrent_phase_causes": ["No GC"],
        },
    }


@pytest.fixture
def config_file(temp_dir, sample_config_data):
    """Write sample_config_data to a temporary config.toml."""
    import toml

    config_path = temp_dir / "config.toml"
    with open(config_path, "w") as f:
        toml.dump({"monitor": sample_config_data}, f)
    return config_path
