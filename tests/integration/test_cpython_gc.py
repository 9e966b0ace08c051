"""
Integration tests running the monitor against the live interpreter's
garbage collector.
"""

import gc

import pytest

from heappressure import HeapPressureMonitor
from heappressure.runtime.cpython import PROCESS_POOL_NAME


class Node:
    def __init__(self):
        self.peer = None


def make_garbage_cycles(count: int = 1000) -> None:
    for _ in range(count):
        a, b = Node(), Node()
        a.peer, b.peer = b, a


@pytest.mark.integration
class TestLiveInterpreter:
    """Test cases using real gc.collect() cycles."""

    def test_collection_updates_both_signals(self):
        with HeapPressureMonitor(lookback=60, sample_interval=1) as monitor:
            assert monitor.old_gen_pool_name == PROCESS_POOL_NAME
            assert monitor.old_gen_max_capacity > 0

            make_garbage_cycles()
            gc.collect()

            ratio = monitor.old_gen_usage_ratio()
            assert 0.0 < ratio <= 1.0
            assert monitor.pause_sum.total() >= 0
            assert monitor.gc_overhead_ratio() >= 0.0

    def test_close_removes_gc_hook(self):
        monitor = HeapPressureMonitor(lookback=60, sample_interval=1)
        hook_count = len(gc.callbacks)

        monitor.close()
        monitor.close()

        assert len(gc.callbacks) == hook_count - 1

    def test_no_updates_after_close(self):
        monitor = HeapPressureMonitor(lookback=60, sample_interval=1)
        monitor.close()

        gc.collect()

        assert monitor.old_gen_usage_ratio() == 0.0
