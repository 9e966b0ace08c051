"""
Concurrency tests for the window and the monitor.

These run real threads against real clocks with windows wide enough that
no rotation happens during the test, so exact totals can be asserted.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from heappressure.metrics import HeapPressureMonitor, WindowedSum
from heappressure.models import MemoryUsage
from heappressure.runtime import SyntheticRuntime


@pytest.mark.slow
class TestWindowedSumConcurrency:
    """Test cases for concurrent add()/total()."""

    def test_concurrent_adds_are_not_lost(self):
        window = WindowedSum(3600, 600)
        workers, per_worker = 8, 500

        def writer():
            for _ in range(per_worker):
                window.add(3)
                window.total()

        with ThreadPoolExecutor(max_workers=workers) as executor:
            for future in [executor.submit(writer) for _ in range(workers)]:
                future.result()

        assert window.total() == 3 * workers * per_worker

    def test_concurrent_rotation_with_tiny_buckets(self):
        window = WindowedSum(0.05, 0.001)
        errors = []

        def worker():
            try:
                for _ in range(2000):
                    window.add(1)
                    assert window.total() >= 0
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert 0 <= window.current_index < window.bucket_count


@pytest.mark.slow
class TestMonitorConcurrency:
    """Test cases for emitters, readers and close() running together."""

    def test_emitters_readers_and_close(self):
        runtime = SyntheticRuntime.hotspot_like(old_gen_max=1000)
        young = runtime.collector("G1 Young Generation")
        old = runtime.collector("G1 Old Generation")
        monitor = HeapPressureMonitor(3600, 600, runtime=runtime)
        stop = threading.Event()
        errors = []

        def emit(collector, used):
            try:
                for _ in range(300):
                    collector.collect(
                        "Allocation Failure", 1,
                        usage_after={"G1 Old Gen": MemoryUsage(used=used, max=1000)},
                    )
            except Exception as e:
                errors.append(e)

        def read():
            try:
                while not stop.is_set():
                    assert monitor.old_gen_usage_ratio() in (0.0, 0.25, 0.75)
                    assert monitor.gc_overhead_ratio() >= 0.0
            except Exception as e:
                errors.append(e)

        readers = [threading.Thread(target=read) for _ in range(3)]
        emitters = [
            threading.Thread(target=emit, args=(young, 250)),
            threading.Thread(target=emit, args=(old, 750)),
        ]
        for t in readers + emitters:
            t.start()
        for t in emitters:
            t.join()

        closers = [threading.Thread(target=monitor.close) for _ in range(4)]
        for t in closers:
            t.start()
        for t in closers:
            t.join()
        stop.set()
        for t in readers:
            t.join()

        assert errors == []
        assert monitor.pause_sum.total() == 600
        assert young.listener_count == 0
        assert old.listener_count == 0
