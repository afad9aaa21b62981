"""
Pytest configuration and shared fixtures for the procdiag test suite.

This module provides a scripted resource probe, a controllable clock and
temporary directories shared by all test modules.
"""

import shutil
import sys
import tempfile
from pathlib import Path
from typing import List, Optional
from unittest.mock import Mock, patch

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from procdiag.models.samples import CpuTimes, MemoryUsage  # noqa: E402
from procdiag.system.probe import ResourceProbe  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Test Doubles
# ============================================================================


class FakeProbe(ResourceProbe):
    """
    Scripted probe.

    ``heap_values`` are returned one per memory read, the last value repeating
    once exhausted. Each CPU read advances user time by ``cpu_step_us``.
    """

    def __init__(self, heap_values: Optional[List[int]] = None, rss: int = 64 * 1024 * 1024,
                 cpu_step_us: int = 0):
        self.heap_values = list(heap_values or [32 * 1024 * 1024])
        self.rss = rss
        self.cpu_step_us = cpu_step_us
        self.cpu_total_us = 0
        self.fail_memory = False
        self.fail_cpu = False
        self.memory_reads = 0
        self.cpu_reads = 0

    def memory_usage(self) -> MemoryUsage:
        self.memory_reads += 1
        if self.fail_memory:
            raise RuntimeError("memory counters unavailable")
        heap = self.heap_values.pop(0) if len(self.heap_values) > 1 else self.heap_values[0]
        return MemoryUsage(
            rss=self.rss,
            heap_total=heap * 2,
            heap_used=heap,
            external=1024,
            array_buffers=0,
        )

    def cpu_times(self) -> CpuTimes:
        self.cpu_reads += 1
        if self.fail_cpu:
            raise RuntimeError("CPU counters unavailable")
        self.cpu_total_us += self.cpu_step_us
        return CpuTimes(user=self.cpu_total_us, system=0)


class FakeClock:
    """Callable returning a settable epoch-millisecond value."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


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
def fake_probe():
    """A scripted probe with constant 32 MB heap usage."""
    return FakeProbe()


@pytest.fixture
def fake_clock(monkeypatch):
    """Replace the millisecond clock used by samplers and sessions."""
    clock = FakeClock()
    monkeypatch.setattr("procdiag.collectors.resource_sampler.now_ms", clock)
    monkeypatch.setattr("procdiag.session.now_ms", clock)
    return clock


@pytest.fixture
def make_session(fake_probe):
    """Factory for sessions driven by the fake probe; stops them after the test."""
    from procdiag.session import DiagnosticSession

    sessions = []

    def factory(name: str = "TestSession", **kwargs) -> DiagnosticSession:
        kwargs.setdefault("probe", fake_probe)
        kwargs.setdefault("monitor_event_loop", False)
        session = DiagnosticSession(name, **kwargs)
        sessions.append(session)
        return session

    yield factory

    for session in sessions:
        session.stop()


@pytest.fixture
def mock_psutil_process():
    """Mock psutil.Process for probe tests without touching real counters."""
    with patch("procdiag.system.probe.psutil.Process") as mock_process_class:
        mock_process = Mock()
        mock_process.pid = 12345
        mock_process.memory_info.return_value = Mock(
            rss=4 * 1024 * 1024, vms=16 * 1024 * 1024, shared=512 * 1024
        )
        mock_process.memory_full_info.return_value = Mock(uss=3 * 1024 * 1024)
        mock_process.cpu_times.return_value = Mock(user=1.5, system=0.25)
        mock_process_class.return_value = mock_process

        yield mock_process
