"""
Unit tests for host-level figures combined with cgroup limits.
"""
from unittest.mock import MagicMock, patch

import pytest

from hwstats import host


@pytest.mark.unit
class TestHostMemory:
    """Test psutil-backed host memory queries."""

    def test_total_and_free(self):
        mock_mem = MagicMock()
        mock_mem.total = 16 * 1024**3
        mock_mem.available = 4 * 1024**3
        with patch("hwstats.host.psutil.virtual_memory", return_value=mock_mem):
            assert host.total_memory() == 16 * 1024**3
            assert host.free_memory() == 4 * 1024**3

    def test_failure_is_zero(self):
        with patch("hwstats.host.psutil.virtual_memory", side_effect=OSError("boom")):
            assert host.total_memory() == 0
            assert host.free_memory() == 0


@pytest.mark.unit
class TestAvailableCPUs:
    """Test rounding and clamping of the CPU quota."""

    def test_rounds_quota(self, v1_tree):
        with patch("hwstats.host.logical_cpu_count", return_value=8):
            assert host.available_cpus(v1_tree.paths) == 2

    def test_clamped_to_host(self, v2_tree):
        with patch("hwstats.host.logical_cpu_count", return_value=1):
            assert host.available_cpus(v2_tree.paths) == 1

    def test_minimum_one(self, cgroup_tree):
        with patch("hwstats.host.logical_cpu_count", return_value=8):
            assert host.available_cpus(cgroup_tree.paths) == 1

    def test_rounding_differs_from_worker_sizing(self, v2_tree):
        """Nearest-and-capped here, rounded up and uncapped for worker pools."""
        from hwstats.config.cpu_detection import detect_cpu_limit

        v2_tree.write("cpu.max", "240000 100000\n")
        with patch("hwstats.host.logical_cpu_count", return_value=8):
            assert host.available_cpus(v2_tree.paths) == 2
        assert detect_cpu_limit(v2_tree.paths) == 3

        v2_tree.write("cpu.max", "400000 100000\n")
        with patch("hwstats.host.logical_cpu_count", return_value=2):
            assert host.available_cpus(v2_tree.paths) == 2
            assert detect_cpu_limit(v2_tree.paths) == 4


@pytest.mark.unit
class TestEffectiveMemoryLimit:
    """Test the smallest-known-limit rule."""

    def test_cgroup_limit_below_host(self, v2_tree):
        with patch("hwstats.host.total_memory", return_value=16 * 1024**3):
            assert host.effective_memory_limit(v2_tree.paths) == 1073741824

    def test_hierarchical_limit_wins_when_smaller(self, v1_tree):
        v1_tree.write("memory/docker/abc/memory.limit_in_bytes", "9223372036854771712\n")
        v1_tree.write("memory/docker/abc/memory.stat", "hierarchical_memory_limit 268435456\n")
        with patch("hwstats.host.total_memory", return_value=16 * 1024**3):
            assert host.effective_memory_limit(v1_tree.paths) == 268435456

    def test_unlimited_cgroup_uses_host(self, v1_tree):
        v1_tree.write("memory/docker/abc/memory.limit_in_bytes", "9223372036854771712\n")
        v1_tree.write("memory/docker/abc/memory.stat", "cache 1\n")
        with patch("hwstats.host.total_memory", return_value=8 * 1024**3):
            assert host.effective_memory_limit(v1_tree.paths) == 8 * 1024**3

    def test_nothing_known_is_zero(self, cgroup_tree):
        with patch("hwstats.host.total_memory", return_value=0):
            assert host.effective_memory_limit(cgroup_tree.paths) == 0
