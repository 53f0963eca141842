"""
Shared pytest fixtures for the test suite.

Provides:
- temp_dir: Function-scoped temporary directory
- cgroup_tree: Empty fake cgroup filesystem under temp_dir
- v1_tree: cgroup v1 docker layout with nested controller subpaths
- v2_tree: cgroup v2 unified layout
- linux_platform: Autouse fixture so platform checks pass on any host
"""
import sys
import tempfile
from pathlib import Path

import pytest

from tests.fixtures.cgroup_tree import (
    CgroupTree,
    V1_MEMBERSHIP,
    V1_MEMORY_STAT,
    V2_MEMBERSHIP,
    V2_MEMORY_STAT,
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory, cleaned up after each test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def cgroup_tree(temp_dir):
    """Fake cgroup filesystem with no files and no membership file."""
    return CgroupTree(temp_dir)


@pytest.fixture
def v1_tree(cgroup_tree):
    """cgroup v1 host layout: every control file lives under /docker/abc."""
    cgroup_tree.membership(V1_MEMBERSHIP)
    cgroup_tree.online("0-7\n")
    cgroup_tree.write("cpu/docker/abc/cpu.cfs_quota_us", "150000\n")
    cgroup_tree.write("cpu/docker/abc/cpu.cfs_period_us", "100000\n")
    cgroup_tree.write("cpuset/docker/abc/cpuset.cpus", "0-3\n")
    cgroup_tree.write("memory/docker/abc/memory.limit_in_bytes", "536870912\n")
    cgroup_tree.write("memory/docker/abc/memory.usage_in_bytes", "134217728\n")
    cgroup_tree.write("memory/docker/abc/memory.failcnt", "3\n")
    cgroup_tree.write("memory/docker/abc/memory.max_usage_in_bytes", "268435456\n")
    cgroup_tree.write("memory/docker/abc/memory.soft_limit_in_bytes", "9223372036854771712\n")
    cgroup_tree.write("memory/docker/abc/memory.oom_control", "oom_kill_disable 1\nunder_oom 0\noom_kill 2\n")
    cgroup_tree.write("memory/docker/abc/memory.stat", V1_MEMORY_STAT)
    return cgroup_tree


@pytest.fixture
def v2_tree(cgroup_tree):
    """cgroup v2 unified layout with files directly under the mount point."""
    cgroup_tree.membership(V2_MEMBERSHIP)
    cgroup_tree.online("0-3\n")
    cgroup_tree.write("cpu.max", "200000 100000\n")
    cgroup_tree.write("cpuset.cpus.effective", "0-1\n")
    cgroup_tree.write("memory.max", "1073741824\n")
    cgroup_tree.write("memory.current", "52428800\n")
    cgroup_tree.write("memory.peak", "104857600\n")
    cgroup_tree.write("memory.high", "max\n")
    cgroup_tree.write("memory.stat", V2_MEMORY_STAT)
    return cgroup_tree


@pytest.fixture(autouse=True)
def linux_platform(monkeypatch):
    """Pretend to run on Linux so fixture trees are consulted on any host."""
    monkeypatch.setattr(sys, "platform", "linux")
