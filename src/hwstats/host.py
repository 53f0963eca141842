"""
Host-level CPU and memory figures, combined with cgroup limits.
"""
import logging
import os
from typing import Optional

import psutil

from hwstats.cgroup.cpu import get_cpu_quota
from hwstats.cgroup.memory import get_hierarchical_memory_limit, get_memory_limit
from hwstats.cgroup.paths import resolve_paths
from hwstats.models.paths import CgroupPaths

logger = logging.getLogger(__name__)

# cgroup v1 reports "no limit" as the page counter maximum rounded to the page
# size; anything at or above this is treated as unlimited.
UNLIMITED_MEMORY_THRESHOLD = 1 << 62


def total_memory() -> int:
    """Total physical memory in bytes, 0 if it cannot be determined."""
    try:
        return int(psutil.virtual_memory().total)
    except (psutil.Error, OSError) as e:
        logger.warning(f"Cannot read total memory: {e}")
        return 0


def free_memory() -> int:
    """Memory available to new processes in bytes, 0 if it cannot be determined."""
    try:
        return int(psutil.virtual_memory().available)
    except (psutil.Error, OSError) as e:
        logger.warning(f"Cannot read free memory: {e}")
        return 0


def logical_cpu_count() -> int:
    """Logical CPUs on the host, at least 1."""
    return psutil.cpu_count(logical=True) or os.cpu_count() or 1


def available_cpus(paths: Optional[CgroupPaths] = None) -> int:
    """
    Whole CPUs the process can use.

    The cgroup quota is rounded to the nearest integer and clamped to
    [1, logical_cpu_count()]. Worker sizing uses
    hwstats.config.cpu_detection.detect_cpu_limit() instead, which rounds up
    and does not cap.
    """
    quota = get_cpu_quota(resolve_paths(paths))
    host_cpus = logical_cpu_count()
    cpus = int(quota + 0.5)
    if cpus > host_cpus:
        cpus = host_cpus
    if cpus <= 0:
        cpus = 1
    return cpus


def effective_memory_limit(paths: Optional[CgroupPaths] = None) -> int:
    """
    Memory the process may use in bytes.

    The smallest of the cgroup limit, the v1 hierarchical limit and host total
    memory, ignoring values that are unknown or effectively unlimited.
    Returns 0 if nothing is known.
    """
    paths = resolve_paths(paths)
    candidates = [
        get_memory_limit(paths),
        get_hierarchical_memory_limit(paths),
        total_memory(),
    ]
    known = [value for value in candidates if 0 < value < UNLIMITED_MEMORY_THRESHOLD]
    if not known:
        return 0
    return min(known)
