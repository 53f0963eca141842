"""Container-aware CPU limit detection.

Uses the cgroup engine (cgroup v1 cpu.cfs_quota_us, then cgroup v2 cpu.max,
then the online CPU list) before falling back to os.cpu_count().
"""
import logging
import math
import os
from typing import Optional

from hwstats.cgroup.cpu import get_cpu_quota
from hwstats.models.paths import CgroupPaths

logger = logging.getLogger(__name__)


def detect_cpu_limit(paths: Optional[CgroupPaths] = None) -> int:
    """
    Detect available CPUs, respecting container cgroup limits. Returns min 1.

    A fractional quota is rounded up and is not capped at the host CPU count,
    so pools can keep a partial core busy. hwstats.host.available_cpus() rounds
    to nearest and caps at the host count instead.
    """
    quota = get_cpu_quota(paths)
    if quota > 0:
        # A 1.5 CPU quota still allows two busy threads
        result = max(1, math.ceil(quota))
        logger.info(f"CPU limit detected via cgroup: {result} (quota {quota:.2f})")
        return result

    # Fallback to os.cpu_count()
    count = os.cpu_count() or 1
    logger.info(f"CPU count from os.cpu_count(): {count}")
    return count
