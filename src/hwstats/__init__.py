"""
hwstats: effective CPU and memory limits for processes running in cgroups.
"""
from hwstats.cgroup import (
    cgroup_path,
    get_cpu_quota,
    get_cpu_set,
    get_hierarchical_memory_limit,
    get_memory_limit,
    get_memory_limits,
    get_memory_stat,
    get_memory_stat_any,
    get_memory_stat_v2,
    run_in_cgroup,
    run_in_docker,
)
from hwstats.host import available_cpus, effective_memory_limit, free_memory, total_memory
from hwstats.models import CgroupPaths, MemoryLimits, MemoryStat, MemoryStatV2

__version__ = "0.1.0"

__all__ = [
    "cgroup_path",
    "get_cpu_quota",
    "get_cpu_set",
    "get_hierarchical_memory_limit",
    "get_memory_limit",
    "get_memory_limits",
    "get_memory_stat",
    "get_memory_stat_any",
    "get_memory_stat_v2",
    "run_in_cgroup",
    "run_in_docker",
    "available_cpus",
    "effective_memory_limit",
    "free_memory",
    "total_memory",
    "CgroupPaths",
    "MemoryLimits",
    "MemoryStat",
    "MemoryStatV2",
]
