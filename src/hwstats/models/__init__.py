"""
Data models for cgroup paths, memory limits and memory statistics.
"""
from .paths import CgroupPaths
from .limits import MemoryLimits
from .memory_stat import AnyMemoryStat, MemoryStat, MemoryStatV2, V1_STAT_KEYS, V2_STAT_KEYS

__all__ = [
    "CgroupPaths",
    "MemoryLimits",
    "AnyMemoryStat",
    "MemoryStat",
    "MemoryStatV2",
    "V1_STAT_KEYS",
    "V2_STAT_KEYS",
]
