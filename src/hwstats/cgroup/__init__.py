"""
cgroup resolution and limit-parsing engine.

Public resolvers never raise: they return 0 (or "" / "/") when a value
cannot be determined. The read_* helpers and memory.stat parsers raise
typed errors from hwstats.exceptions instead.
"""
from .membership import UNIFIED_MARKER, ControllerLine, ControllerTable, cgroup_path, grep_first_match
from .paths import ResolvedPath, locate, read_cgroup_file
from .detect import run_in_cgroup, run_in_docker
from .cpu import (
    UNLIMITED_QUOTA,
    count_online_cpus,
    get_cpu_quota,
    get_cpu_set,
    get_cpuset_cpu_count,
    get_online_cpu_count,
    parse_cpu_max,
    read_cpu_quota_raw,
)
from .memory import (
    get_hierarchical_memory_limit,
    get_memory_failcnt,
    get_memory_limit,
    get_memory_limits,
    get_memory_max_usage,
    get_memory_oom_control,
    get_memory_soft_limit,
    get_memory_usage,
    read_hierarchical_memory_limit,
    read_memory_field,
)
from .stat import get_memory_stat, get_memory_stat_any, get_memory_stat_v2, parse_stat_table

__all__ = [
    # Membership
    "UNIFIED_MARKER",
    "ControllerLine",
    "ControllerTable",
    "cgroup_path",
    "grep_first_match",
    # Path resolution
    "ResolvedPath",
    "locate",
    "read_cgroup_file",
    # Detection
    "run_in_cgroup",
    "run_in_docker",
    # CPU
    "UNLIMITED_QUOTA",
    "count_online_cpus",
    "get_cpu_quota",
    "get_cpu_set",
    "get_cpuset_cpu_count",
    "get_online_cpu_count",
    "parse_cpu_max",
    "read_cpu_quota_raw",
    # Memory limits
    "get_hierarchical_memory_limit",
    "get_memory_failcnt",
    "get_memory_limit",
    "get_memory_limits",
    "get_memory_max_usage",
    "get_memory_oom_control",
    "get_memory_soft_limit",
    "get_memory_usage",
    "read_hierarchical_memory_limit",
    "read_memory_field",
    # memory.stat
    "get_memory_stat",
    "get_memory_stat_any",
    "get_memory_stat_v2",
    "parse_stat_table",
]
