"""
Container-aware memory limit detection.

Every field is read from its cgroup v1 file first (under the ``memory``
controller) and then, where one exists, from the matching cgroup v2 file on
the unified hierarchy. Fields resolve independently and degrade to 0.

Knowledge: https://fabiokung.com/2014/03/13/memory-inside-linux-containers/
"""
import logging
from typing import Optional

from hwstats.cgroup.membership import grep_first_match
from hwstats.cgroup.paths import parse_int64, read_cgroup_file, read_stat_generic, resolve_paths
from hwstats.exceptions import RESOLVER_ERRORS, CgroupParseError
from hwstats.models.limits import MemoryLimits
from hwstats.models.paths import CgroupPaths

logger = logging.getLogger(__name__)

MEMORY_CONTROLLER = "memory"

# field -> (cgroup v1 file, cgroup v2 file or None)
# Departs from the plain v1 -> v2 rename list: max_usage falls back to
# memory.peak, and memory.high is consumed by the extra soft_limit field.
MEMORY_FILES = {
    "limit": ("memory.limit_in_bytes", "memory.max"),
    "usage": ("memory.usage_in_bytes", "memory.current"),
    "failcnt": ("memory.failcnt", None),
    "max_usage": ("memory.max_usage_in_bytes", "memory.peak"),
    "soft_limit": ("memory.soft_limit_in_bytes", "memory.high"),
    "oom_control": ("memory.oom_control", "memory.oom_kill_disable"),
}


def _read_mem_stat_v1(file_name: str, paths: CgroupPaths) -> int:
    return read_stat_generic(file_name, paths.controller_root(MEMORY_CONTROLLER), MEMORY_CONTROLLER, paths)


def _read_mem_stat_v2(file_name: str, paths: CgroupPaths) -> int:
    # See https://www.kernel.org/doc/html/latest/admin-guide/cgroup-v2.html#memory-interface-files
    return read_stat_generic(file_name, paths.cgroup_root, None, paths)


def _first_int_token(data: str, source: str) -> int:
    # "oom_kill_disable 0\nunder_oom 0\n..." or a bare "0"
    for token in data.split():
        try:
            return parse_int64(token, source)
        except CgroupParseError:
            continue
    raise CgroupParseError(f"no integer in {source}", path=source, data=data)


def _read_oom_control(file_name: str, root, hint: Optional[str], paths: CgroupPaths) -> int:
    data = read_cgroup_file(file_name, root, hint, paths)
    return _first_int_token(data, file_name)


def read_memory_field(field: str, paths: Optional[CgroupPaths] = None) -> int:
    """
    Resolve one memory field, v1 file first, then v2.

    Raises:
        KeyError: If field is not a known memory field
        CgroupNotFoundError: If no candidate file is readable
        CgroupParseError: If the last readable candidate is malformed
    """
    paths = resolve_paths(paths)
    v1_name, v2_name = MEMORY_FILES[field]
    try:
        if field == "oom_control":
            return _read_oom_control(v1_name, paths.controller_root(MEMORY_CONTROLLER), MEMORY_CONTROLLER, paths)
        return _read_mem_stat_v1(v1_name, paths)
    except RESOLVER_ERRORS as e:
        if v2_name is None:
            raise
        logger.debug("cgroup v1 %s unavailable: %s", v1_name, e)
    if field == "oom_control":
        return _read_oom_control(v2_name, paths.cgroup_root, None, paths)
    return _read_mem_stat_v2(v2_name, paths)


def _get_field(field: str, paths: Optional[CgroupPaths]) -> int:
    try:
        return read_memory_field(field, paths)
    except RESOLVER_ERRORS as e:
        logger.debug("Memory %s unavailable: %s", field, e)
        return 0


def get_memory_limit(paths: Optional[CgroupPaths] = None) -> int:
    """
    Cgroup memory limit in bytes.

    Reads memory.limit_in_bytes, which also works inside lxc containers,
    then memory.max. An unlimited v2 limit ("max") is reported as 0.

    Returns:
        Limit in bytes, or 0 when unknown. Never fails.
    """
    return _get_field("limit", paths)


def get_memory_usage(paths: Optional[CgroupPaths] = None) -> int:
    """Current cgroup memory usage in bytes, 0 when unknown. Never fails."""
    return _get_field("usage", paths)


def get_memory_failcnt(paths: Optional[CgroupPaths] = None) -> int:
    """Times the v1 memory limit was hit, 0 when unknown. Never fails."""
    return _get_field("failcnt", paths)


def get_memory_max_usage(paths: Optional[CgroupPaths] = None) -> int:
    """High-water mark of memory usage in bytes, 0 when unknown. Never fails."""
    return _get_field("max_usage", paths)


def get_memory_soft_limit(paths: Optional[CgroupPaths] = None) -> int:
    """Soft limit (v1) or memory.high throttle limit (v2), 0 when unknown. Never fails."""
    return _get_field("soft_limit", paths)


def get_memory_oom_control(paths: Optional[CgroupPaths] = None) -> int:
    """First value of the OOM control file (oom_kill_disable), 0 when unknown. Never fails."""
    return _get_field("oom_control", paths)


def read_hierarchical_memory_limit(paths: Optional[CgroupPaths] = None) -> int:
    """
    hierarchical_memory_limit key of the v1 memory.stat file.

    See https://www.kernel.org/doc/Documentation/cgroup-v1/memory.txt

    Raises:
        CgroupNotFoundError: If memory.stat or the key is missing
        CgroupParseError: If the value is not an integer
    """
    paths = resolve_paths(paths)
    data = read_cgroup_file("memory.stat", paths.controller_root(MEMORY_CONTROLLER), MEMORY_CONTROLLER, paths)
    value = grep_first_match(data, "hierarchical_memory_limit", 1, " ")
    return parse_int64(value, "hierarchical_memory_limit")


def get_hierarchical_memory_limit(paths: Optional[CgroupPaths] = None) -> int:
    """Hierarchical memory limit in bytes, 0 when unknown. Never fails."""
    try:
        return read_hierarchical_memory_limit(paths)
    except RESOLVER_ERRORS as e:
        logger.debug("Hierarchical memory limit unavailable: %s", e)
        return 0


def get_memory_limits(paths: Optional[CgroupPaths] = None) -> MemoryLimits:
    """Every memory field in one snapshot. Fields fail independently to 0."""
    paths = resolve_paths(paths)
    return MemoryLimits(
        limit=get_memory_limit(paths),
        usage=get_memory_usage(paths),
        failcnt=get_memory_failcnt(paths),
        max_usage=get_memory_max_usage(paths),
        soft_limit=get_memory_soft_limit(paths),
        oom_control=get_memory_oom_control(paths),
        hierarchical_limit=get_hierarchical_memory_limit(paths),
    )
