"""
memory.stat parsing for both cgroup generations.

The file holds one ``<key> <value>`` pair per line. cgroup v1 and v2 use
different key vocabularies, so each generation is projected onto its own
model. A missing file is an error; missing keys are reported as 0.
"""
import logging
from typing import Dict, Optional

from hwstats.cgroup.memory import MEMORY_CONTROLLER
from hwstats.cgroup.paths import parse_int64, read_cgroup_file, resolve_paths
from hwstats.exceptions import RESOLVER_ERRORS, CgroupNotFoundError, CgroupParseError, UnsupportedPlatformError
from hwstats.models.memory_stat import AnyMemoryStat, MemoryStat, MemoryStatV2, V1_STAT_KEYS, V2_STAT_KEYS
from hwstats.models.paths import CgroupPaths

logger = logging.getLogger(__name__)


def parse_stat_table(data: str) -> Dict[str, int]:
    """
    Parse ``key value`` lines into a mapping.

    Lines that do not split into exactly two tokens are skipped. Values that
    are not 64-bit integers are stored as 0.
    """
    table = {}
    for line in data.splitlines():
        tokens = line.split()
        if len(tokens) != 2:
            if tokens:
                logger.debug("Skipping malformed memory.stat line: %r", line)
            continue
        key, raw = tokens
        try:
            value = parse_int64(raw, key)
        except CgroupParseError:
            value = 0
        table[key] = value
    return table


def _project(table: Dict[str, int], keys) -> Dict[str, int]:
    return {key: table.get(key, 0) for key in keys}


def _read_stat_file(root, hint: Optional[str], paths: CgroupPaths) -> str:
    try:
        return read_cgroup_file("memory.stat", root, hint, paths)
    except UnsupportedPlatformError as e:
        raise CgroupNotFoundError(f"memory.stat not available: {e}")


def get_memory_stat(paths: Optional[CgroupPaths] = None) -> MemoryStat:
    """
    cgroup v1 memory statistics of the current process.

    Raises:
        CgroupNotFoundError: If memory.stat cannot be located
        CgroupParseError: If memory.stat is not valid UTF-8
    """
    paths = resolve_paths(paths)
    data = _read_stat_file(paths.controller_root(MEMORY_CONTROLLER), MEMORY_CONTROLLER, paths)
    return MemoryStat(**_project(parse_stat_table(data), V1_STAT_KEYS))


def get_memory_stat_v2(paths: Optional[CgroupPaths] = None) -> MemoryStatV2:
    """
    cgroup v2 memory statistics of the current process.

    Raises:
        CgroupNotFoundError: If memory.stat cannot be located
        CgroupParseError: If memory.stat is not valid UTF-8
    """
    paths = resolve_paths(paths)
    data = _read_stat_file(paths.cgroup_root, None, paths)
    return MemoryStatV2(**_project(parse_stat_table(data), V2_STAT_KEYS))


def get_memory_stat_any(paths: Optional[CgroupPaths] = None) -> AnyMemoryStat:
    """
    Memory statistics for whichever cgroup generation is mounted.

    Check ``result.generation`` (or isinstance) before reading fields.

    Raises:
        CgroupNotFoundError: If neither v1 nor v2 memory.stat can be located
    """
    paths = resolve_paths(paths)
    try:
        return get_memory_stat(paths)
    except RESOLVER_ERRORS as e:
        logger.debug("cgroup v1 memory.stat unavailable: %s", e)
    try:
        return get_memory_stat_v2(paths)
    except RESOLVER_ERRORS as e:
        raise CgroupNotFoundError(f"memory.stat not found for cgroup v1 or v2: {e}", path=e.path)
