"""
Container-aware CPU quota detection.

Reads the cgroup v1 CFS quota/period pair first, then the cgroup v2
``cpu.max`` file, and falls back to the online CPU count when no quota is
set (unset quotas are common in multi-level containers).
"""
import logging
import re
from typing import Optional

from hwstats.cgroup.paths import read_cgroup_file, read_stat_generic, resolve_paths
from hwstats.exceptions import RESOLVER_ERRORS, CgroupNotFoundError, CgroupParseError
from hwstats.models.paths import CgroupPaths

logger = logging.getLogger(__name__)

# Quota sentinel for "explicitly unlimited"
UNLIMITED_QUOTA = -1.0

# v1 controller hint; matches "cpu,cpuacct" and a lone "cpu" but not "cpuset"
CPU_CONTROLLER = "cpu,"
CPUSET_CONTROLLER = "cpuset"

# ASCII only; str.isdecimal() also accepts other scripts' digits
_DIGITS_RE = re.compile(r"[0-9]+")


def parse_cpu_max(data: str) -> float:
    """
    Parse cgroup v2 cpu.max contents: ``"<quota> <period>"`` or ``"max <period>"``.

    Returns:
        quota / period in cores, or UNLIMITED_QUOTA for "max"

    Raises:
        CgroupParseError: If the content is not exactly two valid tokens
    """
    bounds = data.strip().split(" ")
    if len(bounds) != 2:
        raise CgroupParseError(f"unexpected cpu.max format: want 'quota period'; got: {data!r}", data=data)
    if bounds[0] == "max":
        return UNLIMITED_QUOTA
    if not _DIGITS_RE.fullmatch(bounds[0]) or not _DIGITS_RE.fullmatch(bounds[1]):
        raise CgroupParseError(f"cannot parse cpu.max: {data!r}", data=data)
    quota = int(bounds[0])
    period = int(bounds[1])
    if period == 0:
        raise CgroupParseError(f"cpu.max period is zero: {data!r}", data=data)
    return quota / period


def count_online_cpus(data: str) -> int:
    """
    Count CPUs in a kernel CPU list such as ``"0-3,8,10-11"``.

    Raises:
        CgroupParseError: If any entry is malformed (no partial counts)
    """
    text = data.strip()
    n = 0
    for entry in text.split(","):
        if "-" not in entry:
            if not _DIGITS_RE.fullmatch(entry):
                raise CgroupParseError(f"bad CPU list entry {entry!r} in {text!r}", data=text)
            n += 1
            continue
        bounds = entry.split("-")
        if len(bounds) != 2 or not _DIGITS_RE.fullmatch(bounds[0]) or not _DIGITS_RE.fullmatch(bounds[1]):
            raise CgroupParseError(f"bad CPU range {entry!r} in {text!r}", data=text)
        start, end = int(bounds[0]), int(bounds[1])
        if end < start:
            raise CgroupParseError(f"reversed CPU range {entry!r} in {text!r}", data=text)
        n += end - start + 1
    return n


def _read_cpu_quota_v1(paths: CgroupPaths) -> float:
    cpu_root = paths.controller_root("cpu")
    quota_us = read_stat_generic("cpu.cfs_quota_us", cpu_root, CPU_CONTROLLER, paths)
    period_us = read_stat_generic("cpu.cfs_period_us", cpu_root, CPU_CONTROLLER, paths)
    if quota_us < 0:
        return UNLIMITED_QUOTA
    if period_us <= 0:
        raise CgroupParseError(f"cpu.cfs_period_us must be positive, got {period_us}")
    return quota_us / period_us


def _read_cpu_quota_v2(paths: CgroupPaths) -> float:
    data = read_cgroup_file("cpu.max", paths.cgroup_root, None, paths)
    return parse_cpu_max(data)


def _read_cpu_quota(paths: CgroupPaths) -> float:
    """v1 quota if both files are readable, otherwise v2 cpu.max."""
    try:
        return _read_cpu_quota_v1(paths)
    except RESOLVER_ERRORS as e:
        logger.debug("cgroup v1 CPU quota unavailable: %s", e)
    return _read_cpu_quota_v2(paths)


def _read_online_cpu_count(paths: CgroupPaths) -> int:
    try:
        data = paths.cpu_online.read_text()
    except UnicodeDecodeError as e:
        raise CgroupParseError(f"{paths.cpu_online} is not valid UTF-8: {e}", path=str(paths.cpu_online))
    except OSError as e:
        raise CgroupNotFoundError(f"cannot read {paths.cpu_online}: {e}", path=str(paths.cpu_online))
    n = count_online_cpus(data)
    if n <= 0:
        raise CgroupParseError(f"no online CPUs listed in {paths.cpu_online}", path=str(paths.cpu_online))
    return n


def get_online_cpu_count(paths: Optional[CgroupPaths] = None) -> float:
    """Number of online CPUs as a float. Returns 0.0 on failure, never fails."""
    paths = resolve_paths(paths)
    try:
        return float(_read_online_cpu_count(paths))
    except RESOLVER_ERRORS as e:
        logger.debug("Online CPU count unavailable: %s", e)
        return 0.0


def get_cpu_quota(paths: Optional[CgroupPaths] = None) -> float:
    """
    Effective CPU quota in (possibly fractional) cores.

    An unset or unlimited quota falls back to the online CPU count.

    Returns:
        Usable cores, or 0.0 if every strategy fails. Never fails.
    """
    paths = resolve_paths(paths)
    try:
        quota = _read_cpu_quota(paths)
    except RESOLVER_ERRORS as e:
        logger.debug("CPU quota unavailable: %s", e)
        return 0.0
    if quota <= 0:
        logger.debug("CPU quota unset (%s), using online CPU count", quota)
        return get_online_cpu_count(paths)
    return quota


def get_cpu_set(paths: Optional[CgroupPaths] = None) -> str:
    """
    CPUs the process may run on, in kernel list format (e.g. "0-3").

    See https://www.kernel.org/doc/Documentation/cgroup-v1/cpusets.txt

    Returns:
        The cpuset list, or "" when unknown. Never fails.
    """
    paths = resolve_paths(paths)
    try:
        data = read_cgroup_file("cpuset.cpus", paths.controller_root("cpuset"), CPUSET_CONTROLLER, paths)
    except RESOLVER_ERRORS as e:
        logger.debug("cgroup v1 cpuset unavailable: %s", e)
        try:
            data = read_cgroup_file("cpuset.cpus.effective", paths.cgroup_root, None, paths)
        except RESOLVER_ERRORS as e:
            logger.debug("cgroup v2 cpuset unavailable: %s", e)
            return ""
    return data.strip()


def get_cpuset_cpu_count(paths: Optional[CgroupPaths] = None) -> int:
    """Number of CPUs in the cpuset. Returns 0 when unknown, never fails."""
    cpu_set = get_cpu_set(paths)
    if not cpu_set:
        return 0
    try:
        return count_online_cpus(cpu_set)
    except CgroupParseError as e:
        logger.debug("Cannot count cpuset: %s", e)
        return 0


def read_cpu_quota_raw(paths: Optional[CgroupPaths] = None) -> float:
    """
    Quota before the online-CPU fallback.

    Raises:
        CgroupNotFoundError: If neither v1 nor v2 quota files are readable
        CgroupParseError: If the v2 file is malformed
    """
    return _read_cpu_quota(resolve_paths(paths))
