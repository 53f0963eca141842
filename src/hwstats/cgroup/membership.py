"""
Per-process cgroup membership (/proc/self/cgroup) parsing.

Each line has the form ``hierarchyId:controllers:subpath``. On a cgroup v2
host there is a single ``0::<subpath>`` line; cgroup v1 hosts list one line
per controller hierarchy, e.g. ``12:cpu,cpuacct:/docker/abc``.
"""
import logging
import sys
from dataclasses import dataclass
from typing import Optional

from hwstats.exceptions import CgroupNotFoundError, CgroupParseError, UnsupportedPlatformError
from hwstats.models.paths import CgroupPaths

logger = logging.getLogger(__name__)

# Unified hierarchy line prefix; matching it selects the cgroup v2 record
UNIFIED_MARKER = "0::/"

ROOT_CGROUP = "/"


def grep_first_match(data: str, match: str, index: int, delimiter: str) -> str:
    """
    Find the first line containing ``match`` and return one field of it.

    Args:
        data: Multi-line text to scan
        match: Substring the line must contain
        index: Field index after splitting the line
        delimiter: Field delimiter

    Returns:
        The selected field, stripped of surrounding whitespace

    Raises:
        CgroupNotFoundError: If no line contains match with enough fields
    """
    for line in data.split("\n"):
        if match not in line:
            continue
        parts = line.split(delimiter)
        if index < len(parts):
            return parts[index].strip()
    raise CgroupNotFoundError(f"cannot find {match!r} (field {index}) in data")


@dataclass(frozen=True)
class ControllerLine:
    """One record of the membership file."""

    hierarchy_id: int
    controllers: frozenset
    subpath: str
    raw_controllers: str = ""

    @property
    def is_unified(self) -> bool:
        """True for the cgroup v2 unified hierarchy record."""
        return self.hierarchy_id == 0 and not self.raw_controllers

    def matches(self, match_token: str) -> bool:
        # Trailing comma lets "cpu," match a lone "cpu" controller but not "cpuset"
        return match_token in self.raw_controllers + ","


class ControllerTable:
    """Ordered controller records of the current process."""

    def __init__(self, lines):
        self.lines = tuple(lines)

    def __iter__(self):
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    @classmethod
    def parse(cls, text: str) -> "ControllerTable":
        """Parse membership file contents, skipping blank and malformed lines."""
        lines = []
        for raw in text.splitlines():
            raw = raw.strip()
            if not raw:
                continue
            # The subpath itself may contain ':'
            parts = raw.split(":", 2)
            if len(parts) != 3:
                logger.debug("Skipping malformed cgroup line: %r", raw)
                continue
            try:
                hierarchy_id = int(parts[0])
            except ValueError:
                logger.debug("Skipping cgroup line with bad hierarchy id: %r", raw)
                continue
            controllers = frozenset(name for name in parts[1].split(",") if name)
            lines.append(ControllerLine(hierarchy_id, controllers, parts[2], parts[1]))
        return cls(lines)

    @classmethod
    def read(cls, paths: CgroupPaths) -> "ControllerTable":
        """
        Read and parse the membership file.

        Raises:
            UnsupportedPlatformError: If not running on Linux
            CgroupNotFoundError: If the membership file cannot be read
        """
        if not sys.platform.startswith("linux"):
            raise UnsupportedPlatformError(f"cgroups are not available on {sys.platform}", platform=sys.platform)
        try:
            # Cgroup directory names are arbitrary bytes; keep them round-trippable as paths
            text = paths.proc_cgroup.read_text(errors="surrogateescape")
        except OSError as e:
            raise CgroupNotFoundError(f"cannot read {paths.proc_cgroup}: {e}", path=str(paths.proc_cgroup))
        return cls.parse(text)

    def find_subpath(self, match_token: Optional[str]) -> str:
        """
        Return the subpath of the first record whose controllers contain match_token.

        ``None`` or the unified marker selects the cgroup v2 record.

        Raises:
            CgroupNotFoundError: If no record matches
        """
        for line in self.lines:
            if match_token is None or match_token == UNIFIED_MARKER:
                if line.is_unified:
                    return line.subpath
            elif line.matches(match_token):
                return line.subpath
        raise CgroupNotFoundError(f"no cgroup controller matching {match_token!r}")


def cgroup_path(paths: Optional[CgroupPaths] = None) -> str:
    """Cgroup v2 path of the current process. Returns "/" when unknown, never fails."""
    if paths is None:
        from hwstats.config.settings import default_paths
        paths = default_paths()
    try:
        return ControllerTable.read(paths).find_subpath(UNIFIED_MARKER)
    except (CgroupNotFoundError, CgroupParseError, UnsupportedPlatformError) as e:
        logger.debug("Assuming root cgroup: %s", e)
        return ROOT_CGROUP
