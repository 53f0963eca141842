"""
Locate cgroup control files across flattened and nested layouts.

Inside a typical container the cgroup root *is* the process's cgroup, so
``<root>/<file>`` exists directly. On a host or in nested containers the file
lives under the process's subpath, ``<root>/<subpath>/<file>``, where the
subpath comes from the membership file.
"""
import logging
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from hwstats.cgroup.membership import ControllerTable
from hwstats.exceptions import CgroupNotFoundError, CgroupParseError, UnsupportedPlatformError
from hwstats.models.paths import CgroupPaths

logger = logging.getLogger(__name__)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class ResolvedPath:
    """A candidate location for a control file."""

    root: Path
    subpath: str
    file_name: str

    @property
    def path(self) -> Path:
        # Subpaths from the membership file are absolute ("/docker/abc")
        return self.root / self.subpath.lstrip("/") / self.file_name


def resolve_paths(paths: Optional[CgroupPaths]) -> CgroupPaths:
    """Configured default paths when the caller passed none."""
    if paths is None:
        from hwstats.config.settings import default_paths
        return default_paths()
    return paths


def _read(candidate: ResolvedPath) -> Optional[str]:
    try:
        return candidate.path.read_text()
    except UnicodeDecodeError as e:
        raise CgroupParseError(f"{candidate.path} is not valid UTF-8: {e}", path=str(candidate.path))
    except OSError as e:
        logger.debug("Cannot read %s: %s", candidate.path, e)
        return None


def locate(
    file_name: str,
    sysfs_root: Union[str, Path],
    controller_hint: Optional[str],
    paths: CgroupPaths,
) -> tuple:
    """
    Find and read a control file.

    Tries ``sysfs_root/file_name`` first, then
    ``sysfs_root/<subpath>/file_name`` with the subpath of the first
    membership record matching controller_hint (``None`` selects the
    unified hierarchy).

    Returns:
        (ResolvedPath, contents) of the first readable candidate

    Raises:
        UnsupportedPlatformError: If not running on Linux
        CgroupNotFoundError: If no candidate is readable
        CgroupParseError: If the first readable candidate is not valid UTF-8
    """
    if not sys.platform.startswith("linux"):
        raise UnsupportedPlatformError(f"cgroups are not available on {sys.platform}", platform=sys.platform)

    root = Path(sysfs_root)
    flat = ResolvedPath(root, "", file_name)
    data = _read(flat)
    if data is not None:
        return flat, data

    table = ControllerTable.read(paths)
    subpath = table.find_subpath(controller_hint)
    nested = ResolvedPath(root, subpath, file_name)
    data = _read(nested)
    if data is not None:
        return nested, data

    raise CgroupNotFoundError(f"cannot read {file_name} under {root}", path=str(nested.path))


def read_cgroup_file(
    file_name: str,
    sysfs_root: Union[str, Path],
    controller_hint: Optional[str],
    paths: CgroupPaths,
) -> str:
    """Contents of the first readable location of file_name. See locate()."""
    _, data = locate(file_name, sysfs_root, controller_hint, paths)
    return data


def parse_int64(data: str, source: str = "") -> int:
    """
    Parse a trimmed decimal value as a signed 64-bit integer.

    Raises:
        CgroupParseError: If the value is not an integer or is out of range
    """
    text = data.strip()
    if not _INT_RE.fullmatch(text):
        raise CgroupParseError(f"cannot parse {source or 'value'}: {text!r}", path=source or None, data=text)
    value = int(text)
    if value < INT64_MIN or value > INT64_MAX:
        raise CgroupParseError(f"{source or 'value'} out of int64 range: {text!r}", path=source or None, data=text)
    return value


def read_stat_generic(
    file_name: str,
    sysfs_root: Union[str, Path],
    controller_hint: Optional[str],
    paths: CgroupPaths,
) -> int:
    """
    Read a single-integer control file.

    Raises:
        CgroupNotFoundError: If the file cannot be located
        CgroupParseError: If its content is not a 64-bit integer
    """
    resolved, data = locate(file_name, sysfs_root, controller_hint, paths)
    return parse_int64(data, str(resolved.path))
