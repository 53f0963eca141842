"""
Container and cgroup membership checks.
"""
import logging
import sys
from typing import Optional

from hwstats.cgroup.membership import ROOT_CGROUP, cgroup_path
from hwstats.cgroup.paths import resolve_paths
from hwstats.models.paths import CgroupPaths

logger = logging.getLogger(__name__)


def run_in_docker(paths: Optional[CgroupPaths] = None) -> bool:
    """True when the Docker marker file exists."""
    if not sys.platform.startswith("linux"):
        return False
    return resolve_paths(paths).dockerenv.exists()


def run_in_cgroup(paths: Optional[CgroupPaths] = None) -> bool:
    """True when the process sits in a non-root cgroup."""
    return cgroup_path(paths) != ROOT_CGROUP
