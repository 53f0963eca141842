"""
Application settings and configuration.

Values come from the environment (optionally a .env file in the working
directory) and fall back to the standard Linux locations.
"""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from hwstats.exceptions import ConfigurationError
from hwstats.models.paths import CgroupPaths

# Load environment variables
load_dotenv()


def _env_path(var_name: str, default: str) -> Path:
    value = os.getenv(var_name, default).strip()
    if not value:
        raise ConfigurationError(f"{var_name} must not be empty", variable=var_name)
    return Path(value)


def _env_int(var_name: str, default: int, minimum: int = 0) -> int:
    """
    Read a non-negative integer from the environment.

    Args:
        var_name: Name of the environment variable
        default: Value used when the variable is unset or blank
        minimum: Smallest accepted value

    Returns:
        Parsed integer

    Raises:
        ConfigurationError: If the value is not an integer or is below minimum
    """
    raw = os.getenv(var_name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{var_name} must be an integer, got {raw!r}", variable=var_name)
    if value < minimum:
        raise ConfigurationError(f"{var_name} must be >= {minimum}, got {value}", variable=var_name)
    return value


# Filesystem locations
CGROUP_ROOT = _env_path("HWSTATS_CGROUP_ROOT", "/sys/fs/cgroup")
PROC_CGROUP = _env_path("HWSTATS_PROC_CGROUP", "/proc/self/cgroup")
CPU_ONLINE = _env_path("HWSTATS_CPU_ONLINE", "/sys/devices/system/cpu/online")
DOCKERENV = _env_path("HWSTATS_DOCKERENV", "/.dockerenv")

# Logging
LOG_LEVEL = os.getenv("HWSTATS_LOG_LEVEL", "WARNING").upper()

# Worker scaling caps to prevent runaway thread creation
MAX_IO_WORKERS = _env_int("HWSTATS_MAX_IO_WORKERS", 32, minimum=1)
MAX_CPU_WORKERS = _env_int("HWSTATS_MAX_CPU_WORKERS", 16, minimum=1)

# Memory budget for worker scaling
RESERVED_MEMORY_MB = _env_int("HWSTATS_RESERVED_MEMORY_MB", 512)
MEMORY_PER_WORKER_MB = _env_int("HWSTATS_MEMORY_PER_WORKER_MB", 256, minimum=1)


def default_paths(cgroup_root: Optional[Path] = None, proc_cgroup: Optional[Path] = None) -> CgroupPaths:
    """Build the CgroupPaths used when a resolver is called without one."""
    return CgroupPaths(
        cgroup_root=cgroup_root or CGROUP_ROOT,
        proc_cgroup=proc_cgroup or PROC_CGROUP,
        cpu_online=CPU_ONLINE,
        dockerenv=DOCKERENV,
    )
