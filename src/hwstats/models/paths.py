"""
Filesystem locations the cgroup engine reads from.
"""
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class CgroupPaths(BaseModel):
    """Root paths injected into every cgroup resolver.

    Defaults point at the standard Linux locations; tests point them at
    fixture directories instead.
    """

    model_config = ConfigDict(frozen=True)

    cgroup_root: Path = Field(default=Path("/sys/fs/cgroup"), description="cgroup filesystem mount point")
    proc_cgroup: Path = Field(default=Path("/proc/self/cgroup"), description="Per-process cgroup membership file")
    cpu_online: Path = Field(default=Path("/sys/devices/system/cpu/online"), description="Online CPU range list")
    dockerenv: Path = Field(default=Path("/.dockerenv"), description="Marker file created by Docker")

    def controller_root(self, controller: str) -> Path:
        """Mount point of a cgroup v1 controller hierarchy, e.g. <root>/memory."""
        return self.cgroup_root / controller
