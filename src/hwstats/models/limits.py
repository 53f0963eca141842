"""
Resolved cgroup memory limit fields.
"""
from pydantic import BaseModel, ConfigDict, Field


class MemoryLimits(BaseModel):
    """One-call snapshot of every memory limit field.

    Each field is resolved independently; 0 means the value could not be
    determined (file missing, unparseable, or "max" in cgroup v2).
    """

    model_config = ConfigDict(frozen=True)

    limit: int = Field(default=0, description="memory.limit_in_bytes / memory.max")
    usage: int = Field(default=0, description="memory.usage_in_bytes / memory.current")
    failcnt: int = Field(default=0, description="memory.failcnt (v1 only)")
    max_usage: int = Field(default=0, description="memory.max_usage_in_bytes / memory.peak")
    soft_limit: int = Field(default=0, description="memory.soft_limit_in_bytes / memory.high")
    oom_control: int = Field(default=0, description="memory.oom_control / memory.oom_kill_disable")
    hierarchical_limit: int = Field(default=0, description="hierarchical_memory_limit from v1 memory.stat")

    def usage_ratio(self) -> float:
        """Fraction of the limit currently in use, 0.0 when either side is unknown."""
        if self.limit <= 0 or self.usage <= 0:
            return 0.0
        return self.usage / self.limit
