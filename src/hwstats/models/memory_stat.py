"""
Memory statistics snapshots parsed from cgroup memory.stat files.

cgroup v1 and v2 report disjoint key vocabularies, so each generation gets
its own model. Keys missing from the file are reported as 0.
"""
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict


class MemoryStat(BaseModel):
    """cgroup v1 memory.stat snapshot.

    See https://www.kernel.org/doc/Documentation/cgroup-v1/memory.txt
    """

    model_config = ConfigDict(frozen=True)

    generation: Literal["v1"] = "v1"

    cache: int = 0
    rss: int = 0
    rss_huge: int = 0
    shmem: int = 0
    mapped_file: int = 0
    dirty: int = 0
    writeback: int = 0
    swap: int = 0
    pgpgin: int = 0
    pgpgout: int = 0
    pgfault: int = 0
    pgmajfault: int = 0
    inactive_anon: int = 0
    active_anon: int = 0
    inactive_file: int = 0
    active_file: int = 0
    unevictable: int = 0
    hierarchical_memory_limit: int = 0
    hierarchical_memsw_limit: int = 0
    total_cache: int = 0
    total_rss: int = 0
    total_rss_huge: int = 0
    total_shmem: int = 0
    total_mapped_file: int = 0
    total_dirty: int = 0
    total_writeback: int = 0
    total_swap: int = 0
    total_pgpgin: int = 0
    total_pgpgout: int = 0
    total_pgfault: int = 0
    total_pgmajfault: int = 0
    total_inactive_anon: int = 0
    total_active_anon: int = 0
    total_inactive_file: int = 0
    total_active_file: int = 0
    total_unevictable: int = 0

    @property
    def working_set(self) -> int:
        """Usage minus inactive file cache, as reported by container runtimes."""
        return max(0, self.total_rss + self.total_cache - self.total_inactive_file)


class MemoryStatV2(BaseModel):
    """cgroup v2 memory.stat snapshot.

    See https://www.kernel.org/doc/html/latest/admin-guide/cgroup-v2.html#memory-interface-files
    """

    model_config = ConfigDict(frozen=True)

    generation: Literal["v2"] = "v2"

    anon: int = 0
    file: int = 0
    kernel: int = 0
    kernel_stack: int = 0
    pagetables: int = 0
    sock: int = 0
    file_mapped: int = 0
    file_dirty: int = 0
    file_writeback: int = 0
    swapcached: int = 0
    anon_thp: int = 0
    slab: int = 0
    slab_reclaimable: int = 0
    slab_unreclaimable: int = 0
    workingset_refault_anon: int = 0
    workingset_refault_file: int = 0
    workingset_activate_anon: int = 0
    workingset_activate_file: int = 0
    workingset_restore_anon: int = 0
    workingset_restore_file: int = 0
    workingset_nodereclaim: int = 0
    pgscan: int = 0
    pgsteal: int = 0
    pgrefill: int = 0
    pgactivate: int = 0
    pgdeactivate: int = 0
    pglazyfree: int = 0
    pglazyfreed: int = 0
    thp_fault_alloc: int = 0
    thp_collapse_alloc: int = 0


AnyMemoryStat = Union[MemoryStat, MemoryStatV2]

# Field names a parsed memory.stat mapping is projected onto, per generation
V1_STAT_KEYS = tuple(name for name in MemoryStat.model_fields if name != "generation")
V2_STAT_KEYS = tuple(name for name in MemoryStatV2.model_fields if name != "generation")
