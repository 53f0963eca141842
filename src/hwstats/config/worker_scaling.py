"""Adaptive worker count calculation based on CPU quota and memory limit."""
import logging
from typing import Optional, Tuple

from hwstats.config import settings
from hwstats.models.paths import CgroupPaths

logger = logging.getLogger(__name__)


def calculate_worker_counts(
    override_io: Optional[int] = None,
    override_cpu: Optional[int] = None,
    paths: Optional[CgroupPaths] = None,
) -> Tuple[int, int]:
    """Calculate worker pool sizes from the container's CPU and memory limits.

    I/O-bound pools get 3x the CPU budget, CPU-bound pools get 1x. Both are
    capped by the memory budget: the effective memory limit minus a reserve,
    divided by the per-worker allowance.

    Returns: (io_workers, cpu_workers)
    """
    from hwstats.config.cpu_detection import detect_cpu_limit
    from hwstats.host import effective_memory_limit

    cpu_count = detect_cpu_limit(paths)

    # Base: multipliers with caps
    base_io = min(cpu_count * 3, settings.MAX_IO_WORKERS)
    base_cpu = min(cpu_count, settings.MAX_CPU_WORKERS)

    # Memory-aware adjustment
    limit_bytes = effective_memory_limit(paths)
    if limit_bytes > 0:
        limit_mb = limit_bytes / (1024 ** 2)
        max_by_memory = max(1, int((limit_mb - settings.RESERVED_MEMORY_MB) / settings.MEMORY_PER_WORKER_MB))
        base_io = min(base_io, max_by_memory)
        base_cpu = min(base_cpu, max_by_memory)
        logger.info(f"Worker scaling: CPU={cpu_count}, Memory limit={limit_mb:.0f}MB")
    else:
        logger.warning("Memory limit unknown, skipping memory-based scaling")

    # Apply overrides
    io_workers = override_io if override_io is not None else base_io
    cpu_workers = override_cpu if override_cpu is not None else base_cpu

    # Ensure minimum 1
    io_workers = max(1, io_workers)
    cpu_workers = max(1, cpu_workers)

    logger.info(f"Worker counts: io={io_workers}, cpu={cpu_workers}")
    return io_workers, cpu_workers
