"""
Command line report of the effective CPU and memory limits.

Prints the cgroup path, CPU quota, memory limits and memory.stat snapshot of
the current process as rich tables, or as JSON with --json.
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from hwstats import cgroup, host
from hwstats.config import settings
from hwstats.config.logging_setup import configure_logging
from hwstats.config.worker_scaling import calculate_worker_counts
from hwstats.exceptions import CgroupError
from hwstats.models.paths import CgroupPaths

console = Console()


def pretty_byte_size(size: int) -> str:
    """Format a byte count with binary units, e.g. 1536 -> '1.5KiB'."""
    value = float(size)
    for unit in ["", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei", "Zi"]:
        if abs(value) < 1024.0:
            return f"{value:3.1f}{unit}B"
        value /= 1024.0
    return f"{value:.1f}YiB"


def collect_report(paths: CgroupPaths) -> dict:
    """Gather every figure shown by the CLI into a JSON-serializable dict."""
    io_workers, cpu_workers = calculate_worker_counts(paths=paths)
    report = {
        "cgroup_path": cgroup.cgroup_path(paths),
        "run_in_docker": cgroup.run_in_docker(paths),
        "run_in_cgroup": cgroup.run_in_cgroup(paths),
        "cpu": {
            "quota": cgroup.get_cpu_quota(paths),
            "cpuset": cgroup.get_cpu_set(paths),
            "available_cpus": host.available_cpus(paths),
            "logical_cpus": host.logical_cpu_count(),
        },
        "memory": {
            "limits": cgroup.get_memory_limits(paths).model_dump(),
            "effective_limit": host.effective_memory_limit(paths),
            "host_total": host.total_memory(),
            "host_free": host.free_memory(),
        },
        "workers": {"io": io_workers, "cpu": cpu_workers},
        "memory_stat": None,
    }
    try:
        report["memory_stat"] = cgroup.get_memory_stat_any(paths).model_dump()
    except CgroupError:
        pass
    return report


def render_report(report: dict):
    """Print the report as rich tables."""
    summary = Table(title="cgroup", show_header=True, header_style="bold cyan", box=box.SIMPLE)
    summary.add_column("Field", style="cyan")
    summary.add_column("Value")
    summary.add_row("Cgroup path", report["cgroup_path"])
    summary.add_row("Running in Docker", "yes" if report["run_in_docker"] else "no")
    summary.add_row("Running in cgroup", "yes" if report["run_in_cgroup"] else "no")
    summary.add_row("CPU quota", f"{report['cpu']['quota']:.2f}")
    summary.add_row("CPU set", report["cpu"]["cpuset"] or "[dim]unknown[/dim]")
    summary.add_row("Available CPUs", str(report["cpu"]["available_cpus"]))
    summary.add_row("Logical CPUs", str(report["cpu"]["logical_cpus"]))
    summary.add_row("Effective memory limit", pretty_byte_size(report["memory"]["effective_limit"]))
    summary.add_row("Host total memory", pretty_byte_size(report["memory"]["host_total"]))
    summary.add_row("Host free memory", pretty_byte_size(report["memory"]["host_free"]))
    summary.add_row("Workers (io / cpu)", f"{report['workers']['io']} / {report['workers']['cpu']}")
    console.print(summary)

    limits = Table(title="Memory limits", show_header=True, header_style="bold cyan", box=box.SIMPLE)
    limits.add_column("Field", style="cyan")
    limits.add_column("Bytes", justify="right")
    limits.add_column("Size", justify="right", style="dim")
    for name, value in report["memory"]["limits"].items():
        limits.add_row(name, f"{value:,}", pretty_byte_size(value))
    console.print(limits)

    stat = report["memory_stat"]
    if stat is None:
        console.print("[yellow]memory.stat not found[/yellow]")
        return
    stat_table = Table(
        title=f"memory.stat (cgroup {stat['generation']})",
        show_header=True,
        header_style="bold cyan",
        box=box.SIMPLE,
    )
    stat_table.add_column("Key", style="cyan")
    stat_table.add_column("Value", justify="right")
    for name, value in stat.items():
        if name == "generation":
            continue
        stat_table.add_row(name, f"{value:,}")
    console.print(stat_table)


def main(argv: Optional[list] = None) -> int:
    """Main entry point with argument parsing."""
    parser = argparse.ArgumentParser(
        description="Effective CPU and memory limits of the current process",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Report for this process
  hwstats

  # Machine-readable output
  hwstats --json

  # Inspect a copied cgroup tree
  hwstats --root ./fixtures/sys/fs/cgroup --proc-cgroup ./fixtures/cgroup
        """
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON"
    )

    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help=f"cgroup filesystem mount point (default: {settings.CGROUP_ROOT})"
    )

    parser.add_argument(
        "--proc-cgroup",
        type=Path,
        default=None,
        help=f"Membership file to read (default: {settings.PROC_CGROUP})"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log resolver fallbacks"
    )

    args = parser.parse_args(argv)
    configure_logging(settings.LOG_LEVEL, verbose=args.verbose)

    paths = settings.default_paths(cgroup_root=args.root, proc_cgroup=args.proc_cgroup)
    report = collect_report(paths)

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        render_report(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
