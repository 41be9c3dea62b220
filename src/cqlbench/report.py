"""Run header and final summary display."""
from __future__ import annotations

from datetime import datetime

from cqlbench.config import BenchConfig
from cqlbench.engine.types import RunStats
from cqlbench.utilities.display import (
    format_banner,
    format_config_items,
    format_duration,
    format_rate,
)

__all__ = ["format_run_header", "print_run_header", "print_final_summary"]


def format_run_header(
    config: BenchConfig,
    start_time: datetime,
    effective_tasks: int,
    node_count: int,
) -> str:
    """Build the human-readable configuration block printed before a run."""
    items = {
        "Contact points": config.nodes,
        "Routable nodes": node_count,
        "Workload": config.workload.value,
        "Tasks requested": f"{config.tasks:,}",
        "Tasks executed": f"{effective_tasks:,}",
        "Concurrency": config.concurrency,
        "Runner": config.runner,
        "Compression": config.compression.value,
        "Statements": "prepared" if config.use_prepared else "unprepared",
    }
    if config.runner == "tasks":
        items["Batch size"] = config.batch_size
    if config.consistency:
        items["Consistency"] = f"{config.consistency} (not applied)"

    return "\n".join([
        format_banner("CQL LOAD BENCHMARK", style="━"),
        f"Start Time: {start_time:%Y-%m-%d %H:%M:%S}",
        "",
        format_banner("Configuration"),
        format_config_items(items),
        "",
    ])


def print_run_header(**kwargs) -> None:
    """Print the run header to stdout (CLI usage)."""
    print(format_run_header(**kwargs))


def print_final_summary(
    stats: RunStats,
    start_time: datetime,
    end_time: datetime,
) -> None:
    """
    Print final run statistics.

    Args:
        stats: Request counters from the run
        start_time: Execution start timestamp
        end_time: Execution end timestamp
    """
    snap = stats.snapshot()
    elapsed = end_time - start_time
    seconds = elapsed.total_seconds()
    requests = snap["writes_ok"] + snap["reads_ok"]

    print()
    print(format_banner("Final Summary"))
    print(format_config_items({
        "Tasks finished": f"{snap['tasks_done']:,}",
        "Writes ok": f"{snap['writes_ok']:,}",
        "Write errors": f"{snap['write_errors']:,}",
        "Reads ok": f"{snap['reads_ok']:,}",
        "Read errors": f"{snap['read_errors']:,}",
        "Read misses": f"{snap['read_misses']:,}",
        "Throughput": format_rate(requests, seconds, "requests"),
        "Runtime": format_duration(elapsed),
    }))
    print()
