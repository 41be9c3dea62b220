# engine/partitioning.py
"""Task-space partitioning for concurrent workload runners."""

from __future__ import annotations

from itertools import islice
from typing import List, Sequence, Union

from cqlbench.config import Workload
from cqlbench.engine.types import TaskBatch

__all__ = [
    "strided_partitions",
    "batched_partitions",
    "effective_task_count",
    "format_partition_summary",
]


def effective_task_count(task_count: int, workload: Workload) -> int:
    """
    Number of tasks actually executed for a workload.

    A mixed task performs a write and a read of the same key, so the task
    count is halved rather than running two full passes over the range.
    """
    if workload is Workload.READS_AND_WRITES:
        return task_count // 2
    return task_count


def strided_partitions(concurrency: int, task_count: int) -> List[range]:
    """
    Divide [0, task_count) into interleaved slices, one per worker.

    Unit i owns i, i + concurrency, i + 2 * concurrency, ... so every worker
    sees the same mix of keys regardless of how cost varies across the range.

    Args:
        concurrency: Number of workers (one slice each)
        task_count: Size of the task space

    Returns:
        Exactly `concurrency` ranges; trailing ones are empty when there are
        fewer tasks than workers

    Example:
        >>> [list(r) for r in strided_partitions(3, 7)]
        [[0, 3, 6], [1, 4], [2, 5]]
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")
    if task_count < 0:
        raise ValueError(f"task_count must be >= 0, got {task_count}")

    return [range(i, task_count, concurrency) for i in range(concurrency)]


def batched_partitions(task_count: int, batch_size: int = 256) -> List[TaskBatch]:
    """
    Cut [0, task_count) into contiguous batches of batch_size.

    Each batch is scheduled as a single unit, which bounds the number of
    outstanding schedulable units and amortizes dispatch overhead.

    Example:
        >>> [(b.start, b.end) for b in batched_partitions(600, 256)]
        [(0, 256), (256, 512), (512, 600)]
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    if task_count < 0:
        raise ValueError(f"task_count must be >= 0, got {task_count}")

    return [
        TaskBatch(batch_id=n, start=start, end=min(start + batch_size, task_count))
        for n, start in enumerate(range(0, task_count, batch_size))
    ]


def format_partition_summary(
    partitions: Sequence[Union[range, TaskBatch]],
    max_lines: int = 4,
) -> str:
    """
    Format a short summary of partitions for display.

    Example:
        >>> print(format_partition_summary(strided_partitions(2, 5)))
        2 partitions, 5 tasks (min 2, max 3 per partition):
          #0: 3 tasks [0, 2, ...]
          #1: 2 tasks [1, 3, ...]
    """
    sizes = [len(p) for p in partitions]
    total = sum(sizes)
    if not partitions:
        return "0 partitions, 0 tasks"

    lines = [
        f"{len(partitions)} partitions, {total} tasks "
        f"(min {min(sizes)}, max {max(sizes)} per partition):"
    ]
    for n, part in enumerate(partitions[:max_lines]):
        preview = ", ".join(str(x) for x in islice(part, 2))
        lines.append(f"  #{n}: {len(part)} tasks [{preview}, ...]")
    if len(partitions) > max_lines:
        lines.append(f"  ... {len(partitions) - max_lines} more")

    return "\n".join(lines)
