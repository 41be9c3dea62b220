# tests/engine/test_partitioning.py
from __future__ import annotations

from collections import Counter

import pytest

from cqlbench.config import Workload
from cqlbench.engine.partitioning import (
    batched_partitions,
    effective_task_count,
    format_partition_summary,
    strided_partitions,
)


@pytest.mark.parametrize("concurrency,tasks", [(1, 10), (3, 7), (4, 4), (8, 3), (256, 10_000)])
def test_strided_covers_each_task_once(concurrency, tasks):
    parts = strided_partitions(concurrency, tasks)
    assert len(parts) == concurrency
    counts = Counter(t for p in parts for t in p)
    assert set(counts) == set(range(tasks))
    assert all(c == 1 for c in counts.values())


def test_strided_unit_owns_residue_class():
    parts = strided_partitions(4, 10)
    assert list(parts[0]) == [0, 4, 8]
    assert list(parts[1]) == [1, 5, 9]
    assert list(parts[3]) == [3, 7]


def test_strided_more_units_than_tasks_leaves_empty_units():
    parts = strided_partitions(5, 2)
    assert [len(p) for p in parts] == [1, 1, 0, 0, 0]


def test_strided_zero_tasks():
    assert all(len(p) == 0 for p in strided_partitions(3, 0))


@pytest.mark.parametrize("concurrency,tasks", [(0, 10), (2, -1)])
def test_strided_rejects_bad_args(concurrency, tasks):
    with pytest.raises(ValueError):
        strided_partitions(concurrency, tasks)


def test_batched_covers_range_contiguously():
    batches = batched_partitions(1000, 256)
    assert [(b.start, b.end) for b in batches] == [
        (0, 256), (256, 512), (512, 768), (768, 1000)
    ]
    assert [b.batch_id for b in batches] == [0, 1, 2, 3]
    assert sum(len(b) for b in batches) == 1000
    assert [t for b in batches for t in b] == list(range(1000))


def test_batched_small_and_empty():
    assert [(b.start, b.end) for b in batched_partitions(3, 256)] == [(0, 3)]
    assert batched_partitions(0, 256) == []


def test_batched_rejects_bad_batch_size():
    with pytest.raises(ValueError):
        batched_partitions(10, 0)


@pytest.mark.parametrize(
    "workload,tasks,expected",
    [
        (Workload.WRITES, 100, 100),
        (Workload.READS, 100, 100),
        (Workload.READS_AND_WRITES, 100, 50),
        (Workload.READS_AND_WRITES, 7, 3),
    ],
)
def test_effective_task_count(workload, tasks, expected):
    assert effective_task_count(tasks, workload) == expected


def test_partition_summary_truncates():
    text = format_partition_summary(strided_partitions(6, 12), max_lines=2)
    lines = text.splitlines()
    assert lines[0] == "6 partitions, 12 tasks (min 2, max 2 per partition):"
    assert lines[1] == "  #0: 2 tasks [0, 6, ...]"
    assert lines[-1] == "  ... 4 more"


def test_partition_summary_empty():
    assert format_partition_summary([]) == "0 partitions, 0 tasks"
