# engine/runners.py
"""Interchangeable concurrency strategies for draining the task space."""

from __future__ import annotations

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, Iterable, List, Optional

from cqlbench.config import DEFAULT_BATCH_SIZE
from cqlbench.engine.admission import AdmissionGate
from cqlbench.engine.executor import WorkloadExecutor
from cqlbench.engine.partitioning import (
    batched_partitions,
    format_partition_summary,
    strided_partitions,
)
from cqlbench.engine.types import RunStats, TaskBatch
from cqlbench.errors import ConfigError, VerificationFault

logger = logging.getLogger(__name__)

__all__ = [
    "WorkloadRunner",
    "ThreadPoolRunner",
    "BoundedTaskPoolRunner",
    "make_runner",
]


class WorkloadRunner(ABC):
    """Drain [0, task_count) through an executor at a fixed concurrency.

    Implementations partition the task space up front, run every task
    exactly once, and return only after every unit has really finished.
    """

    name: str = ""

    def __init__(self, concurrency: int):
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self.concurrency = concurrency

    @abstractmethod
    def run(
        self,
        executor: WorkloadExecutor,
        task_count: int,
        on_draining: Optional[Callable[[], None]] = None,
    ) -> RunStats:
        """Execute all tasks. Raises VerificationFault if a read is wrong.

        on_draining is called once every unit has been dispatched and the
        runner starts waiting for them to finish.
        """


class ThreadPoolRunner(WorkloadRunner):
    """
    One OS thread per strided partition, all sharing the session.

    The driver session is thread-safe, so no lock is taken around it. Each
    thread runs its slice to completion; the run ends when all have joined.
    """

    name = "threads"

    def run(
        self,
        executor: WorkloadExecutor,
        task_count: int,
        on_draining: Optional[Callable[[], None]] = None,
    ) -> RunStats:
        partitions = strided_partitions(self.concurrency, task_count)
        stop = threading.Event()
        faults: List[VerificationFault] = []

        def drain(unit_id: int, task_ids: range) -> None:
            for task_id in task_ids:
                if stop.is_set():
                    logger.debug("Unit %d stopping early after fault", unit_id)
                    return
                try:
                    executor.run_task(task_id)
                except VerificationFault as exc:
                    faults.append(exc)
                    stop.set()
                    return

        logger.info("Partitioned into %d strided units", len(partitions))
        logger.debug("%s", format_partition_summary(partitions))
        with ThreadPoolExecutor(
            max_workers=self.concurrency,
            thread_name_prefix="cqlbench-unit",
        ) as pool:
            # Units left empty when concurrency > task_count get no thread
            futures = [
                pool.submit(drain, unit_id, task_ids)
                for unit_id, task_ids in enumerate(partitions)
                if task_ids
            ]
            logger.info("Draining %d of %d units", len(futures), len(partitions))
            if on_draining is not None:
                on_draining()
            wait(futures)
            for fut in futures:
                fut.result()  # surface unexpected worker crashes

        if faults:
            raise faults[0]
        return executor.stats


class BoundedTaskPoolRunner(WorkloadRunner):
    """
    Contiguous batches scheduled on an asyncio loop behind an admission gate.

    At most `concurrency` batches are in flight. The session handle is
    guarded by one asyncio.Lock held while each request is submitted, so
    request submission is serialized even though responses overlap.
    """

    name = "tasks"

    def __init__(self, concurrency: int, batch_size: int = DEFAULT_BATCH_SIZE):
        super().__init__(concurrency)
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self.batch_size = batch_size
        self.gate: Optional[AdmissionGate] = None

    def run(
        self,
        executor: WorkloadExecutor,
        task_count: int,
        on_draining: Optional[Callable[[], None]] = None,
    ) -> RunStats:
        batches = batched_partitions(task_count, self.batch_size)
        logger.info(
            "Dispatching %d batches of up to %d tasks (max %d in flight)",
            len(batches), self.batch_size, self.concurrency,
        )
        logger.debug("%s", format_partition_summary(batches))
        asyncio.run(self._dispatch(executor, batches, on_draining))
        return executor.stats

    async def _dispatch(
        self,
        executor: WorkloadExecutor,
        batches: Iterable[TaskBatch],
        on_draining: Optional[Callable[[], None]] = None,
    ) -> None:
        self.gate = gate = AdmissionGate(self.concurrency)
        lock = asyncio.Lock()
        faults: List[VerificationFault] = []
        tasks: List[asyncio.Task] = []

        for batch in batches:
            await gate.acquire()
            if faults:
                gate.release()
                break
            task = asyncio.create_task(self._drain_batch(executor, batch, gate, lock, faults))
            tasks.append(task)

        logger.info("Waiting for %d outstanding batches", gate.in_flight)
        if on_draining is not None:
            on_draining()
        await gate.drain()
        if tasks:
            await asyncio.gather(*tasks)

        if faults:
            raise faults[0]

    @staticmethod
    async def _drain_batch(
        executor: WorkloadExecutor,
        batch: TaskBatch,
        gate: AdmissionGate,
        lock: asyncio.Lock,
        faults: List[VerificationFault],
    ) -> None:
        try:
            for task_id in batch:
                if faults:
                    return
                await executor.run_task_async(task_id, lock)
        except VerificationFault as exc:
            faults.append(exc)
        finally:
            gate.release()


def make_runner(
    name: str,
    concurrency: int,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> WorkloadRunner:
    """Build the runner selected on the command line."""
    if name == ThreadPoolRunner.name:
        return ThreadPoolRunner(concurrency)
    if name == BoundedTaskPoolRunner.name:
        return BoundedTaskPoolRunner(concurrency, batch_size)
    raise ConfigError(f"unknown runner {name!r} (expected 'threads' or 'tasks')")
