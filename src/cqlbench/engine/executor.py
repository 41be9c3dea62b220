# engine/executor.py
"""Per-task workload logic: build the row, write, read back, verify."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from cqlbench.config import Workload
from cqlbench.db.statements import Statements
from cqlbench.engine.progress import ProgressReporter
from cqlbench.engine.types import Row, RunStats
from cqlbench.errors import RequestError, VerificationFault

logger = logging.getLogger(__name__)

__all__ = ["WorkloadExecutor", "first_row"]


def first_row(result):
    """Return the first row of a driver result (ResultSet or row list)."""
    if result is None:
        return None
    return next(iter(result), None)


def _to_asyncio(response_future, loop: asyncio.AbstractEventLoop) -> asyncio.Future:
    """Bridge a driver ResponseFuture into the running event loop.

    Driver callbacks fire on its I/O thread, so results are handed over
    with call_soon_threadsafe.
    """
    fut = loop.create_future()

    def _set_result(result):
        if not fut.done():
            fut.set_result(result)

    def _set_exception(exc):
        if not fut.done():
            fut.set_exception(exc)

    response_future.add_callbacks(
        callback=lambda result: loop.call_soon_threadsafe(_set_result, result),
        errback=lambda exc: loop.call_soon_threadsafe(_set_exception, exc),
    )
    return fut


class WorkloadExecutor:
    """
    Execute single tasks against a shared session.

    Request failures are logged, counted and swallowed at the task boundary
    so one bad request never stops the owning worker. A read that returns
    the wrong values raises VerificationFault, which is never swallowed.

    Args:
        session: Driver session shared by every worker
        workload: Which operations each task performs
        statements: Prepared handles or ad-hoc text for write and read
        stats: Counters updated as tasks finish
        progress: Optional reporter advanced once per finished task
    """

    def __init__(
        self,
        session,
        workload: Workload,
        statements: Statements,
        stats: Optional[RunStats] = None,
        progress: Optional[ProgressReporter] = None,
    ):
        if workload.writes and statements.write is None:
            raise ValueError(f"workload {workload.value!r} needs a write statement")
        if workload.reads and statements.read is None:
            raise ValueError(f"workload {workload.value!r} needs a read statement")
        self.session = session
        self.workload = workload
        self.statements = statements
        self.stats = stats if stats is not None else RunStats()
        self.progress = progress

    # ---- Blocking path (thread runner) ------------------------------------

    def run_task(self, task_id: int) -> bool:
        """Run one task; return True if every request it issued succeeded."""
        row = Row.for_task(task_id)
        try:
            if self.workload.writes:
                self._request("write", row.pk, self.session.execute,
                              self.statements.write, self._write_params(row))
            if self.workload.reads:
                result = self._request("read", row.pk, self.session.execute,
                                       self.statements.read,
                                       self.statements.read_params(row.pk))
                self._verify(row, first_row(result))
            return True
        except RequestError as exc:
            self._record_failure(exc)
            return False
        finally:
            self._finish()

    # ---- Cooperative path (task-pool runner) -------------------------------

    async def run_task_async(self, task_id: int, lock: asyncio.Lock) -> bool:
        """
        Run one task on the event loop.

        The session handle is shared by every batch, so `lock` is held while
        a request is submitted; awaiting the response happens outside it.
        """
        row = Row.for_task(task_id)
        try:
            if self.workload.writes:
                await self._request_async("write", row.pk, lock,
                                          self.statements.write,
                                          self._write_params(row))
            if self.workload.reads:
                result = await self._request_async("read", row.pk, lock,
                                                   self.statements.read,
                                                   self.statements.read_params(row.pk))
                self._verify(row, first_row(result))
            return True
        except RequestError as exc:
            self._record_failure(exc)
            return False
        finally:
            self._finish()

    # ---- Helpers -------------------------------------------------------------

    def _write_params(self, row: Row):
        return self.statements.write_params(row.pk, row.v1, row.v2)

    def _request(self, op: str, pk: int, call, statement, params):
        try:
            result = call(statement, params)
        except Exception as exc:
            raise RequestError(op, pk, exc) from exc
        self.stats.incr(f"{op}s_ok")
        return result

    async def _request_async(self, op: str, pk: int, lock: asyncio.Lock, statement, params):
        loop = asyncio.get_running_loop()
        try:
            async with lock:
                response_future = self.session.execute_async(statement, params)
            result = await _to_asyncio(response_future, loop)
        except Exception as exc:
            raise RequestError(op, pk, exc) from exc
        self.stats.incr(f"{op}s_ok")
        return result

    def _verify(self, expected: Row, row) -> None:
        if row is None:
            # Not visible yet under eventual consistency, or never written
            logger.warning("Read miss: no row for pk=%d", expected.pk)
            self.stats.incr("read_misses")
            return
        actual = (row[0], row[1])
        if actual != expected.values:
            raise VerificationFault(expected.pk, expected.values, actual)

    def _record_failure(self, exc: RequestError) -> None:
        # A failed write skips the read: the row may not be there to find
        logger.error("Error: %s", exc)
        self.stats.incr(f"{exc.op}_errors")

    def _finish(self) -> None:
        self.stats.incr("tasks_done")
        if self.progress is not None:
            self.progress.advance()
