"""Run orchestration: connect, provision or prepare, execute, report."""
from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Optional

from setproctitle import setproctitle

from cqlbench.config import BenchConfig, Mode
from cqlbench.db.schema import setup_schema
from cqlbench.db.session import connect, routable_node_count
from cqlbench.db.statements import prepare_statements
from cqlbench.engine.executor import WorkloadExecutor
from cqlbench.engine.partitioning import effective_task_count
from cqlbench.engine.progress import ProgressReporter
from cqlbench.engine.runners import make_runner
from cqlbench.engine.types import RunStats
from cqlbench.errors import ConfigError, ConnectError
from cqlbench.report import print_final_summary, print_run_header

logger = logging.getLogger(__name__)

__all__ = ["RunState", "setup_schema_command", "run_benchmark", "execute"]


class RunState(Enum):
    CONFIGURED = "configured"
    SCHEMA_READY = "schema-ready"
    PREPARED = "prepared"
    EXECUTING = "executing"
    DRAINING = "draining"
    COMPLETED = "completed"
    CONFIG_ERROR = "config-error"
    CONNECT_ERROR = "connect-error"


class _StateLog:
    """Records and logs run state transitions."""

    def __init__(self, history: Optional[list] = None):
        self.history = history if history is not None else []
        self.history.append(RunState.CONFIGURED)
        logger.info("Run state: %s", RunState.CONFIGURED.value)

    def enter(self, state: RunState) -> None:
        self.history.append(state)
        logger.info("Run state: %s", state.value)

    @property
    def current(self) -> RunState:
        return self.history[-1]


def _open_session(config: BenchConfig, states: _StateLog):
    try:
        config.validate()
    except ConfigError:
        states.enter(RunState.CONFIG_ERROR)
        raise
    try:
        return connect(config.nodes, config.compression)
    except ConfigError:
        states.enter(RunState.CONFIG_ERROR)
        raise
    except ConnectError:
        states.enter(RunState.CONNECT_ERROR)
        raise


def _close_session(session) -> None:
    cluster = getattr(session, "cluster", None)
    if cluster is not None:
        cluster.shutdown()


def setup_schema_command(config: BenchConfig, pause_s: float = 1.0) -> list[RunState]:
    """Provision the keyspace and table. Returns the state history."""
    setproctitle("cqlbench:prepare")
    states = _StateLog()
    session = _open_session(config, states)
    try:
        setup_schema(session, config.replication_factor, pause_s=pause_s)
        states.enter(RunState.SCHEMA_READY)
    finally:
        _close_session(session)
    print("Schema set up!")
    states.enter(RunState.COMPLETED)
    return states.history


def run_benchmark(
    config: BenchConfig,
    states: Optional[list] = None,
) -> RunStats:
    """
    Execute the configured workload and report progress and a summary.

    Process
    -------
    1. Validate config and connect (ConfigError / ConnectError are fatal)
    2. Count routable nodes and prepare statements on each of them
    3. Partition the task space and run the selected runner
    4. Wait for every unit to finish, then print the summary and "Done!"

    Request errors are logged and counted; they never fail the run. A
    verification fault propagates to the caller.

    Args:
        config: Validated run configuration
        states: Optional list that receives the state history

    Returns:
        Request counters for the run
    """
    setproctitle("cqlbench:main")
    log = _StateLog(states)

    if config.consistency:
        logger.warning(
            "--consistency=%s is accepted but not applied; requests use the driver default",
            config.consistency,
        )

    session = _open_session(config, log)
    try:
        runner = make_runner(config.runner, config.concurrency, config.batch_size)

        node_count = routable_node_count(session)
        statements = prepare_statements(
            session, config.workload, node_count, prepared=config.use_prepared
        )
        log.enter(RunState.PREPARED)

        task_count = effective_task_count(config.tasks, config.workload)
        start_time = datetime.now()
        print_run_header(
            config=config,
            start_time=start_time,
            effective_tasks=task_count,
            node_count=node_count,
        )

        stats = RunStats()
        with ProgressReporter(task_count, bar=config.progress_bar) as progress:
            executor = WorkloadExecutor(
                session, config.workload, statements, stats=stats, progress=progress
            )
            log.enter(RunState.EXECUTING)
            runner.run(
                executor,
                task_count,
                on_draining=lambda: log.enter(RunState.DRAINING),
            )

        end_time = datetime.now()
    finally:
        _close_session(session)

    log.enter(RunState.COMPLETED)
    print_final_summary(stats, start_time, end_time)
    print("Done!")
    return stats


def execute(config: BenchConfig) -> Optional[RunStats]:
    """Dispatch on --prepare / --run."""
    if config.mode is Mode.PREPARE:
        setup_schema_command(config)
        return None
    return run_benchmark(config)
