# engine/__init__.py
"""
Concurrent workload engine.

Key components:
    - partitioning: Strided and batched splits of the task space
    - admission: In-flight bound for the task-pool runner
    - executor: Per-task write, read and verify
    - progress: Monotonic percent-complete reporting
    - runners: Thread-pool and bounded task-pool strategies
"""

from .types import Row, RunStats, TaskBatch
from .partitioning import batched_partitions, effective_task_count, strided_partitions
from .admission import AdmissionGate
from .progress import ProgressReporter
from .executor import WorkloadExecutor
from .runners import BoundedTaskPoolRunner, ThreadPoolRunner, WorkloadRunner, make_runner

__all__ = [
    "Row",
    "RunStats",
    "TaskBatch",
    "batched_partitions",
    "effective_task_count",
    "strided_partitions",
    "AdmissionGate",
    "ProgressReporter",
    "WorkloadExecutor",
    "WorkloadRunner",
    "ThreadPoolRunner",
    "BoundedTaskPoolRunner",
    "make_runner",
]
