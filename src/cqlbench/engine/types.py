# engine/types.py
"""Shared types for the workload engine."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, fields

__all__ = ["Row", "TaskBatch", "RunStats"]


@dataclass(frozen=True)
class Row:
    """Synthetic row whose content is derived from its key alone."""

    pk: int
    v1: int
    v2: int

    @classmethod
    def for_task(cls, task_id: int) -> "Row":
        return cls(pk=task_id, v1=2 * task_id, v2=3 * task_id)

    @property
    def values(self) -> tuple[int, int]:
        """The (v1, v2) pair a read of this pk must return."""
        return self.v1, self.v2


@dataclass(frozen=True)
class TaskBatch:
    """Contiguous half-open range of task ids dispatched as one unit."""

    batch_id: int
    start: int
    """First task id (inclusive)"""

    end: int
    """Last task id (exclusive)"""

    def __iter__(self):
        return iter(range(self.start, self.end))

    def __len__(self) -> int:
        return self.end - self.start


@dataclass
class RunStats:
    """Request outcome counters, safe to bump from any worker thread."""

    writes_ok: int = 0
    write_errors: int = 0
    reads_ok: int = 0
    read_errors: int = 0
    read_misses: int = 0
    tasks_done: int = 0
    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def incr(self, name: str, delta: int = 1) -> None:
        with self._lock:
            setattr(self, name, getattr(self, name) + delta)

    @property
    def errors(self) -> int:
        return self.write_errors + self.read_errors

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return {
                f.name: getattr(self, f.name)
                for f in fields(self)
                if not f.name.startswith("_")
            }
