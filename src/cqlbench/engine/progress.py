# engine/progress.py
"""Monotonic percent-complete reporting shared by all workers."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from tqdm import tqdm

__all__ = ["ProgressReporter"]


class ProgressReporter:
    """
    Report integer percent-complete as tasks finish.

    Any worker may call advance(). The completed count and the last reported
    percent are updated together under one lock, and a percent is emitted
    only when it exceeds the last one, so emitted values are strictly
    increasing even when many workers finish tasks at the same time.

    Args:
        total: Number of tasks in the run
        emit: Callable receiving each "Progress: N%" line (default: tqdm.write)
        bar: If True, drive a tqdm bar over 0-100 instead of printing lines
    """

    def __init__(
        self,
        total: int,
        emit: Optional[Callable[[str], None]] = None,
        bar: bool = False,
    ):
        if total < 0:
            raise ValueError(f"total must be >= 0, got {total}")
        self.total = total
        self.completed = 0
        self.last_reported_percent = -1
        self._emit = emit or tqdm.write
        self._lock = threading.Lock()
        self._pbar: Optional[tqdm] = None
        if bar:
            self._pbar = tqdm(
                total=100,
                desc="Progress:",
                unit="%",
                ncols=100,
                bar_format="{desc} {n_fmt}%|{bar}| [{elapsed}<{remaining}]",
            )

    def start(self) -> None:
        """Report the starting percentage (100 for an empty run)."""
        with self._lock:
            self._report_locked(100 if self.total == 0 else 0)

    def advance(self, n: int = 1) -> None:
        """Record n finished tasks and report if the percentage moved."""
        with self._lock:
            self.completed += n
            if self.total:
                self._report_locked(100 * self.completed // self.total)

    def close(self) -> None:
        if self._pbar is not None:
            self._pbar.close()

    def __enter__(self) -> "ProgressReporter":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _report_locked(self, percent: int) -> None:
        # Compare-and-set on the last value; callers hold self._lock
        if percent <= self.last_reported_percent:
            return
        previous = max(self.last_reported_percent, 0)
        self.last_reported_percent = percent
        if self._pbar is not None:
            self._pbar.update(percent - previous)
        else:
            self._emit(f"Progress: {percent}%")
