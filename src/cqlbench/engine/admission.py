# engine/admission.py
"""Admission control for the cooperative batch runner."""

from __future__ import annotations

import asyncio

__all__ = ["AdmissionGate"]


class AdmissionGate:
    """
    Counting semaphore bounding in-flight batches to `concurrency`.

    A permit is acquired before a batch is dispatched and released when the
    batch finishes. drain() waits for every permit to come home, which is
    the only point at which a run may be declared complete.
    """

    def __init__(self, concurrency: int):
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self.concurrency = concurrency
        self._sem = asyncio.Semaphore(concurrency)
        self.in_flight = 0
        self.peak = 0
        """High-water mark of in_flight over the gate's lifetime"""

    async def acquire(self) -> None:
        await self._sem.acquire()
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)

    def release(self) -> None:
        if self.in_flight <= 0:
            raise RuntimeError("AdmissionGate released more times than acquired")
        self.in_flight -= 1
        self._sem.release()

    async def drain(self) -> None:
        """Block until all outstanding permits have been released."""
        for _ in range(self.concurrency):
            await self._sem.acquire()
        for _ in range(self.concurrency):
            self._sem.release()

    async def __aenter__(self) -> "AdmissionGate":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.release()
        return False
