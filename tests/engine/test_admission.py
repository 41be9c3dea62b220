# tests/engine/test_admission.py
from __future__ import annotations

import asyncio

import pytest

from cqlbench.engine.admission import AdmissionGate


def test_bounds_in_flight_and_records_peak():
    async def scenario():
        gate = AdmissionGate(4)
        running = 0
        seen = []

        async def unit():
            nonlocal running
            async with gate:
                running += 1
                seen.append(running)
                await asyncio.sleep(0.01)
                running -= 1

        await asyncio.gather(*(unit() for _ in range(10)))
        return gate, seen

    gate, seen = asyncio.run(scenario())
    assert max(seen) <= 4
    assert gate.peak == 4
    assert gate.in_flight == 0


def test_drain_waits_for_outstanding_permits():
    async def scenario():
        gate = AdmissionGate(3)
        finished = []

        async def unit(n):
            await asyncio.sleep(0.01 * n)
            finished.append(n)
            gate.release()

        for n in range(3):
            await gate.acquire()
            asyncio.create_task(unit(n))

        await gate.drain()
        return gate, finished

    gate, finished = asyncio.run(scenario())
    assert sorted(finished) == [0, 1, 2]
    assert gate.in_flight == 0


def test_drain_on_idle_gate_returns_immediately():
    async def scenario():
        gate = AdmissionGate(2)
        await asyncio.wait_for(gate.drain(), timeout=1)
        # Permits are returned after draining
        await asyncio.wait_for(gate.acquire(), timeout=1)
        return gate

    assert asyncio.run(scenario()).in_flight == 1


def test_over_release_raises():
    async def scenario():
        AdmissionGate(1).release()

    with pytest.raises(RuntimeError):
        asyncio.run(scenario())


def test_rejects_zero_concurrency():
    with pytest.raises(ValueError):
        AdmissionGate(0)
