# tests/conftest.py
from __future__ import annotations

import threading
from collections import Counter
from types import SimpleNamespace

import pytest


# --- Test doubles -------------------------------------------------------------

class FakePrepared:
    """Stand-in for a driver PreparedStatement."""
    def __init__(self, query_string: str):
        self.query_string = query_string

    def __repr__(self):
        return f"FakePrepared({self.query_string!r})"


class FakeResponseFuture:
    """Resolves immediately, or after `delay` seconds on a timer thread."""
    def __init__(self, fn, delay: float = 0.0):
        self._fn = fn
        self._delay = delay

    def add_callbacks(self, callback, errback):
        def fire():
            try:
                result = self._fn()
            except Exception as exc:
                errback(exc)
            else:
                callback(result)

        if self._delay > 0:
            threading.Timer(self._delay, fire).start()
        else:
            fire()


class FakePolicy:
    def __init__(self, hosts):
        self.hosts = list(hosts)

    def make_query_plan(self, keyspace=None, query=None):
        return iter(self.hosts)


class FakeCluster:
    def __init__(self, hosts):
        self.profile_manager = SimpleNamespace(
            default=SimpleNamespace(load_balancing_policy=FakePolicy(hosts))
        )
        self.metadata = SimpleNamespace(cluster_name="fake")
        self.shutdown_calls = 0

    def shutdown(self):
        self.shutdown_calls += 1


class FakeSession:
    """
    In-memory table keyed by pk, speaking just enough of the driver API.

    Failure injection:
        fail_writes / fail_reads: pks whose request raises
        corrupt_reads: pks whose read returns wrong values
        fail_prepare: make every prepare() raise
    """
    def __init__(self, hosts=("10.0.0.1",), delay: float = 0.0):
        self.cluster = FakeCluster(hosts)
        self.delay = delay
        self.store: dict[int, tuple[int, int]] = {}
        self.ddl: list[str] = []
        self.prepare_calls: Counter = Counter()
        self.ops: list[tuple[str, int]] = []
        self.fail_writes: set[int] = set()
        self.fail_reads: set[int] = set()
        self.corrupt_reads: set[int] = set()
        self.fail_prepare = False
        self.fail_ddl = False
        self.in_flight = 0
        self.peak = 0
        self._lock = threading.Lock()

    # Driver API
    def prepare(self, text: str):
        self.prepare_calls[text] += 1
        if self.fail_prepare:
            raise RuntimeError("prepare rejected")
        return FakePrepared(text)

    def execute(self, statement, params=None):
        text = getattr(statement, "query_string", statement)
        if not (text.startswith("INSERT") or text.startswith("SELECT")):
            if self.fail_ddl:
                raise RuntimeError("ddl rejected")
            self.ddl.append(text)
            return []
        with self._lock:
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
        try:
            return self._apply(text, params)
        finally:
            with self._lock:
                self.in_flight -= 1

    def execute_async(self, statement, params=None):
        text = getattr(statement, "query_string", statement)
        return FakeResponseFuture(lambda: self._apply(text, params), self.delay)

    # Helpers
    def _apply(self, text, params):
        if isinstance(params, dict):
            pk = params["pk"]
            values = (params.get("v1"), params.get("v2"))
        else:
            pk = params[0]
            values = tuple(params[1:3])

        with self._lock:
            if text.startswith("INSERT"):
                self.ops.append(("write", pk))
                if pk in self.fail_writes:
                    raise RuntimeError(f"write timeout pk={pk}")
                self.store[pk] = values
                return []

            self.ops.append(("read", pk))
            if pk in self.fail_reads:
                raise RuntimeError(f"read timeout pk={pk}")
            if pk in self.corrupt_reads:
                return [(-1, -1)]
            row = self.store.get(pk)
            return [] if row is None else [row]

    def ops_for(self, pk: int) -> list[str]:
        return [op for op, key in self.ops if key == pk]


@pytest.fixture()
def session():
    return FakeSession()


@pytest.fixture()
def seeded_session():
    """Session whose table already holds the deterministic rows 0..9999."""
    s = FakeSession()
    s.store.update({pk: (2 * pk, 3 * pk) for pk in range(10_000)})
    return s


@pytest.fixture()
def make_session():
    """Factory for sessions with custom hosts or response delay."""
    return FakeSession
