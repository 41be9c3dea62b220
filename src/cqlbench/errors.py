"""Error taxonomy for the benchmark harness."""
from __future__ import annotations

__all__ = [
    "BenchError",
    "ConfigError",
    "ConnectError",
    "PrepareError",
    "RequestError",
    "VerificationFault",
]


class BenchError(Exception):
    """Base class for all harness errors."""


class ConfigError(BenchError):
    """Invalid or conflicting command-line configuration."""


class ConnectError(BenchError):
    """The cluster could not be reached while opening the session."""


class PrepareError(BenchError):
    """Keyspace, table or statement preparation failed."""


class RequestError(BenchError):
    """A single write or read failed. Recoverable: the task is skipped."""

    def __init__(self, op: str, pk: int, cause: BaseException):
        super().__init__(f"{op} failed for pk={pk}: {cause!r}")
        self.op = op
        self.pk = pk
        self.cause = cause


class VerificationFault(AssertionError):
    """A read returned values that do not match the deterministic row."""

    def __init__(self, pk: int, expected: tuple, actual: tuple):
        super().__init__(
            f"verification failed for pk={pk}: expected (v1, v2)={expected}, got {actual}"
        )
        self.pk = pk
        self.expected = expected
        self.actual = actual
