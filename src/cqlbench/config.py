# cqlbench/config.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from cqlbench.errors import ConfigError

KEYSPACE = "ks_scylla_bench"
TABLE = "t"

DEFAULT_NODES = "127.0.0.1:9042"
DEFAULT_PORT = 9042
DEFAULT_CONCURRENCY = 256
DEFAULT_TASKS = 1_000_000
DEFAULT_REPLICATION_FACTOR = 3
DEFAULT_BATCH_SIZE = 256


class Workload(Enum):
    """Which operations each task performs."""

    WRITES = "write"
    READS = "read"
    READS_AND_WRITES = "mixed"

    @property
    def writes(self) -> bool:
        return self in (Workload.WRITES, Workload.READS_AND_WRITES)

    @property
    def reads(self) -> bool:
        return self in (Workload.READS, Workload.READS_AND_WRITES)

    @classmethod
    def parse(cls, name: Optional[str]) -> "Workload":
        if name is None:
            return cls.WRITES
        try:
            return cls(name)
        except ValueError:
            raise ConfigError(f"bad workload type: {name}") from None


class Compression(Enum):
    NONE = "none"
    LZ4 = "lz4"
    SNAPPY = "snappy"

    @classmethod
    def parse(cls, name: Optional[str]) -> "Compression":
        if name is None:
            return cls.NONE
        try:
            return cls(name)
        except ValueError:
            raise ConfigError(f"bad compression: {name}") from None


class Mode(Enum):
    PREPARE = "prepare"
    RUN = "run"


RUNNERS = ("threads", "tasks")


def parse_contact_points(nodes: str) -> Tuple[List[str], int]:
    """
    Split a comma-separated "host[:port]" list into hosts and one port.

    The driver takes a single native-protocol port for the whole cluster,
    so all entries must agree on it.

    Examples:
        >>> parse_contact_points("10.0.0.1:9042,10.0.0.2")
        (['10.0.0.1', '10.0.0.2'], 9042)
    """
    hosts: List[str] = []
    ports = set()
    for entry in nodes.split(","):
        entry = entry.strip()
        if not entry:
            continue
        host, sep, port_str = entry.rpartition(":")
        if not sep:
            host, port = entry, DEFAULT_PORT
        else:
            try:
                port = int(port_str)
            except ValueError:
                raise ConfigError(f"bad port in contact point {entry!r}") from None
            if not 0 < port < 65536:
                raise ConfigError(f"port out of range in contact point {entry!r}")
        if not host:
            raise ConfigError(f"missing host in contact point {entry!r}")
        hosts.append(host)
        ports.add(port)

    if not hosts:
        raise ConfigError("no contact points given")
    if len(ports) > 1:
        raise ConfigError(f"all contact points must use the same port, got {sorted(ports)}")
    return hosts, ports.pop()


# Run configuration assembled by the CLI
@dataclass(frozen=True)
class BenchConfig:
    """Everything a run needs, validated before any network I/O.

    Runner options:
        - "threads": one OS thread per strided partition, shared session
        - "tasks": asyncio batches behind an admission gate, session
          submission serialized by a lock
    """
    mode: Mode
    nodes: str = DEFAULT_NODES
    concurrency: int = DEFAULT_CONCURRENCY
    tasks: int = DEFAULT_TASKS
    replication_factor: int = DEFAULT_REPLICATION_FACTOR
    compression: Compression = Compression.NONE
    workload: Workload = Workload.WRITES
    consistency: Optional[str] = None  # parsed but not applied

    # Engine
    runner: str = "threads"
    batch_size: int = DEFAULT_BATCH_SIZE
    use_prepared: bool = True

    # Output
    progress_bar: bool = False

    def validate(self) -> None:
        """Raise ConfigError on values the engine cannot run with."""
        if self.concurrency < 1:
            raise ConfigError(f"--concurrency must be >= 1, got {self.concurrency}")
        if self.tasks < 0:
            raise ConfigError(f"--tasks must be >= 0, got {self.tasks}")
        if self.replication_factor < 1:
            raise ConfigError(
                f"--replication-factor must be >= 1, got {self.replication_factor}"
            )
        if self.batch_size < 1:
            raise ConfigError(f"--batch-size must be >= 1, got {self.batch_size}")
        if self.runner not in RUNNERS:
            raise ConfigError(f"--runner must be one of {RUNNERS}, got {self.runner!r}")
        parse_contact_points(self.nodes)
