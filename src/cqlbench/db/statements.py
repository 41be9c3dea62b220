"""Statement text and per-node statement preparation."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from cqlbench.config import KEYSPACE, TABLE, Workload
from cqlbench.errors import PrepareError

logger = logging.getLogger(__name__)

__all__ = [
    "INSERT_CQL",
    "SELECT_CQL",
    "INSERT_CQL_NAMED",
    "SELECT_CQL_NAMED",
    "Statements",
    "prepare_on_all_nodes",
    "prepare_statements",
]

INSERT_CQL = f"INSERT INTO {KEYSPACE}.{TABLE} (pk, v1, v2) VALUES (?, ?, ?)"
SELECT_CQL = f"SELECT v1, v2 FROM {KEYSPACE}.{TABLE} WHERE pk = ?"

# Ad-hoc (unprepared) forms, bound by the driver from a dict of named values
INSERT_CQL_NAMED = (
    f"INSERT INTO {KEYSPACE}.{TABLE} (pk, v1, v2) VALUES (%(pk)s, %(v1)s, %(v2)s)"
)
SELECT_CQL_NAMED = f"SELECT v1, v2 FROM {KEYSPACE}.{TABLE} WHERE pk = %(pk)s"


@dataclass(frozen=True)
class Statements:
    """Write and read statements for a run, shared read-only by all workers."""

    write: Optional[Any]
    read: Optional[Any]
    prepared: bool

    def write_params(self, pk: int, v1: int, v2: int):
        if self.prepared:
            return (pk, v1, v2)
        return {"pk": pk, "v1": v1, "v2": v2}

    def read_params(self, pk: int):
        if self.prepared:
            return (pk,)
        return {"pk": pk}


def prepare_on_all_nodes(session, text: str, node_count: int):
    """
    Prepare a statement once per node the load balancer can route to.

    The driver does not broadcast a prepare across the cluster, and a
    round-robin policy may send any execution to any node, so the statement
    is prepared node_count times back to back before first use. Every node
    returns an equivalent handle for the same statement; the last is kept.

    Args:
        session: Driver session exposing prepare(text)
        text: CQL statement text
        node_count: Number of distinct routable nodes (at least one prepare
            is always issued)

    Returns:
        The prepared statement handle

    Raises:
        PrepareError: If any prepare call fails
    """
    attempts = max(1, node_count)
    handle = None
    for n in range(attempts):
        try:
            handle = session.prepare(text)
        except Exception as exc:
            raise PrepareError(
                f"preparing statement failed ({n + 1}/{attempts}): {text!r}: {exc}"
            ) from exc
    logger.debug("Prepared %r %d time(s)", text, attempts)
    return handle


def prepare_statements(
    session,
    workload: Workload,
    node_count: int,
    prepared: bool = True,
) -> Statements:
    """
    Build the statements a workload needs, once per run.

    Only the statements the workload executes are prepared. With
    prepared=False the ad-hoc CQL text is returned and no prepare call is
    made.
    """
    if not prepared:
        logger.info("Using unprepared statements")
        return Statements(
            write=INSERT_CQL_NAMED if workload.writes else None,
            read=SELECT_CQL_NAMED if workload.reads else None,
            prepared=False,
        )

    if node_count > 1:
        logger.info("Load balancer routes to %d nodes; preparing on each", node_count)

    write = prepare_on_all_nodes(session, INSERT_CQL, node_count) if workload.writes else None
    read = prepare_on_all_nodes(session, SELECT_CQL, node_count) if workload.reads else None
    return Statements(write=write, read=read, prepared=True)
