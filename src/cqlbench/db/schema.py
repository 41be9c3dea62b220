"""Keyspace and table provisioning for the benchmark."""
from __future__ import annotations

import logging
import time

from cqlbench.config import KEYSPACE, TABLE
from cqlbench.errors import PrepareError

logger = logging.getLogger(__name__)

__all__ = ["schema_statements", "setup_schema"]


def schema_statements(replication_factor: int) -> list[str]:
    """DDL that (re)creates the benchmark keyspace and an empty table."""
    return [
        f"CREATE KEYSPACE IF NOT EXISTS {KEYSPACE} WITH replication = "
        f"{{'class': 'SimpleStrategy', 'replication_factor': {replication_factor}}}",
        f"DROP TABLE IF EXISTS {KEYSPACE}.{TABLE}",
        f"CREATE TABLE {KEYSPACE}.{TABLE} (pk bigint PRIMARY KEY, v1 bigint, v2 bigint)",
    ]


def setup_schema(session, replication_factor: int, pause_s: float = 1.0) -> None:
    """
    Create the keyspace and recreate the table.

    Pauses after each statement so schema changes settle across the cluster
    before the next one.

    Raises:
        PrepareError: If any DDL statement fails
    """
    for stmt in schema_statements(replication_factor):
        logger.info("Executing: %s", stmt)
        try:
            session.execute(stmt)
        except Exception as exc:
            raise PrepareError(f"schema setup failed on {stmt!r}: {exc}") from exc
        if pause_s > 0:
            time.sleep(pause_s)

    logger.info("Schema ready: %s.%s (rf=%d)", KEYSPACE, TABLE, replication_factor)
