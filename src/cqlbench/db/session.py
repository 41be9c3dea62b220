"""Cluster connection and load-balancing introspection."""
from __future__ import annotations

import logging
from typing import List

from cassandra.cluster import (
    Cluster,
    ExecutionProfile,
    EXEC_PROFILE_DEFAULT,
    NoHostAvailable,
)
from cassandra.policies import RoundRobinPolicy

from cqlbench.config import Compression, DEFAULT_PORT, parse_contact_points
from cqlbench.errors import ConnectError

logger = logging.getLogger(__name__)

__all__ = [
    "create_cluster",
    "connect",
    "routable_node_count",
]

_DRIVER_COMPRESSION = {
    Compression.NONE: False,
    Compression.LZ4: "lz4",
    Compression.SNAPPY: "snappy",
}


def create_cluster(
    hosts: List[str],
    port: int = DEFAULT_PORT,
    compression: Compression = Compression.NONE,
    request_timeout: float = 12.0,
) -> Cluster:
    """Create a Cluster with round-robin routing (not connected).

    prepare_on_all_hosts is off: statements are spread across nodes by
    prepare_on_all_nodes() instead.
    """
    profile = ExecutionProfile(
        load_balancing_policy=RoundRobinPolicy(),
        request_timeout=request_timeout,
    )
    return Cluster(
        contact_points=hosts,
        port=port,
        execution_profiles={EXEC_PROFILE_DEFAULT: profile},
        protocol_version=4,
        compression=_DRIVER_COMPRESSION[compression],
        prepare_on_all_hosts=False,
        connect_timeout=11,
    )


def connect(nodes: str, compression: Compression = Compression.NONE):
    """
    Open a session against the cluster.

    Returns:
        Connected driver Session (its cluster is reachable as session.cluster)

    Raises:
        ConfigError: If the contact points cannot be parsed
        ConnectError: If no contact point could be reached
    """
    hosts, port = parse_contact_points(nodes)
    cluster = create_cluster(hosts, port, compression)
    logger.info("Connecting to %s (port %d, compression=%s)", hosts, port, compression.value)
    try:
        session = cluster.connect()
    except (NoHostAvailable, OSError) as exc:
        cluster.shutdown()
        raise ConnectError(f"could not connect to {nodes}: {exc}") from exc
    logger.info("Connected to cluster %r", cluster.metadata.cluster_name)
    return session


def routable_node_count(session) -> int:
    """
    Number of distinct hosts the default load-balancing policy can route to.

    A policy that only ever targets one node needs a single prepare; one
    that rotates across several needs the statement prepared on each.
    """
    policy = session.cluster.profile_manager.default.load_balancing_policy
    hosts = {host for host in policy.make_query_plan(None, None)}
    return max(1, len(hosts))
