# db/__init__.py
"""Cluster session, schema provisioning and statement preparation."""

from .session import connect, create_cluster, routable_node_count
from .schema import schema_statements, setup_schema
from .statements import Statements, prepare_on_all_nodes, prepare_statements

__all__ = [
    # Session
    "connect",
    "create_cluster",
    "routable_node_count",
    # Schema
    "schema_statements",
    "setup_schema",
    # Statements
    "Statements",
    "prepare_on_all_nodes",
    "prepare_statements",
]
