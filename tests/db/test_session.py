# tests/db/test_session.py
from __future__ import annotations

import pytest
from cassandra.cluster import NoHostAvailable

from cqlbench.config import Compression
from cqlbench.db import session as session_mod
from cqlbench.db.session import connect, create_cluster, routable_node_count
from cqlbench.errors import ConfigError, ConnectError


class StubCluster:
    """Records constructor kwargs; connect() succeeds or raises."""
    instances = []
    fail_with = None

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.shutdown_calls = 0
        self.metadata = type("Meta", (), {"cluster_name": "stub"})()
        StubCluster.instances.append(self)

    def connect(self):
        if StubCluster.fail_with is not None:
            raise StubCluster.fail_with
        return type("Session", (), {"cluster": self})()

    def shutdown(self):
        self.shutdown_calls += 1


@pytest.fixture()
def stub_cluster(monkeypatch):
    StubCluster.instances = []
    StubCluster.fail_with = None
    monkeypatch.setattr(session_mod, "Cluster", StubCluster)
    return StubCluster


def test_create_cluster_configures_round_robin_without_auto_prepare():
    cluster = create_cluster(["127.0.0.1"], 9142, Compression.NONE)
    try:
        assert cluster.port == 9142
        assert cluster.compression is False
        assert cluster.prepare_on_all_hosts is False
        policy = cluster.profile_manager.default.load_balancing_policy
        assert type(policy).__name__ == "RoundRobinPolicy"
    finally:
        cluster.shutdown()


def test_connect_passes_parsed_contact_points(stub_cluster):
    session = connect("10.0.0.1:9043,10.0.0.2:9043", Compression.SNAPPY)
    cluster = stub_cluster.instances[-1]
    assert session.cluster is cluster
    assert cluster.kwargs["contact_points"] == ["10.0.0.1", "10.0.0.2"]
    assert cluster.kwargs["port"] == 9043
    assert cluster.kwargs["compression"] == "snappy"
    assert cluster.kwargs["prepare_on_all_hosts"] is False


def test_connect_without_compression_disables_it(stub_cluster):
    connect("127.0.0.1")
    assert stub_cluster.instances[-1].kwargs["compression"] is False


def test_unreachable_cluster_raises_connect_error(stub_cluster):
    stub_cluster.fail_with = NoHostAvailable("no hosts", {})
    with pytest.raises(ConnectError):
        connect("10.0.0.9:9042")
    assert stub_cluster.instances[-1].shutdown_calls == 1


def test_bad_contact_point_fails_before_cluster_is_built(stub_cluster):
    with pytest.raises(ConfigError):
        connect("10.0.0.1:notaport")
    assert stub_cluster.instances == []


@pytest.mark.parametrize("hosts,expected", [([], 1), (["a"], 1), (["a", "b", "c"], 3)])
def test_routable_node_count(make_session, hosts, expected):
    assert routable_node_count(make_session(hosts=hosts)) == expected
