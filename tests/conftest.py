# ============================================================================
# SHARED TEST FIXTURES
# ============================================================================
# STATUS: Tests - Driver fakes for the cluster health probe
# PURPOSE: Fake hosts and diagnostic connections without a live cluster
# CREATED: 19 OCT 2026
# ============================================================================
"""
Shared fixtures.

FakeConnection exposes the same read surface as DiagnosticConnection
(metadata, all_hosts, distance, pool_state, up_since_millis,
execute_liveness_query) backed by plain objects.
"""

import uuid
from collections import namedtuple
from types import SimpleNamespace

import pytest

from core.config.cassandra import CassandraConfig
from core.contracts import (
    LoadBalancingPolicyKind,
    NodeDistance,
    ReconnectionPolicyKind,
    RetryPolicyKind,
)
from health.registry import get_registry


LocalRow = namedtuple("LocalRow", ["cluster_name"])

_SAME_AS_ADDRESS = object()


def make_host(
    host_id=None,
    address="127.0.0.1",
    datacenter="datacenter1",
    rack="rack1",
    is_up=True,
    release_version="4.1.3",
    listen_address=_SAME_AS_ADDRESS,
    **overrides,
):
    """
    Build a host object with the attributes of a driver Host.

    listen_address follows address unless given; None leaves it unset.
    """
    if listen_address is _SAME_AS_ADDRESS:
        listen_address = address
    attrs = dict(
        host_id=host_id if host_id is not None else uuid.uuid4(),
        endpoint=f"{address}:9042",
        address=address,
        broadcast_address=address,
        broadcast_port=7000,
        broadcast_rpc_address=address,
        broadcast_rpc_port=9042,
        listen_address=listen_address,
        listen_port=7000 if listen_address else None,
        datacenter=datacenter,
        rack=rack,
        is_up=is_up,
        release_version=release_version,
        dse_version=None,
        dse_workloads=None,
    )
    attrs.update(overrides)
    return SimpleNamespace(**attrs)


class FakeConnection:
    """In-memory stand-in for DiagnosticConnection."""

    def __init__(
        self,
        hosts=None,
        cluster_name="Test Cluster",
        keyspaces=("system", "system_schema", "test"),
        local_datacenter="datacenter1",
        session_name="cassandra-health-check",
        liveness_rows=None,
        liveness_error=None,
        up_since=None,
        pool_states=None,
    ):
        self.hosts = list(hosts) if hosts is not None else [make_host()]
        self.metadata = SimpleNamespace(
            cluster_name=cluster_name,
            keyspaces={name: object() for name in keyspaces},
        )
        self.local_datacenter = local_datacenter
        self.session_name = session_name
        self.load_balancing_policies = {
            "default": LoadBalancingPolicyKind.TOKEN_AWARE_DC_AWARE,
            "diagnostic": LoadBalancingPolicyKind.TOKEN_AWARE_DC_AWARE,
        }
        self.retry_policies = {
            "default": RetryPolicyKind.DEFAULT,
            "diagnostic": RetryPolicyKind.DEFAULT,
        }
        self.reconnection_policy = ReconnectionPolicyKind.EXPONENTIAL
        self.execution_profile_names = ["default", "diagnostic"]
        self.config = CassandraConfig()
        self.liveness_rows = (
            liveness_rows if liveness_rows is not None else [LocalRow(cluster_name)]
        )
        self.liveness_error = liveness_error
        self.up_since = up_since or {}
        self.pool_states = pool_states or {}
        self.liveness_calls = 0

    def all_hosts(self):
        return list(self.hosts)

    def distance(self, host):
        return NodeDistance.LOCAL if host.datacenter == self.local_datacenter else NodeDistance.REMOTE

    def pool_state(self, host):
        return self.pool_states.get(host.endpoint, {"open_count": 1, "in_flights": [0]})

    def up_since_millis(self, host):
        return self.up_since.get(host.endpoint, 1_700_000_000_000)

    def execute_liveness_query(self, timeout):
        self.liveness_calls += 1
        if self.liveness_error is not None:
            raise self.liveness_error
        return iter(self.liveness_rows)


@pytest.fixture
def host_factory():
    return make_host


@pytest.fixture
def connection_factory():
    return FakeConnection


@pytest.fixture
def clean_registry():
    """Empty the global health registry before and after a test."""
    registry = get_registry()
    registry.clear()
    yield registry
    registry.clear()
