# ============================================================================
# NODE DETAIL COLLECTOR TESTS
# ============================================================================
# STATUS: Tests - Per-node normalization
# PURPOSE: Verify sentinels, up-since handling and node keying
# CREATED: 19 OCT 2026
# ============================================================================
"""
Node Detail Collector Tests

Run with:
    pytest tests/test_nodes.py -v
"""

import uuid
from types import SimpleNamespace

import pytest

from core.contracts import NodeDistance, NodeState
from diagnostics.models import UNRESOLVED_ADDRESS
from diagnostics.nodes import (
    build_node_record,
    collect_nodes,
    format_address,
    format_up_since,
    node_key,
)


# ============================================================================
# FORMATTING
# ============================================================================

class TestFormatting:

    def test_address_with_port(self):
        assert format_address("10.0.0.1", 9042) == "10.0.0.1:9042"

    def test_ipv6_address_is_bracketed(self):
        assert format_address("::1", 7000) == "[::1]:7000"
        assert format_address("2001:db8::5", 9042) == "[2001:db8::5]:9042"

    def test_ipv6_address_without_port_is_bare(self):
        assert format_address("::1") == "::1"

    def test_address_without_port(self):
        assert format_address("10.0.0.1") == "10.0.0.1"

    def test_missing_address_uses_sentinel(self):
        assert format_address(None, 9042) == UNRESOLVED_ADDRESS
        assert format_address("", None) == "0.0.0.0:0"

    def test_never_up_is_empty_string(self):
        assert format_up_since(-1) == ""
        assert format_up_since(None) == ""

    def test_up_since_is_utc_iso(self):
        assert format_up_since(0) == "1970-01-01T00:00:00+00:00"
        assert format_up_since(1_700_000_000_000).startswith("2023-11-14T22:13:20")


# ============================================================================
# RECORD BUILDING
# ============================================================================

class TestBuildNodeRecord:

    def test_full_host(self, host_factory):
        host_id = uuid.uuid4()
        host = host_factory(host_id=host_id, address="10.0.0.5")

        record = build_node_record(
            host,
            distance=NodeDistance.LOCAL,
            pool_state={"open_count": 2, "in_flights": [1, 3]},
            up_since_millis=1_700_000_000_000,
        )

        assert record.host_id == str(host_id)
        assert record.end_point == "10.0.0.5:9042"
        assert record.broadcast_address == "10.0.0.5:7000"
        assert record.broadcast_rpc_address == "10.0.0.5:9042"
        assert record.listen_address == "10.0.0.5:7000"
        assert record.datacenter == "datacenter1"
        assert record.rack == "rack1"
        assert record.distance == NodeDistance.LOCAL
        assert record.cassandra_version == "4.1.3"
        assert record.open_connections == 2
        assert record.in_flight_requests == 4
        assert record.state == NodeState.UP
        assert record.up_since_millis.startswith("2023-11-14")

    def test_ipv6_host(self, host_factory):
        record = build_node_record(host_factory(address="fd00::7"))

        assert record.broadcast_address == "[fd00::7]:7000"
        assert record.listen_address == "[fd00::7]:7000"

    def test_bare_host_gets_sentinels(self):
        host = SimpleNamespace()

        record = build_node_record(host)

        assert record.broadcast_address == UNRESOLVED_ADDRESS
        assert record.broadcast_rpc_address == UNRESOLVED_ADDRESS
        assert record.listen_address == UNRESOLVED_ADDRESS
        assert record.end_point == UNRESOLVED_ADDRESS
        assert record.datacenter == ""
        assert record.rack == ""
        assert record.cassandra_version == ""
        assert record.schema_version == ""
        assert record.state == NodeState.UNKNOWN
        assert record.distance == NodeDistance.UNKNOWN
        assert record.open_connections == 0
        assert record.up_since_millis == ""

    def test_never_observed_up_is_empty_not_negative(self, host_factory):
        record = build_node_record(host_factory(is_up=False), up_since_millis=-1)

        assert record.up_since_millis == ""
        assert record.state == NodeState.DOWN
        assert record.to_dict()["upSinceMillis"] == ""

    def test_serialized_keys_are_camel_case(self, host_factory):
        data = build_node_record(host_factory()).to_dict()

        for key in (
            "broadcastAddress", "broadcastRpcAddress", "listenAddress",
            "datacenter", "rack", "distance", "cassandraVersion",
            "openConnections", "state", "schemaVersion", "upSinceMillis",
            "hostId", "endPoint",
        ):
            assert key in data

    def test_dse_details_go_to_extras(self, host_factory):
        host = host_factory(dse_version="6.8.1", dse_workloads={"Search", "Cassandra"})

        record = build_node_record(host)

        assert record.extras == {"dseVersion": "6.8.1", "dseWorkloads": "Cassandra,Search"}

    def test_record_is_immutable(self, host_factory):
        record = build_node_record(host_factory())
        with pytest.raises(Exception):
            record.rack = "other"

    def test_each_call_returns_fresh_record(self, host_factory):
        host = host_factory()
        first = build_node_record(host)
        second = build_node_record(host)
        assert first == second
        assert first is not second


# ============================================================================
# COLLECTION
# ============================================================================

class TestCollectNodes:

    def test_keyed_by_host_id(self, host_factory, connection_factory):
        a, b = host_factory(address="10.0.0.1"), host_factory(address="10.0.0.2")
        connection = connection_factory(hosts=[a, b])

        nodes = collect_nodes(connection)

        assert set(nodes) == {str(a.host_id), str(b.host_id)}
        assert nodes[str(b.host_id)].end_point == "10.0.0.2:9042"

    def test_host_without_id_keyed_by_endpoint(self, host_factory):
        host = host_factory(host_id=None)
        host.host_id = None
        assert node_key(host) == "127.0.0.1:9042"

    def test_remote_distance(self, host_factory, connection_factory):
        host = host_factory(datacenter="dc2")
        nodes = collect_nodes(connection_factory(hosts=[host]))
        assert nodes[str(host.host_id)].distance == NodeDistance.REMOTE

    def test_up_since_sentinel_from_connection(self, host_factory, connection_factory):
        host = host_factory()
        connection = connection_factory(hosts=[host], up_since={host.endpoint: -1})

        nodes = collect_nodes(connection)

        assert nodes[str(host.host_id)].up_since_millis == ""

    def test_unavailable_host_metadata_yields_empty(self, connection_factory):
        connection = connection_factory()

        def broken_all_hosts():
            raise RuntimeError("no metadata")

        connection.all_hosts = broken_all_hosts

        assert collect_nodes(connection) == {}

    def test_failing_pool_state_falls_back(self, host_factory, connection_factory):
        host = host_factory()
        connection = connection_factory(hosts=[host])

        def broken_pool_state(h):
            raise RuntimeError("session shutting down")

        connection.pool_state = broken_pool_state
        nodes = collect_nodes(connection)

        assert nodes[str(host.host_id)].open_connections == 0

    def test_departed_node_absent_from_next_snapshot(self, host_factory, connection_factory):
        a, b = host_factory(), host_factory(address="10.0.0.2")
        connection = connection_factory(hosts=[a, b])
        assert len(collect_nodes(connection)) == 2

        connection.hosts = [a]
        nodes = collect_nodes(connection)

        assert list(nodes) == [str(a.host_id)]
