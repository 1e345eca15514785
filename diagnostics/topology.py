# ============================================================================
# TOPOLOGY SNAPSHOT READER
# ============================================================================
# STATUS: Diagnostics - Cluster-level metadata extraction
# PURPOSE: Build a TopologySnapshot from the driver's cached metadata
# CREATED: 19 OCT 2026
# ============================================================================
"""
Topology Snapshot Reader

Pure read of the metadata the diagnostic connection already holds; no
network round trips. Each field is read independently and falls back to
its empty value when the metadata is unavailable, so one bad field never
costs the rest of the snapshot.
"""

from typing import Callable, List, TypeVar

from core.errors import MetadataUnavailable
from core.logging import ComponentType, get_logger
from diagnostics.models import TopologySnapshot
from diagnostics.nodes import format_address

logger = get_logger(__name__, ComponentType.TOPOLOGY)

T = TypeVar("T")

# Keyspaces created by Cassandra itself
SYSTEM_KEYSPACES = frozenset({
    "system",
    "system_auth",
    "system_distributed",
    "system_schema",
    "system_traces",
    "system_views",
    "system_virtual_schema",
})


def _read_field(field_name: str, read: Callable[[], T], default: T) -> T:
    try:
        return read()
    except Exception as e:
        logger.warning(str(MetadataUnavailable(field_name, e)))
        return default


def _cluster_name(connection) -> str:
    return connection.metadata.cluster_name or ""


def _keyspaces(connection) -> List[str]:
    names = connection.metadata.keyspaces.keys()
    return sorted(name for name in names if name not in SYSTEM_KEYSPACES)


def _host_address(host) -> str:
    """Listen address when the node advertises one, else the contact endpoint."""
    listen = getattr(host, "listen_address", None)
    if listen:
        return format_address(listen, getattr(host, "listen_port", None))
    return format_address(getattr(host, "address", None))


def _hosts(connection) -> List[str]:
    return [_host_address(host) for host in connection.all_hosts()]


def _local_dc(connection) -> str:
    if connection.local_datacenter:
        return connection.local_datacenter
    for host in connection.all_hosts():
        if host.datacenter:
            return host.datacenter
    return ""


def read_topology(connection) -> TopologySnapshot:
    """
    Read the current topology snapshot.

    Args:
        connection: DiagnosticConnection

    Returns:
        TopologySnapshot, never raising for missing metadata
    """
    snapshot = TopologySnapshot(
        cluster_name=_read_field("cluster_name", lambda: _cluster_name(connection), ""),
        hosts=tuple(_read_field("hosts", lambda: _hosts(connection), [])),
        keyspaces=tuple(_read_field("keyspaces", lambda: _keyspaces(connection), [])),
        load_balancing_policies=tuple(_read_field(
            "load_balancing_policies",
            lambda: sorted({k.value for k in connection.load_balancing_policies.values()}),
            [],
        )),
        retry_policies=tuple(_read_field(
            "retry_policies",
            lambda: sorted({k.value for k in connection.retry_policies.values()}),
            [],
        )),
        reconnection_policy=_read_field(
            "reconnection_policy", lambda: connection.reconnection_policy.value, ""
        ),
        execution_profiles=tuple(_read_field(
            "execution_profiles", lambda: connection.execution_profile_names, []
        )),
        local_dc=_read_field("local_dc", lambda: _local_dc(connection), ""),
        session_name=_read_field("session_name", lambda: connection.session_name, ""),
    )

    logger.debug(
        f"Topology read: cluster={snapshot.cluster_name!r} "
        f"hosts={len(snapshot.hosts)} keyspaces={len(snapshot.keyspaces)}"
    )
    return snapshot


__all__ = ["SYSTEM_KEYSPACES", "read_topology"]
