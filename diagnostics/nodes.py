# ============================================================================
# NODE DETAIL COLLECTOR
# ============================================================================
# STATUS: Diagnostics - Per-node attribute extraction
# PURPOSE: Normalize every known host into a fixed-schema NodeRecord
# CREATED: 19 OCT 2026
# ============================================================================
"""
Node Detail Collector

Iterates the full host set on every call (no incremental diffing) and
builds one fresh NodeRecord per host. Optional attributes always get a
sentinel so consumers can rely on a fixed schema:

- addresses  -> "0.0.0.0:0"
- text       -> ""
- state/distance -> "UNKNOWN"
- up-since of -1 (never observed up) -> ""
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from core.contracts import NodeDistance, NodeState
from core.errors import MetadataUnavailable
from core.logging import ComponentType, get_logger, log_context
from diagnostics.models import NodeRecord, UNRESOLVED_ADDRESS

logger = get_logger(__name__, ComponentType.NODES)


def format_address(address: Optional[Any], port: Optional[int] = None) -> str:
    """
    Render an address as host[:port], or the unresolved sentinel.

    IPv6 hosts are bracketed when a port follows ([::1]:7000).
    """
    if not address:
        return UNRESOLVED_ADDRESS
    host = str(address)
    if not port:
        return host
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    return f"{host}:{port}"


def format_up_since(millis: Optional[int]) -> str:
    """ISO-8601 UTC timestamp, or "" for the never-up sentinel."""
    if millis is None or millis < 0:
        return ""
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc).isoformat()


def node_key(host) -> str:
    """Stable node identifier: host UUID, endpoint when the UUID is not yet known."""
    host_id = getattr(host, "host_id", None)
    if host_id:
        return str(host_id)
    return str(getattr(host, "endpoint", None) or UNRESOLVED_ADDRESS)


def _text(value: Optional[Any]) -> str:
    if value is None:
        return ""
    return str(value)


def _count_in_flight(pool_state: Dict[str, Any]) -> int:
    in_flights = pool_state.get("in_flights", 0)
    if isinstance(in_flights, (list, tuple)):
        return sum(in_flights)
    return int(in_flights or 0)


def build_node_record(
    host,
    distance: NodeDistance = NodeDistance.UNKNOWN,
    pool_state: Optional[Dict[str, Any]] = None,
    up_since_millis: int = -1,
) -> NodeRecord:
    """
    Build a NodeRecord for a single host.

    Pure: reads only its arguments and returns a new record.

    Args:
        host: Driver Host (or any object with the same attributes)
        distance: Routing distance from the diagnostic connection
        pool_state: Session pool state for this host
        up_since_millis: Epoch millis last seen up, -1 if never

    Returns:
        NodeRecord with sentinels for every missing attribute
    """
    pool_state = pool_state or {}

    extras: Dict[str, str] = {}
    dse_version = getattr(host, "dse_version", None)
    if dse_version:
        extras["dseVersion"] = str(dse_version)
    dse_workloads = getattr(host, "dse_workloads", None)
    if dse_workloads:
        extras["dseWorkloads"] = ",".join(sorted(str(w) for w in dse_workloads))

    return NodeRecord(
        host_id=_text(getattr(host, "host_id", None)),
        end_point=_text(getattr(host, "endpoint", None)) or UNRESOLVED_ADDRESS,
        broadcast_address=format_address(
            getattr(host, "broadcast_address", None),
            getattr(host, "broadcast_port", None),
        ),
        broadcast_rpc_address=format_address(
            getattr(host, "broadcast_rpc_address", None),
            getattr(host, "broadcast_rpc_port", None),
        ),
        listen_address=format_address(
            getattr(host, "listen_address", None),
            getattr(host, "listen_port", None),
        ),
        datacenter=_text(getattr(host, "datacenter", None)),
        rack=_text(getattr(host, "rack", None)),
        distance=distance,
        cassandra_version=_text(getattr(host, "release_version", None)),
        schema_version=_text(getattr(host, "schema_version", None)),
        open_connections=int(pool_state.get("open_count", 0) or 0),
        in_flight_requests=_count_in_flight(pool_state),
        state=NodeState.from_is_up(getattr(host, "is_up", None)),
        up_since_millis=format_up_since(up_since_millis),
        extras=extras,
    )


def _safe(read, default, field_name: str):
    try:
        return read()
    except Exception as e:
        logger.warning(str(MetadataUnavailable(field_name, e)))
        return default


def collect_nodes(connection) -> Dict[str, NodeRecord]:
    """
    Collect a NodeRecord for every host the driver knows about.

    Args:
        connection: DiagnosticConnection

    Returns:
        Mapping of node identifier to NodeRecord (empty if host
        metadata is unavailable)
    """
    hosts = _safe(connection.all_hosts, [], "hosts")

    nodes: Dict[str, NodeRecord] = {}
    for host in hosts:
        key = node_key(host)
        with log_context(node_id=key):
            if key in nodes:
                logger.warning(f"Duplicate node identifier {key}, keeping last seen")
            nodes[key] = build_node_record(
                host,
                distance=_safe(
                    lambda: connection.distance(host), NodeDistance.UNKNOWN, "distance"
                ),
                pool_state=_safe(lambda: connection.pool_state(host), {}, "pool_state"),
                up_since_millis=_safe(
                    lambda: connection.up_since_millis(host), -1, "up_since"
                ),
            )

    logger.debug(f"Collected {len(nodes)} node records")
    return nodes


__all__ = [
    "format_address",
    "format_up_since",
    "node_key",
    "build_node_record",
    "collect_nodes",
]
