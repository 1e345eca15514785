# ============================================================================
# PROBE MODELS
# ============================================================================
# STATUS: Diagnostics - Value objects produced by one probe invocation
# PURPOSE: Topology snapshot, node record, liveness result, health report
# CREATED: 19 OCT 2026
# EXPORTS: TopologySnapshot, NodeRecord, LivenessResult, HealthReport
# DEPENDENCIES: pydantic
# ============================================================================
"""
Probe Models

Every model here is built fresh per invocation and frozen once built.
Serialized keys are camelCase to match the health endpoint contract:

    {
      "status": "UP" | "DOWN",
      "details": {"clusterName": ..., "nodes": {"<nodeId>": {...}}},
      "error": "..."            # only when DOWN
    }
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from core.contracts import NodeDistance, NodeState, ReportStatus


UNRESOLVED_ADDRESS = "0.0.0.0:0"


class _FrozenCamelModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


# ============================================================================
# TOPOLOGY
# ============================================================================

class TopologySnapshot(_FrozenCamelModel):
    """
    Cluster-level metadata at one point in time.

    Every field has an explicit empty default; missing metadata is a
    reportable state, not an error.
    """

    cluster_name: str = ""
    hosts: Tuple[str, ...] = ()
    keyspaces: Tuple[str, ...] = Field(default=(), alias="keySpaces")
    load_balancing_policies: Tuple[str, ...] = ()
    retry_policies: Tuple[str, ...] = ()
    reconnection_policy: str = ""
    execution_profiles: Tuple[str, ...] = ()
    local_dc: str = ""
    session_name: str = ""

    @classmethod
    def empty(cls, session_name: str = "") -> "TopologySnapshot":
        return cls(session_name=session_name)


# ============================================================================
# NODES
# ============================================================================

class NodeRecord(_FrozenCamelModel):
    """Normalized attribute set for one cluster member."""

    host_id: str = ""
    end_point: str = UNRESOLVED_ADDRESS
    broadcast_address: str = UNRESOLVED_ADDRESS
    broadcast_rpc_address: str = UNRESOLVED_ADDRESS
    listen_address: str = UNRESOLVED_ADDRESS
    datacenter: str = ""
    rack: str = ""
    distance: NodeDistance = NodeDistance.UNKNOWN
    cassandra_version: str = ""
    schema_version: str = ""
    open_connections: int = 0
    in_flight_requests: int = 0
    state: NodeState = NodeState.UNKNOWN
    up_since_millis: str = ""
    extras: Dict[str, str] = Field(default_factory=dict)


# ============================================================================
# LIVENESS
# ============================================================================

@dataclass(frozen=True)
class LivenessResult:
    """Outcome of the liveness query."""
    reachable: bool
    error: Optional[str] = None
    rows: int = 0
    duration_ms: float = 0.0

    @classmethod
    def success(cls, rows: int = 0, duration_ms: float = 0.0) -> "LivenessResult":
        return cls(reachable=True, rows=rows, duration_ms=duration_ms)

    @classmethod
    def unreachable(cls, error: str, duration_ms: float = 0.0) -> "LivenessResult":
        return cls(reachable=False, error=error, duration_ms=duration_ms)


# ============================================================================
# REPORT
# ============================================================================

def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_thaw(v) for v in value]
    return value


class HealthReport(BaseModel):
    """
    Point-in-time cluster health report.

    details is read-only all the way down: mappings become
    MappingProxyType and lists become tuples. Serialization gives back
    plain dicts and lists.
    """

    model_config = ConfigDict(frozen=True)

    status: ReportStatus
    details: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    error: Optional[str] = None

    @field_validator("details", mode="after")
    @classmethod
    def freeze_details(cls, details: Mapping[str, Any]) -> Mapping[str, Any]:
        return _freeze(details)

    @field_serializer("details")
    def serialize_details(self, details: Mapping[str, Any]) -> Dict[str, Any]:
        return _thaw(details)

    @property
    def is_up(self) -> bool:
        return self.status.is_up

    @classmethod
    def down(cls, error: str, details: Optional[Dict[str, Any]] = None) -> "HealthReport":
        return cls(status=ReportStatus.DOWN, details=details or {}, error=error)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response; error omitted when UP."""
        result: Dict[str, Any] = {
            "status": self.status.value,
            "details": self.model_dump(mode="json")["details"],
        }
        if self.error is not None:
            result["error"] = self.error
        return result


__all__ = [
    "UNRESOLVED_ADDRESS",
    "TopologySnapshot",
    "NodeRecord",
    "LivenessResult",
    "HealthReport",
]
