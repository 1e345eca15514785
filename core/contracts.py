# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Core enums shared across the probe
# PURPOSE: Policy identifiers, node states and report statuses
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: LoadBalancingPolicyKind, RetryPolicyKind, ReconnectionPolicyKind,
#          NodeState, NodeDistance, ReportStatus
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the cluster health probe.

Policy kinds are chosen in configuration and handed to the connection
layer, which builds the matching driver policies and records the kind
it built. Reports label policies with these identifiers.
"""

from enum import Enum


# ============================================================================
# DRIVER POLICY IDENTIFIERS
# ============================================================================

class LoadBalancingPolicyKind(str, Enum):
    """Load-balancing strategies the diagnostic connection can be built with."""
    TOKEN_AWARE_DC_AWARE = "TokenAwarePolicy(DCAwareRoundRobinPolicy)"
    DC_AWARE_ROUND_ROBIN = "DCAwareRoundRobinPolicy"
    ROUND_ROBIN = "RoundRobinPolicy"


class RetryPolicyKind(str, Enum):
    """Retry strategies applied per execution profile."""
    DEFAULT = "RetryPolicy"
    FALLTHROUGH = "FallthroughRetryPolicy"


class ReconnectionPolicyKind(str, Enum):
    """Strategies for re-establishing dropped node connections."""
    EXPONENTIAL = "ExponentialReconnectionPolicy"
    CONSTANT = "ConstantReconnectionPolicy"


# ============================================================================
# NODE ENUMS
# ============================================================================

class NodeState(str, Enum):
    """
    Lifecycle state of a cluster node as seen by the driver.

    UNKNOWN covers hosts the driver has not yet marked up or down.
    """
    UP = "UP"
    DOWN = "DOWN"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_is_up(cls, is_up) -> "NodeState":
        if is_up is None:
            return cls.UNKNOWN
        return cls.UP if is_up else cls.DOWN


class NodeDistance(str, Enum):
    """Routing distance of a node relative to the diagnostic connection."""
    LOCAL_RACK = "LOCAL_RACK"
    LOCAL = "LOCAL"
    REMOTE = "REMOTE"
    IGNORED = "IGNORED"
    UNKNOWN = "UNKNOWN"


# ============================================================================
# REPORT STATUS
# ============================================================================

class ReportStatus(str, Enum):
    """Overall status of a cluster health report."""
    UP = "UP"
    DOWN = "DOWN"

    @property
    def is_up(self) -> bool:
        return self is ReportStatus.UP


__all__ = [
    "LoadBalancingPolicyKind",
    "RetryPolicyKind",
    "ReconnectionPolicyKind",
    "NodeState",
    "NodeDistance",
    "ReportStatus",
]
