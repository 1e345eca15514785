# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export core contracts and configuration
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from core.contracts import (
    LoadBalancingPolicyKind,
    RetryPolicyKind,
    ReconnectionPolicyKind,
    NodeState,
    NodeDistance,
    ReportStatus,
)
from core.config import CassandraConfig, TimeoutDefaults, get_config

__all__ = [
    # Enums
    "LoadBalancingPolicyKind",
    "RetryPolicyKind",
    "ReconnectionPolicyKind",
    "NodeState",
    "NodeDistance",
    "ReportStatus",
    # Config
    "CassandraConfig",
    "TimeoutDefaults",
    "get_config",
]
