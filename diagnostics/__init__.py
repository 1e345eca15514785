# ============================================================================
# DIAGNOSTICS MODULE
# ============================================================================
# STATUS: Diagnostics - Cluster health probe
# PURPOSE: Topology, node, liveness and report building blocks
# CREATED: 19 OCT 2026
# ============================================================================
"""
Cluster diagnostics.

    connection -> {read_topology, collect_nodes, probe_liveness}
               -> assemble_report -> HealthReport

Usage:
    from diagnostics import ClusterHealthProbe

    probe = ClusterHealthProbe(connection)
    report = await probe.probe()
"""

from diagnostics.models import (
    UNRESOLVED_ADDRESS,
    TopologySnapshot,
    NodeRecord,
    LivenessResult,
    HealthReport,
)
from diagnostics.topology import read_topology
from diagnostics.nodes import build_node_record, collect_nodes
from diagnostics.liveness import probe_liveness, run_liveness_query
from diagnostics.report import assemble_report
from diagnostics.probe import ClusterHealthProbe, ProbeState

__all__ = [
    # Models
    "UNRESOLVED_ADDRESS",
    "TopologySnapshot",
    "NodeRecord",
    "LivenessResult",
    "HealthReport",
    # Steps
    "read_topology",
    "build_node_record",
    "collect_nodes",
    "probe_liveness",
    "run_liveness_query",
    "assemble_report",
    # Probe
    "ClusterHealthProbe",
    "ProbeState",
]
