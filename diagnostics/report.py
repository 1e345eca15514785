# ============================================================================
# HEALTH REPORT ASSEMBLER
# ============================================================================
# STATUS: Diagnostics - Merge probe outputs into one report
# PURPOSE: Status from liveness, details from topology and nodes
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Report Assembler

Status is UP iff the liveness probe reached the cluster. Topology and
node details are included whatever the status, because they are read
independently of the liveness query.
"""

from typing import Any, Dict, Mapping

from core.contracts import ReportStatus
from diagnostics.models import HealthReport, LivenessResult, NodeRecord, TopologySnapshot


def build_details(
    topology: TopologySnapshot,
    nodes: Mapping[str, NodeRecord],
) -> Dict[str, Any]:
    """Detail map with camelCase keys, nodes keyed by identifier."""
    details = topology.to_dict()
    details["nodes"] = {
        node_id: record.to_dict()
        for node_id, record in sorted(nodes.items())
    }
    return details


def assemble_report(
    topology: TopologySnapshot,
    nodes: Mapping[str, NodeRecord],
    liveness: LivenessResult,
) -> HealthReport:
    """
    Assemble the health report for one invocation.

    Args:
        topology: Snapshot from read_topology
        nodes: Records from collect_nodes
        liveness: Result from probe_liveness

    Returns:
        HealthReport (DOWN carries the liveness error)
    """
    details = build_details(topology, nodes)

    if liveness.reachable:
        return HealthReport(status=ReportStatus.UP, details=details)

    return HealthReport(
        status=ReportStatus.DOWN,
        details=details,
        error=liveness.error or "Cluster unreachable",
    )


__all__ = ["build_details", "assemble_report"]
