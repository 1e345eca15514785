# ============================================================================
# CLUSTER HEALTH PROBE
# ============================================================================
# STATUS: Diagnostics - Per-invocation probe orchestration
# PURPOSE: Run topology, node and liveness reads and assemble the report
# CREATED: 19 OCT 2026
# ============================================================================
"""
Cluster Health Probe

One invocation walks

    INIT -> TOPOLOGY_READ -> NODES_COLLECTED -> LIVENESS_PROBED -> ASSEMBLED

The three reads are independent, so they run concurrently in worker
threads and are joined before assembly. Nothing is retried or cached
between invocations; every call starts again from INIT.

The probe holds its DiagnosticConnection by reference. Concurrent
invocations share it read-only.

Usage:
    connection = open_connection(config)
    probe = ClusterHealthProbe(connection)
    report = await probe.probe()
"""

import asyncio
import logging
import uuid
from enum import Enum
from typing import Dict, Optional

from core.config.cassandra import CassandraConfig
from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from diagnostics.liveness import probe_liveness
from diagnostics.models import HealthReport, LivenessResult, TopologySnapshot
from diagnostics.nodes import collect_nodes
from diagnostics.report import assemble_report
from diagnostics.topology import read_topology
from infrastructure.cassandra import DiagnosticConnection, open_connection

logger = get_logger(__name__, ComponentType.HEALTH)
_checkpoints = logging.getLogger("diagnostics.checkpoint")


class ProbeState(str, Enum):
    """States one probe invocation passes through."""
    INIT = "init"
    TOPOLOGY_READ = "topology_read"
    NODES_COLLECTED = "nodes_collected"
    LIVENESS_PROBED = "liveness_probed"
    ASSEMBLED = "assembled"


class ClusterHealthProbe:
    """
    Produces a point-in-time HealthReport for the cluster.

    Construction never opens a connection implicitly; use from_config()
    to open one, which raises ClusterConnectionError before any probe
    object exists.
    """

    def __init__(
        self,
        connection: DiagnosticConnection,
        liveness_timeout: Optional[float] = None,
        owns_connection: bool = False,
    ):
        self.connection = connection
        self.liveness_timeout = (
            liveness_timeout
            if liveness_timeout is not None
            else connection.config.timeouts.liveness_timeout
        )
        self._owns_connection = owns_connection

    @classmethod
    def from_config(cls, config: CassandraConfig) -> "ClusterHealthProbe":
        """
        Open a dedicated connection and wrap it in a probe.

        Raises:
            ClusterConnectionError: If the connection cannot be opened
        """
        connection = open_connection(config)
        return cls(connection, owns_connection=True)

    # ------------------------------------------------------------------
    # Probe
    # ------------------------------------------------------------------

    async def probe(self) -> HealthReport:
        """
        Run one probe invocation.

        Never raises: any unexpected failure in a read step is replaced
        by that step's empty value, and liveness failures become DOWN.
        """
        probe_id = uuid.uuid4().hex[:12]
        session_name = self.connection.session_name

        with log_context(probe_id=probe_id, session_name=session_name):
            self._advance(ProbeState.INIT)

            topology, nodes, liveness = await asyncio.gather(
                asyncio.to_thread(read_topology, self.connection),
                asyncio.to_thread(collect_nodes, self.connection),
                probe_liveness(self.connection, self.liveness_timeout),
                return_exceptions=True,
            )

            if isinstance(topology, BaseException):
                logger.error(f"Topology read failed: {topology}")
                topology = TopologySnapshot.empty(session_name)
            self._advance(ProbeState.TOPOLOGY_READ, {"hosts": len(topology.hosts)})

            if isinstance(nodes, BaseException):
                logger.error(f"Node collection failed: {nodes}")
                nodes = {}
            self._advance(ProbeState.NODES_COLLECTED, {"nodes": len(nodes)})

            if isinstance(liveness, BaseException):
                liveness = LivenessResult.unreachable(
                    f"{type(liveness).__name__}: {liveness}"
                )
            self._advance(
                ProbeState.LIVENESS_PROBED,
                {"reachable": liveness.reachable, "duration_ms": round(liveness.duration_ms, 2)},
            )

            report = assemble_report(topology, nodes, liveness)
            self._advance(ProbeState.ASSEMBLED, {"status": report.status.value})

            if not report.is_up:
                logger.warning(f"Cluster reported DOWN: {report.error}")
            return report

    @staticmethod
    def _advance(state: ProbeState, data: Optional[Dict] = None) -> None:
        log_checkpoint(state.value, data, logger=_checkpoints)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the connection if this probe opened it."""
        if self._owns_connection:
            self.connection.close()


__all__ = ["ClusterHealthProbe", "ProbeState"]
