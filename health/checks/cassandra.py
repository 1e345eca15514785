# ============================================================================
# CASSANDRA HEALTH CHECK
# ============================================================================
# STATUS: Infrastructure - Cluster health plugin
# PURPOSE: Expose the cluster health probe as a named health check
# CREATED: 19 OCT 2026
# ============================================================================
"""
Cassandra Health Check

Wraps a ClusterHealthProbe as the "cassandra-health-check" plugin
(priority 30). The probe is passed in at startup; the check never
builds or looks up a connection on its own.

    UP   -> healthy, details = report details
    DOWN -> unhealthy, message = report error, details still populated
"""

import logging
from typing import Optional

from core.logging import log_context
from diagnostics.models import HealthReport
from diagnostics.probe import ClusterHealthProbe
from health.core import (
    CASSANDRA_CHECK_NAME,
    HealthCheckCategory,
    HealthCheckPlugin,
    HealthCheckResult,
    HealthStatus,
)

logger = logging.getLogger(__name__)


class CassandraHealthCheck(HealthCheckPlugin):
    """Cluster health via the dedicated diagnostic connection."""

    name = CASSANDRA_CHECK_NAME
    category = HealthCheckCategory.DATABASE
    timeout_seconds = 5.0
    required_for_ready = True

    def __init__(self, probe: ClusterHealthProbe, timeout_seconds: Optional[float] = None):
        self.probe = probe
        if timeout_seconds is not None:
            self.timeout_seconds = timeout_seconds

    async def run_probe(self) -> HealthReport:
        """Run the probe, turning any unexpected failure into a DOWN report."""
        with log_context(check_name=self.name):
            try:
                return await self.probe.probe()
            except Exception as e:
                logger.exception(f"Cluster probe raised unexpectedly: {e}")
                return HealthReport.down(f"{type(e).__name__}: {e}")

    async def check(self) -> HealthCheckResult:
        report = await self.run_probe()
        return HealthCheckResult(
            status=HealthStatus.HEALTHY if report.is_up else HealthStatus.UNHEALTHY,
            message=report.error or "Cassandra cluster reachable",
            details=report.to_dict()["details"],
        )


__all__ = ["CassandraHealthCheck", "CASSANDRA_CHECK_NAME"]
