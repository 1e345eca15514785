# ============================================================================
# STARTUP HEALTH CHECKS
# ============================================================================
# STATUS: Infrastructure - Startup health checks
# PURPOSE: Process liveness and Cassandra settings sanity
# CREATED: 19 OCT 2026
# ============================================================================
"""
Startup Health Checks (priority 10, registered on import)

- process: healthy whenever it runs
- config:  the CASSANDRA_* settings parse into a usable CassandraConfig;
           never contacts the cluster
"""

import os
import platform
import sys

from core.config.cassandra import CassandraConfig
from health.core import HealthCheckCategory, HealthCheckPlugin, HealthCheckResult
from health.registry import register_check


@register_check
class ProcessCheck(HealthCheckPlugin):
    name = "process"
    category = HealthCheckCategory.STARTUP
    timeout_seconds = 1.0

    async def check(self) -> HealthCheckResult:
        return HealthCheckResult.healthy(
            "Process running",
            pid=os.getpid(),
            python_version=sys.version.split()[0],
            platform=platform.platform(),
        )


@register_check
class ConfigCheck(HealthCheckPlugin):
    """Re-reads the environment so a bad redeploy shows up before the probe does."""

    name = "config"
    category = HealthCheckCategory.STARTUP
    timeout_seconds = 1.0

    async def check(self) -> HealthCheckResult:
        try:
            config = CassandraConfig.from_env()
        except (KeyError, ValueError) as e:
            return HealthCheckResult.unhealthy(
                f"Invalid Cassandra configuration: {e!r}",
                hint="Check CASSANDRA_PORT and CASSANDRA_*_POLICY values",
            )

        if not config.contact_points:
            return HealthCheckResult.unhealthy(
                "No Cassandra contact points configured",
                hint="Set CASSANDRA_CONTACT_POINTS",
            )

        contact_points = list(config.contact_points)
        if (config.username or config.password) and not config.has_credentials:
            return HealthCheckResult.degraded(
                "CASSANDRA_USERNAME/CASSANDRA_PASSWORD incomplete or blank; "
                "connecting without credentials",
                contact_points=contact_points,
            )

        return HealthCheckResult.healthy(
            "Cassandra configuration present",
            contact_points=contact_points,
            port=config.port,
            local_dc=config.local_datacenter,
        )


__all__ = ["ProcessCheck", "ConfigCheck"]
