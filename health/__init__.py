# ============================================================================
# HEALTH CHECK MODULE
# ============================================================================
# STATUS: Infrastructure - Health check plugin system
# PURPOSE: Probes, aggregated health and the Cassandra cluster report
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health checks for the probe service.

The Cassandra probe is one named check among the startup checks; the
router runs them through the executor and also serves the probe's own
report at /health/cassandra/report.

Usage:
    from health import health_router, get_registry
    from health.checks import CassandraHealthCheck

    get_registry().register(CassandraHealthCheck(probe))
    app.include_router(health_router)
"""

from health.core import (
    CASSANDRA_CHECK_NAME,
    AggregatedHealthResult,
    HealthCheckCategory,
    HealthCheckPlugin,
    HealthCheckResult,
    HealthStatus,
)
from health.registry import HealthCheckRegistry, get_registry, register_check
from health.executor import HealthCheckExecutor
from health.router import health_router

__all__ = [
    "CASSANDRA_CHECK_NAME",
    "AggregatedHealthResult",
    "HealthCheckCategory",
    "HealthCheckPlugin",
    "HealthCheckResult",
    "HealthStatus",
    "HealthCheckRegistry",
    "get_registry",
    "register_check",
    "HealthCheckExecutor",
    "health_router",
]
