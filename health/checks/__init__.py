# ============================================================================
# HEALTH CHECK PLUGINS
# ============================================================================
# STATUS: Infrastructure - Health check implementations
# PURPOSE: Concrete health checks for the probe service
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Plugins

Startup Checks (priority 10), registered on import:
- process: Basic process health (always healthy if running)
- config: Cassandra settings parse

Database Checks (priority 30), registered explicitly at startup:
- cassandra-health-check: Cluster health probe

Import this module to register the startup checks:
    import health.checks
"""

from health.checks.startup import ProcessCheck, ConfigCheck
from health.checks.cassandra import CassandraHealthCheck, CASSANDRA_CHECK_NAME

__all__ = [
    # Startup
    "ProcessCheck",
    "ConfigCheck",
    # Database
    "CassandraHealthCheck",
    "CASSANDRA_CHECK_NAME",
]
