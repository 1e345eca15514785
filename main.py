# ============================================================================
# CASSANDRA HEALTH PROBE - MAIN APPLICATION
# ============================================================================
# STATUS: Core - FastAPI application entry point
# PURPOSE: Wire the diagnostic connection into the health endpoints
# CREATED: 19 OCT 2026
# ============================================================================
"""
Cassandra Health Probe Main Application

FastAPI application that:
1. Opens the dedicated diagnostic Cassandra connection at startup
2. Registers the cluster health check alongside the startup checks
3. Serves /livez, /readyz, /health and /health/cassandra/report
4. Closes the diagnostic connection at shutdown

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import asyncio
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from __version__ import __version__, BUILD_DATE, CODENAME
from core.config import CassandraConfig, get_config
from core.logging import ComponentType, configure_logging, get_logger
from diagnostics.probe import ClusterHealthProbe
from infrastructure.cassandra import DiagnosticConnection, open_connection, close_connection

# Health check system
from health import health_router, get_registry
from health.checks import CassandraHealthCheck  # also registers the startup checks

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__, ComponentType.API)


async def register_cassandra_check(config: CassandraConfig) -> Optional[DiagnosticConnection]:
    """
    Open the diagnostic connection and register the cluster check.

    Returns:
        The opened connection, or None when the check is disabled

    Raises:
        ClusterConnectionError: If the cluster cannot be reached
    """
    if not config.health_check_enabled:
        logger.info("Cassandra health check disabled (CASSANDRA_HEALTH_ENABLED=false)")
        return None

    connection = await asyncio.to_thread(open_connection, config)
    try:
        probe = ClusterHealthProbe(connection)
        get_registry().register(
            CassandraHealthCheck(probe, timeout_seconds=config.timeouts.check_timeout)
        )
    except BaseException:
        close_connection(connection)
        raise
    return connection


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    The diagnostic connection is closed on every exit path, including
    a failure later in startup.
    """
    logger.info(f"Starting {CODENAME} v{__version__} (Build {BUILD_DATE})")

    config = get_config()
    connection: Optional[DiagnosticConnection] = None
    try:
        connection = await register_cassandra_check(config)

        logger.info(f"Health checks initialized ({len(get_registry())} checks registered)")

        yield
    finally:
        logger.info(f"Shutting down {CODENAME}...")
        close_connection(connection)
        logger.info(f"{CODENAME} stopped")


app = FastAPI(
    title=CODENAME,
    description="Point-in-time health reports for a Cassandra cluster",
    version=__version__,
    lifespan=lifespan,
)

# Health check routes (no prefix - /livez, /readyz, /health)
app.include_router(health_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": CODENAME,
        "version": __version__,
        "build_date": BUILD_DATE,
        "status": "running",
    }
