# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - Cluster connectivity
# PURPOSE: Dedicated diagnostic connection to the Cassandra cluster
# CREATED: 19 OCT 2026
# ============================================================================
"""
Infrastructure module for the health probe.

Provides:
- open_connection: Build the diagnostic Cluster/Session from config
- DiagnosticConnection: Read-only view used by the probe
- close_connection: Shutdown helper for lifespan handlers

Usage:
    from infrastructure import open_connection

    with open_connection(get_config()) as connection:
        ...
"""

from infrastructure.cassandra import (
    DiagnosticConnection,
    UpSinceTracker,
    open_connection,
    close_connection,
)

__all__ = [
    'DiagnosticConnection',
    'UpSinceTracker',
    'open_connection',
    'close_connection',
]
