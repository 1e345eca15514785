# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the health probe.
"""

from core.config.defaults import (
    TimeoutDefaults,
    get_defaults,
    reset_defaults,
)
from core.config.cassandra import (
    CassandraConfig,
    get_config,
    reset_config,
)

__all__ = [
    "TimeoutDefaults",
    "get_defaults",
    "reset_defaults",
    "CassandraConfig",
    "get_config",
    "reset_config",
]
