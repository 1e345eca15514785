# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Connection, probe and health endpoint timeouts
# CREATED: 19 OCT 2026
# ============================================================================
"""
Timeout Defaults

All values are seconds. Each has an environment override:

    CASSANDRA_CONNECT_TIMEOUT              connect_timeout
    CASSANDRA_CONTROL_CONNECTION_TIMEOUT   control_connection_timeout
    CASSANDRA_LIVENESS_TIMEOUT             liveness_timeout
    HEALTH_CHECK_TIMEOUT                   check_timeout
    HEALTH_OVERALL_TIMEOUT                 overall_timeout
    HEALTH_READINESS_TIMEOUT               readiness_timeout
"""

import os
from dataclasses import dataclass, field, fields
from typing import Optional

_ENV_NAMES = {
    "connect_timeout": "CASSANDRA_CONNECT_TIMEOUT",
    "control_connection_timeout": "CASSANDRA_CONTROL_CONNECTION_TIMEOUT",
    "liveness_timeout": "CASSANDRA_LIVENESS_TIMEOUT",
    "check_timeout": "HEALTH_CHECK_TIMEOUT",
    "overall_timeout": "HEALTH_OVERALL_TIMEOUT",
    "readiness_timeout": "HEALTH_READINESS_TIMEOUT",
}


@dataclass(frozen=True)
class TimeoutDefaults:
    """
    The liveness timeout bounds the only network round trip of a probe.
    check_timeout must exceed it so the executor never cuts off a probe
    that would have reported its own timeout.
    """
    connect_timeout: float = 10.0
    control_connection_timeout: float = 5.0
    liveness_timeout: float = 2.0
    check_timeout: float = 5.0
    overall_timeout: float = 30.0
    readiness_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "TimeoutDefaults":
        overrides = {
            f.name: float(os.environ[_ENV_NAMES[f.name]])
            for f in fields(cls)
            if _ENV_NAMES[f.name] in os.environ
        }
        return cls(**overrides)


@dataclass
class Defaults:
    timeouts: TimeoutDefaults = field(default_factory=TimeoutDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        return cls(timeouts=TimeoutDefaults.from_env())


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Process-wide defaults, read from the environment on first use."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Forget the cached defaults (tests)."""
    global _defaults
    _defaults = None


__all__ = [
    "TimeoutDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
