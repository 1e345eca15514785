# ============================================================================
# HEALTH CHECK REGISTRY
# ============================================================================
# STATUS: Infrastructure - Health check plugin registration
# PURPOSE: Register and look up named health checks
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Registry

Self-contained checks register themselves on import with @register_check.
The Cassandra check needs a probe, so main.py registers an instance once
the diagnostic connection is open. When CASSANDRA_HEALTH_ENABLED is false
no connection is opened and nothing is registered:

    get_registry().register(CassandraHealthCheck(probe))
"""

import logging
import threading
from typing import Dict, List, Optional, Type

from health.core import HealthCheckPlugin

logger = logging.getLogger(__name__)


class HealthCheckRegistry:
    """Named health checks. Startup registers while requests may be polling."""

    def __init__(self):
        self._checks: Dict[str, HealthCheckPlugin] = {}
        self._lock = threading.Lock()

    def register(self, check: HealthCheckPlugin) -> None:
        """Add a check instance, replacing any check with the same name."""
        with self._lock:
            replaced = check.name in self._checks
            self._checks[check.name] = check

        if replaced:
            logger.warning(f"Replaced health check {check.name}")
        logger.debug(
            f"Registered {check.name} ({check.category.value}, "
            f"priority {check.priority}, timeout {check.timeout_seconds}s)"
        )

    def unregister(self, name: str) -> bool:
        with self._lock:
            return self._checks.pop(name, None) is not None

    def get(self, name: str) -> Optional[HealthCheckPlugin]:
        return self._checks.get(name)

    def get_checks_by_priority(self) -> List[HealthCheckPlugin]:
        return sorted(self._checks.values(), key=lambda c: c.priority)

    def get_required_checks(self) -> List[HealthCheckPlugin]:
        return [c for c in self.get_checks_by_priority() if c.required_for_ready]

    def clear(self) -> None:
        with self._lock:
            self._checks.clear()

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, name: str) -> bool:
        return name in self._checks


_registry: Optional[HealthCheckRegistry] = None


def get_registry() -> HealthCheckRegistry:
    """Process-wide registry used by the router."""
    global _registry
    if _registry is None:
        _registry = HealthCheckRegistry()
    return _registry


def register_check(cls: Type[HealthCheckPlugin]) -> Type[HealthCheckPlugin]:
    """Class decorator: instantiate a no-argument check and register it."""
    get_registry().register(cls())
    return cls


__all__ = [
    "HealthCheckRegistry",
    "get_registry",
    "register_check",
]
