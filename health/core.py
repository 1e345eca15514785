# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# STATUS: Infrastructure - Base classes for health checks
# PURPOSE: Health check plugin interface and result types
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Core Types

Status (worst wins when aggregating):
- healthy:   check passed
- degraded:  usable, with a warning
- unhealthy: failed; blocks /readyz when the check is required

Categories run in priority order:
- startup  (10): process and configuration
- database (30): the Cassandra cluster probe
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional

CASSANDRA_CHECK_NAME = "cassandra-health-check"


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"

    @property
    def severity(self) -> int:
        return _SEVERITY[self.value]

    @property
    def http_code(self) -> int:
        """200 healthy, 206 degraded, 503 unhealthy."""
        return _HTTP_CODES[self.value]

    @classmethod
    def aggregate(cls, statuses: Iterable["HealthStatus"]) -> "HealthStatus":
        """Worst status wins; no statuses is healthy."""
        return max(statuses, key=lambda s: s.severity, default=cls.HEALTHY)


_SEVERITY = {"healthy": 0, "degraded": 1, "unhealthy": 2}
_HTTP_CODES = {"healthy": 200, "degraded": 206, "unhealthy": 503}


class HealthCheckCategory(str, Enum):
    STARTUP = "startup"
    DATABASE = "database"

    @property
    def default_priority(self) -> int:
        return 10 if self is HealthCheckCategory.STARTUP else 30


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class HealthCheckResult:
    """Outcome of one check run."""
    status: HealthStatus
    message: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0.0
    checked_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def healthy(cls, message: Optional[str] = None, **details) -> "HealthCheckResult":
        return cls(HealthStatus.HEALTHY, message, details)

    @classmethod
    def degraded(cls, message: str, **details) -> "HealthCheckResult":
        return cls(HealthStatus.DEGRADED, message, details)

    @classmethod
    def unhealthy(cls, message: str, **details) -> "HealthCheckResult":
        return cls(HealthStatus.UNHEALTHY, message, details)

    @classmethod
    def from_exception(cls, e: BaseException) -> "HealthCheckResult":
        return cls.unhealthy(str(e) or type(e).__name__, exception_type=type(e).__name__)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "status": self.status.value,
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.message:
            body["message"] = self.message
        if self.details:
            body["details"] = self.details
        return body


@dataclass
class AggregatedHealthResult:
    """Results of one executor run, keyed by check name."""
    status: HealthStatus
    checks: Dict[str, HealthCheckResult]
    total_duration_ms: float
    checked_at: datetime = field(default_factory=_utcnow)

    def failing(self) -> Dict[str, HealthCheckResult]:
        return {
            name: result
            for name, result in self.checks.items()
            if result.status is HealthStatus.UNHEALTHY
        }

    def summary(self, categories: Mapping[str, "HealthCheckCategory"]) -> Dict[str, Dict[str, int]]:
        """Count results per category and status."""
        counts: Dict[str, Dict[str, int]] = {}
        for name, result in self.checks.items():
            category = categories.get(name)
            if category is None:
                continue
            bucket = counts.setdefault(category.value, {s.value: 0 for s in HealthStatus})
            bucket[result.status.value] += 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "checks": {name: result.to_dict() for name, result in self.checks.items()},
            "total_duration_ms": round(self.total_duration_ms, 2),
            "checked_at": self.checked_at.isoformat().replace("+00:00", "Z"),
        }


class HealthCheckPlugin(ABC):
    """
    Base class for health checks.

    Subclasses set a unique name and implement check(). Priority
    defaults to the category's priority when a subclass leaves it unset.

    Attributes:
        name: Unique check name (the /health/{name} path segment)
        category: Startup or database
        priority: Lower runs earlier
        timeout_seconds: Per-check limit; exceeding it is unhealthy
        required_for_ready: Unhealthy result fails /readyz
    """

    name: str = "unnamed"
    category: HealthCheckCategory = HealthCheckCategory.DATABASE
    priority: Optional[int] = None
    timeout_seconds: float = 10.0
    required_for_ready: bool = True

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.priority is None:
            cls.priority = cls.category.default_priority

    @abstractmethod
    async def check(self) -> HealthCheckResult:
        """Run the check once."""


__all__ = [
    "CASSANDRA_CHECK_NAME",
    "HealthStatus",
    "HealthCheckCategory",
    "HealthCheckResult",
    "AggregatedHealthResult",
    "HealthCheckPlugin",
]
