# ============================================================================
# HEALTH CHECK PLUGIN TESTS
# ============================================================================
# STATUS: Tests - Health check system
# PURPOSE: Verify the Cassandra check, startup checks, registry and executor
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Plugin Tests

Run with:
    pytest tests/test_health_checks.py -v
"""

import asyncio

import pytest

from core.contracts import ReportStatus
from diagnostics.models import HealthReport
from diagnostics.probe import ClusterHealthProbe
from health.checks.cassandra import CASSANDRA_CHECK_NAME, CassandraHealthCheck
from health.checks.startup import ConfigCheck, ProcessCheck
from health.core import (
    HealthCheckCategory,
    HealthCheckPlugin,
    HealthCheckResult,
    HealthStatus,
)
from health.executor import HealthCheckExecutor
from health.registry import HealthCheckRegistry


class _StaticProbe:
    """Probe stand-in that returns a fixed report."""

    def __init__(self, report=None, error=None):
        self.report = report
        self.error = error
        self.calls = 0

    async def probe(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.report


class _SlowCheck(HealthCheckPlugin):
    name = "slow"
    timeout_seconds = 0.05

    async def check(self) -> HealthCheckResult:
        await asyncio.sleep(1.0)
        return HealthCheckResult.healthy()


class _FixedCheck(HealthCheckPlugin):
    category = HealthCheckCategory.STARTUP

    def __init__(self, name, status, required=True):
        self.name = name
        self.status = status
        self.required_for_ready = required

    async def check(self) -> HealthCheckResult:
        return HealthCheckResult(status=self.status, message=self.name)


# ============================================================================
# CASSANDRA CHECK
# ============================================================================

class TestCassandraHealthCheck:

    def test_identity(self):
        check = CassandraHealthCheck(_StaticProbe())

        assert check.name == "cassandra-health-check" == CASSANDRA_CHECK_NAME
        assert check.category == HealthCheckCategory.DATABASE
        assert check.priority == 30
        assert check.required_for_ready is True

    def test_timeout_override(self):
        assert CassandraHealthCheck(_StaticProbe(), timeout_seconds=3.0).timeout_seconds == 3.0

    def test_up_maps_to_healthy(self):
        report = HealthReport(status=ReportStatus.UP, details={"clusterName": "Test Cluster"})
        check = CassandraHealthCheck(_StaticProbe(report))

        result = asyncio.run(check.check())

        assert result.status == HealthStatus.HEALTHY
        assert result.details == {"clusterName": "Test Cluster"}

    def test_down_maps_to_unhealthy_with_details(self):
        report = HealthReport.down("OperationTimedOut: timed out", {"clusterName": "Test Cluster"})
        check = CassandraHealthCheck(_StaticProbe(report))

        result = asyncio.run(check.check())

        assert result.status == HealthStatus.UNHEALTHY
        assert result.message == "OperationTimedOut: timed out"
        assert result.details["clusterName"] == "Test Cluster"

    def test_probe_exception_becomes_down_report(self):
        check = CassandraHealthCheck(_StaticProbe(error=RuntimeError("boom")))

        report = asyncio.run(check.run_probe())

        assert report.status == ReportStatus.DOWN
        assert report.error == "RuntimeError: boom"

    def test_with_real_probe(self, connection_factory):
        probe = ClusterHealthProbe(connection_factory(), liveness_timeout=1.0)

        result = asyncio.run(CassandraHealthCheck(probe).check())

        assert result.status == HealthStatus.HEALTHY
        assert result.details["clusterName"] == "Test Cluster"


# ============================================================================
# STARTUP CHECKS
# ============================================================================

class TestStartupChecks:

    def test_process_check_healthy(self):
        result = asyncio.run(ProcessCheck().check())
        assert result.status == HealthStatus.HEALTHY
        assert "pid" in result.details

    def test_config_check_healthy(self, monkeypatch):
        monkeypatch.setenv("CASSANDRA_CONTACT_POINTS", "10.0.0.1,10.0.0.2")
        monkeypatch.delenv("CASSANDRA_USERNAME", raising=False)
        monkeypatch.delenv("CASSANDRA_PASSWORD", raising=False)

        result = asyncio.run(ConfigCheck().check())

        assert result.status == HealthStatus.HEALTHY
        assert result.details["contact_points"] == ["10.0.0.1", "10.0.0.2"]

    def test_config_check_bad_policy(self, monkeypatch):
        monkeypatch.setenv("CASSANDRA_LB_POLICY", "nearest")

        result = asyncio.run(ConfigCheck().check())

        assert result.status == HealthStatus.UNHEALTHY

    def test_config_check_no_contact_points(self, monkeypatch):
        monkeypatch.setenv("CASSANDRA_CONTACT_POINTS", " , ")

        result = asyncio.run(ConfigCheck().check())

        assert result.status == HealthStatus.UNHEALTHY

    def test_config_check_half_credentials(self, monkeypatch):
        monkeypatch.setenv("CASSANDRA_USERNAME", "cassandra")
        monkeypatch.delenv("CASSANDRA_PASSWORD", raising=False)

        result = asyncio.run(ConfigCheck().check())

        assert result.status == HealthStatus.DEGRADED

    def test_config_check_blank_password_is_half_credentials(self, monkeypatch):
        monkeypatch.setenv("CASSANDRA_USERNAME", "alice")
        monkeypatch.setenv("CASSANDRA_PASSWORD", "   ")

        result = asyncio.run(ConfigCheck().check())

        assert result.status == HealthStatus.DEGRADED

    def test_config_check_full_credentials(self, monkeypatch):
        monkeypatch.setenv("CASSANDRA_USERNAME", "alice")
        monkeypatch.setenv("CASSANDRA_PASSWORD", "secret")

        result = asyncio.run(ConfigCheck().check())

        assert result.status == HealthStatus.HEALTHY


# ============================================================================
# REGISTRY
# ============================================================================

class TestRegistry:

    def test_same_name_replaces(self):
        registry = HealthCheckRegistry()
        first = CassandraHealthCheck(_StaticProbe())
        second = CassandraHealthCheck(_StaticProbe())

        registry.register(first)
        registry.register(second)

        assert len(registry) == 1
        assert registry.get(CASSANDRA_CHECK_NAME) is second

    def test_register_and_lookup(self):
        registry = HealthCheckRegistry()
        check = CassandraHealthCheck(_StaticProbe())

        registry.register(check)

        assert registry.get(CASSANDRA_CHECK_NAME) is check
        assert len(registry) == 1
        assert registry.get_required_checks() == [check]

    def test_priority_ordering(self):
        registry = HealthCheckRegistry()
        registry.register(CassandraHealthCheck(_StaticProbe()))
        registry.register(_FixedCheck("startup", HealthStatus.HEALTHY))

        names = [c.name for c in registry.get_checks_by_priority()]

        assert names == ["startup", CASSANDRA_CHECK_NAME]

    def test_unregister(self):
        registry = HealthCheckRegistry()
        registry.register(_FixedCheck("a", HealthStatus.HEALTHY))

        assert registry.unregister("a") is True
        assert registry.unregister("a") is False


# ============================================================================
# EXECUTOR
# ============================================================================

class TestExecutor:

    def test_worst_status_wins(self):
        registry = HealthCheckRegistry()
        registry.register(_FixedCheck("ok", HealthStatus.HEALTHY))
        registry.register(_FixedCheck("warn", HealthStatus.DEGRADED))

        result = asyncio.run(HealthCheckExecutor(registry).execute_all())

        assert result.status == HealthStatus.DEGRADED
        assert set(result.checks) == {"ok", "warn"}

    def test_check_timeout_is_unhealthy(self):
        registry = HealthCheckRegistry()
        registry.register(_SlowCheck())

        result = asyncio.run(HealthCheckExecutor(registry).execute_all())

        assert result.checks["slow"].status == HealthStatus.UNHEALTHY
        assert "Timeout" in result.checks["slow"].message

    def test_required_only(self):
        registry = HealthCheckRegistry()
        registry.register(_FixedCheck("required", HealthStatus.HEALTHY))
        registry.register(_FixedCheck("optional", HealthStatus.UNHEALTHY, required=False))

        result = asyncio.run(HealthCheckExecutor(registry).execute_required())

        assert result.status == HealthStatus.HEALTHY
        assert list(result.checks) == ["required"]

    def test_single_unknown_check(self):
        result = asyncio.run(
            HealthCheckExecutor(HealthCheckRegistry()).execute_single("missing")
        )
        assert result is None

    @pytest.mark.parametrize("statuses,expected", [
        ([], HealthStatus.HEALTHY),
        ([HealthStatus.HEALTHY, HealthStatus.UNHEALTHY], HealthStatus.UNHEALTHY),
        ([HealthStatus.DEGRADED, HealthStatus.HEALTHY], HealthStatus.DEGRADED),
    ])
    def test_aggregate(self, statuses, expected):
        assert HealthStatus.aggregate(statuses) == expected
