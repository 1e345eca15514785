# ============================================================================
# HEALTH CHECK EXECUTOR
# ============================================================================
# STATUS: Infrastructure - Parallel health check execution
# PURPOSE: Run registered checks with timeouts and aggregate the results
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Executor

Checks with the same priority run concurrently; priority groups run in
ascending order so the startup checks finish before the cluster probe.

Two limits apply:
- timeout_seconds per check
- overall_timeout across the whole run; groups not started in time
  are reported as skipped

A check that raises or times out becomes an unhealthy result. Nothing
escapes to the HTTP layer.
"""

import asyncio
import logging
import time
from itertools import groupby
from typing import Dict, List, Optional

from health.core import (
    AggregatedHealthResult,
    HealthCheckPlugin,
    HealthCheckResult,
    HealthStatus,
)
from health.registry import HealthCheckRegistry, get_registry

logger = logging.getLogger(__name__)


class HealthCheckExecutor:
    """Runs checks from a registry (the global one by default)."""

    def __init__(
        self,
        registry: Optional[HealthCheckRegistry] = None,
        overall_timeout: float = 30.0,
    ):
        self.registry = registry or get_registry()
        self.overall_timeout = overall_timeout

    async def execute_all(self) -> AggregatedHealthResult:
        return await self._execute(self.registry.get_checks_by_priority())

    async def execute_required(self) -> AggregatedHealthResult:
        """Only the checks that gate /readyz."""
        return await self._execute(self.registry.get_required_checks())

    async def execute_single(self, name: str) -> Optional[HealthCheckResult]:
        check = self.registry.get(name)
        if check is None:
            return None
        return await self._run_check(check)

    # ------------------------------------------------------------------

    async def _execute(self, checks: List[HealthCheckPlugin]) -> AggregatedHealthResult:
        start = time.monotonic()
        deadline = start + self.overall_timeout
        results: Dict[str, HealthCheckResult] = {}

        for priority, group in groupby(checks, key=lambda c: c.priority):
            group = list(group)
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.warning(
                    f"Overall health timeout ({self.overall_timeout}s) reached, "
                    f"skipping priority {priority}"
                )
                for check in group:
                    results[check.name] = HealthCheckResult.unhealthy(
                        "Skipped: overall timeout exceeded"
                    )
                continue
            results.update(await self._run_group(group, remaining))

        return AggregatedHealthResult(
            status=HealthStatus.aggregate(r.status for r in results.values()),
            checks=results,
            total_duration_ms=(time.monotonic() - start) * 1000,
        )

    async def _run_group(
        self,
        group: List[HealthCheckPlugin],
        remaining: float,
    ) -> Dict[str, HealthCheckResult]:
        tasks = {asyncio.create_task(self._run_check(check)): check for check in group}
        done, pending = await asyncio.wait(tasks, timeout=remaining)

        results = {tasks[task].name: task.result() for task in done}
        for task in pending:
            task.cancel()
            results[tasks[task].name] = HealthCheckResult.unhealthy(
                f"Timeout after {remaining:.1f}s (overall)"
            )
        return results

    async def _run_check(self, check: HealthCheckPlugin) -> HealthCheckResult:
        start = time.monotonic()
        try:
            result = await asyncio.wait_for(check.check(), timeout=check.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(f"Health check {check.name} timed out after {check.timeout_seconds}s")
            result = HealthCheckResult.unhealthy(f"Timeout after {check.timeout_seconds}s")
        except Exception as e:
            logger.error(f"Health check {check.name} raised: {e}")
            result = HealthCheckResult.from_exception(e)

        result.duration_ms = (time.monotonic() - start) * 1000
        logger.debug(f"Health check {check.name}: {result.status.value} ({result.duration_ms:.1f}ms)")
        return result


__all__ = ["HealthCheckExecutor"]
