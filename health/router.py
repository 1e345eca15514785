# ============================================================================
# HEALTH CHECK ROUTER
# ============================================================================
# STATUS: Infrastructure - FastAPI health check endpoints
# PURPOSE: Probes, aggregated health and the Cassandra health report
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Router

    GET /livez                     200 while the process serves requests
    GET /readyz                    200 ready, 503 when a required check fails
    GET /health                    every check; 200 / 206 degraded / 503
    GET /health/cassandra/report   {"status": "UP"|"DOWN", "details", "error"?}
                                   200 UP, 503 DOWN, 404 check not registered
    GET /health/{check_name}       one check
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from __version__ import __version__, BUILD_DATE
from core.config.defaults import get_defaults
from health.core import CASSANDRA_CHECK_NAME, HealthStatus
from health.executor import HealthCheckExecutor
from health.registry import get_registry

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["Health"])


def _not_found(name: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": f"Health check not found: {name}"})


@health_router.get("/livez")
async def liveness_probe():
    """Process liveness only; touches no dependency."""
    return {"status": "alive", "version": __version__, "build_date": BUILD_DATE}


@health_router.get("/readyz")
async def readiness_probe():
    registry = get_registry()
    if len(registry) == 0:
        return {"status": "ready", "message": "No checks registered"}

    executor = HealthCheckExecutor(
        registry, overall_timeout=get_defaults().timeouts.readiness_timeout
    )
    result = await executor.execute_required()
    failing = result.failing()

    if failing:
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "checks": {name: r.to_dict() for name, r in failing.items()},
                "total_duration_ms": round(result.total_duration_ms, 2),
            },
        )
    return {
        "status": "ready",
        "checks_passed": len(result.checks),
        "total_duration_ms": round(result.total_duration_ms, 2),
    }


@health_router.get("/health")
async def full_health_check():
    registry = get_registry()
    if len(registry) == 0:
        return {"status": HealthStatus.HEALTHY.value, "message": "No checks registered", "checks": {}}

    executor = HealthCheckExecutor(
        registry, overall_timeout=get_defaults().timeouts.overall_timeout
    )
    result = await executor.execute_all()

    categories = {check.name: check.category for check in registry.get_checks_by_priority()}
    body = result.to_dict()
    body.update(
        version=__version__,
        build_date=BUILD_DATE,
        summary=result.summary(categories),
    )
    return JSONResponse(status_code=result.status.http_code, content=body)


@health_router.get("/health/cassandra/report")
async def cassandra_health_report():
    """
    Point-in-time Cassandra health report.

    DOWN is a well-formed report, not an error; it still carries the
    topology and node details.
    """
    check = get_registry().get(CASSANDRA_CHECK_NAME)
    if check is None:
        return _not_found(CASSANDRA_CHECK_NAME)

    report = await check.run_probe()
    return JSONResponse(status_code=200 if report.is_up else 503, content=report.to_dict())


@health_router.get("/health/{check_name}")
async def single_health_check(check_name: str):
    result = await HealthCheckExecutor().execute_single(check_name)
    if result is None:
        return _not_found(check_name)
    return JSONResponse(status_code=result.status.http_code, content=result.to_dict())


__all__ = ["health_router"]
