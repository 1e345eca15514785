# ============================================================================
# LIVENESS PROBER
# ============================================================================
# STATUS: Diagnostics - Minimal reachability query
# PURPOSE: Classify the cluster as reachable or unreachable
# CREATED: 19 OCT 2026
# ============================================================================
"""
Liveness Prober

Runs one side-effect-free query (cluster_name from system.local) on the
diagnostic execution profile. Success means the query executed and its
rows could be iterated; row contents are not validated.

Every failure, timeout included, becomes an unreachable LivenessResult.
Nothing raised by the driver leaves this module.
"""

import asyncio
import time

from core.errors import LivenessFailure
from core.logging import ComponentType, get_logger
from diagnostics.models import LivenessResult

logger = get_logger(__name__, ComponentType.LIVENESS)

# Slack on top of the driver's own request timeout before the
# coroutine gives up on the worker thread
TIMEOUT_GRACE_SECONDS = 0.5


def run_liveness_query(connection, timeout: float) -> LivenessResult:
    """
    Execute the liveness query synchronously.

    Args:
        connection: DiagnosticConnection
        timeout: Driver request timeout in seconds

    Returns:
        LivenessResult
    """
    start = time.monotonic()
    try:
        rows = 0
        for row in connection.execute_liveness_query(timeout):
            rows += 1
            logger.debug(f"cluster_name: {row[0]}")
    except Exception as e:
        failure = LivenessFailure.from_exception(e)
        duration_ms = (time.monotonic() - start) * 1000
        logger.warning(f"Liveness query failed after {duration_ms:.1f}ms: {failure}")
        return LivenessResult.unreachable(failure.description, duration_ms)

    duration_ms = (time.monotonic() - start) * 1000
    return LivenessResult.success(rows=rows, duration_ms=duration_ms)


async def probe_liveness(connection, timeout: float) -> LivenessResult:
    """
    Execute the liveness query off the event loop, bounded by a timeout.

    Args:
        connection: DiagnosticConnection
        timeout: Seconds before the probe is treated as unreachable

    Returns:
        LivenessResult
    """
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(run_liveness_query, connection, timeout),
            timeout=timeout + TIMEOUT_GRACE_SECONDS,
        )
    except asyncio.TimeoutError:
        failure = LivenessFailure(f"Liveness query timed out after {timeout}s")
        logger.warning(str(failure))
        return LivenessResult.unreachable(failure.description, timeout * 1000)


__all__ = ["run_liveness_query", "probe_liveness", "TIMEOUT_GRACE_SECONDS"]
