# ============================================================================
# CASSANDRA DIAGNOSTIC CONNECTION
# ============================================================================
# STATUS: Infrastructure - Dedicated diagnostic session
# PURPOSE: Open, expose and close the health probe's own cluster connection
# CREATED: 19 OCT 2026
# ============================================================================
"""
Cassandra Diagnostic Connection

Owns a Cluster/Session pair used exclusively by the health probe. It is
never the application's data-access session, so a health check neither
contends with nor masks production traffic.

Lifecycle:
- open_connection(config) builds the driver objects once at startup.
  Any failure (unresolvable contact points, no host available, bad
  credentials, connect timeout) raises ClusterConnectionError and the
  half-built Cluster is shut down before the error leaves.
- DiagnosticConnection.close() shuts the cluster down exactly once.
  The connection is also a context manager.

Policies are built from the enumerated kinds in CassandraConfig and the
connection records which kind it built for each execution profile.

Usage:
    from infrastructure.cassandra import open_connection

    with open_connection(get_config()) as connection:
        hosts = connection.all_hosts()
"""

import threading
import time
from typing import Any, Dict, List, Optional

from cassandra import ConsistencyLevel, DriverException
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import (
    Cluster,
    ExecutionProfile,
    EXEC_PROFILE_DEFAULT,
    NoHostAvailable,
)
from cassandra.policies import (
    ConstantReconnectionPolicy,
    DCAwareRoundRobinPolicy,
    ExponentialReconnectionPolicy,
    FallthroughRetryPolicy,
    HostDistance,
    HostStateListener,
    RetryPolicy,
    RoundRobinPolicy,
    TokenAwarePolicy,
)

from core.config.cassandra import CassandraConfig
from core.contracts import (
    LoadBalancingPolicyKind,
    NodeDistance,
    ReconnectionPolicyKind,
    RetryPolicyKind,
)
from core.errors import ClusterConnectionError
from core.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.CONNECTION)


DEFAULT_PROFILE_NAME = "default"
DIAGNOSTIC_PROFILE = "diagnostic"

LIVENESS_QUERY = "SELECT cluster_name FROM system.local"

NEVER_UP = -1


def _distance_names() -> Dict[int, NodeDistance]:
    names = {
        HostDistance.LOCAL: NodeDistance.LOCAL,
        HostDistance.REMOTE: NodeDistance.REMOTE,
        HostDistance.IGNORED: NodeDistance.IGNORED,
    }
    # LOCAL_RACK only exists on newer drivers
    local_rack = getattr(HostDistance, "LOCAL_RACK", None)
    if local_rack is not None:
        names[local_rack] = NodeDistance.LOCAL_RACK
    return names


_DISTANCE_NAMES = _distance_names()


# ============================================================================
# POLICY BUILDERS
# ============================================================================

def build_load_balancing_policy(kind: LoadBalancingPolicyKind, local_dc: str):
    """Build a fresh driver load-balancing policy for one execution profile."""
    if kind is LoadBalancingPolicyKind.TOKEN_AWARE_DC_AWARE:
        return TokenAwarePolicy(DCAwareRoundRobinPolicy(local_dc=local_dc))
    if kind is LoadBalancingPolicyKind.DC_AWARE_ROUND_ROBIN:
        return DCAwareRoundRobinPolicy(local_dc=local_dc)
    return RoundRobinPolicy()


def build_retry_policy(kind: RetryPolicyKind):
    if kind is RetryPolicyKind.FALLTHROUGH:
        return FallthroughRetryPolicy()
    return RetryPolicy()


def build_reconnection_policy(kind: ReconnectionPolicyKind):
    if kind is ReconnectionPolicyKind.CONSTANT:
        return ConstantReconnectionPolicy(delay=2.0, max_attempts=None)
    return ExponentialReconnectionPolicy(base_delay=1.0, max_delay=60.0)


# ============================================================================
# UP-SINCE TRACKING
# ============================================================================

class UpSinceTracker(HostStateListener):
    """
    Records the epoch millis at which each host was last seen up.

    Driver event threads write; probe threads read. Hosts are keyed by
    endpoint because host_id can be unset until the first topology refresh.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._up_since: Dict[Any, int] = {}

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)

    def on_up(self, host) -> None:
        with self._lock:
            self._up_since[host.endpoint] = self._now_ms()

    def on_down(self, host) -> None:
        with self._lock:
            self._up_since.pop(host.endpoint, None)

    def on_add(self, host) -> None:
        if host.is_up:
            self.on_up(host)

    def on_remove(self, host) -> None:
        self.on_down(host)

    def seed(self, hosts) -> None:
        """Mark hosts already up at connect time, keeping earlier timestamps."""
        now = self._now_ms()
        with self._lock:
            for host in hosts:
                if host.is_up:
                    self._up_since.setdefault(host.endpoint, now)

    def up_since(self, host) -> int:
        with self._lock:
            return self._up_since.get(host.endpoint, NEVER_UP)


# ============================================================================
# DIAGNOSTIC CONNECTION
# ============================================================================

class DiagnosticConnection:
    """
    Read-only view over the diagnostic Cluster/Session.

    Safe to share between concurrent probes: nothing here mutates driver
    state except close(), which runs once at shutdown.
    """

    def __init__(
        self,
        cluster,
        session,
        config: CassandraConfig,
        tracker: Optional[UpSinceTracker] = None,
    ):
        self._cluster = cluster
        self._session = session
        self._config = config
        self._tracker = tracker or UpSinceTracker()
        self._close_lock = threading.Lock()
        self._closed = False

        self.load_balancing_policies: Dict[str, LoadBalancingPolicyKind] = {
            DEFAULT_PROFILE_NAME: config.load_balancing_policy,
            DIAGNOSTIC_PROFILE: config.load_balancing_policy,
        }
        self.retry_policies: Dict[str, RetryPolicyKind] = {
            DEFAULT_PROFILE_NAME: config.retry_policy,
            DIAGNOSTIC_PROFILE: config.retry_policy,
        }
        self.reconnection_policy: ReconnectionPolicyKind = config.reconnection_policy

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def config(self) -> CassandraConfig:
        return self._config

    @property
    def session_name(self) -> str:
        return self._config.session_name

    @property
    def local_datacenter(self) -> str:
        return self._config.local_datacenter or ""

    @property
    def execution_profile_names(self) -> List[str]:
        return sorted(self.load_balancing_policies)

    @property
    def is_closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Metadata view
    # ------------------------------------------------------------------

    @property
    def metadata(self):
        """The driver's cached cluster metadata."""
        return self._cluster.metadata

    def all_hosts(self) -> list:
        return list(self._cluster.metadata.all_hosts())

    def distance(self, host) -> NodeDistance:
        raw = self._cluster.profile_manager.distance(host)
        return _DISTANCE_NAMES.get(raw, NodeDistance.UNKNOWN)

    def pool_state(self, host) -> Dict[str, Any]:
        """Connection pool state for a host, empty when no pool is open."""
        return dict(self._session.get_pool_state().get(host) or {})

    def up_since_millis(self, host) -> int:
        return self._tracker.up_since(host)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def execute_liveness_query(self, timeout: float):
        """Run the liveness query on the diagnostic profile."""
        return self._session.execute(
            LIVENESS_QUERY,
            timeout=timeout,
            execution_profile=DIAGNOSTIC_PROFILE,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Shut down the diagnostic cluster. Later calls are no-ops."""
        with self._close_lock:
            if self._closed:
                logger.debug("Diagnostic connection already closed")
                return
            self._closed = True

        self._cluster.shutdown()
        logger.info(f"Diagnostic connection closed (session={self.session_name})")

    def __enter__(self) -> "DiagnosticConnection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


# ============================================================================
# OPEN / CLOSE
# ============================================================================

def _build_cluster(config: CassandraConfig, tracker: UpSinceTracker) -> Cluster:
    timeouts = config.timeouts

    default_profile = ExecutionProfile(
        load_balancing_policy=build_load_balancing_policy(
            config.load_balancing_policy, config.local_datacenter
        ),
        retry_policy=build_retry_policy(config.retry_policy),
        consistency_level=ConsistencyLevel.LOCAL_ONE,
    )
    diagnostic_profile = ExecutionProfile(
        load_balancing_policy=build_load_balancing_policy(
            config.load_balancing_policy, config.local_datacenter
        ),
        retry_policy=build_retry_policy(config.retry_policy),
        consistency_level=ConsistencyLevel.LOCAL_ONE,
        request_timeout=timeouts.liveness_timeout,
    )

    kwargs: Dict[str, Any] = dict(
        contact_points=config.contact_point_list,
        port=config.port,
        execution_profiles={
            EXEC_PROFILE_DEFAULT: default_profile,
            DIAGNOSTIC_PROFILE: diagnostic_profile,
        },
        reconnection_policy=build_reconnection_policy(config.reconnection_policy),
        connect_timeout=timeouts.connect_timeout,
        control_connection_timeout=timeouts.control_connection_timeout,
    )
    if config.has_credentials:
        kwargs["auth_provider"] = PlainTextAuthProvider(
            username=config.username,
            password=config.password,
        )

    cluster = Cluster(**kwargs)
    cluster.register_listener(tracker)
    return cluster


def open_connection(config: CassandraConfig) -> DiagnosticConnection:
    """
    Open the dedicated diagnostic connection.

    Args:
        config: Diagnostic connection settings

    Returns:
        DiagnosticConnection ready for probing

    Raises:
        ClusterConnectionError: If the cluster cannot be reached or
            authentication fails. No retry is attempted here.
    """
    logger.info(f"Opening diagnostic connection: {config.describe()}")
    tracker = UpSinceTracker()

    cluster = None
    try:
        cluster = _build_cluster(config, tracker)
        session = cluster.connect(config.keyspace)
    except (NoHostAvailable, DriverException, OSError, ValueError) as e:
        if cluster is not None:
            cluster.shutdown()
        logger.error(f"Diagnostic connection failed: {e}")
        raise ClusterConnectionError(
            f"Unable to connect to Cassandra at {','.join(config.contact_points)}:"
            f"{config.port}: {e}",
            contact_points=config.contact_point_list,
        ) from e
    except BaseException:
        if cluster is not None:
            cluster.shutdown()
        raise

    tracker.seed(cluster.metadata.all_hosts())
    connection = DiagnosticConnection(cluster, session, config, tracker)
    logger.info(
        f"Diagnostic connection open (session={connection.session_name}, "
        f"hosts={len(connection.all_hosts())})"
    )
    return connection


def close_connection(connection: Optional[DiagnosticConnection]) -> None:
    """Close a diagnostic connection if one was opened."""
    if connection is not None:
        connection.close()


__all__ = [
    "DiagnosticConnection",
    "UpSinceTracker",
    "open_connection",
    "close_connection",
    "build_load_balancing_policy",
    "build_retry_policy",
    "build_reconnection_policy",
    "DEFAULT_PROFILE_NAME",
    "DIAGNOSTIC_PROFILE",
    "LIVENESS_QUERY",
    "NEVER_UP",
]
