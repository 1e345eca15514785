# ============================================================================
# CASSANDRA CONFIGURATION
# ============================================================================
# STATUS: Core - Diagnostic connection configuration
# PURPOSE: Environment-based configuration for the diagnostic session
# CREATED: 19 OCT 2026
# ============================================================================
"""
Cassandra Configuration

Loads the diagnostic connection settings from environment variables with
sensible defaults. These settings describe the *diagnostic* session only;
the application's data-access session is configured elsewhere and is
never reused by the health probe.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from core.contracts import (
    LoadBalancingPolicyKind,
    ReconnectionPolicyKind,
    RetryPolicyKind,
)
from core.config.defaults import TimeoutDefaults

logger = logging.getLogger(__name__)


def _split_contact_points(raw: str) -> Tuple[str, ...]:
    return tuple(p.strip() for p in raw.split(",") if p.strip())


@dataclass(frozen=True)
class CassandraConfig:
    """Configuration for the diagnostic Cassandra connection."""

    contact_points: Tuple[str, ...] = ("127.0.0.1",)
    port: int = 9042
    local_datacenter: str = "datacenter1"
    keyspace: Optional[str] = None

    # Credentials are applied only when both are non-blank
    username: Optional[str] = None
    password: Optional[str] = None

    load_balancing_policy: LoadBalancingPolicyKind = LoadBalancingPolicyKind.TOKEN_AWARE_DC_AWARE
    retry_policy: RetryPolicyKind = RetryPolicyKind.DEFAULT
    reconnection_policy: ReconnectionPolicyKind = ReconnectionPolicyKind.EXPONENTIAL

    session_name: str = "cassandra-health-check"
    health_check_enabled: bool = True

    timeouts: TimeoutDefaults = field(default_factory=TimeoutDefaults)

    @classmethod
    def from_env(cls) -> "CassandraConfig":
        """Load configuration from environment variables."""
        return cls(
            contact_points=_split_contact_points(
                os.environ.get("CASSANDRA_CONTACT_POINTS", "127.0.0.1")
            ),
            port=int(os.environ.get("CASSANDRA_PORT", "9042")),
            local_datacenter=os.environ.get("CASSANDRA_LOCAL_DC", "datacenter1"),
            keyspace=os.environ.get("CASSANDRA_KEYSPACE") or None,
            username=os.environ.get("CASSANDRA_USERNAME"),
            password=os.environ.get("CASSANDRA_PASSWORD"),
            load_balancing_policy=LoadBalancingPolicyKind[
                os.environ.get("CASSANDRA_LB_POLICY", "TOKEN_AWARE_DC_AWARE").upper()
            ],
            retry_policy=RetryPolicyKind[
                os.environ.get("CASSANDRA_RETRY_POLICY", "DEFAULT").upper()
            ],
            reconnection_policy=ReconnectionPolicyKind[
                os.environ.get("CASSANDRA_RECONNECTION_POLICY", "EXPONENTIAL").upper()
            ],
            session_name=os.environ.get("CASSANDRA_SESSION_NAME", "cassandra-health-check"),
            health_check_enabled=(
                os.environ.get("CASSANDRA_HEALTH_ENABLED", "true").lower() == "true"
            ),
            timeouts=TimeoutDefaults.from_env(),
        )

    @property
    def has_credentials(self) -> bool:
        """Both username and password present and non-blank."""
        return bool(
            self.username and self.username.strip()
            and self.password and self.password.strip()
        )

    @property
    def contact_point_list(self) -> List[str]:
        return list(self.contact_points)

    def describe(self) -> str:
        """Loggable summary, credentials masked."""
        auth = "password" if self.has_credentials else "none"
        return (
            f"contact_points={','.join(self.contact_points)} port={self.port} "
            f"local_dc={self.local_datacenter} keyspace={self.keyspace or '-'} "
            f"auth={auth}"
        )


# Global config singleton
_config: Optional[CassandraConfig] = None


def get_config() -> CassandraConfig:
    """Get the global configuration singleton."""
    global _config
    if _config is None:
        _config = CassandraConfig.from_env()
        logger.debug(f"Loaded Cassandra config: {_config.describe()}")
    return _config


def reset_config() -> None:
    """Reset the configuration singleton (for testing)."""
    global _config
    _config = None


__all__ = ["CassandraConfig", "get_config", "reset_config"]
