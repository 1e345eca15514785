# ============================================================================
# PROBE ERRORS
# ============================================================================
# STATUS: Foundation - Error taxonomy
# PURPOSE: Exceptions raised or absorbed by the health probe
# CREATED: 19 OCT 2026
# ============================================================================
"""
Probe Errors

Propagation policy:
- ClusterConnectionError: raised while opening the diagnostic connection.
  Fatal to building the probe; never retried here.
- MetadataUnavailable: absorbed by the topology/node readers, the
  affected fields fall back to empty values.
- LivenessFailure: absorbed by the liveness prober, the report flips
  to DOWN and carries the description.
"""

from typing import Optional


class ProbeError(Exception):
    """Base class for health probe errors."""


class ClusterConnectionError(ProbeError, ConnectionError):
    """
    The diagnostic connection could not be established.

    Subclasses the builtin ConnectionError so callers catching the
    generic type still see it.
    """

    def __init__(self, message: str, contact_points: Optional[list] = None):
        super().__init__(message)
        self.contact_points = list(contact_points or [])


class MetadataUnavailable(ProbeError):
    """Driver metadata could not be read (field defaults to empty)."""

    def __init__(self, field_name: str, cause: Optional[BaseException] = None):
        message = f"metadata unavailable for {field_name}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.field_name = field_name
        self.cause = cause


class LivenessFailure(ProbeError):
    """The liveness query failed, timed out or could not be iterated."""

    def __init__(self, description: str, cause: Optional[BaseException] = None):
        super().__init__(description)
        self.description = description
        self.cause = cause

    @classmethod
    def from_exception(cls, e: BaseException) -> "LivenessFailure":
        text = str(e) or type(e).__name__
        return cls(f"{type(e).__name__}: {text}", cause=e)


__all__ = [
    "ProbeError",
    "ClusterConnectionError",
    "MetadataUnavailable",
    "LivenessFailure",
]
