# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# STATUS: Core - Structured logging with probe context
# PURPOSE: Consistent, queryable logging across the health probe
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

Every log line emitted while a probe runs carries the probe's context
(probe_id, session_name, node_id, check_name) so one invocation can be
followed through the log stream, even when several probes overlap.

Context lives in a ContextVar: each asyncio task sees its own copy and
asyncio.to_thread() carries it into worker threads.

Usage:
    from core.logging import get_logger, log_context, ComponentType

    logger = get_logger(__name__, ComponentType.TOPOLOGY)

    with log_context(probe_id="a1b2", node_id="7f3c..."):
        logger.debug("Reading node")
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union


class ComponentType(str, Enum):
    """Probe components, attached to every record from a component logger."""
    CONNECTION = "connection"
    TOPOLOGY = "topology"
    NODES = "nodes"
    LIVENESS = "liveness"
    HEALTH = "health"
    API = "api"


# ============================================================================
# CONTEXT
# ============================================================================

@dataclass(frozen=True)
class LogContext:
    """Fields attached to every record logged inside a log_context block."""
    probe_id: Optional[str] = None
    session_name: Optional[str] = None
    node_id: Optional[str] = None
    check_name: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only; extra is flattened in."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        result.update(self.extra)
        return result


_current: ContextVar[LogContext] = ContextVar("probe_log_context", default=LogContext())


def get_current_context() -> LogContext:
    return _current.get()


@contextmanager
def log_context(**kwargs):
    """
    Layer context fields over the enclosing context for the block.

    Example:
        with log_context(probe_id="a1b2"):
            with log_context(node_id="7f3c..."):
                ...  # both fields set here
    """
    parent = _current.get()
    extra = {**parent.extra, **kwargs.pop("extra", {})}
    token = _current.set(replace(parent, extra=extra, **kwargs))
    try:
        yield _current.get()
    finally:
        _current.reset(token)


# ============================================================================
# FORMATTERS
# ============================================================================

def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": _utc_timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = get_current_context().to_dict()
        if context:
            entry["context"] = context

        data = getattr(record, "extra", None)
        if data:
            entry["data"] = data

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry["source"] = f"{record.filename}:{record.lineno}"
        return json.dumps(entry, default=str)


class HumanFormatter(logging.Formatter):
    """Single-line output with the probe context inline."""

    _INLINE = (("check", "check_name"), ("probe", "probe_id"), ("node", "node_id"))

    def format(self, record: logging.LogRecord) -> str:
        context = get_current_context()
        tags = [
            f"{label}={getattr(context, attr)}"
            for label, attr in self._INLINE
            if getattr(context, attr)
        ]
        tag_str = f" [{', '.join(tags)}]" if tags else ""

        line = (
            f"{datetime.now(timezone.utc):%Y-%m-%d %H:%M:%S} "
            f"{record.levelname:<8} {record.name}{tag_str}: {record.getMessage()}"
        )
        data = getattr(record, "extra", None)
        if data:
            line += f" {data}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# ============================================================================
# LOGGERS
# ============================================================================

class ContextLogger(logging.LoggerAdapter):
    """Adapter that stamps the component and the current context on each record."""

    def process(self, msg, kwargs):
        data = dict(kwargs.get("extra", {}))
        data.update(get_current_context().to_dict())
        component = self.extra.get("component")
        if component is not None:
            data.setdefault("component", component.value)
        kwargs["extra"] = {"extra": data}
        return msg, kwargs


def get_logger(name: str, component: Optional[ComponentType] = None) -> ContextLogger:
    """Context-aware logger, optionally tagged with a probe component."""
    return ContextLogger(logging.getLogger(name), {"component": component})


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: bool = False,
) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: Log level name or number
        json_output: JSON lines instead of human-readable output
            (also enabled by LOG_FORMAT=json)
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_output or os.getenv("LOG_FORMAT", "").lower() == "json":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = HumanFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    # The driver is chatty at INFO during reconnects
    logging.getLogger("cassandra").setLevel(max(level, logging.WARNING))


# ============================================================================
# CHECKPOINTS
# ============================================================================

def log_checkpoint(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a probe state transition at DEBUG.

    Args:
        name: State reached (init, topology_read, ...)
        data: Counts or flags describing the state
        logger: Target logger (default "checkpoint")
    """
    payload: Dict[str, Any] = {"checkpoint": name, "timestamp": _utc_timestamp()}
    context = get_current_context()
    if context.probe_id:
        payload["probe_id"] = context.probe_id
    if data:
        payload["data"] = data

    (logger or logging.getLogger("checkpoint")).debug(
        f"CHECKPOINT: {name}", extra={"extra": payload}
    )


__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
