"""
Observability Manager - Structured Run Events via structlog.

Every audit call becomes one structlog event. The run id is bound into
structlog's contextvars when a run starts, so all events of that run carry
it as ``correlation_id`` without being passed around explicitly.

Events and metric samples are also kept in memory, which lets callers (and
tests) inspect a run after the fact.
"""

from __future__ import annotations

import logging
import threading
from contextvars import ContextVar
from typing import Any, Dict, List, Optional

import structlog

from cql_pipeline.adapters.metrics_collector import InMemoryMetricsCollector, MetricSample

_run_correlation_id: ContextVar[Optional[str]] = ContextVar(
    "cql_run_correlation_id", default=None
)


def get_correlation_id() -> Optional[str]:
    """Correlation id of the run executing in the current context."""
    return _run_correlation_id.get()


class ObservabilityManager:
    """
    structlog-backed AuditLogger and MetricsCollector.

    Args:
        service_name: Logger name and ``service`` field of every event
        use_json: Render JSON lines; otherwise structlog's console renderer
        log_level: Minimum stdlib level that is emitted
    """

    def __init__(
        self,
        service_name: str = "cql_pipeline",
        use_json: bool = True,
        log_level: int = logging.INFO,
    ) -> None:
        self.service_name = service_name
        self.use_json = use_json
        self.log_level = log_level
        self._events: List[Dict[str, Any]] = []
        self._events_lock = threading.Lock()
        self._metrics = InMemoryMetricsCollector()

        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer()
                if use_json
                else structlog.dev.ConsoleRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(),
            cache_logger_on_first_use=False,
        )
        self._log = structlog.get_logger(service_name)

    @classmethod
    def from_config(cls, config: Any) -> ObservabilityManager:
        """Build from an ObservabilityConfig."""
        return cls(
            service_name=config.service_name,
            use_json=config.use_json,
            log_level=getattr(logging, config.log_level),
        )

    def set_correlation_id(self, correlation_id: str) -> None:
        _run_correlation_id.set(correlation_id)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=correlation_id, service=self.service_name
        )

    def _emit(self, event: str, level: str = "info", **fields: Any) -> None:
        record = {"event": event, "correlation_id": get_correlation_id(), **fields}
        with self._events_lock:
            self._events.append(record)
        getattr(self._log, level)(event, **fields)

    def get_events(self, event: Optional[str] = None) -> List[Dict[str, Any]]:
        """Recorded events, optionally only those named ``event``."""
        with self._events_lock:
            return [e for e in self._events if event is None or e["event"] == event]

    def clear(self) -> None:
        with self._events_lock:
            self._events.clear()
        self._metrics.clear()

    # AuditLogger

    def log_stage_start(
        self,
        stage_name: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._emit("stage_start", stage=stage_name, **(metadata or {}))

    def log_stage_end(
        self,
        stage_name: str,
        duration_seconds: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._emit(
            "stage_end",
            stage=stage_name,
            duration_seconds=round(duration_seconds, 6),
            **(metadata or {}),
        )

    def log_stage_failed(
        self,
        stage_name: str,
        error: Exception,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        if hasattr(error, "to_dict"):
            error_fields = error.to_dict()
        else:
            error_fields = {"kind": type(error).__name__, "message": str(error)}
        self._emit(
            "stage_failed", level="error", stage=stage_name, error=error_fields,
            **(metadata or {}),
        )

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        level = "error" if severity.upper() in ("ERROR", "CRITICAL") else "warning"
        self._emit(
            "anomaly", level=level, detail=message, severity=severity, **(context or {})
        )

    # MetricsCollector

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._metrics.record_timing(name, duration_seconds, tags)

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._metrics.record_count(name, value, tags)

    def samples(
        self, name: str, tags: Optional[Dict[str, str]] = None
    ) -> List[MetricSample]:
        return self._metrics.samples(name, tags)

    def get_metrics(self) -> Dict[str, Any]:
        return self._metrics.get_metrics()
