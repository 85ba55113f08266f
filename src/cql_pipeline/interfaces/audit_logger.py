"""
Audit Logger Protocol.

Tracks the progress of evaluation runs for debugging and support.

The audit logger is responsible for:
    - Logging stage start/end/failure events
    - Logging anomalies and warnings
    - Maintaining correlation across a run

Design Notes:
    - Correlation ID propagation for tracing
    - No side effects on pipeline behavior
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class AuditLogger(Protocol):
    """Abstract interface for audit logging."""

    def set_correlation_id(self, correlation_id: str) -> None:
        """Set correlation ID for subsequent log entries."""
        ...

    def log_stage_start(
        self,
        stage_name: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log the start of a stage."""
        ...

    def log_stage_end(
        self,
        stage_name: str,
        duration_seconds: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log the successful end of a stage."""
        ...

    def log_stage_failed(
        self,
        stage_name: str,
        error: Exception,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log a stage failure that terminates the run."""
        ...

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log an anomaly or warning.

        Args:
            message: Description of the anomaly
            severity: INFO, WARNING, or CRITICAL
            context: Optional additional context
        """
        ...
