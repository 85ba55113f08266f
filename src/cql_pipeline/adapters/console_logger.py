"""
Console Audit Logger.

Prints one line per stage event, prefixed with the wall-clock time and the
first eight characters of the run id:

    12:04:31 3f2a9c10 INFO  library <- https://.../Library?_id=ANCRecommendationA2
    12:04:32 3f2a9c10 INFO  library done in 0.412s
    12:04:33 3f2a9c10 ERROR value_set NOT_FOUND: Resource not found: ...
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

_NO_RUN = "-" * 8


class ConsoleAuditLogger:
    """Human-readable audit trail on stdout."""

    def __init__(self, verbose: bool = True) -> None:
        """
        Args:
            verbose: Also print stage starts and completions. Failures and
                anomalies are always printed.
        """
        self.verbose = verbose
        self._run_prefix = _NO_RUN

    def set_correlation_id(self, correlation_id: str) -> None:
        self._run_prefix = correlation_id[:8] or _NO_RUN

    def log_stage_start(
        self,
        stage_name: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not self.verbose:
            return
        address = (metadata or {}).get("address")
        self._print("INFO", f"{stage_name} <- {address}" if address else f"{stage_name} started")

    def log_stage_end(
        self,
        stage_name: str,
        duration_seconds: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        if self.verbose:
            self._print("INFO", f"{stage_name} done in {duration_seconds:.3f}s")

    def log_stage_failed(
        self,
        stage_name: str,
        error: Exception,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        kind = error.kind.value if hasattr(error, "kind") else type(error).__name__
        self._print("ERROR", f"{stage_name} {kind}: {error}")

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = ", ".join(f"{k}={v}" for k, v in (context or {}).items())
        self._print(severity.upper(), f"{message} ({details})" if details else message)

    def _print(self, level: str, text: str) -> None:
        print(f"{datetime.now():%H:%M:%S} {self._run_prefix} {level:<5} {text}")
