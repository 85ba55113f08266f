"""
Observability Package - Structured Logging and Metrics.

Components:
    - ObservabilityManager: structlog events with per-run correlation ids,
      usable as both audit logger and metrics collector
"""

from cql_pipeline.observability.observability_manager import (
    ObservabilityManager,
    get_correlation_id,
)

__all__ = ["ObservabilityManager", "get_correlation_id"]
