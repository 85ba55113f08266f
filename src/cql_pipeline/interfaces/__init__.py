"""
Interfaces Layer - Abstract Protocols for Dependencies.

This package defines the abstract interfaces (using typing.Protocol) for all
external dependencies. High-level modules depend on these abstractions, not
on concrete implementations.

Protocols:
    - ResourceFetcher: Single-shot retrieval of a named artifact
    - CqlEvaluator: External CQL evaluation engine
    - AuditLogger: Logging abstraction for stage progress
    - MetricsCollector: Performance metrics abstraction

Design Principles:
    - Use typing.Protocol (not ABC) for Pythonic interfaces
    - Interface Segregation: Small, focused interfaces
    - All methods have clear contracts in docstrings
"""

from cql_pipeline.interfaces.audit_logger import AuditLogger
from cql_pipeline.interfaces.cql_evaluator import CqlEvaluator
from cql_pipeline.interfaces.metrics_collector import MetricsCollector
from cql_pipeline.interfaces.resource_fetcher import ResourceFetcher

__all__ = ["AuditLogger", "CqlEvaluator", "MetricsCollector", "ResourceFetcher"]
