"""
Adapters Package - Infrastructure Implementations.

Concrete implementations of the protocols defined in the interfaces
package, following the Ports & Adapters pattern.

Fetchers:
    - HttpResourceFetcher: FHIR server over HTTP (requests)
    - StaticResourceFetcher: In-memory payloads for development/testing

Evaluators:
    - RemoteCqlEvaluator: HTTP evaluation service
    - StubCqlEvaluator: Preconfigured results for testing

Loggers:
    - ConsoleAuditLogger: Simple console output

Metrics:
    - InMemoryMetricsCollector: Simple in-memory collection

Design Principles:
    - All adapters implement their respective protocols
    - Easily swappable via Dependency Injection
    - No business logic in adapters
"""

from cql_pipeline.adapters.console_logger import ConsoleAuditLogger
from cql_pipeline.adapters.http_fetcher import HttpResourceFetcher
from cql_pipeline.adapters.metrics_collector import InMemoryMetricsCollector
from cql_pipeline.adapters.remote_evaluator import RemoteCqlEvaluator
from cql_pipeline.adapters.static_fetcher import StaticResourceFetcher
from cql_pipeline.adapters.stub_evaluator import StubCqlEvaluator

__all__ = [
    "ConsoleAuditLogger",
    "HttpResourceFetcher",
    "InMemoryMetricsCollector",
    "RemoteCqlEvaluator",
    "StaticResourceFetcher",
    "StubCqlEvaluator",
]
