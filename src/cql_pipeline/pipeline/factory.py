"""
Pipeline Factory - Default Wiring from Configuration.
"""

from __future__ import annotations

import logging
from typing import Optional

from cql_pipeline.adapters.http_fetcher import HttpResourceFetcher
from cql_pipeline.adapters.remote_evaluator import RemoteCqlEvaluator
from cql_pipeline.config.models import PipelineConfig
from cql_pipeline.domain.errors import ConfigurationError
from cql_pipeline.interfaces.audit_logger import AuditLogger
from cql_pipeline.interfaces.cql_evaluator import CqlEvaluator
from cql_pipeline.interfaces.metrics_collector import MetricsCollector
from cql_pipeline.interfaces.resource_fetcher import ResourceFetcher
from cql_pipeline.observability.observability_manager import ObservabilityManager
from cql_pipeline.pipeline.orchestrator import PipelineOrchestrator
from cql_pipeline.resilience.retry_policy import (
    ErrorHandler,
    RetryConfig,
    RetryingResourceFetcher,
)
from cql_pipeline.validation.request_validator import RequestValidator

logger = logging.getLogger(__name__)


def create_fetcher(config: PipelineConfig) -> ResourceFetcher:
    """HTTP fetcher, wrapped in the retry policy when enabled."""
    fetcher: ResourceFetcher = HttpResourceFetcher(
        auth_token=config.fetch.auth_token,
        accept=config.fetch.accept,
        default_timeout_seconds=config.fetch.timeout_seconds,
    )
    if config.retry.enabled:
        handler = ErrorHandler(RetryConfig.from_policy(config.retry))
        fetcher = RetryingResourceFetcher(fetcher, handler)
    return fetcher


def create_evaluator(config: PipelineConfig) -> CqlEvaluator:
    """
    Remote evaluator from the ``evaluator`` section.

    Raises:
        ConfigurationError: If evaluator.url is unset
    """
    if not config.evaluator.url:
        raise ConfigurationError("evaluator.url is not configured", field="evaluator.url")
    return RemoteCqlEvaluator(
        url=config.evaluator.url,
        timeout_seconds=config.evaluator.timeout_seconds,
        auth_token=config.fetch.auth_token,
    )


def create_orchestrator(
    config: PipelineConfig,
    evaluator: Optional[CqlEvaluator] = None,
    fetcher: Optional[ResourceFetcher] = None,
    audit_logger: Optional[AuditLogger] = None,
    metrics_collector: Optional[MetricsCollector] = None,
) -> PipelineOrchestrator:
    """
    Build an orchestrator with default adapters for anything not supplied.

    Args:
        config: Pipeline configuration
        evaluator: Evaluation engine (remote evaluator from config if None)
        fetcher: Artifact transport (HTTP fetcher from config if None)
        audit_logger: Defaults to an ObservabilityManager
        metrics_collector: Defaults to the same ObservabilityManager

    Returns:
        Configured PipelineOrchestrator
    """
    observability: Optional[ObservabilityManager] = None
    if audit_logger is None or metrics_collector is None:
        observability = ObservabilityManager.from_config(config.observability)

    orchestrator = PipelineOrchestrator(
        fetcher=fetcher or create_fetcher(config),
        evaluator=evaluator or create_evaluator(config),
        endpoints=config.endpoints,
        audit_logger=audit_logger or observability,
        metrics_collector=metrics_collector or observability,
        request_validator=RequestValidator(),
        timeout_seconds=config.fetch.timeout_seconds,
    )
    logger.debug("Orchestrator created")
    return orchestrator
