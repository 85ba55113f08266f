"""
Resilience Package - Retry Outside the Core.

The orchestrator reports failures and never retries. This package offers
retry as a wrapping policy:
    - ErrorHandler: Retry with exponential backoff for retryable kinds
    - RetryingResourceFetcher: Drop-in ResourceFetcher using ErrorHandler

Design Principles:
    - Fail fast for permanent errors (not found, malformed, configuration)
    - Retry with backoff for transient errors (network, timeout)
"""

from cql_pipeline.resilience.retry_policy import (
    ErrorHandler,
    RetryConfig,
    RetryingResourceFetcher,
)

__all__ = ["ErrorHandler", "RetryConfig", "RetryingResourceFetcher"]
