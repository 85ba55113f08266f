"""
Retry Policy - Retry with Backoff Around a Resource Fetcher.

The orchestrator itself never retries. Callers who want transient fetch
failures retried wrap their fetcher in RetryingResourceFetcher; to the
orchestrator it is just another ResourceFetcher.

Provides:
    - Retry with exponential backoff, capped
    - Retries only retryable error kinds (network, timeout)
    - The last error is re-raised unchanged so its kind is preserved
    - Stops retrying once the run's cancellation token is set
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from cql_pipeline.domain.errors import PipelineError
from cql_pipeline.interfaces.resource_fetcher import ResourceFetcher
from cql_pipeline.pipeline.cancellation import CancellationToken, active_token

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryConfig:
    """Configuration for retry logic."""

    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 30.0
    exponential_base: float = 2.0

    @classmethod
    def from_policy(cls, policy: Any) -> RetryConfig:
        """Build from a RetryPolicyConfig."""
        return cls(
            max_attempts=policy.max_attempts,
            base_delay_seconds=policy.base_delay_seconds,
            max_delay_seconds=policy.max_delay_seconds,
            exponential_base=policy.exponential_base,
        )


def is_retryable(error: Exception) -> bool:
    return isinstance(error, PipelineError) and error.kind.is_retryable


def _cancelled(
    token: Optional[CancellationToken], operation_name: str, attempt: int
) -> bool:
    if token is None or not token.is_cancelled:
        return False
    logger.info(f"{operation_name} cancelled after attempt {attempt}, not retrying")
    return True


class ErrorHandler:
    """Executes callables with retry and exponential backoff."""

    def __init__(
        self,
        retry_config: Optional[RetryConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize error handler.

        Args:
            retry_config: Configuration for retry logic
            sleep: Delay function (injectable for tests)
        """
        self.retry_config = retry_config or RetryConfig()
        self._sleep = sleep

    def retry(
        self,
        func: Callable[[], T],
        operation_name: str = "operation",
        cancellation_token: Optional[CancellationToken] = None,
    ) -> T:
        """
        Execute function, retrying retryable pipeline errors.

        Args:
            func: Function to execute
            operation_name: Name for logging
            cancellation_token: Checked before each retry and after each
                backoff sleep; once set, the last error is re-raised

        Returns:
            Result of successful execution

        Raises:
            PipelineError: The last error once attempts are exhausted, or
                the first non-retryable error, or the last error when
                cancelled between attempts
        """
        max_attempts = self.retry_config.max_attempts

        for attempt in range(1, max_attempts + 1):
            try:
                result = func()
            except PipelineError as e:
                if not is_retryable(e):
                    raise
                if attempt == max_attempts:
                    logger.error(f"{operation_name} failed after {attempt} attempts: {e}")
                    raise
                if _cancelled(cancellation_token, operation_name, attempt):
                    raise
                delay = self._calculate_delay(attempt)
                logger.warning(
                    f"{operation_name} failed (attempt {attempt}/{max_attempts}), "
                    f"retrying in {delay:.2f}s: {e}"
                )
                self._sleep(delay)
                if _cancelled(cancellation_token, operation_name, attempt):
                    raise
            else:
                if attempt > 1:
                    logger.info(f"{operation_name} succeeded on attempt {attempt}")
                return result

        raise AssertionError("unreachable")

    def _calculate_delay(self, attempt: int) -> float:
        """Calculate delay with exponential backoff."""
        delay = self.retry_config.base_delay_seconds * (
            self.retry_config.exponential_base ** (attempt - 1)
        )
        return min(delay, self.retry_config.max_delay_seconds)


class RetryingResourceFetcher:
    """
    ResourceFetcher wrapper that retries transient failures.

    Retries stop as soon as the cancellation token is set. The token is the
    one given here or, when none is given, the token of the run currently
    fetching.
    """

    def __init__(
        self,
        fetcher: ResourceFetcher,
        error_handler: Optional[ErrorHandler] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> None:
        self.fetcher = fetcher
        self.error_handler = error_handler or ErrorHandler()
        self.cancellation_token = cancellation_token

    def fetch(self, address: str, timeout_seconds: Optional[float] = None) -> str:
        return self.error_handler.retry(
            lambda: self.fetcher.fetch(address, timeout_seconds=timeout_seconds),
            operation_name=f"fetch {address}",
            cancellation_token=self.cancellation_token or active_token(),
        )

    def close(self) -> None:
        close = getattr(self.fetcher, "close", None)
        if callable(close):
            close()
