"""
Error Taxonomy for the Evaluation Pipeline.

Every failure that can end a run is a PipelineError carrying an ErrorKind,
so callers can decide between "retry now", "check configuration" and
"content invalid" without inspecting messages.

Kinds:
    - NETWORK: transport failure
    - NOT_FOUND: resource absent at the address
    - TIMEOUT: deadline exceeded
    - MALFORMED: payload failed to parse into the expected shape
    - EVALUATION: the external evaluator rejected or failed on its inputs
    - CONFIGURATION: an address could not be resolved from configuration
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Classification of pipeline failures."""

    NETWORK = "NETWORK"
    NOT_FOUND = "NOT_FOUND"
    TIMEOUT = "TIMEOUT"
    MALFORMED = "MALFORMED"
    EVALUATION = "EVALUATION"
    CONFIGURATION = "CONFIGURATION"

    @property
    def is_retryable(self) -> bool:
        """Transient kinds that may succeed if the run is started again."""
        return self in (ErrorKind.NETWORK, ErrorKind.TIMEOUT)

    @property
    def guidance(self) -> str:
        """Short hint for the caller on how to react."""
        if self.is_retryable:
            return "retry"
        if self in (ErrorKind.NOT_FOUND, ErrorKind.CONFIGURATION):
            return "check_configuration"
        return "content_invalid"


class PipelineError(Exception):
    """Base exception for all pipeline failures. Subclasses set ``kind``."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured reporting."""
        return {
            "kind": self.kind.value,
            "guidance": self.kind.guidance,
            "message": self.message,
            "details": self.details,
        }


class FetchError(PipelineError):
    """Base class for errors raised by a resource fetcher."""

    def __init__(
        self,
        message: str,
        address: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details={"address": address, **(details or {})})
        self.address = address


class NetworkError(FetchError):
    """Transport failure or unexpected HTTP status."""

    kind = ErrorKind.NETWORK

    def __init__(
        self,
        address: str,
        reason: str,
        status_code: Optional[int] = None,
    ) -> None:
        details: Dict[str, Any] = {"reason": reason}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(f"Network error fetching {address}: {reason}", address, details)
        self.reason = reason
        self.status_code = status_code


class ResourceNotFoundError(FetchError):
    """Nothing exists at the requested address."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, address: str, status_code: Optional[int] = None) -> None:
        details = {"status_code": status_code} if status_code is not None else None
        super().__init__(f"Resource not found: {address}", address, details)
        self.status_code = status_code


class FetchTimeoutError(FetchError):
    """The fetch did not complete within its deadline."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, address: str, timeout_seconds: Optional[float]) -> None:
        super().__init__(
            f"Timed out after {timeout_seconds}s fetching {address}",
            address,
            {"timeout_seconds": timeout_seconds},
        )
        self.timeout_seconds = timeout_seconds


class MalformedPayloadError(PipelineError):
    """A payload could not be parsed into the expected shape."""

    kind = ErrorKind.MALFORMED

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(f"Malformed payload: {reason}", details)
        self.reason = reason


class EvaluationError(PipelineError):
    """The evaluation engine rejected or failed on its inputs."""

    kind = ErrorKind.EVALUATION

    def __init__(self, detail: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(f"Evaluation failed: {detail}", details)
        self.detail = detail


class ConfigurationError(PipelineError):
    """A required configuration value is unset."""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message, details={"field": field} if field else None)
        self.field = field
