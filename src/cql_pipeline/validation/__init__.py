"""
Validation Package - Request Validation.

Components:
    - RequestValidator: Rejects unusable requests before any fetch
"""

from cql_pipeline.validation.request_validator import (
    RequestValidationError,
    RequestValidator,
)

__all__ = ["RequestValidationError", "RequestValidator"]
