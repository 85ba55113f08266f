"""
Configuration Package - Models and Loaders.

This package handles all configuration aspects of the CQL pipeline:
    - Pydantic models for type-safe configuration
    - YAML loader with validation and profile overlays
    - Properties-file loader for endpoint settings

Configuration Structure:
    - PipelineConfig: Root configuration object
    - EndpointConfig: Base URL and per-artifact paths
    - FetchConfig: Timeout and transport headers
    - RetryPolicyConfig: Optional retry wrapper around the fetcher
    - EvaluationDefaults: Default evaluation identifiers
    - EvaluatorConfig: Remote evaluation service
    - ObservabilityConfig: Logging settings
"""

from cql_pipeline.config.loader import ConfigLoader, load_config
from cql_pipeline.config.models import (
    EndpointConfig,
    EvaluationDefaults,
    EvaluatorConfig,
    FetchConfig,
    ObservabilityConfig,
    PipelineConfig,
    RetryPolicyConfig,
)

__all__ = [
    "ConfigLoader",
    "load_config",
    "EndpointConfig",
    "EvaluationDefaults",
    "EvaluatorConfig",
    "FetchConfig",
    "ObservabilityConfig",
    "PipelineConfig",
    "RetryPolicyConfig",
]
