"""
Configuration Models - Pydantic Models for Type-Safe Config.

All configuration is validated at load time using Pydantic. Endpoint
values may be left unset here; address resolution reports them explicitly
when a run needs them.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from cql_pipeline.domain.entities import EvaluationRequest
from cql_pipeline.domain.errors import ConfigurationError


class EndpointConfig(BaseModel):
    """Base URL plus per-artifact paths used to build fetch addresses."""

    base_url: Optional[str] = None
    library_path: Optional[str] = None
    helper_library_path: Optional[str] = None
    value_set_path: Optional[str] = None
    patient_path: Optional[str] = None
    everything_suffix: str = Field(default="/$everything", min_length=1)


class FetchConfig(BaseModel):
    """Transport settings for artifact retrieval."""

    timeout_seconds: float = Field(default=30.0, gt=0)
    auth_token: Optional[str] = None
    accept: str = "application/fhir+json"


class RetryPolicyConfig(BaseModel):
    """Retry wrapper around the fetcher (disabled by default)."""

    enabled: bool = False
    max_attempts: int = Field(default=3, ge=1, le=10)
    base_delay_seconds: float = Field(default=1.0, ge=0)
    max_delay_seconds: float = Field(default=30.0, ge=0)
    exponential_base: float = Field(default=2.0, ge=1)


class EvaluationDefaults(BaseModel):
    """Default identifiers used when building requests from config."""

    evaluation_id: Optional[str] = None
    subject_type: str = Field(default="patient", min_length=1)
    context_label: Optional[str] = None

    def build_request(self, patient_id: str) -> EvaluationRequest:
        """
        Build an EvaluationRequest for a patient.

        Raises:
            ConfigurationError: If evaluation_id or context_label is unset
        """
        if not self.evaluation_id:
            raise ConfigurationError(
                "evaluation.evaluation_id is not configured",
                field="evaluation.evaluation_id",
            )
        if not self.context_label:
            raise ConfigurationError(
                "evaluation.context_label is not configured",
                field="evaluation.context_label",
            )
        return EvaluationRequest(
            evaluation_id=self.evaluation_id,
            subject_type=self.subject_type,
            context_label=self.context_label,
            patient_id=patient_id,
        )


class EvaluatorConfig(BaseModel):
    """Settings for the remote evaluation service."""

    url: Optional[str] = None
    timeout_seconds: float = Field(default=60.0, gt=0)


class ObservabilityConfig(BaseModel):
    """Logging settings."""

    service_name: str = "cql_pipeline"
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    use_json: bool = True


class PipelineConfig(BaseModel):
    """Root configuration object."""

    version: str = "1.0"
    endpoints: EndpointConfig = Field(default_factory=EndpointConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    retry: RetryPolicyConfig = Field(default_factory=RetryPolicyConfig)
    evaluation: EvaluationDefaults = Field(default_factory=EvaluationDefaults)
    evaluator: EvaluatorConfig = Field(default_factory=EvaluatorConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
