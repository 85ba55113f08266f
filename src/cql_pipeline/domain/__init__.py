"""
Domain Layer - Core Entities, Events and Errors.

Entities:
    - EvaluationRequest: Identifies one run (rule, subject type, context, patient)
    - ArtifactSlot: The four artifacts a run collects
    - NormalizedPatientContext: Processed patient bundle

Values:
    - EvaluationResult: Immutable ordered mapping of evaluation outputs
    - PipelineEvent: StageCompleted, StageFailed, EvaluationCompleted, EvaluationFailed

Errors:
    - PipelineError and its kinds (network, not found, timeout, malformed,
      evaluation, configuration)

Design Principles:
    - Immutable where possible (frozen models and dataclasses)
    - No infrastructure dependencies
"""

from cql_pipeline.domain.entities import (
    FETCH_ORDER,
    ArtifactSlot,
    EvaluationRequest,
    NormalizedPatientContext,
)
from cql_pipeline.domain.errors import (
    ConfigurationError,
    ErrorKind,
    EvaluationError,
    FetchError,
    FetchTimeoutError,
    MalformedPayloadError,
    NetworkError,
    PipelineError,
    ResourceNotFoundError,
)
from cql_pipeline.domain.events import (
    EvaluationCompleted,
    EvaluationFailed,
    PipelineEvent,
    StageCompleted,
    StageFailed,
    StagePhase,
)
from cql_pipeline.domain.result import EvaluationResult

__all__ = [
    "FETCH_ORDER",
    "ArtifactSlot",
    "EvaluationRequest",
    "NormalizedPatientContext",
    "ConfigurationError",
    "ErrorKind",
    "EvaluationError",
    "FetchError",
    "FetchTimeoutError",
    "MalformedPayloadError",
    "NetworkError",
    "PipelineError",
    "ResourceNotFoundError",
    "EvaluationCompleted",
    "EvaluationFailed",
    "PipelineEvent",
    "StageCompleted",
    "StageFailed",
    "StagePhase",
    "EvaluationResult",
]
