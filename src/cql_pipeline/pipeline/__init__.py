"""
Pipeline Package - Orchestration and Per-Run State.

Components:
    - PipelineOrchestrator: Creates and drives evaluation runs
    - PipelineRun: Lazy event sequence of one run
    - ArtifactStore: Per-run container for fetched artifacts
    - AddressResolver: Endpoint configuration -> fetch addresses
    - CancellationToken: Stops a run before its next stage
    - create_orchestrator: Default wiring from configuration

Design Principles:
    - All dependencies injected via constructor
    - Run state lives in the run, never in the orchestrator
    - Stages execute strictly in order, one at a time
"""

from cql_pipeline.pipeline.address_resolver import AddressResolver, resolve_address
from cql_pipeline.pipeline.artifact_store import ArtifactStore
from cql_pipeline.pipeline.cancellation import CancellationToken
from cql_pipeline.pipeline.orchestrator import (
    PipelineOrchestrator,
    PipelineRun,
    RunCancelledError,
    RunState,
)

__all__ = [
    "AddressResolver",
    "resolve_address",
    "ArtifactStore",
    "CancellationToken",
    "PipelineOrchestrator",
    "PipelineRun",
    "RunCancelledError",
    "RunState",
]
