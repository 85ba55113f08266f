"""
Pipeline Orchestrator - Drives One Evaluation Run per Request.

A run fetches the library, helper library, value set and patient bundle
strictly one after another, normalizes the patient bundle and calls the
evaluator once. Progress is reported as a lazy sequence of events; the
next fetch is only issued when the caller pulls the next event.

States:
    FETCHING_LIBRARY -> FETCHING_HELPER -> FETCHING_VALUE_SET
    -> FETCHING_PATIENT_BUNDLE -> EVALUATING -> COMPLETED
    Any live state may end in FAILED or CANCELLED.
"""

from __future__ import annotations

import logging
import time
import uuid
from enum import Enum
from typing import Dict, Iterator, Optional, Union

from cql_pipeline.config.models import EndpointConfig
from cql_pipeline.domain.entities import (
    FETCH_ORDER,
    ArtifactSlot,
    EvaluationRequest,
    NormalizedPatientContext,
)
from cql_pipeline.domain.errors import (
    EvaluationError,
    MalformedPayloadError,
    PipelineError,
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
from cql_pipeline.interfaces.audit_logger import AuditLogger
from cql_pipeline.interfaces.cql_evaluator import CqlEvaluator
from cql_pipeline.interfaces.metrics_collector import MetricsCollector
from cql_pipeline.interfaces.resource_fetcher import ResourceFetcher
from cql_pipeline.pipeline.address_resolver import AddressResolver
from cql_pipeline.pipeline.artifact_store import ArtifactStore
from cql_pipeline.pipeline.cancellation import CancellationToken, bind_token
from cql_pipeline.processing.bundle_processor import PatientBundleProcessor
from cql_pipeline.validation.request_validator import RequestValidator

logger = logging.getLogger(__name__)

EVALUATION_STAGE = "evaluation"


class RunState(str, Enum):
    """Lifecycle of a single run."""

    FETCHING_LIBRARY = "fetching_library"
    FETCHING_HELPER = "fetching_helper"
    FETCHING_VALUE_SET = "fetching_value_set"
    FETCHING_PATIENT_BUNDLE = "fetching_patient_bundle"
    EVALUATING = "evaluating"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.COMPLETED, RunState.FAILED, RunState.CANCELLED)


FETCH_STATES: Dict[ArtifactSlot, RunState] = {
    ArtifactSlot.LIBRARY: RunState.FETCHING_LIBRARY,
    ArtifactSlot.HELPER: RunState.FETCHING_HELPER,
    ArtifactSlot.VALUE_SET: RunState.FETCHING_VALUE_SET,
    ArtifactSlot.PATIENT_BUNDLE: RunState.FETCHING_PATIENT_BUNDLE,
}

_STATE_ORDER = list(RunState)


class RunCancelledError(RuntimeError):
    """Raised by PipelineOrchestrator.evaluate when the run was cancelled."""


class PipelineRun:
    """
    One in-flight evaluation run.

    Iterating the run executes it. The run is finite and cannot be
    restarted: once exhausted, iterating again yields nothing. The run owns
    its ArtifactStore exclusively and discards it on termination.
    """

    def __init__(
        self,
        orchestrator: PipelineOrchestrator,
        request: EvaluationRequest,
        cancellation_token: CancellationToken,
    ) -> None:
        self.request = request
        self.run_id = str(uuid.uuid4())
        self.store = ArtifactStore()
        self.cancellation_token = cancellation_token
        self.result: Optional[EvaluationResult] = None
        self.error: Optional[PipelineError] = None
        self._orchestrator = orchestrator
        self._state = RunState.FETCHING_LIBRARY
        self._started_at: Optional[float] = None
        self._events = self._execute()

    @property
    def state(self) -> RunState:
        return self._state

    def cancel(self, reason: Optional[str] = None) -> None:
        """Stop the run before its next stage."""
        self.cancellation_token.cancel(reason)

    def __iter__(self) -> Iterator[PipelineEvent]:
        return self

    def __next__(self) -> PipelineEvent:
        return next(self._events)

    def close(self) -> None:
        """Abandon the run; a live run ends as CANCELLED."""
        self._events.close()
        if not self._state.is_terminal:
            self._finish(RunState.CANCELLED)

    # =========================================================================
    # Execution
    # =========================================================================

    def _execute(self) -> Iterator[PipelineEvent]:
        try:
            yield from self._stages()
        except GeneratorExit:
            if not self._state.is_terminal:
                self._finish(RunState.CANCELLED)
                logger.info(f"Run {self.run_id[:8]} closed by caller")
            raise

    def _stages(self) -> Iterator[PipelineEvent]:
        audit = self._orchestrator.audit_logger
        audit.set_correlation_id(self.run_id)
        self._started_at = time.perf_counter()
        logger.info(
            f"Run {self.run_id[:8]} started: evaluation={self.request.evaluation_id} "
            f"context={self.request.context_label} patient={self.request.patient_id}"
        )

        for slot in FETCH_ORDER:
            if self._stop_if_cancelled():
                return
            self._transition(FETCH_STATES[slot])
            try:
                payload = self._fetch_stage(slot)
            except PipelineError as error:
                if self._stop_if_cancelled():
                    return
                yield self._fail_stage(slot, error, StagePhase.FETCH)
                return
            self.store.put(slot, payload)
            yield StageCompleted(slot)

        if self._stop_if_cancelled():
            return
        self._transition(RunState.EVALUATING)

        try:
            patient_context = self._orchestrator.processor.process(
                self.store.require(ArtifactSlot.PATIENT_BUNDLE)
            )
        except MalformedPayloadError as error:
            yield self._fail_stage(
                ArtifactSlot.PATIENT_BUNDLE, error, StagePhase.PROCESSING
            )
            return

        if self._stop_if_cancelled():
            return
        yield self._evaluation_stage(patient_context)

    def _fetch_stage(self, slot: ArtifactSlot) -> str:
        """Resolve, fetch and time one artifact."""
        orchestrator = self._orchestrator
        address = orchestrator.resolver.resolve(slot, self.request.patient_id)

        orchestrator.audit_logger.log_stage_start(slot.value, {"address": address})
        stage_start = time.perf_counter()

        with bind_token(self.cancellation_token):
            payload = orchestrator.fetcher.fetch(
                address, timeout_seconds=orchestrator.timeout_seconds
            )

        stage_duration = time.perf_counter() - stage_start
        size = len(payload.encode("utf-8"))
        orchestrator.audit_logger.log_stage_end(
            slot.value, stage_duration, {"bytes": size}
        )
        orchestrator.metrics_collector.record_timing(
            "stage_duration_seconds", stage_duration, {"stage": slot.value}
        )
        orchestrator.metrics_collector.record_count(
            "artifact_bytes", size, {"stage": slot.value}
        )
        return payload

    def _evaluation_stage(
        self, patient_context: NormalizedPatientContext
    ) -> Union[EvaluationCompleted, EvaluationFailed]:
        """Invoke the evaluator exactly once."""
        orchestrator = self._orchestrator
        request = self.request
        orchestrator.audit_logger.log_stage_start(
            EVALUATION_STAGE,
            {
                "evaluation_id": request.evaluation_id,
                "subject_type": request.subject_type,
                "context_label": request.context_label,
                "patient_resources": patient_context.resource_count,
            },
        )
        if patient_context.is_empty:
            orchestrator.audit_logger.log_anomaly(
                "Patient bundle has no resources",
                severity="WARNING",
                context={"patient_id": request.patient_id},
            )

        stage_start = time.perf_counter()
        try:
            result = self._call_evaluator(patient_context)
        except EvaluationError as error:
            orchestrator.audit_logger.log_stage_failed(
                EVALUATION_STAGE, error, {"kind": error.kind.value}
            )
            orchestrator.metrics_collector.record_count(
                "stage_failures_total",
                1,
                {"stage": EVALUATION_STAGE, "kind": error.kind.value},
            )
            self.error = error
            self._finish(RunState.FAILED)
            return EvaluationFailed(error)

        stage_duration = time.perf_counter() - stage_start
        orchestrator.audit_logger.log_stage_end(
            EVALUATION_STAGE, stage_duration, {"outputs": len(result)}
        )
        orchestrator.metrics_collector.record_timing(
            "stage_duration_seconds", stage_duration, {"stage": EVALUATION_STAGE}
        )
        self.result = result
        self._finish(RunState.COMPLETED)
        return EvaluationCompleted(result)

    def _call_evaluator(
        self, patient_context: NormalizedPatientContext
    ) -> EvaluationResult:
        """Call the external engine; every failure becomes EvaluationError."""
        store = self.store
        request = self.request
        try:
            result = self._orchestrator.evaluator.evaluate(
                store.require(ArtifactSlot.LIBRARY),
                store.require(ArtifactSlot.HELPER),
                store.require(ArtifactSlot.VALUE_SET),
                patient_context,
                request.evaluation_id,
                request.subject_type,
                request.context_label,
            )
        except EvaluationError:
            raise
        except Exception as e:
            raise EvaluationError(
                f"{type(e).__name__}: {e}", details={"engine_error": type(e).__name__}
            ) from e

        if not isinstance(result, EvaluationResult):
            raise EvaluationError(
                f"evaluator returned {type(result).__name__}, expected EvaluationResult"
            )
        return result

    # =========================================================================
    # State handling
    # =========================================================================

    def _fail_stage(
        self, slot: ArtifactSlot, error: PipelineError, phase: StagePhase
    ) -> StageFailed:
        orchestrator = self._orchestrator
        orchestrator.audit_logger.log_stage_failed(
            slot.value, error, {"phase": phase.value, "kind": error.kind.value}
        )
        orchestrator.metrics_collector.record_count(
            "stage_failures_total", 1, {"stage": slot.value, "kind": error.kind.value}
        )
        self.error = error
        self._finish(RunState.FAILED)
        return StageFailed(slot, error, phase)

    def _stop_if_cancelled(self) -> bool:
        if not self.cancellation_token.is_cancelled:
            return False
        reason = self.cancellation_token.reason or "cancelled by caller"
        logger.info(
            f"Run {self.run_id[:8]} cancelled in state {self._state.value}: {reason}"
        )
        self._finish(RunState.CANCELLED)
        return True

    def _transition(self, new_state: RunState) -> None:
        if _STATE_ORDER.index(new_state) < _STATE_ORDER.index(self._state):
            raise RuntimeError(
                f"Illegal transition {self._state.value} -> {new_state.value}"
            )
        logger.debug(f"Run {self.run_id[:8]}: {self._state.value} -> {new_state.value}")
        self._state = new_state

    def _finish(self, terminal_state: RunState) -> None:
        self._state = terminal_state
        self.store.discard()

        duration = (
            time.perf_counter() - self._started_at if self._started_at is not None else 0.0
        )
        self._orchestrator.metrics_collector.record_timing(
            "run_duration_seconds", duration, {"outcome": terminal_state.value}
        )
        self._orchestrator.metrics_collector.record_count(
            "runs_total", 1, {"outcome": terminal_state.value}
        )
        logger.info(
            f"Run {self.run_id[:8]} {terminal_state.value} after {duration:.3f}s"
        )


class PipelineOrchestrator:
    """Main orchestrator for evaluation runs."""

    def __init__(
        self,
        fetcher: ResourceFetcher,
        evaluator: CqlEvaluator,
        endpoints: Union[EndpointConfig, AddressResolver],
        audit_logger: AuditLogger,
        metrics_collector: MetricsCollector,
        processor: Optional[PatientBundleProcessor] = None,
        request_validator: Optional[RequestValidator] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        """
        Initialize orchestrator with all dependencies.

        Args:
            fetcher: Artifact transport
            evaluator: External CQL evaluation engine
            endpoints: Endpoint configuration or a resolver built from it
            audit_logger: For stage progress
            metrics_collector: For timings and counts
            processor: Patient bundle processor (default instance if None)
            request_validator: Validates requests before a run is created
            timeout_seconds: Deadline passed to every fetch
        """
        self.fetcher = fetcher
        self.evaluator = evaluator
        self.resolver = (
            endpoints if isinstance(endpoints, AddressResolver) else AddressResolver(endpoints)
        )
        self.audit_logger = audit_logger
        self.metrics_collector = metrics_collector
        self.processor = processor or PatientBundleProcessor()
        self.request_validator = request_validator
        self.timeout_seconds = timeout_seconds

    def run(
        self,
        request: EvaluationRequest,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> PipelineRun:
        """
        Create a run for a request. Nothing is fetched until iteration.

        Args:
            request: Identifies the rule, context and patient
            cancellation_token: Shared token to stop the run early

        Returns:
            PipelineRun yielding PipelineEvent instances

        Raises:
            RequestValidationError: If a validator is set and rejects the request
        """
        if self.request_validator:
            self.request_validator.validate(request)
        return PipelineRun(self, request, cancellation_token or CancellationToken())

    def evaluate(
        self,
        request: EvaluationRequest,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> EvaluationResult:
        """
        Execute a run to completion and return its result.

        Raises:
            PipelineError: The error of the failing stage or evaluation
            RunCancelledError: If the run was cancelled
        """
        run = self.run(request, cancellation_token)
        for event in run:
            if isinstance(event, EvaluationCompleted):
                return event.result
            if isinstance(event, (StageFailed, EvaluationFailed)):
                raise event.error
        raise RunCancelledError(f"Run {run.run_id} was cancelled")

    def close(self) -> None:
        """Release the fetcher and evaluator, for those that hold resources."""
        for component in (self.fetcher, self.evaluator):
            close = getattr(component, "close", None)
            if callable(close):
                close()

    def __enter__(self) -> PipelineOrchestrator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
