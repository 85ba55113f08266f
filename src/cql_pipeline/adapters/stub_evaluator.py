"""
Stub CQL Evaluator.

A test double for the evaluation engine. Results are registered per
(evaluation id, subject type, context label); every call is recorded with
its full inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple, Union

from cql_pipeline.domain.entities import NormalizedPatientContext
from cql_pipeline.domain.errors import EvaluationError
from cql_pipeline.domain.result import EvaluationResult

EvaluationKey = Tuple[str, str, str]


@dataclass(frozen=True)
class EvaluatorCall:
    """Inputs of one evaluate() call."""

    library: str
    helper: str
    value_set: str
    patient_context: NormalizedPatientContext
    evaluation_id: str
    subject_type: str
    context_label: str


class StubCqlEvaluator:
    """Fake evaluator returning preconfigured results."""

    def __init__(self) -> None:
        self._results: Dict[EvaluationKey, EvaluationResult] = {}
        self._errors: Dict[EvaluationKey, Exception] = {}
        self.calls: List[EvaluatorCall] = []

    def register(
        self,
        evaluation_id: str,
        subject_type: str,
        context_label: str,
        result: Union[EvaluationResult, Mapping],
    ) -> StubCqlEvaluator:
        key = (evaluation_id, subject_type, context_label)
        self._results[key] = (
            result if isinstance(result, EvaluationResult) else EvaluationResult(result)
        )
        return self

    def fail(
        self,
        evaluation_id: str,
        subject_type: str,
        context_label: str,
        error: Exception,
    ) -> StubCqlEvaluator:
        """Make evaluations for a key raise ``error``."""
        self._errors[(evaluation_id, subject_type, context_label)] = error
        return self

    def evaluate(
        self,
        library: str,
        helper: str,
        value_set: str,
        patient_context: NormalizedPatientContext,
        evaluation_id: str,
        subject_type: str,
        context_label: str,
    ) -> EvaluationResult:
        self.calls.append(
            EvaluatorCall(
                library,
                helper,
                value_set,
                patient_context,
                evaluation_id,
                subject_type,
                context_label,
            )
        )
        key = (evaluation_id, subject_type, context_label)
        if key in self._errors:
            raise self._errors[key]
        if key not in self._results:
            raise EvaluationError(f"no result configured for {key}")
        return self._results[key]

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def last_call(self) -> Optional[EvaluatorCall]:
        return self.calls[-1] if self.calls else None
