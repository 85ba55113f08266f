"""
CQL Evaluator Protocol.

The pipeline does not interpret clinical rules. It depends on an external
engine through this narrow contract so that test doubles and remote
services can be substituted freely.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cql_pipeline.domain.entities import NormalizedPatientContext
    from cql_pipeline.domain.result import EvaluationResult


@runtime_checkable
class CqlEvaluator(Protocol):
    """Abstract interface for a CQL evaluation engine."""

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
        """
        Evaluate a rule library against one patient's data.

        Args:
            library: Main library artifact, as fetched
            helper: Helper library artifact, as fetched
            value_set: Value set artifact, as fetched
            patient_context: Normalized patient bundle
            evaluation_id: Rule/logic to execute
            subject_type: Evaluation subject type (e.g. "patient")
            context_label: Named scope selecting the applicable output

        Returns:
            The evaluation outputs

        Raises:
            EvaluationError: Engine rejected or failed on its inputs
        """
        ...
