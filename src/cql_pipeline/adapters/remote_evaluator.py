"""
Remote CQL Evaluator.

Delegates evaluation to an HTTP evaluation service. The four artifacts and
the three identifiers are posted as a FHIR Parameters document; the
service answers with Parameters (success) or an OperationOutcome (failure).

Design Notes:
    - Never retries; the orchestrator calls it at most once per run
    - Every failure surfaces as EvaluationError
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from cql_pipeline.adapters.fhir_parameters import (
    build_evaluation_parameters,
    result_from_parameters_json,
)
from cql_pipeline.domain.entities import NormalizedPatientContext
from cql_pipeline.domain.errors import EvaluationError
from cql_pipeline.domain.result import EvaluationResult

logger = logging.getLogger(__name__)


def _operation_outcome_detail(response: requests.Response) -> Optional[str]:
    """Extract diagnostics from an OperationOutcome body, if present."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict) or body.get("resourceType") != "OperationOutcome":
        return None
    issues = body.get("issue")
    if not isinstance(issues, list):
        return None
    messages = []
    for issue in issues:
        if not isinstance(issue, dict):
            continue
        message = issue.get("diagnostics")
        details = issue.get("details")
        if not message and isinstance(details, dict):
            message = details.get("text")
        if isinstance(message, str) and message:
            messages.append(message)
    return "; ".join(messages) or None


class RemoteCqlEvaluator:
    """Evaluates CQL through an HTTP service."""

    def __init__(
        self,
        url: str,
        session: Optional[requests.Session] = None,
        timeout_seconds: float = 60.0,
        auth_token: Optional[str] = None,
    ) -> None:
        """
        Initialize remote evaluator.

        Args:
            url: Evaluation endpoint
            session: Session to reuse (a new one is created and owned if None)
            timeout_seconds: Deadline for one evaluation
            auth_token: Bearer token for the Authorization header
        """
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._headers = {
            "Accept": "application/fhir+json",
            "Content-Type": "application/fhir+json",
        }
        if auth_token:
            self._headers["Authorization"] = f"Bearer {auth_token}"

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
        body = build_evaluation_parameters(
            library,
            helper,
            value_set,
            patient_context,
            evaluation_id,
            subject_type,
            context_label,
        )
        logger.debug(f"POST {self.url} evaluation_id={evaluation_id}")

        try:
            response = self._session.post(
                self.url, json=body, headers=self._headers, timeout=self.timeout_seconds
            )
        except requests.Timeout as e:
            raise EvaluationError(
                f"evaluation service timed out after {self.timeout_seconds}s"
            ) from e
        except requests.RequestException as e:
            raise EvaluationError(f"evaluation service unreachable: {e}") from e

        if response.status_code >= 400:
            detail = _operation_outcome_detail(response) or f"HTTP {response.status_code}"
            raise EvaluationError(detail, details={"status_code": response.status_code})

        return result_from_parameters_json(response.text)

    def close(self) -> None:
        """Close the session if this evaluator created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> RemoteCqlEvaluator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
