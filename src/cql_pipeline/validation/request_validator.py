"""
Request Validator - Validate Evaluation Requests.

Validates requests before any network traffic:
    - Identifiers are not blank
    - Patient id is a valid FHIR logical id (it becomes part of a URL)
    - Subject type is supported

Design Notes:
    - Fail-fast principle
    - All problems reported together in one error
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Set

from cql_pipeline.domain.entities import EvaluationRequest

logger = logging.getLogger(__name__)

# FHIR R4 id datatype
FHIR_ID_PATTERN = re.compile(r"[A-Za-z0-9\-\.]{1,64}")


class RequestValidationError(ValueError):
    """Raised when request validation fails."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class RequestValidator:
    """
    Validates evaluation requests before a run is created.

    Validates:
        - evaluation_id and context_label are not blank
        - patient_id matches the FHIR id format
        - subject_type is in the supported set
    """

    def __init__(self, supported_subject_types: Optional[Set[str]] = None) -> None:
        """
        Initialize request validator.

        Args:
            supported_subject_types: Accepted subject types.
                                     Defaults to {"patient"}.
        """
        self.supported_subject_types = supported_subject_types or {"patient"}

    def validate(self, request: EvaluationRequest) -> None:
        """
        Validate an evaluation request.

        Raises:
            RequestValidationError: If validation fails
        """
        errors: List[str] = []

        if not request.evaluation_id.strip():
            errors.append("evaluation_id is blank")
        if not request.context_label.strip():
            errors.append("context_label is blank")

        patient_error = self._validate_patient_id(request.patient_id)
        if patient_error:
            errors.append(patient_error)

        if request.subject_type not in self.supported_subject_types:
            supported = ", ".join(sorted(self.supported_subject_types))
            errors.append(
                f"subject_type {request.subject_type!r} not supported. Supported: {supported}"
            )

        if errors:
            error_message = "; ".join(errors)
            logger.error(f"Request validation failed: {error_message}")
            raise RequestValidationError(error_message)

        logger.debug(
            f"Request validated: evaluation_id={request.evaluation_id}, "
            f"patient_id={request.patient_id}"
        )

    def _validate_patient_id(self, patient_id: str) -> Optional[str]:
        if not FHIR_ID_PATTERN.fullmatch(patient_id):
            return f"patient_id {patient_id!r} is not a valid FHIR id"
        return None

    def validate_patient_id_only(self, patient_id: str) -> None:
        """
        Validate just the patient id (utility method).

        Raises:
            RequestValidationError: If the id is invalid
        """
        error = self._validate_patient_id(patient_id)
        if error:
            raise RequestValidationError(error, field="patient_id")
