"""
FHIR Parameters Conversion.

Evaluation engines report CQL results as a FHIR ``Parameters`` resource.
This module converts such a resource into an EvaluationResult and builds
the ``Parameters`` document sent to a remote engine.

Conversion Rules:
    - ``value[x]`` -> the scalar (or object) value
    - ``resource`` -> nested EvaluationResult
    - ``part``     -> nested EvaluationResult built from the parts
    - no value     -> None
    - repeated names collapse into a tuple, in document order
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping

from cql_pipeline.domain.entities import NormalizedPatientContext
from cql_pipeline.domain.errors import EvaluationError
from cql_pipeline.domain.result import EvaluationResult


def _parameter_value(parameter: Mapping[str, Any]) -> Any:
    if "part" in parameter:
        return parameters_to_result({"resourceType": "Parameters", "parameter": parameter["part"]})
    if "resource" in parameter:
        return parameter["resource"]
    for key, value in parameter.items():
        if key.startswith("value"):
            return value
    return None


def parameters_to_result(parameters: Any) -> EvaluationResult:
    """
    Convert a FHIR Parameters resource into an EvaluationResult.

    Raises:
        EvaluationError: If the document is not a Parameters resource
    """
    if not isinstance(parameters, Mapping) or parameters.get("resourceType") != "Parameters":
        found = parameters.get("resourceType") if isinstance(parameters, Mapping) else type(parameters).__name__
        raise EvaluationError(f"engine returned {found!r} instead of Parameters")

    entries = parameters.get("parameter") or []
    if not isinstance(entries, list):
        raise EvaluationError("Parameters.parameter must be a list")

    collected: Dict[str, List[Any]] = {}
    for index, parameter in enumerate(entries):
        if not isinstance(parameter, Mapping) or not parameter.get("name"):
            raise EvaluationError(f"parameter {index} has no name")
        collected.setdefault(parameter["name"], []).append(_parameter_value(parameter))

    return EvaluationResult(
        {name: values[0] if len(values) == 1 else tuple(values) for name, values in collected.items()}
    )


def result_from_parameters_json(text: str) -> EvaluationResult:
    """Parse Parameters JSON text into an EvaluationResult."""
    try:
        document = json.loads(text)
    except ValueError as e:
        raise EvaluationError(f"engine output is not valid JSON ({e})") from e
    return parameters_to_result(document)


def build_evaluation_parameters(
    library: str,
    helper: str,
    value_set: str,
    patient_context: NormalizedPatientContext,
    evaluation_id: str,
    subject_type: str,
    context_label: str,
) -> Dict[str, Any]:
    """
    Build the Parameters document for a remote evaluation.

    Artifacts travel as strings so the engine sees them exactly as fetched.
    """
    values = [
        ("library", library),
        ("helperLibrary", helper),
        ("valueSet", value_set),
        ("data", patient_context.payload),
        ("evaluationId", evaluation_id),
        ("subjectType", subject_type),
        ("context", context_label),
    ]
    return {
        "resourceType": "Parameters",
        "parameter": [{"name": name, "valueString": value} for name, value in values],
    }
