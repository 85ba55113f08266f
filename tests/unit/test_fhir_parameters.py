"""
Unit Tests for FHIR Parameters conversion.

Test Aspects Covered:
    ✅ Business Logic: value[x], resource, part, repeated names
    ✅ Error Handling: Non-Parameters documents, unnamed parameters
"""

from __future__ import annotations

import json

import pytest

from cql_pipeline.adapters.fhir_parameters import (
    build_evaluation_parameters,
    parameters_to_result,
    result_from_parameters_json,
)
from cql_pipeline.domain.entities import NormalizedPatientContext
from cql_pipeline.domain.errors import EvaluationError
from cql_pipeline.domain.result import EvaluationResult


class TestParametersToResult:
    """Test cases for parameters_to_result."""

    def test_scalar_values(self) -> None:
        """
        SCENARIO: Parameters with boolean, decimal and string values
        EXPECTED: Values keyed by name, in document order
        """
        # Arrange
        parameters = {
            "resourceType": "Parameters",
            "parameter": [
                {"name": "Has Anemia", "valueBoolean": True},
                {"name": "Hemoglobin Value", "valueDecimal": 9.8},
                {"name": "Recommendation", "valueString": "Give iron"},
            ],
        }

        # Act
        result = parameters_to_result(parameters)

        # Assert
        assert result == {
            "Has Anemia": True,
            "Hemoglobin Value": 9.8,
            "Recommendation": "Give iron",
        }
        assert list(result) == ["Has Anemia", "Hemoglobin Value", "Recommendation"]

    def test_resource_part_and_missing_value(self) -> None:
        parameters = {
            "resourceType": "Parameters",
            "parameter": [
                {"name": "Latest", "resource": {"resourceType": "Observation", "id": "hb-1"}},
                {"name": "Summary", "part": [{"name": "count", "valueInteger": 2}]},
                {"name": "Nothing"},
            ],
        }

        result = parameters_to_result(parameters)

        assert result["Latest"] == {"resourceType": "Observation", "id": "hb-1"}
        assert isinstance(result["Summary"], EvaluationResult)
        assert result["Summary"]["count"] == 2
        assert result["Nothing"] is None

    def test_repeated_names_become_tuple(self) -> None:
        parameters = {
            "resourceType": "Parameters",
            "parameter": [
                {"name": "Code", "valueString": "a"},
                {"name": "Code", "valueString": "b"},
            ],
        }

        assert parameters_to_result(parameters)["Code"] == ("a", "b")

    def test_empty_parameters(self) -> None:
        assert len(parameters_to_result({"resourceType": "Parameters"})) == 0

    @pytest.mark.parametrize(
        "document",
        [
            {"resourceType": "OperationOutcome"},
            [],
            {"resourceType": "Parameters", "parameter": {"name": "x"}},
            {"resourceType": "Parameters", "parameter": [{"valueString": "no name"}]},
        ],
    )
    def test_rejects_invalid_documents(self, document) -> None:
        with pytest.raises(EvaluationError):
            parameters_to_result(document)

    def test_invalid_json_text(self) -> None:
        with pytest.raises(EvaluationError, match="not valid JSON"):
            result_from_parameters_json("<html>")


class TestBuildEvaluationParameters:
    """Test cases for the request document."""

    def test_contains_all_inputs_as_strings(self) -> None:
        """
        SCENARIO: Artifacts, patient context and identifiers
        EXPECTED: One valueString parameter each, artifacts unchanged
        """
        # Arrange
        context = NormalizedPatientContext.from_resources([{"resourceType": "Patient"}])

        # Act
        document = build_evaluation_parameters(
            "LIB", "HELPER", "VS", context, "ANCRecommendationA2", "patient", "mom-with-anemia"
        )

        # Assert
        values = {p["name"]: p["valueString"] for p in document["parameter"]}
        assert document["resourceType"] == "Parameters"
        assert values["library"] == "LIB"
        assert values["helperLibrary"] == "HELPER"
        assert values["valueSet"] == "VS"
        assert json.loads(values["data"])["type"] == "collection"
        assert values["evaluationId"] == "ANCRecommendationA2"
        assert values["subjectType"] == "patient"
        assert values["context"] == "mom-with-anemia"
