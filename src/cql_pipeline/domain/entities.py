"""
Core Domain Entities.

This module defines the request that identifies an evaluation run, the
artifact slots a run fills, and the normalized patient context handed to
the evaluator.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


class ArtifactSlot(str, Enum):
    """The four artifacts a run must collect before evaluation."""

    LIBRARY = "library"
    HELPER = "helper"
    VALUE_SET = "value_set"
    PATIENT_BUNDLE = "patient_bundle"


# Fetch and consumption order; never reordered.
FETCH_ORDER: Tuple[ArtifactSlot, ...] = (
    ArtifactSlot.LIBRARY,
    ArtifactSlot.HELPER,
    ArtifactSlot.VALUE_SET,
    ArtifactSlot.PATIENT_BUNDLE,
)


class EvaluationRequest(BaseModel):
    """Identifies one evaluation run."""

    evaluation_id: str = Field(
        ..., min_length=1, description="Name of the rule/logic to execute"
    )
    subject_type: str = Field(
        default="patient", min_length=1, description="Evaluation subject type"
    )
    context_label: str = Field(
        ..., min_length=1, description="Named scope within the rule set"
    )
    patient_id: str = Field(
        ..., min_length=1, description="Patient the bundle fetch is parameterized on"
    )

    model_config = {"frozen": True}


class NormalizedPatientContext(BaseModel):
    """
    Processed form of a patient bundle.

    ``resources`` keeps the bundle's resources in their original order;
    ``payload`` is the canonical collection bundle text the evaluator reads.
    """

    bundle_id: str = ""
    resources: Tuple[Dict[str, Any], ...] = ()
    payload: str

    model_config = {"frozen": True}

    @classmethod
    def from_resources(
        cls,
        resources: List[Dict[str, Any]],
        bundle_id: Optional[str] = None,
    ) -> NormalizedPatientContext:
        """Build a context and its collection bundle from parsed resources."""
        bundle = {
            "resourceType": "Bundle",
            "id": bundle_id or "",
            "type": "collection",
            "entry": [{"resource": resource} for resource in resources],
        }
        return cls(
            bundle_id=bundle_id or "",
            resources=tuple(resources),
            payload=json.dumps(bundle, ensure_ascii=False),
        )

    @classmethod
    def empty(cls) -> NormalizedPatientContext:
        return cls.from_resources([])

    @property
    def is_empty(self) -> bool:
        return len(self.resources) == 0

    @property
    def resource_count(self) -> int:
        return len(self.resources)

    def resource_types(self) -> Dict[str, int]:
        """Count resources by resourceType, in first-seen order."""
        counts: Dict[str, int] = {}
        for resource in self.resources:
            resource_type = resource["resourceType"]
            counts[resource_type] = counts.get(resource_type, 0) + 1
        return counts
