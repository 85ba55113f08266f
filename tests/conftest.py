"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from cql_pipeline.adapters.console_logger import ConsoleAuditLogger
from cql_pipeline.adapters.metrics_collector import InMemoryMetricsCollector
from cql_pipeline.adapters.static_fetcher import StaticResourceFetcher
from cql_pipeline.adapters.stub_evaluator import StubCqlEvaluator
from cql_pipeline.config.models import EndpointConfig
from cql_pipeline.domain.entities import EvaluationRequest
from tests.fixtures.fhir_payloads import ANEMIA_RESULT, BASE_URL, PATIENT_ID, all_payloads


@pytest.fixture
def project_root() -> Path:
    """Repository root (holds config/)."""
    return Path(__file__).parent.parent


@pytest.fixture
def endpoints() -> EndpointConfig:
    """Endpoint configuration matching the sample payload addresses."""
    return EndpointConfig(
        base_url=BASE_URL,
        library_path="Library?_id=ANCRecommendationA2",
        helper_library_path="Library?_id=FHIRHelpers",
        value_set_path="ValueSet",
        patient_path="Patient/",
    )


@pytest.fixture
def request_for_patient() -> EvaluationRequest:
    """Evaluation request for the sample patient."""
    return EvaluationRequest(
        evaluation_id="ANCRecommendationA2",
        subject_type="patient",
        context_label="mom-with-anemia",
        patient_id=PATIENT_ID,
    )


@pytest.fixture
def static_fetcher() -> StaticResourceFetcher:
    """Fetcher serving all four sample payloads."""
    return StaticResourceFetcher(all_payloads())


@pytest.fixture
def stub_evaluator() -> StubCqlEvaluator:
    """Evaluator with a result registered for the sample request."""
    return StubCqlEvaluator().register(
        "ANCRecommendationA2", "patient", "mom-with-anemia", ANEMIA_RESULT
    )


@pytest.fixture
def console_logger() -> ConsoleAuditLogger:
    """Create console logger for testing."""
    return ConsoleAuditLogger(verbose=False)


@pytest.fixture
def metrics_collector() -> InMemoryMetricsCollector:
    """Create metrics collector for testing."""
    return InMemoryMetricsCollector()
