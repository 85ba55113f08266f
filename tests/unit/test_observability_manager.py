"""
Unit Tests for ObservabilityManager.

Test Aspects Covered:
    ✅ Business Logic: Correlation IDs, structured stage events, metrics
    ✅ Protocols: Usable as AuditLogger and MetricsCollector
"""

from __future__ import annotations

import json

import pytest

from cql_pipeline.config.models import ObservabilityConfig
from cql_pipeline.domain.errors import ResourceNotFoundError
from cql_pipeline.interfaces.audit_logger import AuditLogger
from cql_pipeline.interfaces.metrics_collector import MetricsCollector
from cql_pipeline.observability.observability_manager import (
    ObservabilityManager,
    get_correlation_id,
)


@pytest.fixture
def manager() -> ObservabilityManager:
    return ObservabilityManager(use_json=True)


class TestCorrelationIds:
    """Test correlation ID management."""

    def test_set_and_get_correlation_id(self, manager: ObservabilityManager) -> None:
        """
        SCENARIO: Set correlation ID
        EXPECTED: Can retrieve same ID
        """
        # Act
        manager.set_correlation_id("run-123")

        # Assert
        assert get_correlation_id() == "run-123"

    def test_json_lines_carry_correlation_id(
        self, manager: ObservabilityManager, capsys: pytest.CaptureFixture
    ) -> None:
        """
        SCENARIO: Stage start logged after the run id is bound
        EXPECTED: JSON line with event, stage, correlation id and service
        """
        # Arrange
        manager.set_correlation_id("run-42")

        # Act
        manager.log_stage_start("helper")

        # Assert
        line = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert line["event"] == "stage_start"
        assert line["stage"] == "helper"
        assert line["correlation_id"] == "run-42"
        assert line["service"] == "cql_pipeline"
        assert line["level"] == "info"


class TestStageEvents:
    """Test audit events."""

    def test_stage_start_and_end(self, manager: ObservabilityManager) -> None:
        """
        SCENARIO: Stage started and completed
        EXPECTED: Two events carrying stage name and correlation id
        """
        # Arrange
        manager.set_correlation_id("run-1")

        # Act
        manager.log_stage_start("library", {"address": "http://x/Library"})
        manager.log_stage_end("library", 0.25, {"bytes": 120})

        # Assert
        start = manager.get_events("stage_start")[0]
        end = manager.get_events("stage_end")[0]
        assert start["stage"] == "library"
        assert start["address"] == "http://x/Library"
        assert start["correlation_id"] == "run-1"
        assert end["duration_seconds"] == 0.25
        assert end["bytes"] == 120

    def test_stage_failed_carries_error_kind(self, manager: ObservabilityManager) -> None:
        manager.log_stage_failed("value_set", ResourceNotFoundError("http://x/ValueSet"))

        event = manager.get_events("stage_failed")[0]

        assert event["error"]["kind"] == "NOT_FOUND"
        assert event["error"]["guidance"] == "check_configuration"

    def test_stage_failed_with_plain_exception(self, manager: ObservabilityManager) -> None:
        manager.log_stage_failed("evaluation", RuntimeError("boom"))

        event = manager.get_events("stage_failed")[0]

        assert event["error"] == {"kind": "RuntimeError", "message": "boom"}

    def test_anomaly(self, manager: ObservabilityManager) -> None:
        manager.log_anomaly("Patient bundle has no resources", "WARNING", {"patient_id": "p1"})

        event = manager.get_events("anomaly")[0]

        assert event["detail"] == "Patient bundle has no resources"
        assert event["severity"] == "WARNING"
        assert event["patient_id"] == "p1"

    def test_clear(self, manager: ObservabilityManager) -> None:
        manager.log_stage_start("library")
        manager.record_count("runs_total", 1)

        manager.clear()

        assert manager.get_events() == []
        assert manager.get_metrics() == {}


class TestMetrics:
    """Test metric recording."""

    def test_timing_and_count(self, manager: ObservabilityManager) -> None:
        manager.record_timing("stage_duration_seconds", 0.5, {"stage": "helper"})
        manager.record_count("artifact_bytes", 2048, {"stage": "helper"})

        metrics = manager.get_metrics()

        assert metrics["stage_duration_seconds"]["last"] == 0.5
        assert metrics["artifact_bytes"]["total"] == 2048.0
        assert manager.samples("artifact_bytes", {"stage": "helper"})[0].kind == "count"


class TestConfiguration:
    """Test construction from configuration."""

    def test_from_config(self) -> None:
        config = ObservabilityConfig(service_name="anc", log_level="DEBUG", use_json=False)

        manager = ObservabilityManager.from_config(config)

        assert manager.service_name == "anc"
        assert manager.use_json is False
        assert manager.log_level == 10

    def test_satisfies_protocols(self, manager: ObservabilityManager) -> None:
        assert isinstance(manager, AuditLogger)
        assert isinstance(manager, MetricsCollector)
