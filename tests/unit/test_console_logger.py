"""
Unit Tests for ConsoleAuditLogger.

Test Aspects Covered:
    ✅ Business Logic: Run prefix, verbose switch
    ✅ Error Handling: Failures always printed with their kind
"""

from __future__ import annotations

import pytest

from cql_pipeline.adapters.console_logger import ConsoleAuditLogger
from cql_pipeline.domain.errors import ResourceNotFoundError


class TestConsoleAuditLogger:
    """Test cases for ConsoleAuditLogger."""

    def test_verbose_prints_stage_progress(self, capsys: pytest.CaptureFixture) -> None:
        """
        SCENARIO: Verbose logger, one stage started and completed
        EXPECTED: Two lines prefixed with the short run id
        """
        # Arrange
        logger = ConsoleAuditLogger(verbose=True)
        logger.set_correlation_id("3f2a9c10-0000-4000-8000-000000000000")

        # Act
        logger.log_stage_start("library", {"address": "http://x/Library"})
        logger.log_stage_end("library", 0.4123)

        # Assert
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 2
        assert "3f2a9c10 INFO  library <- http://x/Library" in lines[0]
        assert lines[1].endswith("library done in 0.412s")

    def test_quiet_still_prints_failures(self, capsys: pytest.CaptureFixture) -> None:
        logger = ConsoleAuditLogger(verbose=False)

        logger.log_stage_start("value_set")
        logger.log_stage_failed("value_set", ResourceNotFoundError("http://x/ValueSet"))

        out = capsys.readouterr().out
        assert "started" not in out
        assert "-------- ERROR value_set NOT_FOUND" in out

    def test_anomaly_lists_context(self, capsys: pytest.CaptureFixture) -> None:
        logger = ConsoleAuditLogger(verbose=False)

        logger.log_anomaly("Patient bundle has no resources", "warning", {"patient_id": "p1"})

        assert "WARNING Patient bundle has no resources (patient_id=p1)" in capsys.readouterr().out
