"""
Integration Tests - End-to-End Pipeline Tests.

These tests verify that all components work together correctly.
Integration tests use StaticResourceFetcher and StubCqlEvaluator to avoid
network access while exercising the full run.

Test Files:
    - test_pipeline_orchestrator.py: Event sequence, failures, cancellation
    - test_factory.py: Wiring from configuration
"""
