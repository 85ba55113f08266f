"""
Test Suite for CQL Pipeline.

Test organization:
    - unit/: Unit tests for individual components
    - integration/: Orchestrator runs over in-memory adapters
    - fixtures/: Shared FHIR payloads

Running Tests:
    pytest tests/                           # All tests
    pytest tests/unit/                      # Unit tests only
    pytest tests/integration/               # Integration tests only
"""
