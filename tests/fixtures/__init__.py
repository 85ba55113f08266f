"""
Test Fixtures - Shared Test Data.

This package contains reusable test data:
    - fhir_payloads: Library, helper library, value set and patient bundle
      payloads as a FHIR server would return them

Usage:
    Import payloads directly or use the pytest fixtures in conftest.py.
"""
