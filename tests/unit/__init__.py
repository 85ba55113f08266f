"""
Unit Tests - Testing Individual Components in Isolation.

Each component is tested in isolation with mocked dependencies.
Unit tests should be fast, deterministic, and focused.

Test Files:
    - test_bundle_processor.py: Patient bundle normalization
    - test_address_resolver.py: Fetch address construction
    - test_http_fetcher.py: HTTP transport and error mapping
    - test_config_loader.py: Configuration loading/validation
"""
