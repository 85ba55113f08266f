"""
Processing Package - Payload Normalization.

Components:
    - PatientBundleProcessor: Raw patient bundle -> NormalizedPatientContext
"""

from cql_pipeline.processing.bundle_processor import PatientBundleProcessor

__all__ = ["PatientBundleProcessor"]
