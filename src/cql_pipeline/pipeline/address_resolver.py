"""
Address Resolution - Build Fetch Addresses from Endpoint Configuration.

Addresses are plain concatenations of the base URL and a slot's path. The
patient bundle address is additionally parameterized on the patient id and
ends with the "all data for this subject" suffix.

Resolution is a pure function: unset values raise ConfigurationError
naming the missing field instead of producing a broken address.
"""

from __future__ import annotations

from typing import Dict, Optional

from cql_pipeline.config.models import EndpointConfig
from cql_pipeline.domain.entities import ArtifactSlot
from cql_pipeline.domain.errors import ConfigurationError

SLOT_PATH_FIELDS: Dict[ArtifactSlot, str] = {
    ArtifactSlot.LIBRARY: "library_path",
    ArtifactSlot.HELPER: "helper_library_path",
    ArtifactSlot.VALUE_SET: "value_set_path",
    ArtifactSlot.PATIENT_BUNDLE: "patient_path",
}


def _require(endpoints: EndpointConfig, field: str) -> str:
    value: Optional[str] = getattr(endpoints, field)
    if value is None or not value.strip():
        raise ConfigurationError(
            f"endpoints.{field} is not configured", field=f"endpoints.{field}"
        )
    return value


def resolve_address(
    endpoints: EndpointConfig,
    slot: ArtifactSlot,
    patient_id: Optional[str] = None,
) -> str:
    """
    Resolve the fetch address for one artifact slot.

    Args:
        endpoints: Base URL and per-artifact paths
        slot: Artifact to resolve
        patient_id: Required for the patient bundle slot

    Returns:
        Fully resolved address

    Raises:
        ConfigurationError: If the base URL, the slot's path or the
            patient id is unset
    """
    base_url = _require(endpoints, "base_url")
    path = _require(endpoints, SLOT_PATH_FIELDS[slot])

    if slot is not ArtifactSlot.PATIENT_BUNDLE:
        return base_url + path

    if not patient_id:
        raise ConfigurationError(
            "patient id is required to resolve the patient bundle address",
            field="patient_id",
        )
    return base_url + path + patient_id + endpoints.everything_suffix


class AddressResolver:
    """Binds resolve_address to one endpoint configuration."""

    def __init__(self, endpoints: EndpointConfig) -> None:
        self.endpoints = endpoints

    def resolve(self, slot: ArtifactSlot, patient_id: Optional[str] = None) -> str:
        return resolve_address(self.endpoints, slot, patient_id)
