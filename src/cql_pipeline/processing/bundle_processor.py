"""
Patient Bundle Processor - Normalize Raw Patient Bundles.

A patient bundle as returned by a server's "everything" operation carries
search and paging metadata around its resources. The evaluator only needs
the resources, so the processor rewraps them into a minimal collection
bundle.

Rules:
    - A blank payload or a bundle without entries is an empty context
    - Anything that is not a JSON Bundle object is malformed
    - Every entry must carry a ``resource`` object with a ``resourceType``
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from cql_pipeline.domain.entities import NormalizedPatientContext
from cql_pipeline.domain.errors import MalformedPayloadError

logger = logging.getLogger(__name__)


class PatientBundleProcessor:
    """Transforms a raw patient bundle into a NormalizedPatientContext."""

    def process(self, raw_payload: str) -> NormalizedPatientContext:
        """
        Normalize a raw patient bundle.

        Args:
            raw_payload: Bundle text exactly as fetched

        Returns:
            NormalizedPatientContext (possibly empty)

        Raises:
            MalformedPayloadError: If the payload is not a parseable bundle
        """
        if not raw_payload.strip():
            logger.debug("Blank patient bundle, using empty context")
            return NormalizedPatientContext.empty()

        document = self._parse(raw_payload)
        resources = self._extract_resources(document)

        try:
            context = NormalizedPatientContext.from_resources(
                resources, bundle_id=document.get("id")
            )
        except (ValueError, RecursionError) as e:
            raise MalformedPayloadError(
                f"patient bundle cannot be rewrapped ({type(e).__name__})"
            ) from e
        logger.debug(
            f"Normalized patient bundle: {context.resource_count} resources "
            f"{context.resource_types()}"
        )
        return context

    def _parse(self, raw_payload: str) -> Dict[str, Any]:
        try:
            document = json.loads(raw_payload)
        except (ValueError, RecursionError) as e:
            raise MalformedPayloadError(
                f"patient bundle is not valid JSON ({e})"
            ) from e

        if not isinstance(document, dict):
            raise MalformedPayloadError(
                "patient bundle must be a JSON object",
                details={"found": type(document).__name__},
            )
        resource_type = document.get("resourceType")
        if resource_type != "Bundle":
            raise MalformedPayloadError(
                f"expected resourceType Bundle, found {resource_type!r}"
            )
        bundle_id = document.get("id")
        if bundle_id is not None and not isinstance(bundle_id, str):
            raise MalformedPayloadError(
                "bundle id must be a string",
                details={"found": type(bundle_id).__name__},
            )
        return document

    def _extract_resources(self, document: Dict[str, Any]) -> List[Dict[str, Any]]:
        entries = document.get("entry")
        if entries is None:
            return []
        if not isinstance(entries, list):
            raise MalformedPayloadError("bundle entry must be a list")

        resources: List[Dict[str, Any]] = []
        for index, entry in enumerate(entries):
            resource = entry.get("resource") if isinstance(entry, dict) else None
            if not isinstance(resource, dict):
                raise MalformedPayloadError(
                    f"entry {index} has no resource object", details={"entry": index}
                )
            if not isinstance(resource.get("resourceType"), str) or not resource["resourceType"]:
                raise MalformedPayloadError(
                    f"entry {index} resource has no resourceType",
                    details={"entry": index},
                )
            resources.append(resource)
        return resources
