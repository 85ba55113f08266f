"""
Artifact Store - Per-Run Container for Fetched Artifacts.

The ArtifactStore holds the four raw payloads of a single evaluation run.

Design Notes:
    - One store per run, never shared between runs
    - Each slot is written at most once
    - Discarded when the run completes, fails or is cancelled
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from cql_pipeline.domain.entities import FETCH_ORDER, ArtifactSlot

logger = logging.getLogger(__name__)


class SlotAlreadyFilledError(RuntimeError):
    """Raised when a slot is written twice within one run."""


class ArtifactMissingError(LookupError):
    """Raised when a required slot is absent."""


class ArtifactStore:
    """
    In-memory container for one run's artifacts.

    Slots are absent until stored. A store is evaluation-ready only when all
    four slots hold a payload.
    """

    def __init__(self) -> None:
        self._payloads: Dict[ArtifactSlot, str] = {}
        self._discarded = False

    def put(self, slot: ArtifactSlot, payload: str) -> None:
        """
        Store a slot's payload.

        Raises:
            SlotAlreadyFilledError: If the slot already holds a payload
            RuntimeError: If the store was discarded
        """
        if self._discarded:
            raise RuntimeError("ArtifactStore has been discarded")
        if slot in self._payloads:
            raise SlotAlreadyFilledError(f"Slot {slot.value} already populated")
        self._payloads[slot] = payload

    def get(self, slot: ArtifactSlot) -> Optional[str]:
        """Return the payload, or None when the slot is absent."""
        return self._payloads.get(slot)

    def require(self, slot: ArtifactSlot) -> str:
        """
        Return the payload of a populated slot.

        Raises:
            ArtifactMissingError: If the slot is absent
        """
        try:
            return self._payloads[slot]
        except KeyError:
            raise ArtifactMissingError(f"Slot {slot.value} is absent") from None

    def is_populated(self, slot: ArtifactSlot) -> bool:
        return slot in self._payloads

    @property
    def is_ready(self) -> bool:
        """True once all four slots are populated."""
        return all(slot in self._payloads for slot in FETCH_ORDER)

    @property
    def is_discarded(self) -> bool:
        return self._discarded

    def populated_slots(self) -> list:
        """Populated slots in fetch order."""
        return [slot for slot in FETCH_ORDER if slot in self._payloads]

    def discard(self) -> None:
        """Drop all payloads; the store cannot be written afterwards."""
        if self._payloads:
            logger.debug(f"Discarding {len(self._payloads)} artifacts")
        self._payloads.clear()
        self._discarded = True

    def __len__(self) -> int:
        return len(self._payloads)

    def __contains__(self, slot: object) -> bool:
        return slot in self._payloads
