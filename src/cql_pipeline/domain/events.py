"""
Pipeline Events.

A run reports its progress as a sequence of these events. The sequence
always ends with exactly one terminal event (StageFailed,
EvaluationCompleted or EvaluationFailed) unless the run is cancelled.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from cql_pipeline.domain.entities import ArtifactSlot
from cql_pipeline.domain.errors import EvaluationError, PipelineError
from cql_pipeline.domain.result import EvaluationResult


class StagePhase(str, Enum):
    """Where within a slot's stage a failure happened."""

    FETCH = "fetch"
    PROCESSING = "processing"


@dataclass(frozen=True)
class StageCompleted:
    """An artifact was fetched and stored."""

    slot: ArtifactSlot

    @property
    def is_terminal(self) -> bool:
        return False


@dataclass(frozen=True)
class StageFailed:
    """A stage failed; the run stops here."""

    slot: ArtifactSlot
    error: PipelineError
    phase: StagePhase = StagePhase.FETCH

    @property
    def is_terminal(self) -> bool:
        return True


@dataclass(frozen=True)
class EvaluationCompleted:
    """The evaluator produced a result."""

    result: EvaluationResult

    @property
    def is_terminal(self) -> bool:
        return True


@dataclass(frozen=True)
class EvaluationFailed:
    """The evaluator rejected its inputs or failed."""

    error: EvaluationError

    @property
    def is_terminal(self) -> bool:
        return True


PipelineEvent = Union[StageCompleted, StageFailed, EvaluationCompleted, EvaluationFailed]
