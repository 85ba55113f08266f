"""
Evaluation Result - Immutable Output of a Successful Run.

An EvaluationResult is an ordered mapping of output names to values.
Values are numbers, strings, booleans, None, tuples of values, or nested
EvaluationResult instances for structured sub-results.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional


def _freeze(value: Any) -> Any:
    """Recursively convert containers into immutable equivalents."""
    if isinstance(value, EvaluationResult):
        return value
    if isinstance(value, Mapping):
        return EvaluationResult(value)
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    """Inverse of _freeze, producing plain JSON-compatible containers."""
    if isinstance(value, EvaluationResult):
        return value.to_dict()
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


class EvaluationResult(Mapping):
    """Immutable, structurally comparable set of named evaluation outputs."""

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping] = None) -> None:
        frozen = {str(name): _freeze(value) for name, value in (values or {}).items()}
        object.__setattr__(self, "_values", frozen)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("EvaluationResult is immutable")

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __hash__(self) -> int:
        return hash(frozenset(self._values.items()))

    def __repr__(self) -> str:
        return f"EvaluationResult({self.to_dict()!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Return a mutable deep copy as plain dicts and lists."""
        return {name: _thaw(value) for name, value in self._values.items()}

    def to_json(self, indent: Optional[int] = 4) -> str:
        """Render for display."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
