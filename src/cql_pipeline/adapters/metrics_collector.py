"""
In-Memory Metrics Collector.

Keeps every recorded sample in memory and summarizes per metric name.
Samples carry tags so per-stage figures can be pulled back out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class MetricSample:
    """One recorded value."""

    name: str
    kind: str
    value: float
    tags: Dict[str, str] = field(default_factory=dict)
    recorded_at: datetime = field(default_factory=datetime.now)


class InMemoryMetricsCollector:
    """Thread-safe in-memory metrics store."""

    def __init__(self) -> None:
        self._samples: List[MetricSample] = []
        self._lock = Lock()

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._append(MetricSample(name, "timing", float(duration_seconds), dict(tags or {})))

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._append(MetricSample(name, "count", float(value), dict(tags or {})))

    def samples(
        self, name: str, tags: Optional[Dict[str, str]] = None
    ) -> List[MetricSample]:
        """Samples of a metric whose tags include all of ``tags``."""
        wanted = (tags or {}).items()
        with self._lock:
            return [
                s for s in self._samples
                if s.name == name and all(s.tags.get(k) == v for k, v in wanted)
            ]

    def total(self, name: str, tags: Optional[Dict[str, str]] = None) -> float:
        return sum(s.value for s in self.samples(name, tags))

    def get_metrics(self) -> Dict[str, Any]:
        """Summary per metric name: count, total, min, max, last."""
        with self._lock:
            grouped: Dict[str, List[float]] = {}
            for sample in self._samples:
                grouped.setdefault(sample.name, []).append(sample.value)

        return {
            name: {
                "count": len(values),
                "total": sum(values),
                "min": min(values),
                "max": max(values),
                "last": values[-1],
            }
            for name, values in grouped.items()
        }

    def clear(self) -> None:
        with self._lock:
            self._samples.clear()

    def _append(self, sample: MetricSample) -> None:
        with self._lock:
            self._samples.append(sample)
