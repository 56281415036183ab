"""History value objects: assessment records and the queries built on them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping

from assessment_engine.models.result import CalculationResult


@dataclass(frozen=True)
class AssessmentRecord:
    """One persisted assessment. Never mutated; a newer record supersedes it."""

    protocol_id: str
    timestamp: datetime  # tz-aware UTC
    inputs_snapshot: Mapping[str, Any]
    result: CalculationResult

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "inputs_snapshot", MappingProxyType(dict(self.inputs_snapshot))
        )

    @property
    def value(self) -> float:
        return self.result.value


@dataclass(frozen=True)
class ProgressComparison:
    """Nearest records at-or-before two instants and their signed difference."""

    delta: float  # record2.value - record1.value
    record1: AssessmentRecord
    record2: AssessmentRecord
    improved: bool | None = None  # None when delta is zero


@dataclass(frozen=True)
class TrendSummary:
    """Aggregate view over a window of records (earliest first)."""

    count: int
    first_value: float | None = None
    latest_value: float | None = None
    change: float | None = None
    best_value: float | None = None
    slope_per_week: float | None = None
    smoothed_latest: float | None = None
    improving: bool | None = None
    records: tuple[AssessmentRecord, ...] = field(default_factory=tuple)
