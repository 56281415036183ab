"""Shared test fixtures: registry, engine wiring, a controllable clock, raw inputs."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from assessment_engine.engine import AssessmentEngine
from assessment_engine.models.record import AssessmentRecord
from assessment_engine.models.result import CalculationResult
from assessment_engine.protocols import build_default_registry
from assessment_engine.registry import ProtocolRegistry
from assessment_engine.tracking.store import InMemoryHistoryStore
from assessment_engine.tracking.tracker import ProgressTracker

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry() -> ProtocolRegistry:
    return build_default_registry()


@pytest.fixture
def store() -> InMemoryHistoryStore:
    return InMemoryHistoryStore()


@pytest.fixture
def tracker(store: InMemoryHistoryStore, clock: FakeClock) -> ProgressTracker:
    return ProgressTracker(store, clock=clock, backoff_s=0.0)


@pytest.fixture
def engine(registry: ProtocolRegistry, tracker: ProgressTracker) -> AssessmentEngine:
    return AssessmentEngine(registry=registry, tracker=tracker)


# ---------------------------------------------------------------------------
# Raw caller inputs
# ---------------------------------------------------------------------------


@pytest.fixture
def cooper_inputs() -> dict:
    """25-year-old man, 2400 m in 12 minutes → VO2max ≈ 42.4."""
    return {"distance": 2400, "age": 25, "gender": "male"}


@pytest.fixture
def one_rep_max_inputs() -> dict:
    """100 kg x 5 bench press → 1RM ≈ 114.3 kg."""
    return {"weight": 100, "repetitions": 5, "exercise": "bench_press"}


@pytest.fixture
def navy_male_inputs() -> dict:
    """Navy reference set: 178 cm, waist 90, neck 38 → ≈ 20.1 %."""
    return {
        "method": "navy",
        "gender": "male",
        "age": 30,
        "height": 178,
        "waist": 90,
        "neck": 38,
    }


@pytest.fixture
def navy_female_inputs() -> dict:
    """165 cm, waist 75, hip 95, neck 33 → ≈ 26.9 %."""
    return {
        "method": "navy",
        "gender": "female",
        "age": 30,
        "height": 165,
        "waist": 75,
        "neck": 33,
        "hip": 95,
    }


@pytest.fixture
def skinfold_inputs() -> dict:
    """Seven 10 mm sites, 30-year-old man → ≈ 10.2 %."""
    sites = ("chest", "abdominal", "thigh", "triceps", "subscapular", "suprailiac", "midaxillary")
    return {"method": "skinfold", "gender": "male", "age": 30, "height": 180, **{s: 10 for s in sites}}


@pytest.fixture
def make_record() -> Callable[..., AssessmentRecord]:
    """Factory for records with a given value and timestamp.

    Usage:
        rec = make_record(42.0, T0, protocol_id="cooper_test")
    """

    def factory(
        value: float,
        timestamp: datetime = T0,
        protocol_id: str = "cooper_test",
        category: str | None = "average",
    ) -> AssessmentRecord:
        return AssessmentRecord(
            protocol_id=protocol_id,
            timestamp=timestamp,
            inputs_snapshot={"distance": 2400, "age": 25, "gender": "male"},
            result=CalculationResult(
                value=value,
                unit="ml/kg/min",
                interpretation=f"VO2max {value}",
                category=category,
                recommendations=("Keep training.",),
                details={"vo2max": value},
            ),
        )

    return factory


@pytest.fixture
def t0() -> datetime:
    return T0
