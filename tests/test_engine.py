"""Tests for AssessmentEngine — orchestration, error values and progress queries."""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import pytest

from assessment_engine.engine import AssessmentEngine
from assessment_engine.exceptions import DivisionByZeroError, InvalidInputError, NotFoundError
from assessment_engine.models.enums import ProtocolCategory
from assessment_engine.tracking.store import InMemoryHistoryStore
from assessment_engine.tracking.tracker import ProgressTracker


class TestRunAssessment:
    def test_cooper_without_user(self, cooper_inputs: dict) -> None:
        outcome = AssessmentEngine().run_assessment("cooper_test", cooper_inputs)
        assert outcome.succeeded
        assert outcome.result.value == pytest.approx(42.4, abs=0.1)
        assert outcome.result.category == "poor"
        assert outcome.record is None
        assert outcome.errors == ()

    def test_records_when_user_given(
        self, engine: AssessmentEngine, store: InMemoryHistoryStore, cooper_inputs: dict
    ) -> None:
        outcome = engine.run_assessment("cooper_test", cooper_inputs, user_id="u1")
        assert outcome.record is not None
        assert outcome.record.result == outcome.result
        assert dict(outcome.record.inputs_snapshot) == {
            "distance": 2400.0,
            "age": 25,
            "gender": "male",
        }
        assert store.query("u1", "cooper_test") == [outcome.record]

    def test_unknown_protocol_raises(self, engine: AssessmentEngine) -> None:
        with pytest.raises(NotFoundError):
            engine.run_assessment("plank_hold", {})

    def test_validation_errors_are_returned(
        self, engine: AssessmentEngine, store: InMemoryHistoryStore, navy_female_inputs: dict
    ) -> None:
        raw = {k: v for k, v in navy_female_inputs.items() if k != "hip"}
        outcome = engine.run_assessment("body_fat", raw, user_id="u1")
        assert not outcome.succeeded
        assert [(e.field, e.code) for e in outcome.errors] == [("hip", "required")]
        assert outcome.calculation_error is None
        assert store.query("u1", "body_fat") == []

    def test_calculation_error_is_returned(
        self, registry, one_rep_max_inputs: dict
    ) -> None:
        calculator = MagicMock()
        calculator.calculate.side_effect = DivisionByZeroError("Brzycki denominator is zero")
        engine = AssessmentEngine(registry=registry, calculator=calculator)
        outcome = engine.run_assessment("one_rep_max", one_rep_max_inputs)
        assert outcome.result is None
        assert isinstance(outcome.calculation_error, DivisionByZeroError)

    def test_store_failure_keeps_result(self, registry, clock, cooper_inputs: dict) -> None:
        failing = MagicMock()
        failing.query.return_value = []
        failing.append.return_value = False
        tracker = ProgressTracker(failing, clock=clock, max_retries=1, backoff_s=0.0)
        engine = AssessmentEngine(registry=registry, tracker=tracker)

        outcome = engine.run_assessment("cooper_test", cooper_inputs, user_id="u1")
        assert outcome.succeeded
        assert outcome.persistence_error is not None
        assert outcome.record is not None
        assert outcome.record.result == outcome.result
        assert failing.append.call_count == 2

    def test_impossible_body_fat_is_calculation_error(
        self, engine: AssessmentEngine, store: InMemoryHistoryStore, skinfold_inputs: dict
    ) -> None:
        sites = ("chest", "abdominal", "thigh", "triceps", "subscapular", "suprailiac", "midaxillary")
        raw = {**skinfold_inputs, "age": 18, **{s: 1 for s in sites}}
        outcome = engine.run_assessment("body_fat", raw, user_id="u1")
        assert outcome.errors == ()
        assert outcome.result is None
        assert isinstance(outcome.calculation_error, InvalidInputError)
        assert store.query("u1", "body_fat") == []

    def test_user_ignored_without_tracker(self, cooper_inputs: dict) -> None:
        outcome = AssessmentEngine().run_assessment("cooper_test", cooper_inputs, user_id="u1")
        assert outcome.succeeded
        assert outcome.record is None

    def test_navy_reference_set(self, engine: AssessmentEngine, navy_male_inputs: dict) -> None:
        outcome = engine.run_assessment("body_fat", navy_male_inputs)
        assert outcome.result.value == pytest.approx(20.1, abs=0.5)


class TestProtocolCatalog:
    def test_all_protocols(self, engine: AssessmentEngine) -> None:
        ids = [s.id for s in engine.get_protocol_catalog()]
        assert ids == ["cooper_test", "one_rep_max", "body_fat"]

    def test_filter_accepts_strings(self, engine: AssessmentEngine) -> None:
        (summary,) = engine.get_protocol_catalog(category="body-composition")
        assert summary.category == ProtocolCategory.BODY_COMPOSITION

    def test_filter_by_difficulty(self, engine: AssessmentEngine) -> None:
        assert [s.id for s in engine.get_protocol_catalog(difficulty="basic")] == ["one_rep_max"]

    def test_unknown_category(self, engine: AssessmentEngine) -> None:
        with pytest.raises(ValueError):
            engine.get_protocol_catalog(category="flexibility")


class TestProgressQueries:
    def test_get_progress(self, engine: AssessmentEngine, clock, cooper_inputs: dict) -> None:
        first = engine.run_assessment("cooper_test", cooper_inputs, user_id="u1")
        clock.advance(days=2)
        second = engine.run_assessment(
            "cooper_test", {**cooper_inputs, "distance": 2600}, user_id="u1"
        )
        history = engine.get_progress("u1", "cooper_test", "week")
        assert history == [first.record, second.record]

    def test_get_progress_unknown_protocol(self, engine: AssessmentEngine) -> None:
        with pytest.raises(NotFoundError):
            engine.get_progress("u1", "plank_hold", "week")

    def test_body_fat_drop_counts_as_improvement(
        self, engine: AssessmentEngine, clock, navy_male_inputs: dict
    ) -> None:
        engine.run_assessment("body_fat", navy_male_inputs, user_id="u1")
        clock.advance(days=30)
        engine.run_assessment("body_fat", {**navy_male_inputs, "waist": 85}, user_id="u1")

        comparison = engine.compare_results("u1", "body_fat", date(2026, 3, 1), date(2026, 3, 31))
        assert comparison.delta < 0
        assert comparison.improved is True

    def test_trend_direction_follows_protocol(
        self, engine: AssessmentEngine, clock, navy_male_inputs: dict
    ) -> None:
        for waist in (95, 92, 89):
            engine.run_assessment("body_fat", {**navy_male_inputs, "waist": waist}, user_id="u1")
            clock.advance(days=7)
        trend = engine.get_trend("u1", "body_fat", "month")
        assert trend.count == 3
        assert trend.slope_per_week < 0
        assert trend.improving is True

    def test_queries_need_tracker(self) -> None:
        with pytest.raises(RuntimeError, match="ProgressTracker"):
            AssessmentEngine().get_progress("u1", "cooper_test", "week")
