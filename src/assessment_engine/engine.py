"""AssessmentEngine — the caller-facing orchestrator.

Resolves a protocol, validates raw inputs, calculates, interprets and
(optionally) records the result. Validation and calculation problems come
back as values on the outcome; registry errors are raised.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Mapping

from assessment_engine.calculation import CalculationEngine
from assessment_engine.exceptions import CalculationError, StoreUnavailableError
from assessment_engine.interpretation.interpreter import ResultInterpreter
from assessment_engine.models.enums import Difficulty, ProtocolCategory, Timeframe
from assessment_engine.models.protocol import ProtocolSummary
from assessment_engine.models.record import AssessmentRecord, ProgressComparison, TrendSummary
from assessment_engine.models.result import AssessmentOutcome
from assessment_engine.protocols.catalog import build_default_registry
from assessment_engine.registry import ProtocolRegistry
from assessment_engine.tracking.tracker import ProgressTracker
from assessment_engine.validation.validator import InputValidator

logger = logging.getLogger(__name__)


class AssessmentEngine:
    """Composition root for assessments and progress queries.

    Usage:
        engine = AssessmentEngine(tracker=ProgressTracker(InMemoryHistoryStore()))
        outcome = engine.run_assessment("cooper_test", {"distance": 2400, "age": 25,
                                                        "gender": "male"}, user_id="u1")
        history = engine.get_progress("u1", "cooper_test", "month")
    """

    def __init__(
        self,
        registry: ProtocolRegistry | None = None,
        validator: InputValidator | None = None,
        calculator: CalculationEngine | None = None,
        interpreter: ResultInterpreter | None = None,
        tracker: ProgressTracker | None = None,
    ) -> None:
        self.registry = registry if registry is not None else build_default_registry()
        self.validator = validator or InputValidator()
        self.calculator = calculator or CalculationEngine()
        self.interpreter = interpreter or ResultInterpreter()
        self.tracker = tracker

    def run_assessment(
        self,
        protocol_id: str,
        raw_inputs: Mapping[str, Any],
        user_id: str | None = None,
    ) -> AssessmentOutcome:
        """Validate, calculate and interpret one assessment.

        Args:
            protocol_id: Registered protocol id.
            raw_inputs: Field name → raw value.
            user_id: When given and a tracker is configured, the result is
                recorded. A failed write is reported on the outcome; the
                result is still returned.

        Returns:
            AssessmentOutcome with a result, validation errors, or a
            calculation error.

        Raises:
            NotFoundError: If the protocol id is unknown.
        """
        definition = self.registry.get(protocol_id)

        validation = self.validator.validate(definition, raw_inputs)
        if not validation.is_valid:
            return AssessmentOutcome(protocol_id=protocol_id, errors=validation.errors)

        inputs = validation.inputs
        try:
            measurement = self.calculator.calculate(definition, inputs)
        except CalculationError as exc:
            logger.warning("Calculation for %s failed: %s", protocol_id, exc)
            return AssessmentOutcome(protocol_id=protocol_id, calculation_error=exc)

        result = self.interpreter.interpret(definition, measurement, inputs)

        if user_id is None or self.tracker is None:
            return AssessmentOutcome(protocol_id=protocol_id, result=result)

        try:
            record = self.tracker.record(user_id, protocol_id, result, inputs.as_snapshot())
        except StoreUnavailableError as exc:
            logger.error("Could not record %s for user %s: %s", protocol_id, user_id, exc)
            return AssessmentOutcome(
                protocol_id=protocol_id,
                result=result,
                record=exc.record,
                persistence_error=exc,
            )
        return AssessmentOutcome(protocol_id=protocol_id, result=result, record=record)

    def get_protocol_catalog(
        self,
        category: ProtocolCategory | str | None = None,
        difficulty: Difficulty | str | None = None,
    ) -> list[ProtocolSummary]:
        return self.registry.summaries(
            category=ProtocolCategory(category) if category is not None else None,
            difficulty=Difficulty(difficulty) if difficulty is not None else None,
        )

    # ------------------------------------------------------------------
    # Progress queries
    # ------------------------------------------------------------------

    def get_progress(
        self, user_id: str, protocol_id: str, timeframe: Timeframe | str
    ) -> list[AssessmentRecord]:
        self.registry.get(protocol_id)
        return self._require_tracker().get_progress(user_id, protocol_id, timeframe)

    def compare_results(
        self,
        user_id: str,
        protocol_id: str,
        date1: date | datetime,
        date2: date | datetime,
    ) -> ProgressComparison:
        """Signed change between the records nearest to two dates.

        Raises:
            NoDataError: If either date has no record at or before it.
        """
        definition = self.registry.get(protocol_id)
        return self._require_tracker().compare_results(
            user_id,
            protocol_id,
            date1,
            date2,
            higher_is_better=definition.higher_is_better,
        )

    def get_trend(
        self, user_id: str, protocol_id: str, timeframe: Timeframe | str
    ) -> TrendSummary:
        definition = self.registry.get(protocol_id)
        return self._require_tracker().get_trend(
            user_id,
            protocol_id,
            timeframe,
            higher_is_better=definition.higher_is_better,
        )

    def _require_tracker(self) -> ProgressTracker:
        if self.tracker is None:
            raise RuntimeError("AssessmentEngine was built without a ProgressTracker")
        return self.tracker
