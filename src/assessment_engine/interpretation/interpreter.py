"""ResultInterpreter — attaches category, summary and recommendations."""

from __future__ import annotations

from typing import Callable

from assessment_engine.interpretation.norms import DEFAULT_NORMS, ReferenceNorms
from assessment_engine.interpretation.recommendations import (
    body_fat_recommendations,
    cardio_recommendations,
    strength_recommendations,
)
from assessment_engine.models.enums import (
    DEURENBERG_SEE_PCT,
    BodyFatMethod,
    Exercise,
    Gender,
    ProtocolFamily,
)
from assessment_engine.models.inputs import (
    BodyFatInput,
    CooperInput,
    OneRepMaxInput,
    ValidatedInput,
)
from assessment_engine.models.protocol import ProtocolDefinition
from assessment_engine.models.result import CalculationResult, Measurement

# Above this many reps the 1RM equations diverge noticeably (LeSuer et al. 1997)
_RELIABLE_REPS_LIMIT = 10

_METHOD_LABELS = {
    BodyFatMethod.NAVY: "navy circumference method",
    BodyFatMethod.BMI: "BMI method",
    BodyFatMethod.SKINFOLD: "7-site skinfold method",
}


class ResultInterpreter:
    """Classifies a measurement against reference norms and recommends next steps.

    Deterministic: the same measurement and inputs always produce an equal
    CalculationResult.
    """

    def __init__(self, norms: ReferenceNorms | None = None) -> None:
        self.norms = norms or DEFAULT_NORMS
        self._dispatch: dict[
            ProtocolFamily, Callable[[Measurement, ValidatedInput], CalculationResult]
        ] = {
            ProtocolFamily.COOPER: self._interpret_cooper,
            ProtocolFamily.ONE_REP_MAX: self._interpret_one_rep_max,
            ProtocolFamily.BODY_FAT: self._interpret_body_fat,
        }

    def interpret(
        self,
        definition: ProtocolDefinition,
        measurement: Measurement,
        inputs: ValidatedInput,
    ) -> CalculationResult:
        return self._dispatch[definition.family](measurement, inputs)

    # ------------------------------------------------------------------
    # Category lookups
    # ------------------------------------------------------------------

    def classify_cooper(self, vo2max: float, age: int, gender: Gender | str) -> str:
        return self.norms.cooper[Gender(gender)].classify(vo2max, age)

    def classify_body_fat(self, body_fat: float, age: int, gender: Gender | str) -> str:
        return self.norms.body_fat[Gender(gender)].classify(body_fat, age)

    def classify_strength(
        self, ratio: float, exercise: Exercise | str, gender: Gender | str
    ) -> str | None:
        table = self.norms.strength.get((Exercise(exercise), Gender(gender)))
        return table.classify(ratio) if table is not None else None

    # ------------------------------------------------------------------
    # Per-family interpretation
    # ------------------------------------------------------------------

    def _interpret_cooper(
        self, measurement: Measurement, inputs: CooperInput
    ) -> CalculationResult:
        category = self.classify_cooper(measurement.exact_value, inputs.age, inputs.gender)
        summary = (
            f"Estimated VO2max of {measurement.value:.1f} {measurement.unit} from "
            f"{inputs.distance:.0f} m in 12 minutes: {category} for a "
            f"{inputs.age}-year-old {inputs.gender.value}."
        )
        return CalculationResult(
            value=measurement.value,
            unit=measurement.unit,
            interpretation=summary,
            category=category,
            recommendations=cardio_recommendations(category),
            details=measurement.details,
        )

    def _interpret_one_rep_max(
        self, measurement: Measurement, inputs: OneRepMaxInput
    ) -> CalculationResult:
        exercise = inputs.exercise.value.replace("_", " ")
        summary = (
            f"Estimated {exercise} 1RM of {measurement.value:.1f} {measurement.unit} "
            f"(mean of Epley, Brzycki and Lander) from {inputs.weight:g} kg x "
            f"{inputs.repetitions}."
        )

        category = None
        ratio = measurement.details.get("relative_strength")
        if ratio is not None and inputs.gender is not None:
            category = self.classify_strength(ratio, inputs.exercise, inputs.gender)
            if category is not None:
                summary += f" {ratio:.2f} x bodyweight: {category}."

        if inputs.repetitions > _RELIABLE_REPS_LIMIT:
            summary += (
                f" Estimates from more than {_RELIABLE_REPS_LIMIT} repetitions "
                "are less reliable."
            )

        return CalculationResult(
            value=measurement.value,
            unit=measurement.unit,
            interpretation=summary,
            category=category,
            recommendations=strength_recommendations(category, inputs.experience),
            details=measurement.details,
        )

    def _interpret_body_fat(
        self, measurement: Measurement, inputs: BodyFatInput
    ) -> CalculationResult:
        category = self.classify_body_fat(measurement.exact_value, inputs.age, inputs.gender)
        summary = (
            f"Estimated body fat of {measurement.value:.1f}% "
            f"({_METHOD_LABELS[inputs.method]}): {category} for a "
            f"{inputs.age}-year-old {inputs.gender.value}."
        )
        if inputs.method == BodyFatMethod.BMI:
            summary += (
                " BMI-based estimates are less accurate "
                f"(about ±{DEURENBERG_SEE_PCT:g} percentage points) than skinfold "
                "or circumference methods."
            )
        return CalculationResult(
            value=measurement.value,
            unit=measurement.unit,
            interpretation=summary,
            category=category,
            recommendations=body_fat_recommendations(category),
            details=measurement.details,
        )
