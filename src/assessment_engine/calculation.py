"""CalculationEngine — closed dispatch from protocol family to pure formula."""

from __future__ import annotations

from typing import Callable

from assessment_engine.exceptions import InvalidInputError
from assessment_engine.math.body_composition import (
    body_mass_index,
    bmi_body_fat,
    jackson_pollock_7_density,
    navy_density,
    siri_body_fat,
)
from assessment_engine.math.cooper import vo2max_from_cooper
from assessment_engine.math.strength import estimate_one_rep_max, relative_strength
from assessment_engine.models.enums import BodyFatMethod, ProtocolFamily
from assessment_engine.models.inputs import (
    BodyFatInput,
    CooperInput,
    OneRepMaxInput,
    ValidatedInput,
)
from assessment_engine.models.protocol import ProtocolDefinition
from assessment_engine.models.result import Measurement

# Decimal places reported on the headline value
_VALUE_PRECISION = 1


def calculate_cooper(inputs: CooperInput) -> Measurement:
    vo2max = vo2max_from_cooper(inputs.distance)
    return Measurement(
        value=round(vo2max, _VALUE_PRECISION),
        raw_value=vo2max,
        unit="ml/kg/min",
        details={"vo2max": vo2max},
    )


def calculate_one_rep_max(inputs: OneRepMaxInput) -> Measurement:
    estimate = estimate_one_rep_max(inputs.weight, inputs.repetitions)
    details = {
        "epley": estimate.epley,
        "brzycki": estimate.brzycki,
        "lander": estimate.lander,
    }
    if inputs.bodyweight is not None:
        details["relative_strength"] = relative_strength(estimate.mean, inputs.bodyweight)
    return Measurement(
        value=round(estimate.mean, _VALUE_PRECISION),
        raw_value=estimate.mean,
        unit="kg",
        details=details,
    )


def calculate_body_fat(inputs: BodyFatInput) -> Measurement:
    details: dict[str, float] = {}
    if inputs.method == BodyFatMethod.NAVY:
        if inputs.waist is None or inputs.neck is None:
            raise InvalidInputError("Navy method needs waist and neck circumferences")
        density = navy_density(
            inputs.gender, inputs.height, inputs.waist, inputs.neck, inputs.hip
        )
        details["body_density"] = density
        body_fat = siri_body_fat(density)
    elif inputs.method == BodyFatMethod.BMI:
        if inputs.weight is None:
            raise InvalidInputError("BMI method needs body weight")
        details["bmi"] = body_mass_index(inputs.weight, inputs.height)
        body_fat = bmi_body_fat(inputs.weight, inputs.height, inputs.age, inputs.gender)
    elif inputs.method == BodyFatMethod.SKINFOLD:
        if inputs.skinfolds is None:
            raise InvalidInputError("Skinfold method needs all seven sites")
        density = jackson_pollock_7_density(inputs.skinfolds, inputs.age, inputs.gender)
        details["body_density"] = density
        details["skinfold_sum"] = float(sum(inputs.skinfolds))
        body_fat = siri_body_fat(density)
    else:
        raise InvalidInputError(f"Unsupported body-fat method: {inputs.method!r}")

    if body_fat < 0:
        raise InvalidInputError(
            f"{inputs.method.value} estimate of {body_fat:.1f}% body fat is below zero"
        )

    details["body_fat"] = body_fat
    return Measurement(
        value=round(body_fat, _VALUE_PRECISION),
        raw_value=body_fat,
        unit="%",
        details=details,
    )


_CALCULATORS: dict[ProtocolFamily, Callable[..., Measurement]] = {
    ProtocolFamily.COOPER: calculate_cooper,
    ProtocolFamily.ONE_REP_MAX: calculate_one_rep_max,
    ProtocolFamily.BODY_FAT: calculate_body_fat,
}

_INPUT_TYPES: dict[ProtocolFamily, type] = {
    ProtocolFamily.COOPER: CooperInput,
    ProtocolFamily.ONE_REP_MAX: OneRepMaxInput,
    ProtocolFamily.BODY_FAT: BodyFatInput,
}

_uncovered = set(ProtocolFamily) - set(_CALCULATORS)
if _uncovered:
    raise RuntimeError(f"No calculator for families: {sorted(f.name for f in _uncovered)}")


class CalculationEngine:
    """Computes the raw measurement for a validated input.

    Pure: no I/O, no state. Degenerate inputs raise a CalculationError
    subclass instead of returning NaN or infinity.
    """

    def calculate(
        self, definition: ProtocolDefinition, inputs: ValidatedInput
    ) -> Measurement:
        """Run the formula for *definition*'s family.

        Raises:
            TypeError: If *inputs* was built for a different family.
            DivisionByZeroError / InvalidInputError: For degenerate inputs.
        """
        expected = _INPUT_TYPES[definition.family]
        if not isinstance(inputs, expected):
            raise TypeError(
                f"{definition.id} expects {expected.__name__}, "
                f"got {type(inputs).__name__}"
            )
        return _CALCULATORS[definition.family](inputs)
