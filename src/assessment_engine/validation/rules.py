"""Protocol-specific cross-field rules and typed-input builders.

Rules only see fields that already passed the structural checks, so a
field rejected earlier is never reported twice. ``provided`` holds every
field the caller supplied, valid or not.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from assessment_engine.models.enums import (
    BRZYCKI_REPS_CEILING,
    SKINFOLD_SITES,
    BodyFatMethod,
    Exercise,
    Experience,
    Gender,
    ProtocolFamily,
)
from assessment_engine.models.inputs import (
    BodyFatInput,
    CooperInput,
    OneRepMaxInput,
    ValidatedInput,
)
from assessment_engine.models.result import ValidationError

Values = Mapping[str, Any]
CrossFieldRule = Callable[[Values, frozenset], list[ValidationError]]
InputBuilder = Callable[[Values], ValidatedInput]


def _require(
    name: str, values: Values, provided: frozenset, reason: str
) -> list[ValidationError]:
    """Demand *name* for *reason* unless it was supplied (valid or already flagged)."""
    if name in provided:
        return []
    return [ValidationError(field=name, code="required", message=f"{name} is required {reason}")]


# ---------------------------------------------------------------------------
# Cooper test
# ---------------------------------------------------------------------------


def cooper_rules(values: Values, provided: frozenset) -> list[ValidationError]:
    return []


def build_cooper(values: Values) -> CooperInput:
    return CooperInput(
        distance=values["distance"],
        age=values["age"],
        gender=Gender(values["gender"]),
    )


# ---------------------------------------------------------------------------
# One-repetition maximum
# ---------------------------------------------------------------------------


def one_rep_max_rules(values: Values, provided: frozenset) -> list[ValidationError]:
    errors: list[ValidationError] = []

    reps = values.get("repetitions")
    if reps is not None:
        if reps < 1:
            errors.append(
                ValidationError(
                    field="repetitions",
                    code="min",
                    message="repetitions must be at least 1",
                )
            )
        elif reps >= BRZYCKI_REPS_CEILING:
            errors.append(
                ValidationError(
                    field="repetitions",
                    code="max",
                    message=(
                        f"repetitions must be below {BRZYCKI_REPS_CEILING:g} "
                        "for the Brzycki equation"
                    ),
                )
            )

    if "bodyweight" in provided:
        errors.extend(_require("gender", values, provided, "when bodyweight is given"))

    return errors


def build_one_rep_max(values: Values) -> OneRepMaxInput:
    gender = values.get("gender")
    return OneRepMaxInput(
        weight=values["weight"],
        repetitions=values["repetitions"],
        exercise=Exercise(values["exercise"]),
        experience=Experience(values.get("experience", Experience.INTERMEDIATE.value)),
        bodyweight=values.get("bodyweight"),
        gender=Gender(gender) if gender is not None else None,
    )


# ---------------------------------------------------------------------------
# Body fat
# ---------------------------------------------------------------------------


def body_fat_rules(values: Values, provided: frozenset) -> list[ValidationError]:
    method = values.get("method")
    if method is None:
        return []

    errors: list[ValidationError] = []
    if method == BodyFatMethod.NAVY:
        reason = "for the navy method"
        errors.extend(_require("waist", values, provided, reason))
        errors.extend(_require("neck", values, provided, reason))
        if values.get("gender") == Gender.FEMALE:
            errors.extend(_require("hip", values, provided, "for the navy method (female)"))
        elif (
            values.get("gender") == Gender.MALE
            and "waist" in values
            and "neck" in values
            and values["waist"] <= values["neck"]
        ):
            errors.append(
                ValidationError(
                    field="waist",
                    code="cross_field",
                    message="waist must be larger than neck for the navy method",
                )
            )
    elif method == BodyFatMethod.BMI:
        errors.extend(_require("weight", values, provided, "for the bmi method"))
    elif method == BodyFatMethod.SKINFOLD:
        for site in SKINFOLD_SITES:
            errors.extend(_require(site, values, provided, "for the skinfold method"))
    return errors


def build_body_fat(values: Values) -> BodyFatInput:
    method = BodyFatMethod(values["method"])
    skinfolds = None
    if method == BodyFatMethod.SKINFOLD:
        skinfolds = tuple(float(values[site]) for site in SKINFOLD_SITES)
    return BodyFatInput(
        method=method,
        gender=Gender(values["gender"]),
        age=values["age"],
        height=values["height"],
        weight=values.get("weight"),
        waist=values.get("waist"),
        neck=values.get("neck"),
        hip=values.get("hip"),
        skinfolds=skinfolds,
    )


CROSS_FIELD_RULES: dict[ProtocolFamily, CrossFieldRule] = {
    ProtocolFamily.COOPER: cooper_rules,
    ProtocolFamily.ONE_REP_MAX: one_rep_max_rules,
    ProtocolFamily.BODY_FAT: body_fat_rules,
}

INPUT_BUILDERS: dict[ProtocolFamily, InputBuilder] = {
    ProtocolFamily.COOPER: build_cooper,
    ProtocolFamily.ONE_REP_MAX: build_one_rep_max,
    ProtocolFamily.BODY_FAT: build_body_fat,
}

_uncovered = (set(ProtocolFamily) - set(CROSS_FIELD_RULES)) | (
    set(ProtocolFamily) - set(INPUT_BUILDERS)
)
if _uncovered:
    raise RuntimeError(f"Validation missing for families: {sorted(f.name for f in _uncovered)}")
