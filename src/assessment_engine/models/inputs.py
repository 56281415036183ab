"""Validated, protocol-specific inputs.

Instances are produced by :class:`assessment_engine.validation.InputValidator`
only. Calculators rely on every field already satisfying its protocol's
field specs and cross-field rules.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Union

from assessment_engine.models.enums import (
    BodyFatMethod,
    Exercise,
    Experience,
    Gender,
    SKINFOLD_SITES,
)


@dataclass(frozen=True)
class CooperInput:
    """12-minute run distance plus the demographics used for norms."""

    distance: float  # metres covered in 12 minutes
    age: int
    gender: Gender

    def as_snapshot(self) -> dict[str, Any]:
        return _snapshot(self)


@dataclass(frozen=True)
class OneRepMaxInput:
    """A sub-maximal set used to estimate a one-repetition maximum."""

    weight: float  # kg lifted
    repetitions: int
    exercise: Exercise
    experience: Experience = Experience.INTERMEDIATE
    bodyweight: float | None = None  # kg, enables relative-strength category
    gender: Gender | None = None

    def as_snapshot(self) -> dict[str, Any]:
        return _snapshot(self)


@dataclass(frozen=True)
class BodyFatInput:
    """Anthropometrics for any of the body-fat methods.

    Which optional fields are populated depends on ``method``: navy uses
    the circumferences, bmi uses weight, skinfold uses the seven sites.
    """

    method: BodyFatMethod
    gender: Gender
    age: int
    height: float  # cm
    weight: float | None = None  # kg
    waist: float | None = None  # cm
    neck: float | None = None  # cm
    hip: float | None = None  # cm
    skinfolds: tuple[float, ...] | None = None  # mm, in SKINFOLD_SITES order

    def as_snapshot(self) -> dict[str, Any]:
        snapshot = _snapshot(self)
        sites = snapshot.pop("skinfolds", None)
        if sites is not None:
            snapshot.update(zip(SKINFOLD_SITES, sites))
        return snapshot


ValidatedInput = Union[CooperInput, OneRepMaxInput, BodyFatInput]


def _snapshot(inputs: ValidatedInput) -> dict[str, Any]:
    """Flatten a validated input into JSON-friendly primitives, dropping unset fields."""
    snapshot: dict[str, Any] = {}
    for key, value in asdict(inputs).items():
        if value is None:
            continue
        if hasattr(value, "value"):
            value = value.value
        elif isinstance(value, tuple):
            value = list(value)
        snapshot[key] = value
    return snapshot
